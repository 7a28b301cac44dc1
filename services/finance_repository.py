import datetime
import logging
from decimal import Decimal
from typing import List

from google.cloud.firestore_v1.base_query import FieldFilter

from core.errors import NotFoundError
from core.templates import to_money
from models.bill import BillCreate, BillInDB
from models.balance import AccountBalanceResponse
from models.income import IncomeCreate, IncomeInDB

logger = logging.getLogger(__name__)

INCOMES = "incomes"
BILLS = "bills"
USERS = "users"


def _money_str(value) -> str:
    return str(to_money(value))


class FinanceRepository:
    """
    Доступ до Firestore для доходів, рахунків та балансу користувача.
    Всі запити фільтруються по user_uid; суми зберігаються рядками,
    щоб Decimal не втрачав точність.
    """

    def __init__(self, db):
        self.db = db

    # --- helpers ---

    def _owned_doc(self, collection: str, doc_id: str, user_uid: str):
        doc_ref = self.db.collection(collection).document(doc_id)
        doc = doc_ref.get()
        # Чужий запис виглядає так само, як відсутній
        if not doc.exists or doc.to_dict().get("user_uid") != user_uid:
            raise NotFoundError(f"Record {doc_id} not found")
        return doc_ref, doc

    def _stream_owned(self, collection: str, user_uid: str):
        return (
            self.db.collection(collection)
            .where(filter=FieldFilter("user_uid", "==", user_uid))
            .stream()
        )

    # --- incomes ---

    def list_incomes(self, user_uid: str) -> List[IncomeInDB]:
        results = [IncomeInDB(id=doc.id, **doc.to_dict()) for doc in self._stream_owned(INCOMES, user_uid)]
        results.sort(key=lambda x: x.id)
        return results

    def get_income(self, user_uid: str, income_id: str) -> IncomeInDB:
        _, doc = self._owned_doc(INCOMES, income_id, user_uid)
        return IncomeInDB(id=doc.id, **doc.to_dict())

    def create_income(self, user_uid: str, data: IncomeCreate) -> IncomeInDB:
        payload = self._income_payload(user_uid, data)
        _, doc_ref = self.db.collection(INCOMES).add(payload)
        logger.info(f"Created income {doc_ref.id} for {user_uid}")
        return IncomeInDB(id=doc_ref.id, **payload)

    def replace_income(self, user_uid: str, income_id: str, data: IncomeCreate) -> IncomeInDB:
        doc_ref, _ = self._owned_doc(INCOMES, income_id, user_uid)
        payload = self._income_payload(user_uid, data)
        doc_ref.set(payload)
        return IncomeInDB(id=income_id, **payload)

    def delete_income(self, user_uid: str, income_id: str) -> None:
        doc_ref, _ = self._owned_doc(INCOMES, income_id, user_uid)
        doc_ref.delete()

    @staticmethod
    def _income_payload(user_uid: str, data: IncomeCreate) -> dict:
        return {
            "user_uid": user_uid,
            "source": data.source,
            "amount": _money_str(data.amount),
            "frequency": data.frequency.value,
        }

    # --- bills ---

    def list_bills(self, user_uid: str) -> List[BillInDB]:
        results = [BillInDB(id=doc.id, **doc.to_dict()) for doc in self._stream_owned(BILLS, user_uid)]
        results.sort(key=lambda x: (x.due_date, x.id))
        return results

    def get_bill(self, user_uid: str, bill_id: str) -> BillInDB:
        _, doc = self._owned_doc(BILLS, bill_id, user_uid)
        return BillInDB(id=doc.id, **doc.to_dict())

    def create_bill(self, user_uid: str, data: BillCreate) -> BillInDB:
        payload = self._bill_payload(user_uid, data)
        _, doc_ref = self.db.collection(BILLS).add(payload)
        logger.info(f"Created bill {doc_ref.id} for {user_uid}")
        return BillInDB(id=doc_ref.id, **payload)

    def replace_bill(self, user_uid: str, bill_id: str, data: BillCreate) -> BillInDB:
        doc_ref, _ = self._owned_doc(BILLS, bill_id, user_uid)
        payload = self._bill_payload(user_uid, data)
        doc_ref.set(payload)
        return BillInDB(id=bill_id, **payload)

    def delete_bill(self, user_uid: str, bill_id: str) -> None:
        doc_ref, _ = self._owned_doc(BILLS, bill_id, user_uid)
        doc_ref.delete()

    @staticmethod
    def _bill_payload(user_uid: str, data: BillCreate) -> dict:
        return {
            "user_uid": user_uid,
            "name": data.name,
            "amount": _money_str(data.amount),
            "due_date": data.due_date,
        }

    # --- account balance ---

    def get_account_balance(self, user_uid: str) -> AccountBalanceResponse:
        doc = self.db.collection(USERS).document(user_uid).get()
        if not doc.exists:
            return AccountBalanceResponse()
        data = doc.to_dict()
        raw = data.get("account_balance")
        return AccountBalanceResponse(
            accountBalance=Decimal(raw) if raw is not None else None,
            lastUpdate=data.get("last_balance_update"),
        )

    def set_account_balance(self, user_uid: str, balance: Decimal) -> AccountBalanceResponse:
        now = datetime.datetime.now(datetime.timezone.utc)
        self.db.collection(USERS).document(user_uid).set(
            {
                "account_balance": _money_str(balance),
                "last_balance_update": now,
            },
            merge=True,
        )
        logger.info(f"Account balance updated for {user_uid}")
        return AccountBalanceResponse(accountBalance=to_money(balance), lastUpdate=now)
