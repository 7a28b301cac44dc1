import datetime
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.deps import get_current_user, get_repository, get_today
from core.config import settings
from core.errors import PulseError
from models.balance import (
    AccountBalanceResponse,
    AccountBalanceUpdate,
    CalculatedBalanceResponse,
    FinancialSummary,
)
from models.bill import DeductedBill
from services import advisor_service
from services.finance_repository import FinanceRepository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/account-balance", response_model=AccountBalanceResponse)
def get_account_balance(
    current_user: dict = Depends(get_current_user),
    repo: FinanceRepository = Depends(get_repository),
):
    try:
        return repo.get_account_balance(current_user["uid"])
    except PulseError:
        raise
    except Exception as e:
        logger.exception(f"Error fetching account balance: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error fetching account balance",
        )


@router.post("/account-balance", response_model=AccountBalanceResponse)
def update_account_balance(
    payload: AccountBalanceUpdate,
    current_user: dict = Depends(get_current_user),
    repo: FinanceRepository = Depends(get_repository),
):
    """
    Користувач вручну підтверджує/оновлює баланс рахунку.
    Баланс ніколи не виводиться автоматично з доходів та рахунків.
    """
    balance = advisor_service.parse_balance(payload.balance)
    try:
        return repo.set_account_balance(current_user["uid"], balance)
    except PulseError:
        raise
    except Exception as e:
        logger.exception(f"Error updating account balance: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error updating account balance",
        )


@router.get("/calculated-balance", response_model=CalculatedBalanceResponse)
def get_calculated_balance(
    current_user: dict = Depends(get_current_user),
    repo: FinanceRepository = Depends(get_repository),
    today: datetime.date = Depends(get_today),
):
    """
    Баланс мінус рахунки, що мають бути сплачені найближчим часом.
    Нічого не зберігає.
    """
    uid = current_user["uid"]
    try:
        stored = repo.get_account_balance(uid)
        bills = repo.list_bills(uid)
    except PulseError:
        raise
    except Exception as e:
        logger.exception(f"Error calculating balance: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error calculating balance",
        )

    calculated, deducted = advisor_service.calculated_balance(
        stored.accountBalance,
        bills,
        today.day,
        settings.CALCULATED_BALANCE_WINDOW_DAYS,
    )
    return CalculatedBalanceResponse(
        calculatedBalance=calculated,
        deductedBills=[
            DeductedBill(
                id=u.bill.id,
                name=u.bill.name,
                amount=u.bill.amount,
                due_date=u.bill.due_date,
                days_until_due=u.days_until_due,
            )
            for u in deducted
        ],
    )


@router.get("/summary", response_model=FinancialSummary)
def get_summary(
    current_user: dict = Depends(get_current_user),
    repo: FinanceRepository = Depends(get_repository),
):
    """
    Місячний дохід, місячні рахунки та "available to spend" (може бути від'ємним).
    """
    uid = current_user["uid"]
    try:
        incomes = repo.list_incomes(uid)
        bills = repo.list_bills(uid)
    except PulseError:
        raise
    except Exception as e:
        logger.exception(f"Error building summary: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error building summary",
        )

    income_total = advisor_service.total_monthly_income(incomes)
    bills_total = advisor_service.total_monthly_bills(bills)
    return FinancialSummary(
        totalMonthlyIncome=income_total,
        totalMonthlyBills=bills_total,
        availableToSpend=income_total - bills_total,
    )
