import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from api.deps import get_current_user, get_repository
from core.errors import PulseError
from models.bill import BillCreate, BillInDB
from services.finance_repository import FinanceRepository

logger = logging.getLogger(__name__)

router = APIRouter()


def _storage_failure(action: str, e: Exception) -> HTTPException:
    logger.exception(f"Bill {action} failed: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Error {action} bill",
    )


@router.get("/", response_model=List[BillInDB])
def get_all_bills(
    current_user: dict = Depends(get_current_user),
    repo: FinanceRepository = Depends(get_repository),
):
    """
    Повертає всі рахунки користувача, відсортовані за днем оплати.
    """
    try:
        return repo.list_bills(current_user["uid"])
    except PulseError:
        raise
    except Exception as e:
        raise _storage_failure("fetching", e)


@router.post("/", response_model=BillInDB, status_code=status.HTTP_201_CREATED)
def create_bill(
    bill_data: BillCreate,
    current_user: dict = Depends(get_current_user),
    repo: FinanceRepository = Depends(get_repository),
):
    """
    Створює новий регулярний рахунок (день місяця 1..31).
    """
    try:
        return repo.create_bill(current_user["uid"], bill_data)
    except PulseError:
        raise
    except Exception as e:
        raise _storage_failure("creating", e)


@router.put("/{bill_id}", response_model=BillInDB)
def update_bill(
    bill_id: str,
    bill_data: BillCreate,
    current_user: dict = Depends(get_current_user),
    repo: FinanceRepository = Depends(get_repository),
):
    """
    Редагування рахунку: повна заміна полів.
    """
    try:
        return repo.replace_bill(current_user["uid"], bill_id, bill_data)
    except PulseError:
        raise
    except Exception as e:
        raise _storage_failure("updating", e)


@router.delete("/{bill_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_bill(
    bill_id: str,
    current_user: dict = Depends(get_current_user),
    repo: FinanceRepository = Depends(get_repository),
):
    try:
        repo.delete_bill(current_user["uid"], bill_id)
    except PulseError:
        raise
    except Exception as e:
        raise _storage_failure("deleting", e)
