import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from api.deps import get_current_user, get_repository
from core.errors import PulseError
from models.income import IncomeCreate, IncomeInDB
from services.finance_repository import FinanceRepository

logger = logging.getLogger(__name__)

router = APIRouter()


def _storage_failure(action: str, e: Exception) -> HTTPException:
    logger.exception(f"Income {action} failed: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Error {action} income",
    )


@router.get("/", response_model=List[IncomeInDB])
def get_all_income(
    current_user: dict = Depends(get_current_user),
    repo: FinanceRepository = Depends(get_repository),
):
    """
    Повертає всі джерела доходу поточного користувача.
    """
    try:
        return repo.list_incomes(current_user["uid"])
    except PulseError:
        raise
    except Exception as e:
        raise _storage_failure("fetching", e)


@router.post("/", response_model=IncomeInDB, status_code=status.HTTP_201_CREATED)
def create_income(
    income_data: IncomeCreate,
    current_user: dict = Depends(get_current_user),
    repo: FinanceRepository = Depends(get_repository),
):
    """
    Створює нове джерело доходу.
    """
    try:
        return repo.create_income(current_user["uid"], income_data)
    except PulseError:
        raise
    except Exception as e:
        raise _storage_failure("creating", e)


@router.put("/{income_id}", response_model=IncomeInDB)
def update_income(
    income_id: str,
    income_data: IncomeCreate,
    current_user: dict = Depends(get_current_user),
    repo: FinanceRepository = Depends(get_repository),
):
    """
    Повністю замінює запис про дохід (редагування).
    """
    try:
        return repo.replace_income(current_user["uid"], income_id, income_data)
    except PulseError:
        raise
    except Exception as e:
        raise _storage_failure("updating", e)


@router.delete("/{income_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_income(
    income_id: str,
    current_user: dict = Depends(get_current_user),
    repo: FinanceRepository = Depends(get_repository),
):
    try:
        repo.delete_income(current_user["uid"], income_id)
    except PulseError:
        raise
    except Exception as e:
        raise _storage_failure("deleting", e)
