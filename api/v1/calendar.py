import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.deps import get_current_user, get_repository, get_today
from core.errors import PulseError
from services.calendar_service import BillCalendarService
from services.finance_repository import FinanceRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/calendar", tags=["Calendar"])


@router.get("/")
def get_calendar(
    year: int | None = Query(default=None, ge=1, le=9999),
    month: int | None = Query(default=None, ge=1, le=12),
    current_user: dict = Depends(get_current_user),
    repo: FinanceRepository = Depends(get_repository),
    today: date = Depends(get_today),
):
    """
    Рахунки користувача, розкладені по днях обраного місяця (за замовчуванням — поточного).
    """
    if year is None:
        year = today.year
    if month is None:
        month = today.month

    try:
        bills = repo.list_bills(current_user["uid"])
    except PulseError:
        raise
    except Exception as e:
        logger.exception(f"Error loading bills for calendar: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error building bill calendar",
        )

    return {
        "year": year,
        "month": month,
        "days": BillCalendarService.get_month_schedule(year, month, bills),
    }
