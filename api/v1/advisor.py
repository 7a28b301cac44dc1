import datetime
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.deps import get_current_user, get_repository, get_today
from core.config import settings
from core.errors import PulseError
from models.advisor import (
    FinancialAdvisorRequest,
    FinancialAdvisorResponse,
    SpendingAdvisorRequest,
    SpendingAdvisorResponse,
)
from services import advisor_service, query_service
from services.finance_repository import FinanceRepository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/spending-advisor", response_model=SpendingAdvisorResponse)
def spending_advisor(
    request: SpendingAdvisorRequest,
    current_user: dict = Depends(get_current_user),
    repo: FinanceRepository = Depends(get_repository),
    today: datetime.date = Depends(get_today),
):
    """
    Чи може користувач витратити суму, з урахуванням балансу
    та рахунків, що мають бути сплачені найближчими днями.
    """
    amount = advisor_service.parse_amount(request.amount)
    uid = current_user["uid"]

    try:
        balance = repo.get_account_balance(uid).accountBalance
        bills = repo.list_bills(uid)
    except PulseError:
        raise
    except Exception as e:
        logger.exception(f"Error in spending advisor: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error processing spending request",
        )

    decision = advisor_service.decide_spend(
        amount,
        balance,
        bills,
        today.day,
        settings.CAUTION_WINDOW_DAYS,
    )
    logger.info(f"Spending advisor for {uid}: {decision.outcome.value} ({amount})")
    return SpendingAdvisorResponse(canSpend=decision.can_spend, message=decision.message)


@router.post("/financial-advisor", response_model=FinancialAdvisorResponse)
def financial_advisor(
    request: FinancialAdvisorRequest,
    current_user: dict = Depends(get_current_user),
    repo: FinanceRepository = Depends(get_repository),
    today: datetime.date = Depends(get_today),
):
    """
    Відповідає на вільне питання про баланс, рахунки, доходи, заощадження чи витрати.
    """
    if not request.query.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Query must not be empty")
    uid = current_user["uid"]

    try:
        balance = repo.get_account_balance(uid).accountBalance
        bills = repo.list_bills(uid)
        incomes = repo.list_incomes(uid)
    except PulseError:
        raise
    except Exception as e:
        logger.exception(f"Error in financial advisor: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="I couldn't process your question. Please try asking about your balance, bills, income, or spending.",
        )

    message = query_service.answer_query(
        request.query,
        balance,
        incomes,
        bills,
        today.day,
        settings.CAUTION_WINDOW_DAYS,
    )
    logger.info(f"Financial advisor for {uid}: {query_service.classify_query(request.query).value}")
    return FinancialAdvisorResponse(message=message)
