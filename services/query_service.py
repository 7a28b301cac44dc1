# Простий rule-based financial advisor: маршрутизація вільного питання
# за ключовими словами до одного з шаблонів відповіді.

import math
import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Sequence

from core.errors import ComputationError, ValidationError
from core.templates import render_message, to_money
from services.advisor_service import (
    decide_spend,
    find_next_bill,
    total_monthly_bills,
    total_monthly_income,
    ZERO,
)

EMERGENCY_FUND_MONTHS = 3

# "$1,250.50", "1,000", "45.5"
_AMOUNT_RE = re.compile(r"(\$\s?)?(\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?)")


class QueryCategory(str, Enum):
    BALANCE = "balance"
    BILLS = "bills"
    INCOME = "income"
    SAVINGS = "savings"
    SPEND = "spend"
    DEFAULT = "default"


# Порядок важливий: перша категорія, що збіглася, перемагає
KEYWORDS = [
    (QueryCategory.BALANCE, ("balance", "how much money")),
    (QueryCategory.BILLS, ("bill", "payments", "expenses")),
    (QueryCategory.INCOME, ("income", "earn", "salary")),
    (QueryCategory.SAVINGS, ("save", "saving")),
    (QueryCategory.SPEND, ("spend", "afford", "buy")),
]


def classify_query(query: str) -> QueryCategory:
    low = query.lower()
    for category, words in KEYWORDS:
        if any(word in low for word in words):
            return category
    return QueryCategory.DEFAULT


def extract_amount(query: str) -> Decimal | None:
    """Перша сума з "$" має пріоритет, інакше перше число в тексті."""
    matches = list(_AMOUNT_RE.finditer(query))
    if not matches:
        return None
    match = next((m for m in matches if m.group(1)), matches[0])
    try:
        amount = to_money(match.group(2).replace(",", ""))
    except InvalidOperation:
        # Завелике число: відповідаємо так, ніби суми немає
        return None
    return amount if amount > 0 else None


def _answer_bills(bills: Sequence, today_day: int) -> str:
    if not bills:
        return render_message("query_bills_empty")
    upcoming = find_next_bill(bills, today_day)
    return render_message(
        "query_bills",
        bill_count=len(bills),
        total=total_monthly_bills(bills),
        bill_name=upcoming.bill.name,
        bill_amount=to_money(upcoming.bill.amount),
        days=upcoming.days_until_due,
    )


def _answer_savings(incomes: Sequence, bills: Sequence) -> str:
    bills_total = total_monthly_bills(bills)
    surplus = total_monthly_income(incomes) - bills_total
    if surplus <= 0:
        return render_message("query_savings_deficit", shortfall=abs(surplus))

    emergency_fund = bills_total * EMERGENCY_FUND_MONTHS
    try:
        months_to_fund = math.ceil(emergency_fund / surplus)
    except ArithmeticError as e:
        raise ComputationError(f"Cannot compute months to emergency fund: {e}") from e
    return render_message(
        "query_savings",
        surplus=surplus,
        emergency_fund=emergency_fund,
        months_to_fund=months_to_fund,
    )


def _answer_spend(query: str, balance: Decimal, bills: Sequence, today_day: int, window_days: int) -> str:
    amount = extract_amount(query)
    if amount is None:
        safe_amount = max(ZERO, balance - total_monthly_bills(bills))
        return render_message("query_spend_safe", balance=balance, safe_amount=safe_amount)
    return decide_spend(amount, balance, bills, today_day, window_days).message


def answer_query(
    query: str,
    balance,
    incomes: Sequence,
    bills: Sequence,
    today_day: int,
    window_days: int = 7,
) -> str:
    """
    Відповідає на вільне питання користувача про його фінанси.
    Агрегати перераховуються на кожен запит, стан не зберігається.
    """
    if query is None or not query.strip():
        raise ValidationError("Query must not be empty")

    balance = to_money(balance) if balance is not None else ZERO
    category = classify_query(query)

    if category == QueryCategory.BALANCE:
        return render_message("query_balance", balance=balance, bill_count=len(bills))
    if category == QueryCategory.BILLS:
        return _answer_bills(bills, today_day)
    if category == QueryCategory.INCOME:
        if not incomes:
            return render_message("query_income_empty")
        return render_message(
            "query_income",
            income_count=len(incomes),
            total=total_monthly_income(incomes),
        )
    if category == QueryCategory.SAVINGS:
        return _answer_savings(incomes, bills)
    if category == QueryCategory.SPEND:
        return _answer_spend(query, balance, bills, today_day, window_days)

    return render_message(
        "query_default",
        balance=balance,
        bill_count=len(bills),
        income_count=len(incomes),
    )
