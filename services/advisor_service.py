# Сервісний шар для spending advisor: нормалізація доходів, агрегати,
# найближчий рахунок та рішення "чи можу я це витратити".

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Iterable, Sequence

from core.errors import InvalidFrequencyError, ValidationError
from core.templates import render_message, to_money
from models.bill import BillInDB
from models.income import IncomeFrequency


ZERO = Decimal("0.00")

# Множники до місячного еквіваленту. Custom вважається вже місячним.
MONTHLY_MULTIPLIERS = {
    IncomeFrequency.WEEKLY: Decimal(4),
    IncomeFrequency.BIWEEKLY: Decimal(2),
    IncomeFrequency.MONTHLY: Decimal(1),
    IncomeFrequency.CUSTOM: Decimal(1),
}

# Наближення: наступний місяць завжди має 30 днів
WRAPAROUND_DAYS = 30


class SpendOutcome(str, Enum):
    REJECTED = "rejected"
    CAUTION = "caution"
    APPROVED_WITH_NEXT_BILL = "approved_with_next_bill"
    APPROVED_NO_BILLS = "approved_no_bills"


@dataclass(frozen=True)
class UpcomingBill:
    bill: BillInDB
    days_until_due: int


@dataclass(frozen=True)
class SpendingDecision:
    outcome: SpendOutcome
    message: str
    requested: Decimal
    balance: Decimal
    new_balance: Decimal | None = None
    window_total: Decimal | None = None
    next_bill: UpcomingBill | None = None

    @property
    def can_spend(self) -> bool:
        return self.outcome != SpendOutcome.REJECTED


def parse_frequency(frequency) -> IncomeFrequency:
    if isinstance(frequency, IncomeFrequency):
        return frequency
    if isinstance(frequency, str):
        lowered = frequency.strip().lower()
        for candidate in IncomeFrequency:
            if candidate.value.lower() == lowered:
                return candidate
    raise InvalidFrequencyError(frequency)


def normalize_to_monthly(amount, frequency) -> Decimal:
    """
    Переводить регулярну суму в місячний еквівалент.
    Weekly x4, Bi-weekly x2, Monthly та Custom x1.
    """
    multiplier = MONTHLY_MULTIPLIERS[parse_frequency(frequency)]
    return to_money(Decimal(str(amount)) * multiplier)


def total_monthly_income(incomes: Iterable) -> Decimal:
    return sum((normalize_to_monthly(e.amount, e.frequency) for e in incomes), ZERO)


def total_monthly_bills(bills: Iterable) -> Decimal:
    return sum((to_money(b.amount) for b in bills), ZERO)


def available_to_spend(incomes: Iterable, bills: Iterable) -> Decimal:
    return total_monthly_income(incomes) - total_monthly_bills(bills)


def days_until_due(due_day: int, today_day: int) -> int:
    if due_day >= today_day:
        return due_day - today_day
    return due_day - today_day + WRAPAROUND_DAYS


def find_next_bill(bills: Sequence, today_day: int) -> UpcomingBill | None:
    """Рахунок з найменшою кількістю днів до оплати; при рівності перший за списком."""
    best = None
    for bill in bills:
        days = days_until_due(bill.due_date, today_day)
        if best is None or days < best.days_until_due:
            best = UpcomingBill(bill=bill, days_until_due=days)
    return best


def bills_due_within(bills: Sequence, today_day: int, window_days: int) -> list[UpcomingBill]:
    upcoming = [
        UpcomingBill(bill=bill, days_until_due=days_until_due(bill.due_date, today_day))
        for bill in bills
    ]
    upcoming = [u for u in upcoming if u.days_until_due <= window_days]
    upcoming.sort(key=lambda u: u.days_until_due)
    return upcoming


def _parse_decimal(raw, field: str) -> Decimal:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise ValidationError(f"{field} is required")
    try:
        value = Decimal(str(raw).strip().lstrip("$"))
    except InvalidOperation:
        raise ValidationError(f"{field} must be a number, got {raw!r}")
    if not value.is_finite():
        raise ValidationError(f"{field} must be a number, got {raw!r}")
    try:
        return to_money(value)
    except InvalidOperation:
        # quantize не вміщається в точність контексту
        raise ValidationError(f"{field} is too large")


def parse_amount(raw) -> Decimal:
    value = _parse_decimal(raw, "Amount")
    if value <= 0:
        raise ValidationError("Amount must be a positive number")
    return value


def parse_balance(raw) -> Decimal:
    # Баланс може бути нульовим або від'ємним (овердрафт)
    return _parse_decimal(raw, "Balance")


def decide_spend(
    requested,
    balance,
    bills: Sequence,
    today_day: int,
    window_days: int = 7,
) -> SpendingDecision:
    """
    Класифікує запит на витрату в один з чотирьох результатів.
    Порядок перевірок: rejected -> caution -> approved з наступним рахунком -> approved без рахунків.
    Чиста функція: без I/O та без стану.
    """
    requested = to_money(requested)
    balance = to_money(balance) if balance is not None else ZERO

    if requested > balance:
        return SpendingDecision(
            outcome=SpendOutcome.REJECTED,
            message=render_message("spend_rejected", amount=requested, balance=balance),
            requested=requested,
            balance=balance,
        )

    new_balance = balance - requested

    if not bills:
        return SpendingDecision(
            outcome=SpendOutcome.APPROVED_NO_BILLS,
            message=render_message("spend_no_bills", amount=requested, new_balance=new_balance),
            requested=requested,
            balance=balance,
            new_balance=new_balance,
        )

    window_total = total_monthly_bills(u.bill for u in bills_due_within(bills, today_day, window_days))
    if new_balance < window_total:
        return SpendingDecision(
            outcome=SpendOutcome.CAUTION,
            message=render_message(
                "spend_caution",
                amount=requested,
                new_balance=new_balance,
                window_total=window_total,
                window_days=window_days,
                after_window=new_balance - window_total,
            ),
            requested=requested,
            balance=balance,
            new_balance=new_balance,
            window_total=window_total,
        )

    next_bill = find_next_bill(bills, today_day)
    bill_amount = to_money(next_bill.bill.amount)
    return SpendingDecision(
        outcome=SpendOutcome.APPROVED_WITH_NEXT_BILL,
        message=render_message(
            "spend_next_bill",
            amount=requested,
            new_balance=new_balance,
            bill_name=next_bill.bill.name,
            bill_amount=bill_amount,
            days=next_bill.days_until_due,
            after_bill=new_balance - bill_amount,
        ),
        requested=requested,
        balance=balance,
        new_balance=new_balance,
        window_total=window_total,
        next_bill=next_bill,
    )


def calculated_balance(balance, bills: Sequence, today_day: int, window_days: int = 7) -> tuple[Decimal, list[UpcomingBill]]:
    """Баланс мінус рахунки, що мають бути сплачені протягом найближчих window_days днів."""
    start = to_money(balance) if balance is not None else ZERO
    deducted = bills_due_within(bills, today_day, window_days)
    return start - total_monthly_bills(u.bill for u in deducted), deducted
