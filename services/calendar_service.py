from calendar import monthrange
from datetime import date
from typing import Sequence

from core.errors import ValidationError
from core.templates import to_money
from services.advisor_service import total_monthly_bills


def month_start_end(year: int, month: int) -> tuple[date, date]:
    if not 1 <= month <= 12:
        raise ValidationError("Місяць має бути в діапазоні 1..12")
    start = date(year, month, 1)
    last_day = monthrange(year, month)[1]
    return start, date(year, month, last_day)


class BillCalendarService:
    @staticmethod
    def due_date_in_month(year: int, month: int, due_day: int) -> date:
        """Якщо в місяці немає такого дня (31 лютого) — рахунок падає на останній день."""
        _, end = month_start_end(year, month)
        return date(year, month, min(due_day, end.day))

    @staticmethod
    def get_month_schedule(year: int, month: int, bills: Sequence):
        month_start_end(year, month)
        by_day: dict[date, list] = {}
        for bill in bills:
            due = BillCalendarService.due_date_in_month(year, month, bill.due_date)
            by_day.setdefault(due, []).append(bill)

        schedule = []
        for due in sorted(by_day):
            day_bills = by_day[due]
            schedule.append(
                {
                    "date": due.isoformat(),        # 2026-02-28
                    "total": str(total_monthly_bills(day_bills)),
                    "bills": [
                        {"id": b.id, "name": b.name, "amount": str(to_money(b.amount)), "due_date": b.due_date}
                        for b in day_bills
                    ],
                }
            )
        return schedule
