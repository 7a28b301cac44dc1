# Pydantic моделі для рахунків (bills)

from decimal import Decimal

from pydantic import BaseModel, Field


class BillCreate(BaseModel):
    name: str = Field(min_length=1)
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    due_date: int = Field(ge=1, le=31)  # День місяця


class BillInDB(BillCreate):
    id: str
    user_uid: str


class DeductedBill(BaseModel):
    id: str
    name: str
    amount: Decimal
    due_date: int
    days_until_due: int
