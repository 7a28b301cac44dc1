# Pydantic моделі для доходів

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class IncomeFrequency(str, Enum):
    WEEKLY = "Weekly"
    BIWEEKLY = "Bi-weekly"
    MONTHLY = "Monthly"
    CUSTOM = "Custom"


class IncomeCreate(BaseModel):
    source: str = Field(min_length=1)
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    frequency: IncomeFrequency


class IncomeInDB(IncomeCreate):
    id: str
    user_uid: str
