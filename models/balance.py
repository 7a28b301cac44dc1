# Pydantic моделі для балансу рахунку

import datetime
from decimal import Decimal
from typing import List

from pydantic import BaseModel

from models.bill import DeductedBill


class AccountBalanceUpdate(BaseModel):
    balance: str


class AccountBalanceResponse(BaseModel):
    accountBalance: Decimal | None = None
    lastUpdate: datetime.datetime | None = None


class CalculatedBalanceResponse(BaseModel):
    calculatedBalance: Decimal
    deductedBills: List[DeductedBill]


class FinancialSummary(BaseModel):
    totalMonthlyIncome: Decimal
    totalMonthlyBills: Decimal
    availableToSpend: Decimal
