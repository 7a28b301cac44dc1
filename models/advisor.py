# Pydantic моделі для spending/financial advisor

from pydantic import BaseModel


class SpendingAdvisorRequest(BaseModel):
    amount: str


class SpendingAdvisorResponse(BaseModel):
    canSpend: bool
    message: str


class FinancialAdvisorRequest(BaseModel):
    query: str


class FinancialAdvisorResponse(BaseModel):
    message: str
