from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum


class ExpenseType(Enum):
    # Prorated by rented days
    PROPERTY_TAX = "ibi"
    COMMUNITY_FEES = "comunidad"
    INSURANCE = "seguro"
    MORTGAGE_INTEREST = "intereses_hipoteca"
    UTILITIES = "suministros"
    UPKEEP = "conservacion"

    # 100% deductible
    REPAIRS = "reparacion"
    MANAGEMENT_FEES = "biuro"
    AGENCY_FEES = "agencia"
    LEGAL_FEES = "abogado"
    ADVERTISING = "publicidad"
    OTHER = "otro"


@dataclass(frozen=True)
class Expense:
    expense_id: int
    property_id: int
    expense_type: ExpenseType
    amount: Decimal
    expense_date: date
    description: str = ""
    validated: bool = False
