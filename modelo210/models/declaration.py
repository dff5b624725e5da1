from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

# Negative income may be offset during the four following years
CARRY_FORWARD_YEARS = 4


class DeclarationKind(Enum):
    IMPUTATION = "imputacion"
    RENTAL = "alquiler"


class NegativeIncomeConcept(Enum):
    REPAIRS = "reparaciones"
    INTEREST = "intereses"
    MIXED = "mixto"


class NegativeIncomeStatus(Enum):
    PENDING = "pendiente"
    COMPENSATED = "compensada"
    EXPIRED = "caducada"


@dataclass(frozen=True)
class Declaration:
    """One Modelo 210 filing for one owner, property and year."""
    year: int
    property_id: int
    client_id: int
    kind: DeclarationKind
    declared_days: int
    taxable_base: Decimal
    tax_rate: Decimal  # Percent, 2 places, e.g. Decimal("19.00")
    amount_due: Decimal
    ownership_pct: Decimal
    formula: str

    # Imputation
    cadastral_base: Decimal | None = None
    imputation_pct: Decimal | None = None
    imputed_income: Decimal | None = None

    # Rental
    rental_income: Decimal | None = None
    deductible_expenses: Decimal | None = None
    amortization: Decimal | None = None


@dataclass(frozen=True)
class NegativeIncomeRecord:
    client_id: int
    property_id: int
    origin_year: int
    negative_amount: Decimal
    concept: NegativeIncomeConcept
    compensated_amount: Decimal = Decimal("0.00")

    @property
    def pending_amount(self) -> Decimal:
        return self.negative_amount - self.compensated_amount

    @property
    def expiry_year(self) -> int:
        return self.origin_year + CARRY_FORWARD_YEARS


@dataclass(frozen=True)
class Compensation:
    """Amount of a negative-income record applied against a later year's base."""
    client_id: int
    property_id: int
    origin_year: int
    year: int
    amount: Decimal
