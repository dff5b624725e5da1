from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from modelo210.models.declaration import Declaration, NegativeIncomeConcept, NegativeIncomeRecord


@dataclass
class ContractDays:
    """One contract clipped to a fiscal year."""
    contract_id: int
    start_date: date
    end_date: date
    effective_start: date
    effective_end: date
    days_in_year: int
    monthly_rent: Decimal
    estimated_income: Decimal
    tenant: str
    status: str


@dataclass
class RentalPeriodResult:
    property_id: int
    year: int
    days_in_year: int  # 365 or 366
    contracts: list[ContractDays] = field(default_factory=list)
    contract_count: int = 0
    rented_days: int = 0
    non_rented_days: int = 0
    occupancy_pct: Decimal = Decimal("0.00")
    estimated_income: Decimal = Decimal("0.00")


@dataclass
class AcquisitionBreakdown:
    purchase_price: Decimal = Decimal("0.00")
    notary_fees: Decimal = Decimal("0.00")
    registry_fees: Decimal = Decimal("0.00")
    transfer_tax: Decimal = Decimal("0.00")  # ITP
    purchase_vat: Decimal = Decimal("0.00")
    purchase_agency_fees: Decimal = Decimal("0.00")
    real_estate_agency_fees: Decimal = Decimal("0.00")
    improvements: Decimal = Decimal("0.00")

    @property
    def total(self) -> Decimal:
        return (
            self.purchase_price
            + self.notary_fees
            + self.registry_fees
            + self.transfer_tax
            + self.purchase_vat
            + self.purchase_agency_fees
            + self.real_estate_agency_fees
            + self.improvements
        )


@dataclass
class CadastralBreakdown:
    total: Decimal
    land: Decimal
    construction: Decimal
    construction_pct: Decimal  # Fraction, 4 places


@dataclass
class AmortizableValueResult:
    property_id: int
    address: str
    total_acquisition_value: Decimal
    acquisition: AcquisitionBreakdown
    cadastral: CadastralBreakdown
    amortizable_value: Decimal
    annual_amortization: Decimal
    formula: str


@dataclass
class OwnerAmortization:
    client_id: int
    name: str
    ownership_pct: Decimal
    amortization: Decimal


@dataclass
class AmortizationResult:
    property_id: int
    address: str
    year: int
    rented_days: int
    non_rented_days: int
    annual_amortization: Decimal
    prorated_amortization: Decimal
    owners: list[OwnerAmortization] = field(default_factory=list)
    formula: str = ""


@dataclass
class ProportionalExpense:
    total: Decimal = Decimal("0.00")
    deductible: Decimal = Decimal("0.00")


@dataclass
class DeductibleExpensesResult:
    year: int
    rented_days: int
    non_rented_days: int
    proportional: dict[str, ProportionalExpense] = field(default_factory=dict)
    proportional_total: Decimal = Decimal("0.00")  # Before proration
    proportional_subtotal: Decimal = Decimal("0.00")
    fully_deductible: dict[str, Decimal] = field(default_factory=dict)
    fully_deductible_subtotal: Decimal = Decimal("0.00")
    total_deductible: Decimal = Decimal("0.00")
    formula: str = ""


@dataclass
class NegativeIncomeResult:
    year: int
    income: Decimal
    deductible_expenses: Decimal
    amortization: Decimal

    # Expense split by negative-income eligibility
    repairs: Decimal = Decimal("0.00")
    mortgage_interest: Decimal = Decimal("0.00")
    other_expenses: Decimal = Decimal("0.00")

    pre_limit_result: Decimal = Decimal("0.00")
    has_negative_income: bool = False
    negative_income: Decimal = Decimal("0.00")
    taxable_base: Decimal = Decimal("0.00")
    tax_due: Decimal = Decimal("0.00")
    concept: NegativeIncomeConcept | None = None
    observations: str = ""


@dataclass
class ImputationResult:
    year: int
    days: int
    cadastral_value: Decimal
    imputation_pct: Decimal
    ownership_pct: Decimal
    full_imputed_income: Decimal
    owner_imputed_income: Decimal
    taxable_base: Decimal
    tax_rate: Decimal  # Percent
    tax_due: Decimal
    formula: str


@dataclass
class RentalDeclarationBundle:
    """Everything produced by one rental-declaration run for a property."""
    rental_period: RentalPeriodResult
    expenses: DeductibleExpensesResult
    amortization: AmortizationResult
    negative_income: NegativeIncomeResult
    declarations: list[Declaration] = field(default_factory=list)
    negative_income_records: list[NegativeIncomeRecord] = field(default_factory=list)
