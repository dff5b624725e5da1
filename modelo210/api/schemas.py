"""Pydantic schemas for API request/response models.

Requests carry the full input records: the API stores nothing and looks
nothing up. Each input schema converts to its engine dataclass.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from modelo210.engine.money import round2
from modelo210.engine.negative_income import negative_income_status
from modelo210.models.contract import ContractStatus, RentalContract
from modelo210.models.declaration import (
    Compensation,
    Declaration,
    NegativeIncomeConcept,
    NegativeIncomeRecord,
    NegativeIncomeStatus,
)
from modelo210.models.expense import Expense, ExpenseType
from modelo210.models.property import (
    AcquisitionDocument,
    CoOwner,
    DeclarationType,
    DocumentType,
    Property,
    PropertyType,
)
from modelo210.models.results import (
    AmortizationResult,
    DeductibleExpensesResult,
    NegativeIncomeResult,
    RentalPeriodResult,
)


# ---- Input records ----

class PropertyIn(BaseModel):
    property_id: int
    client_id: int
    cadastral_reference: str = Field(..., max_length=20)
    purchase_date: date | None = None
    purchase_price: Decimal = Field(..., ge=0)
    address: str = ""
    property_type: PropertyType = PropertyType.VIVIENDA
    declaration_type: DeclarationType = DeclarationType.IMPUTATION
    cadastral_total: Decimal | None = None
    cadastral_land: Decimal | None = None
    cadastral_construction: Decimal | None = None
    annual_amortization: Decimal | None = None

    def to_model(self) -> Property:
        return Property(**self.model_dump())


class CoOwnerIn(BaseModel):
    client_id: int
    ownership_pct: Decimal = Field(..., gt=0, le=100)
    name: str = ""
    start_date: date | None = None
    active: bool = True

    def to_model(self, property_id: int) -> CoOwner:
        return CoOwner(property_id=property_id, **self.model_dump())


class DocumentIn(BaseModel):
    document_id: int
    document_type: DocumentType
    amount: Decimal = Field(..., ge=0)
    document_date: date | None = None
    validated: bool = True

    def to_model(self, property_id: int) -> AcquisitionDocument:
        return AcquisitionDocument(property_id=property_id, **self.model_dump())


class ContractIn(BaseModel):
    contract_id: int
    property_id: int
    start_date: date
    end_date: date
    monthly_rent: Decimal = Field(..., ge=0)
    tenant_name: str
    tenant_surname: str = ""
    status: ContractStatus = ContractStatus.ACTIVE

    @model_validator(mode="after")
    def _end_after_start(self):
        if self.end_date < self.start_date:
            raise ValueError(f"contract {self.contract_id}: end_date is before start_date")
        return self

    def to_model(self) -> RentalContract:
        return RentalContract(**self.model_dump())


class ExpenseIn(BaseModel):
    expense_id: int
    property_id: int
    expense_type: ExpenseType
    amount: Decimal = Field(..., ge=0)
    expense_date: date
    description: str = ""
    validated: bool = False

    def to_model(self) -> Expense:
        return Expense(**self.model_dump())


class NegativeIncomeRecordIn(BaseModel):
    client_id: int
    property_id: int
    origin_year: int
    negative_amount: Decimal = Field(..., gt=0)
    concept: NegativeIncomeConcept
    compensated_amount: Decimal = Field(Decimal("0"), ge=0)

    def to_model(self) -> NegativeIncomeRecord:
        return NegativeIncomeRecord(**self.model_dump())


# ---- Request schemas ----

class RentedDaysRequest(BaseModel):
    year: int = Field(..., ge=1900, le=2200)
    contracts: list[ContractIn] = []


class AmortizableValueRequest(BaseModel):
    property: PropertyIn
    documents: list[DocumentIn] = []


class AnnualAmortizationRequest(BaseModel):
    property: PropertyIn
    rented_days: int = Field(..., ge=0, le=366)
    year: int = Field(..., ge=1900, le=2200)
    co_owners: list[CoOwnerIn] = []


class DeductibleExpensesRequest(BaseModel):
    rented_days: int = Field(..., ge=0, le=366)
    year: int = Field(..., ge=1900, le=2200)
    expenses: list[ExpenseIn] = []


class NegativeIncomeRequest(BaseModel):
    income: Decimal
    deductible_expenses: Decimal
    amortization: Decimal = Decimal("0")
    expenses: list[ExpenseIn] = []
    tax_rate: Decimal | None = Field(None, ge=0, le=1, description="Fraction, default from settings")
    year: int | None = None

    # Both set: the response includes the record to persist
    client_id: int | None = None
    property_id: int | None = None
    # Year the record status is evaluated in, defaults to the origin year
    current_year: int | None = None


class ImputationRequest(BaseModel):
    """Loosely typed on purpose: the engine reports each invalid field."""
    cadastral_total: Decimal | str | None = Field(None, description="Decimal or decimal string, e.g. '150000.00'")
    purchase_date: str | None = Field(None, description="ISO date")
    property_type: PropertyType = PropertyType.VIVIENDA
    ownership_pct: Decimal | None = None
    year: int | None = None
    days: int | None = None
    imputation_pct: Decimal | None = None
    as_of: date | None = None


class ImputationDeclarationsRequest(BaseModel):
    property: PropertyIn
    co_owners: list[CoOwnerIn] = []
    year: int | None = None
    days: int | None = None
    imputation_pct: Decimal | None = None
    as_of: date | None = None

    # Mixed properties: the non-rented days are derived from these when days is omitted
    contracts: list[ContractIn] | None = None


class RentalDeclarationsRequest(BaseModel):
    property: PropertyIn
    year: int = Field(..., ge=1900, le=2200)
    contracts: list[ContractIn] = []
    expenses: list[ExpenseIn] = []
    co_owners: list[CoOwnerIn] = []
    tax_rate: Decimal | None = Field(None, ge=0, le=1)


class CompensationRequest(BaseModel):
    record: NegativeIncomeRecordIn
    taxable_base: Decimal
    year: int


# ---- Response schemas ----

class NegativeIncomeRecordResponse(BaseModel):
    client_id: int
    property_id: int
    origin_year: int
    negative_amount: Decimal
    concept: NegativeIncomeConcept
    compensated_amount: Decimal
    pending_amount: Decimal
    expiry_year: int
    status: NegativeIncomeStatus

    @classmethod
    def from_record(cls, record: NegativeIncomeRecord, current_year: int) -> "NegativeIncomeRecordResponse":
        return cls(
            client_id=record.client_id,
            property_id=record.property_id,
            origin_year=record.origin_year,
            negative_amount=round2(record.negative_amount),
            concept=record.concept,
            compensated_amount=round2(record.compensated_amount),
            pending_amount=round2(record.pending_amount),
            expiry_year=record.expiry_year,
            status=negative_income_status(record, current_year),
        )


class NegativeIncomeResponse(BaseModel):
    result: NegativeIncomeResult
    record: NegativeIncomeRecordResponse | None = None


class DeclarationsResponse(BaseModel):
    declarations: list[Declaration]
    total_amount_due: Decimal


class RentalDeclarationsResponse(DeclarationsResponse):
    negative_income_records: list[NegativeIncomeRecordResponse] = []
    rental_period: RentalPeriodResult
    expenses: DeductibleExpensesResult
    amortization: AmortizationResult
    negative_income: NegativeIncomeResult


class CompensationResponse(BaseModel):
    record: NegativeIncomeRecordResponse
    compensation: Compensation
