"""Calculator routes: one endpoint per Modelo 210 calculation step."""

from fastapi import APIRouter

from modelo210.api.schemas import (
    AmortizableValueRequest,
    AnnualAmortizationRequest,
    DeductibleExpensesRequest,
    ImputationRequest,
    NegativeIncomeRecordResponse,
    NegativeIncomeRequest,
    NegativeIncomeResponse,
    RentedDaysRequest,
)
from modelo210.config import settings
from modelo210.engine.amortization import calculate_amortizable_value, calculate_annual_amortization
from modelo210.engine.expenses import calculate_deductible_expenses
from modelo210.engine.imputation import ImputationInput, calculate_imputation
from modelo210.engine.negative_income import build_negative_income_record, resolve_negative_income
from modelo210.engine.rental_period import calculate_rented_days
from modelo210.models.results import (
    AmortizableValueResult,
    AmortizationResult,
    DeductibleExpensesResult,
    ImputationResult,
    RentalPeriodResult,
)

router = APIRouter(prefix="/api/v1/calculations", tags=["calculations"])


@router.post("/rented-days", response_model=RentalPeriodResult)
async def rented_days(req: RentedDaysRequest):
    return calculate_rented_days([c.to_model() for c in req.contracts], req.year)


@router.post("/amortizable-value", response_model=AmortizableValueResult)
async def amortizable_value(req: AmortizableValueRequest):
    prop = req.property.to_model()
    documents = [d.to_model(prop.property_id) for d in req.documents]
    return calculate_amortizable_value(prop, documents)


@router.post("/annual-amortization", response_model=AmortizationResult)
async def annual_amortization(req: AnnualAmortizationRequest):
    prop = req.property.to_model()
    co_owners = [c.to_model(prop.property_id) for c in req.co_owners]
    return calculate_annual_amortization(prop, req.rented_days, co_owners, req.year)


@router.post("/deductible-expenses", response_model=DeductibleExpensesResult)
async def deductible_expenses(req: DeductibleExpensesRequest):
    expenses = [e.to_model() for e in req.expenses]
    return calculate_deductible_expenses(expenses, req.rented_days, req.year)


@router.post("/negative-income", response_model=NegativeIncomeResponse)
async def negative_income(req: NegativeIncomeRequest):
    result = resolve_negative_income(
        income=req.income,
        deductible_expenses=req.deductible_expenses,
        amortization=req.amortization,
        expenses=[e.to_model() for e in req.expenses],
        tax_rate=req.tax_rate if req.tax_rate is not None else settings.tax_rate,
        year=req.year,
    )

    record = None
    if req.client_id is not None and req.property_id is not None:
        built = build_negative_income_record(result, req.client_id, req.property_id)
        if built is not None:
            record = NegativeIncomeRecordResponse.from_record(built, req.current_year or result.year)

    return NegativeIncomeResponse(result=result, record=record)


@router.post("/imputation", response_model=ImputationResult)
async def imputation(req: ImputationRequest):
    data = ImputationInput(
        cadastral_total=req.cadastral_total,
        purchase_date=req.purchase_date,
        property_type=req.property_type,
        ownership_pct=req.ownership_pct,
        year=req.year,
        days=req.days,
        imputation_pct=req.imputation_pct,
    )
    return calculate_imputation(data, as_of=req.as_of)
