"""Declaration routes: per-owner Modelo 210 filings and loss compensation."""

from fastapi import APIRouter

from modelo210.api.schemas import (
    CompensationRequest,
    CompensationResponse,
    DeclarationsResponse,
    ImputationDeclarationsRequest,
    NegativeIncomeRecordResponse,
    RentalDeclarationsRequest,
    RentalDeclarationsResponse,
)
from modelo210.config import settings
from modelo210.engine.declaration import (
    build_imputation_declarations,
    build_rental_declarations,
    total_amount_due,
)
from modelo210.engine.negative_income import compensate

router = APIRouter(prefix="/api/v1/declarations", tags=["declarations"])


@router.post("/imputation", response_model=DeclarationsResponse)
async def imputation_declarations(req: ImputationDeclarationsRequest):
    prop = req.property.to_model()
    declarations = build_imputation_declarations(
        prop,
        [c.to_model(prop.property_id) for c in req.co_owners],
        year=req.year,
        days=req.days,
        imputation_pct=req.imputation_pct,
        as_of=req.as_of,
        contracts=[c.to_model() for c in req.contracts] if req.contracts is not None else None,
    )
    return DeclarationsResponse(
        declarations=declarations,
        total_amount_due=total_amount_due(declarations),
    )


@router.post("/rental", response_model=RentalDeclarationsResponse)
async def rental_declarations(req: RentalDeclarationsRequest):
    prop = req.property.to_model()
    bundle = build_rental_declarations(
        prop,
        contracts=[c.to_model() for c in req.contracts],
        expenses=[e.to_model() for e in req.expenses],
        co_owners=[c.to_model(prop.property_id) for c in req.co_owners],
        year=req.year,
        tax_rate=req.tax_rate if req.tax_rate is not None else settings.tax_rate,
    )
    return RentalDeclarationsResponse(
        declarations=bundle.declarations,
        total_amount_due=total_amount_due(bundle.declarations),
        negative_income_records=[
            NegativeIncomeRecordResponse.from_record(r, req.year)
            for r in bundle.negative_income_records
        ],
        rental_period=bundle.rental_period,
        expenses=bundle.expenses,
        amortization=bundle.amortization,
        negative_income=bundle.negative_income,
    )


@router.post("/compensation", response_model=CompensationResponse)
async def compensation(req: CompensationRequest):
    record, applied = compensate(req.record.to_model(), req.taxable_base, req.year)
    return CompensationResponse(
        record=NegativeIncomeRecordResponse.from_record(record, req.year),
        compensation=applied,
    )
