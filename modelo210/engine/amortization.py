"""Amortization (depreciation) of the construction share of a property.

Only the building depreciates, never the land: the acquisition cost is split
using the cadastral land/construction ratio from the IBI receipt, and 3% of
the construction share is deductible per year, prorated by rented days and
split across co-owners.

Pure functions. Every derived amount is rounded half-up to cents before it
feeds the next step, so the audit formula reproduces the figures exactly.
"""

from dataclasses import replace
from decimal import Decimal

from modelo210.engine.money import HUNDRED, ZERO, fmt2, round2, round4
from modelo210.errors import DataConsistencyError, InvalidInputError, PreconditionError
from modelo210.models.property import (
    CADASTRAL_TOLERANCE,
    AcquisitionDocument,
    CoOwner,
    DocumentType,
    Property,
)
from modelo210.models.results import (
    AcquisitionBreakdown,
    AmortizableValueResult,
    AmortizationResult,
    CadastralBreakdown,
    OwnerAmortization,
)

AMORTIZATION_RATE = Decimal("0.03")

# Fixed denominator, leap years included
AMORTIZATION_YEAR_DAYS = 365

_BREAKDOWN_FIELDS: dict[DocumentType, str] = {
    DocumentType.PURCHASE_PRICE: "purchase_price",
    DocumentType.NOTARY_FEES: "notary_fees",
    DocumentType.REGISTRY_FEES: "registry_fees",
    DocumentType.TRANSFER_TAX: "transfer_tax",
    DocumentType.PURCHASE_VAT: "purchase_vat",
    DocumentType.PURCHASE_AGENCY_FEES: "purchase_agency_fees",
    DocumentType.REAL_ESTATE_AGENCY_FEES: "real_estate_agency_fees",
    DocumentType.IMPROVEMENTS: "improvements",
}


def acquisition_breakdown(documents: list[AcquisitionDocument]) -> AcquisitionBreakdown:
    """Sum validated document amounts per document type."""
    breakdown = AcquisitionBreakdown()
    for doc in documents:
        if not doc.validated:
            continue
        name = _BREAKDOWN_FIELDS[doc.document_type]
        setattr(breakdown, name, round2(getattr(breakdown, name) + doc.amount))
    return breakdown


def calculate_amortizable_value(
    prop: Property,
    documents: list[AcquisitionDocument],
) -> AmortizableValueResult:
    """Amortizable value and annual amortization of a property.

    Step 1: acquisition value = sum of validated documents, or the purchase
            price when there are none
    Step 2: construction share from the cadastral split
    Step 3: amortizable value = acquisition value x construction share
    Step 4: annual amortization = 3% of the amortizable value

    Raises:
        InvalidInputError: no cadastral total
        DataConsistencyError: land + construction differs from the total
    """
    breakdown = acquisition_breakdown(documents)
    total_acquisition = breakdown.total

    if total_acquisition == 0:
        total_acquisition = round2(prop.purchase_price)
        breakdown.purchase_price = total_acquisition

    cadastral_total = prop.cadastral_total or ZERO
    land = prop.cadastral_land or ZERO
    construction = prop.cadastral_construction or ZERO

    if cadastral_total <= 0:
        raise InvalidInputError(
            "Cadastral values not available. Load the IBI receipt with the "
            "land/construction split.",
            context={"property_id": prop.property_id},
        )

    if abs(land + construction - cadastral_total) > CADASTRAL_TOLERANCE:
        raise DataConsistencyError(
            f"Land ({fmt2(land)}€) + Construction ({fmt2(construction)}€) "
            f"≠ Total ({fmt2(cadastral_total)}€)",
            context={
                "property_id": prop.property_id,
                "land": str(land),
                "construction": str(construction),
                "total": str(cadastral_total),
            },
        )

    construction_pct = construction / cadastral_total
    amortizable_value = round2(total_acquisition * construction_pct)
    annual_amortization = round2(amortizable_value * AMORTIZATION_RATE)

    formula = (
        f"{fmt2(total_acquisition)}€ × {fmt2(construction_pct * HUNDRED)}% = "
        f"{fmt2(amortizable_value)}€ → "
        f"{fmt2(amortizable_value)}€ × 3% = {fmt2(annual_amortization)}€/año"
    )

    return AmortizableValueResult(
        property_id=prop.property_id,
        address=prop.address,
        total_acquisition_value=total_acquisition,
        acquisition=breakdown,
        cadastral=CadastralBreakdown(
            total=round2(cadastral_total),
            land=round2(land),
            construction=round2(construction),
            construction_pct=round4(construction_pct),
        ),
        amortizable_value=amortizable_value,
        annual_amortization=annual_amortization,
        formula=formula,
    )


def apply_amortizable_value(prop: Property, result: AmortizableValueResult) -> Property:
    """Property copy carrying the derived amortization fields."""
    return replace(
        prop,
        total_acquisition_value=result.total_acquisition_value,
        construction_pct=result.cadastral.construction_pct,
        amortizable_value=result.amortizable_value,
        annual_amortization=result.annual_amortization,
    )


def resolve_owners(prop: Property, co_owners: list[CoOwner]) -> list[CoOwner]:
    """Active co-owners, or the principal owner at 100% when there are none."""
    active = [c for c in co_owners if c.active]
    if not active:
        return [CoOwner(property_id=prop.property_id, client_id=prop.client_id, ownership_pct=HUNDRED)]

    for c in active:
        if not ZERO < c.ownership_pct <= HUNDRED:
            raise InvalidInputError(
                f"Ownership percentage of client #{c.client_id} must be in (0, 100], "
                f"got {c.ownership_pct}",
                context={"client_id": c.client_id},
            )
    share_total = sum((c.ownership_pct for c in active), ZERO)
    if share_total > HUNDRED:
        raise DataConsistencyError(
            f"Co-owner percentages add up to {share_total}%, more than 100%",
            context={"property_id": prop.property_id, "total_pct": str(share_total)},
        )
    return active


def calculate_annual_amortization(
    prop: Property,
    rented_days: int,
    co_owners: list[CoOwner],
    year: int,
) -> AmortizationResult:
    """Amortization deductible in one year, per co-owner.

    Args:
        prop: Property with annual_amortization already populated
        rented_days: Days rented in the year (see calculate_rented_days)
        co_owners: Co-owners with their ownership percentage
        year: Fiscal year

    Raises:
        PreconditionError: calculate_amortizable_value has not been applied
    """
    annual = prop.annual_amortization or ZERO
    if annual == 0:
        raise PreconditionError(
            "The property has no annual amortization; must calculate amortizable value first.",
            context={"property_id": prop.property_id},
        )
    if not 0 <= rented_days <= 366:
        raise InvalidInputError(
            f"Rented days must be between 0 and 366, got {rented_days}",
            context={"rented_days": rented_days},
        )

    prorated = round2(annual * rented_days / AMORTIZATION_YEAR_DAYS)
    # A fully rented leap year would otherwise report -1
    non_rented = max(AMORTIZATION_YEAR_DAYS - rented_days, 0)

    owners = [
        OwnerAmortization(
            client_id=c.client_id,
            name=c.name,
            ownership_pct=c.ownership_pct,
            amortization=round2(prorated * c.ownership_pct / HUNDRED),
        )
        for c in resolve_owners(prop, co_owners)
    ]

    formula = (
        f"{fmt2(annual)}€ × ({rented_days}/{AMORTIZATION_YEAR_DAYS}) = {fmt2(prorated)}€"
    )

    return AmortizationResult(
        property_id=prop.property_id,
        address=prop.address,
        year=year,
        rented_days=rented_days,
        non_rented_days=non_rented,
        annual_amortization=round2(annual),
        prorated_amortization=prorated,
        owners=owners,
        formula=formula,
    )
