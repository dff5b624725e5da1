"""Modelo 210, imputation regime (imputación de rentas).

Vacant or own-use urban property owned by a non-resident is taxed on a
deemed income: a percentage of the cadastral value, prorated by days and by
ownership share. No expenses are deductible under this regime.

    income = cadastral x pct% x (days/365) x ownership%
    tax    = income x 19%

Pure function. The only clock read is the default for `year` and `as_of`;
pass both to get a reproducible result.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from modelo210.engine.money import HUNDRED, fmt_number, format_euros, round2, to_decimal
from modelo210.errors import InvalidInputError
from modelo210.models.property import PropertyType
from modelo210.models.results import ImputationResult

# Non-resident EU/EEA rate, percent
TAX_RATE_PCT = Decimal("19")

# Cadastral value revised within the last ten years / not revised
REVISED_RATE = Decimal("1.1")
STANDARD_RATE = Decimal("2.0")
ALLOWED_RATES = (REVISED_RATE, STANDARD_RATE)

REVISION_AGE_YEARS = 10
DAYS_PER_YEAR_AVG = Decimal("365.25")
IMPUTATION_YEAR_DAYS = 365


@dataclass(frozen=True)
class ImputationInput:
    cadastral_total: Decimal | str | None
    purchase_date: date | str | None
    property_type: PropertyType = PropertyType.VIVIENDA
    ownership_pct: Decimal | str | int | None = None  # Default 100
    year: int | None = None  # Default current year
    days: int | None = None  # Default 365
    imputation_pct: Decimal | str | float | None = None  # Manual override, 1.1 or 2.0


def _parse_purchase_date(value: date | str | None) -> date:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidInputError(
            "Purchase date is required for the calculation",
            context={"field": "purchase_date"},
        )
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise InvalidInputError(
            f"Invalid purchase date: {value!r}", context={"field": "purchase_date"}
        )


def imputation_rate_for_age(purchase_date: date, as_of: date) -> Decimal:
    """1.1% if the property was bought less than ten years ago, else 2.0%.

    Stands in for "cadastral value revised in the last ten years"; the actual
    revision date is not known to the engine.
    """
    age_years = Decimal((as_of - purchase_date).days) / DAYS_PER_YEAR_AVG
    return REVISED_RATE if age_years < REVISION_AGE_YEARS else STANDARD_RATE


def calculate_imputation(data: ImputationInput, as_of: date | None = None) -> ImputationResult:
    """Deemed-income tax for one owner of a non-rented property.

    Args:
        data: Cadastral value, purchase date and optional overrides
        as_of: Reference date for the property age (defaults to today)

    Raises:
        InvalidInputError: one distinct error per invalid field, checked in
            order: cadastral value, purchase date, ownership, days, manual rate
    """
    if data.cadastral_total is None or (
        isinstance(data.cadastral_total, str) and not data.cadastral_total.strip()
    ):
        raise InvalidInputError(
            "Cadastral value is missing", context={"field": "cadastral_total"}
        )
    cadastral = to_decimal(data.cadastral_total, "cadastral_total")
    if cadastral <= 0:
        raise InvalidInputError(
            f"Invalid cadastral value: {data.cadastral_total}",
            context={"field": "cadastral_total"},
        )

    purchase_date = _parse_purchase_date(data.purchase_date)

    ownership = (
        HUNDRED if data.ownership_pct is None else to_decimal(data.ownership_pct, "ownership_pct")
    )
    if not 0 < ownership <= HUNDRED:
        raise InvalidInputError(
            f"Invalid ownership percentage: {ownership}", context={"field": "ownership_pct"}
        )

    days = IMPUTATION_YEAR_DAYS if data.days is None else data.days
    if not 1 <= days <= IMPUTATION_YEAR_DAYS:
        raise InvalidInputError(
            f"Days must be between 1 and 365, got {days}", context={"field": "days"}
        )

    as_of = as_of or date.today()
    year = data.year or as_of.year

    if data.imputation_pct is not None:
        pct = to_decimal(data.imputation_pct, "imputation_pct")
        if pct not in ALLOWED_RATES:
            raise InvalidInputError(
                f"Imputation percentage must be 1.1 or 2.0, got {data.imputation_pct}",
                context={"field": "imputation_pct"},
            )
    else:
        pct = imputation_rate_for_age(purchase_date, as_of)

    full_income = cadastral * pct / HUNDRED * days / IMPUTATION_YEAR_DAYS
    owner_income = full_income * ownership / HUNDRED
    taxable_base = owner_income
    tax_due = round2(taxable_base * TAX_RATE_PCT / HUNDRED)

    formula = (
        f"{format_euros(cadastral)} × {fmt_number(pct)}% × ({days}/{IMPUTATION_YEAR_DAYS}) × "
        f"{ownership:.2f}% = {format_euros(owner_income)} → "
        f"{format_euros(owner_income)} × {TAX_RATE_PCT}% = {format_euros(tax_due)}"
    )

    return ImputationResult(
        year=year,
        days=days,
        cadastral_value=round2(cadastral),
        imputation_pct=pct,
        ownership_pct=ownership,
        full_imputed_income=round2(full_income),
        owner_imputed_income=round2(owner_income),
        taxable_base=round2(taxable_base),
        tax_rate=round2(TAX_RATE_PCT),
        tax_due=tax_due,
        formula=formula,
    )
