"""Declaration builders: compose the calculators into Modelo 210 filings.

One declaration per owner. Co-owners each declare their share; a property
without co-owner records is declared entirely by its principal owner.

Pure computation. Dataclasses in, Declaration records out.
"""

import logging
from datetime import date
from decimal import Decimal

from modelo210.engine.amortization import calculate_annual_amortization, resolve_owners
from modelo210.engine.expenses import calculate_deductible_expenses
from modelo210.engine.imputation import IMPUTATION_YEAR_DAYS, ImputationInput, calculate_imputation
from modelo210.engine.money import HUNDRED, ZERO, fmt2, fmt_number, round2
from modelo210.engine.negative_income import DEFAULT_TAX_RATE, resolve_negative_income
from modelo210.engine.rental_period import calculate_rented_days
from modelo210.errors import DataConsistencyError, InvalidInputError
from modelo210.models.contract import RentalContract
from modelo210.models.declaration import Declaration, DeclarationKind, NegativeIncomeRecord
from modelo210.models.expense import Expense
from modelo210.models.property import CoOwner, DeclarationType, Property
from modelo210.models.results import RentalDeclarationBundle

logger = logging.getLogger(__name__)


def _require_declaration_type(prop: Property, allowed: set[DeclarationType], regime: str) -> None:
    if prop.declaration_type not in allowed:
        raise InvalidInputError(
            f"Property #{prop.property_id} is declared as "
            f"'{prop.declaration_type.value}', not eligible for {regime}",
            context={"property_id": prop.property_id},
        )


def _mixed_imputation_days(
    prop: Property,
    contracts: list[RentalContract] | None,
    year: int,
    days: int | None,
) -> int:
    """Days left for imputation once the rented days of the year are taken out.

    Capped at 365, the imputation denominator.
    """
    if contracts is None:
        if days is None:
            raise InvalidInputError(
                f"Property #{prop.property_id} is rented part of the year: pass the "
                "contracts or the non-rented days to impute",
                context={"property_id": prop.property_id, "field": "days"},
            )
        return days

    free_days = min(calculate_rented_days(contracts, year).non_rented_days, IMPUTATION_YEAR_DAYS)
    if days is None:
        return free_days
    if days > free_days:
        raise DataConsistencyError(
            f"{days} imputed days overlap the rented days of {year}; "
            f"only {free_days} day(s) were not rented",
            context={"property_id": prop.property_id, "days": days, "non_rented_days": free_days},
        )
    return days


def build_imputation_declarations(
    prop: Property,
    co_owners: list[CoOwner],
    year: int | None = None,
    days: int | None = None,
    imputation_pct: Decimal | None = None,
    as_of: date | None = None,
    contracts: list[RentalContract] | None = None,
) -> list[Declaration]:
    """Imputation declarations for every owner of a vacant/own-use property.

    A mixed property is only imputed for the days it was not rented: pass its
    contracts to derive them, or pass `days` explicitly. Rented all year, it
    gets no imputation declaration.
    """
    _require_declaration_type(
        prop, {DeclarationType.IMPUTATION, DeclarationType.MIXED}, "imputation"
    )

    if prop.declaration_type is DeclarationType.MIXED:
        year = year or (as_of or date.today()).year
        days = _mixed_imputation_days(prop, contracts, year, days)
        if days == 0:
            logger.info("Property #%s rented all of %s, nothing to impute", prop.property_id, year)
            return []

    declarations = []
    for owner in resolve_owners(prop, co_owners):
        result = calculate_imputation(
            ImputationInput(
                cadastral_total=prop.cadastral_total,
                purchase_date=prop.purchase_date,
                property_type=prop.property_type,
                ownership_pct=owner.ownership_pct,
                year=year,
                days=days,
                imputation_pct=imputation_pct,
            ),
            as_of=as_of,
        )
        declarations.append(
            Declaration(
                year=result.year,
                property_id=prop.property_id,
                client_id=owner.client_id,
                kind=DeclarationKind.IMPUTATION,
                declared_days=result.days,
                cadastral_base=result.cadastral_value,
                imputation_pct=result.imputation_pct,
                imputed_income=result.owner_imputed_income,
                taxable_base=result.taxable_base,
                tax_rate=result.tax_rate,
                amount_due=result.tax_due,
                ownership_pct=owner.ownership_pct,
                formula=result.formula,
            )
        )

    logger.info(
        "Built %d imputation declaration(s) for property #%s",
        len(declarations),
        prop.property_id,
    )
    return declarations


def build_rental_declarations(
    prop: Property,
    contracts: list[RentalContract],
    expenses: list[Expense],
    co_owners: list[CoOwner],
    year: int,
    tax_rate: Decimal = DEFAULT_TAX_RATE,
) -> RentalDeclarationBundle:
    """Rental declarations for every owner of a rented property.

    Runs rented days -> deductible expenses -> amortization -> negative income
    at property level, then splits the base, tax and any compensable negative
    income by ownership share.
    """
    _require_declaration_type(
        prop, {DeclarationType.RENTAL, DeclarationType.MIXED}, "rental income"
    )

    period = calculate_rented_days(contracts, year)
    year_expenses = [e for e in expenses if e.expense_date.year == year]
    deductible = calculate_deductible_expenses(year_expenses, period.rented_days, year)
    amortization = calculate_annual_amortization(prop, period.rented_days, co_owners, year)
    outcome = resolve_negative_income(
        income=period.estimated_income,
        deductible_expenses=deductible.total_deductible,
        amortization=amortization.prorated_amortization,
        expenses=year_expenses,
        tax_rate=tax_rate,
        year=year,
    )

    rate_pct = tax_rate * HUNDRED
    bundle = RentalDeclarationBundle(
        rental_period=period,
        expenses=deductible,
        amortization=amortization,
        negative_income=outcome,
    )

    for owner in amortization.owners:
        share = owner.ownership_pct / HUNDRED
        base = round2(outcome.taxable_base * share)
        due = round2(base * tax_rate)
        formula = (
            f"max(0, {fmt2(outcome.income)}€ − {fmt2(outcome.deductible_expenses)}€ − "
            f"{fmt2(outcome.amortization)}€) × {owner.ownership_pct:.2f}% = {fmt2(base)}€ → "
            f"{fmt2(base)}€ × {fmt_number(rate_pct)}% = {fmt2(due)}€"
        )
        bundle.declarations.append(
            Declaration(
                year=year,
                property_id=prop.property_id,
                client_id=owner.client_id,
                kind=DeclarationKind.RENTAL,
                declared_days=period.rented_days,
                rental_income=round2(outcome.income * share),
                deductible_expenses=round2(outcome.deductible_expenses * share),
                amortization=owner.amortization,
                taxable_base=base,
                tax_rate=round2(rate_pct),
                amount_due=due,
                ownership_pct=owner.ownership_pct,
                formula=formula,
            )
        )
        if outcome.has_negative_income:
            bundle.negative_income_records.append(
                NegativeIncomeRecord(
                    client_id=owner.client_id,
                    property_id=prop.property_id,
                    origin_year=year,
                    negative_amount=round2(outcome.negative_income * share),
                    concept=outcome.concept,
                )
            )

    logger.info(
        "Built %d rental declaration(s) for property #%s, %s: %d rented days, base %s",
        len(bundle.declarations),
        prop.property_id,
        year,
        period.rented_days,
        outcome.taxable_base,
    )
    return bundle


def total_amount_due(declarations: list[Declaration]) -> Decimal:
    return round2(sum((d.amount_due for d in declarations), ZERO))
