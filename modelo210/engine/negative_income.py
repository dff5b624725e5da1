"""Negative rental income (renta negativa) and its carry-forward.

Only repairs and mortgage interest may produce a negative result that is
compensable in later years. Every other expense can at most bring the
taxable base down to zero.

A negative-income record may be offset against the taxable base of the
four following years, never more than what is pending nor more than the base.

Pure functions: dataclasses in, dataclasses out. No I/O.
"""

from dataclasses import replace
from datetime import date
from decimal import Decimal

from modelo210.engine.money import ZERO, fmt2, round2
from modelo210.errors import InvalidInputError
from modelo210.models.declaration import (
    CARRY_FORWARD_YEARS,
    Compensation,
    NegativeIncomeConcept,
    NegativeIncomeRecord,
    NegativeIncomeStatus,
)
from modelo210.models.expense import Expense, ExpenseType
from modelo210.models.results import NegativeIncomeResult

DEFAULT_TAX_RATE = Decimal("0.19")


def resolve_negative_income(
    income: Decimal,
    deductible_expenses: Decimal,
    amortization: Decimal,
    expenses: list[Expense],
    tax_rate: Decimal = DEFAULT_TAX_RATE,
    year: int | None = None,
) -> NegativeIncomeResult:
    """Taxable base of a rental year and the compensable negative income, if any.

    Args:
        income: Rental income of the year
        deductible_expenses: Total from calculate_deductible_expenses
        amortization: Amortization deducted in the year
        expenses: Raw expenses, to find the repairs and mortgage interest
        tax_rate: Fraction, 0.19 for EU/EEA residents
        year: Origin year of a negative result (defaults to the current year)
    """
    year = year or date.today().year

    repairs = ZERO
    interest = ZERO
    other = ZERO
    for expense in expenses:
        if expense.expense_type is ExpenseType.REPAIRS:
            repairs += expense.amount
        elif expense.expense_type is ExpenseType.MORTGAGE_INTEREST:
            interest += expense.amount
        else:
            other += expense.amount

    pre_limit = income - deductible_expenses - amortization

    result = NegativeIncomeResult(
        year=year,
        income=round2(income),
        deductible_expenses=round2(deductible_expenses),
        amortization=round2(amortization),
        repairs=round2(repairs),
        mortgage_interest=round2(interest),
        other_expenses=round2(other),
        pre_limit_result=round2(pre_limit),
    )

    if pre_limit >= 0:
        result.taxable_base = round2(pre_limit)
        result.observations = "Renta positiva. No hay rentas negativas."
    else:
        qualifying = repairs + interest
        if qualifying > 0:
            result.has_negative_income = True
            result.negative_income = round2(min(abs(pre_limit), qualifying))
            if repairs > 0 and interest > 0:
                result.concept = NegativeIncomeConcept.MIXED
            elif repairs > 0:
                result.concept = NegativeIncomeConcept.REPAIRS
            else:
                result.concept = NegativeIncomeConcept.INTEREST
            result.observations = (
                f"Renta negativa de {fmt2(result.negative_income)}€. "
                f"Se puede compensar hasta {year + CARRY_FORWARD_YEARS}."
            )
        else:
            result.observations = (
                "Renta cero. Solo hay gastos ordinarios "
                "(no generan renta negativa compensable)."
            )
        result.taxable_base = round2(ZERO)

    result.tax_due = round2(result.taxable_base * tax_rate)
    return result


def build_negative_income_record(
    result: NegativeIncomeResult,
    client_id: int,
    property_id: int,
) -> NegativeIncomeRecord | None:
    """Record to persist for a compensable negative result, else None."""
    if not result.has_negative_income:
        return None
    return NegativeIncomeRecord(
        client_id=client_id,
        property_id=property_id,
        origin_year=result.year,
        negative_amount=round2(result.negative_income),
        concept=result.concept,
    )


def max_compensation(pending: Decimal, taxable_base: Decimal) -> Decimal:
    """min(pending, base); a non-positive base absorbs nothing."""
    return min(pending, max(taxable_base, ZERO))


def negative_income_status(record: NegativeIncomeRecord, current_year: int) -> NegativeIncomeStatus:
    if record.pending_amount <= 0:
        return NegativeIncomeStatus.COMPENSATED
    if current_year > record.expiry_year:
        return NegativeIncomeStatus.EXPIRED
    return NegativeIncomeStatus.PENDING


def compensate(
    record: NegativeIncomeRecord,
    taxable_base: Decimal,
    year: int,
) -> tuple[NegativeIncomeRecord, Compensation]:
    """Offset a pending negative income against a later declaration's base.

    Returns the updated record and the compensation applied.

    Raises:
        InvalidInputError: year outside the carry-forward window, nothing
            pending, or no positive base to absorb it
    """
    if not record.origin_year < year <= record.expiry_year:
        raise InvalidInputError(
            f"Negative income from {record.origin_year} can only be compensated "
            f"between {record.origin_year + 1} and {record.expiry_year}, not in {year}",
            context={"origin_year": record.origin_year, "year": year},
        )
    if record.pending_amount <= 0:
        raise InvalidInputError(
            f"Negative income from {record.origin_year} is already fully compensated",
            context={"origin_year": record.origin_year},
        )

    amount = round2(max_compensation(record.pending_amount, taxable_base))
    if amount <= 0:
        raise InvalidInputError(
            f"Taxable base {fmt2(taxable_base)}€ leaves nothing to compensate",
            context={"taxable_base": str(taxable_base)},
        )

    updated = replace(record, compensated_amount=round2(record.compensated_amount + amount))
    compensation = Compensation(
        client_id=record.client_id,
        property_id=record.property_id,
        origin_year=record.origin_year,
        year=year,
        amount=amount,
    )
    return updated, compensation
