"""Rented days per fiscal year, from a property's rental contracts.

The rented-day count is the base for prorating amortization and expenses in
Modelo 210, so overlapping contracts are rejected before any day is counted.

Pure functions: dataclasses in, dataclasses out. No I/O.
"""

from datetime import date
from decimal import Decimal

from modelo210.engine.money import HUNDRED, ZERO, round2
from modelo210.errors import DataConsistencyError, InvalidInputError, OverlappingContractsError
from modelo210.models.contract import RentalContract
from modelo210.models.results import ContractDays, RentalPeriodResult

AVERAGE_DAYS_PER_MONTH = Decimal("30.44")


def days_in_year(year: int) -> int:
    return (date(year, 12, 31) - date(year, 1, 1)).days + 1


def inclusive_days(start: date, end: date) -> int:
    """Both endpoints count: a one-day contract starts and ends the same day."""
    return (end - start).days + 1


def _check_dates(contracts: list[RentalContract]) -> None:
    for c in contracts:
        if c.end_date < c.start_date:
            raise InvalidInputError(
                f"Contract #{c.contract_id} ends ({c.end_date}) before it starts ({c.start_date})",
                context={"contract_id": c.contract_id},
            )


def find_overlapping_contracts(
    contracts: list[RentalContract],
) -> list[tuple[RentalContract, RentalContract]]:
    """Every pair of non-cancelled contracts that share at least one day.

    Pairs are ordered by start date. Cancelled contracts never overlap.
    """
    valid = sorted((c for c in contracts if c.counts), key=lambda c: c.start_date)

    overlaps = []
    for i, first in enumerate(valid):
        for second in valid[i + 1:]:
            if first.end_date >= second.start_date and first.start_date <= second.end_date:
                overlaps.append((first, second))
    return overlaps


def _describe(c: RentalContract) -> str:
    return f"Contract #{c.contract_id} ({c.tenant}, {c.start_date} - {c.end_date})"


def calculate_rented_days(contracts: list[RentalContract], year: int) -> RentalPeriodResult:
    """Total rented days of one property in a fiscal year.

    Args:
        contracts: All contracts of the property, any status and any year
        year: Fiscal year

    Raises:
        OverlappingContractsError: two counting contracts share days (checked
            over every contract, not only those in the year)
        DataConsistencyError: the clipped days add up to more than the year
    """
    _check_dates(contracts)

    overlaps = find_overlapping_contracts(contracts)
    if overlaps:
        details = "; ".join(f"{_describe(a)} overlaps {_describe(b)}" for a, b in overlaps)
        raise OverlappingContractsError(
            f"{len(overlaps)} overlapping contract pair(s); rented days cannot be "
            f"calculated. Details: {details}",
            overlaps,
        )

    year_start = date(year, 1, 1)
    year_end = date(year, 12, 31)
    total_days = days_in_year(year)
    property_id = contracts[0].property_id if contracts else 0

    in_year = [
        c for c in contracts
        if c.counts and c.start_date <= year_end and c.end_date >= year_start
    ]

    if not in_year:
        return RentalPeriodResult(
            property_id=property_id,
            year=year,
            days_in_year=total_days,
            non_rented_days=total_days,
        )

    rows = []
    rented = 0
    for c in in_year:
        start = max(c.start_date, year_start)
        end = min(c.end_date, year_end)
        days = inclusive_days(start, end)
        rented += days

        income = round2(c.monthly_rent * days / AVERAGE_DAYS_PER_MONTH)
        rows.append(
            ContractDays(
                contract_id=c.contract_id,
                start_date=c.start_date,
                end_date=c.end_date,
                effective_start=start,
                effective_end=end,
                days_in_year=days,
                monthly_rent=round2(c.monthly_rent),
                estimated_income=income,
                tenant=c.tenant,
                status=c.status.value,
            )
        )

    # Unreachable once the overlap check passed; guards the clipping above
    if rented > total_days:
        raise DataConsistencyError(
            f"Rented days ({rented}) exceed the days in {year} ({total_days}). "
            "Check the contracts for overlaps.",
            context={"rented_days": rented, "days_in_year": total_days},
        )

    occupancy = round2(Decimal(rented) / Decimal(total_days) * HUNDRED)
    income_total = sum((r.estimated_income for r in rows), ZERO)

    return RentalPeriodResult(
        property_id=property_id,
        year=year,
        days_in_year=total_days,
        contracts=rows,
        contract_count=len(rows),
        rented_days=rented,
        non_rented_days=total_days - rented,
        occupancy_pct=occupancy,
        estimated_income=round2(income_total),
    )
