"""CLI for ad-hoc Modelo 210 calculations.

Usage:
    python -m modelo210.cli imputation --cadastral 150000 --purchase-date 2020-01-15 --year 2024
    python -m modelo210.cli imputation --cadastral 90000 --purchase-date 2010-03-01 --ownership 50 --pct 2.0
    python -m modelo210.cli amortizable-value property.json
    python -m modelo210.cli rented-days contracts.json

The JSON files use the same shape as the matching API request bodies.
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from pydantic import ValidationError

from modelo210.api.schemas import AmortizableValueRequest, RentedDaysRequest
from modelo210.config import settings
from modelo210.engine.amortization import calculate_amortizable_value
from modelo210.engine.imputation import ImputationInput, calculate_imputation
from modelo210.engine.rental_period import calculate_rented_days
from modelo210.errors import Modelo210Error

logger = logging.getLogger(__name__)


def print_imputation(result) -> None:
    print(f"\n{'=' * 60}")
    print(f"  Imputación de rentas {result.year}")
    print(f"{'=' * 60}")
    print(f"  Cadastral value:   {result.cadastral_value:>12.2f} €")
    print(f"  Imputation rate:   {result.imputation_pct:>12}%")
    print(f"  Days:              {result.days:>12}")
    print(f"  Ownership:         {result.ownership_pct:>12.2f}%")
    print(f"  Imputed income:    {result.owner_imputed_income:>12.2f} €")
    print(f"  Tax due:           {result.tax_due:>12.2f} €")
    print()
    print(f"  {result.formula}")
    print()


def print_amortizable_value(result) -> None:
    print(f"\n{'=' * 60}")
    print(f"  Amortizable value: property #{result.property_id} {result.address}")
    print(f"{'=' * 60}")
    print(f"  Acquisition value:   {result.total_acquisition_value:>12.2f} €")
    print(f"  Construction share:  {result.cadastral.construction_pct * 100:>12.2f}%")
    print(f"  Amortizable value:   {result.amortizable_value:>12.2f} €")
    print(f"  Annual amortization: {result.annual_amortization:>12.2f} €")
    print()
    print(f"  {result.formula}")
    print()


def print_rented_days(result) -> None:
    print(f"\n{'=' * 60}")
    print(f"  Rented days {result.year}: property #{result.property_id}")
    print(f"{'=' * 60}")
    for row in result.contracts:
        print(
            f"  #{row.contract_id:<6} {row.tenant:<24} {row.effective_start} - {row.effective_end}"
            f"  {row.days_in_year:>3} d  {row.estimated_income:>10.2f} €"
        )
    print()
    print(f"  Rented:     {result.rented_days:>4} / {result.days_in_year} days ({result.occupancy_pct}%)")
    print(f"  Not rented: {result.non_rented_days:>4} days")
    print(f"  Estimated income: {result.estimated_income:.2f} €")
    print()


def _run_imputation(args) -> None:
    result = calculate_imputation(
        ImputationInput(
            cadastral_total=args.cadastral,
            purchase_date=args.purchase_date,
            ownership_pct=args.ownership,
            year=args.year,
            days=args.days,
            imputation_pct=args.pct,
        ),
        as_of=args.as_of,
    )
    print_imputation(result)


def _run_amortizable_value(args) -> None:
    req = AmortizableValueRequest.model_validate_json(Path(args.file).read_text())
    prop = req.property.to_model()
    result = calculate_amortizable_value(prop, [d.to_model(prop.property_id) for d in req.documents])
    print_amortizable_value(result)


def _run_rented_days(args) -> None:
    req = RentedDaysRequest.model_validate_json(Path(args.file).read_text())
    result = calculate_rented_days([c.to_model() for c in req.contracts], req.year)
    print_rented_days(result)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="modelo210", description="Modelo 210 calculations")
    sub = parser.add_subparsers(dest="command", required=True)

    imp = sub.add_parser("imputation", help="Deemed income of a non-rented property")
    imp.add_argument("--cadastral", required=True, help="Total cadastral value, e.g. 150000.00")
    imp.add_argument("--purchase-date", required=True, help="Purchase date (YYYY-MM-DD)")
    imp.add_argument("--ownership", default=None, help="Ownership percentage (default: 100)")
    imp.add_argument("--year", type=int, default=None, help="Fiscal year (default: current)")
    imp.add_argument("--days", type=int, default=None, help="Days in the year (default: 365)")
    imp.add_argument("--pct", default=None, help="Imputation rate override, 1.1 or 2.0")
    imp.add_argument("--as-of", type=date.fromisoformat, default=None, help="Reference date for the property age (YYYY-MM-DD)")
    imp.set_defaults(func=_run_imputation)

    amort = sub.add_parser("amortizable-value", help="Amortizable value from a JSON file")
    amort.add_argument("file", help="JSON with 'property' and 'documents'")
    amort.set_defaults(func=_run_amortizable_value)

    days = sub.add_parser("rented-days", help="Rented days from a JSON file")
    days.add_argument("file", help="JSON with 'year' and 'contracts'")
    days.set_defaults(func=_run_rented_days)

    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=settings.log_level)
    args = build_parser().parse_args(argv)

    try:
        args.func(args)
    except Modelo210Error as e:
        logger.debug("%s: %s", e.error_code, e.context)
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except (OSError, ValidationError) as e:
        print(f"Error: cannot read {args.file}: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
