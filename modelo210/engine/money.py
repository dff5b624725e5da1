"""Decimal helpers shared by the calculators.

Money never goes through float: amounts arrive as Decimal or decimal strings
and are rounded half-up to cents at each derived step.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from modelo210.errors import InvalidInputError

TWO_PLACES = Decimal("0.01")
FOUR_PLACES = Decimal("0.0001")
ZERO = Decimal("0")
HUNDRED = Decimal("100")

EURO_SUFFIX = "\u00a0€"  # es-ES puts a no-break space before the sign


def round2(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, ROUND_HALF_UP)


def round4(value: Decimal) -> Decimal:
    return value.quantize(FOUR_PLACES, ROUND_HALF_UP)


def to_decimal(value, field: str) -> Decimal:
    """Parse a Decimal, int or numeric string. Floats go through str()."""
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool) or value is None:
        raise InvalidInputError(f"{field} is required", context={"field": field})
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidInputError(
                f"{field} is not a valid number: {value!r}", context={"field": field}
            )
    if not result.is_finite():
        raise InvalidInputError(
            f"{field} is not a valid number: {value!r}", context={"field": field}
        )
    return result


def fmt2(value: Decimal) -> str:
    """Plain two-decimal rendering, as used in audit formulas."""
    return f"{round2(value):.2f}"


def fmt_number(value: Decimal) -> str:
    """Shortest rendering: 1.1 -> '1.1', 2.0 -> '2'."""
    return format(value.normalize(), "f")


def format_euros(value: Decimal) -> str:
    """es-ES currency format: 150.000,00 €.

    Thousands are grouped only from five integer digits on (1650,00 €).
    """
    q = round2(value)
    sign = "-" if q < 0 else ""
    integer, _, cents = f"{abs(q):.2f}".partition(".")
    if len(integer) > 4:
        integer = f"{int(integer):,}".replace(",", ".")
    return f"{sign}{integer},{cents}{EURO_SUFFIX}"
