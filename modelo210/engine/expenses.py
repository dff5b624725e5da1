"""Deductible expenses of a rented property for Modelo 210.

Spanish non-resident rules split rental expenses in two groups:

1. Proportional (prorated by rented days): IBI, community fees, insurance,
   mortgage interest, utilities, upkeep.
   Deductible = amount x (rented days / 365)
2. 100% deductible: repairs, management, agency, legal, advertising, other.

Only repairs and mortgage interest may push the result below zero
(see negative_income.py).

Pure functions. No I/O.
"""

from decimal import Decimal

from modelo210.engine.amortization import AMORTIZATION_YEAR_DAYS
from modelo210.engine.money import ZERO, fmt2, round2
from modelo210.errors import InvalidInputError
from modelo210.models.expense import Expense, ExpenseType
from modelo210.models.results import DeductibleExpensesResult, ProportionalExpense

PROPORTIONAL_TYPES = frozenset({
    ExpenseType.PROPERTY_TAX,
    ExpenseType.COMMUNITY_FEES,
    ExpenseType.INSURANCE,
    ExpenseType.MORTGAGE_INTEREST,
    ExpenseType.UTILITIES,
    ExpenseType.UPKEEP,
})

NEGATIVE_INCOME_TYPES = frozenset({ExpenseType.REPAIRS, ExpenseType.MORTGAGE_INTEREST})

EXPENSE_TYPE_LABELS: dict[ExpenseType, str] = {
    ExpenseType.PROPERTY_TAX: "IBI (Impuesto Bienes Inmuebles)",
    ExpenseType.COMMUNITY_FEES: "Comunidad de propietarios",
    ExpenseType.INSURANCE: "Seguros",
    ExpenseType.MORTGAGE_INTEREST: "Intereses hipoteca",
    ExpenseType.UTILITIES: "Suministros",
    ExpenseType.UPKEEP: "Gastos de conservación",
    ExpenseType.REPAIRS: "Reparaciones",
    ExpenseType.MANAGEMENT_FEES: "Gestoría/Biuro",
    ExpenseType.AGENCY_FEES: "Agencia inmobiliaria",
    ExpenseType.LEGAL_FEES: "Servicios jurídicos",
    ExpenseType.ADVERTISING: "Publicidad",
    ExpenseType.OTHER: "Otros gastos",
}


def is_proportional(expense_type: ExpenseType) -> bool:
    return expense_type in PROPORTIONAL_TYPES


def generates_negative_income(expense_type: ExpenseType) -> bool:
    return expense_type in NEGATIVE_INCOME_TYPES


def expense_type_label(expense_type: ExpenseType) -> str:
    return EXPENSE_TYPE_LABELS[expense_type]


def calculate_deductible_expenses(
    expenses: list[Expense],
    rented_days: int,
    year: int,
) -> DeductibleExpensesResult:
    """Deductible expenses of a property for one fiscal year.

    Expenses dated outside the year are ignored. Each proportional expense is
    prorated and rounded to cents before it is added to its type's total.

    Args:
        expenses: Expenses of the property
        rented_days: Days rented in the year
        year: Fiscal year
    """
    if not 0 <= rented_days <= 366:
        raise InvalidInputError(
            f"Rented days must be between 0 and 366, got {rented_days}",
            context={"rented_days": rented_days},
        )

    proportional: dict[str, ProportionalExpense] = {}
    fully_deductible: dict[str, Decimal] = {}
    gross_proportional = ZERO
    proportional_subtotal = ZERO
    fully_subtotal = ZERO

    for expense in expenses:
        if expense.expense_date.year != year:
            continue
        key = expense.expense_type.value

        if is_proportional(expense.expense_type):
            deductible = round2(expense.amount * rented_days / AMORTIZATION_YEAR_DAYS)
            bucket = proportional.setdefault(key, ProportionalExpense())
            bucket.total = round2(bucket.total + expense.amount)
            bucket.deductible += deductible
            gross_proportional += expense.amount
            proportional_subtotal += deductible
        else:
            fully_deductible[key] = round2(fully_deductible.get(key, ZERO) + expense.amount)
            fully_subtotal += expense.amount

    formula = (
        f"Proporcionales: {fmt2(gross_proportional)}€ × ({rented_days}/{AMORTIZATION_YEAR_DAYS}) "
        f"= {fmt2(proportional_subtotal)}€ | 100%: {fmt2(fully_subtotal)}€"
    )

    return DeductibleExpensesResult(
        year=year,
        rented_days=rented_days,
        non_rented_days=max(AMORTIZATION_YEAR_DAYS - rented_days, 0),
        proportional=proportional,
        proportional_total=round2(gross_proportional),
        proportional_subtotal=round2(proportional_subtotal),
        fully_deductible=fully_deductible,
        fully_deductible_subtotal=round2(fully_subtotal),
        total_deductible=round2(proportional_subtotal + fully_subtotal),
        formula=formula,
    )
