from datetime import date
from decimal import Decimal

import pytest

from conftest import make_expense
from modelo210.engine.expenses import (
    calculate_deductible_expenses,
    expense_type_label,
    generates_negative_income,
    is_proportional,
)
from modelo210.errors import InvalidInputError
from modelo210.models.expense import ExpenseType


class TestClassification:
    @pytest.mark.parametrize("expense_type", [
        ExpenseType.PROPERTY_TAX,
        ExpenseType.COMMUNITY_FEES,
        ExpenseType.INSURANCE,
        ExpenseType.MORTGAGE_INTEREST,
        ExpenseType.UTILITIES,
        ExpenseType.UPKEEP,
    ])
    def test_proportional_types(self, expense_type):
        assert is_proportional(expense_type)

    @pytest.mark.parametrize("expense_type", [
        ExpenseType.REPAIRS,
        ExpenseType.MANAGEMENT_FEES,
        ExpenseType.AGENCY_FEES,
        ExpenseType.LEGAL_FEES,
        ExpenseType.ADVERTISING,
        ExpenseType.OTHER,
    ])
    def test_fully_deductible_types(self, expense_type):
        assert not is_proportional(expense_type)

    def test_only_repairs_and_interest_generate_negative_income(self):
        generating = {t for t in ExpenseType if generates_negative_income(t)}
        assert generating == {ExpenseType.REPAIRS, ExpenseType.MORTGAGE_INTEREST}

    def test_every_type_has_a_label(self):
        assert expense_type_label(ExpenseType.PROPERTY_TAX).startswith("IBI")
        assert all(expense_type_label(t) for t in ExpenseType)


class TestDeductibleExpenses:
    def test_proportional_and_full(self):
        expenses = [
            make_expense(1, ExpenseType.PROPERTY_TAX, "365"),
            make_expense(2, ExpenseType.INSURANCE, "730"),
            make_expense(3, ExpenseType.REPAIRS, "500"),
            make_expense(4, ExpenseType.AGENCY_FEES, "100"),
        ]
        result = calculate_deductible_expenses(expenses, 73, 2023)
        assert result.proportional["ibi"].deductible == Decimal("73.00")
        assert result.proportional["seguro"].deductible == Decimal("146.00")
        assert result.proportional_total == Decimal("1095")
        assert result.proportional_subtotal == Decimal("219.00")
        assert result.fully_deductible == {"reparacion": Decimal("500"), "agencia": Decimal("100")}
        assert result.fully_deductible_subtotal == Decimal("600")
        assert result.total_deductible == Decimal("819.00")
        assert result.non_rented_days == 292

    def test_formula(self):
        expenses = [
            make_expense(1, ExpenseType.PROPERTY_TAX, "365"),
            make_expense(2, ExpenseType.REPAIRS, "500"),
        ]
        result = calculate_deductible_expenses(expenses, 73, 2023)
        assert result.formula == "Proporcionales: 365.00€ × (73/365) = 73.00€ | 100%: 500.00€"

    def test_each_proportional_expense_rounded_before_summing(self):
        """Two 100€ bills at 1 day: 0.27 + 0.27, not round(0.548)."""
        expenses = [
            make_expense(1, ExpenseType.UTILITIES, "100"),
            make_expense(2, ExpenseType.UTILITIES, "100"),
        ]
        result = calculate_deductible_expenses(expenses, 1, 2023)
        assert result.proportional["suministros"].total == Decimal("200")
        assert result.proportional_subtotal == Decimal("0.54")

    def test_expenses_of_other_years_ignored(self):
        expenses = [
            make_expense(1, ExpenseType.REPAIRS, "500", expense_date=date(2022, 12, 31)),
            make_expense(2, ExpenseType.REPAIRS, "200", expense_date=date(2023, 1, 1)),
        ]
        result = calculate_deductible_expenses(expenses, 365, 2023)
        assert result.total_deductible == Decimal("200")

    def test_not_rented_deducts_only_full_expenses(self):
        expenses = [
            make_expense(1, ExpenseType.COMMUNITY_FEES, "1200"),
            make_expense(2, ExpenseType.LEGAL_FEES, "300"),
        ]
        result = calculate_deductible_expenses(expenses, 0, 2023)
        assert result.proportional_subtotal == Decimal("0")
        assert result.total_deductible == Decimal("300")

    def test_no_expenses(self):
        result = calculate_deductible_expenses([], 200, 2023)
        assert result.total_deductible == Decimal("0")
        assert result.proportional == {}

    def test_leap_year_full_occupancy_uses_365(self):
        expenses = [make_expense(1, ExpenseType.PROPERTY_TAX, "365", expense_date=date(2024, 3, 1))]
        result = calculate_deductible_expenses(expenses, 366, 2024)
        assert result.proportional_subtotal == Decimal("366.00")
        assert result.non_rented_days == 0

    def test_days_out_of_range(self):
        with pytest.raises(InvalidInputError):
            calculate_deductible_expenses([], -1, 2023)

    def test_subtotals_carry_cents(self):
        result = calculate_deductible_expenses([make_expense(1, ExpenseType.REPAIRS, "500")], 0, 2023)
        assert str(result.fully_deductible["reparacion"]) == "500.00"
        assert str(result.proportional_subtotal) == "0.00"
        assert str(result.total_deductible) == "500.00"

    def test_idempotent(self):
        expenses = [
            make_expense(1, ExpenseType.PROPERTY_TAX, "365"),
            make_expense(2, ExpenseType.UTILITIES, "100"),
            make_expense(3, ExpenseType.REPAIRS, "500"),
        ]
        first = calculate_deductible_expenses(expenses, 73, 2023)
        assert first == calculate_deductible_expenses(expenses, 73, 2023)
