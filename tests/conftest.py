"""Canonical test fixtures used across engine and API tests.

Fixture property: flat bought 2020-01-15 for 100,000€, cadastral value
80,000€ (24,000€ land / 56,000€ construction), principal owner client #10.
Every fixture pins its dates; nothing depends on today's date.
"""

import pytest
from datetime import date
from decimal import Decimal

from modelo210.models.contract import ContractStatus, RentalContract
from modelo210.models.expense import Expense, ExpenseType
from modelo210.models.property import CoOwner, DeclarationType, Property

AS_OF = date(2024, 12, 31)


def make_contract(contract_id, start, end, rent="913.20", status=ContractStatus.ACTIVE, property_id=1):
    """913.20€/month is exactly 30€/day at 30.44 days per month."""
    return RentalContract(
        contract_id=contract_id,
        property_id=property_id,
        start_date=start,
        end_date=end,
        monthly_rent=Decimal(rent),
        tenant_name=f"Tenant{contract_id}",
        tenant_surname="Nowak",
        status=status,
    )


def make_expense(expense_id, expense_type, amount, expense_date=date(2023, 6, 1), property_id=1):
    return Expense(
        expense_id=expense_id,
        property_id=property_id,
        expense_type=expense_type,
        amount=Decimal(amount),
        expense_date=expense_date,
    )


@pytest.fixture
def flat() -> Property:
    """Own-use flat, no amortization calculated yet."""
    return Property(
        property_id=1,
        client_id=10,
        cadastral_reference="9872023VH5797S0001WX",
        purchase_date=date(2020, 1, 15),
        purchase_price=Decimal("100000"),
        address="Calle Mayor 1, Alicante",
        cadastral_total=Decimal("80000"),
        cadastral_land=Decimal("24000"),
        cadastral_construction=Decimal("56000"),
    )


@pytest.fixture
def rented_flat(flat) -> Property:
    """Same flat, rented, with 2,100€/year amortization already derived."""
    return Property(
        property_id=flat.property_id,
        client_id=flat.client_id,
        cadastral_reference=flat.cadastral_reference,
        purchase_date=flat.purchase_date,
        purchase_price=flat.purchase_price,
        address=flat.address,
        declaration_type=DeclarationType.RENTAL,
        cadastral_total=flat.cadastral_total,
        cadastral_land=flat.cadastral_land,
        cadastral_construction=flat.cadastral_construction,
        annual_amortization=Decimal("2100.00"),
    )


@pytest.fixture
def half_owners() -> list[CoOwner]:
    return [
        CoOwner(property_id=1, client_id=10, ownership_pct=Decimal("50"), name="Anna Kowalska"),
        CoOwner(property_id=1, client_id=11, ownership_pct=Decimal("50"), name="Piotr Kowalski"),
    ]


@pytest.fixture
def year_2023_contract() -> RentalContract:
    """Whole of 2023: 365 days, 10,950€ estimated income."""
    return make_contract(1, date(2023, 1, 1), date(2023, 12, 31))


@pytest.fixture
def expenses_2023() -> list[Expense]:
    return [
        make_expense(1, ExpenseType.PROPERTY_TAX, "365"),
        make_expense(2, ExpenseType.REPAIRS, "500"),
    ]
