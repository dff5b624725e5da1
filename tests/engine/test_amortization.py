from datetime import date
from decimal import Decimal

import pytest

from modelo210.engine.amortization import (
    acquisition_breakdown,
    apply_amortizable_value,
    calculate_amortizable_value,
    calculate_annual_amortization,
    resolve_owners,
)
from modelo210.errors import DataConsistencyError, InvalidInputError, PreconditionError
from modelo210.models.property import AcquisitionDocument, CoOwner, DocumentType, Property


def _doc(document_id, document_type, amount, validated=True):
    return AcquisitionDocument(
        document_id=document_id,
        property_id=1,
        document_type=document_type,
        amount=Decimal(amount),
        document_date=date(2020, 1, 15),
        validated=validated,
    )


def _with_cadastral(prop, total, land, construction) -> Property:
    return Property(
        property_id=prop.property_id,
        client_id=prop.client_id,
        cadastral_reference=prop.cadastral_reference,
        purchase_date=prop.purchase_date,
        purchase_price=prop.purchase_price,
        cadastral_total=total,
        cadastral_land=land,
        cadastral_construction=construction,
    )


class TestAmortizableValue:
    def test_no_documents_falls_back_to_purchase_price(self, flat):
        result = calculate_amortizable_value(flat, [])
        assert result.total_acquisition_value == Decimal("100000")
        assert result.acquisition.purchase_price == Decimal("100000")
        assert result.cadastral.construction_pct == Decimal("0.7000")
        assert result.amortizable_value == Decimal("70000.00")
        assert result.annual_amortization == Decimal("2100.00")

    def test_formula(self, flat):
        result = calculate_amortizable_value(flat, [])
        assert result.formula == (
            "100000.00€ × 70.00% = 70000.00€ → 70000.00€ × 3% = 2100.00€/año"
        )

    def test_documents_summed(self, flat):
        docs = [
            _doc(1, DocumentType.PURCHASE_PRICE, "100000"),
            _doc(2, DocumentType.NOTARY_FEES, "1000"),
            _doc(3, DocumentType.TRANSFER_TAX, "10000"),
            _doc(4, DocumentType.IMPROVEMENTS, "9000"),
        ]
        result = calculate_amortizable_value(flat, docs)
        assert result.total_acquisition_value == Decimal("120000")
        assert result.acquisition.transfer_tax == Decimal("10000")
        assert result.amortizable_value == Decimal("84000.00")
        assert result.annual_amortization == Decimal("2520.00")

    def test_unvalidated_documents_skipped(self):
        docs = [
            _doc(1, DocumentType.PURCHASE_PRICE, "100000"),
            _doc(2, DocumentType.NOTARY_FEES, "1000", validated=False),
        ]
        assert acquisition_breakdown(docs).total == Decimal("100000")

    def test_same_type_documents_accumulate(self):
        docs = [
            _doc(1, DocumentType.IMPROVEMENTS, "2500"),
            _doc(2, DocumentType.IMPROVEMENTS, "1500"),
        ]
        assert acquisition_breakdown(docs).improvements == Decimal("4000")

    def test_missing_cadastral_rejected(self, flat):
        prop = _with_cadastral(flat, None, None, None)
        with pytest.raises(InvalidInputError):
            calculate_amortizable_value(prop, [])

    def test_inconsistent_split_rejected(self, flat):
        prop = _with_cadastral(flat, Decimal("80000"), Decimal("24000"), Decimal("50000"))
        with pytest.raises(DataConsistencyError, match="≠ Total"):
            calculate_amortizable_value(prop, [])
        assert not prop.cadastral_split_consistent

    def test_split_within_a_cent_accepted(self, flat):
        prop = _with_cadastral(flat, Decimal("80000.00"), Decimal("24000.005"), Decimal("56000.00"))
        assert prop.cadastral_split_consistent
        calculate_amortizable_value(prop, [])

    def test_money_fields_carry_cents(self, flat):
        result = calculate_amortizable_value(flat, [])
        assert str(result.total_acquisition_value) == "100000.00"
        assert str(result.acquisition.purchase_price) == "100000.00"
        assert str(result.acquisition.notary_fees) == "0.00"
        cadastral = result.cadastral
        assert (str(cadastral.total), str(cadastral.land), str(cadastral.construction)) == (
            "80000.00", "24000.00", "56000.00"
        )

    def test_idempotent(self, flat):
        docs = [_doc(1, DocumentType.PURCHASE_PRICE, "100000"), _doc(2, DocumentType.NOTARY_FEES, "1000")]
        assert calculate_amortizable_value(flat, docs) == calculate_amortizable_value(flat, docs)

    def test_apply_stores_derived_fields(self, flat):
        result = calculate_amortizable_value(flat, [])
        updated = apply_amortizable_value(flat, result)
        assert updated.amortizable_value == Decimal("70000.00")
        assert updated.annual_amortization == Decimal("2100.00")
        assert updated.construction_pct == Decimal("0.7000")
        assert flat.annual_amortization is None


class TestOwners:
    def test_principal_owner_when_no_co_owners(self, flat):
        (owner,) = resolve_owners(flat, [])
        assert owner.client_id == 10
        assert owner.ownership_pct == Decimal("100")

    def test_inactive_co_owners_ignored(self, flat, half_owners):
        retired = CoOwner(property_id=1, client_id=12, ownership_pct=Decimal("30"), active=False)
        assert resolve_owners(flat, half_owners + [retired]) == half_owners

    def test_shares_over_100_rejected(self, flat, half_owners):
        extra = CoOwner(property_id=1, client_id=12, ownership_pct=Decimal("10"))
        with pytest.raises(DataConsistencyError):
            resolve_owners(flat, half_owners + [extra])

    def test_zero_share_rejected(self, flat):
        with pytest.raises(InvalidInputError):
            resolve_owners(flat, [CoOwner(property_id=1, client_id=12, ownership_pct=Decimal("0"))])


class TestAnnualAmortization:
    def test_prorated_by_rented_days(self, rented_flat):
        result = calculate_annual_amortization(rented_flat, 183, [], 2023)
        assert result.prorated_amortization == Decimal("1052.88")
        assert result.non_rented_days == 182
        assert result.formula == "2100.00€ × (183/365) = 1052.88€"

    def test_split_across_co_owners(self, rented_flat):
        owners = [
            CoOwner(property_id=1, client_id=10, ownership_pct=Decimal("60")),
            CoOwner(property_id=1, client_id=11, ownership_pct=Decimal("40")),
        ]
        result = calculate_annual_amortization(rented_flat, 183, owners, 2023)
        shares = [o.amortization for o in result.owners]
        assert shares == [Decimal("631.73"), Decimal("421.15")]
        assert abs(sum(shares) - result.prorated_amortization) <= Decimal("0.01") * len(shares)

    def test_full_year(self, rented_flat):
        result = calculate_annual_amortization(rented_flat, 365, [], 2023)
        assert result.prorated_amortization == Decimal("2100.00")
        assert result.owners[0].amortization == Decimal("2100.00")

    def test_leap_year_uses_365_denominator(self, rented_flat):
        result = calculate_annual_amortization(rented_flat, 366, [], 2024)
        assert result.prorated_amortization == Decimal("2105.75")
        assert result.non_rented_days == 0

    def test_zero_days(self, rented_flat):
        result = calculate_annual_amortization(rented_flat, 0, [], 2023)
        assert result.prorated_amortization == Decimal("0.00")
        assert result.non_rented_days == 365

    def test_requires_amortizable_value(self, flat):
        with pytest.raises(PreconditionError, match="must calculate amortizable value first"):
            calculate_annual_amortization(flat, 100, [], 2023)

    def test_days_out_of_range(self, rented_flat):
        with pytest.raises(InvalidInputError):
            calculate_annual_amortization(rented_flat, 367, [], 2024)

    def test_idempotent(self, rented_flat, half_owners):
        first = calculate_annual_amortization(rented_flat, 183, half_owners, 2023)
        assert first == calculate_annual_amortization(rented_flat, 183, half_owners, 2023)
