from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

CADASTRAL_TOLERANCE = Decimal("0.01")


class PropertyType(Enum):
    VIVIENDA = "vivienda"
    GARAJE = "garaje"
    LOCAL = "local"
    OFICINA = "oficina"
    TERRENO = "terreno"
    OTRO = "otro"


class DeclarationType(Enum):
    IMPUTATION = "imputacion"  # Vacant or own use
    RENTAL = "alquiler"
    MIXED = "mixta"  # Rented part of the year


class DocumentType(Enum):
    PURCHASE_PRICE = "precio_compra"
    NOTARY_FEES = "gastos_notario"
    REGISTRY_FEES = "gastos_registro"
    TRANSFER_TAX = "itp"
    PURCHASE_VAT = "iva_compra"
    PURCHASE_AGENCY_FEES = "gastos_biuro_compra"
    REAL_ESTATE_AGENCY_FEES = "gastos_agencia"
    IMPROVEMENTS = "mejoras"


@dataclass(frozen=True)
class Property:
    property_id: int
    client_id: int  # Principal owner
    cadastral_reference: str
    purchase_date: date | None
    purchase_price: Decimal
    address: str = ""
    property_type: PropertyType = PropertyType.VIVIENDA
    declaration_type: DeclarationType = DeclarationType.IMPUTATION

    # From the IBI receipt
    cadastral_total: Decimal | None = None
    cadastral_land: Decimal | None = None
    cadastral_construction: Decimal | None = None

    # Derived, stored back by the caller after calculate_amortizable_value
    total_acquisition_value: Decimal | None = None
    construction_pct: Decimal | None = None
    amortizable_value: Decimal | None = None
    annual_amortization: Decimal | None = None

    @property
    def cadastral_split_consistent(self) -> bool:
        """Land + construction == total (within a cent) when all three are known."""
        if None in (self.cadastral_total, self.cadastral_land, self.cadastral_construction):
            return True
        split = self.cadastral_land + self.cadastral_construction
        return abs(split - self.cadastral_total) <= CADASTRAL_TOLERANCE


@dataclass(frozen=True)
class CoOwner:
    property_id: int
    client_id: int
    ownership_pct: Decimal  # 0 < pct <= 100
    name: str = ""
    start_date: date | None = None
    active: bool = True


@dataclass(frozen=True)
class AcquisitionDocument:
    document_id: int
    property_id: int
    document_type: DocumentType
    amount: Decimal
    document_date: date | None = None
    validated: bool = True
