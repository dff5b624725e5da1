from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum


class ContractStatus(Enum):
    ACTIVE = "activo"
    FINISHED = "finalizado"
    CANCELLED = "cancelado"
    RENEWED = "renovado"


# Statuses that count towards rented days
COUNTING_STATUSES = frozenset(
    {ContractStatus.ACTIVE, ContractStatus.FINISHED, ContractStatus.RENEWED}
)


@dataclass(frozen=True)
class RentalContract:
    contract_id: int
    property_id: int
    start_date: date
    end_date: date
    monthly_rent: Decimal
    tenant_name: str
    tenant_surname: str = ""
    status: ContractStatus = ContractStatus.ACTIVE

    @property
    def tenant(self) -> str:
        if self.tenant_surname:
            return f"{self.tenant_name} {self.tenant_surname}".strip()
        return self.tenant_name

    @property
    def counts(self) -> bool:
        return self.status in COUNTING_STATUSES
