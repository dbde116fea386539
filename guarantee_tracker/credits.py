"""
Bank Credit Module

Loans drawn from banks against projects, tracked separately from guarantee
letters. Repayments are recorded as a running total on the credit itself.
"""

from decimal import Decimal
from datetime import date
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .exceptions import ValidationError
from .repository import Linked, LinkedRepository
from .storage import StorageRecord


class CreditStatus(Enum):
    """Credit lifecycle status"""
    ONGOING = "ongoing"
    CLOSED = "closed"
    CANCELLED = "cancelled"


@dataclass
class Credit(StorageRecord):
    bank_id: str
    project_id: str
    principal_amount: Decimal
    interest_amount: Decimal
    currency: str
    credit_date: date
    maturity_date: date
    total_repaid_amount: Decimal = Decimal('0')
    status: CreditStatus = CreditStatus.ONGOING
    notes: Optional[str] = None

    def __post_init__(self):
        super().__post_init__()
        if not self.currency or not self.currency.strip():
            raise ValidationError.for_field("currency", "Currency is required")
        self.currency = self.currency.strip().upper()

    @property
    def total_amount(self) -> Decimal:
        """Principal plus interest"""
        return self.principal_amount + self.interest_amount

    @property
    def outstanding_amount(self) -> Decimal:
        return self.total_amount - self.total_repaid_amount


class CreditManager(LinkedRepository[Credit]):
    """Credits table with bank/project joins"""

    record_type = Credit
    table_name = "credits"
    entity_name = "Credit"

    def list_credits(self, project_id: Optional[str] = None,
                     bank_id: Optional[str] = None) -> List[Linked[Credit]]:
        """All credits, newest first; a project filter takes precedence over a bank filter"""
        if project_id:
            return self.list_linked({"project_id": project_id})
        if bank_id:
            return self.list_linked({"bank_id": bank_id})
        return self.list_linked()

    def get_credit(self, credit_id: str) -> Optional[Linked[Credit]]:
        return self.get_linked(credit_id)
