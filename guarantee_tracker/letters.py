"""
Guarantee Letter Module

Bank-issued guarantee letters backing a project's contractual obligations,
with their commission and extra-cost terms.
"""

from decimal import Decimal
from datetime import date
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .exceptions import ValidationError
from .repository import Linked, LinkedRepository
from .storage import StorageRecord


class LetterType(Enum):
    """Kind of guarantee"""
    STANDARD = "standard"     # Plain performance/bid guarantee
    ADVANCE = "advance"       # Advance payment guarantee
    FINAL = "final"           # Final (definitive) guarantee
    TEMPORARY = "temporary"   # Temporary (tender) guarantee


class LetterStatus(Enum):
    """Letter lifecycle status"""
    ACTIVE = "active"
    PENDING = "pending"
    CLOSED = "closed"
    CANCELLED = "cancelled"


@dataclass
class GuaranteeLetter(StorageRecord):
    """
    A guarantee letter.

    ``letter_amount`` is stored as entered; it usually equals
    ``contract_amount * letter_percentage / 100`` but nothing enforces that.
    ``bsmv_and_other_costs`` is a fixed cost added on top of the commission
    and is unrelated to the ``bsmv`` recorded on individual payments.
    """
    bank_id: str
    project_id: str
    letter_type: LetterType
    contract_amount: Decimal
    letter_percentage: Decimal
    letter_amount: Decimal
    commission_rate: Decimal
    currency: str
    purchase_date: date
    letter_date: date
    bsmv_and_other_costs: Decimal = Decimal('0')
    expiry_date: Optional[date] = None
    status: LetterStatus = LetterStatus.ACTIVE
    notes: Optional[str] = None

    def __post_init__(self):
        super().__post_init__()
        if not self.currency or not self.currency.strip():
            raise ValidationError.for_field("currency", "Currency is required")
        self.currency = self.currency.strip().upper()

    @property
    def total_commission(self) -> Decimal:
        """Commission owed to the bank, independent of any payments"""
        return total_commission(self)

    def nominal_letter_amount(self) -> Decimal:
        """What the letter amount would be if derived from the contract"""
        return self.contract_amount * self.letter_percentage / Decimal('100')


def total_commission(letter: GuaranteeLetter) -> Decimal:
    """letter_amount * commission_rate / 100 + bsmv_and_other_costs"""
    return (
        letter.letter_amount * letter.commission_rate / Decimal('100')
        + (letter.bsmv_and_other_costs or Decimal('0'))
    )


class GuaranteeLetterManager(LinkedRepository[GuaranteeLetter]):
    """Guarantee letters table with bank/project joins"""

    record_type = GuaranteeLetter
    table_name = "guarantee_letters"
    entity_name = "Guarantee letter"

    def list_letters(self, project_id: Optional[str] = None,
                     bank_id: Optional[str] = None) -> List[Linked[GuaranteeLetter]]:
        """All letters, newest first; a project filter takes precedence over a bank filter"""
        if project_id:
            return self.list_linked({"project_id": project_id})
        if bank_id:
            return self.list_linked({"bank_id": bank_id})
        return self.list_linked()

    def get_letter(self, letter_id: str) -> Optional[Linked[GuaranteeLetter]]:
        return self.get_linked(letter_id)
