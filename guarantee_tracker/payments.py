"""
Letter Payment Module

Installments paid against a guarantee letter's commission, and the
reconciliation of those payments against the commission owed.

Reconciliation is recomputed from the stored rows on every request:

    total_commission     = letter_amount * commission_rate / 100 + bsmv_and_other_costs
    total_paid           = sum(payment.amount)
    remaining_commission = total_commission - total_paid
    total_bsmv           = sum(payment.bsmv)

``total_bsmv`` is reported next to, not netted against, the letter's own
``bsmv_and_other_costs``. Overpayment is allowed and shows up as a negative
remaining commission.
"""

from decimal import Decimal
from datetime import date
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from .currency import round_money
from .exceptions import ConstraintViolationError, ValidationError
from .letters import GuaranteeLetter, total_commission
from .repository import Repository
from .storage import StorageInterface, StorageRecord


@dataclass
class LetterPayment(StorageRecord):
    letter_id: str
    payment_date: date
    amount: Decimal
    bsmv: Decimal = Decimal('0')
    receipt_no: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self):
        super().__post_init__()
        if self.amount < Decimal('0'):
            raise ValidationError.for_field("amount", "Payment amount cannot be negative")
        if self.bsmv < Decimal('0'):
            raise ValidationError.for_field("bsmv", "BSMV cannot be negative")


@dataclass
class PaymentSummary:
    """Commission reconciliation for one letter"""
    letter_id: str
    total_commission: Decimal
    total_paid: Decimal
    total_bsmv: Decimal
    remaining_commission: Decimal
    payment_count: int
    last_payment_date: Optional[date]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "letter_id": self.letter_id,
            "total_commission": str(round_money(self.total_commission)),
            "total_paid": str(round_money(self.total_paid)),
            "total_bsmv": str(round_money(self.total_bsmv)),
            "remaining_commission": str(round_money(self.remaining_commission)),
            "payments": self.payment_count,
            "last_payment_date": self.last_payment_date.isoformat() if self.last_payment_date else None,
        }


def summarize_payments(letter: GuaranteeLetter, payments: Iterable[LetterPayment]) -> PaymentSummary:
    """Reconcile a letter's commission against its payments"""
    commission = total_commission(letter)
    total_paid = Decimal('0')
    total_bsmv = Decimal('0')
    last_payment_date: Optional[date] = None
    count = 0

    for payment in payments:
        count += 1
        total_paid += payment.amount
        total_bsmv += payment.bsmv or Decimal('0')
        if last_payment_date is None or payment.payment_date > last_payment_date:
            last_payment_date = payment.payment_date

    return PaymentSummary(
        letter_id=letter.id,
        total_commission=commission,
        total_paid=total_paid,
        total_bsmv=total_bsmv,
        remaining_commission=commission - total_paid,
        payment_count=count,
        last_payment_date=last_payment_date,
    )


def summarize_all(letters: Iterable[GuaranteeLetter],
                  payments: Iterable[LetterPayment]) -> List[PaymentSummary]:
    """One summary per letter, grouping payments in a single pass"""
    by_letter: Dict[str, List[LetterPayment]] = {}
    for payment in payments:
        by_letter.setdefault(payment.letter_id, []).append(payment)

    return [summarize_payments(letter, by_letter.get(letter.id, [])) for letter in letters]


class LetterPaymentManager(Repository[LetterPayment]):
    """Letter payments table; each payment must point at an existing letter"""

    record_type = LetterPayment
    table_name = "letter_payments"
    entity_name = "Letter payment"

    def __init__(self, storage: StorageInterface, letters: Repository):
        super().__init__(storage)
        self.letters = letters

    def before_save(self, record: LetterPayment, changed: set) -> None:
        if "letter_id" in changed and not self.letters.exists(record.letter_id):
            raise ConstraintViolationError(
                f"Payment references unknown guarantee letter {record.letter_id}", field="letter_id"
            )

    def list_for_letter(self, letter_id: str) -> List[LetterPayment]:
        return self.list({"letter_id": letter_id})

    def summarize(self, letter_id: str) -> PaymentSummary:
        """Reconciliation for one letter; raises RecordNotFoundError for an unknown letter"""
        letter = self.letters.require(letter_id)
        return summarize_payments(letter, self.list_for_letter(letter_id))
