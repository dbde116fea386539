"""
Tests for letter payments and commission reconciliation
"""

import pytest
from decimal import Decimal
from datetime import date

from guarantee_tracker.exceptions import (
    ConstraintViolationError, RecordNotFoundError, ValidationError
)
from guarantee_tracker.letters import LetterType
from guarantee_tracker.payments import summarize_all
from guarantee_tracker.storage import InMemoryStorage
from guarantee_tracker.system import TrackerSystem


@pytest.fixture
def system():
    return TrackerSystem(InMemoryStorage())


@pytest.fixture
def letter(system):
    bank = system.banks.create(name="Halkbank")
    project = system.projects.create(name="Hospital")
    return system.letters.create(
        bank_id=bank.id,
        project_id=project.id,
        letter_type=LetterType.ADVANCE,
        contract_amount=Decimal("1000000"),
        letter_percentage=Decimal("10"),
        letter_amount=Decimal("100000"),
        commission_rate=Decimal("2"),
        bsmv_and_other_costs=Decimal("500"),
        currency="TRY",
        purchase_date=date(2024, 1, 10),
        letter_date=date(2024, 1, 12),
    )


class TestLetterPayments:
    """Payment records"""

    def test_create_payment(self, system, letter):
        payment = system.payments.create(
            letter_id=letter.id, payment_date=date(2024, 2, 1), amount="1000", receipt_no="R-1"
        )
        assert payment.amount == Decimal("1000")
        assert payment.bsmv == Decimal("0")
        assert payment.description is None

    def test_unknown_letter_rejected(self, system):
        with pytest.raises(ConstraintViolationError):
            system.payments.create(letter_id="missing", payment_date=date(2024, 2, 1), amount="10")

    def test_negative_amount_rejected(self, system, letter):
        with pytest.raises(ValidationError):
            system.payments.create(letter_id=letter.id, payment_date=date(2024, 2, 1), amount="-1")

    def test_list_for_letter(self, system, letter):
        system.payments.create(letter_id=letter.id, payment_date=date(2024, 2, 1), amount="1000")
        system.payments.create(letter_id=letter.id, payment_date=date(2024, 3, 1), amount="500")
        assert len(system.payments.list_for_letter(letter.id)) == 2
        assert system.payments.list_for_letter("other") == []

    def test_payments_survive_letter_deletion(self, system, letter):
        payment = system.payments.create(letter_id=letter.id, payment_date=date(2024, 2, 1), amount="1")
        system.letters.delete(letter.id)
        assert system.payments.get(payment.id) is not None


class TestReconciliation:
    """Commission owed against commission paid"""

    def test_summary_without_payments(self, system, letter):
        summary = system.payments.summarize(letter.id)
        assert summary.total_commission == Decimal("2500")
        assert summary.total_paid == Decimal("0")
        assert summary.remaining_commission == Decimal("2500")
        assert summary.payment_count == 0
        assert summary.last_payment_date is None

    def test_summary_with_payments(self, system, letter):
        system.payments.create(letter_id=letter.id, payment_date=date(2024, 3, 1),
                               amount="1000", bsmv="50")
        system.payments.create(letter_id=letter.id, payment_date=date(2024, 2, 1),
                               amount="500", bsmv="25")

        summary = system.payments.summarize(letter.id)
        assert summary.total_paid == Decimal("1500")
        assert summary.total_bsmv == Decimal("75")
        assert summary.remaining_commission == Decimal("1000")
        assert summary.payment_count == 2
        assert summary.last_payment_date == date(2024, 3, 1)

        assert summary.to_dict() == {
            "letter_id": letter.id,
            "total_commission": "2500.00",
            "total_paid": "1500.00",
            "total_bsmv": "75.00",
            "remaining_commission": "1000.00",
            "payments": 2,
            "last_payment_date": "2024-03-01",
        }

    def test_overpayment_goes_negative(self, system, letter):
        system.payments.create(letter_id=letter.id, payment_date=date(2024, 2, 1), amount="3000")
        summary = system.payments.summarize(letter.id)
        assert summary.remaining_commission == Decimal("-500")

    def test_summary_for_unknown_letter(self, system):
        with pytest.raises(RecordNotFoundError):
            system.payments.summarize("missing")

    def test_summarize_all(self, system, letter):
        other = system.letters.create(**{
            **{k: v for k, v in letter.to_dict().items() if k not in ("id", "created_at", "updated_at")},
            "letter_amount": "20000",
            "bsmv_and_other_costs": "0",
        })
        system.payments.create(letter_id=letter.id, payment_date=date(2024, 2, 1), amount="100")

        summaries = {s.letter_id: s for s in summarize_all(system.letters.list(), system.payments.list())}
        assert summaries[letter.id].total_paid == Decimal("100")
        assert summaries[other.id].total_commission == Decimal("400")
        assert summaries[other.id].payment_count == 0
