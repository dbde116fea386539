"""
Dashboard Reporting Module

Counts, totals and due-date windows for the dashboard summary cards. All
figures come from a linear scan of the full letter and credit lists; nothing
is cached between requests.
"""

from decimal import Decimal
from datetime import date, datetime, timedelta, timezone
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from .credits import Credit, CreditStatus
from .currency import CurrencyConverter, round_money
from .letters import GuaranteeLetter, LetterStatus

# Letters/credits falling due within this many days count as upcoming
UPCOMING_WINDOW_DAYS = 30


@dataclass
class DashboardStats:
    total_letters: int = 0
    active_letters: int = 0
    total_letter_amount: Decimal = Decimal('0')
    total_credits: int = 0
    active_credits: int = 0
    total_credit_amount: Decimal = Decimal('0')
    total_repaid_amount: Decimal = Decimal('0')
    upcoming_letter_payments: int = 0
    upcoming_credit_payments: int = 0
    overdue_letter_payments: int = 0
    overdue_credit_payments: int = 0
    total_projects: int = 0
    total_banks: int = 0
    currency: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_letters": self.total_letters,
            "active_letters": self.active_letters,
            "total_letter_amount": str(round_money(self.total_letter_amount)),
            "total_credits": self.total_credits,
            "active_credits": self.active_credits,
            "total_credit_amount": str(round_money(self.total_credit_amount)),
            "total_repaid_amount": str(round_money(self.total_repaid_amount)),
            "upcoming_letter_payments": self.upcoming_letter_payments,
            "upcoming_credit_payments": self.upcoming_credit_payments,
            "overdue_letter_payments": self.overdue_letter_payments,
            "overdue_credit_payments": self.overdue_credit_payments,
            "total_projects": self.total_projects,
            "total_banks": self.total_banks,
            "currency": self.currency,
        }


def is_overdue(due: Optional[date], still_open: bool, today: date) -> bool:
    """
    Open item whose due date has been reached.

    Due dates carry no time of day, so an item due today is already overdue.
    """
    return due is not None and still_open and due <= today


def is_upcoming(due: Optional[date], today: date) -> bool:
    """Due after today and no more than UPCOMING_WINDOW_DAYS ahead"""
    if due is None:
        return False
    return today < due <= today + timedelta(days=UPCOMING_WINDOW_DAYS)


def compute_dashboard_stats(
    letters: Iterable[GuaranteeLetter],
    credits: Iterable[Credit],
    project_count: int,
    bank_count: int,
    converter: Optional[CurrencyConverter] = None,
    target_currency: Optional[str] = None,
    today: Optional[date] = None,
) -> DashboardStats:
    """
    Aggregate dashboard figures.

    Args:
        letters: All guarantee letters
        credits: All credits
        project_count: Number of projects
        bank_count: Number of banks
        converter: Rate table used when ``target_currency`` is given
        target_currency: Currency to express totals in; amounts are summed
            as stored when omitted
        today: Reference date, defaults to the current UTC date

    Returns:
        DashboardStats
    """
    if today is None:
        today = datetime.now(timezone.utc).date()
    if target_currency and converter is None:
        converter = CurrencyConverter()

    def amount_in_target(amount: Decimal, currency: str) -> Decimal:
        if not target_currency:
            return amount
        return converter.convert(amount, currency, target_currency)

    stats = DashboardStats(
        total_projects=project_count,
        total_banks=bank_count,
        currency=target_currency.upper() if target_currency else None,
    )

    for letter in letters:
        stats.total_letters += 1
        is_active = letter.status == LetterStatus.ACTIVE
        if is_active:
            stats.active_letters += 1
        stats.total_letter_amount += amount_in_target(letter.letter_amount, letter.currency)

        # Any letter expiring soon is upcoming; only active ones become overdue
        if is_upcoming(letter.expiry_date, today):
            stats.upcoming_letter_payments += 1
        if is_overdue(letter.expiry_date, is_active, today):
            stats.overdue_letter_payments += 1

    for credit in credits:
        stats.total_credits += 1
        is_ongoing = credit.status == CreditStatus.ONGOING
        if is_ongoing:
            stats.active_credits += 1
        stats.total_credit_amount += amount_in_target(credit.total_amount, credit.currency)
        stats.total_repaid_amount += amount_in_target(credit.total_repaid_amount, credit.currency)

        if is_ongoing and is_upcoming(credit.maturity_date, today):
            stats.upcoming_credit_payments += 1
        if is_overdue(credit.maturity_date, is_ongoing, today):
            stats.overdue_credit_payments += 1

    return stats
