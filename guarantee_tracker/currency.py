"""
Multi-Currency Support Module

Currency reference data, the manually maintained exchange-rate table, and
conversion between currencies using the stored rates. Monetary values are
Decimal throughout; output is rounded to 2 decimal places.
"""

from decimal import Decimal, ROUND_HALF_UP, getcontext
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .exceptions import ConstraintViolationError, ValidationError
from .logging_config import get_logger, log_action
from .repository import Repository
from .storage import StorageRecord

# Set global decimal context for financial precision
getcontext().prec = 28

MONEY_PLACES = Decimal('0.01')

logger = get_logger(__name__)


def round_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places for display and API output"""
    return value.quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def normalize_code(code: str) -> str:
    return code.strip().upper()


@dataclass
class CurrencyInfo(StorageRecord):
    """A currency offered for display and conversion"""
    code: str
    name: str
    symbol: Optional[str] = None
    is_active: bool = True

    def __post_init__(self):
        super().__post_init__()
        if not self.code or not self.code.strip():
            raise ValidationError.for_field("code", "Currency code is required")
        if not self.name or not self.name.strip():
            raise ValidationError.for_field("name", "Currency name is required")
        self.code = normalize_code(self.code)


@dataclass
class ExchangeRate(StorageRecord):
    """
    Multiplier converting one unit of ``from_currency`` into ``to_currency``.

    At most one row exists per ordered pair; the table has no history, so
    every conversion uses the current rate.
    """
    from_currency: str
    to_currency: str
    rate: Decimal

    def __post_init__(self):
        super().__post_init__()
        self.from_currency = normalize_code(self.from_currency)
        self.to_currency = normalize_code(self.to_currency)
        if self.rate <= Decimal('0'):
            raise ValidationError.for_field("rate", "Exchange rate must be positive")
        if self.from_currency == self.to_currency:
            raise ValidationError.for_field("to_currency", "Exchange rate needs two different currencies")


class CurrencyManager(Repository[CurrencyInfo]):
    """Currencies table; codes are unique"""

    record_type = CurrencyInfo
    table_name = "currencies"
    entity_name = "Currency"

    def list_active(self) -> List[CurrencyInfo]:
        return [currency for currency in self.list() if currency.is_active]

    def get_by_code(self, code: str) -> Optional[CurrencyInfo]:
        matches = self.storage.find(self.table_name, {"code": normalize_code(code)})
        if matches:
            return self._from_dict(matches[0])
        return None

    def before_save(self, record: CurrencyInfo, changed: set) -> None:
        if "code" not in changed:
            return
        existing = self.get_by_code(record.code)
        if existing and existing.id != record.id:
            raise ConstraintViolationError(f"Currency {record.code} already exists", field="code")


class ExchangeRateManager(Repository[ExchangeRate]):
    """Exchange-rate table keyed by (from_currency, to_currency)"""

    record_type = ExchangeRate
    table_name = "exchange_rates"
    entity_name = "Exchange rate"

    def list(self, filters=None) -> List[ExchangeRate]:
        """Most recently updated first"""
        rates = super().list(filters)
        rates.sort(key=lambda r: r.updated_at, reverse=True)
        return rates

    def get_rate(self, from_currency: str, to_currency: str) -> Optional[ExchangeRate]:
        """Stored row for exactly this ordered pair"""
        matches = self.storage.find(self.table_name, {
            "from_currency": normalize_code(from_currency),
            "to_currency": normalize_code(to_currency),
        })
        if matches:
            return self._from_dict(matches[0])
        return None

    def before_save(self, record: ExchangeRate, changed: set) -> None:
        if not changed & {"from_currency", "to_currency"}:
            return
        existing = self.get_rate(record.from_currency, record.to_currency)
        if existing and existing.id != record.id:
            raise ConstraintViolationError(
                f"Exchange rate {record.from_currency}/{record.to_currency} already exists",
                field="to_currency"
            )

    def upsert(self, from_currency: str, to_currency: str, rate: Decimal) -> ExchangeRate:
        """Update the rate for an existing pair in place, or insert a new row"""
        existing = self.get_rate(from_currency, to_currency)
        if existing is None:
            return self.create(from_currency=from_currency, to_currency=to_currency, rate=rate)

        old_rate = existing.rate
        updated = self.update(existing.id, {"rate": rate})
        log_action(logger, "info", "Exchange rate changed", action="upsert",
                   resource=self.table_name, record_id=updated.id,
                   extra={"pair": f"{updated.from_currency}/{updated.to_currency}",
                          "old_rate": old_rate, "new_rate": updated.rate})
        return updated

    def converter(self) -> 'CurrencyConverter':
        """Converter snapshot of the current table"""
        return CurrencyConverter(self.list())


class CurrencyConverter:
    """
    Converts amounts using the stored rate table.

    A direct rate multiplies, an inverse rate divides, and a pair with no
    stored rate in either direction leaves the amount unchanged.
    """

    def __init__(self, rates: Iterable[ExchangeRate] = ()):
        self._rates: Dict[Tuple[str, str], Decimal] = {}
        for rate in rates:
            self.set_rate(rate.from_currency, rate.to_currency, rate.rate)

    def set_rate(self, from_currency: str, to_currency: str, rate: Decimal) -> None:
        """Set exchange rate for currency pair"""
        if not isinstance(rate, Decimal):
            rate = Decimal(str(rate))
        self._rates[(normalize_code(from_currency), normalize_code(to_currency))] = rate

    def get_rate(self, from_currency: str, to_currency: str) -> Optional[Decimal]:
        """Effective multiplier for the pair, or None when no rate is known"""
        source = normalize_code(from_currency)
        target = normalize_code(to_currency)
        if source == target:
            return Decimal('1')

        direct = self._rates.get((source, target))
        if direct is not None:
            return direct

        inverse = self._rates.get((target, source))
        if inverse is not None:
            return Decimal('1') / inverse
        return None

    def convert(self, amount: Decimal, from_currency: str, to_currency: str) -> Decimal:
        """
        Convert amount from one currency to another

        Args:
            amount: Amount in ``from_currency``
            from_currency: Source currency code
            to_currency: Target currency code

        Returns:
            Converted amount (unrounded); the input amount when no rate exists
        """
        if not isinstance(amount, Decimal):
            amount = Decimal(str(amount))

        source = normalize_code(from_currency)
        target = normalize_code(to_currency)
        if source == target:
            return amount

        direct = self._rates.get((source, target))
        if direct is not None:
            return amount * direct

        inverse = self._rates.get((target, source))
        if inverse is not None:
            return amount / inverse

        logger.debug("No exchange rate for %s -> %s, amount left unconverted", source, target)
        return amount

    def get_all_rates(self) -> Dict[Tuple[str, str], Decimal]:
        """Get all stored rates"""
        return self._rates.copy()
