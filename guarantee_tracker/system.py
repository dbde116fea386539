"""
Tracker system wiring

Builds every manager on top of one storage backend and exposes the shared
instance used by the API dependencies.
"""

from typing import Optional

from .banks import BankManager
from .config import get_config
from .credits import CreditManager
from .currency import CurrencyManager, ExchangeRateManager
from .letters import GuaranteeLetterManager
from .payments import LetterPaymentManager
from .projects import ProjectManager
from .storage import StorageInterface, create_storage


class TrackerSystem:
    """All managers initialized over a single storage backend"""

    def __init__(self, storage: Optional[StorageInterface] = None):
        if storage is None:
            storage = create_storage(get_config().database_url)
        self.storage = storage

        self.projects = ProjectManager(self.storage)
        self.banks = BankManager(self.storage)
        self.currencies = CurrencyManager(self.storage)
        self.exchange_rates = ExchangeRateManager(self.storage)
        self.letters = GuaranteeLetterManager(self.storage, self.banks, self.projects)
        self.credits = CreditManager(self.storage, self.banks, self.projects)
        self.payments = LetterPaymentManager(self.storage, self.letters)

    def close(self) -> None:
        self.storage.close()


# Shared instance, created on first use
_tracker_system: Optional[TrackerSystem] = None


def get_tracker_system() -> TrackerSystem:
    """FastAPI dependency returning the shared system"""
    global _tracker_system
    if _tracker_system is None:
        _tracker_system = TrackerSystem()
    return _tracker_system


def set_tracker_system(system: Optional[TrackerSystem]) -> None:
    """Replace the shared system (None resets it)"""
    global _tracker_system
    _tracker_system = system
