"""
Bank Management Module

Banks issue guarantee letters and extend credits. Contact fields are free
text; only the name is required.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .exceptions import ValidationError
from .repository import Repository
from .storage import StorageRecord


class BankStatus(Enum):
    """Bank relationship status"""
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass
class Bank(StorageRecord):
    name: str
    code: Optional[str] = None
    branch_name: Optional[str] = None
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    status: BankStatus = BankStatus.ACTIVE

    def __post_init__(self):
        super().__post_init__()
        if not self.name or not self.name.strip():
            raise ValidationError.for_field("name", "Bank name is required")


class BankManager(Repository[Bank]):
    """Banks table"""

    record_type = Bank
    table_name = "banks"
    entity_name = "Bank"
