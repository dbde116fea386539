"""
Generic Repository Module

One repository class parameterized by record type replaces per-table
list/get/create/update/delete boilerplate. Letters and credits use
LinkedRepository, which also enforces their bank/project references and
returns the referenced rows alongside each record.
"""

from dataclasses import dataclass, fields, MISSING
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar
import uuid

from .exceptions import ConstraintViolationError, RecordNotFoundError, ValidationError
from .logging_config import get_logger, log_action
from .storage import StorageInterface, StorageRecord


logger = get_logger(__name__)

T = TypeVar("T", bound=StorageRecord)

# Set by the repository, never by callers
SYSTEM_FIELDS = ("id", "created_at", "updated_at")


class Repository(Generic[T]):
    """
    CRUD over a single table of ``record_type`` documents.

    Subclasses set ``record_type``, ``table_name`` and ``entity_name``.
    """

    record_type: Type[T]
    table_name: str
    entity_name: str

    def __init__(self, storage: StorageInterface):
        self.storage = storage

    def _from_dict(self, data: Dict[str, Any]) -> T:
        return self.record_type.from_dict(data)

    def _save(self, record: T) -> None:
        self.storage.save(self.table_name, record.id, record.to_dict())

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[T]:
        """All rows, newest first, optionally filtered by field equality"""
        if filters:
            rows = self.storage.find(self.table_name, filters)
        else:
            rows = self.storage.load_all(self.table_name)

        # Reverse insertion order first so records sharing a timestamp stay newest-first
        records = [self._from_dict(row) for row in reversed(rows)]
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records

    def get(self, record_id: str) -> Optional[T]:
        data = self.storage.load(self.table_name, record_id)
        if data:
            return self._from_dict(data)
        return None

    def require(self, record_id: str) -> T:
        """Like get() but raises RecordNotFoundError"""
        record = self.get(record_id)
        if record is None:
            raise RecordNotFoundError(self.entity_name, record_id)
        return record

    def exists(self, record_id: str) -> bool:
        return self.storage.exists(self.table_name, record_id)

    def count(self) -> int:
        return self.storage.count(self.table_name)

    def create(self, **values: Any) -> T:
        """
        Create and persist a new record.

        Omitted optional fields take the record's defaults; missing required
        fields raise ValidationError.
        """
        self._check_field_names(values)

        missing = [
            f.name for f in fields(self.record_type)
            if f.name not in SYSTEM_FIELDS
            and f.name not in values
            and f.default is MISSING and f.default_factory is MISSING
        ]
        if missing:
            raise ValidationError([
                {"path": [name], "message": "Field required", "type": "missing"}
                for name in missing
            ])

        now = datetime.now(timezone.utc)
        record = self.record_type(
            id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            **values
        )
        self.before_save(record, set(values))
        self._save(record)

        log_action(logger, "info", f"{self.entity_name} created",
                   action="create", resource=self.table_name, record_id=record.id)
        return record

    def update(self, record_id: str, changes: Dict[str, Any]) -> T:
        """Apply only the provided fields and stamp updated_at"""
        self._check_field_names(changes)
        record = self.require(record_id)

        for name, value in changes.items():
            setattr(record, name, value)
        record.updated_at = datetime.now(timezone.utc)

        # Re-run record-level validation on the merged result
        record.__post_init__()
        self.before_save(record, set(changes))
        self._save(record)

        log_action(logger, "info", f"{self.entity_name} updated",
                   action="update", resource=self.table_name, record_id=record.id,
                   extra={"fields": sorted(changes)})
        return record

    def delete(self, record_id: str) -> None:
        if not self.storage.delete(self.table_name, record_id):
            raise RecordNotFoundError(self.entity_name, record_id)

        log_action(logger, "info", f"{self.entity_name} deleted",
                   action="delete", resource=self.table_name, record_id=record_id)

    def before_save(self, record: T, changed: set) -> None:
        """Hook for reference and uniqueness checks; ``changed`` holds the supplied field names"""
        pass

    def _check_field_names(self, values: Dict[str, Any]) -> None:
        allowed = set(self.record_type.field_names()) - set(SYSTEM_FIELDS)
        unknown = sorted(set(values) - allowed)
        if unknown:
            raise ValidationError([
                {"path": [name], "message": "Unknown field", "type": "extra_forbidden"}
                for name in unknown
            ])


@dataclass
class Linked(Generic[T]):
    """A record together with its left-joined bank and project"""
    record: T
    bank: Optional[StorageRecord]
    project: Optional[StorageRecord]

    def to_dict(self) -> Dict[str, Any]:
        result = self.record.to_dict()
        result["bank"] = self.bank.to_dict() if self.bank else None
        result["project"] = self.project.to_dict() if self.project else None
        return result


class LinkedRepository(Repository[T]):
    """
    Repository for records carrying ``bank_id`` and ``project_id``.

    References are checked when a record is created or re-pointed. Deleting
    the referenced bank or project does not cascade; the joined side simply
    comes back as None.
    """

    def __init__(self, storage: StorageInterface, banks: Repository, projects: Repository):
        super().__init__(storage)
        self.banks = banks
        self.projects = projects

    def before_save(self, record: T, changed: set) -> None:
        if "bank_id" in changed and not self.banks.exists(record.bank_id):
            raise ConstraintViolationError(
                f"{self.entity_name} references unknown bank {record.bank_id}", field="bank_id"
            )
        if "project_id" in changed and not self.projects.exists(record.project_id):
            raise ConstraintViolationError(
                f"{self.entity_name} references unknown project {record.project_id}", field="project_id"
            )

    def _link(self, record: T, banks: Optional[Dict[str, StorageRecord]] = None,
              projects: Optional[Dict[str, StorageRecord]] = None) -> Linked[T]:
        if banks is None:
            bank = self.banks.get(record.bank_id)
        else:
            bank = banks.get(record.bank_id)
        if projects is None:
            project = self.projects.get(record.project_id)
        else:
            project = projects.get(record.project_id)
        return Linked(record=record, bank=bank, project=project)

    def list_linked(self, filters: Optional[Dict[str, Any]] = None) -> List[Linked[T]]:
        records = self.list(filters)
        banks = {bank.id: bank for bank in self.banks.list()}
        projects = {project.id: project for project in self.projects.list()}
        return [self._link(record, banks, projects) for record in records]

    def get_linked(self, record_id: str) -> Optional[Linked[T]]:
        record = self.get(record_id)
        if record is None:
            return None
        return self._link(record)
