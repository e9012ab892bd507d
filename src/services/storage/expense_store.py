"""
Expense Record Store

The authoritative, ordered collection of expense records for a session.

DESIGN DECISION: The store owns the collection explicitly. Every mutation
serializes the whole collection and overwrites the durable copy, so what
is on disk always matches what is in memory. The total is never stored;
it is recomputed on every read.
"""

import json
from decimal import Decimal
from typing import Iterator, Optional, Sequence
from uuid import UUID

import structlog
from pydantic import TypeAdapter, ValidationError

from src.audit import AuditLogger
from src.config import get_settings
from src.models.expense import ExpenseRecord
from src.services.storage.interface import (
    DuplicateError,
    KeyValueStorageInterface,
    StorageError,
)


_records_adapter = TypeAdapter(list[ExpenseRecord])

logger = structlog.get_logger(__name__)


class ExpenseStore:
    """
    In-memory ordered collection mirrored to durable storage.

    Insertion order is kept for history display ("most recent last").
    """

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        key: Optional[str] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._key = key or get_settings().storage.expenses_key
        self._audit_logger = audit_logger
        self._records: list[ExpenseRecord] = []

    def load(self) -> list[ExpenseRecord]:
        """
        Replace the in-memory collection with the stored one.

        Missing, unreadable or corrupt data yields an empty collection.
        This never raises.
        """
        try:
            raw = self._storage.read(self._key)
            if raw is None:
                records = []
            else:
                records = _records_adapter.validate_json(raw)
                if len({record.id for record in records}) != len(records):
                    raise ValueError("Stored collection contains repeated ids")
        except (StorageError, ValidationError, ValueError) as e:
            logger.warning("expense_store_load_failed", key=self._key, error=str(e))
            if self._audit_logger:
                self._audit_logger.log_storage_read_failed(self._key, e)
            records = []

        self._records = list(records)
        logger.info("expense_store_loaded", key=self._key, count=len(self._records))
        return self.records()

    def _persist(self) -> None:
        payload = _records_adapter.dump_python(self._records, mode="json")
        self._storage.write(self._key, json.dumps(payload, ensure_ascii=False))

    def add(self, record: ExpenseRecord) -> ExpenseRecord:
        """
        Append a record and persist the collection.

        Raises:
            DuplicateError: If a record with the same id is already held
            StorageError: If persisting fails (the record is not kept)
        """
        if any(existing.id == record.id for existing in self._records):
            raise DuplicateError(f"Expense {record.id} already exists")

        self._records.append(record)
        try:
            self._persist()
        except StorageError:
            self._records.pop()
            raise
        return record

    def add_all(self, records: Sequence[ExpenseRecord]) -> list[ExpenseRecord]:
        """
        Append several records with a single write.

        Either every record is kept or, if persisting fails, none is.

        Raises:
            DuplicateError: If any id is already held or repeated in `records`
            StorageError: If persisting fails
        """
        records = list(records)
        held = {existing.id for existing in self._records}
        for record in records:
            if record.id in held:
                raise DuplicateError(f"Expense {record.id} already exists")
            held.add(record.id)

        start = len(self._records)
        self._records.extend(records)
        try:
            self._persist()
        except StorageError:
            del self._records[start:]
            raise
        return records

    def remove(self, expense_id: UUID) -> bool:
        """
        Remove the record with the given id.

        Returns False, without touching storage, if no such record exists.
        """
        for index, record in enumerate(self._records):
            if record.id == expense_id:
                break
        else:
            return False

        removed = self._records.pop(index)
        try:
            self._persist()
        except StorageError:
            self._records.insert(index, removed)
            raise
        return True

    def get(self, expense_id: UUID) -> Optional[ExpenseRecord]:
        for record in self._records:
            if record.id == expense_id:
                return record
        return None

    def total(self) -> Decimal:
        """Sum of all current amounts."""
        return sum((record.amount for record in self._records), Decimal("0"))

    def records(self) -> list[ExpenseRecord]:
        """A copy of the records in insertion order."""
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ExpenseRecord]:
        return iter(list(self._records))
