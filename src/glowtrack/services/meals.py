"""In-memory meal record store."""

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Protocol
from uuid import UUID

from glowtrack.domain.meals import MealRecord


class MealStore(Protocol):
    """Storage interface for logged meals."""

    def append(self, record: MealRecord) -> None:
        """Add a new meal record."""

    def update_by_id(self, record_id: UUID, record: MealRecord) -> bool:
        """Replace the record with the given id, returning whether it existed."""

    def remove_by_id(self, record_id: UUID) -> bool:
        """Remove the record with the given id, returning whether it existed."""

    def get(self, record_id: UUID) -> MealRecord | None:
        """Return a record by id, if present."""

    def entries_for_day(self, day: date | datetime) -> list[MealRecord]:
        """Return records logged on the same local calendar day."""

    def all(self) -> list[MealRecord]:
        """Return every record in insertion order."""


@dataclass
class InMemoryMealStore(MealStore):
    """Meal store kept in process memory; records are lost on restart."""

    _records: list[MealRecord]

    def __init__(self) -> None:
        self._records = []

    def append(self, record: MealRecord) -> None:
        """Add a new meal record."""
        self._records.append(record)

    def update_by_id(self, record_id: UUID, record: MealRecord) -> bool:
        """Replace a record in place, keeping the stored id."""
        for index, existing in enumerate(self._records):
            if existing.id == record_id:
                self._records[index] = replace(record, id=record_id)
                return True
        return False

    def remove_by_id(self, record_id: UUID) -> bool:
        """Remove a record by id."""
        before = len(self._records)
        self._records = [item for item in self._records if item.id != record_id]
        return len(self._records) != before

    def get(self, record_id: UUID) -> MealRecord | None:
        """Return a record by id."""
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def entries_for_day(self, day: date | datetime) -> list[MealRecord]:
        """Return records on the same local calendar day, in insertion order."""
        target = local_day(day) if isinstance(day, datetime) else day
        return [record for record in self._records if local_day(record.date) == target]

    def all(self) -> list[MealRecord]:
        """Return every record in insertion order."""
        return list(self._records)


def local_day(moment: datetime) -> date:
    """Return the calendar day of a timestamp in local time.

    Naive timestamps are already local; aware ones are converted first.
    """
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone().date()
