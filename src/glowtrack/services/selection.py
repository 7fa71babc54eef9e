"""Tracking of ingredients the user confirmed eating."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol, TypeVar
from uuid import UUID

MANUAL_BUCKET = "Manual Ingredients"


class _Identified(Protocol):
    @property
    def id(self) -> UUID: ...


T = TypeVar("T", bound=_Identified)


@dataclass
class SelectionTracker:
    """Per-bucket sets of selected ingredient ids.

    A bucket is a dish name from the analysis or ``MANUAL_BUCKET`` for
    ingredients the user typed in.
    """

    _buckets: dict[str, set[UUID]] = field(default_factory=dict)

    def toggle(self, ingredient_id: UUID, bucket: str) -> None:
        """Flip the selection of an ingredient within a bucket."""
        selected = self._buckets.setdefault(bucket, set())
        if ingredient_id in selected:
            selected.remove(ingredient_id)
        else:
            selected.add(ingredient_id)

    def is_selected(self, ingredient_id: UUID, bucket: str) -> bool:
        """Return whether the ingredient is selected in the bucket."""
        return ingredient_id in self._buckets.get(bucket, ())

    def collect_selected(self, bucket: str, available: Iterable[T]) -> list[T]:
        """Filter ``available`` down to the selected ones, keeping its order."""
        selected = self._buckets.get(bucket)
        if not selected:
            return []
        return [item for item in available if item.id in selected]

    def discard(self, ingredient_id: UUID, bucket: str) -> None:
        """Drop an ingredient from a bucket if it is selected."""
        self._buckets.get(bucket, set()).discard(ingredient_id)

    def snapshot(self) -> dict[str, list[UUID]]:
        """Return a copy of the non-empty buckets."""
        return {
            bucket: sorted(ids, key=str)
            for bucket, ids in self._buckets.items()
            if ids
        }

    def reset(self) -> None:
        """Forget every selection."""
        self._buckets.clear()
