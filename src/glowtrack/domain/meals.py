"""Domain models for meal logging."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4

from glowtrack.domain.analysis import IngredientAssessment


class MealType(StrEnum):
    """Meal slot a record belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class MealDraft:
    """Editable fields of a meal record."""

    foods: list[str]
    date: datetime
    meal_type: MealType
    selected_ingredients: list[IngredientAssessment] = field(default_factory=list)


@dataclass(frozen=True)
class MealRecord:
    """A logged meal held in the record store."""

    foods: list[str]
    date: datetime
    meal_type: MealType
    selected_ingredients: list[IngredientAssessment] = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)

    @classmethod
    def from_draft(
        cls, draft: MealDraft, record_id: UUID | None = None
    ) -> "MealRecord":
        """Build a record from draft fields, keeping an existing id if given."""
        return cls(
            foods=list(draft.foods),
            date=draft.date,
            meal_type=draft.meal_type,
            selected_ingredients=list(draft.selected_ingredients),
            id=record_id or uuid4(),
        )
