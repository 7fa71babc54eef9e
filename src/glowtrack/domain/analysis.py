"""Models for LLM ingredient analysis results."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

ANALYZING: Final = "analyzing"


class AcneRisk(StrEnum):
    """Acne risk level assigned to an ingredient."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class IngredientAssessment:
    """Analyzed ingredient with its acne risk."""

    name: str
    acne_risk: AcneRisk
    explanation: str
    id: UUID = field(default_factory=uuid4)


@dataclass(frozen=True)
class PendingIngredient:
    """Placeholder for a manual ingredient whose analysis is in flight."""

    name: str
    id: UUID = field(default_factory=uuid4)
    explanation: str = "Analyzing ingredient..."

    @property
    def acne_risk(self) -> str:
        """Transient risk label shown while the lookup runs."""
        return ANALYZING


ManualIngredient = IngredientAssessment | PendingIngredient


@dataclass(frozen=True)
class DishAnalysis:
    """Ingredient breakdown for a single dish or dish variation."""

    dish: str
    ingredients: list[IngredientAssessment]


class IngredientPayload(BaseModel):
    """Strict schema for one ingredient returned by the model."""

    model_config = ConfigDict(strict=True)

    name: str
    acne_risk: AcneRisk = Field(alias="acneRisk")
    explanation: str

    def to_assessment(self) -> IngredientAssessment:
        """Convert to a domain assessment with a fresh id."""
        return IngredientAssessment(
            name=self.name,
            acne_risk=self.acne_risk,
            explanation=self.explanation,
        )


class DishPayload(BaseModel):
    """Strict schema for one dish returned by the model."""

    model_config = ConfigDict(strict=True)

    dish: str
    ingredients: list[IngredientPayload]


class MealAnalysisPayload(BaseModel):
    """Strict schema for the full meal analysis response."""

    model_config = ConfigDict(strict=True)

    meals: list[DishPayload]
