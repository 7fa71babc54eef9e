"""Request and response models for the HTTP API."""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from glowtrack.domain.analysis import (
    AcneRisk,
    DishAnalysis,
    IngredientAssessment,
    ManualIngredient,
)
from glowtrack.domain.meals import MealDraft, MealRecord, MealType
from glowtrack.services.sessions import InputMethod, MealLogSession


class IngredientOut(BaseModel):
    """Ingredient as shown to the client; risk may be ``analyzing``."""

    id: UUID
    name: str
    acne_risk: str
    explanation: str

    @classmethod
    def from_domain(cls, item: ManualIngredient) -> "IngredientOut":
        return cls(
            id=item.id,
            name=item.name,
            acne_risk=str(item.acne_risk),
            explanation=item.explanation,
        )


class DishOut(BaseModel):
    dish: str
    ingredients: list[IngredientOut]

    @classmethod
    def from_domain(cls, dish: DishAnalysis) -> "DishOut":
        return cls(
            dish=dish.dish,
            ingredients=[IngredientOut.from_domain(item) for item in dish.ingredients],
        )


class MealOut(BaseModel):
    """Saved meal record."""

    id: UUID
    foods: list[str]
    selected_ingredients: list[IngredientOut]
    date: datetime
    meal_type: MealType

    @classmethod
    def from_domain(cls, record: MealRecord) -> "MealOut":
        return cls(
            id=record.id,
            foods=record.foods,
            selected_ingredients=[
                IngredientOut.from_domain(item) for item in record.selected_ingredients
            ],
            date=record.date,
            meal_type=record.meal_type,
        )


class SessionOut(BaseModel):
    """Snapshot of the active logging session."""

    meal_type: MealType
    date: datetime
    input_method: InputMethod
    foods: list[str]
    description: str
    meals_analysis: list[DishOut]
    manual_ingredients: list[IngredientOut]
    selected: dict[str, list[UUID]]
    analysis_error: str | None
    is_analyzing: bool
    can_save: bool

    @classmethod
    def from_domain(cls, session: MealLogSession) -> "SessionOut":
        return cls(
            meal_type=session.meal_type,
            date=session.date,
            input_method=session.input_method,
            foods=list(session.foods),
            description=session.description,
            meals_analysis=[DishOut.from_domain(d) for d in session.meals_analysis],
            manual_ingredients=[
                IngredientOut.from_domain(item) for item in session.manual_ingredients
            ],
            selected=session.selection.snapshot(),
            analysis_error=session.analysis_error,
            is_analyzing=session.is_analyzing,
            can_save=session.can_save(),
        )


class IngredientIn(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    acne_risk: AcneRisk
    explanation: str = ""

    def to_domain(self) -> IngredientAssessment:
        return IngredientAssessment(
            name=self.name,
            acne_risk=self.acne_risk,
            explanation=self.explanation,
            id=self.id,
        )


class MealUpdateIn(BaseModel):
    foods: list[str] = Field(min_length=1)
    date: datetime
    meal_type: MealType
    selected_ingredients: list[IngredientIn] = Field(default_factory=list)

    def to_draft(self) -> MealDraft:
        return MealDraft(
            foods=self.foods,
            date=self.date,
            meal_type=self.meal_type,
            selected_ingredients=[
                item.to_domain() for item in self.selected_ingredients
            ],
        )


class SessionStartIn(BaseModel):
    meal_type: MealType = MealType.BREAKFAST
    date: datetime | None = None
    input_method: InputMethod = InputMethod.FOOD_LIST


class FoodIn(BaseModel):
    text: str


class DescriptionIn(BaseModel):
    description: str


class ManualIngredientIn(BaseModel):
    name: str


class SelectionIn(BaseModel):
    ingredient_id: UUID
    bucket: str