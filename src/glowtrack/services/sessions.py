"""Meal logging session state and its analysis tasks."""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from glowtrack.domain.analysis import (
    AcneRisk,
    DishAnalysis,
    IngredientAssessment,
    ManualIngredient,
    PendingIngredient,
)
from glowtrack.domain.meals import MealRecord, MealType
from glowtrack.errors import AnalysisError
from glowtrack.services.analysis import AnalysisService
from glowtrack.services.meals import MealStore
from glowtrack.services.selection import MANUAL_BUCKET, SelectionTracker

FALLBACK_EXPLANATION = "Analysis failed - using default risk level"

_logger = logging.getLogger(__name__)


class InputMethod(StrEnum):
    """How the user describes the meal."""

    FOOD_LIST = "food_list"
    DESCRIPTION = "description"


@dataclass
class MealLogSession:
    """Draft state of one meal logging flow.

    All mutations run on the event loop thread. Analysis tasks apply their
    results only if the state they were started for still exists: a dish
    analysis checks that no newer analysis or reset happened, a manual lookup
    checks that its placeholder is still in the list.
    """

    analysis_service: AnalysisService
    meal_type: MealType = MealType.BREAKFAST
    date: datetime = field(default_factory=datetime.now)
    input_method: InputMethod = InputMethod.FOOD_LIST
    foods: list[str] = field(default_factory=list)
    description: str = ""
    meals_analysis: list[DishAnalysis] = field(default_factory=list)
    manual_ingredients: list[ManualIngredient] = field(default_factory=list)
    analysis_error: str | None = None
    is_analyzing: bool = False
    selection: SelectionTracker = field(default_factory=SelectionTracker)
    _analysis_token: object | None = field(default=None, repr=False)
    _tasks: set[asyncio.Task[None]] = field(default_factory=set, repr=False)

    def add_food(self, text: str) -> bool:
        """Append a dish name; blank input is ignored."""
        cleaned = text.strip()
        if not cleaned:
            return False
        self.foods.append(cleaned)
        return True

    def remove_food(self, index: int) -> bool:
        """Remove a dish name by position."""
        if not 0 <= index < len(self.foods):
            return False
        del self.foods[index]
        return True

    def meal_description(self) -> str | None:
        """Return the text sent for analysis, or None when there is nothing."""
        if self.input_method is InputMethod.FOOD_LIST:
            return ", ".join(self.foods) if self.foods else None
        cleaned = self.description.strip()
        return cleaned or None

    async def analyze(self) -> None:
        """Run dish analysis for the current input and store the outcome."""
        description = self.meal_description()
        if description is None:
            return
        token = object()
        self._analysis_token = token
        self.is_analyzing = True
        self.analysis_error = None
        self.meals_analysis = []
        try:
            dishes = await self.analysis_service.analyze_meal(description)
        except Exception as exc:
            if self._analysis_token is not token:
                return
            if isinstance(exc, AnalysisError):
                _logger.warning("Meal analysis failed: %s", exc)
            else:
                _logger.exception("Unexpected meal analysis failure")
            self.analysis_error = f"Failed to analyze ingredients: {exc}"
        else:
            if self._analysis_token is not token:
                _logger.info("Discarding stale meal analysis result")
                return
            self.meals_analysis = dishes
        finally:
            if self._analysis_token is token:
                self.is_analyzing = False

    def add_manual_ingredient(self, name: str) -> PendingIngredient | None:
        """Add a typed ingredient and start its analysis in the background.

        Must be called from a running event loop. Returns the placeholder, or
        None when the name is blank or already in the manual list.
        """
        cleaned = name.strip()
        if not cleaned:
            return None
        lowered = cleaned.lower()
        if any(item.name.lower() == lowered for item in self.manual_ingredients):
            return None

        placeholder = PendingIngredient(name=cleaned)
        self.manual_ingredients.append(placeholder)
        task = asyncio.get_running_loop().create_task(
            self._resolve_manual_ingredient(placeholder)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return placeholder

    async def _resolve_manual_ingredient(self, placeholder: PendingIngredient) -> None:
        try:
            resolved = await self.analysis_service.analyze_ingredient(placeholder.name)
        except AnalysisError as exc:
            _logger.warning(
                "Manual ingredient analysis failed for %s: %s", placeholder.name, exc
            )
            resolved = self._fallback_assessment(placeholder)
        except Exception:
            _logger.exception(
                "Unexpected manual ingredient failure for %s", placeholder.name
            )
            resolved = self._fallback_assessment(placeholder)
        self._replace_placeholder(placeholder, resolved)

    @staticmethod
    def _fallback_assessment(placeholder: PendingIngredient) -> IngredientAssessment:
        return IngredientAssessment(
            name=placeholder.name,
            acne_risk=AcneRisk.MEDIUM,
            explanation=FALLBACK_EXPLANATION,
        )

    def _replace_placeholder(
        self, placeholder: PendingIngredient, resolved: IngredientAssessment
    ) -> None:
        for index, item in enumerate(self.manual_ingredients):
            if item.id == placeholder.id and isinstance(item, PendingIngredient):
                self.manual_ingredients[index] = replace(resolved, id=placeholder.id)
                return
        _logger.info("Placeholder for %s is gone, dropping result", placeholder.name)

    async def wait_for_pending(self) -> None:
        """Wait until every in-flight manual ingredient lookup has finished."""
        if self._tasks:
            await asyncio.gather(*self._tasks)

    def remove_manual_ingredient(self, ingredient_id: UUID) -> bool:
        """Remove a manual ingredient, pending or resolved."""
        for index, item in enumerate(self.manual_ingredients):
            if item.id == ingredient_id:
                del self.manual_ingredients[index]
                self.selection.discard(ingredient_id, MANUAL_BUCKET)
                return True
        return False

    def toggle_ingredient(self, ingredient_id: UUID, bucket: str) -> bool:
        """Flip the selection of an ingredient in a dish or the manual bucket.

        Returns False without changing anything when the ingredient is not
        listed under that bucket.
        """
        if not self._bucket_lists(ingredient_id, bucket):
            return False
        self.selection.toggle(ingredient_id, bucket)
        return True

    def _bucket_lists(self, ingredient_id: UUID, bucket: str) -> bool:
        if bucket == MANUAL_BUCKET:
            return any(item.id == ingredient_id for item in self.manual_ingredients)
        return any(
            item.id == ingredient_id
            for dish in self.meals_analysis
            if dish.dish == bucket
            for item in dish.ingredients
        )

    def is_ingredient_selected(self, ingredient_id: UUID, bucket: str) -> bool:
        """Return whether an ingredient is selected."""
        return self.selection.is_selected(ingredient_id, bucket)

    def selected_ingredients(self) -> list[IngredientAssessment]:
        """Collect selections per analyzed dish, then the manual bucket."""
        collected: list[IngredientAssessment] = []
        for dish in self.meals_analysis:
            collected.extend(
                self.selection.collect_selected(dish.dish, dish.ingredients)
            )
        resolved_manual = [
            item
            for item in self.manual_ingredients
            if isinstance(item, IngredientAssessment)
        ]
        collected.extend(
            self.selection.collect_selected(MANUAL_BUCKET, resolved_manual)
        )
        return collected

    def can_save(self) -> bool:
        """Return whether the draft has enough input to become a record."""
        if self.input_method is InputMethod.FOOD_LIST:
            return bool(self.foods)
        return bool(self.description.strip())

    def save(self, store: MealStore) -> MealRecord:
        """Append the draft to the store as a meal record and reset."""
        if not self.can_save():
            raise ValueError("Meal has no foods to save")
        if self.input_method is InputMethod.FOOD_LIST:
            foods = list(self.foods)
        else:
            foods = [self.description.strip()]
        record = MealRecord(
            foods=foods,
            date=self.date,
            meal_type=self.meal_type,
            selected_ingredients=self.selected_ingredients(),
        )
        store.append(record)
        _logger.info(
            "Saved meal %s: foods=%s ingredients=%s",
            record.id,
            len(record.foods),
            len(record.selected_ingredients),
        )
        self.reset()
        return record

    def reset(self) -> None:
        """Return to an empty draft; running lookups are left to finish."""
        self.meal_type = MealType.BREAKFAST
        self.date = datetime.now()
        self.input_method = InputMethod.FOOD_LIST
        self.foods = []
        self.description = ""
        self.meals_analysis = []
        self.manual_ingredients = []
        self.analysis_error = None
        self.is_analyzing = False
        self.selection.reset()
        self._analysis_token = None


@dataclass
class SessionService:
    """Owns the active logging session and the store it saves into."""

    analysis_service: AnalysisService
    store: MealStore
    _session: MealLogSession | None = None

    def start(
        self,
        meal_type: MealType = MealType.BREAKFAST,
        date: datetime | None = None,
        input_method: InputMethod = InputMethod.FOOD_LIST,
    ) -> MealLogSession:
        """Begin a new logging flow, discarding any unsaved draft."""
        if self._session is not None:
            self._session.reset()
        self._session = MealLogSession(
            analysis_service=self.analysis_service,
            meal_type=meal_type,
            date=date or datetime.now(),
            input_method=input_method,
        )
        return self._session

    def current(self) -> MealLogSession:
        """Return the active session, starting a default one if needed."""
        if self._session is None:
            return self.start()
        return self._session

    def save(self) -> MealRecord:
        """Save the active session into the store."""
        return self.current().save(self.store)
