"""Decoding of model output into dish and ingredient analyses.

Model output is decoded in two tiers. The strict tier validates the cleaned
text against the pydantic payload schemas. When that fails, the tolerant tier
walks the generic JSON and keeps every entry that carries the required string
fields, which recovers responses with extra keys, odd casing of risk labels or
the older bare ``ingredients`` shape. Dishes without any usable ingredient are
dropped on both tiers.
"""

import json
import logging
import re

from pydantic import ValidationError

from glowtrack.domain.analysis import (
    AcneRisk,
    DishAnalysis,
    IngredientAssessment,
    IngredientPayload,
    MealAnalysisPayload,
)
from glowtrack.errors import ParseError

LEGACY_DISH_NAME = "Meal"

_FENCE_PATTERN = re.compile(r"```[\w+-]*")

_logger = logging.getLogger(__name__)


def strip_code_fences(raw_text: str) -> str:
    """Remove markdown code fences and surrounding whitespace."""
    return _FENCE_PATTERN.sub("", raw_text).strip()


def parse_meal_analysis(raw_text: str) -> list[DishAnalysis]:
    """Decode a meal analysis response into dishes with ingredients."""
    cleaned = strip_code_fences(raw_text)
    _logger.debug("Cleaned meal analysis content: %s", cleaned)
    try:
        payload = MealAnalysisPayload.model_validate_json(cleaned)
    except ValidationError as exc:
        _logger.info("Strict meal analysis decode failed, trying fallback: %s", exc)
    else:
        dishes = [
            DishAnalysis(
                dish=dish.dish,
                ingredients=[item.to_assessment() for item in dish.ingredients],
            )
            for dish in payload.meals
            if dish.ingredients
        ]
        if dishes:
            return dishes

    dishes = _extract_dishes(cleaned)
    if not dishes:
        raise ParseError("Could not parse JSON response", content=cleaned)
    _logger.info("Parsed %s dishes with fallback decoding", len(dishes))
    return dishes


def parse_ingredient_analysis(raw_text: str) -> IngredientAssessment:
    """Decode a single ingredient analysis response."""
    cleaned = strip_code_fences(raw_text)
    _logger.debug("Cleaned ingredient analysis content: %s", cleaned)
    try:
        return IngredientPayload.model_validate_json(cleaned).to_assessment()
    except ValidationError as exc:
        _logger.info("Strict ingredient decode failed, trying fallback: %s", exc)

    data = _load_object(cleaned)
    assessment = _extract_ingredient(data) if data is not None else None
    if assessment is None:
        raise ParseError("Could not parse single ingredient response", content=cleaned)
    return assessment


def _extract_dishes(cleaned: str) -> list[DishAnalysis]:
    """Walk generic JSON for the ``meals`` shape or the legacy ``ingredients`` one."""
    data = _load_object(cleaned)
    if data is None:
        return []

    meals = data.get("meals")
    if isinstance(meals, list):
        dishes: list[DishAnalysis] = []
        for entry in meals:
            if not isinstance(entry, dict):
                continue
            name = entry.get("dish")
            raw_ingredients = entry.get("ingredients")
            if not isinstance(name, str) or not isinstance(raw_ingredients, list):
                continue
            ingredients = _extract_ingredients(raw_ingredients)
            if ingredients:
                dishes.append(DishAnalysis(dish=name, ingredients=ingredients))
        return dishes

    raw_ingredients = data.get("ingredients")
    if isinstance(raw_ingredients, list):
        ingredients = _extract_ingredients(raw_ingredients)
        if ingredients:
            return [DishAnalysis(dish=LEGACY_DISH_NAME, ingredients=ingredients)]
    return []


def _extract_ingredients(entries: list[object]) -> list[IngredientAssessment]:
    ingredients: list[IngredientAssessment] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        assessment = _extract_ingredient(entry)
        if assessment is not None:
            ingredients.append(assessment)
    return ingredients


def _extract_ingredient(entry: dict[str, object]) -> IngredientAssessment | None:
    name = entry.get("name")
    risk = entry.get("acneRisk")
    explanation = entry.get("explanation")
    if not (
        isinstance(name, str) and isinstance(risk, str) and isinstance(explanation, str)
    ):
        return None
    acne_risk = _normalize_risk(risk)
    if acne_risk is None:
        return None
    return IngredientAssessment(name=name, acne_risk=acne_risk, explanation=explanation)


def _normalize_risk(raw: str) -> AcneRisk | None:
    try:
        return AcneRisk(raw.strip().lower())
    except ValueError:
        return None


def _load_object(cleaned: str) -> dict[str, object] | None:
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None
