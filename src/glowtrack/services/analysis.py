"""Ingredient analysis service using a chat-completion LLM."""

import logging
from dataclasses import dataclass
from typing import Protocol

from glowtrack.domain.analysis import DishAnalysis, IngredientAssessment
from glowtrack.services.parsing import parse_ingredient_analysis, parse_meal_analysis
from glowtrack.services.prompts import (
    build_chat_request,
    build_ingredient_prompt,
    build_meal_prompt,
)

_logger = logging.getLogger(__name__)


class ChatClient(Protocol):
    """Interface for chat-completion requests."""

    async def complete(self, payload: dict[str, object]) -> str:
        """Send a chat request and return the first message content."""


@dataclass
class AnalysisService:
    """Service that builds analysis prompts and decodes the replies."""

    client: ChatClient
    model: str
    max_tokens: int
    temperature: float

    async def analyze_meal(self, description: str) -> list[DishAnalysis]:
        """Break a meal description into dishes with assessed ingredients."""
        content = await self._complete(build_meal_prompt(description))
        dishes = parse_meal_analysis(content)
        _logger.info(
            "Meal analysis: dishes=%s ingredients=%s",
            len(dishes),
            sum(len(dish.ingredients) for dish in dishes),
        )
        return dishes

    async def analyze_ingredient(self, name: str) -> IngredientAssessment:
        """Assess a single ingredient."""
        content = await self._complete(build_ingredient_prompt(name))
        return parse_ingredient_analysis(content)

    async def _complete(self, prompt: str) -> str:
        payload = build_chat_request(
            prompt,
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        content = await self.client.complete(payload)
        _logger.debug("Model response: %s", content)
        return content
