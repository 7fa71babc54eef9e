"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from glowtrack.adapters.openai_chat_client import HttpxChatClient
from glowtrack.config import Settings
from glowtrack.services.analysis import AnalysisService
from glowtrack.services.meals import InMemoryMealStore, MealStore
from glowtrack.services.sessions import SessionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    meal_store: MealStore
    analysis_service: AnalysisService
    session_service: SessionService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    chat_client = HttpxChatClient.create(
        api_key=resolved_settings.openai_api_key,
        base_url=resolved_settings.openai_base_url,
        timeout=resolved_settings.openai_timeout_seconds,
    )
    analysis_service = AnalysisService(
        client=chat_client,
        model=resolved_settings.openai_model,
        max_tokens=resolved_settings.openai_max_tokens,
        temperature=resolved_settings.openai_temperature,
    )
    meal_store = InMemoryMealStore()
    session_service = SessionService(
        analysis_service=analysis_service,
        store=meal_store,
    )

    async def close_resources() -> None:
        await chat_client.close()

    return AppContainer(
        settings=resolved_settings,
        meal_store=meal_store,
        analysis_service=analysis_service,
        session_service=session_service,
        close_resources=close_resources,
    )
