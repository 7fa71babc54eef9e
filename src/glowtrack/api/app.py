"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID

from fastapi import FastAPI, HTTPException, Request, status

from glowtrack.api.models import (
    DescriptionIn,
    FoodIn,
    IngredientOut,
    ManualIngredientIn,
    MealOut,
    MealUpdateIn,
    SelectionIn,
    SessionOut,
    SessionStartIn,
)
from glowtrack.app_logging import configure_logging
from glowtrack.containers import AppContainer
from glowtrack.domain.meals import MealRecord
from glowtrack.services.sessions import MealLogSession


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if not container.settings.openai_api_key:
            logger.warning("OpenAI API key not configured; analysis will fail")
        yield
        try:
            await app.state.container.close_resources()
        except Exception:
            logger.exception("Failed to close HTTP resources")

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/meals")
    async def list_meals(request: Request, day: date | None = None) -> list[MealOut]:
        """Return meals for a local calendar day, or all meals."""
        store = _container(request).meal_store
        records = store.entries_for_day(day) if day else store.all()
        return [MealOut.from_domain(record) for record in records]

    @app.put("/meals/{meal_id}")
    async def update_meal(
        meal_id: UUID, body: MealUpdateIn, request: Request
    ) -> MealOut:
        """Replace a saved meal."""
        record = MealRecord.from_draft(body.to_draft(), record_id=meal_id)
        if not _container(request).meal_store.update_by_id(meal_id, record):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return MealOut.from_domain(record)

    @app.delete("/meals/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_meal(meal_id: UUID, request: Request) -> None:
        """Delete a saved meal."""
        if not _container(request).meal_store.remove_by_id(meal_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)

    @app.get("/session")
    async def get_session(request: Request) -> SessionOut:
        """Return the active logging session."""
        return SessionOut.from_domain(_session(request))

    @app.post("/session/start")
    async def start_session(body: SessionStartIn, request: Request) -> SessionOut:
        """Start a new logging session, dropping any unsaved draft."""
        session = _container(request).session_service.start(
            meal_type=body.meal_type,
            date=body.date,
            input_method=body.input_method,
        )
        return SessionOut.from_domain(session)

    @app.post("/session/foods")
    async def add_food(body: FoodIn, request: Request) -> SessionOut:
        """Append a dish to the food list."""
        session = _session(request)
        session.add_food(body.text)
        return SessionOut.from_domain(session)

    @app.delete("/session/foods/{index}")
    async def remove_food(index: int, request: Request) -> SessionOut:
        """Remove a dish from the food list."""
        session = _session(request)
        if not session.remove_food(index):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return SessionOut.from_domain(session)

    @app.put("/session/description")
    async def set_description(body: DescriptionIn, request: Request) -> SessionOut:
        """Set the free-text meal description."""
        session = _session(request)
        session.description = body.description
        return SessionOut.from_domain(session)

    @app.post("/session/analyze")
    async def analyze(request: Request) -> SessionOut:
        """Analyze the current meal; failures are reported in the session."""
        session = _session(request)
        await session.analyze()
        return SessionOut.from_domain(session)

    @app.post("/session/manual-ingredients")
    async def add_manual_ingredient(
        body: ManualIngredientIn, request: Request
    ) -> IngredientOut:
        """Add a typed ingredient; it is analyzed in the background."""
        placeholder = _session(request).add_manual_ingredient(body.name)
        if placeholder is None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Ingredient is empty or already added",
            )
        return IngredientOut.from_domain(placeholder)

    @app.delete("/session/manual-ingredients/{ingredient_id}")
    async def remove_manual_ingredient(
        ingredient_id: UUID, request: Request
    ) -> SessionOut:
        """Remove a typed ingredient."""
        session = _session(request)
        if not session.remove_manual_ingredient(ingredient_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return SessionOut.from_domain(session)

    @app.post("/session/selection")
    async def toggle_selection(body: SelectionIn, request: Request) -> SessionOut:
        """Toggle whether an ingredient was eaten."""
        session = _session(request)
        if not session.toggle_ingredient(body.ingredient_id, body.bucket):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Ingredient is not listed under that bucket",
            )
        return SessionOut.from_domain(session)

    @app.post("/session/save", status_code=status.HTTP_201_CREATED)
    async def save_session(request: Request) -> MealOut:
        """Save the session as a meal record."""
        try:
            record = _container(request).session_service.save()
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        return MealOut.from_domain(record)

    @app.post("/session/reset")
    async def reset_session(request: Request) -> SessionOut:
        """Discard the current draft."""
        session = _session(request)
        session.reset()
        return SessionOut.from_domain(session)

    return app


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _session(request: Request) -> MealLogSession:
    return _container(request).session_service.current()
