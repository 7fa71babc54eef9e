"""Shared test fixtures."""

import asyncio
import json
from dataclasses import dataclass, field

import pytest

from glowtrack.config import Settings
from glowtrack.containers import AppContainer
from glowtrack.services.analysis import AnalysisService, ChatClient
from glowtrack.services.meals import InMemoryMealStore
from glowtrack.services.sessions import SessionService

MEAL_PAYLOAD: dict[str, object] = {
    "meals": [
        {
            "dish": "Biryani (chicken)",
            "ingredients": [
                {
                    "name": "basmati rice",
                    "acneRisk": "medium",
                    "explanation": "High glycemic load",
                },
                {
                    "name": "chicken thigh",
                    "acneRisk": "low",
                    "explanation": "Lean protein",
                },
                {
                    "name": "ghee",
                    "acneRisk": "high",
                    "explanation": "Saturated dairy fat",
                },
            ],
        },
        {
            "dish": "Raita",
            "ingredients": [
                {
                    "name": "yogurt",
                    "acneRisk": "medium",
                    "explanation": "Dairy can aggravate acne",
                },
                {
                    "name": "cucumber",
                    "acneRisk": "low",
                    "explanation": "Hydrating vegetable",
                },
            ],
        },
    ]
}


def prompt_subject(payload: dict[str, object]) -> str:
    """Return the quoted meal description or ingredient name of a request."""
    messages = payload["messages"]
    assert isinstance(messages, list)
    content = messages[0]["content"]
    return content.strip().splitlines()[-1].strip('"')


@dataclass
class FakeChatClient(ChatClient):
    """Fake chat client answering meal and single-ingredient prompts.

    A gate keyed by the meal description or ingredient name holds that
    request until the event is set.
    """

    meal_content: str = field(default_factory=lambda: json.dumps(MEAL_PAYLOAD))
    meal_contents: dict[str, str] = field(default_factory=dict)
    meal_error: Exception | None = None
    ingredient_contents: dict[str, str] = field(default_factory=dict)
    ingredient_errors: dict[str, Exception] = field(default_factory=dict)
    gates: dict[str, asyncio.Event] = field(default_factory=dict)
    payloads: list[dict[str, object]] = field(default_factory=list)

    async def complete(self, payload: dict[str, object]) -> str:
        self.payloads.append(payload)
        subject = prompt_subject(payload)
        prompt = payload["messages"][0]["content"]
        gate = self.gates.get(subject)
        if gate is not None:
            await gate.wait()

        if "single ingredient" not in prompt:
            if self.meal_error is not None:
                raise self.meal_error
            return self.meal_contents.get(subject, self.meal_content)

        if subject in self.ingredient_errors:
            raise self.ingredient_errors[subject]
        return self.ingredient_contents.get(
            subject,
            json.dumps(
                {"name": subject, "acneRisk": "low", "explanation": "Whole food"}
            ),
        )


def make_analysis_service(client: ChatClient) -> AnalysisService:
    return AnalysisService(
        client=client,
        model="gpt-4o-mini",
        max_tokens=2000,
        temperature=0.3,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openai_api_key="test-key",
        openai_model="gpt-4o-mini",
        openai_max_tokens=2000,
        openai_temperature=0.3,
        openai_base_url="https://api.test/v1",
    )


@pytest.fixture
def chat_client() -> FakeChatClient:
    return FakeChatClient()


@pytest.fixture
def analysis_service(chat_client: FakeChatClient) -> AnalysisService:
    return make_analysis_service(chat_client)


@pytest.fixture
def meal_store() -> InMemoryMealStore:
    return InMemoryMealStore()


@pytest.fixture
def container(
    settings: Settings,
    analysis_service: AnalysisService,
    meal_store: InMemoryMealStore,
) -> AppContainer:
    session_service = SessionService(
        analysis_service=analysis_service,
        store=meal_store,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        meal_store=meal_store,
        analysis_service=analysis_service,
        session_service=session_service,
        close_resources=close_resources,
    )
