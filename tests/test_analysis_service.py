"""Tests for the analysis service."""

import asyncio
import json

import pytest

from glowtrack.domain.analysis import AcneRisk
from glowtrack.errors import ApiError, ParseError
from glowtrack.services.analysis import AnalysisService
from tests.conftest import FakeChatClient, make_analysis_service


def test_analyze_meal_sends_prompt_and_parses_dishes(
    analysis_service: AnalysisService, chat_client: FakeChatClient
) -> None:
    dishes = asyncio.run(analysis_service.analyze_meal("biryani, raita"))

    assert [dish.dish for dish in dishes] == ["Biryani (chicken)", "Raita"]
    payload = chat_client.payloads[0]
    assert payload["model"] == "gpt-4o-mini"
    assert payload["max_tokens"] == 2000
    assert payload["temperature"] == 0.3
    assert '"biryani, raita"' in payload["messages"][0]["content"]


def test_analyze_meal_propagates_parse_error() -> None:
    service = make_analysis_service(FakeChatClient(meal_content="no idea"))

    with pytest.raises(ParseError):
        asyncio.run(service.analyze_meal("pizza"))


def test_analyze_meal_propagates_api_error() -> None:
    client = FakeChatClient(meal_error=ApiError("API request failed", 500))
    service = make_analysis_service(client)

    with pytest.raises(ApiError):
        asyncio.run(service.analyze_meal("pizza"))


def test_analyze_ingredient_returns_assessment() -> None:
    client = FakeChatClient(
        ingredient_contents={
            "whey": json.dumps(
                {"name": "whey", "acneRisk": "high", "explanation": "Raises IGF-1"}
            )
        }
    )
    service = make_analysis_service(client)

    assessment = asyncio.run(service.analyze_ingredient("whey"))

    assert assessment.name == "whey"
    assert assessment.acne_risk is AcneRisk.HIGH
    assert "single ingredient" in client.payloads[0]["messages"][0]["content"]
