"""OpenAI-compatible chat-completion client."""

from dataclasses import dataclass

import httpx

from glowtrack.errors import ApiError, ConfigError, ParseError
from glowtrack.services.analysis import ChatClient


@dataclass
class HttpxChatClient(ChatClient):
    """HTTPX-backed chat-completion client."""

    api_key: str | None
    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 60.0

    @classmethod
    def create(
        cls, api_key: str | None, base_url: str, timeout: float = 60.0
    ) -> "HttpxChatClient":
        """Create a chat client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def complete(self, payload: dict[str, object]) -> str:
        """POST a chat request and return ``choices[0].message.content``."""
        if not self.api_key or not self.api_key.strip():
            raise ConfigError("OpenAI API key not configured")

        try:
            response = await self.http_client.post(
                f"{self.base_url.rstrip('/')}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
                timeout=self.timeout,
            )
        except httpx.RequestError as exc:
            raise ApiError(f"API request failed: {exc}") from exc
        if response.status_code != httpx.codes.OK:
            raise ApiError(
                f"API request failed with status {response.status_code}",
                status_code=response.status_code,
            )
        try:
            body = response.json()
        except ValueError as exc:
            raise ParseError(
                "Could not decode API response", content=response.text
            ) from exc
        content = _first_message_content(body)
        if content is None:
            raise ApiError("No response content", status_code=response.status_code)
        return content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _first_message_content(body: object) -> str | None:
    """Extract the first choice's message content, if present."""
    if not isinstance(body, dict):
        return None
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else None
