"""Errors raised by the ingredient analysis pipeline."""

_EXCERPT_LIMIT = 200


class AnalysisError(Exception):
    """Base class for analysis failures shown to the user."""


class ConfigError(AnalysisError):
    """Required configuration, such as the API key, is missing."""


class ApiError(AnalysisError):
    """The provider answered with an error status or an unexpected body."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseError(AnalysisError):
    """The provider output could not be decoded under any known shape."""

    def __init__(self, message: str, content: str = "") -> None:
        excerpt = content[:_EXCERPT_LIMIT]
        if len(content) > _EXCERPT_LIMIT:
            excerpt += "..."
        super().__init__(f"{message}: {excerpt}" if content else message)
        self.content = content
