"""Error types shared by the config, fetch and refresh layers."""

from __future__ import annotations

import re

MAX_BODY_PREVIEW_CHARS = 200
WHITESPACE_PATTERN = re.compile(r"\s+")


def _body_preview(body: str) -> str:
    text = WHITESPACE_PATTERN.sub(" ", body).strip()
    if len(text) > MAX_BODY_PREVIEW_CHARS:
        return text[: MAX_BODY_PREVIEW_CHARS - 3].rstrip() + "..."
    return text


class ConfigError(ValueError):
    """Raised when configuration or credentials are missing or invalid."""


class FetchError(Exception):
    """Base class for failures while fetching a board; retried on the next tick."""


class NetworkError(FetchError):
    """Raised when the request could not complete (connection error, timeout)."""


class UpstreamError(FetchError):
    """Raised when the API answers with a non-200 status.

    The message carries a short preview of the body; ``body`` keeps all of it.
    """

    def __init__(self, status_code: int, body: str = "") -> None:
        detail = f"Status {status_code}"
        preview = _body_preview(body)
        if preview:
            detail = f"{detail}, Body: {preview}"
        super().__init__(f"Board request failed: {detail}")
        self.status_code = status_code
        self.body = body


class ParseError(FetchError):
    """Raised when a response payload cannot be turned into a board."""


class MissingCredentialError(ConfigError, FetchError):
    """Raised before any request when the direction's API key is absent or blank."""

    def __init__(self, env_var: str) -> None:
        super().__init__(
            f"Required environment variable '{env_var}' is not set or empty. "
            "Provide it in your shell or a .env file."
        )
        self.env_var = env_var


__all__ = [
    "ConfigError",
    "FetchError",
    "MissingCredentialError",
    "NetworkError",
    "ParseError",
    "UpstreamError",
]
