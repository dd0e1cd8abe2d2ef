"""Live Departure Board (LDBWS) REST client."""

from __future__ import annotations

from typing import Any

import requests

from railboard.data.models import ARRIVALS, BoardDirection
from railboard.errors import NetworkError, ParseError, UpstreamError


class DarwinClient:
    """Thin wrapper around the departure and arrival board endpoints using requests."""

    def __init__(self, departures_url: str, arrivals_url: str, timeout_seconds: float = 10) -> None:
        self._departures_url = departures_url.rstrip("/")
        self._arrivals_url = arrivals_url.rstrip("/")
        self._timeout_seconds = timeout_seconds

    def base_url(self, direction: BoardDirection) -> str:
        if direction == ARRIVALS:
            return self._arrivals_url
        return self._departures_url

    def get_board(
        self, direction: BoardDirection, station_code: str, row_limit: int, api_key: str
    ) -> dict[str, Any]:
        """Fetch one board; returns the decoded JSON body."""
        url = f"{self.base_url(direction)}/{station_code.upper()}"
        headers = {"x-apikey": api_key}
        params = {"numRows": row_limit}
        try:
            response = requests.get(url, headers=headers, params=params, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise NetworkError(f"Board request failed: {exc}") from exc

        if response.status_code != 200:
            raise UpstreamError(response.status_code, response.text.strip())

        try:
            return response.json()
        except ValueError as exc:
            raise ParseError("Board response was not valid JSON") from exc


__all__ = ["DarwinClient"]
