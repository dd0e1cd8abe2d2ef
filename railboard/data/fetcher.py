"""Fetch and parse a single station board."""

from __future__ import annotations

import logging
from typing import Mapping

from railboard.data.darwin_client import DarwinClient
from railboard.data.models import BoardDirection, StationBoard
from railboard.data.parser import parse_board
from railboard.errors import MissingCredentialError

logger = logging.getLogger(__name__)


class BoardFetcher:
    """Issues one authenticated board request per call and parses the result.

    ``credentials`` maps a direction name ("departures", "arrivals") to its
    API key. Nothing is cached between calls.
    """

    def __init__(self, client: DarwinClient, credentials: Mapping[str, str]) -> None:
        self._client = client
        self._credentials = dict(credentials)

    def fetch(self, direction: BoardDirection, station_code: str, row_limit: int) -> StationBoard:
        api_key = (self._credentials.get(direction.name) or "").strip()
        if not api_key:
            raise MissingCredentialError(direction.credential_env)

        logger.debug(f"Fetching {direction.name} for {station_code} (numRows={row_limit})")
        payload = self._client.get_board(direction, station_code, row_limit, api_key)
        board = parse_board(payload, direction, row_limit)

        logger.debug(f"Fetched {len(board.services)} {direction.name} for {board.station_code}")
        return board


__all__ = ["BoardFetcher"]
