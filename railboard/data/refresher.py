"""Fixed-cadence refresh loop that fetches a board and hands it to a renderer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import logging
import threading
import time
from typing import Any, Callable

from railboard.data.fetcher import BoardFetcher
from railboard.data.models import BoardDirection, StationBoard
from railboard.errors import FetchError, MissingCredentialError

logger = logging.getLogger(__name__)

REFRESH_INTERVAL_SECONDS = 15

IDLE = "IDLE"
FETCHING = "FETCHING"
RENDERING = "RENDERING"
WAITING = "WAITING"
STOPPED = "STOPPED"


@dataclass(frozen=True)
class TickResult:
    """Outcome of one fetch-and-render cycle."""

    board: StationBoard | None
    error: FetchError | None
    started_at: float
    finished_at: float


class BoardRefresher:
    """Runs fetch, render, wait on the calling thread until stopped.

    ``renderer`` must provide ``render(board, updated_at)``,
    ``render_error(error, last_board)`` and ``render_stopped()``.
    Each period is measured from the start of the previous fetch; a tick
    that overruns the period is followed immediately by the next one.
    """

    def __init__(
        self,
        fetcher: BoardFetcher,
        renderer: Any,
        direction: BoardDirection,
        station_code: str,
        row_limit: int,
        interval_seconds: float = REFRESH_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetcher = fetcher
        self._renderer = renderer
        self._direction = direction
        self._station_code = station_code
        self._row_limit = row_limit
        self._interval_seconds = interval_seconds
        self._clock = clock
        self._stop_event = threading.Event()
        self._state = IDLE

    @property
    def state(self) -> str:
        return self._state

    def stop(self) -> None:
        """Request cancellation; safe to call from a signal handler or another thread."""
        self._stop_event.set()

    def run(self, max_ticks: int | None = None) -> TickResult | None:
        """Run until stopped (or after ``max_ticks`` ticks); returns the last tick's result."""
        last_result: TickResult | None = None
        last_board: StationBoard | None = None
        ticks = 0
        cancelled = False
        try:
            while True:
                if self._stop_event.is_set():
                    cancelled = True
                    break
                started_at = self._clock()
                self._state = FETCHING
                board, error = self._fetch_once()
                if self._stop_event.is_set():
                    cancelled = True
                    break

                self._state = RENDERING
                if board is not None:
                    self._renderer.render(board, datetime.now())
                    last_board = board
                else:
                    self._renderer.render_error(error, last_board)
                last_result = TickResult(board, error, started_at, self._clock())

                ticks += 1
                if max_ticks is not None and ticks >= max_ticks:
                    break

                self._state = WAITING
                self._stop_event.wait(self._remaining_wait(started_at))
        except KeyboardInterrupt:
            logger.info(f"Interrupted while {self._state.lower()}")
            cancelled = True
        finally:
            self._state = STOPPED

        if cancelled:
            logger.info(f"Stopped refreshing {self._direction.name} for {self._station_code}")
            self._renderer.render_stopped()
        return last_result

    def _fetch_once(self) -> tuple[StationBoard | None, FetchError | None]:
        try:
            board = self._fetcher.fetch(self._direction, self._station_code, self._row_limit)
        except MissingCredentialError:
            raise
        except FetchError as exc:
            logger.warning(f"Refresh of {self._station_code} failed ({type(exc).__name__}): {exc}")
            return None, exc
        return board, None

    def _remaining_wait(self, started_at: float) -> float:
        elapsed = self._clock() - started_at
        return max(0.0, self._interval_seconds - elapsed)


__all__ = [
    "BoardRefresher",
    "FETCHING",
    "IDLE",
    "REFRESH_INTERVAL_SECONDS",
    "RENDERING",
    "STOPPED",
    "TickResult",
    "WAITING",
]
