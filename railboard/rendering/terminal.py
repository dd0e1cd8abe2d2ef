"""Live terminal output for the refresh loop."""

from __future__ import annotations

from datetime import datetime
from types import TracebackType

from rich.console import Console
from rich.live import Live

from railboard.data.models import StationBoard
from railboard.rendering.board_view import build_board_view, build_error_view


class TerminalRenderer:
    """Replaces the whole terminal frame on every render; use as a context manager."""

    def __init__(
        self,
        interval_seconds: float = 15,
        console: Console | None = None,
        screen: bool = False,
    ) -> None:
        self._console = console or Console()
        self._interval_seconds = interval_seconds
        self._live = Live(console=self._console, auto_refresh=False, screen=screen)
        self._last_updated: datetime | None = None

    def __enter__(self) -> TerminalRenderer:
        self._live.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._live.stop()

    def render(self, board: StationBoard, updated_at: datetime) -> None:
        self._last_updated = updated_at
        self._live.update(build_board_view(board, updated_at, self._interval_seconds), refresh=True)

    def render_error(self, error: Exception, last_board: StationBoard | None) -> None:
        view = build_error_view(
            error,
            last_board,
            self._last_updated if last_board is not None else None,
            datetime.now(),
            self._interval_seconds,
        )
        self._live.update(view, refresh=True)

    def render_stopped(self) -> None:
        self._console.print("[dim]Exiting...[/]")


__all__ = ["TerminalRenderer"]
