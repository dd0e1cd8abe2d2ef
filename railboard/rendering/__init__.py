"""Terminal rendering for station boards."""

from railboard.rendering.board_view import (
    build_board_table,
    build_board_view,
    build_error_view,
    format_location,
)
from railboard.rendering.terminal import TerminalRenderer

__all__ = [
    "TerminalRenderer",
    "build_board_table",
    "build_board_view",
    "build_error_view",
    "format_location",
]
