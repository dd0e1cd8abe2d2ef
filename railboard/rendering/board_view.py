"""Build rich renderables for a station board."""

from __future__ import annotations

from datetime import datetime

from rich import box
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from railboard.data.models import ON_TIME, UNKNOWN, Location, StationBoard

STYLE_ON_TIME = "bold green"
STYLE_UNKNOWN = "bold yellow"
STYLE_LATE = "bold red"

STATUS_STYLES = {
    ON_TIME: STYLE_ON_TIME,
    UNKNOWN: STYLE_UNKNOWN,
}

CLOCK_FORMAT = "%H:%M:%S"


def format_location(location: Location) -> str:
    """Format as "Name (CRS)", with the via text on a second line."""
    text = f"{location.name} ({location.crs})" if location.crs else location.name
    if location.via:
        text = f"{text}\n{location.via}"
    return text


def build_board_table(board: StationBoard) -> Table:
    """One row per service; the platform cell is blank when none is allocated."""
    table = Table(box=box.ROUNDED, show_header=True, header_style="bold", show_lines=True)
    table.add_column("Scheduled", justify="center")
    table.add_column("Expected", justify="center")
    table.add_column(board.direction.location_label)
    table.add_column("Platform", justify="center")
    table.add_column("Operator", justify="center")

    for service in board.services:
        table.add_row(
            Text(service.scheduled_time),
            Text(service.expected_time or "--", style=STATUS_STYLES.get(service.status, STYLE_LATE)),
            Text(format_location(service.location)),
            Text(service.platform or ""),
            Text(service.operator or ""),
        )
    return table


def _footer(interval_seconds: float) -> Text:
    return Text(
        f"Press Ctrl+C to exit. Auto-refresh every {interval_seconds:g}s.",
        style="bold italic",
    )


def _board_parts(board: StationBoard, updated_at: datetime | None) -> list[RenderableType]:
    title = f"{board.direction.title} for {board.location_name} ({board.station_code})"
    updated = f"Last updated: {updated_at:{CLOCK_FORMAT}}" if updated_at else "Last updated: --"
    if board.generated_at is not None:
        updated = f"{updated} (board generated {board.generated_at:{CLOCK_FORMAT}})"

    parts: list[RenderableType] = [Text(title, style="bold"), Text(updated, style="dim"), Text("")]
    if board.services:
        parts.append(build_board_table(board))
    else:
        parts.append(Text(f"No services found for station code '{board.station_code}'."))
    for message in board.messages:
        parts.append(Text(message, style="yellow"))
    if board.dropped_count:
        parts.append(
            Text(f"{board.dropped_count} service(s) hidden due to incomplete data.", style="dim")
        )
    return parts


def build_board_view(
    board: StationBoard, updated_at: datetime | None, interval_seconds: float
) -> RenderableType:
    """Whole frame for a freshly fetched board."""
    return Group(*_board_parts(board, updated_at), _footer(interval_seconds))


def build_error_view(
    error: Exception,
    last_board: StationBoard | None,
    last_updated: datetime | None,
    failed_at: datetime,
    interval_seconds: float,
) -> RenderableType:
    """Whole frame for a failed tick: the error, then the last good board if any."""
    parts: list[RenderableType] = [
        Panel(
            Text(f"Unable to fetch board: {error}", style=STYLE_LATE),
            title=f"{failed_at:{CLOCK_FORMAT}}",
            border_style="red",
        )
    ]
    if last_board is not None:
        parts.append(Text("Showing the last successful board.", style="dim italic"))
        parts.extend(_board_parts(last_board, last_updated))
    parts.append(_footer(interval_seconds))
    return Group(*parts)


__all__ = ["build_board_table", "build_board_view", "build_error_view", "format_location"]
