"""Turn raw live board payloads into StationBoard values."""

from __future__ import annotations

from datetime import datetime
import html
import logging
import re
from typing import Any

from railboard.data.models import (
    CANCELLED,
    DELAYED,
    ON_TIME,
    UNKNOWN,
    BoardDirection,
    Location,
    ServiceEntry,
    StationBoard,
)
from railboard.errors import ParseError

logger = logging.getLogger(__name__)

CLOCK_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
EXCESS_FRACTION_PATTERN = re.compile(r"(\.\d{6})\d+")
TAG_PATTERN = re.compile(r"<[^>]+>")
WHITESPACE_PATTERN = re.compile(r"\s+")

MINUTES_PER_DAY = 24 * 60
EARLY_MORNING_END_MINUTES = 4 * 60
LATE_EVENING_START_MINUTES = 22 * 60

# Upstream expected-time text (lower case) -> status. Unlisted text is UNKNOWN.
STATUS_LOOKUP: dict[str, str] = {
    "on time": ON_TIME,
    "delayed": DELAYED,
    "cancelled": CANCELLED,
}


def _optional_text(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def classify_status(expected: str | None, scheduled: str, cancelled: bool = False) -> str:
    """Map an expected-time field onto ON_TIME, DELAYED, CANCELLED or UNKNOWN."""
    if cancelled:
        return CANCELLED
    if not expected:
        return UNKNOWN
    status = STATUS_LOOKUP.get(expected.lower())
    if status is not None:
        return status
    if CLOCK_PATTERN.match(expected):
        return ON_TIME if expected == scheduled else DELAYED
    return UNKNOWN


def _parse_location(raw: Any) -> Location | None:
    if isinstance(raw, dict):
        raw = [raw]
    if not isinstance(raw, list) or not raw or not isinstance(raw[0], dict):
        return None
    first = raw[0]
    name = _optional_text(first.get("locationName"))
    if name is None:
        return None
    return Location(
        name=name,
        crs=_optional_text(first.get("crs")) or "",
        via=_optional_text(first.get("via")),
    )


def _parse_service(raw: Any, direction: BoardDirection) -> ServiceEntry | None:
    if not isinstance(raw, dict):
        logger.debug("Dropping service: record is not an object")
        return None

    scheduled = _optional_text(raw.get(direction.scheduled_field))
    if scheduled is None or not CLOCK_PATTERN.match(scheduled):
        logger.debug(f"Dropping service: bad {direction.scheduled_field} {scheduled!r}")
        return None

    location = _parse_location(raw.get(direction.location_field))
    if location is None:
        logger.debug(f"Dropping {scheduled} service: missing {direction.location_field}")
        return None

    expected = _optional_text(raw.get(direction.expected_field))
    return ServiceEntry(
        scheduled_time=scheduled,
        expected_time=expected,
        status=classify_status(expected, scheduled, raw.get("isCancelled") is True),
        location=location,
        platform=_optional_text(raw.get("platform")),
        operator=_optional_text(raw.get("operator")),
    )


def _clock_minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def _sort_by_scheduled_time(services: list[ServiceEntry]) -> list[ServiceEntry]:
    """Stable sort by scheduled time; before-04:00 times follow after-22:00 ones."""
    if not services:
        return []
    minutes = [_clock_minutes(service.scheduled_time) for service in services]
    wraps = min(minutes) < EARLY_MORNING_END_MINUTES and max(minutes) >= LATE_EVENING_START_MINUTES

    def sort_key(pair: tuple[int, ServiceEntry]) -> int:
        value = pair[0]
        if wraps and value < EARLY_MORNING_END_MINUTES:
            return value + MINUTES_PER_DAY
        return value

    return [service for _, service in sorted(zip(minutes, services), key=sort_key)]


def _parse_generated_at(value: Any) -> datetime | None:
    text = _optional_text(value)
    if text is None:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # Upstream sends 7 fractional digits; fromisoformat accepts at most 6.
    text = EXCESS_FRACTION_PATTERN.sub(r"\1", text)
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _parse_messages(raw: Any) -> tuple[str, ...]:
    if not isinstance(raw, list):
        return ()
    messages: list[str] = []
    for item in raw:
        if isinstance(item, dict):
            item = item.get("Value", item.get("value"))
        if not isinstance(item, str):
            continue
        text = html.unescape(TAG_PATTERN.sub(" ", item))
        text = WHITESPACE_PATTERN.sub(" ", text).strip()
        if text:
            messages.append(text)
    return tuple(messages)


def parse_board(payload: Any, direction: BoardDirection, row_limit: int) -> StationBoard:
    """Build a StationBoard from a decoded board response.

    Services missing a scheduled time or a destination/origin are dropped and
    counted in ``dropped_count``; the remaining services are ordered by
    scheduled time and cut to ``row_limit``. Raises ParseError only when the
    payload as a whole is unusable.
    """
    if row_limit < 1:
        raise ParseError(f"Row limit must be positive, got {row_limit}")
    if not isinstance(payload, dict):
        raise ParseError("Board response must be a JSON object")

    station_code = _optional_text(payload.get("crs"))
    if station_code is None:
        raise ParseError("Board response is missing the station code")

    raw_services = payload.get("trainServices")
    if raw_services is None:
        raw_services = []
    if not isinstance(raw_services, list):
        raise ParseError("Board response 'trainServices' must be a list")

    services: list[ServiceEntry] = []
    for raw in raw_services:
        entry = _parse_service(raw, direction)
        if entry is not None:
            services.append(entry)

    dropped = len(raw_services) - len(services)
    if dropped:
        logger.warning(
            f"Dropped {dropped} of {len(raw_services)} {direction.name} services "
            f"for {station_code} with missing required fields"
        )

    return StationBoard(
        station_code=station_code.upper(),
        location_name=_optional_text(payload.get("locationName")) or station_code.upper(),
        direction=direction,
        generated_at=_parse_generated_at(payload.get("generatedAt")),
        services=tuple(_sort_by_scheduled_time(services)[:row_limit]),
        messages=_parse_messages(payload.get("nrccMessages")),
        dropped_count=dropped,
    )


__all__ = ["STATUS_LOOKUP", "classify_status", "parse_board"]
