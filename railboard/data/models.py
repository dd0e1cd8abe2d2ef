"""Domain model for a station board and its services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

ON_TIME = "ON_TIME"
DELAYED = "DELAYED"
CANCELLED = "CANCELLED"
UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class BoardDirection:
    """Which board to show, and how the upstream fields map onto it."""

    name: str
    title: str
    credential_env: str
    location_field: str
    location_label: str
    scheduled_field: str
    expected_field: str


DEPARTURES = BoardDirection(
    name="departures",
    title="Departures",
    credential_env="DEP_API_KEY",
    location_field="destination",
    location_label="Destination",
    scheduled_field="std",
    expected_field="etd",
)

ARRIVALS = BoardDirection(
    name="arrivals",
    title="Arrivals",
    credential_env="ARR_API_KEY",
    location_field="origin",
    location_label="Origin",
    scheduled_field="sta",
    expected_field="eta",
)

DIRECTIONS = {direction.name: direction for direction in (DEPARTURES, ARRIVALS)}


def direction_from_name(name: str) -> BoardDirection:
    """Return the direction called ``name`` ("departures" or "arrivals")."""
    try:
        return DIRECTIONS[name.lower()]
    except KeyError as exc:
        raise ValueError(f"Unknown board direction: {name!r}") from exc


@dataclass(frozen=True)
class Location:
    """Destination or origin of a service."""

    name: str
    crs: str
    via: str | None = None


@dataclass(frozen=True)
class ServiceEntry:
    """Single row on a board."""

    scheduled_time: str
    expected_time: str | None
    status: str
    location: Location
    platform: str | None = None
    operator: str | None = None


@dataclass(frozen=True)
class StationBoard:
    """Services for one station and direction, as returned by a single fetch."""

    station_code: str
    location_name: str
    direction: BoardDirection
    generated_at: datetime | None
    services: tuple[ServiceEntry, ...]
    messages: tuple[str, ...] = ()
    dropped_count: int = 0


__all__ = [
    "ARRIVALS",
    "BoardDirection",
    "CANCELLED",
    "DELAYED",
    "DEPARTURES",
    "DIRECTIONS",
    "Location",
    "ON_TIME",
    "ServiceEntry",
    "StationBoard",
    "UNKNOWN",
    "direction_from_name",
]
