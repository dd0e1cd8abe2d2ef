"""Configuration loader for the railboard app."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Any

from dotenv import load_dotenv
import yaml

from railboard.data.models import ARRIVALS, DEPARTURES, BoardDirection
from railboard.errors import ConfigError, MissingCredentialError

DEFAULT_CONFIG_PATH = "config/config.yaml"
MAX_NUM_ROWS = 150

DEFAULTS: dict[str, Any] = {
    "darwin": {
        "departures_url": (
            "https://api1.raildata.org.uk/1010-live-departure-board-dep1_2"
            "/LDBWS/api/20220120/GetDepartureBoard"
        ),
        "arrivals_url": (
            "https://api1.raildata.org.uk/1010-live-arrival-board-arr1_1"
            "/LDBWS/api/20220120/GetArrivalBoard"
        ),
        "request_timeout_seconds": 10,
    },
    "board": {
        "refresh_interval_seconds": 15,
        "default_num_rows": 10,
    },
    "logging": {
        "level": "INFO",
        "log_dir": "logs/",
    },
}


@dataclass(frozen=True)
class DarwinConfig:
    """Live departure board API configuration."""

    departures_url: str
    arrivals_url: str
    dep_api_key: str
    arr_api_key: str
    request_timeout_seconds: float

    def api_key_for(self, direction: BoardDirection) -> str:
        if direction == ARRIVALS:
            return self.arr_api_key
        return self.dep_api_key


@dataclass(frozen=True)
class BoardConfig:
    """Refresh cadence and board size."""

    refresh_interval_seconds: float
    default_num_rows: int


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str
    log_dir: str


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""

    darwin: DarwinConfig
    board: BoardConfig
    log: LoggingConfig


def _require_key(mapping: dict[str, Any], key: str, context: str) -> Any:
    if key not in mapping:
        raise ConfigError(f"Missing required key '{key}' in {context} config")
    return mapping[key]


def _require_positive_number(mapping: dict[str, Any], key: str, context: str) -> float:
    value = _require_key(mapping, key, context)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"'{key}' in {context} config must be a positive number, got {value!r}")
    return value


def _require_row_count(mapping: dict[str, Any], key: str, context: str) -> int:
    value = _require_key(mapping, key, context)
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= MAX_NUM_ROWS:
        raise ConfigError(
            f"'{key}' in {context} config must be a whole number from 1 to {MAX_NUM_ROWS}, "
            f"got {value!r}"
        )
    return value


def _require_section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = _require_key(data, name, name)
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' config must be a mapping")
    return section


def load_config(path: str = DEFAULT_CONFIG_PATH, required: bool = True) -> AppConfig:
    """Load application configuration from a YAML file.

    API keys come from ``DEP_API_KEY`` and ``ARR_API_KEY`` in the environment
    (or a ``.env`` file). Blank keys are accepted here and rejected by
    :func:`require_api_key` for the direction actually used. With
    ``required=False`` a missing file falls back to the built-in defaults.
    """
    load_dotenv()
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        if required:
            raise ConfigError(f"Config file not found: {path}") from exc
        data = DEFAULTS

    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a mapping at the top level")

    darwin_section = _require_section(data, "darwin")
    board_section = _require_section(data, "board")
    logging_section = _require_section(data, "logging")

    darwin = DarwinConfig(
        departures_url=_require_key(darwin_section, "departures_url", "darwin"),
        arrivals_url=_require_key(darwin_section, "arrivals_url", "darwin"),
        dep_api_key=os.environ.get(DEPARTURES.credential_env, "").strip(),
        arr_api_key=os.environ.get(ARRIVALS.credential_env, "").strip(),
        request_timeout_seconds=_require_positive_number(
            darwin_section, "request_timeout_seconds", "darwin"
        ),
    )

    board = BoardConfig(
        refresh_interval_seconds=_require_positive_number(
            board_section, "refresh_interval_seconds", "board"
        ),
        default_num_rows=_require_row_count(board_section, "default_num_rows", "board"),
    )

    logging = LoggingConfig(
        level=_require_key(logging_section, "level", "logging"),
        log_dir=_require_key(logging_section, "log_dir", "logging"),
    )

    return AppConfig(darwin=darwin, board=board, log=logging)


def require_api_key(config: AppConfig, direction: BoardDirection) -> str:
    """Return the API key for ``direction`` or raise MissingCredentialError."""
    api_key = config.darwin.api_key_for(direction)
    if not api_key:
        raise MissingCredentialError(direction.credential_env)
    return api_key


__all__ = [
    "AppConfig",
    "BoardConfig",
    "DarwinConfig",
    "LoggingConfig",
    "load_config",
    "require_api_key",
]
