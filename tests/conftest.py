from __future__ import annotations

import io
import logging
from typing import Any

import pytest
from rich.console import Console, RenderableType


def make_service(
    std: str | None = "10:00",
    destination: str | None = "Brighton",
    origin: str | None = "London Bridge",
    etd: str | None = "On time",
    platform: str | None = "5",
    **extra: Any,
) -> dict[str, Any]:
    """Build one trainServices record shaped like the live board JSON."""
    service: dict[str, Any] = {
        "std": std,
        "etd": etd,
        "sta": extra.pop("sta", std),
        "eta": extra.pop("eta", etd),
        "platform": platform,
        "operator": extra.pop("operator", "Southern"),
        "destination": (
            [{"locationName": destination, "crs": "BTN", "via": extra.pop("via", None)}]
            if destination
            else []
        ),
        "origin": [{"locationName": origin, "crs": "LBG", "via": None}] if origin else [],
    }
    service.update(extra)
    return service


def make_payload(services: list[dict[str, Any]] | None = None, **extra: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "generatedAt": "2024-01-20T10:00:00.1234567+00:00",
        "locationName": "London Bridge",
        "crs": "LBG",
        "trainServices": services if services is not None else [make_service()],
    }
    payload.update(extra)
    return payload


def render_to_text(renderable: RenderableType, width: int = 120) -> str:
    console = Console(file=io.StringIO(), width=width, record=True)
    console.print(renderable)
    return console.export_text()


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
