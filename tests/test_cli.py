from __future__ import annotations

import textwrap
from unittest.mock import patch

import pytest

from railboard.cli import build_parser, main
from railboard.data.models import ARRIVALS, DEPARTURES


def _write_config(tmp_path, default_num_rows: int = 10) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(
        textwrap.dedent(
            f"""
            darwin:
              departures_url: "https://example.test/GetDepartureBoard"
              arrivals_url: "https://example.test/GetArrivalBoard"
              request_timeout_seconds: 5
            board:
              refresh_interval_seconds: 15
              default_num_rows: {default_num_rows}
            logging:
              level: "INFO"
              log_dir: "{tmp_path / 'logs'}"
            """
        )
    )
    return str(path)


@pytest.mark.parametrize(
    ("argv", "direction"),
    [
        (["departures", "kgx"], DEPARTURES),
        (["dep", "KGX"], DEPARTURES),
        (["d", "KGX"], DEPARTURES),
        (["arrivals", "KGX"], ARRIVALS),
        (["arr", "kgx"], ARRIVALS),
        (["a", "Kgx"], ARRIVALS),
    ],
)
def test_parser_subcommands_and_aliases(argv: list[str], direction) -> None:
    args = build_parser().parse_args(argv)

    assert args.direction_name == direction.name
    assert args.station_code == "KGX"
    assert args.num_rows is None


def test_parser_num_rows_before_or_after_subcommand() -> None:
    parser = build_parser()

    assert parser.parse_args(["-n", "5", "departures", "LBG"]).num_rows == 5
    assert parser.parse_args(["departures", "LBG", "--num-rows", "7"]).num_rows == 7


@pytest.mark.parametrize(
    "argv",
    [
        ["departures", "KG"],
        ["departures", "KGX1"],
        ["departures", "K1X"],
        ["-n", "0", "departures", "KGX"],
        ["-n", "many", "departures", "KGX"],
        ["sideways", "KGX"],
        [],
    ],
)
def test_parser_rejects_bad_arguments(argv: list[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        build_parser().parse_args(argv)

    assert exc_info.value.code == 2


def test_main_exits_non_zero_without_credential(tmp_path, monkeypatch, capsys, restore_root_logging) -> None:
    path = _write_config(tmp_path)
    monkeypatch.setenv("DEP_API_KEY", "")
    monkeypatch.setenv("ARR_API_KEY", "arr-key")

    with patch("railboard.cli.BoardRefresher") as refresher_cls:
        exit_code = main(["--config", path, "departures", "LBG"])

    assert exit_code == 1
    refresher_cls.assert_not_called()
    assert "DEP_API_KEY" in capsys.readouterr().err


def test_main_exits_non_zero_for_missing_config_file(tmp_path, capsys) -> None:
    exit_code = main(["--config", str(tmp_path / "nope.yaml"), "departures", "LBG"])

    assert exit_code == 1
    assert "Config file not found" in capsys.readouterr().err


def test_main_runs_refresh_loop(tmp_path, monkeypatch, restore_root_logging) -> None:
    path = _write_config(tmp_path)
    monkeypatch.setenv("DEP_API_KEY", "dep-key")
    monkeypatch.setenv("ARR_API_KEY", "")

    with patch("railboard.cli.TerminalRenderer") as renderer_cls, patch(
        "railboard.cli.BoardRefresher"
    ) as refresher_cls:
        exit_code = main(["--config", path, "-n", "4", "dep", "lbg"])

    assert exit_code == 0
    renderer_cls.assert_called_once_with(15)
    args, kwargs = refresher_cls.call_args
    assert args[2:] == (DEPARTURES, "LBG", 4)
    assert kwargs == {"interval_seconds": 15}
    refresher_cls.return_value.run.assert_called_once_with(max_ticks=None)


def test_main_once_runs_single_tick(tmp_path, monkeypatch, restore_root_logging) -> None:
    path = _write_config(tmp_path)
    monkeypatch.setenv("ARR_API_KEY", "arr-key")

    with patch("railboard.cli.TerminalRenderer"), patch("railboard.cli.BoardRefresher") as refresher_cls:
        exit_code = main(["--config", path, "--once", "arrivals", "EDB"])

    assert exit_code == 0
    assert refresher_cls.call_args.args[4] == 10
    refresher_cls.return_value.run.assert_called_once_with(max_ticks=1)


def test_main_exits_non_zero_for_invalid_row_default(tmp_path, monkeypatch, capsys) -> None:
    path = _write_config(tmp_path, default_num_rows=0)
    monkeypatch.setenv("DEP_API_KEY", "dep-key")

    with patch("railboard.cli.BoardRefresher") as refresher_cls:
        exit_code = main(["--config", path, "departures", "LBG"])

    assert exit_code == 1
    refresher_cls.assert_not_called()
    assert "default_num_rows" in capsys.readouterr().err


def test_main_exits_cleanly_on_interrupt_during_startup(tmp_path, monkeypatch, restore_root_logging) -> None:
    path = _write_config(tmp_path)
    monkeypatch.setenv("DEP_API_KEY", "dep-key")

    with patch("railboard.cli.TerminalRenderer") as renderer_cls, patch(
        "railboard.cli.BoardRefresher"
    ) as refresher_cls:
        renderer_cls.return_value.__enter__.side_effect = KeyboardInterrupt
        exit_code = main(["--config", path, "departures", "LBG"])

    assert exit_code == 0
    refresher_cls.return_value.run.assert_not_called()
