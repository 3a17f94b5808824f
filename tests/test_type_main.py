"""Tests for the pasteclipboard-type command."""

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from pasteclipboard.cli import type_main
from pasteclipboard.dispatcher import DispatchRequest, DispatchResult
from pasteclipboard.errors import DispatchFailed, InjectionError
from pasteclipboard.settings import ConfigStore, Settings
from pasteclipboard.states import State


def _run(argv: list[str]) -> None:
    with patch.object(sys, "argv", ["pasteclipboard-type", *argv]):
        type_main.main()


def _ok(text: str, delay: int) -> DispatchResult:
    return DispatchResult(request=DispatchRequest(text, delay), status=State.IDLE)


@patch("pasteclipboard.cli.type_main.resolve_backend", return_value="xdotool")
@patch("pasteclipboard.cli.type_main.run_dispatch")
def test_types_and_saves(
    mock_dispatch: MagicMock,
    mock_resolve: MagicMock,  # noqa: ARG001
    tmp_path: Path,
) -> None:
    """Test text and delay are dispatched and remembered."""
    config = tmp_path / "config.ini"
    mock_dispatch.return_value = _ok("Hello World", 2)

    _run(["Hello World", "-d", "2", "--config", str(config)])

    mock_dispatch.assert_called_once_with("Hello World", 2, "xdotool")
    assert ConfigStore(config).load() == Settings(text="Hello World", delay_seconds=2)


@patch("pasteclipboard.cli.type_main.resolve_backend", return_value="wtype")
@patch("pasteclipboard.cli.type_main.run_dispatch")
def test_falls_back_to_saved_settings(
    mock_dispatch: MagicMock,
    mock_resolve: MagicMock,  # noqa: ARG001
    tmp_path: Path,
) -> None:
    """Test missing arguments come from the config file."""
    config = tmp_path / "config.ini"
    ConfigStore(config).save(Settings(text="saved", delay_seconds=9))
    mock_dispatch.return_value = _ok("saved", 9)

    _run(["--config", str(config), "--no-save"])

    mock_dispatch.assert_called_once_with("saved", 9, "wtype")


@patch("pasteclipboard.cli.type_main.run_dispatch")
def test_invalid_delay_exits_2(mock_dispatch: MagicMock, tmp_path: Path) -> None:
    """Test a bad delay is rejected before anything is scheduled."""
    with pytest.raises(SystemExit) as excinfo:
        _run(["text", "-d", "-5", "--config", str(tmp_path / "config.ini")])

    assert excinfo.value.code == 2
    mock_dispatch.assert_not_called()


@patch("pasteclipboard.cli.type_main.resolve_backend", side_effect=InjectionError("No typing backend found."))
@patch("pasteclipboard.cli.type_main.run_dispatch")
def test_no_backend_exits_1(
    mock_dispatch: MagicMock,
    mock_resolve: MagicMock,  # noqa: ARG001
    tmp_path: Path,
) -> None:
    """Test a missing backend is reported up front."""
    with pytest.raises(SystemExit) as excinfo:
        _run(["text", "--config", str(tmp_path / "config.ini")])

    assert excinfo.value.code == 1
    mock_dispatch.assert_not_called()


@patch("pasteclipboard.cli.type_main.resolve_backend", return_value="xdotool")
@patch("pasteclipboard.cli.type_main.run_dispatch")
def test_failure_exits_1(
    mock_dispatch: MagicMock,
    mock_resolve: MagicMock,  # noqa: ARG001
    tmp_path: Path,
    capsys: pytest.CaptureFixture,
) -> None:
    """Test typing failures are reported with exit status 1."""
    mock_dispatch.return_value = DispatchResult(
        request=DispatchRequest("text", 0),
        status=State.IDLE,
        error=DispatchFailed(InjectionError("xdotool failed: no display")),
    )

    with pytest.raises(SystemExit) as excinfo:
        _run(["text", "-d", "0", "--config", str(tmp_path / "config.ini")])

    assert excinfo.value.code == 1
    assert "no display" in capsys.readouterr().err


@patch("pasteclipboard.cli.type_main.resolve_backend", return_value="xdotool")
@patch("pasteclipboard.cli.type_main.run_dispatch")
def test_cancel_exits_1(
    mock_dispatch: MagicMock,
    mock_resolve: MagicMock,  # noqa: ARG001
    tmp_path: Path,
) -> None:
    """Test Ctrl+C during the countdown exits non-zero."""
    mock_dispatch.return_value = DispatchResult(request=DispatchRequest("text", 5), status=State.CANCELLED)

    with pytest.raises(SystemExit) as excinfo:
        _run(["text", "-d", "5", "--config", str(tmp_path / "config.ini")])

    assert excinfo.value.code == 1


@patch("pasteclipboard.cli.type_main.available_backends", return_value=["xdotool", "uinput"])
def test_check(mock_available: MagicMock, capsys: pytest.CaptureFixture) -> None:
    """Test --check lists backends."""
    _run(["--check"])

    assert "xdotool, uinput" in capsys.readouterr().out


def test_nothing_to_type(tmp_path: Path) -> None:
    """Test an empty text with nothing saved exits 1."""
    with pytest.raises(SystemExit) as excinfo:
        _run(["--config", str(tmp_path / "config.ini")])

    assert excinfo.value.code == 1
