"""Tests for the command-line entry point."""

import json
import logging
import os
import subprocess
import sys
from collections.abc import Iterator
from pathlib import Path

import httpx
import pytest
import structlog

from xbox_capture_sync import main as main_module
from xbox_capture_sync.main import emit, main, parse_arguments, run_sync
from xbox_capture_sync.models import AppConfig, RunResult


def fake_api(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/api/v2/dvr/screenshots/":
        return httpx.Response(200, json={"screenshots": [
            {"dateTaken": "2023-05-01T12:30:45Z", "screenshotUris": [{"uri": "https://media.example.com/s1"}]},
        ]})
    if request.url.path == "/api/v2/dvr/gameClips/":
        return httpx.Response(200, json={"gameClips": [
            {"dateRecorded": "2023-05-01T12:30:45Z", "gameClipUris": [{"uri": "https://media.example.com/c1"}]},
        ]})
    return httpx.Response(200, content=b"media")


PROJECT_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture(autouse=True)
def unconfigured_logging() -> Iterator[None]:
    """Each test starts from structlog's defaults, which print to stdout."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


def run_main(argv: list[str], environ: dict[str, str], cwd: Path) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(argv, environ=environ, cwd=cwd)
    return exc_info.value.code


def test_parse_arguments_defaults() -> None:
    args = parse_arguments([])

    assert args.output_dir is None
    assert args.log_level is None
    assert args.log_dir is None


def test_emit(capsys: pytest.CaptureFixture[str]) -> None:
    assert emit(RunResult.success(2)) == 0
    assert emit(RunResult.failure("boom")) == 1

    lines = capsys.readouterr().out.splitlines()
    assert json.loads(lines[0]) == {"code": 200, "message": "2 new captures downloaded."}
    assert json.loads(lines[1]) == {"code": 500, "message": "boom"}


def test_run_sync(tmp_path: Path) -> None:
    config = AppConfig(api_key="abc123", output_directory=tmp_path / "Captures")

    result = run_sync(config, transport=httpx.MockTransport(fake_api))

    assert result == RunResult.success(2)
    assert sorted(p.name for p in (tmp_path / "Captures").iterdir()) == [
        "2023-05-01-12-30-45-gameclip.mp4",
        "2023-05-01-12-30-45-screenshot.png",
    ]


def test_main_success(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(
        main_module,
        "run_sync",
        lambda config: run_sync(config, transport=httpx.MockTransport(fake_api)),
    )

    code = run_main([], {"API_KEY": "abc-123"}, tmp_path)

    assert code == 0
    assert json.loads(capsys.readouterr().out) == {"code": 200, "message": "2 new captures downloaded."}
    assert (tmp_path / "Captures").is_dir()

    # Second run finds everything on disk
    code = run_main([], {"API_KEY": "abc-123"}, tmp_path)

    assert code == 0
    assert json.loads(capsys.readouterr().out) == {"code": 200, "message": "0 new captures downloaded."}


def test_main_missing_api_key(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = run_main([], {"API_KEY": "!!!"}, tmp_path)

    assert code == 1
    assert json.loads(capsys.readouterr().out) == {"code": 500, "message": "API key not set."}
    assert (tmp_path / "Captures").is_dir()


def test_main_output_dir_flag(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = run_main(["--output-dir", "elsewhere"], {}, tmp_path)

    assert code == 1
    capsys.readouterr()
    assert (tmp_path / "elsewhere").is_dir()
    assert not (tmp_path / "Captures").exists()


def test_main_invalid_configuration(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = run_main([], {"API_KEY": "abc", "REQUEST_TIMEOUT": "never"}, tmp_path)

    assert code == 1
    assert json.loads(capsys.readouterr().out) == {
        "code": 500,
        "message": "REQUEST_TIMEOUT must be a number.",
    }


def test_main_stdout_is_single_json_line(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = run_main(["--log-level", "DEBUG"], {"API_KEY": "!!!"}, tmp_path)

    assert code == 1
    captured = capsys.readouterr()
    assert captured.out.splitlines() == ['{"code": 500, "message": "API key not set."}']
    assert "Configuration loaded" in captured.err


def test_main_unusable_log_dir(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    not_a_dir = tmp_path / "logs"
    not_a_dir.write_text("occupied")

    code = run_main([], {"API_KEY": "abc", "LOG_DIR": str(not_a_dir)}, tmp_path)

    assert code == 1
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 1
    response = json.loads(lines[0])
    assert response["code"] == 500
    assert response["message"].startswith("Failed to set up log directory")


def test_module_entry_point_prints_one_line(tmp_path: Path) -> None:
    """A fresh interpreter writes only the JSON response to stdout."""
    env = {k: v for k, v in os.environ.items() if k not in ("CAPTURES_DIR", "LOG_DIR", "ENVIRONMENT")}
    env["API_KEY"] = "!!!"
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(PROJECT_ROOT), env.get("PYTHONPATH")]))

    completed = subprocess.run(
        [sys.executable, "-m", "xbox_capture_sync", "--log-level", "DEBUG"],
        cwd=tmp_path,
        env=env,
        capture_output=True,
        text=True,
        timeout=60,
    )

    assert completed.returncode == 1
    assert completed.stdout.splitlines() == ['{"code": 500, "message": "API key not set."}']
    assert (tmp_path / "Captures").is_dir()
