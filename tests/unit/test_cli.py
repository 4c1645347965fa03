# tests/unit/test_cli.py: Unit tests for the command-line interface.

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from lambdalog import __version__
from lambdalog.cli import app
from lambdalog.util import paths

runner = CliRunner()

@pytest.fixture(autouse=True)
def no_default_config(monkeypatch, tmp_path: Path):
    monkeypatch.delenv(paths.CONFIG_ENV_VAR, raising=False)
    monkeypatch.setattr(paths, "get_config_home", lambda: tmp_path / "empty")

@pytest.fixture
def scoped_config(tmp_path: Path) -> Path:
    config_path = tmp_path / "logging.yaml"
    config_path.write_text(
        "options:\n"
        "  include_scopes: true\n"
        "  include_event_id: true\n"
        "  include_exception: true\n"
    )
    return config_path

def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout

def test_emit_default_record():
    """Tests that emit writes one JSON record to stdout."""
    result = runner.invoke(app, ["emit", "Test Error.", "--level", "Error", "--category", "Some.Category"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "logLevel": "Error",
        "category": "Some.Category",
        "text": "Test Error.",
    }

def test_emit_with_scopes_and_error(scoped_config: Path):
    """Tests that named scopes, tags and errors reach the record."""
    result = runner.invoke(app, [
        "emit", "hello",
        "--config", str(scoped_config),
        "--scope", "RequestId=abc",
        "--scope", "UserId=42",
        "--tag", "batch-7",
        "--event-id", "5",
        "--error", "boom",
    ])

    assert result.exit_code == 0
    record = json.loads(result.stdout)
    assert record["requestId"] == "abc"
    assert record["userId"] == "42"
    assert record["scope"] == ["batch-7"]
    assert record["category"] == "Default"
    assert record["eventId"] == 5
    assert record["exception"] == {"error": "boom", "stackTrace": None}

def test_emit_rejects_bad_scope():
    result = runner.invoke(app, ["emit", "hello", "--scope", "missing-separator"])
    assert result.exit_code != 0

def test_emit_rejects_bad_level():
    result = runner.invoke(app, ["emit", "hello", "--level", "loud"])
    assert result.exit_code != 0

def test_emit_filtered_by_config(tmp_path: Path):
    """Tests that a filtered level produces no output."""
    config_path = tmp_path / "logging.yaml"
    config_path.write_text("filter:\n  default: Warning\n")
    result = runner.invoke(app, ["emit", "quiet", "--level", "Debug", "--config", str(config_path)])

    assert result.exit_code == 0
    assert result.stdout == ""

def test_missing_config_exits_with_config_code(tmp_path: Path):
    result = runner.invoke(app, ["emit", "hello", "--config", str(tmp_path / "missing.yaml")])
    assert result.exit_code == 2

def test_show_config(scoped_config: Path):
    result = runner.invoke(app, ["show-config", "--config", str(scoped_config)])
    assert result.exit_code == 0
    assert "include_scopes" in result.output
    assert "output.stream" in result.output

def test_emit_warns_when_options_drop_scopes_and_error():
    """Tests that flags the default options discard are reported on stderr."""
    result = runner.invoke(app, ["emit", "hello", "--scope", "RequestId=abc", "--tag", "t", "--error", "boom"])

    assert result.exit_code == 0
    assert "--scope and --tag are ignored" in result.output
    assert "--error is ignored" in result.output
    record = json.loads(result.stdout.strip().splitlines()[-1])
    assert "requestId" not in record
    assert "exception" not in record

def test_emit_does_not_warn_when_options_keep_flags(scoped_config: Path):
    result = runner.invoke(app, ["emit", "hello", "--config", str(scoped_config), "--tag", "t", "--error", "boom"])

    assert result.exit_code == 0
    assert "ignored" not in result.output
