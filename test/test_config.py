"""Tests for environment-driven configuration."""

from pathlib import Path

import pytest

from gcad_preview.config import (
    DEFAULT_DEBOUNCE_MS,
    DEFAULT_LANGUAGE_ID,
    DEFAULT_WEB_PORT,
    PreviewSettings,
    get_config_summary,
    load_settings,
)
from gcad_preview.exceptions import ConfigurationError

ENV_VARS = [
    "GCAD_PREVIEW_DEBOUNCE_MS",
    "GCAD_PREVIEW_LANGUAGE_ID",
    "GCAD_PREVIEW_EXTENSION_ROOT",
    "GCAD_PREVIEW_WEB_HOST",
    "GCAD_PREVIEW_WEB_PORT",
    "GCAD_PREVIEW_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(tmp_path, monkeypatch):
    """Without environment overrides the documented defaults apply."""
    monkeypatch.chdir(tmp_path)
    settings = load_settings()

    assert settings.debounce_ms == DEFAULT_DEBOUNCE_MS == 2000
    assert settings.language_id == DEFAULT_LANGUAGE_ID == "gcad"
    assert settings.web_port == DEFAULT_WEB_PORT
    assert settings.extension_root == tmp_path.resolve()
    assert settings.debounce_seconds == 2.0


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("GCAD_PREVIEW_DEBOUNCE_MS", "350")
    monkeypatch.setenv("GCAD_PREVIEW_EXTENSION_ROOT", str(tmp_path))
    monkeypatch.setenv("GCAD_PREVIEW_WEB_PORT", "9100")
    monkeypatch.setenv("GCAD_PREVIEW_LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.debounce_ms == 350
    assert settings.extension_root == tmp_path.resolve()
    assert settings.web_port == 9100
    assert settings.log_level == "DEBUG"


def test_invalid_environment_value_falls_back(monkeypatch, console_logger):
    monkeypatch.setenv("GCAD_PREVIEW_DEBOUNCE_MS", "soon")
    monkeypatch.setenv("GCAD_PREVIEW_WEB_PORT", "0")

    settings = load_settings(logger=console_logger)

    assert settings.debounce_ms == DEFAULT_DEBOUNCE_MS
    assert settings.web_port == DEFAULT_WEB_PORT


def test_zero_debounce_allowed(monkeypatch):
    monkeypatch.setenv("GCAD_PREVIEW_DEBOUNCE_MS", "0")
    assert load_settings().debounce_ms == 0


def test_explicit_overrides_win(monkeypatch, tmp_path):
    monkeypatch.setenv("GCAD_PREVIEW_DEBOUNCE_MS", "350")

    settings = load_settings(debounce_ms=75, extension_root=str(tmp_path), web_host=None)

    assert settings.debounce_ms == 75
    assert settings.extension_root == tmp_path.resolve()
    assert settings.web_host == "127.0.0.1"


@pytest.mark.parametrize(
    "overrides",
    [{"debounce_ms": -1}, {"language_id": ""}, {"log_level": "LOUD"}],
)
def test_invalid_explicit_values_raise(tmp_path, overrides):
    with pytest.raises(ConfigurationError) as exc_info:
        PreviewSettings(extension_root=tmp_path, **overrides)
    assert exc_info.value.code == "INVALID_CONFIGURATION"


def test_artifact_paths(tmp_path):
    settings = PreviewSettings(extension_root=tmp_path)

    assert settings.script_path == tmp_path.resolve() / "dist" / "app.js"
    assert settings.style_path == tmp_path.resolve() / "dist" / "app.css"


def test_config_summary(tmp_path):
    summary = get_config_summary(PreviewSettings(extension_root=tmp_path))

    assert summary["debounce_ms"] == DEFAULT_DEBOUNCE_MS
    assert Path(summary["script_artifact"]).name == "app.js"
