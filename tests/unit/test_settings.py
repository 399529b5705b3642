"""Tests for settings loading and validation."""

import json
import logging
from pathlib import Path

import pytest

from notelabels.settings import AppSettings, LoggingSettings, StoreSettings, load_app_settings

pytestmark = pytest.mark.unit


def test_defaults() -> None:
    settings = AppSettings()
    assert settings.logging.level == logging.INFO
    assert settings.logging.log_dir is None
    assert settings.store.trace_signals is False
    assert settings.store.seed_path is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("debug", logging.DEBUG), (" WARNING ", logging.WARNING), ("10", 10), ("", logging.INFO), (None, logging.INFO)],
)
def test_log_level_accepts_names(raw, expected) -> None:
    assert LoggingSettings(level=raw).level == expected


def test_unknown_log_level_is_rejected() -> None:
    with pytest.raises(ValueError):
        LoggingSettings(level="chatty")


def test_blank_paths_become_none() -> None:
    assert LoggingSettings(log_dir="  ").log_dir is None
    assert StoreSettings(seed_path="").seed_path is None


def test_load_toml(tmp_path: Path) -> None:
    path = tmp_path / "settings.toml"
    path.write_text(
        '[logging]\nlevel = "debug"\n\n[store]\ntrace_signals = true\nseed_path = "seed"\n',
        encoding="utf-8",
    )
    settings = load_app_settings(path)
    assert settings.logging.level == logging.DEBUG
    assert settings.store.trace_signals is True
    assert settings.store.seed_path == "seed"


def test_load_json(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"store": {"trace_signals": True}}), encoding="utf-8")
    assert load_app_settings(path).store.trace_signals is True


def test_invalid_settings_raise_value_error(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"store": {"trace_signals": "sometimes"}}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_app_settings(path)
