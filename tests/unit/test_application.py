"""Tests for the store composition root."""

from pathlib import Path

import pytest

from notelabels.application import StoreContext
from notelabels.core.label_store import LabelSnapshot, save_snapshot
from notelabels.core.labels import Label, LabelRef
from notelabels.settings import AppSettings, StoreSettings

pytestmark = pytest.mark.unit


def test_repository_is_cached_until_reset() -> None:
    context = StoreContext()
    repository = context.repository
    assert context.repository is repository
    context.reset()
    assert context.repository is not repository


def test_repository_seeded_from_snapshot(tmp_path: Path) -> None:
    save_snapshot(
        tmp_path,
        LabelSnapshot(labels=[Label(4, "seeded")], refs=[LabelRef(1, 4)]),
    )
    settings = AppSettings(store=StoreSettings(seed_path=str(tmp_path), trace_signals=True))
    repository = StoreContext(settings).repository
    assert repository.list_labels() == [Label(4, "seeded")]
    assert repository.get_notes_for_label_id(4) == [1]
    assert repository.last_label_id == 4
    assert repository.change_signal.has_replay


def test_from_file(tmp_path: Path) -> None:
    path = tmp_path / "settings.toml"
    path.write_text("[store]\ntrace_signals = true\n", encoding="utf-8")
    context = StoreContext.from_file(path)
    assert context.settings.store.trace_signals is True
    assert context.repository.settings.trace_signals is True


def test_configure_logging_applies_settings(monkeypatch, tmp_path: Path) -> None:
    calls = []
    monkeypatch.setattr(
        "notelabels.application.configure_logging",
        lambda level, *, log_dir=None: calls.append((level, log_dir)),
    )
    settings = AppSettings.model_validate(
        {"logging": {"level": "debug", "log_dir": str(tmp_path)}}
    )
    StoreContext(settings).configure_logging()
    assert calls == [(10, str(tmp_path))]
