"""JSON snapshot files used to seed in-memory label repositories."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
import json
from pathlib import Path
from typing import Any

from ..log import logger

from .labels import Label, LabelRef
from .mock_repository import MockLabelsRepository

LABELS_FILENAME = "labels.json"


@dataclass(slots=True)
class LabelSnapshot:
    """Labels and references captured at one point in time."""

    labels: list[Label] = field(default_factory=list)
    refs: list[LabelRef] = field(default_factory=list)


def _read_json(path: Path) -> object:
    """Read JSON from *path* and raise :class:`ValueError` when it cannot be read."""
    try:
        with path.open(encoding="utf-8") as fh:
            return json.load(fh)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ValueError(f"Cannot read {path}: {exc}") from exc


def _entries(data: dict, key: str, path: Path) -> list:
    entries = data.get(key, [])
    if not isinstance(entries, list):
        raise ValueError(f"Invalid snapshot in {path}: \"{key}\" must be a list")
    return entries


def _build(cls: type, item: Any, path: Path) -> Any:
    if not isinstance(item, dict):
        raise ValueError(f"Invalid entry in {path}: {item!r}")
    try:
        return cls(**item)
    except TypeError as exc:
        raise ValueError(f"Invalid entry in {path}: {exc}") from exc


def load_snapshot(directory: str | Path) -> LabelSnapshot:
    """Load a snapshot from ``directory``.

    Missing or unreadable files yield an empty snapshot; a file whose
    structure or entries do not match raises :class:`ValueError`.
    """
    path = Path(directory) / LABELS_FILENAME
    if not path.exists():
        return LabelSnapshot()
    try:
        data = _read_json(path)
    except ValueError as exc:
        logger.warning("%s", exc)
        return LabelSnapshot()
    if not isinstance(data, dict):
        raise ValueError(f"Invalid snapshot in {path}: expected an object")
    return LabelSnapshot(
        labels=[_build(Label, item, path) for item in _entries(data, "labels", path)],
        refs=[_build(LabelRef, item, path) for item in _entries(data, "refs", path)],
    )


def save_snapshot(directory: str | Path, snapshot: LabelSnapshot) -> Path:
    """Persist ``snapshot`` into ``directory`` and return resulting path."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / LABELS_FILENAME
    payload = {
        "labels": [asdict(lbl) for lbl in snapshot.labels],
        "refs": [asdict(ref) for ref in snapshot.refs],
    }
    with path.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, ensure_ascii=False, indent=2, sort_keys=True)
    return path


def snapshot_repository(repository: MockLabelsRepository) -> LabelSnapshot:
    """Capture the labels and references currently held by ``repository``."""
    labels = sorted(repository.list_labels(), key=lambda lbl: lbl.id)
    refs = sorted(
        repository.list_label_refs(), key=lambda ref: (ref.note_id, ref.label_id)
    )
    return LabelSnapshot(labels=labels, refs=refs)


def seed_repository(repository: MockLabelsRepository, snapshot: LabelSnapshot) -> None:
    """Insert every label and reference of ``snapshot`` into ``repository``."""
    for label in snapshot.labels:
        repository.add_label(label)
    if snapshot.refs:
        repository.add_label_refs(snapshot.refs)
    logger.debug(
        "repository seeded with %d labels and %d refs",
        len(snapshot.labels),
        len(snapshot.refs),
    )
