"""Label and note records shared by label repositories."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Final

NO_ID: Final = 0
"""Identifier of a label that was not assigned an id yet."""


class LabelStoreError(Exception):
    """Base class for label repository failures."""


class LabelNotFoundError(LabelStoreError, ValueError):
    """Raised when an operation requires a label that is not stored."""

    def __init__(self, label_id: int, message: str | None = None) -> None:
        self.label_id = label_id
        super().__init__(message or f"label not found: {label_id}")


class LabelIntegrityError(LabelStoreError, RuntimeError):
    """Raised when a reference points to a label that no longer exists.

    This never happens while deletes cascade into the references, so seeing it
    means some code path broke that invariant.
    """

    def __init__(self, label_id: int) -> None:
        self.label_id = label_id
        super().__init__(f"No label with ID {label_id}")


@dataclass(frozen=True, slots=True)
class Label:
    """Named tag attachable to notes."""

    id: int = NO_ID
    name: str = ""
    hidden: bool = False

    @property
    def has_id(self) -> bool:
        return self.id != NO_ID

    def with_id(self, new_id: int) -> Label:
        """Return a copy of the label stored under ``new_id``."""
        return replace(self, id=new_id)


@dataclass(frozen=True, slots=True)
class LabelRef:
    """Association stating that note ``note_id`` carries label ``label_id``."""

    note_id: int
    label_id: int


@dataclass(frozen=True, slots=True)
class Note:
    id: int
    title: str = ""
    content: str = ""


@dataclass(frozen=True, slots=True)
class NoteWithLabels:
    """Note paired with the labels attached to it."""

    note: Note
    labels: list[Label] = field(default_factory=list)


__all__ = [
    "NO_ID",
    "Label",
    "LabelIntegrityError",
    "LabelNotFoundError",
    "LabelRef",
    "LabelStoreError",
    "Note",
    "NoteWithLabels",
]
