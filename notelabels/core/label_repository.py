"""Label repository interface shared by persistent and in-memory stores."""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from typing import Protocol

from .labels import Label, LabelRef


class LabelsRepository(Protocol):
    """Abstract persistence operations for labels and label references."""

    async def insert_label(self, label: Label) -> int:
        """Insert or replace *label* and return the id it is stored under."""

    async def update_label(self, label: Label) -> None:
        """Replace an existing label with *label*."""

    async def delete_label(self, label: Label) -> None:
        """Delete *label* and every reference to it."""

    async def delete_labels(self, labels: Sequence[Label]) -> None:
        """Delete all *labels* and every reference to them."""

    async def get_label_by_id(self, label_id: int) -> Label | None:
        """Return the label with ``label_id`` or ``None``."""

    async def get_label_by_name(self, name: str) -> Label | None:
        """Return a label named exactly *name* or ``None``."""

    async def insert_label_refs(self, refs: Sequence[LabelRef]) -> None:
        """Attach labels to notes."""

    async def delete_label_refs(self, refs: Sequence[LabelRef]) -> None:
        """Detach labels from notes."""

    async def get_label_ids_for_note(self, note_id: int) -> list[int]:
        """Return ids of the labels attached to ``note_id``."""

    async def count_label_refs(self, label_id: int) -> int:
        """Return the number of notes carrying ``label_id``."""

    async def clear_all_data(self) -> None:
        """Remove every label and reference."""

    def get_all_labels(self) -> AsyncIterator[list[Label]]:
        """Stream the full label list each time labels change."""
