"""In-memory labels repository standing in for the database-backed one.

State lives in two mappings: label id to :class:`Label`, and note id to the set
of label ids attached to that note.  Every mutation commits under a single lock
before the matching change signal is emitted, and signals are emitted outside
the lock so listeners may query the repository right away.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterable, Sequence
from threading import RLock

from ..settings import StoreSettings
from .labels import (
    NO_ID,
    Label,
    LabelIntegrityError,
    LabelNotFoundError,
    LabelRef,
    Note,
    NoteWithLabels,
)
from .signals import ChangeSignal

logger = logging.getLogger("notelabels.core.repository")


class MockLabelsRepository:
    """Labels repository keeping its data in memory.

    Mirrors the database-backed repository: same query results, same
    notifications.  :attr:`change_signal` fires when labels change and
    :attr:`refs_change_signal` when references change.
    """

    def __init__(self, settings: StoreSettings | None = None) -> None:
        self.settings = settings or StoreSettings()
        self._lock = RLock()
        self._labels: dict[int, Label] = {}
        self._label_refs: dict[int, set[int]] = {}
        self._last_label_id = 0
        trace = self.settings.trace_signals
        self.change_signal = ChangeSignal("labels", trace=trace)
        self.refs_change_signal = ChangeSignal("label_refs", trace=trace)

    @property
    def last_label_id(self) -> int:
        """Highest label id assigned or explicitly inserted so far."""
        with self._lock:
            return self._last_label_id

    # ------------------------------------------------------------------
    # labels

    def _add_label_locked(self, label: Label) -> int:
        if label.id != NO_ID:
            self._labels[label.id] = label
            if label.id > self._last_label_id:
                self._last_label_id = label.id
            return label.id
        self._last_label_id += 1
        label_id = self._last_label_id
        self._labels[label_id] = label.with_id(label_id)
        return label_id

    def _add_label(self, label: Label) -> int:
        with self._lock:
            label_id = self._add_label_locked(label)
        logger.debug("label %s stored as %r", label_id, label.name)
        return label_id

    def add_label(self, label: Label) -> int:
        """Non-suspending version of :meth:`insert_label`."""
        label_id = self._add_label(label)
        self.change_signal.try_emit()
        return label_id

    async def insert_label(self, label: Label) -> int:
        """Store *label* and return its id.

        A label without id gets the next free one; a label with an id replaces
        whatever is stored under it.
        """
        label_id = self._add_label(label)
        await self.change_signal.emit()
        return label_id

    async def update_label(self, label: Label) -> None:
        """Replace the stored label having ``label.id``.

        Raises
        ------
        LabelNotFoundError
            If no label is stored under ``label.id``.
        """
        with self._lock:
            if label.id not in self._labels:
                logger.warning("Cannot update non-existent label %s", label.id)
                raise LabelNotFoundError(label.id, "Cannot update non-existent label")
            self._add_label_locked(label)
        logger.debug("label %s updated to %r", label.id, label.name)
        await self.change_signal.emit()

    def _delete_label_locked(self, label_id: int) -> bool:
        """Remove the label and its references, reporting whether refs changed."""
        refs_changed = False
        self._labels.pop(label_id, None)
        for label_ids in self._label_refs.values():
            if label_id in label_ids:
                label_ids.discard(label_id)
                refs_changed = True
        return refs_changed

    async def delete_label(self, label: Label) -> None:
        with self._lock:
            refs_changed = self._delete_label_locked(label.id)
        logger.debug("label %s deleted (refs changed: %s)", label.id, refs_changed)
        if refs_changed:
            await self.refs_change_signal.emit()
        await self.change_signal.emit()

    async def delete_labels(self, labels: Sequence[Label]) -> None:
        """Delete every label in *labels*, notifying once for the whole batch."""
        refs_changed = False
        with self._lock:
            for label in labels:
                refs_changed = self._delete_label_locked(label.id) or refs_changed
        logger.debug("%d labels deleted (refs changed: %s)", len(labels), refs_changed)
        if refs_changed:
            await self.refs_change_signal.emit()
        await self.change_signal.emit()

    async def get_label_by_id(self, label_id: int) -> Label | None:
        with self._lock:
            return self._labels.get(label_id)

    def require_label_by_id(self, label_id: int) -> Label:
        """Return the label stored under ``label_id``.

        Raises
        ------
        LabelIntegrityError
            If the label does not exist.
        """
        with self._lock:
            label = self._labels.get(label_id)
        if label is None:
            logger.error("No label with ID %s", label_id)
            raise LabelIntegrityError(label_id)
        return label

    async def get_label_by_name(self, name: str) -> Label | None:
        with self._lock:
            return next(
                (label for label in self._labels.values() if label.name == name),
                None,
            )

    def list_labels(self) -> list[Label]:
        """Non-suspending snapshot of every stored label."""
        with self._lock:
            return list(self._labels.values())

    async def get_all_labels(self) -> AsyncIterator[list[Label]]:
        """Yield the full label list on every label change.

        The last change, if any, is replayed first.  Closing the iterator
        drops the underlying subscription.
        """
        with self.change_signal.subscribe() as subscription:
            async for _ in subscription:
                yield self.list_labels()

    # ------------------------------------------------------------------
    # label references

    def _add_label_refs(self, refs: Iterable[LabelRef]) -> None:
        with self._lock:
            for ref in refs:
                self._label_refs.setdefault(ref.note_id, set()).add(ref.label_id)

    def add_label_refs(self, refs: Iterable[LabelRef]) -> None:
        """Non-suspending version of :meth:`insert_label_refs`."""
        self._add_label_refs(refs)
        self.refs_change_signal.try_emit()

    async def insert_label_refs(self, refs: Sequence[LabelRef]) -> None:
        self._add_label_refs(refs)
        await self.refs_change_signal.emit()

    async def delete_label_refs(self, refs: Sequence[LabelRef]) -> None:
        """Detach labels from notes; pairs that are not stored are ignored."""
        with self._lock:
            for ref in refs:
                label_ids = self._label_refs.get(ref.note_id)
                if label_ids is not None:
                    label_ids.discard(ref.label_id)
        await self.refs_change_signal.emit()

    async def get_label_ids_for_note(self, note_id: int) -> list[int]:
        with self._lock:
            return sorted(self._label_refs.get(note_id, ()))

    def get_notes_for_label_id(self, label_id: int) -> list[int]:
        """Return ids of every note carrying ``label_id``."""
        with self._lock:
            return [
                note_id
                for note_id, label_ids in self._label_refs.items()
                if label_id in label_ids
            ]

    def get_note_with_labels(self, note: Note) -> NoteWithLabels:
        """Return *note* with its labels resolved.

        A reference to a missing label raises :class:`LabelIntegrityError`.
        """
        with self._lock:
            labels = [
                self.require_label_by_id(label_id)
                for label_id in sorted(self._label_refs.get(note.id, ()))
            ]
        return NoteWithLabels(note, labels)

    def list_label_refs(self) -> list[LabelRef]:
        """Non-suspending snapshot of every stored reference."""
        with self._lock:
            return [
                LabelRef(note_id, label_id)
                for note_id, label_ids in self._label_refs.items()
                for label_id in sorted(label_ids)
            ]

    async def count_label_refs(self, label_id: int) -> int:
        with self._lock:
            return sum(
                1 for label_ids in self._label_refs.values() if label_id in label_ids
            )

    # ------------------------------------------------------------------
    # resets

    async def clear_all_data(self) -> None:
        with self._lock:
            self._labels.clear()
            self._label_refs.clear()
            self._last_label_id = 0
        logger.debug("all label data cleared")
        await self.change_signal.emit()
        await self.refs_change_signal.emit()

    async def clear_all_label_refs(self) -> None:
        with self._lock:
            self._label_refs.clear()
        await self.refs_change_signal.emit()


__all__ = ["MockLabelsRepository"]
