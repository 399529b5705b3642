"""Pytest configuration for the notelabels test suite."""

from __future__ import annotations

import pytest

from notelabels.core.mock_repository import MockLabelsRepository
from notelabels.core.signals import ChangeSignal


class SignalRecorder:
    """Count synchronous deliveries of a :class:`ChangeSignal`."""

    def __init__(self, signal: ChangeSignal) -> None:
        self.count = 0
        self._remove = signal.add_listener(self._on_signal)

    def _on_signal(self) -> None:
        self.count += 1

    def reset(self) -> None:
        self.count = 0

    def close(self) -> None:
        self._remove()


@pytest.fixture
def repository() -> MockLabelsRepository:
    """Provide a fresh in-memory repository for each test."""

    return MockLabelsRepository()


@pytest.fixture
def record_signal():
    """Return a factory attaching :class:`SignalRecorder` objects to signals."""

    recorders: list[SignalRecorder] = []

    def _factory(signal: ChangeSignal) -> SignalRecorder:
        recorder = SignalRecorder(signal)
        recorders.append(recorder)
        return recorder

    yield _factory
    for recorder in recorders:
        recorder.close()
