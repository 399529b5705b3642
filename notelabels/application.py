"""Composition root wiring settings, logging and the label repository."""
from __future__ import annotations

from pathlib import Path

from .core.label_store import load_snapshot, seed_repository
from .core.mock_repository import MockLabelsRepository
from .log import configure_logging
from .settings import AppSettings, load_app_settings


class StoreContext:
    """Central dependency registry for code exercising label repositories."""

    def __init__(self, settings: AppSettings | None = None) -> None:
        self._settings = settings or AppSettings()
        self._repository: MockLabelsRepository | None = None

    @classmethod
    def from_file(cls, path: str | Path) -> StoreContext:
        """Build a context from a TOML or JSON settings file."""
        return cls(load_app_settings(path))

    @property
    def settings(self) -> AppSettings:
        return self._settings

    def configure_logging(self) -> None:
        """Apply the logging section of the settings."""
        section = self._settings.logging
        configure_logging(section.level, log_dir=section.log_dir)

    @property
    def repository(self) -> MockLabelsRepository:
        """Return the shared repository, seeding it on first access."""
        if self._repository is None:
            repository = MockLabelsRepository(self._settings.store)
            seed_path = self._settings.store.seed_path
            if seed_path:
                seed_repository(repository, load_snapshot(seed_path))
            self._repository = repository
        return self._repository

    def reset(self) -> None:
        """Drop the cached repository so the next access starts fresh."""
        self._repository = None
