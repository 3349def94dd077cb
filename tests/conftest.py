"""Shared test fixtures."""

from __future__ import annotations

import pytest

import htmlencoding.registry as _registry


@pytest.fixture
def lossy_windows1252(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pretend the platform decodes unassigned windows-1252 bytes lossily."""
    monkeypatch.setattr(_registry, "_LOSSY_WINDOWS_1252", True)


@pytest.fixture
def strict_windows1252(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pretend the platform rejects unassigned windows-1252 bytes."""
    monkeypatch.setattr(_registry, "_LOSSY_WINDOWS_1252", False)
