from __future__ import annotations

import pytest

from tests._fixtures.archive_builder import ArchiveBuilder


@pytest.fixture
def archive_builder() -> ArchiveBuilder:
    """Provide a fresh in-memory archive builder."""
    return ArchiveBuilder()
