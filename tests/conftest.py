# tests/conftest.py

"""Shared pytest fixtures for all listing_engine tests."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from listing_engine.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path: Path) -> Generator[Path, None, None]:
    """Point data and log directories at a per-test temp dir."""
    with patch.object(Settings, "DATA_DIR", tmp_path / "data"), \
            patch.object(Settings, "LOGS_DIR", tmp_path / "logs"):
        yield tmp_path
