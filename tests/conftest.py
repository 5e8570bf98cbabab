"""Pytest configuration and fixtures."""

from __future__ import annotations

import atexit
import os
import tempfile
from pathlib import Path

import pytest

# Set test database path before importing the app
_temp_db = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
_temp_db.close()
_temp_db_path = _temp_db.name
os.environ["DB_PATH"] = _temp_db_path
os.environ.setdefault("CALCULATION_RATE_LIMIT", "10000/minute")


def _cleanup_test_db() -> None:
    """Clean up temporary test database file."""
    if os.path.exists(_temp_db_path):
        try:
            os.unlink(_temp_db_path)
        except OSError:
            pass  # File may already be deleted or locked


atexit.register(_cleanup_test_db)

from treeops.scoring.hazards import HAZARD_INDICATORS  # noqa: E402
from treeops.scoring.models import TreeMeasurement  # noqa: E402
from treeops.work_orders import WorkOrderStore  # noqa: E402


@pytest.fixture
def no_hazards() -> dict[str, bool]:
    """Every known indicator present and false."""
    return {name: False for name in HAZARD_INDICATORS}


@pytest.fixture
def large_tall_tree() -> TreeMeasurement:
    """80ft tall, 25ft canopy radius, 36in DBH: base score 12000."""
    return TreeMeasurement(height=80, canopy_radius=25, dbh=36, species="Oak")


@pytest.fixture
def tiny_tree() -> TreeMeasurement:
    """10ft tall, 5ft canopy radius, 6in DBH: base score 50."""
    return TreeMeasurement(height=10, canopy_radius=5, dbh=6)


@pytest.fixture
def medium_tree() -> TreeMeasurement:
    """30ft tall, 10ft canopy radius, 12in DBH: base score 600."""
    return TreeMeasurement(height=30, canopy_radius=10, dbh=12, species="Maple")


@pytest.fixture
def high_hazards(no_hazards: dict[str, bool]) -> dict[str, bool]:
    """Permitting + utilities + overhead lines = 77% hazard impact."""
    return {**no_hazards, "permitting": True, "utilities": True, "overhead_lines": True}


@pytest.fixture
def store(tmp_path: Path) -> WorkOrderStore:
    """Work order store on an isolated database."""
    return WorkOrderStore(str(tmp_path / "work_orders.db"))
