"""Pytest configuration for integration tests."""

import tempfile
from datetime import date
from pathlib import Path

import pytest

from fittrack.db import DocumentStore, init_db, seed_demo_program

# A Wednesday; the demo program's last week is only partly done
DEMO_TODAY = date(2024, 6, 12)


# Mark all tests in this directory as integration tests
def pytest_collection_modifyitems(items):
    """Add integration marker to all tests in this directory."""
    for item in items:
        if "integration_tests" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture
async def demo_store():
    """A fresh store holding four weeks of demo data for user "demo"."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "demo.db"
        await init_db(db_path)
        store = DocumentStore(db_path)
        program_id = await seed_demo_program(store, "demo", weeks=4, today=DEMO_TODAY)
        yield store, program_id
