"""Integration fixtures."""

import pytest

from app.database import engine


@pytest.fixture(autouse=True)
async def dispose_engine():
    """Pooled connections are bound to the test's event loop; drop them afterwards."""
    yield
    await engine.dispose()
