# lucid_backend/tests/conftest.py
import os
import logging
from uuid import uuid4

# Must be set before lucid_backend.config is first read
os.environ.setdefault("OPENAI_API_KEY", "test-key")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
import pytest_asyncio
from unittest.mock import AsyncMock

from lucid_backend.config import settings as _settings

for name in (
    "asyncio",              # selector_events etc.
    "sqlalchemy.pool",      # connection checkout/return
    "sqlalchemy.engine.Engine",
):
    logging.getLogger(name).setLevel(logging.WARNING)

logging.getLogger("lucid_backend").setLevel(logging.INFO)

_settings.cache_clear()


@pytest.fixture
def user_id():
    return uuid4()


@pytest_asyncio.fixture
async def mock_session():
    """AsyncSession stand-in; repositories are mocked so nothing hits a database."""
    return AsyncMock()
