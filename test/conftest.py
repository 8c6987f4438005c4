"""
Test Configuration

Environment setup MUST happen before any application import: settings and the
loguru sinks are built at import time.

Every test here is a unit test: collaborators are AsyncMocks or in-memory fakes,
so no PostgreSQL or network is needed.
"""

import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    os.environ.setdefault('POSTGRES_DB', 'ticketing_test_db')
    os.environ.setdefault('HTTP_RETRY_DELAY_SECONDS', '0')
    os.environ.setdefault('SWEEPER_INTERVAL_SECONDS', '0.01')

    # Create test log directory
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)


# Call immediately to set env vars before any imports
_early_setup_test_environment()

import pytest  # noqa: E402

from src.platform.config.di import container  # noqa: E402


@pytest.fixture(autouse=True)
def reset_container_overrides():
    yield
    container.reset_override()
