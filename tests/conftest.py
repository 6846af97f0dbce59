import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Keep structlog's global config (and its bound stderr) from leaking between tests."""
    yield
    structlog.reset_defaults()
