import pytest


@pytest.fixture
def anyio_backend() -> str:
    # Bot relies on asyncio tasks and events.
    return "asyncio"
