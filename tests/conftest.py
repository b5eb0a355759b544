import pytest


@pytest.fixture
def sleeps():
    """Fixture: список пауз, запрошенных через fake_sleep."""
    return []


@pytest.fixture
def fake_sleep(sleeps):
    """Fixture: no-op sleep, записывающий паузы."""
    return sleeps.append
