import pytest

from services.auth_service import SessionManager, UserRecord


class FakeClock:
    """Manually advanced clock returning epoch seconds"""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session_manager(clock):
    return SessionManager(clock=clock)


@pytest.fixture
def user():
    return UserRecord(uid="u1", display_name="Alice", email="alice@example.com")
