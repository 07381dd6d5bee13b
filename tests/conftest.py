from datetime import datetime, timedelta, timezone
import pytest


class FakeClock:
    """Returns a time one second later on every call, starting at ``start``."""
    def __init__(self, start=datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc), step=timedelta(seconds=1)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        result = self.now
        self.now += self.step
        return result


@pytest.fixture
def clock():
    return FakeClock()
