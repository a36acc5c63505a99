import pytest

from livetrans.realtime.engine import ReconciliationEngine


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeChannel:
    def __init__(self, is_open: bool = True):
        self.is_open = is_open
        self.sent: list[str] = []

    async def send(self, message: str) -> None:
        self.sent.append(message)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def channel() -> FakeChannel:
    return FakeChannel()


@pytest.fixture()
def engine(clock: FakeClock) -> ReconciliationEngine:
    engine = ReconciliationEngine(clock=clock)
    engine.start()
    return engine
