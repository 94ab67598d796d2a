import asyncio

import pytest


class _Timer:
    def __init__(self, when, fn):
        self.when = when
        self.fn = fn
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class VirtualScheduler:
    """Scheduler on a manual clock: nothing fires until advance() passes its time."""

    def __init__(self):
        self.now = 0.0
        self._timers: list[_Timer] = []

    def schedule(self, fn, delay):
        timer = _Timer(self.now + delay, fn)
        self._timers.append(timer)
        return timer

    @property
    def pending(self):
        return [t for t in self._timers if not t.cancelled]

    def advance(self, seconds):
        self.now += seconds
        due = [t for t in self.pending if t.when <= self.now + 1e-9]
        self._timers = [t for t in self.pending if t not in due]
        for timer in sorted(due, key=lambda t: t.when):
            timer.fn()


class FakeTransport:
    """Async transport returning one course suggestion per call, echoing the query."""

    def __init__(self, fail_with=None, payload=None):
        self.calls = []
        self.fail_with = fail_with
        self.payload = payload

    async def __call__(self, text):
        self.calls.append(text)
        if self.fail_with is not None:
            raise self.fail_with
        if self.payload is not None:
            return self.payload
        return [{"suggestion": text.upper(), "type": "course"}]


class GatedTransport:
    """Async transport whose calls only return once their gate is opened."""

    def __init__(self):
        self.calls = []
        self.gates = []

    async def __call__(self, text):
        gate = asyncio.Event()
        self.calls.append(text)
        self.gates.append(gate)
        await gate.wait()
        return [{"suggestion": f"{text} result", "type": "course"}]


async def settle():
    """Let pending tasks run to their next suspension point."""
    for _ in range(10):
        await asyncio.sleep(0)


@pytest.fixture
def scheduler():
    return VirtualScheduler()


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def gated_transport():
    return GatedTransport()


@pytest.fixture(name="settle")
def settle_fixture():
    return settle
