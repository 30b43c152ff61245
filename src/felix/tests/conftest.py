import pytest

from felix.config import default_config
from felix.controller import Felix
from felix.layer2.legs import LegRegistry
from felix.layer8.task_slot import TaskSlot, make_scheduler


class VirtualClock:
    """Time only moves when a test says so."""

    def __init__(self):
        self.now = 0.0

    def time(self):
        return self.now

    def sleep(self, dt):
        self.now += dt


class FakeServo:
    def __init__(self, pin, journal=None):
        self.pin = pin
        self.angles = []
        self.journal = journal if journal is not None else []

    @property
    def angle(self):
        return self.angles[-1] if self.angles else None

    def set_angle(self, degrees):
        self.angles.append(degrees)
        self.journal.append((self.pin, degrees))


class FakeBus:
    def __init__(self):
        self.writes = []

    def write_byte_data(self, address, register, value):
        self.writes.append((address, register, value))


class Rig:
    """Virtual clock + scheduler + task slot, stepped one period at a time."""

    def __init__(self, period_s):
        self.clock = VirtualClock()
        self.scheduler = make_scheduler(self.clock.time, self.clock.sleep)
        self.slot = TaskSlot(self.scheduler)
        self.period_s = period_s

    def tick(self, n=1):
        for _ in range(n):
            self.clock.sleep(self.period_s)
            self.scheduler.run(blocking=False)


@pytest.fixture
def config():
    return default_config()


@pytest.fixture
def journal():
    return []


@pytest.fixture
def servos(journal):
    made = {}

    def factory(pin):
        made[pin] = FakeServo(pin, journal)
        return made[pin]

    factory.made = made
    return factory


@pytest.fixture
def registry(config, servos):
    return LegRegistry.from_config(config, servos)


@pytest.fixture
def rig(config):
    return Rig(config.frame_period_s)


@pytest.fixture
def felix(config, servos, rig):
    return Felix(config, actuator_factory=servos, slot=rig.slot)


@pytest.fixture
def fake_bus():
    return FakeBus()
