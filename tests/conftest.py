"""Shared fixtures for monitor tests."""

from datetime import datetime, timedelta, timezone

import pytest

from ssh_uptime_monitor.credentials import StaticCredentialStore
from ssh_uptime_monitor.history import HistoryStore
from ssh_uptime_monitor.models import Credentials, Notification, Target
from ssh_uptime_monitor.monitor import HealthMonitor
from ssh_uptime_monitor.notifiers.base import BaseNotifier
from ssh_uptime_monitor.probes import BaseProber, ProbeExecutor
from ssh_uptime_monitor.registry import ScheduleRegistry
from ssh_uptime_monitor.storage import MemoryStore


class FakeClock:
    """Wall clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeProber(BaseProber):
    """Prober that replays scripted answers per target.

    Each answer is True, False or an exception instance to raise. When a
    target's script runs out, the last answer repeats.
    """

    def __init__(self) -> None:
        self.scripts: dict[str, list] = {}
        self.calls: list[str] = []
        self.timeouts: dict[str, float] = {}

    def script(self, target_id: str, *answers) -> None:
        self.scripts[target_id] = list(answers)

    def check_connection(self, target, credentials, timeout) -> bool:
        self.calls.append(target.id)
        self.timeouts[target.id] = timeout
        answers = self.scripts.get(target.id, [True])
        answer = answers.pop(0) if len(answers) > 1 else answers[0]
        if isinstance(answer, BaseException):
            raise answer
        return answer


class RecordingNotifier(BaseNotifier):
    def __init__(self) -> None:
        self.sent: list[Notification] = []

    def send(self, notification: Notification) -> bool:
        self.sent.append(notification)
        return True


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def prober():
    return FakeProber()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def targets():
    return {
        "srv1": Target(id="srv1", host="10.0.0.1", username="admin", name="srv1"),
        "srv2": Target(id="srv2", host="10.0.0.2", username="admin", name="Backup Box"),
    }


@pytest.fixture
def credential_store():
    return StaticCredentialStore({
        "srv1": Credentials(password="secret"),
        "srv2": Credentials(password="secret"),
    })


@pytest.fixture
def monitor(store, prober, notifier, targets, credential_store, clock):
    return HealthMonitor(
        registry=ScheduleRegistry(store),
        history=HistoryStore(store),
        executor=ProbeExecutor(prober, timeout_ms=5000, now=clock),
        credentials=credential_store,
        resolve_target=targets.get,
        notifier=notifier,
        clock=clock,
    )
