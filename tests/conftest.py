"""
Shared fixtures: a controllable clock and fakes for OpenFGA and Anthropic.
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from technician_access import (
    GrantRequest,
    InMemoryGrantStore,
    Technician,
    TechnicianStatus,
    TemporaryAccessService,
)


T0 = datetime(2024, 12, 12, 10, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)

    def set(self, when: datetime):
        self.now = when


class FakeOpenFgaClient:
    """Keeps tuples in a set and answers read/write like the SDK client."""

    def __init__(self):
        self.tuples = set()
        self.writes = []
        self.fail_reads = False

    async def write(self, body, options=None):
        self.writes.append(body)
        for t in body.writes or []:
            self.tuples.add((t.user, t.relation, t.object))
        for t in body.deletes or []:
            self.tuples.discard((t.user, t.relation, t.object))

    async def read(self, body, options=None):
        if self.fail_reads:
            raise RuntimeError("openfga unavailable")
        matches = []
        for user, relation, obj in sorted(self.tuples):
            if body.user and body.user != user:
                continue
            if body.relation and body.relation != relation:
                continue
            if body.object:
                if body.object.endswith(":"):
                    if not obj.startswith(body.object):
                        continue
                elif body.object != obj:
                    continue
            matches.append(SimpleNamespace(
                key=SimpleNamespace(user=user, relation=relation, object=obj)
            ))
        return SimpleNamespace(tuples=matches)


class FakeAnthropic:
    """Returns a canned reply from messages.create."""

    def __init__(self, reply: str):
        self.reply = reply
        self.calls = []
        self.messages = self

    def create(self, **kwargs):
        self.calls.append(kwargs)
        return SimpleNamespace(content=[SimpleNamespace(text=self.reply)])


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryGrantStore()


@pytest.fixture
def technicians():
    return {
        "T1": Technician(id="T1", name="Pedro", assigned_tenants=["A", "B"]),
        "T2": Technician(id="T2", name="Lucas", assigned_tenants=[]),
        "T3": Technician(id="T3", name="Ana", status=TechnicianStatus.INACTIVE),
    }


@pytest.fixture
def service(store, clock):
    return TemporaryAccessService(grant_store=store, clock=clock)


@pytest.fixture
def openfga():
    return FakeOpenFgaClient()


def make_request(**overrides) -> GrantRequest:
    values = dict(
        technician_id="T1",
        tenant_id="A",
        duration_minutes=60,
        reason="Install five cameras in the lobby",
        allowed_actions=["install_camera", "test_connection"],
        granted_by="admin-1",
    )
    values.update(overrides)
    return GrantRequest(**values)
