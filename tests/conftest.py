"""Shared fixtures: an in-memory delivery channel service and a fake clock."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from deliverychannel.errors import NO_SUCH_DELIVERY_CHANNEL, RemoteError
from deliverychannel.reconciler import Reconciler


class FakeClock:
    """Monotonic clock that only advances when slept on."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeClient:
    """In-memory DeliveryChannelClient.

    `errors[op]` are raised once each, in order, before the operation
    behaves normally; `failing[op]` is raised on every call.
    """

    def __init__(self) -> None:
        self.channels: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, Any]] = []
        self.errors: dict[str, list[Exception]] = {"upsert": [], "describe": [], "delete": []}
        self.failing: dict[str, Exception] = {}
        self.hidden_reads = 0

    def count(self, op: str) -> int:
        return sum(1 for name, _ in self.calls if name == op)

    def _fail(self, op: str) -> None:
        if op in self.failing:
            raise self.failing[op]
        if self.errors[op]:
            raise self.errors[op].pop(0)

    def upsert(self, channel: dict[str, Any]) -> None:
        self.calls.append(("upsert", copy.deepcopy(channel)))
        self._fail("upsert")
        self.channels[channel["name"]] = copy.deepcopy(channel)

    def describe_by_names(self, names: list[str]) -> list[dict[str, Any]]:
        self.calls.append(("describe", list(names)))
        self._fail("describe")
        if self.hidden_reads > 0:
            self.hidden_reads -= 1
            return []
        return [copy.deepcopy(self.channels[n]) for n in names if n in self.channels]

    def delete_by_name(self, name: str) -> None:
        self.calls.append(("delete", name))
        self._fail("delete")
        if name not in self.channels:
            raise RemoteError(NO_SUCH_DELIVERY_CHANNEL, f"Cannot find delivery channel '{name}'")
        del self.channels[name]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def reconciler(client: FakeClient, clock: FakeClock) -> Reconciler:
    return Reconciler(client, jitter=0.0, sleep=clock.sleep, clock=clock)
