"""Tests for the fan-out/fan-in error group."""
from __future__ import annotations

import asyncio

import pytest

from brandbridge.engine.task_group import ErrorGroup


@pytest.mark.asyncio
async def test_all_units_complete_without_error():
    done: list[int] = []

    async def unit(n: int) -> None:
        await asyncio.sleep(0)
        done.append(n)

    async with ErrorGroup() as group:
        for n in range(5):
            group.go(unit(n))

    assert sorted(done) == [0, 1, 2, 3, 4]
    assert not group.cancelled.is_set()


@pytest.mark.asyncio
async def test_first_error_is_raised_after_siblings_finish():
    finished: list[str] = []

    async def fail_fast() -> None:
        raise ValueError("first")

    async def fail_late() -> None:
        await asyncio.sleep(0.02)
        raise KeyError("second")

    async def slow_ok() -> None:
        await asyncio.sleep(0.05)
        finished.append("slow")

    with pytest.raises(ValueError, match="first"):
        async with ErrorGroup() as group:
            group.go(fail_fast())
            group.go(fail_late())
            group.go(slow_ok())

    # Siblings are not cancelled, only the shared event is set.
    assert finished == ["slow"]
    assert group.cancelled.is_set()


@pytest.mark.asyncio
async def test_cancelled_event_lets_units_stop_early():
    observed: list[bool] = []

    async def failing() -> None:
        raise RuntimeError("boom")

    async def cooperative(group: ErrorGroup) -> None:
        await asyncio.sleep(0.01)
        observed.append(group.cancelled.is_set())

    group = ErrorGroup()
    group.go(failing())
    group.go(cooperative(group))
    with pytest.raises(RuntimeError):
        await group.wait()

    assert observed == [True]


@pytest.mark.asyncio
async def test_wait_on_empty_group_returns():
    group = ErrorGroup()
    await group.wait()
