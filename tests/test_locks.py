"""Tests for hundred_days/utils/locks.py: per-key write serialization."""

from __future__ import annotations

import asyncio

import pytest

from hundred_days.utils.locks import KeyedLock


@pytest.mark.asyncio
async def test_same_key_is_serialized():
    locks = KeyedLock()
    events: list[str] = []

    async def worker(name: str) -> None:
        async with locks.hold("challenge:c1"):
            events.append(f"{name}-start")
            await asyncio.sleep(0.01)
            events.append(f"{name}-end")

    await asyncio.gather(worker("a"), worker("b"))
    assert events in (
        ["a-start", "a-end", "b-start", "b-end"],
        ["b-start", "b-end", "a-start", "a-end"],
    )


@pytest.mark.asyncio
async def test_different_keys_do_not_block():
    locks = KeyedLock()
    inside = asyncio.Event()

    async def holder() -> None:
        async with locks.hold("one"):
            await inside.wait()

    task = asyncio.create_task(holder())
    await asyncio.sleep(0)
    async with locks.hold("two"):
        inside.set()
    await task


@pytest.mark.asyncio
async def test_locks_are_released_after_use():
    locks = KeyedLock()
    async with locks.hold("k"):
        assert len(locks) == 1
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_lock_released_on_error():
    locks = KeyedLock()
    with pytest.raises(RuntimeError):
        async with locks.hold("k"):
            raise RuntimeError("boom")
    assert len(locks) == 0
