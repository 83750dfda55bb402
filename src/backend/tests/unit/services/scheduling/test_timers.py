"""
Unit tests for AsyncioScheduler timer slots
"""

import asyncio

import pytest

from storefront.services.scheduling import AsyncioScheduler


@pytest.mark.unit
class TestAsyncioScheduler:

    @pytest.mark.asyncio
    async def test_timer_fires_after_delay(self):
        scheduler = AsyncioScheduler()
        fired = []

        scheduler.schedule("debounce", 0.01, lambda: fired.append("debounce"))
        assert scheduler.is_pending("debounce")

        await asyncio.sleep(0.05)

        assert fired == ["debounce"]
        assert not scheduler.is_pending("debounce")

    @pytest.mark.asyncio
    async def test_rescheduling_replaces_pending_timer(self):
        scheduler = AsyncioScheduler()
        fired = []

        for value in ("a", "b", "c"):
            scheduler.schedule("debounce", 0.02, lambda value=value: fired.append(value))

        await asyncio.sleep(0.08)

        assert fired == ["c"]

    @pytest.mark.asyncio
    async def test_cancel(self):
        scheduler = AsyncioScheduler()
        fired = []

        scheduler.schedule("leave", 0.01, lambda: fired.append("leave"))
        assert scheduler.cancel("leave") is True
        assert scheduler.cancel("leave") is False

        await asyncio.sleep(0.03)
        assert fired == []

    @pytest.mark.asyncio
    async def test_cancel_all(self):
        scheduler = AsyncioScheduler()
        fired = []

        scheduler.schedule("hover", 0.01, lambda: fired.append("hover"))
        scheduler.schedule("leave", 0.01, lambda: fired.append("leave"))
        scheduler.cancel_all()

        await asyncio.sleep(0.03)
        assert fired == []
        assert not scheduler.is_pending("hover")

    @pytest.mark.asyncio
    async def test_slots_are_independent(self):
        scheduler = AsyncioScheduler()
        fired = []

        scheduler.schedule("hover", 0.01, lambda: fired.append("hover"))
        scheduler.schedule("leave", 0.01, lambda: fired.append("leave"))
        scheduler.cancel("hover")

        await asyncio.sleep(0.03)
        assert fired == ["leave"]
