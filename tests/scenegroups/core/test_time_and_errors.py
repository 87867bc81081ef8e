# tests/scenegroups/core/test_time_and_errors.py
from __future__ import annotations

import pytest

from scenegroups.core.errors import GroupDefinitionError, GroupLoadTimeoutError, SceneGroupError
from scenegroups.core.time import AsyncioClock, nowMonotonicMs, nowMs


def test_monotonic_clock_never_goes_backwards():
    first = nowMonotonicMs()
    second = nowMonotonicMs()
    assert second >= first
    assert nowMs() > 0


@pytest.mark.asyncio
async def test_asyncio_clock_sleeps_and_reports_time():
    clock = AsyncioClock()
    before = clock.nowMs()
    await clock.sleep(0)
    assert clock.nowMs() >= before


def test_timeout_error_carries_details():
    err = GroupLoadTimeoutError(phase="load", timeoutMs=1500, progress=0.25)
    assert isinstance(err, SceneGroupError)
    assert err.phase == "load" and err.timeoutMs == 1500 and err.progress == 0.25
    assert "1500 ms" in str(err) and "0.25" in str(err)
    assert issubclass(GroupDefinitionError, SceneGroupError)
