# scenegroups/core/time.py
from __future__ import annotations
import asyncio
import time
from typing import Protocol

__all__ = ["nowMonotonicMs", "nowMs", "Clock", "AsyncioClock"]



def nowMonotonicMs() -> int:
    """Returns the current monotonic time in milliseconds."""
    return int(time.perf_counter() * 1000)



def nowMs() -> int:
    return int(time.time() * 1000)



class Clock(Protocol):
    """
    Time source for poll loops. Swapped out in tests so polling runs
    without real delays.
    """
    def nowMs(self) -> int: ...

    async def sleep(self, seconds: float) -> None: ...



class AsyncioClock:
    """Default clock: monotonic time and asyncio.sleep()."""
    def nowMs(self) -> int:
        return nowMonotonicMs()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)
