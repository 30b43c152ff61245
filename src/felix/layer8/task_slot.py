"""
Layer 8 — Single-slot delayed task
==================================

At most ONE pending callback per slot:
- schedule() replaces whatever was pending
- cancel() drops it (no-op when nothing is pending)

Backed by sched.scheduler, so everything runs on the thread that calls
scheduler.run(). Tests hand in a scheduler built on a virtual clock.
"""

import sched
import time
from typing import Callable, Optional


def make_scheduler(timefunc=time.monotonic, delayfunc=time.sleep) -> sched.scheduler:
    return sched.scheduler(timefunc, delayfunc)


class TaskSlot:
    def __init__(self, scheduler: Optional[sched.scheduler] = None):
        self.scheduler = scheduler or make_scheduler()
        self._event = None

    @property
    def pending(self) -> bool:
        return self._event is not None

    def schedule(self, delay_s: float, callback: Callable[[], None]):
        self.cancel()
        self._event = self.scheduler.enter(delay_s, 0, self._fire, (callback,))

    def cancel(self):
        if self._event is None:
            return
        self.scheduler.cancel(self._event)
        self._event = None

    def _fire(self, callback):
        self._event = None
        callback()
