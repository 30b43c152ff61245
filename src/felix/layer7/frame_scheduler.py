# layer7/frame_scheduler.py

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional, Sequence, Tuple

from felix.layer6.gait_generator import Frame, LoopFrame, PoseFrame
from felix.layer8.task_slot import TaskSlot

log = logging.getLogger(__name__)


class SchedulerState(Enum):
    IDLE = 0
    RUNNING = 1
    PAUSED = 2


@dataclass
class Schedule:
    """
    Compiled frames of one motion plus the playback position.

    The last frame is always a LoopFrame. Loop counts are tracked here,
    the frames themselves are never modified.
    """
    frames: Tuple[Frame, ...]
    cursor: int = 0
    cycle: int = 0
    loops_left: Dict[int, int] = field(default_factory=dict)

    def __post_init__(self):
        self.frames = tuple(self.frames)
        if not self.frames or not isinstance(self.frames[-1], LoopFrame):
            raise ValueError("schedule must end with a loop directive")
        if any(isinstance(f, LoopFrame) for f in self.frames[:-1]):
            raise ValueError("loop directive before the end of the schedule")
        if len(self.frames) == 1 and self.frames[-1].count != 0:
            raise ValueError("schedule loops without a pose frame")

    @property
    def exhausted(self) -> bool:
        return self.cursor >= len(self.frames)

    def __len__(self):
        return len(self.frames)


class FrameScheduler:
    """
    Layer 7 — Frame playback state machine

        IDLE --start--> RUNNING --pause--> PAUSED --pause--> RUNNING
                           |                                   |
                           +--- loop count reaches 0 ---> IDLE

    Authoritative responsibilities:
    - Only one schedule is active at a time
    - Exactly one pending tick while RUNNING, none otherwise
    - Loop-back happens inside the same tick (no extra delay)
    """

    def __init__(
        self,
        apply_frame: Callable[[PoseFrame], None],
        period_s: float,
        slot: Optional[TaskSlot] = None,
    ):
        self.apply_frame = apply_frame
        self.period_s = period_s
        self.slot = slot or TaskSlot()

        self.state = SchedulerState.IDLE
        self.motion: Optional[str] = None
        self.schedule: Optional[Schedule] = None

    # --------------------------------------------------
    # PUBLIC API
    # --------------------------------------------------
    def start(self, motion: str, frames: Sequence[Frame], loop_count: int = -1):
        """Replace the active schedule and play it from frame 0."""
        self.slot.cancel()
        self.schedule = Schedule(tuple(frames) + (LoopFrame(loop_count),))
        self.motion = motion
        self.state = SchedulerState.RUNNING
        log.info("[L7] start '%s': %d frames, loop %d", motion, len(self.schedule), loop_count)
        self._tick()

    def pause(self) -> SchedulerState:
        """Toggle: RUNNING -> PAUSED, PAUSED -> RUNNING. IDLE stays IDLE."""
        if self.state == SchedulerState.PAUSED:
            self.state = SchedulerState.RUNNING
            log.info("[L7] resume '%s' at frame %d", self.motion, self.schedule.cursor)
            self._tick()
        elif self.state == SchedulerState.RUNNING:
            self.slot.cancel()
            self.state = SchedulerState.PAUSED
            log.info("[L7] pause '%s' at frame %d", self.motion, self.schedule.cursor)
        return self.state

    def stop(self):
        """Drop the active schedule."""
        self.slot.cancel()
        if self.state != SchedulerState.IDLE:
            log.info("[L7] stop '%s'", self.motion)
        self.state = SchedulerState.IDLE
        self.motion = None
        self.schedule = None

    # --------------------------------------------------
    # QUERY HELPERS
    # --------------------------------------------------
    def is_running(self, motion: Optional[str] = None) -> bool:
        return self.state == SchedulerState.RUNNING and motion in (None, self.motion)

    def is_paused(self, motion: Optional[str] = None) -> bool:
        return self.state == SchedulerState.PAUSED and motion in (None, self.motion)

    @property
    def cursor(self) -> Optional[int]:
        return self.schedule.cursor if self.schedule else None

    @property
    def cycle(self) -> Optional[int]:
        return self.schedule.cycle if self.schedule else None

    # --------------------------------------------------
    # INTERNALS
    # --------------------------------------------------
    def _halt(self):
        log.info("[L7] '%s' finished after %d cycles", self.motion, self.schedule.cycle + 1)
        self.state = SchedulerState.IDLE

    def _tick(self):
        sched = self.schedule

        while True:
            if sched.exhausted:
                self._halt()
                return

            frame = sched.frames[sched.cursor]

            if isinstance(frame, LoopFrame):
                left = sched.loops_left.get(sched.cursor, frame.count)
                if left == 0:
                    self._halt()
                    return
                if left > 0:
                    sched.loops_left[sched.cursor] = left - 1

                sched.cursor = 0
                sched.cycle += 1
                log.debug("[L7] '%s' cycle %d", self.motion, sched.cycle)
                continue

            try:
                self.apply_frame(frame)
            except Exception:
                log.error("[L7] '%s' frame %d rejected, playback stopped", self.motion, sched.cursor)
                self.state = SchedulerState.IDLE
                raise

            sched.cursor += 1
            self.slot.schedule(self.period_s, self._tick)
            return
