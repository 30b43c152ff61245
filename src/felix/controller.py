# controller.py
"""
Felix — top-level robot controller.

Pipeline:

    gait table
        ↓
    Layer 6 (gait compiler) → frames           (Layer 3 IK, Layer 9 paths)
        ↓
    Layer 7 (frame scheduler) → one frame per period
        ↓
    Layer 2 (joint conventions) → servo angles
        ↓
    Layer 1 (PCA9685) → servo motion

Every public method returns a human-readable line for the shell.
"""

import logging
from typing import Callable, Optional

from felix.config import FelixConfig, default_config
from felix.hardware.pca9685 import PCA9685Servo
from felix.layer2.joint_conventions import (
    apply_commands,
    calibration_commands,
    frame_commands,
    leg_commands,
)
from felix.layer2.legs import LegRegistry
from felix.layer3.leg_ik import leg_angles
from felix.layer3.util import Point
from felix.layer6.gait_generator import GaitCompiler, PoseFrame
from felix.layer7.frame_scheduler import FrameScheduler, SchedulerState
from felix.layer8.task_slot import TaskSlot

log = logging.getLogger(__name__)


def _fmt(value) -> str:
    return f"{value:g}"


class Felix:
    def __init__(
        self,
        config: Optional[FelixConfig] = None,
        actuator_factory: Callable = PCA9685Servo,
        slot: Optional[TaskSlot] = None,
    ):
        self.config = config or default_config()
        self.geometry = self.config.geometry
        self.legs = LegRegistry.from_config(self.config, actuator_factory)
        self.compiler = GaitCompiler(self.legs, self.config)
        self.scheduler = FrameScheduler(self._apply_frame, self.config.frame_period_s, slot)

    # ------------------------
    # Poses
    # ------------------------
    def stand(self, height: Optional[float] = None) -> str:
        """All four legs to (0, height), default stand height."""
        height = self.geometry.height if height is None else height
        target = Point(0, height)

        commands = []
        for leg in self.legs:
            commands.extend(leg_commands(leg, leg_angles(self.legs, self.geometry, leg.id, target)))
        self._take_over()
        apply_commands(commands)
        return f"stand at height {_fmt(height)}"

    def calibrate(self) -> str:
        commands = []
        for leg in self.legs:
            commands.extend(calibration_commands(leg))
        self._take_over()
        apply_commands(commands)
        return "calibrating legs"

    def calibrate_leg(self, leg_id) -> str:
        leg = self.legs.leg(leg_id)
        self._take_over()
        apply_commands(calibration_commands(leg))
        return f"calibrating {leg.label}"

    def pose_leg(self, leg_id, pose) -> str:
        leg = self.legs.leg(leg_id)
        p = self.compiler.pose_point(int(pose))
        self._move_leg(leg, p)
        return f"move {leg.label} to pose {int(pose)} (x:{_fmt(p.x)},y:{_fmt(p.y)})"

    def position_leg(self, leg_id, point) -> str:
        leg = self.legs.leg(leg_id)
        p = Point(*point)
        self._move_leg(leg, p)
        return f"move {leg.label} to (x:{_fmt(p.x)},y:{_fmt(p.y)})"

    def home_leg(self, leg_id) -> str:
        leg = self.legs.leg(leg_id)
        self._move_leg(leg, Point(0, self.geometry.height))
        return f"move {leg.label} to its home position (x:0, y:{_fmt(self.geometry.height)})"

    # ------------------------
    # Motions
    # ------------------------
    def walk(self, motion: str) -> str:
        """Start a named gait, or resume it if it is paused."""
        if self.scheduler.is_paused(motion):
            self.scheduler.pause()
            return f"resume {motion}"

        frames = self.compiler.compile_cycle(self.config.gait(motion))
        self.scheduler.start(motion, frames)
        return f"{motion}: {len(frames)} frames per cycle"

    def forward(self) -> str:
        return self.walk("forward")

    def pause(self) -> str:
        state = self.scheduler.pause()
        if state == SchedulerState.PAUSED:
            return f"pause {self.scheduler.motion} at frame {self.scheduler.cursor}"
        if state == SchedulerState.RUNNING:
            return f"resume {self.scheduler.motion}"
        return "nothing to pause"

    def stop(self) -> str:
        self.scheduler.stop()
        return "stopped"

    def status(self) -> str:
        s = self.scheduler
        if s.schedule is None:
            return f"state {s.state.name.lower()}"
        return (
            f"state {s.state.name.lower()} motion {s.motion} "
            f"frame {s.cursor}/{len(s.schedule)} cycle {s.cycle}"
        )

    # ------------------------
    # Internals
    # ------------------------
    def _take_over(self):
        """Direct leg commands stop a running gait; a paused one stays resumable."""
        if self.scheduler.is_running():
            self.scheduler.stop()

    def _move_leg(self, leg, target: Point):
        commands = leg_commands(leg, leg_angles(self.legs, self.geometry, leg.id, target))
        self._take_over()
        apply_commands(commands)

    def _apply_frame(self, frame: PoseFrame):
        # resolve all eight servo angles first, then move
        commands = frame_commands(self.legs, frame.angles)
        log.debug("[FELIX] frame %s -> %s", frame.row, [tuple(a) for a in frame.angles])
        apply_commands(commands)
