# layer6/gait_generator.py
"""
Layer 6 — GAIT COMPILER
=======================

Turns a gait table (cyclic rows of per-leg pose codes) into the ordered
frames of ONE stride cycle:

    row 0 stance frame
    row 0 -> row 1 transition frames
    row 1 stance frame
    ...
    row N-1 -> row 0 transition frames

The loop directive that repeats the cycle is added by whoever plays it.

This layer does:
- pose code -> stance point (plus static-stability height trims)
- transition paths (arc for the lifted leg, straight line for the others)
- IK for every point (Layer 3)

This layer does NOT:
- touch servos
- know about time
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from felix.config import LIFT_CODE, validate_gait_table
from felix.layer2.legs import LEG_ORDER, LegId, opposite_leg, sameside_leg, diagonal_leg
from felix.layer3.leg_ik import AnglePair, leg_angles
from felix.layer3.util import Point
from felix.layer9.swing_trajectory import Arc, linear_trajectory, elliptical_trajectory

log = logging.getLogger(__name__)


# -------------------------------------------------
# Pose codes
# -------------------------------------------------

class StridePosition(Enum):
    REAR = 1
    MID_REAR = 2
    MID_FRONT = 3
    FRONT = 4

    @property
    def fraction(self) -> float:
        """Fore-aft position as a fraction of the step width."""
        return _STRIDE_FRACTIONS[self]


_STRIDE_FRACTIONS = {
    StridePosition.REAR: -1 / 2,
    StridePosition.MID_REAR: -1 / 6,
    StridePosition.MID_FRONT: 1 / 6,
    StridePosition.FRONT: 1 / 2,
}


@dataclass(frozen=True)
class PoseCode:
    position: StridePosition
    lifted: bool = False

    @classmethod
    def from_code(cls, code: int) -> "PoseCode":
        """Table codes 1..4; code 4 is the front-most position AND the lift flag."""
        try:
            position = StridePosition(code)
        except ValueError:
            raise ValueError(f"invalid pose code {code!r}, expected 1..4") from None
        return cls(position, code == LIFT_CODE)

    @property
    def code(self) -> int:
        return self.position.value


GaitRow = Tuple[PoseCode, ...]


def parse_gait_table(name: str, table) -> Tuple[GaitRow, ...]:
    return tuple(
        tuple(PoseCode.from_code(code) for code in row)
        for row in validate_gait_table(name, table)
    )


def row_codes(row: Sequence[PoseCode]) -> Tuple[int, ...]:
    return tuple(pose.code for pose in row)


def lifted_leg(row: Sequence[PoseCode]) -> Optional[LegId]:
    for leg_id, pose in zip(LEG_ORDER, row):
        if pose.lifted:
            return leg_id
    return None


# -------------------------------------------------
# Frames
# -------------------------------------------------

@dataclass(frozen=True)
class PoseFrame:
    """One angle pair per leg (FR, FL, BR, BL) plus where it came from."""
    angles: Tuple[AnglePair, ...]
    points: Tuple[Point, ...]
    row: Tuple[int, ...]
    next_row: Optional[Tuple[int, ...]] = None

    @property
    def is_transition(self) -> bool:
        return self.next_row is not None


@dataclass(frozen=True)
class LoopFrame:
    """Jump back to frame 0. count = repeats left, -1 = forever."""
    count: int = -1


Frame = Union[PoseFrame, LoopFrame]


# -------------------------------------------------
# Static stability
# -------------------------------------------------
# Height trims (leg-plane y, + is further from the hip) applied to the
# grounded legs while one leg is lifted. Tuned on the robot, not derived.

DIAGONAL_TRIM = -3
OPPOSITE_TRIM = -1
SAMESIDE_TRIM = +2


def stability_trims(lifted: Optional[LegId]) -> dict:
    if lifted is None:
        return {}
    return {
        diagonal_leg(lifted): DIAGONAL_TRIM,
        opposite_leg(lifted): OPPOSITE_TRIM,
        sameside_leg(lifted): SAMESIDE_TRIM,
    }


# -------------------------------------------------
# Compiler
# -------------------------------------------------

class GaitCompiler:
    def __init__(self, registry, config):
        self.registry = registry
        self.config = config
        self.geometry = config.geometry

    # ---- points ----

    def pose_point(self, pose: Union[PoseCode, int]) -> Point:
        """Stance point for one pose code at nominal height."""
        if not isinstance(pose, PoseCode):
            pose = PoseCode.from_code(pose)
        x = pose.position.fraction * self.geometry.step_width
        return Point(x, self.geometry.height)

    def pose_points(self, row: Sequence[PoseCode]) -> List[Point]:
        """Stance points for a gait row, with the stability trims applied."""
        trims = stability_trims(lifted_leg(row))
        points = []
        for leg_id, pose in zip(LEG_ORDER, row):
            p = self.pose_point(pose)
            points.append(Point(p.x, p.y + trims.get(leg_id, 0)))
        return points

    def _angles(self, points: Sequence[Point]) -> Tuple[AnglePair, ...]:
        return tuple(
            leg_angles(self.registry, self.geometry, leg_id, p)
            for leg_id, p in zip(LEG_ORDER, points)
        )

    # ---- frames ----

    def pose_frame(self, row: Sequence[PoseCode]) -> PoseFrame:
        points = self.pose_points(row)
        return PoseFrame(angles=self._angles(points), points=tuple(points), row=row_codes(row))

    def _swing_arc(self, from_point: Point, to_point: Point) -> Arc:
        radius_x = abs(from_point.x - to_point.x) / 2
        midpoint_x = min(from_point.x, to_point.x) + radius_x
        return Arc(
            origin=Point(midpoint_x, to_point.y),
            radius=Point(radius_x, self.geometry.step_height),
            start_angle=360,
            end_angle=180,
        )

    def leg_paths(self, row_a: Sequence[PoseCode], row_b: Sequence[PoseCode]) -> List[List[Point]]:
        """Per-leg point sequences (equal length) from row_a stance to row_b stance."""
        granularity = self.config.granularity
        points_a = self.pose_points(row_a)
        points_b = self.pose_points(row_b)

        paths = []
        for pose, from_point, to_point in zip(row_a, points_a, points_b):
            if pose.lifted:
                path = elliptical_trajectory(self._swing_arc(from_point, to_point), granularity, True)
            else:
                path = linear_trajectory(from_point, to_point, granularity, True)
                if not path:
                    # foot does not move: hold it so every leg has the same length
                    path = [to_point] * granularity
            paths.append(path)
        return paths

    def pose_transition(self, row_a: Sequence[PoseCode], row_b: Sequence[PoseCode]) -> List[PoseFrame]:
        frames = []
        for instant in zip(*self.leg_paths(row_a, row_b)):
            frames.append(PoseFrame(
                angles=self._angles(instant),
                points=tuple(instant),
                row=row_codes(row_a),
                next_row=row_codes(row_b),
            ))
        return frames

    def compile_cycle(self, gait_table) -> List[PoseFrame]:
        """All frames of one stride cycle, without the trailing loop directive."""
        rows = parse_gait_table("<table>", gait_table)
        frames = []
        for i, row in enumerate(rows):
            frames.append(self.pose_frame(row))
            frames.extend(self.pose_transition(row, rows[(i + 1) % len(rows)]))

        log.info("[L6] Compiled %d rows into %d frames", len(rows), len(frames))
        return frames


def compile_cycle(registry, config, gait_table) -> List[PoseFrame]:
    return GaitCompiler(registry, config).compile_cycle(gait_table)
