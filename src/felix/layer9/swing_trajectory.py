"""
Layer 9 — Cartesian foot trajectories
Produces integer leg-plane points (x, y)

linear_trajectory     : straight segment (stance / dragging legs)
elliptical_trajectory : arc between two angles (swing of a lifted foot)

skip_start_point=True drops the first point, because when trajectories are
chained it repeats the last point of the previous one. The step is then
computed over the full granularity; otherwise over granularity - 1 so the
end point is still reached.
"""

from dataclasses import dataclass
from typing import List

import numpy as np

from felix.layer3.util import Point, round_half_up_array


@dataclass(frozen=True)
class Arc:
    origin: Point
    radius: Point          # (x radius, y radius)
    start_angle: float     # degrees
    end_angle: float       # degrees


def _step_count(granularity: int, skip_start_point: bool) -> int:
    steps = granularity if skip_start_point else granularity - 1
    if steps < 1:
        raise ValueError(f"granularity {granularity} too small (skip_start_point={skip_start_point})")
    return steps


def _to_points(xs, ys) -> List[Point]:
    return [Point(int(x), int(y)) for x, y in zip(round_half_up_array(xs), round_half_up_array(ys))]


def linear_trajectory(start, end, granularity: int = 8, skip_start_point: bool = False) -> List[Point]:
    """
    Equal-distance points from `start` to `end`.

    Returns [] for a zero-length segment.
    """
    delta_x = end[0] - start[0]
    delta_y = end[1] - start[1]

    distance = np.hypot(delta_x, delta_y)
    if distance == 0:
        return []

    step_size = distance / _step_count(granularity, skip_start_point)
    first = step_size if skip_start_point else 0.0
    inc = (first + step_size * np.arange(granularity)) / distance

    return _to_points(start[0] + inc * delta_x, start[1] + inc * delta_y)


def elliptical_trajectory(arc: Arc, granularity: int = 8, skip_start_point: bool = False) -> List[Point]:
    """
    Equal-angle points around arc.origin from start_angle to end_angle.

    With y pointing down (hip to foot), angles between 180° and 360°
    lift the foot towards the body.
    """
    step_size = (arc.end_angle - arc.start_angle) / _step_count(granularity, skip_start_point)
    first = arc.start_angle + (step_size if skip_start_point else 0.0)
    angles = np.radians(first + step_size * np.arange(granularity))

    xs = arc.origin[0] + arc.radius[0] * np.cos(angles)
    ys = arc.origin[1] + arc.radius[1] * np.sin(angles)
    return _to_points(xs, ys)
