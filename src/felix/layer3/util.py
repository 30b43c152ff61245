import math
from typing import NamedTuple

import numpy as np


class Point(NamedTuple):
    """Leg-plane point: x fore-aft, y height (hip to foot)."""
    x: float
    y: float


def degrees(rad):
    return rad * (180.0 / math.pi)


def radians(deg):
    return deg * (math.pi / 180.0)


def round_half_up(value):
    """Round to the nearest integer, .5 going up (towards +inf)."""
    return int(math.floor(value + 0.5))


def round_half_up_array(values):
    return np.floor(np.asarray(values, dtype=float) + 0.5).astype(int)


def forward_kinematics(L1, L2, origin, hip_deg, knee_deg) -> Point:
    """
    Planar 2-link FK, inverse of solve_ik.

    hip_deg  : femur angle from the horizontal hip axis
    knee_deg : interior angle between femur and tibia
    """
    femur = radians(90.0 - hip_deg)            # femur bearing from vertical
    tibia = femur - (math.pi - radians(knee_deg))

    knee = np.array([origin[0], origin[1]]) + L1 * np.array([math.sin(femur), math.cos(femur)])
    foot = knee + L2 * np.array([math.sin(tibia), math.cos(tibia)])
    return Point(float(foot[0]), float(foot[1]))
