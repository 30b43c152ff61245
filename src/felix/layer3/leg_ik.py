"""
Layer 3 — LEG INVERSE KINEMATICS (IK)
===================================

Pure math. Zero hardware. Zero servos. Zero timing.

It answers ONE question:

    Given a desired foot position in the leg plane,
    what are the hip and knee angles?

Outputs are:
- integer degrees (servo resolution)
- math-space angles (no trim, no mirroring of servos)
- directly consumable by Layer 2 (joint_conventions)

Coordinate convention (leg plane):
- x : fore-aft (+ forward for front legs)
- y : hip-to-foot height (+ down)

Back legs are mounted mirrored, so their x is negated before solving.
"""

import logging
import math
from typing import NamedTuple

from felix.layer3.util import Point, degrees, round_half_up, forward_kinematics

log = logging.getLogger(__name__)

# Float slack allowed on acos arguments before a target counts as degenerate
_ACOS_EPS = 1e-9


class DomainError(ValueError):
    """Target geometry has no solution (e.g. foot on the hip pivot)."""


class AnglePair(NamedTuple):
    hip: int
    knee: int


def _acos(value: float, what: str) -> float:
    if value > 1.0 + _ACOS_EPS or value < -1.0 - _ACOS_EPS:
        raise DomainError(f"{what}: cos = {value:.4f} outside [-1, 1]")
    return math.acos(max(-1.0, min(1.0, value)))


# -------------------------------------------------
# Core 2-link solver
# -------------------------------------------------

def solve_ik(L1: float, L2: float, P1, P2) -> AnglePair:
    """
    Two-link planar IK.

    L1 : femur length
    L2 : tibia length
    P1 : hip origin (x, y)
    P2 : foot target (x, y)

    Targets beyond reach are clamped to full extension along the same bearing.
    The bearing uses the true distance, not the clamped one, so for an
    unreachable target off the vertical the hip differs from asin(dx / K).
    """
    H1 = P2[0] - P1[0]   # delta on the x axis
    H2 = P2[1] - P1[1]   # delta on the y axis

    # hypotenuse between origin and target
    distance = math.hypot(H1, H2)
    if distance == 0:
        raise DomainError(f"target {tuple(P2)} coincides with hip origin {tuple(P1)}")

    # saturate: the hypotenuse can not exceed the two segments
    K = min(distance, L1 + L2)

    # knee rotational angle
    A1 = _acos((L1 ** 2 + L2 ** 2 - K ** 2) / (2 * L1 * L2), "knee")

    # angle between hypotenuse and femur
    A2 = _acos((K ** 2 + L1 ** 2 - L2 ** 2) / (2 * K * L1), "femur")

    # angle between hypotenuse and the vertical
    A3 = math.asin(H1 / distance)

    # hip rotational angle
    A4 = (math.pi / 2) - (A2 + A3)

    return AnglePair(hip=round_half_up(degrees(A4)), knee=round_half_up(degrees(A1)))


# -------------------------------------------------
# Per-leg helpers
# -------------------------------------------------

def leg_angles(registry, geometry, leg_id, target) -> AnglePair:
    """
    Angles for one leg to reach `target` (leg plane).

    Unknown leg ids raise KeyError; the target itself is never mutated.
    """
    leg = registry.leg(leg_id)
    x, y = target
    if leg.mirrored:
        x = -x

    angles = solve_ik(geometry.femur, geometry.tibia, leg.origin, Point(x, y))
    log.debug("[L3] %s (%s, %s) -> hip %d knee %d", leg.id.value, target[0], target[1], *angles)
    return angles


def leg_position(registry, geometry, leg_id, angles) -> Point:
    """Forward kinematics for one leg, mirroring undone."""
    leg = registry.leg(leg_id)
    p = forward_kinematics(geometry.femur, geometry.tibia, leg.origin, angles.hip, angles.knee)
    if leg.mirrored:
        return Point(-p.x, p.y)
    return p
