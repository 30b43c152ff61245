"""
Layer 2.5 — JOINT CONVENTION MAPPING
===================================

PURPOSE
-------
Adapter between:

- math-space joint angles produced by IK (hip / knee, degrees)
- servo angles expected by the real, mirrored, trimmed servos

RESPONSIBILITIES
----------------
- Mirror inverted joints about the middle of the servo travel
- Add the per-joint calibration trim (after mirroring)
- Resolve a whole frame into servo commands BEFORE anything moves

NON-RESPONSIBILITIES
--------------------
- No IK math
- No gait or timing logic
- No bus I/O (actuators do that)

If something is wrong here, symptoms look like:
- one side collapsing
- mirrored legs swinging the wrong way
"""

import logging
from typing import List, Sequence, Tuple

from felix.hardware.absolute_truths import SERVO_RANGE, CALIBRATION_ANGLE

log = logging.getLogger(__name__)


def to_servo_angle(joint, angle: float) -> float:
    """
    corrected = (SERVO_RANGE - angle if inverted else angle) + offset
    """
    if joint.invert:
        angle = SERVO_RANGE - angle
    return angle + joint.offset


def leg_servo_angles(leg, angles) -> Tuple[float, float]:
    """(hip, knee) math angles -> (hip, knee) servo angles for one leg."""
    return to_servo_angle(leg.hip, angles.hip), to_servo_angle(leg.knee, angles.knee)


def leg_commands(leg, angles) -> List[Tuple[object, float]]:
    hip, knee = leg_servo_angles(leg, angles)
    return [(leg.hip, hip), (leg.knee, knee)]


def calibration_commands(leg) -> List[Tuple[object, float]]:
    """Drive both joints of a leg to the zero reference (90° + trim)."""
    return [
        (leg.hip, to_servo_angle(leg.hip, CALIBRATION_ANGLE)),
        (leg.knee, to_servo_angle(leg.knee, CALIBRATION_ANGLE)),
    ]


def frame_commands(registry, angle_pairs: Sequence) -> List[Tuple[object, float]]:
    """
    Resolve one angle pair per leg (registry order) into servo commands.

    Raises before returning anything if the frame does not cover every leg,
    so a bad frame never half-moves the robot.
    """
    if len(angle_pairs) != len(registry):
        raise ValueError(f"frame has {len(angle_pairs)} angle pairs for {len(registry)} legs")

    commands = []
    for leg, angles in zip(registry, angle_pairs):
        commands.extend(leg_commands(leg, angles))
    return commands


def apply_commands(commands: Sequence[Tuple[object, float]]):
    """Fire-and-forget: hand each servo its angle."""
    for joint, angle in commands:
        log.debug("[L2] pin %d -> %.1f°", joint.pin, angle)
        joint.actuator.set_angle(angle)
