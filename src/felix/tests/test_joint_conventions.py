import pytest

from felix.layer2.joint_conventions import (
    apply_commands,
    calibration_commands,
    frame_commands,
    leg_servo_angles,
    to_servo_angle,
)
from felix.layer2.legs import Joint
from felix.layer3.leg_ik import AnglePair


def test_plain_joint_adds_trim():
    assert to_servo_angle(Joint(None, offset=2), 68) == 70


def test_inverted_joint_mirrors_then_trims():
    assert to_servo_angle(Joint(None, offset=3, invert=True), 60) == 123
    assert to_servo_angle(Joint(None, offset=-4, invert=True), 137) == 39


def test_leg_servo_angles(registry):
    assert leg_servo_angles(registry["BR"], AnglePair(70, 130)) == (108, 44)


def test_calibration_commands(registry):
    commands = calibration_commands(registry["FR"])
    assert [(joint.pin, angle) for joint, angle in commands] == [(0, 92), (1, 94)]


def test_frame_commands_cover_all_legs(registry):
    commands = frame_commands(registry, [AnglePair(90, 90)] * 4)
    assert [joint.pin for joint, _ in commands] == list(range(8))
    assert [angle for _, angle in commands] == [92, 94, 93, 86, 88, 84, 87, 86]


def test_frame_commands_reject_short_frame(registry):
    with pytest.raises(ValueError):
        frame_commands(registry, [AnglePair(90, 90)] * 3)


def test_apply_commands(registry, journal):
    apply_commands(frame_commands(registry, [AnglePair(90, 90)] * 4))
    assert journal[0] == (0, 92)
    assert len(journal) == 8
