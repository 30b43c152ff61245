import math

import pytest

from felix.config import Geometry, JointConfig, LegConfig, FelixConfig
from felix.layer2.legs import LEG_ORDER, LegId, LegRegistry
from felix.layer3.leg_ik import AnglePair, DomainError, leg_angles, leg_position, solve_ik
from felix.layer3.util import Point, forward_kinematics, radians

L1, L2 = 44, 74


def _registry(origin=(0, 0)):
    legs = tuple(
        LegConfig(leg_id, leg_id.value, Point(*origin), JointConfig(2 * i), JointConfig(2 * i + 1))
        for i, leg_id in enumerate(LEG_ORDER)
    )
    config = FelixConfig(legs=legs)
    return LegRegistry.from_config(config, lambda pin: None), config.geometry


def test_stand_point_front_right(registry, config):
    # FR hip sits at (10, 0); foot straight under the body at stand height
    assert leg_angles(registry, config.geometry, "FR", (0, 110)) == AnglePair(hip=68, knee=137)


@pytest.mark.parametrize("target", [
    (0, 110), (13, 110), (-13, 110), (4, 100), (-20, 95), (25, 90), (0, 60), (30, 112),
])
def test_ik_fk_round_trip(target):
    origin = (10, 0)
    angles = solve_ik(L1, L2, origin, target)
    foot = forward_kinematics(L1, L2, origin, angles.hip, angles.knee)

    # integer-degree angles cannot hold the foot to +-1 unit: half a degree of
    # rounding on each joint swings it up to (reach + L2) * 0.5°
    reach = math.hypot(target[0] - origin[0], target[1] - origin[1])
    tolerance = (reach + L2) * radians(0.5)
    assert math.hypot(foot.x - target[0], foot.y - target[1]) <= tolerance


def test_unreachable_target_saturates():
    # same bearing (3, 4): exactly at full reach, then far beyond it
    at_reach = solve_ik(L1, L2, (0, 0), (3 * 118 / 5, 4 * 118 / 5))
    beyond = solve_ik(L1, L2, (0, 0), (150, 200))

    assert beyond.knee == at_reach.knee == 180
    assert beyond.hip == at_reach.hip == 53


def test_back_legs_are_mirrored():
    registry, geometry = _registry()
    front = leg_angles(registry, geometry, LegId.FR, (9, 100))
    back = leg_angles(registry, geometry, LegId.BR, (9, 100))

    assert back == leg_angles(registry, geometry, LegId.FR, (-9, 100))
    assert back.knee == front.knee
    # hip angles reflect about the femur angle of a straight-down target
    straight = 90 - math.degrees(math.acos((100 ** 2 + 9 ** 2 + L1 ** 2 - L2 ** 2) / (2 * math.hypot(9, 100) * L1)))
    assert abs((front.hip - straight) + (back.hip - straight)) <= 1


def test_target_is_not_mutated(registry, config):
    target = [5, 100]
    leg_angles(registry, config.geometry, "BL", target)
    assert target == [5, 100]


def test_leg_position_undoes_mirroring(registry, config):
    target = Point(-8, 104)
    angles = leg_angles(registry, config.geometry, "BR", target)
    foot = leg_position(registry, config.geometry, "BR", angles)
    assert foot.x == pytest.approx(target.x, abs=1.6)
    assert foot.y == pytest.approx(target.y, abs=1.6)


def test_coincident_target_is_a_domain_error():
    with pytest.raises(DomainError):
        solve_ik(L1, L2, (10, 0), (10, 0))


def test_target_inside_minimum_reach_is_a_domain_error():
    # closer than |L2 - L1| = 30: no triangle
    with pytest.raises(DomainError):
        solve_ik(L1, L2, (0, 0), (0, 20))


def test_unknown_leg(registry):
    with pytest.raises(LookupError):
        leg_angles(registry, Geometry(), "XX", (0, 110))
