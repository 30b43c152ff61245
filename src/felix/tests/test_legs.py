import pytest

from felix.layer2.legs import (
    LEG_ORDER,
    LegId,
    LegRegistry,
    diagonal_leg,
    opposite_leg,
    parse_leg_id,
    sameside_leg,
)


def test_topology():
    assert opposite_leg("FR") == LegId.FL
    assert opposite_leg(LegId.BL) == LegId.BR
    assert sameside_leg("FL") == LegId.BL
    assert sameside_leg("BR") == LegId.FR
    assert diagonal_leg("FR") == LegId.BL
    assert diagonal_leg("FL") == LegId.BR


def test_topology_partitions_the_other_legs():
    for leg_id in LEG_ORDER:
        others = {opposite_leg(leg_id), sameside_leg(leg_id), diagonal_leg(leg_id)}
        assert others == set(LEG_ORDER) - {leg_id}


def test_parse_leg_id():
    assert parse_leg_id(" br ") == LegId.BR
    with pytest.raises(KeyError, match="no leg with id: XX"):
        parse_leg_id("XX")


def test_registry_from_config(registry, servos):
    assert len(registry) == 4
    assert [leg.id for leg in registry] == LEG_ORDER
    assert registry.index("BL") == 3

    fl = registry["FL"]
    assert fl.label == "Front left"
    assert fl.origin == (15, 0)
    assert fl.hip.actuator is servos.made[2]
    assert fl.hip.invert and fl.knee.offset == -4
    assert not fl.mirrored and registry["BR"].mirrored

    assert registry.origins()[LegId.BL] == (0, 0)


def test_registry_requires_leg_order(registry):
    legs = list(registry)
    with pytest.raises(ValueError):
        LegRegistry(legs[::-1])
    with pytest.raises(ValueError):
        LegRegistry(legs[:3])
