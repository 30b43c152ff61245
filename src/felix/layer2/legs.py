"""
Layer 2.0 — LEG REGISTRY & TOPOLOGY
===================================

Static description of the four legs:

    FR ---- FL        front
    |        |
    BR ---- BL        back

- identity, label, hip origin
- hip / knee joint bindings (actuator, trim, mirroring)
- fixed adjacency lookups used by the gait compiler

Built once from configuration, lives as long as the robot.
Unknown leg ids fail fast with KeyError (a LookupError).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Union

from felix.layer3.util import Point


class LegId(Enum):
    FR = "FR"
    FL = "FL"
    BR = "BR"
    BL = "BL"

    @property
    def index(self) -> int:
        return LEG_ORDER.index(self)


# Gait rows, frames and the leg table all use this order
LEG_ORDER = [LegId.FR, LegId.FL, LegId.BR, LegId.BL]

# Back legs are mounted mirrored along the body: their x is negated before IK
MIRRORED_LEGS = frozenset({LegId.BR, LegId.BL})

# -------------------------------------------------
# Topology lookups
# -------------------------------------------------

# across the body, same end
OPPOSITE = {
    LegId.FR: LegId.FL,
    LegId.FL: LegId.FR,
    LegId.BR: LegId.BL,
    LegId.BL: LegId.BR,
}

# same side, other end
SAME_SIDE = {
    LegId.FR: LegId.BR,
    LegId.BR: LegId.FR,
    LegId.FL: LegId.BL,
    LegId.BL: LegId.FL,
}

# opposite corner
DIAGONAL = {
    LegId.FR: LegId.BL,
    LegId.BL: LegId.FR,
    LegId.FL: LegId.BR,
    LegId.BR: LegId.FL,
}


def parse_leg_id(leg_id: Union["LegId", str]) -> LegId:
    if isinstance(leg_id, LegId):
        return leg_id
    try:
        return LegId(str(leg_id).strip().upper())
    except ValueError:
        raise KeyError(f"no leg with id: {leg_id}") from None


def opposite_leg(leg_id) -> LegId:
    return OPPOSITE[parse_leg_id(leg_id)]


def sameside_leg(leg_id) -> LegId:
    return SAME_SIDE[parse_leg_id(leg_id)]


def diagonal_leg(leg_id) -> LegId:
    return DIAGONAL[parse_leg_id(leg_id)]


# -------------------------------------------------
# Registry
# -------------------------------------------------

@dataclass
class Joint:
    """One servo binding: actuator handle + calibration."""
    actuator: Any
    offset: float = 0.0
    invert: bool = False
    pin: int = -1


@dataclass
class Leg:
    id: LegId
    label: str
    origin: Point
    hip: Joint
    knee: Joint

    @property
    def mirrored(self) -> bool:
        return self.id in MIRRORED_LEGS


class LegRegistry:
    """Owns the four legs (and through them, the actuators)."""

    def __init__(self, legs: List[Leg]):
        ids = [leg.id for leg in legs]
        if ids != LEG_ORDER:
            raise ValueError(
                f"legs must be listed as {[l.value for l in LEG_ORDER]}, got {[i.value for i in ids]}"
            )
        self._legs = list(legs)

    @classmethod
    def from_config(cls, config, actuator_factory: Callable[[int], Any]) -> "LegRegistry":
        """
        Build the registry from a FelixConfig.

        actuator_factory(pin) must return an object exposing set_angle(degrees).
        """
        legs = []
        for lc in config.legs:
            legs.append(Leg(
                id=lc.id,
                label=lc.label,
                origin=lc.origin,
                hip=Joint(actuator_factory(lc.hip.pin), lc.hip.offset, lc.hip.invert, lc.hip.pin),
                knee=Joint(actuator_factory(lc.knee.pin), lc.knee.offset, lc.knee.invert, lc.knee.pin),
            ))
        return cls(legs)

    def index(self, leg_id) -> int:
        return parse_leg_id(leg_id).index

    def leg(self, leg_id) -> Leg:
        return self._legs[self.index(leg_id)]

    def origins(self) -> Dict[LegId, Point]:
        return {leg.id: leg.origin for leg in self._legs}

    def __getitem__(self, leg_id) -> Leg:
        return self.leg(leg_id)

    def __iter__(self) -> Iterator[Leg]:
        return iter(self._legs)

    def __len__(self) -> int:
        return len(self._legs)
