"""
Robot configuration.

Defaults come straight from hardware/absolute_truths.py; a JSON file with the
same keys can override any of them:

    {
      "granularity": 3,
      "frame_period_ms": 40,
      "geometry": {"femur": 44, "tibia": 74, "height": 110,
                   "step_height": 10, "step_width": 26},
      "gaits": {"forward": [[1,2,3,4], [2,3,4,1], [3,4,1,2], [4,1,2,3]]},
      "legs": [{"id": "FR", "label": "Front right", "origin": [10, 0],
                "hip": {"pin": 0, "offset": 2, "invert": false},
                "knee": {"pin": 1, "offset": 4, "invert": false}}, ...]
    }
"""

import json
import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Tuple

from felix.hardware import absolute_truths as truths
from felix.layer2.legs import LEG_ORDER, LegId
from felix.layer3.util import Point

log = logging.getLogger(__name__)

LIFT_CODE = 4
POSE_CODES = (1, 2, 3, 4)

GaitTable = Tuple[Tuple[int, int, int, int], ...]


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Geometry:
    femur: float = truths.FEMUR
    tibia: float = truths.TIBIA
    height: float = truths.HEIGHT
    step_height: float = truths.STEP_HEIGHT
    step_width: float = truths.STEP_WIDTH


@dataclass(frozen=True)
class JointConfig:
    pin: int
    offset: float = 0.0
    invert: bool = False


@dataclass(frozen=True)
class LegConfig:
    id: LegId
    label: str
    origin: Point
    hip: JointConfig
    knee: JointConfig


@dataclass(frozen=True)
class FelixConfig:
    granularity: int = truths.GRANULARITY
    frame_period_ms: int = truths.FRAME_PERIOD_MS
    geometry: Geometry = field(default_factory=Geometry)
    gaits: Dict[str, GaitTable] = field(default_factory=dict)
    legs: Tuple[LegConfig, ...] = ()

    @property
    def frame_period_s(self) -> float:
        return self.frame_period_ms / 1000.0

    def gait(self, name: str) -> GaitTable:
        try:
            return self.gaits[name]
        except KeyError:
            raise KeyError(f"no gait named: {name}") from None


# -------------------------------------------------
# Validation
# -------------------------------------------------

def validate_gait_table(name: str, table) -> GaitTable:
    """
    Check a gait table and return it as nested tuples.

    Rows must hold four pose codes (FR, FL, BR, BL) in 1..4, with at most
    one lifted leg per row.
    """
    try:
        rows = [tuple(row) for row in table]
    except TypeError as e:
        raise ConfigError(f"gait '{name}' must be a list of rows: {e}") from e
    if not rows:
        raise ConfigError(f"gait '{name}' has no rows")

    for i, row in enumerate(rows):
        if len(row) != len(LEG_ORDER):
            raise ConfigError(f"gait '{name}' row {i}: expected {len(LEG_ORDER)} codes, got {len(row)}")
        for code in row:
            if isinstance(code, bool) or not isinstance(code, int) or code not in POSE_CODES:
                raise ConfigError(f"gait '{name}' row {i}: invalid pose code {code!r}")
        if row.count(LIFT_CODE) > 1:
            raise ConfigError(f"gait '{name}' row {i}: more than one lifted leg {list(row)}")
    return tuple(rows)


def validate(config: FelixConfig) -> FelixConfig:
    if config.granularity < 2:
        raise ConfigError(f"granularity must be >= 2, got {config.granularity}")
    if config.frame_period_ms <= 0:
        raise ConfigError(f"frame_period_ms must be > 0, got {config.frame_period_ms}")

    g = config.geometry
    for attr in ("femur", "tibia", "height", "step_height", "step_width"):
        if getattr(g, attr) <= 0:
            raise ConfigError(f"geometry.{attr} must be > 0, got {getattr(g, attr)}")

    ids = [leg.id for leg in config.legs]
    if ids != LEG_ORDER:
        raise ConfigError(
            f"legs must be listed as {[l.value for l in LEG_ORDER]}, got {[i.value for i in ids]}"
        )

    gaits = {name: validate_gait_table(name, table) for name, table in config.gaits.items()}
    return replace(config, gaits=gaits)


# -------------------------------------------------
# Construction
# -------------------------------------------------

def _joint_from_dict(d) -> JointConfig:
    try:
        return JointConfig(pin=int(d["pin"]), offset=float(d.get("offset", 0)), invert=bool(d.get("invert", False)))
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigError(f"invalid joint entry {d!r}: {e}") from e


def _leg_from_dict(d) -> LegConfig:
    try:
        leg_id = LegId(d["id"])
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigError(f"invalid leg id in {d!r}") from e
    try:
        origin = d.get("origin", (0, 0))
        origin = Point(float(origin[0]), float(origin[1]))
    except (IndexError, TypeError, ValueError) as e:
        raise ConfigError(f"leg {leg_id.value}: invalid origin: {e}") from e
    for joint in ("hip", "knee"):
        if joint not in d:
            raise ConfigError(f"leg {leg_id.value}: missing '{joint}' entry")
    return LegConfig(
        id=leg_id,
        label=d.get("label", leg_id.value),
        origin=origin,
        hip=_joint_from_dict(d["hip"]),
        knee=_joint_from_dict(d["knee"]),
    )


def config_from_dict(data: dict) -> FelixConfig:
    """Build a validated config; any key left out falls back to the defaults."""
    if not isinstance(data, dict):
        raise ConfigError(f"configuration must be a JSON object, got {type(data).__name__}")
    unknown = set(data) - {"granularity", "frame_period_ms", "geometry", "gaits", "legs"}
    if unknown:
        raise ConfigError(f"unknown configuration keys: {sorted(unknown)}")

    geometry = dict(vars(Geometry()))
    try:
        geometry.update(data.get("geometry", {}))
        geometry = Geometry(**{k: float(v) for k, v in geometry.items()})
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid geometry: {e}") from e

    try:
        granularity = int(data.get("granularity", truths.GRANULARITY))
        frame_period_ms = int(data.get("frame_period_ms", truths.FRAME_PERIOD_MS))
        gaits = dict(data.get("gaits", truths.GAITS))
        legs = list(data.get("legs", truths.LEGS))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid configuration: {e}") from e

    config = FelixConfig(
        granularity=granularity,
        frame_period_ms=frame_period_ms,
        geometry=geometry,
        gaits=gaits,
        legs=tuple(_leg_from_dict(d) for d in legs),
    )
    return validate(config)


def default_config() -> FelixConfig:
    return config_from_dict({})


def load_config(path) -> FelixConfig:
    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"{path}: {e}") from e
    config = config_from_dict(data)
    log.info("[CFG] Loaded %s (%d gaits)", path, len(config.gaits))
    return config
