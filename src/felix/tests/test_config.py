import json

import pytest

from felix.config import ConfigError, config_from_dict, default_config, load_config, validate_gait_table
from felix.layer2.legs import LEG_ORDER


def test_defaults():
    config = default_config()
    assert config.granularity == 3
    assert config.frame_period_s == pytest.approx(0.04)
    assert config.geometry.femur == 44 and config.geometry.tibia == 74
    assert [leg.id for leg in config.legs] == LEG_ORDER
    assert config.gait("forward")[0] == (1, 2, 3, 4)


def test_missing_gait():
    with pytest.raises(KeyError, match="no gait named: crawl"):
        default_config().gait("crawl")


def test_partial_override_keeps_defaults():
    config = config_from_dict({"granularity": 5, "geometry": {"height": 100}})
    assert config.granularity == 5
    assert config.geometry.height == 100
    assert config.geometry.step_width == 26
    assert "forward" in config.gaits


def test_gait_without_lift_is_allowed():
    assert validate_gait_table("shuffle", [[1, 2, 3, 3]]) == ((1, 2, 3, 3),)


@pytest.mark.parametrize("data", [
    {"speed": 3},
    {"granularity": 1},
    {"frame_period_ms": 0},
    {"geometry": {"femur": -1}},
    {"geometry": {"knee": 3}},
    {"gaits": {"forward": [[4, 4, 1, 2]]}},
    {"gaits": {"forward": []}},
    {"legs": [{"id": "FR", "hip": {"pin": 0}, "knee": {"pin": 1}}]},
    {"legs": [{"id": "XX", "hip": {"pin": 0}, "knee": {"pin": 1}}]},
    [1, 2, 3],
    {"granularity": "x"},
    {"frame_period_ms": "x"},
    {"geometry": {"height": "tall"}},
    {"geometry": 5},
    {"gaits": {"forward": 5}},
    {"legs": 5},
    {"legs": [{"id": i, "knee": {"pin": 1}} for i in ("FR", "FL", "BR", "BL")]},
    {"legs": [{"id": i, "hip": {"pin": 0}} for i in ("FR", "FL", "BR", "BL")]},
    {"legs": [{"id": "FR", "origin": [1], "hip": {"pin": 0}, "knee": {"pin": 1}}]},
    {"legs": [{"id": "FR", "origin": 5, "hip": {"pin": 0}, "knee": {"pin": 1}}]},
    {"legs": [{"id": "FR", "hip": {"pin": "a"}, "knee": {"pin": 1}}]},
])
def test_invalid_configs(data):
    with pytest.raises(ConfigError):
        config_from_dict(data)


def test_load_config(tmp_path):
    path = tmp_path / "felix.json"
    path.write_text(json.dumps({
        "frame_period_ms": 20,
        "gaits": {"forward": [[1, 2, 3, 4], [2, 3, 4, 1]], "wave": [[4, 1, 1, 1]]},
    }))

    config = load_config(path)
    assert config.frame_period_ms == 20
    assert config.gait("wave") == ((4, 1, 1, 1),)


def test_load_config_bad_json(tmp_path):
    path = tmp_path / "felix.json"
    path.write_text("{granularity: 3")
    with pytest.raises(ConfigError):
        load_config(path)
