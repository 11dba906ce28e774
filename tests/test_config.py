import json
import logging
from pathlib import Path

import pytest

from worldgen.biomes import Biome, STRETCHED_THRESHOLDS
from worldgen.config import BuildConfig, load_config, parse_thresholds
from worldgen.errors import ConfigError


def test_defaults_are_valid():
    cfg = BuildConfig().validate()
    assert cfg.grid_radius == 3
    assert cfg.tile_size == pytest.approx(1.73)
    assert cfg.radius_multiplier == pytest.approx(0.9)
    assert (cfg.height.min_height, cfg.height.max_height) == (0, 10)
    assert cfg.minimap.size == 512


def test_from_mapping_reads_nested_values():
    cfg = BuildConfig.from_mapping({
        "grid_radius": "5",
        "tile_size": 2,
        "origin": [1, -2],
        "seed": 99,
        "max_height": 25,
        "thresholds": "stretched",
        "noise": {"octaves": 6, "lacunarity": "2.5"},
        "minimap": {"size": 128, "background": [0, 0, 0, 0], "colors": {}},
    })
    assert cfg.grid_radius == 5
    assert cfg.tile_size == 2.0
    assert cfg.origin == (1.0, -2.0)
    assert cfg.seed == 99
    assert cfg.height.max_height == 25
    assert cfg.height.noise.octaves == 6
    assert cfg.height.noise.lacunarity == 2.5
    assert cfg.thresholds is STRETCHED_THRESHOLDS
    assert cfg.minimap.size == 128
    assert cfg.minimap.background == (0, 0, 0, 0)
    assert cfg.minimap.colors is None


def test_malformed_numbers_fall_back_with_warning(caplog):
    with caplog.at_level(logging.WARNING):
        cfg = BuildConfig.from_mapping({"grid_radius": "lots", "tile_size": "nan"})
    assert cfg.grid_radius == 3
    assert cfg.tile_size == pytest.approx(1.73)
    assert "coercing" in caplog.text


def test_threshold_parsing():
    assert parse_thresholds("STRETCHED") is STRETCHED_THRESHOLDS
    custom = parse_thresholds({"water": 2, "beach": 3, "grassland": 5, "forest": 7, "hills": 9})
    assert custom.classify(10) == Biome.MOUNTAIN
    with pytest.raises(ConfigError):
        parse_thresholds("volcanic")
    with pytest.raises(ConfigError):
        parse_thresholds({"water": 5, "beach": 4, "grassland": 5, "forest": 7, "hills": 9})


def test_validate_lists_every_problem():
    cfg = BuildConfig.from_mapping({
        "grid_radius": -1, "tile_size": 0, "min_height": 5, "max_height": 5,
        "noise": {"octaves": 0}, "minimap": {"size": 2},
    })
    with pytest.raises(ConfigError) as exc:
        cfg.validate()
    assert len(exc.value.problems) == 5


def test_partial_colour_table_rejected():
    cfg = BuildConfig.from_mapping({"minimap": {"colors": {"water": [0, 0, 255]}}})
    assert cfg.minimap.colors == {Biome.WATER: (0, 0, 255, 255)}
    with pytest.raises(ConfigError):
        cfg.validate()
    with pytest.raises(ConfigError):
        BuildConfig.from_mapping({"minimap": {"colors": {"lava": [255, 0, 0]}}})


def test_load_config(tmp_path: Path):
    path = tmp_path / "board.json"
    path.write_text(json.dumps({"grid_radius": 7, "minimap": {"enabled": False}}), encoding="utf-8")
    cfg = load_config(str(path))
    assert cfg.grid_radius == 7
    assert cfg.minimap.enabled is False

    bad = tmp_path / "list.json"
    bad.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(bad))


def test_load_config_missing_or_malformed(tmp_path: Path):
    with pytest.raises(ConfigError) as exc:
        load_config(str(tmp_path / "nope.json"))
    assert "nope.json" in str(exc.value)

    broken = tmp_path / "broken.json"
    broken.write_text("{\"grid_radius\": 3,", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(broken))


def test_badly_shaped_values_fall_back(caplog):
    with caplog.at_level(logging.WARNING):
        cfg = BuildConfig.from_mapping({
            "origin": [5],
            "minimap": {"enabled": "maybe"},
        })
    assert cfg.origin == (0.0, 0.0)
    assert cfg.minimap.enabled is True
    assert "coercing" in caplog.text


def test_enabled_flag_parses_strings():
    assert BuildConfig.from_mapping({"minimap": {"enabled": "false"}}).minimap.enabled is False
    assert BuildConfig.from_mapping({"minimap": {"enabled": "Yes"}}).minimap.enabled is True
    assert BuildConfig.from_mapping({"minimap": {"enabled": 0}}).minimap.enabled is False


@pytest.mark.parametrize("data", [
    {"noise": [1, 2]},
    {"minimap": "big"},
    {"minimap": {"colors": ["water"]}},
    {"thresholds": 5},
])
def test_non_object_sections_rejected(data):
    with pytest.raises(ConfigError):
        BuildConfig.from_mapping(data)
