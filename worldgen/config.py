from __future__ import annotations
"""Build-time configuration for a hex board.

Every knob is fixed for the duration of a build.  Values read from JSON go
through lenient coercion: a malformed number falls back to its default and a
warning is logged, so a hand-edited config file degrades instead of crashing.
Structural problems (negative radius, empty height range, ...) are collected
by :meth:`BuildConfig.validate` and reported together as a
:class:`~worldgen.errors.ConfigError`.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
import json
import logging
import math

from .biomes import Biome, BiomeThresholds, COARSE_THRESHOLDS, THRESHOLD_PRESETS
from .errors import ConfigError

logger = logging.getLogger(__name__)

RGBA = Tuple[int, int, int, int]

MIN_MINIMAP_SIZE = 8


@dataclass(frozen=True)
class NoiseConfig:
    noise_scale: float = 0.15
    octaves: int = 4
    persistence: float = 0.5
    lacunarity: float = 2.0
    offset_x: float = 0.0
    offset_z: float = 0.0


@dataclass(frozen=True)
class HeightConfig:
    noise: NoiseConfig = field(default_factory=NoiseConfig)
    min_height: int = 0
    max_height: int = 10


@dataclass(frozen=True)
class MinimapConfig:
    enabled: bool = True
    size: int = 512
    file_name: str = "minimap.png"
    min_radius: int = 3
    density_factor: float = 0.6
    background: RGBA = (0, 0, 0, 255)
    # None means the renderer's default palette
    colors: Optional[Dict[Biome, RGBA]] = None


@dataclass(frozen=True)
class BuildConfig:
    grid_radius: int = 3
    tile_size: float = 1.73
    radius_multiplier: float = 0.9
    origin: Tuple[float, float] = (0.0, 0.0)
    seed: Optional[int] = None
    height: HeightConfig = field(default_factory=HeightConfig)
    thresholds: BiomeThresholds = COARSE_THRESHOLDS
    minimap: MinimapConfig = field(default_factory=MinimapConfig)

    def problems(self) -> List[str]:
        """Return a human readable list of everything wrong with this config."""
        out = []
        if self.grid_radius <= 0:
            out.append(f"grid_radius must be > 0 (got {self.grid_radius})")
        if not self.tile_size > 0:
            out.append(f"tile_size must be > 0 (got {self.tile_size})")
        if not self.radius_multiplier > 0:
            out.append(f"radius_multiplier must be > 0 (got {self.radius_multiplier})")
        if self.height.min_height >= self.height.max_height:
            out.append("min_height must be below max_height "
                       f"(got {self.height.min_height} >= {self.height.max_height})")
        noise = self.height.noise
        if noise.octaves < 1:
            out.append(f"octaves must be >= 1 (got {noise.octaves})")
        if not noise.noise_scale > 0:
            out.append(f"noise_scale must be > 0 (got {noise.noise_scale})")
        if self.minimap.enabled:
            if self.minimap.size < MIN_MINIMAP_SIZE:
                out.append(f"minimap size must be >= {MIN_MINIMAP_SIZE} "
                           f"(got {self.minimap.size})")
            if not self.minimap.file_name:
                out.append("minimap file_name is empty")
            if self.minimap.colors is not None:
                missing = [b.name.lower() for b in Biome if b not in self.minimap.colors]
                if missing:
                    out.append("minimap colors missing for " + ", ".join(missing))
        return out

    def validate(self) -> "BuildConfig":
        problems = self.problems()
        if problems:
            raise ConfigError(problems)
        return self

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "BuildConfig":
        d = cls()
        noise_d = _section(data, "noise")
        noise = NoiseConfig(
            noise_scale=_to_float(noise_d.get("noise_scale"), d.height.noise.noise_scale),
            octaves=_to_int(noise_d.get("octaves"), d.height.noise.octaves),
            persistence=_to_float(noise_d.get("persistence"), d.height.noise.persistence),
            lacunarity=_to_float(noise_d.get("lacunarity"), d.height.noise.lacunarity),
            offset_x=_to_float(noise_d.get("offset_x"), d.height.noise.offset_x),
            offset_z=_to_float(noise_d.get("offset_z"), d.height.noise.offset_z),
        )
        height = HeightConfig(
            noise=noise,
            min_height=_to_int(data.get("min_height"), d.height.min_height),
            max_height=_to_int(data.get("max_height"), d.height.max_height),
        )
        mm_d = _section(data, "minimap")
        minimap = MinimapConfig(
            enabled=_to_bool(mm_d.get("enabled"), d.minimap.enabled),
            size=_to_int(mm_d.get("size"), d.minimap.size),
            file_name=str(mm_d.get("file_name") or d.minimap.file_name),
            min_radius=_to_int(mm_d.get("min_radius"), d.minimap.min_radius),
            density_factor=_to_float(mm_d.get("density_factor"), d.minimap.density_factor),
            background=_to_rgba(mm_d.get("background"), d.minimap.background),
            colors=_parse_colors(mm_d.get("colors")),
        )
        origin = _to_pair(data.get("origin"), d.origin)
        seed = data.get("seed")
        return cls(
            grid_radius=_to_int(data.get("grid_radius"), d.grid_radius),
            tile_size=_to_float(data.get("tile_size"), d.tile_size),
            radius_multiplier=_to_float(data.get("radius_multiplier"), d.radius_multiplier),
            origin=origin,
            seed=None if seed is None else _to_int(seed, 0),
            height=height,
            thresholds=parse_thresholds(data.get("thresholds", "coarse")),
            minimap=minimap,
        )


def parse_thresholds(value: Union[str, Mapping[str, int], BiomeThresholds]) -> BiomeThresholds:
    """Accept a preset name, a ``{biome: upper}`` mapping or a table."""
    if isinstance(value, BiomeThresholds):
        return value
    if isinstance(value, str):
        try:
            return THRESHOLD_PRESETS[value.lower()]
        except KeyError:
            raise ConfigError([f"unknown threshold preset {value!r}; "
                               f"choose from {sorted(THRESHOLD_PRESETS)}"]) from None
    try:
        return BiomeThresholds.from_mapping(value)
    except (AttributeError, TypeError, ValueError) as exc:
        raise ConfigError([f"bad threshold table: {exc}"]) from None


def load_config(path: str) -> BuildConfig:
    """Read a JSON build config from ``path``."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError([f"{path}: {exc}"]) from exc
    if not isinstance(data, dict):
        raise ConfigError([f"{path}: expected a JSON object at top level"])
    return BuildConfig.from_mapping(data)


# --------------------------- coercion helpers ---------------------------------

def _to_int(value: Any, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    if isinstance(value, str):
        s = value.strip()
        if s and (s.isdigit() or (s[0] in {"+", "-"} and s[1:].isdigit())):
            return int(s)
    logger.warning("config: coercing %r to default %r", value, default)
    return default


def _to_float(value: Any, default: float) -> float:
    if value is None:
        return default
    if isinstance(value, (int, float, str)) and not isinstance(value, bool):
        try:
            f = float(value)
        except ValueError:
            f = math.nan
        if math.isfinite(f):
            return f
    logger.warning("config: coercing %r to default %r", value, default)
    return default


def _to_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        s = value.strip().lower()
        if s in {"true", "yes", "on", "1"}:
            return True
        if s in {"false", "no", "off", "0"}:
            return False
    logger.warning("config: coercing %r to default %r", value, default)
    return default


def _to_pair(value: Any, default: Tuple[float, float]) -> Tuple[float, float]:
    if value is None:
        return default
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return _to_float(value[0], default[0]), _to_float(value[1], default[1])
    logger.warning("config: coercing %r to default %r", value, default)
    return default


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError([f"{key!r} must be an object, got {type(value).__name__}"])
    return value


def _to_rgba(value: Any, default: RGBA) -> RGBA:
    if value is None:
        return default
    try:
        channels = [int(c) for c in value]
    except (TypeError, ValueError):
        logger.warning("config: coercing colour %r to default %r", value, default)
        return default
    if len(channels) == 3:
        channels.append(255)
    if len(channels) != 4 or any(c < 0 or c > 255 for c in channels):
        logger.warning("config: coercing colour %r to default %r", value, default)
        return default
    return tuple(channels)  # type: ignore[return-value]


def _parse_colors(value: Optional[Mapping[str, Any]]) -> Optional[Dict[Biome, RGBA]]:
    if not value:
        return None
    if not isinstance(value, Mapping):
        raise ConfigError([f"minimap colors must be an object, got {type(value).__name__}"])
    colors: Dict[Biome, RGBA] = {}
    for name, rgba in value.items():
        try:
            biome = Biome[str(name).upper()]
        except KeyError:
            raise ConfigError([f"unknown biome {name!r} in minimap colors"]) from None
        channels = _to_rgba(rgba, None)  # type: ignore[arg-type]
        if channels is None:
            raise ConfigError([f"bad colour for {name!r}: {rgba!r}"])
        colors[biome] = channels
    return colors
