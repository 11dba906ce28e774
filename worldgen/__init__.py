# worldgen/__init__.py
# Package init for hex board generation modules

from .hexgrid import (
    HexCoordinate, axial_to_world, axial_diamond, enumerate_within_radius,
    hex_distance, hex_corners, SQRT3
)
from .noise import perlin2, seed_offset
from .biomes import (
    Biome, BiomeThresholds, classify, COARSE_THRESHOLDS, STRETCHED_THRESHOLDS,
    THRESHOLD_PRESETS
)
from .config import BuildConfig, HeightConfig, MinimapConfig, NoiseConfig, load_config
from .errors import WorldgenError, ConfigError, DuplicateTileError, MinimapWriteError
from .heightfield import sample_height
from .tiles import Tile, TileRegistry
from .worldgen import (
    LevelBuilder,
    BuildResult,
    FileImageWriter,
    TileVisualHost,
    build_level,
)

__all__ = [
    "HexCoordinate", "axial_to_world", "axial_diamond", "enumerate_within_radius",
    "hex_distance", "hex_corners", "SQRT3",
    "perlin2", "seed_offset",
    "Biome", "BiomeThresholds", "classify", "COARSE_THRESHOLDS", "STRETCHED_THRESHOLDS",
    "THRESHOLD_PRESETS",
    "BuildConfig", "HeightConfig", "MinimapConfig", "NoiseConfig", "load_config",
    "WorldgenError", "ConfigError", "DuplicateTileError", "MinimapWriteError",
    "sample_height",
    "Tile", "TileRegistry",
    "LevelBuilder", "BuildResult", "FileImageWriter", "TileVisualHost", "build_level",
]
