# worldgen.py - one-shot pipeline: clear, enumerate, populate, draw the minimap
from __future__ import annotations

import logging
import os
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple

from .biomes import Biome
from .config import BuildConfig
from .errors import DuplicateTileError, MinimapWriteError
from .hexgrid import HexCoordinate, axial_to_world, enumerate_within_radius, hex_distance
from .tiles import Tile, TileRegistry

logger = logging.getLogger(__name__)


class TileVisualHost(Protocol):
    """Whatever shows tiles to a user. Handles are opaque to the pipeline."""

    def create_visual(self, tile: Tile) -> Any: ...

    def dispose_visual(self, handle: Any) -> None: ...


class ImageWriter(Protocol):
    def __call__(self, data: bytes, file_name: str) -> str: ...


class FileImageWriter:
    """Write encoded images under ``directory``; returns the written path."""

    def __init__(self, directory: str = "."):
        self.directory = directory

    def __call__(self, data: bytes, file_name: str) -> str:
        path = os.path.join(self.directory, file_name)
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)
        return path


@dataclass
class BuildResult:
    seed: int
    tile_count: int
    biome_counts: Dict[Biome, int] = field(default_factory=dict)
    # hex rings out from the centre cell that the circular trim kept
    max_ring: int = 0
    minimap_path: Optional[str] = None

    def summary(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "tiles": self.tile_count,
            "max_ring": self.max_ring,
            "biomes": {b.name.lower(): n for b, n in sorted(self.biome_counts.items())},
            "minimap": self.minimap_path,
        }


def resolve_seed(seed: Optional[int]) -> int:
    """Return ``seed`` or draw one from system entropy."""
    if seed is not None:
        return int(seed)
    drawn = random.SystemRandom().randrange(2 ** 31)
    logger.info("no seed given; drew %d", drawn)
    return drawn


def tile_world_position(coord: HexCoordinate, config: BuildConfig) -> Tuple[float, float, float]:
    q, r = coord
    x, z = axial_to_world(q, r, config.tile_size, config.origin)
    return x, 0.0, z


class LevelBuilder:
    """Drives a build and exposes the read-only query surface afterwards.

    A builder is not reentrant: each :meth:`build_level` first clears the
    registry (releasing host visuals) and then repopulates it in grid
    enumeration order.
    """

    def __init__(self, config: Optional[BuildConfig] = None,
                 registry: Optional[TileRegistry] = None,
                 host: Optional[TileVisualHost] = None,
                 image_writer: Optional[ImageWriter] = None):
        self.config = config or BuildConfig()
        self.registry = registry if registry is not None else TileRegistry(self.config.thresholds)
        self.host = host
        self.image_writer = image_writer or FileImageWriter()
        self.seed: Optional[int] = None

    # ------------------------------------------------------------------ build
    def build_level(self, seed: Optional[int] = None) -> BuildResult:
        cfg = self.config.validate()
        seed = resolve_seed(seed if seed is not None else cfg.seed)
        logger.info("building board: radius=%d tile_size=%.3f seed=%d",
                    cfg.grid_radius, cfg.tile_size, seed)

        self.registry.thresholds = cfg.thresholds
        self.registry.clear(self.host.dispose_visual if self.host else None)
        self.seed = seed
        self._create_grid(cfg, seed)

        result = BuildResult(seed=seed, tile_count=self.registry.count(),
                             biome_counts=self.registry.biome_counts(),
                             max_ring=self.max_ring())
        logger.info("built %d tiles", result.tile_count)

        if cfg.minimap.enabled:
            result.minimap_path = self.regenerate_minimap()
        return result

    def _create_grid(self, cfg: BuildConfig, seed: int) -> None:
        coords = enumerate_within_radius(cfg.grid_radius, cfg.tile_size,
                                         cfg.origin, cfg.radius_multiplier)
        try:
            for coord in coords:
                self.registry.create_tile(coord, tile_world_position(coord, cfg),
                                          cfg.height, seed)
        except DuplicateTileError:
            logger.error("duplicate coordinate during enumeration; discarding build")
            self.registry.clear()
            raise

        if self.host is not None:
            for tile in self.registry:
                tile.visual_handle = self.host.create_visual(tile)

    # ---------------------------------------------------------------- minimap
    def regenerate_minimap(self, file_name: Optional[str] = None) -> Optional[str]:
        """Rasterize the current registry and hand the PNG to the writer.

        Returns the written path, or None when there is nothing to draw.
        """
        from render.render_minimap import encode_png, rasterize_minimap

        if self.registry.count() == 0:
            logger.warning("No tiles to generate minimap from. Build level first.")
            return None
        mm = self.config.minimap
        pixels = rasterize_minimap(self.registry.tiles(), mm.size, colors=mm.colors,
                                   background=mm.background, min_radius=mm.min_radius,
                                   density_factor=mm.density_factor)
        if pixels is None:
            return None
        file_name = file_name or mm.file_name
        try:
            path = self.image_writer(encode_png(pixels), file_name)
        except OSError as exc:
            raise MinimapWriteError(file_name, exc) from exc
        logger.info("Minimap saved to: %s", path)
        return path

    # ------------------------------------------------------------------ query
    def get_all_tiles(self) -> List[Tile]:
        return self.registry.tiles()

    def get_tile_at(self, coordinate: Tuple[int, int]) -> Optional[Tile]:
        return self.registry.get_tile_at(coordinate)

    def get_tiles_by_biome(self, biome: Biome) -> List[Tile]:
        return self.registry.get_tiles_by_biome(biome)

    def get_tile_count(self) -> int:
        return self.registry.count()

    def max_ring(self) -> int:
        """Largest hex distance from the centre cell among the current tiles."""
        return max((hex_distance(t.coordinate, (0, 0)) for t in self.registry), default=0)


def build_level(config: Optional[BuildConfig] = None, seed: Optional[int] = None,
                **kwargs) -> Tuple[LevelBuilder, BuildResult]:
    """Convenience wrapper: make a builder, run one build, return both."""
    builder = LevelBuilder(config, **kwargs)
    return builder, builder.build_level(seed)
