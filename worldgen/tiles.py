# tiles.py - tile records and the registry that owns them during a build
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple
import logging

from .biomes import Biome, BiomeThresholds, COARSE_THRESHOLDS
from .config import HeightConfig
from .errors import DuplicateTileError
from .heightfield import sample_height
from .hexgrid import HexCoordinate

logger = logging.getLogger(__name__)

WorldPosition = Tuple[float, float, float]


@dataclass
class Tile:
    coordinate: HexCoordinate
    world_position: WorldPosition
    height: int
    thresholds: BiomeThresholds = field(default=COARSE_THRESHOLDS, repr=False, compare=False)
    # Opaque handle owned by the visual host; never inspected here
    visual_handle: Optional[Any] = field(default=None, repr=False, compare=False)
    biome: Biome = field(default=Biome.WATER, init=False)

    def __post_init__(self) -> None:
        self.coordinate = HexCoordinate(*self.coordinate)
        self.biome = self.thresholds.classify(self.height)

    def __setattr__(self, name, value):
        object.__setattr__(self, name, value)
        # Keep biome derived from height
        if name in ("height", "thresholds") and "thresholds" in self.__dict__ \
                and "height" in self.__dict__:
            object.__setattr__(self, "biome", self.thresholds.classify(self.height))

    @property
    def q(self) -> int:
        return self.coordinate.q

    @property
    def r(self) -> int:
        return self.coordinate.r


class TileRegistry:
    """Single source of truth for the tiles of the current build.

    Tiles are kept in insertion order, which is the enumeration order of the
    grid, so iteration and :meth:`get_tiles_by_biome` are deterministic.
    """

    def __init__(self, thresholds: BiomeThresholds = COARSE_THRESHOLDS):
        self.thresholds = thresholds
        self._tiles: Dict[HexCoordinate, Tile] = {}

    def clear(self, release: Optional[Callable[[Any], None]] = None) -> None:
        """Drop every tile, handing each visual handle to ``release`` first.

        Every handle is offered to ``release`` even when an earlier call
        raises. The registry ends up empty and the first error is re-raised
        afterwards.
        """
        released = 0
        first_error: Optional[Exception] = None
        if release is not None:
            for tile in self._tiles.values():
                if tile.visual_handle is None:
                    continue
                try:
                    release(tile.visual_handle)
                    released += 1
                except Exception as exc:
                    logger.error("failed to release visual for tile %s: %s",
                                 tuple(tile.coordinate), exc)
                    if first_error is None:
                        first_error = exc
                tile.visual_handle = None
        dropped = len(self._tiles)
        self._tiles.clear()
        logger.debug("cleared %d tiles (%d visuals released)", dropped, released)
        if first_error is not None:
            raise first_error

    def create_tile(self, coordinate: Tuple[int, int], world_position: WorldPosition,
                    height_config: HeightConfig, seed: int) -> Tile:
        coord = HexCoordinate(*coordinate)
        if coord in self._tiles:
            raise DuplicateTileError(coord)
        x, _, z = world_position
        height = sample_height(x, z, coord.q, coord.r, height_config, seed)
        tile = Tile(coord, tuple(world_position), height, thresholds=self.thresholds)
        self._tiles[coord] = tile
        return tile

    def get_tile_at(self, coordinate: Tuple[int, int]) -> Optional[Tile]:
        return self._tiles.get(HexCoordinate(*coordinate))

    def get_tiles_by_biome(self, biome: Biome) -> List[Tile]:
        return [t for t in self._tiles.values() if t.biome == biome]

    def tiles(self) -> List[Tile]:
        return list(self._tiles.values())

    def count(self) -> int:
        return len(self._tiles)

    def biome_counts(self) -> Dict[Biome, int]:
        counts: Dict[Biome, int] = {}
        for t in self._tiles.values():
            counts[t.biome] = counts.get(t.biome, 0) + 1
        return counts

    def __len__(self) -> int:
        return len(self._tiles)

    def __iter__(self) -> Iterator[Tile]:
        return iter(list(self._tiles.values()))

    def __contains__(self, coordinate) -> bool:
        return HexCoordinate(*coordinate) in self._tiles
