# render_minimap.py - square top-down minimap, one filled hex per tile
from __future__ import annotations
from dataclasses import dataclass
from io import BytesIO
from typing import Dict, List, Mapping, Optional, Sequence, Tuple
import logging
import math

import numpy as np
from PIL import Image

from worldgen.biomes import Biome
from worldgen.hexgrid import hex_corners

logger = logging.getLogger(__name__)

RGBA = Tuple[int, int, int, int]


def _rgba(r: float, g: float, b: float, a: float = 1.0) -> RGBA:
    # float channel -> byte, rounding half up
    return tuple(int(math.floor(c * 255 + 0.5)) for c in (r, g, b, a))  # type: ignore[return-value]


BIOME_COLORS: Dict[Biome, RGBA] = {
    Biome.WATER: _rgba(0.2, 0.4, 0.8),       # Blue
    Biome.BEACH: _rgba(0.9, 0.8, 0.6),       # Sandy yellow
    Biome.GRASSLAND: _rgba(0.3, 0.7, 0.2),   # Green
    Biome.FOREST: _rgba(0.1, 0.4, 0.1),      # Dark green
    Biome.HILLS: _rgba(0.6, 0.5, 0.3),       # Brown
    Biome.MOUNTAIN: _rgba(0.7, 0.7, 0.7),    # Gray
}

BLACK: RGBA = (0, 0, 0, 255)
TRANSPARENT: RGBA = (0, 0, 0, 0)


@dataclass
class MinimapLayout:
    """Where each tile lands on the minimap."""
    size: int
    hex_radius: int
    centers: List[Tuple[int, int]]
    bounds: Tuple[float, float, float, float]  # min_x, min_z, max_x, max_z
    scale: float


def project_tiles(tiles: Sequence, size: int, min_radius: int = 3,
                  density_factor: float = 0.6) -> Optional[MinimapLayout]:
    """Map tile world (x, z) positions to pixel centres and a hex radius.

    Returns None for an empty tile sequence.
    """
    if not tiles:
        return None
    xs = [t.world_position[0] for t in tiles]
    zs = [t.world_position[2] for t in tiles]
    min_x, max_x = min(xs), max(xs)
    min_z, max_z = min(zs), max(zs)
    scale = max(max_x - min_x, max_z - min_z)

    # avg spacing / scale == 1 / sqrt(n); written this way it stays defined
    # for a single tile where scale is 0
    hex_radius = max(min_radius, int(math.floor(size * density_factor / math.sqrt(len(tiles)))))
    hex_radius = min(hex_radius, (size - 1) // 2)

    lo, hi = hex_radius, size - hex_radius - 1
    centers = []
    for x, z in zip(xs, zs):
        nx = (x - min_x) / scale if scale > 0 else 0.5
        nz = (z - min_z) / scale if scale > 0 else 0.5
        cx = int(math.floor(nx * (size - 1)))
        cy = int(math.floor(nz * (size - 1)))
        centers.append((min(max(cx, lo), hi), min(max(cy, lo), hi)))

    return MinimapLayout(size, hex_radius, centers, (min_x, min_z, max_x, max_z), scale)


def fill_hexagon(pixels: np.ndarray, cx: int, cy: int, radius: int,
                 color: Sequence[int]) -> int:
    """Paint the hexagon around (cx, cy) into ``pixels`` [y, x, rgba].

    Integer pixel positions inside the polygon (even-odd rule) are set to
    ``color``.  Returns the number of pixels written.
    """
    size_y, size_x = pixels.shape[:2]
    verts = hex_corners(cx, cy, radius, start_deg=-30.0)
    vx = [v[0] for v in verts]
    vy = [v[1] for v in verts]
    min_x = max(0, int(math.floor(min(vx))))
    max_x = min(size_x - 1, int(math.ceil(max(vx))))
    min_y = max(0, int(math.floor(min(vy))))
    max_y = min(size_y - 1, int(math.ceil(max(vy))))
    if min_x > max_x or min_y > max_y:
        return 0

    ys, xs = np.mgrid[min_y:max_y + 1, min_x:max_x + 1].astype(np.float64)
    inside = np.zeros(xs.shape, dtype=bool)
    j = len(verts) - 1
    for i in range(len(verts)):
        xi, yi = verts[i]
        xj, yj = verts[j]
        if yi != yj:
            crosses = (yi > ys) != (yj > ys)
            x_cross = (xj - xi) * (ys - yi) / (yj - yi) + xi
            inside ^= crosses & (xs < x_cross)
        j = i

    pixels[min_y:max_y + 1, min_x:max_x + 1][inside] = color
    return int(inside.sum())


def rasterize_minimap(tiles: Sequence, size: int,
                      colors: Optional[Mapping[Biome, RGBA]] = None,
                      background: RGBA = BLACK, min_radius: int = 3,
                      density_factor: float = 0.6) -> Optional[np.ndarray]:
    """Return a ``(size, size, 4)`` uint8 RGBA buffer, or None if no tiles.

    Tiles are drawn in sequence order so later ones cover earlier overlaps.
    """
    tiles = list(tiles)
    if not tiles:
        logger.warning("No tiles provided for minimap generation!")
        return None
    colors = BIOME_COLORS if colors is None else colors

    logger.info("Generating minimap with %d tiles, size: %dx%d", len(tiles), size, size)
    layout = project_tiles(tiles, size, min_radius=min_radius,
                           density_factor=density_factor)
    min_x, min_z, max_x, max_z = layout.bounds
    logger.debug("Bounds: min(%.2f, %.2f) max(%.2f, %.2f) scale %.2f",
                  min_x, min_z, max_x, max_z, layout.scale)
    logger.debug("Hex radius: %d", layout.hex_radius)

    pixels = np.empty((size, size, 4), dtype=np.uint8)
    pixels[:, :] = background
    for tile, (cx, cy) in zip(tiles, layout.centers):
        fill_hexagon(pixels, cx, cy, layout.hex_radius, colors[tile.biome])

    if logger.isEnabledFor(logging.DEBUG):
        counts: Dict[Biome, int] = {}
        for t in tiles:
            counts[t.biome] = counts.get(t.biome, 0) + 1
        for biome, n in sorted(counts.items()):
            logger.debug("Tile type %s: %d tiles", biome.name.lower(), n)
    return pixels


def to_image(pixels: np.ndarray) -> Image.Image:
    # row 0 holds the lowest z; flip so it ends up at the bottom of the image
    return Image.fromarray(np.ascontiguousarray(pixels[::-1]))


def encode_png(pixels: np.ndarray) -> bytes:
    buf = BytesIO()
    to_image(pixels).save(buf, format="PNG")
    return buf.getvalue()


def render_minimap(tiles: Sequence, size: int = 512, **kwargs) -> Optional[Image.Image]:
    """Rasterize ``tiles`` and wrap the result in a PIL image."""
    pixels = rasterize_minimap(tiles, size, **kwargs)
    if pixels is None:
        return None
    return to_image(pixels)
