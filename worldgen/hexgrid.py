# hexgrid.py - Flat-top hex axial math and helpers (Python 3.10+)
from __future__ import annotations
import math
from typing import Iterator, List, NamedTuple, Tuple

SQRT3 = math.sqrt(3.0)

Origin = Tuple[float, float]  # world (x, z) of the board centre


class HexCoordinate(NamedTuple):
    """Axial hex address. ``q`` is the column, ``r`` the skewed row."""
    q: int
    r: int


def axial_to_world(q: int, r: int, tile_size: float,
                   origin: Origin = (0.0, 0.0)) -> Tuple[float, float]:
    """Flat-top axial spacing -> world (x,z), offset by ``origin``."""
    x = tile_size * (3.0 / 2.0 * q)
    z = tile_size * (SQRT3 / 2.0 * q + SQRT3 * r)
    return origin[0] + x, origin[1] + z


def axial_diamond(grid_radius: int) -> Iterator[HexCoordinate]:
    """Every cell of the hex disk of ``grid_radius``, q ascending then r."""
    for q in range(-grid_radius, grid_radius + 1):
        r1 = max(-grid_radius, -q - grid_radius)
        r2 = min(grid_radius, -q + grid_radius)
        for r in range(r1, r2 + 1):
            yield HexCoordinate(q, r)


def enumerate_within_radius(grid_radius: int, tile_size: float,
                            origin: Origin = (0.0, 0.0),
                            radius_multiplier: float = 0.9) -> List[HexCoordinate]:
    """Hex disk trimmed to a circle for a rounder board edge.

    A cell is kept when its world position lies within
    ``grid_radius * tile_size * radius_multiplier`` of ``origin``.  Radius 0
    gives just the centre cell, a negative radius gives nothing.
    """
    max_radius = grid_radius * tile_size * radius_multiplier
    coords = []
    for coord in axial_diamond(grid_radius):
        x, z = axial_to_world(coord.q, coord.r, tile_size, origin)
        if math.hypot(x - origin[0], z - origin[1]) <= max_radius:
            coords.append(coord)
    return coords


def hex_distance(a: Tuple[int, int], b: Tuple[int, int]) -> int:
    """Calculate hexagonal distance between two axial coordinates."""
    q1, r1 = a
    q2, r2 = b
    return (abs(q1 - q2) + abs(q1 + r1 - q2 - r2) + abs(r1 - r2)) // 2


def hex_corners(cx: float, cy: float, radius: float,
                start_deg: float = -30.0) -> List[Tuple[float, float]]:
    """Six hexagon vertices around (cx, cy), 60 degrees apart."""
    points = []
    for i in range(6):
        angle = math.radians(start_deg + 60 * i)
        points.append((cx + radius * math.cos(angle), cy + radius * math.sin(angle)))
    return points
