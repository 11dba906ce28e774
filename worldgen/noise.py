# noise.py - seeded 2D gradient noise for terrain heights
from __future__ import annotations
from functools import lru_cache
from typing import Tuple

import numpy as np

# Unit-ish gradient directions, picked by the low 3 bits of the hash.
_GRADIENTS = np.array([
    (1.0, 1.0), (-1.0, 1.0), (1.0, -1.0), (-1.0, -1.0),
    (1.0, 0.0), (-1.0, 0.0), (0.0, 1.0), (0.0, -1.0),
], dtype=np.float64)

SEED_OFFSET_RANGE = 10000.0


def _seed_state(seed: int) -> np.random.RandomState:
    # RandomState only accepts 32-bit seeds
    return np.random.RandomState(seed & 0xFFFFFFFF)


@lru_cache(maxsize=32)
def permutation_table(seed: int) -> np.ndarray:
    """Doubled 256-entry permutation for ``seed`` (read-only, cached)."""
    perm = _seed_state(seed).permutation(256).astype(np.int64)
    table = np.concatenate([perm, perm])
    table.setflags(write=False)
    return table


@lru_cache(maxsize=32)
def seed_offset(seed: int) -> Tuple[float, float]:
    """World-space (x, z) shift derived from ``seed`` alone."""
    rng = _seed_state(seed ^ 0x5F3759DF)
    ox, oz = rng.uniform(-SEED_OFFSET_RANGE, SEED_OFFSET_RANGE, size=2)
    return float(ox), float(oz)


def _fade(t: np.ndarray) -> np.ndarray:
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _lerp(a: np.ndarray, b: np.ndarray, t: np.ndarray) -> np.ndarray:
    return a + (b - a) * t


def _grad(h: np.ndarray, x: np.ndarray, y: np.ndarray) -> np.ndarray:
    g = _GRADIENTS[h & 7]
    return g[..., 0] * x + g[..., 1] * y


def perlin2(x, y, seed: int = 0) -> np.ndarray:
    """Classic Perlin-style gradient noise in 2D.

    ``x`` and ``y`` may be scalars or broadcastable arrays.  The result is a
    pure function of the inputs: the only randomness is the permutation table
    chosen by ``seed``.  Values fall roughly in ``[-1, 1]`` and are exactly 0
    on integer lattice points.
    """
    perm = permutation_table(seed)
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)

    x0 = np.floor(x)
    y0 = np.floor(y)
    xf = x - x0
    yf = y - y0
    xi = x0.astype(np.int64) & 255
    yi = y0.astype(np.int64) & 255

    aa = perm[perm[xi] + yi]
    ab = perm[perm[xi] + yi + 1]
    ba = perm[perm[xi + 1] + yi]
    bb = perm[perm[xi + 1] + yi + 1]

    u = _fade(xf)
    v = _fade(yf)
    x1 = _lerp(_grad(aa, xf, yf), _grad(ba, xf - 1.0, yf), u)
    x2 = _lerp(_grad(ab, xf, yf - 1.0), _grad(bb, xf - 1.0, yf - 1.0), u)
    return _lerp(x1, x2, v)
