# heightfield.py - per-cell integer heights from layered gradient noise
from __future__ import annotations

import math
from typing import Tuple

import numpy as np

from .config import HeightConfig, NoiseConfig
from .noise import perlin2, seed_offset

OCTAVE_EXPONENT = 1.1
FINAL_EXPONENT = 0.75
CELL_JITTER = 0.37


def cell_jitter(q: int, r: int) -> Tuple[float, float]:
    """Small (x, z) offset from an integer hash of the cell.

    Breaks up the axis-aligned symmetry that a hex lattice sampled on a
    square noise lattice otherwise shows.
    """
    h = ((q * 73856093) ^ (r * 19349663)) & 0xFFFF
    jx = (h & 0xFF) / 255.0 - 0.5
    jz = (h >> 8) / 255.0 - 0.5
    return jx * 2.0 * CELL_JITTER, jz * 2.0 * CELL_JITTER


def local_modifier(q: int, r: int) -> float:
    """Per-cell multiplier in [0.9, 1.1] from the cell's position mod 3."""
    return 1.0 + 0.05 * ((q % 3) + (r % 3)) - 0.1


def octave_weights(noise: NoiseConfig) -> Tuple[np.ndarray, np.ndarray]:
    """Return (frequencies, amplitudes) for every octave."""
    i = np.arange(noise.octaves, dtype=np.float64)
    freqs = noise.noise_scale * np.power(noise.lacunarity, i)
    amps = np.power(noise.persistence, i)
    return freqs, amps


def sample_normalized(world_x: float, world_z: float, q: int, r: int,
                      noise: NoiseConfig, seed: int) -> float:
    """Shaped noise value in [0,1] for one cell."""
    sx, sz = seed_offset(seed)
    jx, jz = cell_jitter(q, r)
    ox = noise.offset_x + sx + jx
    oz = noise.offset_z + sz + jz

    freqs, amps = octave_weights(noise)
    raw = perlin2((world_x + ox) * freqs, (world_z + oz) * freqs, seed)
    layer = np.clip((raw + 1.0) * 0.5 * local_modifier(q, r), 0.0, 1.0)
    total = float(np.sum(np.power(layer, OCTAVE_EXPONENT) * amps))

    max_amp = float(np.sum(amps))
    value = total / max_amp if max_amp > 0 else 0.0
    value = max(0.0, value) ** FINAL_EXPONENT
    return min(1.0, max(0.0, value))


def sample_height(world_x: float, world_z: float, q: int, r: int,
                  config: HeightConfig, seed: int) -> int:
    """Integer height in ``[config.min_height, config.max_height]``.

    Deterministic for a given ``(position, cell, config, seed)``; nothing
    outside the arguments is read.
    """
    value = sample_normalized(world_x, world_z, q, r, config.noise, seed)
    span = config.max_height - config.min_height
    return config.min_height + int(math.floor(value * span + 0.5))
