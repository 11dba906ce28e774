from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Optional, Tuple


class Biome(IntEnum):
    WATER = 0
    BEACH = 1
    GRASSLAND = 2
    FOREST = 3
    HILLS = 4
    MOUNTAIN = 5


@dataclass(frozen=True)
class BiomeThresholds:
    """Inclusive upper height bound for each biome except the last.

    ``bounds[i]`` is the highest height still classified as ``Biome(i)``.
    Heights at or below the first bound are water and everything above the
    last bound is mountain, so every integer maps to exactly one biome.
    """
    bounds: Tuple[int, int, int, int, int]

    def __post_init__(self) -> None:
        bounds = tuple(int(b) for b in self.bounds)
        if len(bounds) != len(Biome) - 1:
            raise ValueError(
                f"expected {len(Biome) - 1} bounds, got {len(bounds)}")
        if any(lo >= hi for lo, hi in zip(bounds, bounds[1:])):
            raise ValueError(f"bounds must be strictly increasing: {bounds}")
        object.__setattr__(self, "bounds", bounds)

    @classmethod
    def from_mapping(cls, mapping: Dict[str, int]) -> "BiomeThresholds":
        """Build from ``{"water": 1, "beach": 2, ...}`` (case-insensitive)."""
        lowered = {str(k).lower(): v for k, v in mapping.items()}
        try:
            bounds = tuple(lowered[b.name.lower()] for b in list(Biome)[:-1])
        except KeyError as exc:
            raise ValueError(f"missing threshold for {exc.args[0]}") from None
        return cls(bounds)

    def classify(self, height: int) -> Biome:
        for biome, upper in zip(Biome, self.bounds):
            if height <= upper:
                return biome
        return Biome.MOUNTAIN

    def range_of(self, biome: Biome) -> Tuple[Optional[int], Optional[int]]:
        """Inclusive (low, high) heights owned by ``biome``; None is unbounded."""
        i = int(biome)
        low = None if i == 0 else self.bounds[i - 1] + 1
        high = None if i == len(self.bounds) else self.bounds[i]
        return low, high


# 0-10 heights
COARSE_THRESHOLDS = BiomeThresholds((1, 2, 4, 6, 8))
# 0-20+ heights
STRETCHED_THRESHOLDS = BiomeThresholds((8, 10, 13, 16, 19))

THRESHOLD_PRESETS: Dict[str, BiomeThresholds] = {
    "coarse": COARSE_THRESHOLDS,
    "stretched": STRETCHED_THRESHOLDS,
}


def classify(height: int, thresholds: BiomeThresholds = COARSE_THRESHOLDS) -> Biome:
    """Map an integer height to its biome under ``thresholds``."""
    return thresholds.classify(height)
