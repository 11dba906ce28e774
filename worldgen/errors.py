# errors.py - exceptions raised by the board build pipeline
from __future__ import annotations
from typing import Iterable


class WorldgenError(Exception):
    """Base class for every failure reported by a build."""


class ConfigError(WorldgenError):
    """Build configuration is unusable; raised before any tile is touched."""

    def __init__(self, problems: Iterable[str]):
        self.problems = list(problems)
        super().__init__("invalid build configuration: " + "; ".join(self.problems))


class DuplicateTileError(WorldgenError):
    """Enumeration produced the same coordinate twice within one build."""

    def __init__(self, coordinate):
        self.coordinate = coordinate
        super().__init__(f"tile {tuple(coordinate)} already exists in the registry")


class MinimapWriteError(WorldgenError):
    """The image writer could not persist the encoded minimap."""

    def __init__(self, file_name: str, cause: BaseException):
        self.file_name = file_name
        super().__init__(f"could not write minimap {file_name!r}: {cause}")
