# render/__init__.py
# Package init for rendering modules

from .render_minimap import (
    BIOME_COLORS, rasterize_minimap, render_minimap, encode_png, project_tiles
)

__all__ = ["BIOME_COLORS", "rasterize_minimap", "render_minimap", "encode_png",
           "project_tiles"]
