import io
import logging

import numpy as np
import pytest
from PIL import Image

import worldgen.worldgen as wg
from render.render_minimap import BIOME_COLORS
from worldgen import (
    BuildConfig, ConfigError, DuplicateTileError, FileImageWriter, LevelBuilder,
    MinimapConfig, MinimapWriteError, build_level,
)
from worldgen.biomes import Biome


class MemoryWriter:
    def __init__(self):
        self.files = {}

    def __call__(self, data, file_name):
        self.files[file_name] = data
        return "mem://" + file_name


class RecordingHost:
    def __init__(self):
        self.created = []
        self.disposed = []

    def create_visual(self, tile):
        handle = ("visual", tile.q, tile.r, len(self.created))
        self.created.append(handle)
        return handle

    def dispose_visual(self, handle):
        self.disposed.append(handle)


def _config(**kw):
    minimap = kw.pop("minimap", MinimapConfig(size=64))
    return BuildConfig(minimap=minimap, **kw)


def test_radius_one_scenario():
    writer = MemoryWriter()
    builder = LevelBuilder(_config(grid_radius=1, tile_size=1.0), image_writer=writer)
    result = builder.build_level(seed=424242)
    assert result.tile_count == builder.get_tile_count() == 1
    assert [t.coordinate for t in builder.get_all_tiles()] == [(0, 0)]
    assert result.minimap_path == "mem://minimap.png"

    img = Image.open(io.BytesIO(writer.files["minimap.png"])).convert("RGBA")
    assert img.size == (64, 64)
    tile = builder.get_tile_at((0, 0))
    colors = set(img.getdata())
    assert BIOME_COLORS[tile.biome] in colors
    assert colors <= {BIOME_COLORS[tile.biome], (0, 0, 0, 255)}


def test_same_seed_same_board():
    a, _ = build_level(_config(minimap=MinimapConfig(enabled=False)), seed=77)
    b, _ = build_level(_config(minimap=MinimapConfig(enabled=False)), seed=77)
    heights_a = [(t.coordinate, t.height, t.biome) for t in a.get_all_tiles()]
    heights_b = [(t.coordinate, t.height, t.biome) for t in b.get_all_tiles()]
    assert heights_a == heights_b
    c, _ = build_level(_config(minimap=MinimapConfig(enabled=False)), seed=78)
    assert heights_a != [(t.coordinate, t.height, t.biome) for t in c.get_all_tiles()]


def test_rebuild_clears_and_disposes_visuals():
    host = RecordingHost()
    builder = LevelBuilder(_config(grid_radius=3, minimap=MinimapConfig(enabled=False)), host=host)
    first = builder.build_level(seed=1)
    handles = [t.visual_handle for t in builder.get_all_tiles()]
    assert handles == host.created
    assert host.disposed == []

    second = builder.build_level(seed=2)
    assert host.disposed == handles
    assert first.tile_count == second.tile_count == builder.get_tile_count()
    assert len({t.coordinate for t in builder.get_all_tiles()}) == builder.get_tile_count()


def test_query_surface():
    builder, result = build_level(_config(grid_radius=4, minimap=MinimapConfig(enabled=False)), seed=9)
    tiles = builder.get_all_tiles()
    assert [t.coordinate for t in tiles] == sorted(t.coordinate for t in tiles)
    for biome in Biome:
        assert len(builder.get_tiles_by_biome(biome)) == result.biome_counts.get(biome, 0)
    assert builder.get_tile_at((99, 99)) is None
    assert all(t.world_position[1] == 0.0 for t in tiles)


def test_invalid_config_leaves_registry_untouched():
    builder, _ = build_level(_config(minimap=MinimapConfig(enabled=False)), seed=5)
    before = builder.get_tile_count()
    builder.config = BuildConfig(grid_radius=0, tile_size=-1.0)
    with pytest.raises(ConfigError) as exc:
        builder.build_level(seed=5)
    assert len(exc.value.problems) == 2
    assert builder.get_tile_count() == before


def test_duplicate_enumeration_aborts_build(monkeypatch):
    monkeypatch.setattr(wg, "enumerate_within_radius",
                        lambda *a, **k: [(0, 0), (1, 0), (0, 0)])
    builder = LevelBuilder(_config(minimap=MinimapConfig(enabled=False)))
    with pytest.raises(DuplicateTileError):
        builder.build_level(seed=3)
    assert builder.get_tile_count() == 0


def test_write_failure_keeps_tiles():
    def broken(data, file_name):
        raise OSError("disk full")

    builder = LevelBuilder(_config(), image_writer=broken)
    with pytest.raises(MinimapWriteError):
        builder.build_level(seed=11)
    assert builder.get_tile_count() > 0


def test_regenerate_minimap_without_tiles_warns(caplog):
    builder = LevelBuilder(_config())
    with caplog.at_level(logging.WARNING):
        assert builder.regenerate_minimap() is None
    assert "Build level first" in caplog.text


def test_file_writer(tmp_path):
    builder = LevelBuilder(_config(), image_writer=FileImageWriter(str(tmp_path / "out")))
    result = builder.build_level(seed=123)
    assert (tmp_path / "out" / "minimap.png").exists()
    assert result.minimap_path.endswith("minimap.png")

    path = builder.regenerate_minimap("again.png")
    img = Image.open(path)
    assert img.size == (64, 64)
    assert np.asarray(img.convert("RGBA")).shape == (64, 64, 4)


def test_seed_drawn_when_missing():
    builder = LevelBuilder(_config(minimap=MinimapConfig(enabled=False)))
    result = builder.build_level()
    assert isinstance(result.seed, int)
    assert builder.seed == result.seed
    assert result.summary()["tiles"] == builder.get_tile_count()


def test_config_seed_used():
    builder = LevelBuilder(_config(seed=31337, minimap=MinimapConfig(enabled=False)))
    assert builder.build_level().seed == 31337


def test_max_ring_reported_in_summary():
    builder, result = build_level(_config(grid_radius=4, tile_size=1.0,
                                          minimap=MinimapConfig(enabled=False)), seed=5)
    assert result.tile_count == 19
    assert result.max_ring == builder.max_ring() == 2
    assert result.summary()["max_ring"] == 2

    _, single = build_level(_config(grid_radius=1, tile_size=1.0,
                                    minimap=MinimapConfig(enabled=False)), seed=5)
    assert single.max_ring == 0
    assert LevelBuilder(_config()).max_ring() == 0
