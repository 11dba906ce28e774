import argparse
import dataclasses
import json
import logging
import sys

from worldgen import Biome, BuildConfig, FileImageWriter, LevelBuilder, load_config
from worldgen.config import parse_thresholds
from worldgen.errors import WorldgenError


def config_from_args(args) -> BuildConfig:
    cfg = load_config(args.config) if args.config else BuildConfig()
    top = {}
    if args.radius is not None:
        top["grid_radius"] = args.radius
    if args.tile_size is not None:
        top["tile_size"] = args.tile_size
    if args.radius_multiplier is not None:
        top["radius_multiplier"] = args.radius_multiplier
    if args.thresholds is not None:
        top["thresholds"] = parse_thresholds(args.thresholds)

    noise = {}
    for name in ("noise_scale", "octaves", "persistence", "lacunarity"):
        value = getattr(args, name)
        if value is not None:
            noise[name] = value
    height = {}
    if args.min_height is not None:
        height["min_height"] = args.min_height
    if args.max_height is not None:
        height["max_height"] = args.max_height
    if noise or height:
        top["height"] = dataclasses.replace(
            cfg.height, noise=dataclasses.replace(cfg.height.noise, **noise), **height)

    minimap = {}
    if getattr(args, "no_minimap", False):
        minimap["enabled"] = False
    if getattr(args, "minimap_size", None) is not None:
        minimap["size"] = args.minimap_size
    if getattr(args, "minimap", None):
        minimap["file_name"] = args.minimap
    if minimap:
        top["minimap"] = dataclasses.replace(cfg.minimap, **minimap)
    return dataclasses.replace(cfg, **top)


def cmd_build(args):
    cfg = config_from_args(args)
    builder = LevelBuilder(cfg, image_writer=FileImageWriter(args.out_dir))
    result = builder.build_level(seed=args.seed)
    print(json.dumps(result.summary(), indent=2))


def cmd_tiles(args):
    cfg = config_from_args(args)
    cfg = dataclasses.replace(cfg, minimap=dataclasses.replace(cfg.minimap, enabled=False))
    builder = LevelBuilder(cfg)
    builder.build_level(seed=args.seed)
    if args.biome:
        tiles = builder.get_tiles_by_biome(Biome[args.biome.upper()])
    else:
        tiles = builder.get_all_tiles()
    for t in tiles:
        x, _, z = t.world_position
        print(f"{t.q:4d} {t.r:4d}  x={x:8.3f} z={z:8.3f}  h={t.height:3d}  {t.biome.name.lower()}")
    print(f"{len(tiles)} of {builder.get_tile_count()} tiles")


def add_build_options(ap):
    ap.add_argument("--config", default=None, help="JSON build config")
    ap.add_argument("--seed", type=int, default=None, help="Terrain seed (random if omitted)")
    ap.add_argument("--radius", type=int, default=None, help="Grid radius in hexes")
    ap.add_argument("--tile-size", type=float, default=None)
    ap.add_argument("--radius-multiplier", type=float, default=None,
                    help="Circular trim as a fraction of radius * tile size")
    ap.add_argument("--min-height", type=int, default=None)
    ap.add_argument("--max-height", type=int, default=None)
    ap.add_argument("--noise-scale", type=float, default=None)
    ap.add_argument("--octaves", type=int, default=None)
    ap.add_argument("--persistence", type=float, default=None)
    ap.add_argument("--lacunarity", type=float, default=None)
    ap.add_argument("--thresholds", default=None,
                    help="Biome threshold preset: coarse (0-10) or stretched (0-20+)")


def main(argv=None):
    ap = argparse.ArgumentParser(description="Hex terrain board generator")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = ap.add_subparsers()

    ap_build = sub.add_parser("build", help="Generate a board and its minimap")
    add_build_options(ap_build)
    ap_build.add_argument("--out-dir", default=".", help="Where the minimap is written")
    ap_build.add_argument("--minimap", default=None, help="Minimap file name")
    ap_build.add_argument("--minimap-size", type=int, default=None)
    ap_build.add_argument("--no-minimap", action="store_true")
    ap_build.set_defaults(func=cmd_build)

    ap_tiles = sub.add_parser("tiles", help="Generate a board and list its tiles")
    add_build_options(ap_tiles)
    ap_tiles.add_argument("--biome", choices=[b.name.lower() for b in Biome], default=None)
    ap_tiles.set_defaults(func=cmd_tiles)

    args = ap.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")
    if not hasattr(args, "func"):
        ap.print_help()
        return 0
    try:
        args.func(args)
    except WorldgenError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
