from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path

import lazerlink.logging
import lazerlink.paths
import lazerlink.settings
import lazerlink.utils
from lazerlink.constants.export_formats import ExportFormat
from lazerlink.constants.link_modes import LinkMode
from lazerlink.context import Context
from lazerlink.context import Library
from lazerlink.context import prepare_output_path
from lazerlink.errors import LazerLinkError
from lazerlink.errors import SetupError
from lazerlink.errors import UsageError
from lazerlink.logging import Ansi
from lazerlink.logging import log
from lazerlink.objects.beatmap import Beatmap
from lazerlink.repositories import catalog as catalog_repo
from lazerlink.repositories.catalog import Catalog
from lazerlink.usecases import beatmaps as beatmaps_usecases
from lazerlink.usecases import diff as diff_usecases
from lazerlink.usecases import exports as exports_usecases
from lazerlink.usecases import projection as projection_usecases
from lazerlink.usecases import replays as replays_usecases
from lazerlink.usecases import validation as validation_usecases


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazerlink",
        description="Expose an osu!lazer library as one folder per beatmap set",
    )

    parser.add_argument("-d", "--dir", type=Path, help="path to lazer directory")
    parser.add_argument("-o", "--out", type=Path, help="path to output directory")
    parser.add_argument(
        "-C",
        "--catalog",
        type=Path,
        help="catalog snapshot (json or binary export) of the library",
    )
    parser.add_argument("-r", "--replay", type=Path, help="path to replay file")
    parser.add_argument(
        "-c",
        "--copy",
        action="store_true",
        help="copy instead of symlinks",
    )
    parser.add_argument("-a", "--all", action="store_true", help="symlink all beatmaps")
    parser.add_argument(
        "-v",
        "--validate",
        action="store_true",
        help="validate symlinks in output directory",
    )
    parser.add_argument("-m", "--md5", help="beatmap md5hash")
    parser.add_argument("-i", "--id", type=int, default=0, help="beatmap online id (not beatset)")
    parser.add_argument(
        "--diff",
        type=Path,
        metavar="REFERENCE",
        help="symlink only the sets missing from this reference catalog",
    )
    parser.add_argument(
        "-e",
        "--export",
        type=ExportFormat,
        choices=list(ExportFormat),
        help="export the catalog in this format",
    )
    parser.add_argument(
        "-f",
        "--export-path",
        type=Path,
        help="file to export to (stdout if omitted)",
    )
    parser.add_argument("--debug", action="store_true")
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {lazerlink.settings.VERSION}",
    )

    return parser


def wants_links(args: argparse.Namespace) -> bool:
    return bool(args.diff or args.all or args.md5 or args.replay or args.id)


def find_beatmap(catalog: Catalog, args: argparse.Namespace) -> Beatmap:
    if args.md5 or args.replay:
        md5 = args.md5 or replays_usecases.read_beatmap_md5(args.replay)
        return beatmaps_usecases.fetch_by_md5(catalog, md5)

    return beatmaps_usecases.fetch_by_id(catalog, args.id)


def run(args: argparse.Namespace) -> int:
    mode = LinkMode.COPY if args.copy else LinkMode.LINK

    if not (args.validate or args.export or wants_links(args)):
        raise UsageError("Nothing to do; see --help.")

    if (args.validate or wants_links(args)) and args.out is None:
        raise UsageError("An output directory (--out) is required.")

    lazer_path = args.dir or lazerlink.paths.lazer_path()
    if lazer_path is None:
        raise SetupError("Could not find the osu!lazer directory; pass --dir.")

    library = Library.open(lazer_path)

    # load & look up everything before the output tree is touched
    ctx = None
    if args.export or wants_links(args):
        catalog_path = args.catalog or lazerlink.settings.CATALOG_PATH
        if catalog_path is None:
            raise SetupError("No catalog snapshot given; pass --catalog.")

        ctx = Context(library=library, catalog=catalog_repo.load(catalog_path))

    reference = catalog_repo.load(args.diff) if args.diff else None

    beatmap = None
    if ctx is not None and wants_links(args) and not (args.diff or args.all):
        beatmap = find_beatmap(ctx.catalog, args)

    output_path = None
    if args.validate or wants_links(args):
        output_path = prepare_output_path(args.out)

    lazerlink.utils.display_startup_dialog(mode)

    if args.validate:
        assert output_path is not None
        validation_usecases.validate(output_path)

    if ctx is None:
        return 0

    if args.export:
        exports_usecases.export_catalog(ctx.catalog, args.export, args.export_path)

    if not wants_links(args):
        return 0

    assert output_path is not None

    if reference is not None:
        report = diff_usecases.materialize_difference(ctx, reference, output_path, mode)
        return 1 if report.failed else 0

    if args.all:
        report = projection_usecases.materialize_all(ctx, output_path, mode)
        return 1 if report.failed else 0

    assert beatmap is not None

    if projection_usecases.materialize_beatmap(ctx, beatmap, output_path, mode):
        log(f"Materialized {beatmap.full_name} into {output_path}", Ansi.LGREEN)
    else:
        log(f"{beatmap.full_name} is already present in {output_path}", Ansi.GRAY)

    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.debug:
        lazerlink.settings.DEBUG = True

    lazerlink.logging.configure_logging()

    try:
        return run(args)
    except LazerLinkError as exc:
        error = exc.as_error()
        log(f"{error.error_code}: {error.user_feedback}", Ansi.LRED)
        return 1
    except OSError as exc:
        log(f"I/O error: {exc}", Ansi.LRED)
        return 1
