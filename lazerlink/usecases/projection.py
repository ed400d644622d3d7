from __future__ import annotations

import os
import shutil
from collections.abc import Iterable
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

import lazerlink.settings
from lazerlink.constants.link_modes import LinkMode
from lazerlink.context import Context
from lazerlink.errors import BeatmapNotFoundError
from lazerlink.errors import LazerLinkError
from lazerlink.errors import SourceFileMissingError
from lazerlink.errors import UnsafeFilenameError
from lazerlink.logging import Ansi
from lazerlink.logging import log
from lazerlink.objects.beatmap import Beatmap
from lazerlink.objects.beatmap import BeatmapSet
from lazerlink.objects.beatmap import FileUsage


@dataclass
class ProjectionReport:
    created: list[int] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)
    failed: list[tuple[int, str]] = field(default_factory=list)

    def __str__(self) -> str:
        return (
            f"{len(self.created)} created, {len(self.skipped)} "
            f"already present, {len(self.failed)} failed"
        )


def usage_path(set_path: Path, usage: FileUsage) -> Path:
    """Return where `usage` lives under `set_path`.

    Filenames are joined verbatim, less any leading "/"; one that
    still leads outside of `set_path` (through "..") is rejected.
    """
    dst = set_path.joinpath(usage.filename.lstrip("/"))

    root = Path(os.path.normpath(set_path))
    normalized = Path(os.path.normpath(dst))
    if normalized == root or not normalized.is_relative_to(root):
        raise UnsafeFilenameError(
            f"Filename {usage.filename!r} leads outside of {set_path}.",
        )

    return normalized


def materialize(
    ctx: Context,
    beatmap_set: BeatmapSet,
    output_path: Path,
    mode: LinkMode = LinkMode.LINK,
) -> bool:
    """\
    Create `output_path/<online id>/` with a link (or copy)
    for every file the set uses.

    An existing set directory is never touched again, which makes
    this idempotent; pruning is left to `validation.validate`.
    A missing source blob fails the set without rolling back the
    files that were already created.

    Returns whether the set's directory was created.
    """
    set_path = output_path / beatmap_set.dirname

    if set_path.exists():
        return False

    # checked up front, so a bad filename fails the set before it is created
    destinations = [(usage, usage_path(set_path, usage)) for usage in beatmap_set.files]

    set_path.mkdir()

    for usage, dst in destinations:
        src = ctx.library.resolve(usage.file.hash)

        if not src.is_file():
            raise SourceFileMissingError(
                f"{src} ({beatmap_set.dirname}/{usage.filename}) "
                "is missing from the library.",
            )

        if lazerlink.settings.DEBUG:
            log(f"{src} -> {beatmap_set.dirname}/{usage.filename}", Ansi.LMAGENTA)

        # filenames may place the file in a subdirectory
        dst.parent.mkdir(parents=True, exist_ok=True)

        if mode == LinkMode.COPY:
            shutil.copyfile(src, dst)
        else:
            dst.symlink_to(src)

    return True


def materialize_many(
    ctx: Context,
    beatmap_sets: Iterable[BeatmapSet],
    output_path: Path,
    mode: LinkMode = LinkMode.LINK,
) -> ProjectionReport:
    """Materialize each set in turn; a failing set doesn't stop the rest."""
    report = ProjectionReport()

    for beatmap_set in beatmap_sets:
        try:
            created = materialize(ctx, beatmap_set, output_path, mode)
        except (OSError, LazerLinkError) as exc:
            log(f"Failed to materialize set {beatmap_set.dirname}: {exc}", Ansi.LRED)
            report.failed.append((beatmap_set.online_id, str(exc)))
            continue

        if created:
            report.created.append(beatmap_set.online_id)
        else:
            report.skipped.append(beatmap_set.online_id)

    return report


def materialize_all(
    ctx: Context,
    output_path: Path,
    mode: LinkMode = LinkMode.LINK,
) -> ProjectionReport:
    report = materialize_many(ctx, ctx.catalog, output_path, mode)
    log(f"Materialized catalog into {output_path}: {report}", Ansi.LGREEN)
    return report


def materialize_beatmap(
    ctx: Context,
    beatmap: Beatmap,
    output_path: Path,
    mode: LinkMode = LinkMode.LINK,
) -> bool:
    """Materialize the set which `beatmap` belongs to."""
    beatmap_set = ctx.catalog.fetch_set(beatmap.set_id)
    if beatmap_set is None:
        raise BeatmapNotFoundError(f"No beatmap set found for {beatmap!r}.")

    return materialize(ctx, beatmap_set, output_path, mode)
