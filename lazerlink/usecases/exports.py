from __future__ import annotations

import sys
from collections.abc import Collection
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO

import lazerlink.models.catalog
from lazerlink import wire
from lazerlink.constants.export_formats import ExportFormat
from lazerlink.errors import UsageError
from lazerlink.logging import Ansi
from lazerlink.logging import log
from lazerlink.objects.beatmap import BeatmapSet


def encode(beatmap_sets: Collection[BeatmapSet], fmt: ExportFormat) -> bytes:
    if fmt == ExportFormat.JSON:
        return lazerlink.models.catalog.write_json(beatmap_sets)
    elif fmt == ExportFormat.JSON_PRETTY:
        return lazerlink.models.catalog.write_json(beatmap_sets, pretty=True)
    elif fmt == ExportFormat.BINARY1:
        return wire.write_catalog(beatmap_sets, narrow=True)
    elif fmt == ExportFormat.BINARY2:
        return wire.write_catalog(beatmap_sets, narrow=False)
    else:
        raise UsageError(f"Unknown export format {fmt!r}.")


@contextmanager
def open_target(path: Path | None) -> Iterator[BinaryIO]:
    """Open `path` for (truncating) writing, or stdout if it's None."""
    if path is None:
        try:
            yield sys.stdout.buffer
        finally:
            sys.stdout.buffer.flush()
        return

    with path.open("wb") as f:
        yield f


def export_catalog(
    beatmap_sets: Collection[BeatmapSet],
    fmt: ExportFormat,
    path: Path | None = None,
) -> int:
    """\
    Serialize `beatmap_sets` in `fmt` to `path` (stdout if None).

    Everything is encoded before the target is opened, so a failed
    export never truncates an existing file.

    Returns the number of bytes written.
    """
    if path is not None and path.is_dir():
        raise UsageError(f"Export path {path} is a directory.")

    data = encode(beatmap_sets, fmt)

    with open_target(path) as f:
        f.write(data)

    if path is not None:
        log(f"Exported {len(beatmap_sets)} sets as {fmt} to {path}", Ansi.LGREEN)

    return len(data)
