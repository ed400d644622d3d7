from __future__ import annotations

import hashlib
from collections.abc import Callable
from collections.abc import Mapping
from pathlib import Path

import pytest

from lazerlink.context import Context
from lazerlink.context import Library
from lazerlink.objects.beatmap import Beatmap
from lazerlink.objects.beatmap import BeatmapMetadata
from lazerlink.objects.beatmap import BeatmapSet
from lazerlink.objects.beatmap import File
from lazerlink.objects.beatmap import FileUsage
from lazerlink.repositories.catalog import Catalog

SetFactory = Callable[..., BeatmapSet]


@pytest.fixture
def library(tmp_path: Path) -> Library:
    root = tmp_path / "lazer"
    (root / "files").mkdir(parents=True)
    (root / "client.realm").write_bytes(b"")
    return Library.open(root)


@pytest.fixture
def output_path(tmp_path: Path) -> Path:
    path = tmp_path / "out"
    path.mkdir()
    return path


def store_blob(library: Library, content: bytes) -> str:
    """Write `content` into the library's blob store, returning its hash."""
    hash = hashlib.sha256(content).hexdigest()

    path = library.resolve(hash)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)

    return hash


@pytest.fixture
def make_set(library: Library) -> SetFactory:
    def _make_set(
        online_id: int,
        files: Mapping[str, bytes] | None = None,
        n_beatmaps: int = 1,
    ) -> BeatmapSet:
        if files is None:
            files = {"audio.mp3": f"audio of {online_id}".encode()}

        beatmap_set = BeatmapSet(
            online_id=online_id,
            files=[
                FileUsage(filename=name, file=File(hash=store_blob(library, data)))
                for name, data in files.items()
            ],
        )
        beatmap_set.beatmaps = [
            Beatmap(
                md5=hashlib.md5(f"{online_id}:{i}".encode()).hexdigest(),
                set_id=beatmap_set.id,
                online_id=online_id * 10 + i,
                metadata=BeatmapMetadata(
                    title=f"title {online_id}",
                    artist=f"artist {online_id}",
                    audio_file="audio.mp3",
                ),
            )
            for i in range(n_beatmaps)
        ]
        return beatmap_set

    return _make_set


@pytest.fixture
def make_ctx(library: Library) -> Callable[..., Context]:
    def _make_ctx(*beatmap_sets: BeatmapSet) -> Context:
        return Context(library=library, catalog=Catalog(beatmap_sets))

    return _make_ctx


@pytest.fixture
def store(library: Library) -> Callable[[bytes], str]:
    return lambda content: store_blob(library, content)
