from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Iterator
from pathlib import Path
from uuid import UUID

import lazerlink.models.catalog
from lazerlink import wire
from lazerlink.errors import CatalogFormatError
from lazerlink.errors import SetupError
from lazerlink.objects.beatmap import Beatmap
from lazerlink.objects.beatmap import BeatmapSet


class Catalog:
    """A read-only view of a library's beatmap sets.

    Lookups are served from indexes built once on construction;
    the catalog is never mutated afterwards.
    """

    def __init__(self, beatmap_sets: Iterable[BeatmapSet] = ()) -> None:
        self.beatmap_sets = list(beatmap_sets)

        self._sets_by_id: dict[UUID, BeatmapSet] = {}
        self._md5_cache: dict[str, Beatmap] = {}
        self._id_cache: dict[int, Beatmap] = {}
        self._set_online_ids: set[int] = set()

        for beatmap_set in self.beatmap_sets:
            self._add_to_cache(beatmap_set)

    def _add_to_cache(self, beatmap_set: BeatmapSet) -> None:
        self._sets_by_id[beatmap_set.id] = beatmap_set
        self._set_online_ids.add(beatmap_set.online_id)

        for beatmap in beatmap_set.beatmaps:
            # unset keys (empty md5, online id 0) aren't unique
            if beatmap.md5:
                self._md5_cache.setdefault(beatmap.md5.lower(), beatmap)
            if beatmap.online_id:
                self._id_cache.setdefault(beatmap.online_id, beatmap)

    def __iter__(self) -> Iterator[BeatmapSet]:
        return iter(self.beatmap_sets)

    def __len__(self) -> int:
        return len(self.beatmap_sets)

    def __repr__(self) -> str:
        return f"<Catalog ({len(self)} sets)>"

    @property
    def set_online_ids(self) -> frozenset[int]:
        return frozenset(self._set_online_ids)

    def fetch_set(self, set_id: UUID) -> BeatmapSet | None:
        return self._sets_by_id.get(set_id)

    def fetch_by_md5(self, md5: str) -> Beatmap | None:
        return self._md5_cache.get(md5.lower())

    def fetch_by_id(self, online_id: int) -> Beatmap | None:
        return self._id_cache.get(online_id)


def load(path: Path) -> Catalog:
    """Load a catalog snapshot written in any of the export formats."""
    if not path.is_file():
        raise SetupError(f"Catalog snapshot {path} not found.")

    data = path.read_bytes()
    if not data:
        raise CatalogFormatError(f"Catalog snapshot {path} is empty.")

    # binary exports always lead with their mode flag
    if data[0] in (wire.WIDE, wire.NARROW):
        return Catalog(wire.read_catalog(data))

    return Catalog(lazerlink.models.catalog.read_json(data))
