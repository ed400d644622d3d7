from __future__ import annotations

from lazerlink.errors import BeatmapNotFoundError
from lazerlink.objects.beatmap import Beatmap
from lazerlink.repositories.catalog import Catalog


def fetch_by_md5(catalog: Catalog, md5: str) -> Beatmap:
    if beatmap := catalog.fetch_by_md5(md5):
        return beatmap

    raise BeatmapNotFoundError(f"No beatmap with md5 {md5} in the catalog.")


def fetch_by_id(catalog: Catalog, online_id: int) -> Beatmap:
    if beatmap := catalog.fetch_by_id(online_id):
        return beatmap

    raise BeatmapNotFoundError(f"No beatmap with id {online_id} in the catalog.")
