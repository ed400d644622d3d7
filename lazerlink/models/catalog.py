from __future__ import annotations

from collections.abc import Iterable
from typing import Annotated
from uuid import UUID

import orjson
from pydantic import Field
from pydantic import ValidationError

from lazerlink.errors import CatalogFormatError
from lazerlink.errors import ExportOverflowError
from lazerlink.models import BaseModel
from lazerlink.objects.beatmap import Beatmap
from lazerlink.objects.beatmap import BeatmapMetadata
from lazerlink.objects.beatmap import BeatmapSet
from lazerlink.objects.beatmap import File
from lazerlink.objects.beatmap import FileUsage

# online ids are stored as signed 64 bit integers
Int64 = Annotated[int, Field(ge=-(2**63), le=2**63 - 1)]


def _or_none(value: str) -> str | None:
    return value or None


class BeatmapModel(BaseModel):
    MD5Hash: str
    OnlineID: Int64
    Title: str
    TitleUnicode: str | None = None
    Artist: str
    ArtistUnicode: str | None = None
    Source: str | None = None
    AudioFile: str
    BackgroundFile: str | None = None

    @classmethod
    def from_beatmap(cls, beatmap: Beatmap) -> BeatmapModel:
        metadata = beatmap.metadata
        return cls(
            MD5Hash=beatmap.md5,
            OnlineID=beatmap.online_id,
            Title=metadata.title,
            TitleUnicode=_or_none(metadata.title_unicode),
            Artist=metadata.artist,
            ArtistUnicode=_or_none(metadata.artist_unicode),
            Source=_or_none(metadata.source),
            AudioFile=metadata.audio_file,
            BackgroundFile=_or_none(metadata.background_file),
        )

    def to_beatmap(self, set_id: UUID) -> Beatmap:
        return Beatmap(
            md5=self.MD5Hash,
            set_id=set_id,
            online_id=self.OnlineID,
            metadata=BeatmapMetadata(
                title=self.Title,
                title_unicode=self.TitleUnicode or "",
                artist=self.Artist,
                artist_unicode=self.ArtistUnicode or "",
                source=self.Source or "",
                audio_file=self.AudioFile,
                background_file=self.BackgroundFile or "",
            ),
        )


class BeatmapSetModel(BaseModel):
    OnlineID: Int64
    Files: dict[str, str]
    Beatmaps: list[BeatmapModel]

    @classmethod
    def from_beatmap_set(cls, beatmap_set: BeatmapSet) -> BeatmapSetModel:
        return cls(
            OnlineID=beatmap_set.online_id,
            Files={usage.filename: usage.file.hash for usage in beatmap_set.files},
            Beatmaps=[BeatmapModel.from_beatmap(b) for b in beatmap_set.beatmaps],
        )

    def to_beatmap_set(self) -> BeatmapSet:
        beatmap_set = BeatmapSet(
            online_id=self.OnlineID,
            files=[
                FileUsage(filename=filename, file=File(hash=hash))
                for filename, hash in self.Files.items()
            ],
        )
        beatmap_set.beatmaps = [b.to_beatmap(beatmap_set.id) for b in self.Beatmaps]
        return beatmap_set


class CatalogModel(BaseModel):
    BeatmapSets: list[BeatmapSetModel]


def write_json(beatmap_sets: Iterable[BeatmapSet], pretty: bool = False) -> bytes:
    """Serialize `beatmap_sets` into utf-8 encoded json."""
    try:
        catalog = CatalogModel(
            BeatmapSets=[BeatmapSetModel.from_beatmap_set(s) for s in beatmap_sets],
        )
    except ValidationError as exc:
        raise ExportOverflowError(f"Catalog does not fit the json schema: {exc}") from exc

    return orjson.dumps(
        catalog.model_dump(),
        option=orjson.OPT_INDENT_2 if pretty else None,
    )


def read_json(data: bytes | str) -> list[BeatmapSet]:
    try:
        catalog = CatalogModel.model_validate(orjson.loads(data))
    except orjson.JSONDecodeError as exc:
        raise CatalogFormatError(f"Catalog is not valid json: {exc}") from exc
    except ValidationError as exc:
        raise CatalogFormatError(f"Catalog json does not match schema: {exc}") from exc

    return [s.to_beatmap_set() for s in catalog.BeatmapSets]
