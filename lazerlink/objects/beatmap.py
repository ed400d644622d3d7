from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from uuid import UUID
from uuid import uuid4


@dataclass(frozen=True)
class File:
    """A blob in the library's content-addressed store."""

    hash: str  # lowercase hex sha256


@dataclass
class FileUsage:
    # may contain "/" for files nested inside the set (e.g. skin elements)
    filename: str
    file: File


@dataclass
class BeatmapMetadata:
    """Descriptive fields of a beatmap.

    An empty string means "absent" for the unicode,
    source and background fields.
    """

    title: str = ""
    title_unicode: str = ""
    artist: str = ""
    artist_unicode: str = ""
    source: str = ""
    audio_file: str = ""
    background_file: str = ""


@dataclass
class Beatmap:
    """A single difficulty of a beatmap set.

    `set_id` refers to the owning set's primary key; the set itself is
    resolved through the catalog (see `Catalog.fetch_set`).
    """

    md5: str
    set_id: UUID
    online_id: int = 0
    metadata: BeatmapMetadata = field(default_factory=BeatmapMetadata)

    def __repr__(self) -> str:
        return f"<{self.metadata.artist} - {self.metadata.title} ({self.md5})>"

    @property
    def full_name(self) -> str:
        return f"{self.metadata.artist} - {self.metadata.title}"


@dataclass
class BeatmapSet:
    """A collection of beatmaps & the files they share.

    The set owns both its file usages & its beatmaps.
    """

    online_id: int = 0
    files: list[FileUsage] = field(default_factory=list)
    beatmaps: list[Beatmap] = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)

    def __repr__(self) -> str:
        return f"<BeatmapSet {self.online_id} ({len(self.beatmaps)} maps)>"

    @property
    def dirname(self) -> str:
        # just the id; titles & artists aren't always valid path components
        return str(self.online_id)
