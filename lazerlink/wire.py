from __future__ import annotations

import struct
from collections.abc import Collection

from lazerlink.errors import CatalogFormatError
from lazerlink.errors import ExportOverflowError
from lazerlink.objects.beatmap import Beatmap
from lazerlink.objects.beatmap import BeatmapMetadata
from lazerlink.objects.beatmap import BeatmapSet
from lazerlink.objects.beatmap import File
from lazerlink.objects.beatmap import FileUsage
from lazerlink.storage import FILE_HASH_SIZE
from lazerlink.storage import MD5_HASH_SIZE
from lazerlink.storage import hash_to_bytes

__all__ = ("NARROW", "WIDE", "CatalogReader", "read_catalog", "write_catalog")

# leading mode flag of a binary catalog
WIDE = 0  # "binary2", u32 string lengths
NARROW = 1  # "binary1", u8 string lengths

_u8 = struct.Struct("<B")
_u32 = struct.Struct("<I")
_i64 = struct.Struct("<q")

# beatmaps without an md5 are written as a zeroed fingerprint
_EMPTY_MD5 = bytes(MD5_HASH_SIZE)


class CatalogReader:
    """\
    A class for reading binary catalog exports.

    Attributes
    -----------
    body_view: `memoryview`
        A readonly view of the unread remainder of the export.

    narrow: `bool`
        Whether strings carry a 1 byte (binary1) or
        4 byte (binary2) length prefix; set by the header.

    Intended Usage:
    >>> beatmap_sets = CatalogReader(memoryview(data)).read_catalog()
    """

    def __init__(self, body_view: memoryview) -> None:
        self.body_view = body_view  # readonly
        self.narrow = False

    def _read(self, size: int) -> memoryview:
        if len(self.body_view) < size:
            raise CatalogFormatError("Unexpected end of binary catalog.")

        val = self.body_view[:size]
        self.body_view = self.body_view[size:]
        return val

    # integral types

    def read_u8(self) -> int:
        return self._read(1)[0]

    def read_u32(self) -> int:
        return int.from_bytes(self._read(4), "little", signed=False)

    def read_i64(self) -> int:
        return int.from_bytes(self._read(8), "little", signed=True)

    # complex types

    def read_hash(self, size: int) -> str:
        return self._read(size).hex()

    def read_string(self) -> str:
        length = self.read_u8() if self.narrow else self.read_u32()

        try:
            return self._read(length).tobytes().decode()  # copy
        except UnicodeDecodeError as exc:
            raise CatalogFormatError(f"Invalid utf-8 string: {exc}") from exc

    # catalog types

    def read_file_usage(self) -> FileUsage:
        return FileUsage(
            filename=self.read_string(),
            file=File(hash=self.read_hash(FILE_HASH_SIZE)),
        )

    def read_beatmap(self, beatmap_set: BeatmapSet) -> Beatmap:
        md5 = self.read_hash(MD5_HASH_SIZE)
        if md5 == _EMPTY_MD5.hex():
            md5 = ""

        return Beatmap(
            md5=md5,
            set_id=beatmap_set.id,
            online_id=self.read_i64(),
            # NOTE: field order is part of the format
            metadata=BeatmapMetadata(
                title=self.read_string(),
                title_unicode=self.read_string(),
                artist=self.read_string(),
                artist_unicode=self.read_string(),
                source=self.read_string(),
                audio_file=self.read_string(),
                background_file=self.read_string(),
            ),
        )

    def read_beatmap_set(self) -> BeatmapSet:
        beatmap_set = BeatmapSet(online_id=self.read_i64())

        file_count = self.read_u32()
        beatmap_set.files = [self.read_file_usage() for _ in range(file_count)]

        beatmap_count = self.read_u32()
        beatmap_set.beatmaps = [
            self.read_beatmap(beatmap_set) for _ in range(beatmap_count)
        ]

        return beatmap_set

    def read_catalog(self) -> list[BeatmapSet]:
        mode = self.read_u8()
        if mode not in (WIDE, NARROW):
            raise CatalogFormatError(f"Unknown binary catalog mode {mode}.")

        self.narrow = mode == NARROW

        set_count = self.read_u32()
        beatmap_sets = [self.read_beatmap_set() for _ in range(set_count)]

        if self.body_view:
            raise CatalogFormatError(
                f"{len(self.body_view)} trailing bytes after binary catalog.",
            )

        return beatmap_sets


def read_catalog(data: bytes) -> list[BeatmapSet]:
    """Read a binary catalog export (either variant)."""
    return CatalogReader(memoryview(data)).read_catalog()


# write functions


def write_i64(i: int) -> bytes:
    """Write `i` into bytes (little endian, signed)."""
    try:
        return _i64.pack(i)
    except struct.error:
        raise ExportOverflowError(
            f"Online id {i} does not fit in a signed 64 bit integer.",
        ) from None


def write_string(s: str, narrow: bool) -> bytes:
    """Write `s` into bytes (length prefix & utf-8)."""
    encoded = s.encode()

    if narrow:
        if len(encoded) > 0xFF:
            raise ExportOverflowError(
                f"{s[:32]!r}... is {len(encoded)} bytes long, which "
                "does not fit binary1's length prefix; use binary2 instead.",
            )
        return _u8.pack(len(encoded)) + encoded

    return _u32.pack(len(encoded)) + encoded


def write_file_usage(usage: FileUsage, narrow: bool) -> bytearray:
    """Write `usage` into bytes (filename & raw hash)."""
    ret = bytearray(write_string(usage.filename, narrow))
    ret += hash_to_bytes(usage.file.hash, FILE_HASH_SIZE)
    return ret


def write_beatmap(beatmap: Beatmap, narrow: bool) -> bytearray:
    """Write `beatmap` into bytes (raw md5, online id & metadata)."""
    if beatmap.md5:
        ret = bytearray(hash_to_bytes(beatmap.md5, MD5_HASH_SIZE))
    else:
        ret = bytearray(_EMPTY_MD5)

    ret += write_i64(beatmap.online_id)

    metadata = beatmap.metadata
    for s in (
        metadata.title,
        metadata.title_unicode,
        metadata.artist,
        metadata.artist_unicode,
        metadata.source,
        metadata.audio_file,
        metadata.background_file,
    ):
        ret += write_string(s, narrow)

    return ret


def write_beatmap_set(beatmap_set: BeatmapSet, narrow: bool) -> bytearray:
    """Write `beatmap_set` into bytes (files, then beatmaps)."""
    ret = bytearray(write_i64(beatmap_set.online_id))

    ret += _u32.pack(len(beatmap_set.files))
    for usage in beatmap_set.files:
        ret += write_file_usage(usage, narrow)

    ret += _u32.pack(len(beatmap_set.beatmaps))
    for beatmap in beatmap_set.beatmaps:
        ret += write_beatmap(beatmap, narrow)

    return ret


def write_catalog(beatmap_sets: Collection[BeatmapSet], narrow: bool) -> bytes:
    """Write `beatmap_sets` into a binary catalog export."""
    ret = bytearray(_u8.pack(NARROW if narrow else WIDE))
    ret += _u32.pack(len(beatmap_sets))

    for beatmap_set in beatmap_sets:
        ret += write_beatmap_set(beatmap_set, narrow)

    return bytes(ret)
