from __future__ import annotations

from pathlib import Path

import orjson
import pytest

import lazerlink.models.catalog
from lazerlink import wire
from lazerlink.constants.export_formats import ExportFormat
from lazerlink.errors import CatalogFormatError
from lazerlink.errors import ExportOverflowError
from lazerlink.errors import SetupError
from lazerlink.errors import UsageError
from lazerlink.objects.beatmap import Beatmap
from lazerlink.objects.beatmap import BeatmapMetadata
from lazerlink.objects.beatmap import BeatmapSet
from lazerlink.objects.beatmap import File
from lazerlink.objects.beatmap import FileUsage
from lazerlink.repositories import catalog as catalog_repo
from lazerlink.usecases import exports

SHA256 = "ab" * 32
MD5 = "60b725f10c9c85c70d97880dfe8191b3"


def flatten(beatmap_sets):
    return [
        (
            s.online_id,
            {u.filename: u.file.hash for u in s.files},
            [(b.md5, b.online_id, b.metadata) for b in s.beatmaps],
        )
        for s in beatmap_sets
    ]


@pytest.fixture
def beatmap_sets() -> list[BeatmapSet]:
    published = BeatmapSet(
        online_id=1_723_723,
        files=[
            FileUsage("audio.mp3", File(SHA256)),
            FileUsage("sb/背景.jpg", File("cd" * 32)),
        ],
    )
    published.beatmaps = [
        Beatmap(
            md5=MD5,
            set_id=published.id,
            online_id=3_821_001,
            metadata=BeatmapMetadata(
                title="Kimi no Shiranai Monogatari",
                title_unicode="君の知らない物語",
                artist="supercell",
                artist_unicode="supercell",
                source="化物語",
                audio_file="audio.mp3",
                background_file="sb/背景.jpg",
            ),
        ),
        Beatmap(
            md5="",  # never saved by the editor
            set_id=published.id,
            metadata=BeatmapMetadata(title="", artist="", audio_file="audio.mp3"),
        ),
    ]

    unpublished = BeatmapSet(online_id=0, files=[FileUsage("a.osu", File("ef" * 32))])
    return [published, unpublished, BeatmapSet(online_id=-1)]


@pytest.mark.parametrize("fmt", list(ExportFormat))
def test_export_round_trip(tmp_path, beatmap_sets, fmt):
    path = tmp_path / f"catalog.{fmt}"

    written = exports.export_catalog(beatmap_sets, fmt, path)

    assert written == path.stat().st_size
    assert flatten(catalog_repo.load(path)) == flatten(beatmap_sets)


def test_json_normalizes_absent_fields(beatmap_sets):
    data = orjson.loads(lazerlink.models.catalog.write_json(beatmap_sets))

    first, unsaved = data["BeatmapSets"][0]["Beatmaps"]
    assert first == {
        "MD5Hash": MD5,
        "OnlineID": 3_821_001,
        "Title": "Kimi no Shiranai Monogatari",
        "TitleUnicode": "君の知らない物語",
        "Artist": "supercell",
        "ArtistUnicode": "supercell",
        "Source": "化物語",
        "AudioFile": "audio.mp3",
        "BackgroundFile": "sb/背景.jpg",
    }
    assert unsaved["TitleUnicode"] is None
    assert unsaved["ArtistUnicode"] is None
    assert unsaved["Source"] is None
    assert unsaved["BackgroundFile"] is None
    # not part of the "absent" convention
    assert unsaved["Title"] == ""

    assert data["BeatmapSets"][0]["Files"] == {
        "audio.mp3": SHA256,
        "sb/背景.jpg": "cd" * 32,
    }
    assert data["BeatmapSets"][2] == {"OnlineID": -1, "Files": {}, "Beatmaps": []}


def test_json_variants(beatmap_sets):
    compact = lazerlink.models.catalog.write_json(beatmap_sets)
    pretty = lazerlink.models.catalog.write_json(beatmap_sets, pretty=True)

    assert b"\n" not in compact
    assert pretty.startswith(b'{\n  "BeatmapSets": [')
    assert orjson.loads(compact) == orjson.loads(pretty)
    compact.decode("utf-8")


@pytest.mark.parametrize(
    ("narrow", "expected"),
    [
        (
            True,
            b"\x01"  # mode
            + b"\x01\x00\x00\x00"  # set count
            + b"\x07\x00\x00\x00\x00\x00\x00\x00"  # online id
            + b"\x01\x00\x00\x00"  # file count
            + b"\x05a.osu"
            + bytes.fromhex(SHA256)
            + b"\x00\x00\x00\x00",  # beatmap count
        ),
        (
            False,
            b"\x00"
            + b"\x01\x00\x00\x00"
            + b"\x07\x00\x00\x00\x00\x00\x00\x00"
            + b"\x01\x00\x00\x00"
            + b"\x05\x00\x00\x00a.osu"
            + bytes.fromhex(SHA256)
            + b"\x00\x00\x00\x00",
        ),
    ],
)
def test_write_catalog_layout(narrow, expected):
    beatmap_set = BeatmapSet(online_id=7, files=[FileUsage("a.osu", File(SHA256))])

    assert wire.write_catalog([beatmap_set], narrow=narrow) == expected


def test_write_beatmap_layout():
    beatmap = Beatmap(
        md5=MD5,
        set_id=BeatmapSet().id,
        online_id=-2,
        metadata=BeatmapMetadata(title="t", audio_file="a.mp3"),
    )

    assert wire.write_beatmap(beatmap, narrow=True) == (
        bytes.fromhex(MD5)
        + b"\xfe\xff\xff\xff\xff\xff\xff\xff"
        + b"\x01t"  # title
        + b"\x00"  # title unicode
        + b"\x00"  # artist
        + b"\x00"  # artist unicode
        + b"\x00"  # source
        + b"\x05a.mp3"  # audio file
        + b"\x00"  # background file
    )


@pytest.mark.parametrize(
    ("filename", "narrow_ok"),
    [
        ("a" * 255, True),
        ("a" * 256, False),
        ("é" * 127 + "a", True),  # 255 bytes once encoded
        ("é" * 128, False),  # 256 bytes once encoded
    ],
)
def test_narrow_string_limit(filename, narrow_ok):
    beatmap_set = BeatmapSet(files=[FileUsage(filename, File(SHA256))])

    if narrow_ok:
        data = wire.write_catalog([beatmap_set], narrow=True)
        assert flatten(wire.read_catalog(data)) == flatten([beatmap_set])
    else:
        with pytest.raises(ExportOverflowError, match="binary2"):
            wire.write_catalog([beatmap_set], narrow=True)

    # the wide variant has room for both
    data = wire.write_catalog([beatmap_set], narrow=False)
    assert flatten(wire.read_catalog(data)) == flatten([beatmap_set])


def test_overflow_leaves_existing_target_untouched(tmp_path):
    path = tmp_path / "catalog.bin"
    path.write_bytes(b"previous export")
    beatmap_set = BeatmapSet(files=[FileUsage("a" * 300, File(SHA256))])

    with pytest.raises(OverflowError):
        exports.export_catalog([beatmap_set], ExportFormat.BINARY1, path)

    assert path.read_bytes() == b"previous export"


def test_export_to_directory_is_rejected(tmp_path, beatmap_sets):
    with pytest.raises(UsageError):
        exports.export_catalog(beatmap_sets, ExportFormat.JSON, tmp_path)

    assert list(tmp_path.iterdir()) == []


def test_export_to_stdout(capsysbinary, beatmap_sets):
    exports.export_catalog(beatmap_sets, ExportFormat.BINARY2)

    out = capsysbinary.readouterr().out
    assert out == wire.write_catalog(beatmap_sets, narrow=False)


def test_export_truncates_existing_file(tmp_path, beatmap_sets):
    path = tmp_path / "catalog.json"
    path.write_bytes(b"x" * 100_000)

    exports.export_catalog(beatmap_sets[2:], ExportFormat.JSON, path)

    assert path.read_bytes() == b'{"BeatmapSets":[{"OnlineID":-1,"Files":{},"Beatmaps":[]}]}'


@pytest.mark.parametrize(
    "data",
    [
        b"\x02\x00\x00\x00\x00",  # unknown mode
        b"\x01\x01\x00\x00\x00",  # truncated set
        b"\x00\x00\x00\x00\x00\xff",  # trailing bytes
    ],
)
def test_read_malformed_binary(data):
    with pytest.raises(CatalogFormatError):
        wire.read_catalog(data)


@pytest.mark.parametrize(
    "data",
    [
        b"{not json",
        b'{"BeatmapSets": [{"OnlineID": "x"}]}',
    ],
)
def test_read_malformed_json(data):
    with pytest.raises(CatalogFormatError):
        lazerlink.models.catalog.read_json(data)


def test_load_missing_snapshot(tmp_path: Path):
    with pytest.raises(SetupError, match="not found"):
        catalog_repo.load(tmp_path / "nope.json")


@pytest.mark.parametrize(
    "data",
    [
        b'{"BeatmapSets": [{"OnlineID": 9223372036854775808, "Files": {}, "Beatmaps": []}]}',
        (
            b'{"BeatmapSets": [{"OnlineID": 1, "Files": {}, "Beatmaps": [{'
            b'"MD5Hash": "", "OnlineID": 9223372036854775808, "Title": "",'
            b' "Artist": "", "AudioFile": ""}]}]}'
        ),
    ],
)
def test_read_json_out_of_range_online_id(data):
    with pytest.raises(CatalogFormatError):
        lazerlink.models.catalog.read_json(data)


@pytest.mark.parametrize("fmt", list(ExportFormat))
@pytest.mark.parametrize("online_id", [2**63, -(2**63) - 1])
def test_export_out_of_range_online_id(tmp_path, fmt, online_id):
    path = tmp_path / "catalog"
    path.write_bytes(b"previous export")

    with pytest.raises(ExportOverflowError):
        exports.export_catalog([BeatmapSet(online_id=online_id)], fmt, path)

    assert path.read_bytes() == b"previous export"


@pytest.mark.parametrize("online_id", [2**63 - 1, -(2**63)])
def test_online_id_limits_round_trip(online_id):
    beatmap_set = BeatmapSet(online_id=online_id)

    assert wire.read_catalog(wire.write_catalog([beatmap_set], narrow=False))[0].online_id == online_id
    assert lazerlink.models.catalog.read_json(
        lazerlink.models.catalog.write_json([beatmap_set]),
    )[0].online_id == online_id
