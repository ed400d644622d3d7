from __future__ import annotations

from pathlib import Path

from lazerlink.errors import ReplayError

# https://osu.ppy.sh/wiki/en/Client/File_formats/osr_%28file_format%29
# mode (1 byte) & version (4 bytes) precede the md5, which is a
# uleb128-prefixed string: 0x0b, then its length (32), then the hex.
REPLAY_MD5_OFFSET = 7
REPLAY_MD5_END = REPLAY_MD5_OFFSET + 32


def read_beatmap_md5(path: Path) -> str:
    """Read the md5 of the beatmap a replay file was played on."""
    if not path.is_file():
        raise ReplayError(f"Replay file {path} not found.")

    with path.open("rb") as f:
        header = f.read(REPLAY_MD5_END)

    if len(header) < REPLAY_MD5_END:
        raise ReplayError(f"Replay file {path} is too short.")

    try:
        return header[REPLAY_MD5_OFFSET:].decode("ascii")
    except UnicodeDecodeError:
        raise ReplayError(f"Replay file {path} has a malformed header.") from None
