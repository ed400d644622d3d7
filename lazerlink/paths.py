from __future__ import annotations

import os
import sys
from pathlib import Path

import lazerlink.settings

DATABASE_FILENAME = "client.realm"
FILES_DIRNAME = "files"


# https://osu.ppy.sh/wiki/en/Client/Release_stream/Lazer/File_storage
def default_lazer_path() -> Path | None:
    """Return the platform's default osu!lazer data directory, if known."""
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        return Path(appdata) / "osu" if appdata else None

    home = os.environ.get("HOME")
    if home is None:
        return None

    if sys.platform == "darwin":
        return Path(home) / "Library" / "Application Support" / "osu"

    if sys.platform.startswith("linux"):
        return Path(home) / ".local" / "share" / "osu"

    return None


def lazer_path() -> Path | None:
    return lazerlink.settings.LAZER_PATH or default_lazer_path()
