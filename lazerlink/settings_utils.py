from __future__ import annotations

from pathlib import Path


def read_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


def read_path(value: str | None) -> Path | None:
    if not value:
        return None

    return Path(value).expanduser()
