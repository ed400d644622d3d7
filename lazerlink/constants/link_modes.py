from __future__ import annotations

from enum import IntEnum
from enum import unique

__all__ = ("LinkMode",)


@unique
class LinkMode(IntEnum):
    LINK = 0
    COPY = 1

    def __repr__(self) -> str:
        return f"<{self.name} ({self.value})>"
