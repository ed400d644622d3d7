from __future__ import annotations

from enum import StrEnum
from enum import unique

__all__ = ("ExportFormat",)


@unique
class ExportFormat(StrEnum):
    JSON = "json"
    JSON_PRETTY = "json-pretty"
    BINARY1 = "binary1"  # narrow; 1 byte string lengths
    BINARY2 = "binary2"  # wide; 4 byte string lengths
