from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class ErrorCode(StrEnum):
    INVALID_REQUEST = "invalid_request"
    INVALID_SETUP = "invalid_setup"
    RESOURCE_NOT_FOUND = "resource_not_found"
    EXPORT_OVERFLOW = "export_overflow"
    MALFORMED_CATALOG = "malformed_catalog"


class Error(BaseModel):
    user_feedback: str
    error_code: ErrorCode


class LazerLinkError(Exception):
    """Base class for every error reported back to the user."""

    error_code = ErrorCode.INVALID_REQUEST

    def as_error(self) -> Error:
        return Error(user_feedback=str(self), error_code=self.error_code)


class SetupError(LazerLinkError):
    """The library or output layout is unusable; nothing was mutated."""

    error_code = ErrorCode.INVALID_SETUP


class UsageError(LazerLinkError):
    error_code = ErrorCode.INVALID_REQUEST


class BeatmapNotFoundError(LazerLinkError):
    error_code = ErrorCode.RESOURCE_NOT_FOUND


class InvalidHashError(LazerLinkError, ValueError):
    error_code = ErrorCode.INVALID_REQUEST


class ExportOverflowError(LazerLinkError, OverflowError):
    error_code = ErrorCode.EXPORT_OVERFLOW


class CatalogFormatError(LazerLinkError):
    error_code = ErrorCode.MALFORMED_CATALOG


class ReplayError(LazerLinkError):
    error_code = ErrorCode.INVALID_REQUEST


class SourceFileMissingError(LazerLinkError, FileNotFoundError):
    """A blob referenced by a file usage is absent from the library."""

    error_code = ErrorCode.RESOURCE_NOT_FOUND


class UnsafeFilenameError(LazerLinkError):
    """A file usage's filename would place it outside its set's directory."""

    error_code = ErrorCode.MALFORMED_CATALOG
