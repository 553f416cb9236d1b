from __future__ import annotations

from enum import IntEnum

__all__ = [
    "ErrorCode",
    "SoundboardError",
    "AuthenticationError",
    "MissingPasswordError",
    "BadRequestError",
    "ConfigNotFoundError",
    "ConfigReadError",
    "ConfigParseError",
    "ConfigValidationError",
    "ConfigWriteError",
    "AssetNotFoundError",
    "InvalidAssetPathError",
    "AssetDeleteError",
    "UploadRejectedError",
    "FileTooLargeError",
    "InvalidFileTypeError",
    "FileExistsConflictError",
    "UploadWriteError",
]


class ErrorCode(IntEnum):
    """Numeric error codes, grouped by hundreds so callers can branch on family."""

    # Authentication (1000-1099)
    INVALID_PASSWORD = 1001
    MISSING_PASSWORD = 1002

    # File (1100-1199)
    FILE_NOT_FOUND = 1101
    FILE_TOO_LARGE = 1102
    INVALID_FILE_TYPE = 1103
    UPLOAD_FAILED = 1104
    DELETE_FAILED = 1105

    # Configuration (1200-1299)
    CONFIG_READ_ERROR = 1201
    CONFIG_WRITE_ERROR = 1202
    CONFIG_PARSE_ERROR = 1203
    CONFIG_VALIDATION_ERROR = 1204

    # General (1300-1399)
    INTERNAL_SERVER_ERROR = 1301
    METHOD_NOT_ALLOWED = 1302
    BAD_REQUEST = 1303

    @property
    def family(self) -> str:
        return {
            10: "authentication",
            11: "file",
            12: "configuration",
            13: "general",
        }[self.value // 100]


class SoundboardError(Exception):
    """Base class for errors that map onto the response envelope.

    `code` and `status_code` are class defaults; subclasses override them so
    the HTTP layer never has to inspect messages.
    """

    code: ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationError(SoundboardError):
    code = ErrorCode.INVALID_PASSWORD
    status_code = 401
    default_message = "Authentication required"


class MissingPasswordError(SoundboardError):
    code = ErrorCode.MISSING_PASSWORD
    status_code = 400
    default_message = "Password is required"


class BadRequestError(SoundboardError):
    code = ErrorCode.BAD_REQUEST
    status_code = 400
    default_message = "Bad request"


# ------------------------
# Configuration document
# ------------------------
class ConfigNotFoundError(SoundboardError):
    code = ErrorCode.FILE_NOT_FOUND
    status_code = 404
    default_message = "Configuration file not found"


class ConfigReadError(SoundboardError):
    code = ErrorCode.CONFIG_READ_ERROR
    default_message = "Failed to read configuration"


class ConfigParseError(SoundboardError):
    code = ErrorCode.CONFIG_PARSE_ERROR
    default_message = "Configuration file is malformed"


class ConfigValidationError(SoundboardError):
    code = ErrorCode.CONFIG_VALIDATION_ERROR
    status_code = 400
    default_message = "Invalid configuration structure"


class ConfigWriteError(SoundboardError):
    code = ErrorCode.CONFIG_WRITE_ERROR
    default_message = "Failed to update configuration"


# ------------------------
# Asset catalog
# ------------------------
class AssetNotFoundError(SoundboardError):
    code = ErrorCode.FILE_NOT_FOUND
    status_code = 404
    default_message = "File not found"


class InvalidAssetPathError(SoundboardError):
    code = ErrorCode.BAD_REQUEST
    status_code = 400
    default_message = "Invalid filename"


class AssetDeleteError(SoundboardError):
    code = ErrorCode.DELETE_FAILED
    default_message = "Failed to delete file"


# ------------------------
# Upload pipeline (per-file outcomes)
# ------------------------
class UploadRejectedError(SoundboardError):
    code = ErrorCode.UPLOAD_FAILED
    status_code = 400
    default_message = "Upload failed"


class FileTooLargeError(UploadRejectedError):
    code = ErrorCode.FILE_TOO_LARGE
    status_code = 413


class InvalidFileTypeError(UploadRejectedError):
    code = ErrorCode.INVALID_FILE_TYPE
    default_message = "Invalid file type. Only audio files are allowed."


class FileExistsConflictError(UploadRejectedError):
    code = ErrorCode.BAD_REQUEST
    status_code = 409
    default_message = "File already exists"


class UploadWriteError(UploadRejectedError):
    code = ErrorCode.UPLOAD_FAILED
    status_code = 500
