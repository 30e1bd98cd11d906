"""Export error taxonomy.

Every failure leaving the export engine is an :class:`ExportError`; callers
branch on ``code``.
"""

from enum import Enum
from typing import Any


class ExportErrorCode(str, Enum):
    """Error codes surfaced by the export engine."""

    PERMISSION_DENIED = "PERMISSION_DENIED"
    ENTITY_NOT_FOUND = "ENTITY_NOT_FOUND"
    FORMAT_NOT_SUPPORTED = "FORMAT_NOT_SUPPORTED"
    TEMPLATE_ERROR = "TEMPLATE_ERROR"
    DATA_ERROR = "DATA_ERROR"


class ExportError(Exception):
    """Base export error.

    Attributes:
        message: Message safe to show to the caller.
        code: Error category.
        details: Diagnostic context (entity, format, original error).
    """

    code: ExportErrorCode = ExportErrorCode.DATA_ERROR

    def __init__(
        self,
        message: str,
        code: ExportErrorCode | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Serialize for a transport layer response body."""
        return {"error": self.message, "code": self.code.value, "details": self.details}


class EntityNotFoundError(ExportError):
    code = ExportErrorCode.ENTITY_NOT_FOUND


class FormatNotSupportedError(ExportError):
    code = ExportErrorCode.FORMAT_NOT_SUPPORTED


class PermissionDeniedError(ExportError):
    code = ExportErrorCode.PERMISSION_DENIED


class TemplateError(ExportError):
    code = ExportErrorCode.TEMPLATE_ERROR


class DataError(ExportError):
    code = ExportErrorCode.DATA_ERROR
