"""
Error taxonomy for the greenlight data layer.

Domain outcomes (missing record, edit conflict, failed validation) are kept
apart from opaque storage failures so callers can map each to a distinct
response.

Each error class implements:
- code: String identifier for the error type
- message: Human-readable description
- context: Dict containing additional contextual information
- retry_hint: Boolean indicating if retry might succeed
"""
from __future__ import annotations
from typing import Any


class GreenlightError(Exception):
    """Base exception for all greenlight errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "UNKNOWN_ERROR",
        context: dict[str, Any] | None = None,
        retry_hint: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.context = dict(context) if context else {}
        self.retry_hint = retry_hint

    def to_dict(self) -> dict[str, Any]:
        """Serialize to structured dict."""
        return {
            "code": self.code,
            "message": self.message,
            "context": dict(self.context),
            "retry_hint": self.retry_hint,
        }


class RecordNotFoundError(GreenlightError):
    """Requested record does not exist (invalid id, no row, or deleted)."""

    def __init__(
        self,
        message: str = "record not found",
        *,
        code: str = "RECORD_NOT_FOUND",
        context: dict[str, Any] | None = None,
        retry_hint: bool = False,
    ) -> None:
        super().__init__(message, code=code, context=context, retry_hint=retry_hint)


class EditConflictError(GreenlightError):
    """Conditional update matched no row: stale version or vanished record.

    The caller must re-fetch and decide whether to re-apply its change.
    """

    def __init__(
        self,
        message: str = "unable to update the record due to an edit conflict, please try again",
        *,
        code: str = "EDIT_CONFLICT",
        context: dict[str, Any] | None = None,
        retry_hint: bool = True,
    ) -> None:
        super().__init__(message, code=code, context=context, retry_hint=retry_hint)


class FailedValidationError(GreenlightError):
    """One or more field violations; never reaches the store."""

    def __init__(
        self,
        errors: dict[str, str],
        message: str = "record failed validation",
        *,
        code: str = "FAILED_VALIDATION",
        context: dict[str, Any] | None = None,
        retry_hint: bool = False,
    ) -> None:
        self.errors = dict(errors)
        ctx = dict(context) if context else {}
        ctx["errors"] = dict(errors)
        super().__init__(message, code=code, context=ctx, retry_hint=retry_hint)


class StorageError(GreenlightError):
    """Opaque backend failure (connectivity, constraint, driver error)."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "STORAGE_ERROR",
        context: dict[str, Any] | None = None,
        retry_hint: bool = False,
    ) -> None:
        super().__init__(message, code=code, context=context, retry_hint=retry_hint)


class DeadlineExceededError(StorageError):
    """Operation abandoned because its time budget ran out."""

    def __init__(
        self,
        message: str = "deadline exceeded",
        *,
        operation: str = "unknown",
        timeout: float | None = None,
        code: str = "DEADLINE_EXCEEDED",
        context: dict[str, Any] | None = None,
        retry_hint: bool = False,
    ) -> None:
        ctx = dict(context) if context else {}
        ctx["operation"] = operation
        ctx["timeout"] = timeout
        super().__init__(message, code=code, context=ctx, retry_hint=retry_hint)


class ConfigurationError(GreenlightError):
    """Missing or invalid configuration."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "CONFIGURATION_ERROR",
        context: dict[str, Any] | None = None,
        retry_hint: bool = False,
    ) -> None:
        super().__init__(message, code=code, context=context, retry_hint=retry_hint)
