"""Error taxonomy shared by the backend handlers and the client transport."""

from __future__ import annotations

from typing import ClassVar


class ReportServiceError(Exception):
    """Base error for report submission, lookup, and transport failures."""

    user_correctable: ClassVar[bool] = False
    default_message: ClassVar[str] = "Server error, please retry"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingFieldError(ReportServiceError):
    user_correctable = True

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} is required")


class InvalidInputError(ReportServiceError):
    user_correctable = True
    default_message = "Invalid input"


class DuplicateCodeError(ReportServiceError):
    """Lookup code already belongs to another report."""

    user_correctable = True

    def __init__(self, code: str):
        self.code = code
        super().__init__("Lookup code already exists, please choose another code")


class ReportNotFoundError(ReportServiceError):
    user_correctable = True

    def __init__(self, code: str):
        self.code = code
        super().__init__("No report found for this lookup code")


class AllocationFailedError(ReportServiceError):
    default_message = "Failed to generate a lookup code, please retry"


class StorageError(ReportServiceError):
    """Storage failure other than a uniqueness violation."""


class AllConnectionsFailedError(ReportServiceError):
    default_message = "Unable to reach the server. Check your network connection or try again later"


class CodeAlreadyTakenError(Exception):
    """Requested custom code is already in use."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Lookup code '{code}' is already taken")


class AllocationExhaustedError(Exception):
    """Every generated candidate collided with an existing code."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"No free lookup code after {attempts} attempts")


class ConstraintViolationError(Exception):
    """Insert rejected by a storage-level uniqueness rule."""

    def __init__(self, key: str, value: str):
        self.key = key
        self.value = value
        super().__init__(f"Duplicate value for {key}: {value}")
