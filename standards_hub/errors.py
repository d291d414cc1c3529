"""
Standards Errors

Custom exceptions for query validation, store access and
mutation-time authority checks.
"""


class StandardsError(Exception):
    """Base class for all standards-hub errors."""


class InvalidQuery(StandardsError, ValueError):
    """
    Raised when subject, grade or state input is rejected.
    Raised before any store fetch; never retried.
    """
    def __init__(self, message: str, errors: list[dict] | None = None):
        super().__init__(message)
        self.errors = errors or []


class StoreUnavailable(StandardsError):
    """
    Raised when the record store cannot be reached or fails mid-read.
    Surfaced unchanged; retry policy belongs to the caller.
    """
    def __init__(self, operation: str, reason: str = ""):
        message = f"Standard record store unavailable during {operation}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.operation = operation
        self.reason = reason


class DuplicateStandard(StandardsError):
    """Raised when a district standard id collides with a base standard id."""
    def __init__(self, standard_id: str):
        super().__init__(f"Standard {standard_id} already exists in the base layer")
        self.standard_id = standard_id


class UnknownStandard(StandardsError):
    """Raised when a write references a standard that does not resolve."""
    def __init__(self, standard_id: str, scope: str = ""):
        message = f"Unknown standard {standard_id}"
        if scope:
            message += f" for {scope}"
        super().__init__(message)
        self.standard_id = standard_id
        self.scope = scope


class Forbidden(StandardsError, PermissionError):
    """Raised when a caller's role or scope does not permit the write."""
    def __init__(self, role: str, action: str):
        super().__init__(f"Role '{role}' may not {action}")
        self.role = role
        self.action = action
