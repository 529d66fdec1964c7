"""
Error Taxonomy for FinDash

Every failure the engine surfaces is one of four kinds. Callers branch on
the exception class (or on its ``kind`` tag), never on message text.

- ValidationError: bad input, rejected before any store call
- NotFoundError: update/delete of an id that does not exist
- PermissionOrMissingError: a delete that affected zero rows
  (already gone, or blocked by the store's access policy)
- StoreUnavailableError: transport or storage failure
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Tag carried by every FinDash exception."""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    PERMISSION_OR_MISSING = "permission_or_missing"
    STORE_UNAVAILABLE = "store_unavailable"


class FinDashError(Exception):
    """Base exception for engine and store failures."""

    kind: ErrorKind = ErrorKind.STORE_UNAVAILABLE


class ValidationError(FinDashError):
    """
    Input rejected by validation.

    ``issues`` holds the ValidationIssue objects that caused the rejection.
    """

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, issues: Optional[list] = None):
        super().__init__(message)
        self.issues = list(issues or [])


class NotFoundError(FinDashError):
    """Entity not found for this owner."""

    kind = ErrorKind.NOT_FOUND


class PermissionOrMissingError(FinDashError):
    """
    A delete reported zero affected rows.

    The row may already be gone or the write may have been blocked by an
    access policy. The store cannot tell which, so neither can we.
    """

    kind = ErrorKind.PERMISSION_OR_MISSING

    def __init__(self, entity_type: str, entity_id: str):
        super().__init__(
            f"Delete of {entity_type} {entity_id} affected no rows "
            "(missing or blocked by access policy)"
        )
        self.entity_type = entity_type
        self.entity_id = entity_id


class StoreUnavailableError(FinDashError):
    """Could not read from or write to the record store."""

    kind = ErrorKind.STORE_UNAVAILABLE
