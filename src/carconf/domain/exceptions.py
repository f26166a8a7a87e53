"""Domain-level exceptions.

All failures raised by the core are subclasses of DomainException so the
CLI layer can catch them uniformly and display user-friendly messages.

Business-rule failures (ValidationError) carry the complete list of
violations so the caller can show every reason at once.  Integrity and
authorization faults are fatal to the current operation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from carconf.domain.model.value_objects import Violation


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """One or more business rules were violated."""

    def __init__(self, message: str, violations: Iterable[Violation] = ()) -> None:
        super().__init__(message)
        self.violations: list[Violation] = list(violations)

    @classmethod
    def from_violations(cls, violations: Iterable[Violation]) -> ValidationError:
        violations = list(violations)
        message = "; ".join(v.reason for v in violations) or "Invalid configuration"
        return cls(message, violations)

    @property
    def reasons(self) -> list[str]:
        return [v.reason for v in self.violations] or [str(self)]


class ConcurrencyConflictError(ValidationError):
    """The commit-time re-check failed because inventory changed meanwhile."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class DataIntegrityError(DomainException):
    """Catalog or inventory data is inconsistent (not a user error)."""


class AuthorizationError(DomainException):
    """A capability token is missing, expired or not correctly signed."""
