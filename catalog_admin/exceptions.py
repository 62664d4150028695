"""Domain exception hierarchy for structured error responses."""

from __future__ import annotations


class AppException(Exception):
    """Base exception for all domain errors.

    Subclasses set ``code`` and ``status_code`` at the class level; callers
    provide ``message`` and an optional ``details`` list.
    """

    code: str = "APP_ERROR"
    status_code: int = 500

    def __init__(self, message: str, details: list[dict] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or []


class NotFoundException(AppException):
    """The entity an operation targets does not exist."""

    code = "NOT_FOUND"
    status_code = 404


class ReferenceNotFoundException(AppException):
    """An entity referenced by the request (parent, category, attribute, option, product) does not exist."""

    code = "REFERENCE_NOT_FOUND"
    status_code = 400


class ConflictException(AppException):
    code = "CONFLICT"
    status_code = 409


class InvalidOperationException(AppException):
    """The operation would break a structural invariant of the catalog."""

    code = "INVALID_OPERATION"
    status_code = 409


class ValidationException(AppException):
    code = "VALIDATION_ERROR"
    status_code = 422


class InvalidConstraintException(ValidationException):
    """An attribute definition's own constraint fields contradict each other."""

    code = "INVALID_CONSTRAINT"


class AttributeValueException(ValidationException):
    """A candidate value is not legal for its attribute definition."""

    code = "VALUE_VALIDATION_FAILED"


class IncompleteAttributesException(AppException):
    """Activation was attempted while required attributes have no stored value."""

    code = "INCOMPLETE_ATTRIBUTES"
    status_code = 422

    def __init__(self, missing: list[str], details: list[dict] | None = None) -> None:
        super().__init__(f"Missing required attributes: {', '.join(missing)}", details)
        self.missing = missing
