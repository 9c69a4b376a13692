"""Error hierarchy for the response extraction directive.

All errors inherit from DirectiveError, which carries an error_code so
callers can branch on the failure kind. Stages return a StageResult
holding either a value or one of these errors; the directive unwraps
it and raises.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorCode(str, Enum):
    """Machine-readable failure kinds."""

    REQUEST_NOT_FOUND = "REQUEST_NOT_FOUND"
    """The referenced request could not be resolved."""

    NO_RESPONSE = "NO_RESPONSE"
    """No cached response exists and none was produced."""

    DEPENDENCY_FAILED = "DEPENDENCY_FAILED"
    """The dependency response carries an error."""

    NO_SUCCESSFUL_RESPONSE = "NO_SUCCESSFUL_RESPONSE"
    """The dependency response has no status code."""

    MISSING_FILTER = "MISSING_FILTER"
    """No regular expression was given."""

    UNSUPPORTED_ATTRIBUTE = "UNSUPPORTED_ATTRIBUTE"
    """The attribute selector is not supported."""

    NO_MATCH = "NO_MATCH"
    """The regular expression did not match the body."""

    TOO_MANY_MATCHES = "TOO_MANY_MATCHES"
    """The regular expression has more than one capture group."""

    INVALID_FILTER = "INVALID_FILTER"
    """The regular expression could not be compiled or executed."""


class DirectiveError(Exception):
    """Base exception for all directive failures."""

    error_code: ErrorCode

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class RequestNotFoundError(DirectiveError):
    """Raised when the request reference does not resolve."""

    error_code = ErrorCode.REQUEST_NOT_FOUND

    def __init__(self, request_id: str | None) -> None:
        if request_id:
            super().__init__(f"Could not find request {request_id}")
        else:
            super().__init__("No request specified")
        self.request_id = request_id


class NoResponseError(DirectiveError):
    error_code = ErrorCode.NO_RESPONSE

    def __init__(self, message: str = "No responses for request") -> None:
        super().__init__(message)


class DependencyFailedError(DirectiveError):
    """Raised when the dependency response carries an error."""

    error_code = ErrorCode.DEPENDENCY_FAILED

    def __init__(self, dependency_error: str) -> None:
        super().__init__(f"Failed to send dependent request {dependency_error}")
        self.dependency_error = dependency_error


class NoSuccessfulResponseError(DirectiveError):
    error_code = ErrorCode.NO_SUCCESSFUL_RESPONSE

    def __init__(self, message: str = "No successful responses for request") -> None:
        super().__init__(message)


class MissingFilterError(DirectiveError):
    error_code = ErrorCode.MISSING_FILTER

    def __init__(self, message: str = "No filter specified") -> None:
        super().__init__(message)


class UnsupportedAttributeError(DirectiveError):
    """Raised for attribute selectors other than the body."""

    error_code = ErrorCode.UNSUPPORTED_ATTRIBUTE

    def __init__(self, attribute: str | None) -> None:
        super().__init__(f"Attribute {attribute!r} not implemented yet")
        self.attribute = attribute


class NoMatchError(DirectiveError):
    error_code = ErrorCode.NO_MATCH

    def __init__(self, filter: str) -> None:
        super().__init__(f"No match for regexp: {filter}")
        self.filter = filter


class TooManyMatchesError(DirectiveError):
    """Raised when the pattern has two or more capture groups."""

    error_code = ErrorCode.TOO_MANY_MATCHES

    def __init__(self, filter: str, group_count: int) -> None:
        super().__init__(
            f"RegExp returns too many results: {filter} has {group_count} groups"
        )
        self.filter = filter
        self.group_count = group_count


class InvalidFilterError(DirectiveError):
    """Raised when the pattern fails to compile or execute."""

    error_code = ErrorCode.INVALID_FILTER

    def __init__(self, filter: str, detail: str) -> None:
        super().__init__(f"Wrong regexp: {filter}, {detail}")
        self.filter = filter
        self.detail = detail


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Outcome of a stage: a value or a DirectiveError, never both."""

    value: T | None = None
    error: DirectiveError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "StageResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: DirectiveError) -> "StageResult[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
