"""Custom exceptions for the eligibility engine.

All exceptions inherit from EligibilityError, so callers can catch every
engine-specific failure in one place. A reconciliation conflict is not an
exception: it is a normal, reportable outcome.

Example:
    try:
        result = engine.calculate_benefit(household, "SNAP", date(2024, 6, 1))
    except InvalidInputError as e:
        # Caller supplied bad data; surface it, never retry
        return error_response(e.details)
    except CatalogMissingError as e:
        # No published limit covers the request; never guess one
        logger.error("catalog_missing", **e.details)
        raise
"""

from datetime import date
from typing import Any, Optional


class EligibilityError(Exception):
    """Base exception for all eligibility engine errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class InvalidInputError(EligibilityError):
    """Raised when household input or request parameters are invalid.

    Covers negative income components, a household size below one, and
    unsupported jurisdiction or program codes. Always surfaced to the
    caller and never retried.

    Example:
        >>> raise InvalidInputError(
        ...     "Income cannot be negative",
        ...     field="earned_income",
        ...     value=-100,
        ...     constraint=">= 0",
        ... )
        InvalidInputError: Income cannot be negative
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details=details, recoverable=False)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class CatalogMissingError(EligibilityError):
    """Raised when no catalog record covers a program, size and date.

    The engine never guesses a limit, so this always reaches the caller.

    Attributes:
        jurisdiction: Jurisdiction code that was looked up.
        program: Program code that was looked up.
        household_size: Household size, when the lookup was size-keyed.
        as_of: Calculation date of the lookup.
    """

    def __init__(
        self,
        message: str,
        *,
        jurisdiction: Optional[str] = None,
        program: Optional[str] = None,
        household_size: Optional[int] = None,
        as_of: Optional[date] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details=details, recoverable=False)
        self.jurisdiction = jurisdiction
        self.program = program
        self.household_size = household_size
        self.as_of = as_of

        if jurisdiction:
            self.details["jurisdiction"] = jurisdiction
        if program:
            self.details["program"] = program
        if household_size is not None:
            self.details["household_size"] = household_size
        if as_of is not None:
            self.details["as_of"] = as_of.isoformat()


class ExternalServiceError(EligibilityError):
    """Raised when the external calculation service fails or times out.

    The reconciler recovers from this locally by marking the local result
    unverified; it is logged but never surfaced as a request failure.

    Example:
        >>> raise ExternalServiceError(
        ...     "External calculator timed out",
        ...     service="benefit-calculator",
        ...     operation="calculate",
        ...     api_error="ReadTimeout",
        ... )
        ExternalServiceError: External calculator timed out
    """

    def __init__(
        self,
        message: str,
        *,
        service: Optional[str] = None,
        operation: Optional[str] = None,
        api_error: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.service = service
        self.operation = operation
        self.api_error = api_error

        if service:
            self.details["service"] = service
        if operation:
            self.details["operation"] = operation
        if api_error:
            self.details["api_error"] = api_error


class ConfigurationError(EligibilityError):
    """Raised when settings or catalog records are misconfigured.

    Configuration errors are fatal and need administrator intervention,
    e.g. a deduction schedule whose documented order the engine does not
    implement.
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details=details, recoverable=False)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "EligibilityError",
    "InvalidInputError",
    "CatalogMissingError",
    "ExternalServiceError",
    "ConfigurationError",
]
