"""
Error Definitions for gangsched

This module defines the exception classes raised by the admission checker,
the resource scorer and the normalizer, so hosts can tell configuration
mistakes apart from per-candidate failures and protocol violations.
"""

from typing import Any, Dict, Optional


class GangSchedError(Exception):
    """Base exception class for all gangsched errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ConfigurationError(GangSchedError):
    """Raised when configuration is invalid. Fatal at startup."""

    def __init__(self, field: str, value: Any, expected: str, **details):
        message = f"Invalid configuration for {field}: got {value!r}, expected {expected}"

        super().__init__(message, {"field": field, "value": value, "expected": expected, **details})
        self.field = field
        self.value = value
        self.expected = expected


class InvalidAdmissionInput(GangSchedError):
    """Raised when a job's quorum cannot be read as a non-negative integer.

    The admission checker catches this and turns it into a rejection.
    """

    def __init__(self, job_id: str, value: Any, **details):
        message = f"Invalid quorum for job {job_id}: {value!r}"

        super().__init__(message, {"job_id": job_id, "value": value, **details})
        self.job_id = job_id
        self.value = value


class ResourceOverflowError(GangSchedError):
    """Raised when an allocatable quantity does not fit the signed score width."""

    def __init__(self, candidate: str, quantity: int, limit: int, **details):
        message = f"Allocatable resource of {candidate} overflows score range: {quantity} > {limit}"

        super().__init__(
            message, {"candidate": candidate, "quantity": quantity, "limit": limit, **details}
        )
        self.candidate = candidate
        self.quantity = quantity
        self.limit = limit


class InvalidResourceError(GangSchedError):
    """Raised when the inventory reports an unusable allocatable quantity for a node."""

    def __init__(self, candidate: str, value: Any, **details):
        message = f"Invalid allocatable resource for {candidate}: {value!r}"

        super().__init__(message, {"candidate": candidate, "value": value, **details})
        self.candidate = candidate
        self.value = value


class EmptyBatchError(GangSchedError):
    """Raised when the normalizer is handed a batch with no entries."""

    def __init__(self, job_id: Optional[str] = None, **details):
        if job_id:
            message = f"Cannot normalize an empty score batch for job {job_id}"
        else:
            message = "Cannot normalize an empty score batch"

        super().__init__(message, {"job_id": job_id, **details} if job_id else details)
        self.job_id = job_id


class UnknownNodeError(GangSchedError, KeyError):
    """Raised when the resource inventory has no entry for a node."""

    def __init__(self, name: str, **details):
        super().__init__(f"Unknown node: {name}", {"node": name, **details})
        self.name = name

    def __str__(self) -> str:
        return GangSchedError.__str__(self)


def raise_configuration_error(field: str, value: Any, expected: str, **details):
    """Raise a configuration error with helpful context."""
    suggestions = {
        "mode": "Set GANGSCHED_MODE to Least or Most",
        "log_level": "Use one of DEBUG, INFO, WARNING, ERROR, CRITICAL",
        "log_format": "Use console or json",
        "score_range": "Make sure GANGSCHED_MIN_SCORE <= GANGSCHED_MAX_SCORE",
    }

    suggestion = suggestions.get(field.lower())
    if suggestion:
        details["suggestion"] = suggestion

    raise ConfigurationError(field, value, expected, **details)
