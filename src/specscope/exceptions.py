"""Exception hierarchy for specscope.

All exceptions inherit from :class:`SpecscopeError`, which carries an
``exit_code`` attribute taken from :mod:`specscope.exit_codes`.
:func:`specscope.app.main` catches ``SpecscopeError`` and exits with that
code; anything else produces a crash log.

The three spec-loading errors are terminal for a parse attempt: when any of
them is raised no endpoints are produced.

Subclass hierarchy::

    SpecscopeError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- NotFoundError       (exit 4)
    +-- FetchError          (exit 6)
    +-- RequestError        (exit 6)
    +-- ParseError          (exit 7)
    +-- InvalidSpecError    (exit 7)
    +-- ConfigError         (exit 1)
"""

from __future__ import annotations

from specscope.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SPEC_ERROR,
)


class SpecscopeError(Exception):
    """Base exception for all specscope errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecscopeError):
    """Raised for malformed CLI arguments (e.g. ``-P`` without ``=``)."""

    exit_code = EXIT_INVALID_USAGE


class NotFoundError(SpecscopeError):
    """Raised when an endpoint id, saved spec, or history entry is unknown."""

    exit_code = EXIT_NOT_FOUND


class FetchError(SpecscopeError):
    """Raised when a spec document cannot be retrieved.

    Covers non-2xx responses, network failures, and unreadable local files.
    For HTTP failures ``status_code`` and ``reason`` are populated.
    """

    exit_code = EXIT_CONNECTION_ERROR

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        reason: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class RequestError(SpecscopeError):
    """Raised on network-level failures while sending a built request."""

    exit_code = EXIT_CONNECTION_ERROR


class ParseError(SpecscopeError):
    """Raised when spec text is not valid JSON/YAML or is not a mapping."""

    exit_code = EXIT_SPEC_ERROR


class InvalidSpecError(SpecscopeError):
    """Raised when a parsed document lacks ``paths`` or both version markers."""

    exit_code = EXIT_SPEC_ERROR


class ConfigError(SpecscopeError):
    """Raised for an unreadable or invalid configuration file."""

    exit_code = EXIT_GENERIC_FAILURE
