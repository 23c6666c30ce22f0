"""Errors raised by logira before or instead of talking to Jira.

Failures reported by Jira itself (``jira.exceptions.JIRAError`` and transport
errors from ``requests``) are not wrapped; they reach the caller unchanged.
"""

from __future__ import annotations


class LogiraError(Exception):
    """Base class for logira errors."""


class IssueValidationError(LogiraError):
    """A required issue field is missing. Raised before any network activity."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"{field_name} is required")


class NotConfiguredError(LogiraError):
    """A Jira operation was invoked before the connection was configured."""

    def __init__(self, message: str = "JIRA is not configured"):
        super().__init__(message)


class UnsupportedOperationError(LogiraError):
    """The remote contract cannot perform the requested operation."""


class UnknownTokenError(LogiraError):
    """A token was presented that the remote adapter never issued."""
