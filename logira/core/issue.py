"""Handle for an issue created through the IssueBuilder."""

from __future__ import annotations

from dataclasses import dataclass, field

from .exceptions import NotConfiguredError
from .service import JiraConnection, get_connection


@dataclass(frozen=True, slots=True)
class Issue:
    key: str
    project_key: str
    number: int
    connection: JiraConnection = field(default_factory=get_connection, repr=False, compare=False)

    @classmethod
    def from_key(cls, key: str, connection: JiraConnection | None = None) -> Issue:
        """Parse a key such as ``"TST-123"``. Raises ``ValueError`` when malformed."""
        project_key, sep, number = key.rpartition("-")
        if not sep or not project_key or not number.isdigit():
            raise ValueError(f"Malformed issue key: {key!r}")
        return cls(
            key=key,
            project_key=project_key,
            number=int(number),
            connection=connection or get_connection(),
        )

    @property
    def url(self) -> str:
        """Browse URL, built from the connection's current settings."""
        prefix = self.connection.browse_issue_url
        if prefix is None:
            raise NotConfiguredError()
        return prefix + self.key
