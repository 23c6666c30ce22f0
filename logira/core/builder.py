"""IssueBuilder: collects issue fields and creates the issue in Jira.

Setters return the builder so calls chain; nothing is validated until
:meth:`IssueBuilder.create`, and validation finishes before any network call.

    issue = (
        IssueBuilder()
        .project("TST")
        .summary("Payment failed")
        .description(exc)
        .affects_version("1.4.0")
        .create()
    )
"""

from __future__ import annotations

import base64
import getpass
import json
import os
import platform
import sys
from collections.abc import Callable, Mapping
from datetime import datetime
from importlib import metadata
from types import ModuleType
from typing import Any

import pytz
from packaging.version import Version

from .config import MASK, TIMEZONE, IssueType
from .exceptions import IssueValidationError
from .issue import Issue
from .mappers import render_exception_block
from .models import RemoteComponent, RemoteCustomFieldValue, RemoteIssue, RemoteVersion
from .service import JiraConnection, get_connection
from .text import truncate

VersionResolver = Callable[[Version], str]

# WSGI keys never copied verbatim into an issue
SENSITIVE_REQUEST_KEYS = frozenset({"HTTP_AUTHORIZATION", "HTTP_COOKIE", "HTTP_PROXY_AUTHORIZATION"})


class IssueBuilder:
    def __init__(self, connection: JiraConnection | None = None):
        self._connection = connection
        self._issue_type = 0
        self._summary: str | None = None
        self._exception: BaseException | None = None
        self._project_key: str | None = None
        self._assignee: str | None = None
        self._description: list[str] = []
        self._attachments: list[tuple[str, str]] = []
        self._custom_fields: list[tuple[int, list[str]]] = []
        self._affects_version_names: list[str] = []
        self._component_names: list[str] = []
        self._environment: list[str] = []

    @property
    def connection(self) -> JiraConnection:
        return self._connection or get_connection()

    # ------------------ Issue Fields ------------------
    def project(self, project_key: str) -> IssueBuilder:
        self._project_key = project_key
        return self

    def type(self, issue_type: int) -> IssueBuilder:
        """Set the issue type id. Defaults to ``IssueType.BUG``."""
        self._issue_type = issue_type
        return self

    def summary(self, summary: str) -> IssueBuilder:
        self._summary = summary
        return self

    def description(self, value) -> IssueBuilder:
        """Add to the description.

        Strings are appended as a line, macros (anything with ``render()``) are
        rendered immediately and appended, and an exception is kept and rendered
        as a code block when the issue is built.
        """
        if isinstance(value, BaseException):
            self._exception = value
        elif hasattr(value, "render"):
            self._description.append(value.render())
        else:
            self._description.append(str(value))
        return self

    def attachment(self, filename: str, payload: str | bytes) -> IssueBuilder:
        """Attach a file. ``payload`` is base64 text, or raw bytes to be encoded."""
        if isinstance(payload, bytes):
            payload = base64.b64encode(payload).decode("ascii")
        self._attachments.append((filename, payload))
        return self

    def custom_field(self, custom_field_id: int, *values: str) -> IssueBuilder:
        self._custom_fields.append((custom_field_id, list(values)))
        return self

    def assignee(self, username: str) -> IssueBuilder:
        self._assignee = username
        return self

    def component(self, name: str, *additional_names: str) -> IssueBuilder:
        """Add components by name. They must already exist in the project."""
        self._component_names.append(name)
        self._component_names.extend(additional_names)
        return self

    def affects_version(self, version_name: str | None = None, *additional_names: str):
        """Add affected versions by name, created in Jira when missing.

        Called without arguments, returns a :class:`VersionBuilder` that reads
        the version from package metadata instead. Creating versions requires
        project administrator rights for the Jira user.
        """
        if version_name is None and not additional_names:
            return VersionBuilder(self)
        if version_name is not None:
            self._affects_version_names.append(version_name)
        self._affects_version_names.extend(additional_names)
        return self

    def environment(self, environment: str | None = None):
        """Append environment text, or return an :class:`EnvironmentBuilder`."""
        if environment is None:
            return EnvironmentBuilder(self)
        self._environment.append(environment)
        return self

    # ------------------ Creation ------------------
    def create(self) -> Issue:
        """Create the issue and return a handle carrying the generated key."""
        if not self._summary:
            raise IssueValidationError("Summary")
        if not self._project_key:
            raise IssueValidationError("Project key")

        connection = self.connection
        affects_versions = self.create_affects_versions()
        components = self.resolve_components()
        record = self.create_remote_issue(affects_versions, components)
        attachments = self.create_remote_attachments()

        token = connection.get_token()
        created = connection.create_issue(token, record)

        if attachments is not None:
            names, payloads = attachments
            connection.add_attachments(token, created.key, names, payloads)

        return Issue.from_key(created.key, connection)

    def create_affects_versions(self) -> list[RemoteVersion] | None:
        """Look up each requested version in order, creating the missing ones."""
        if not self._affects_version_names:
            return None
        connection = self.connection
        return [
            connection.get_version(self._project_key, name)
            or connection.create_version(self._project_key, name)
            for name in self._affects_version_names
        ]

    def resolve_components(self) -> list[RemoteComponent] | None:
        if not self._component_names:
            return None
        connection = self.connection
        return [
            connection.get_component(self._project_key, name)
            or connection.create_component(self._project_key, name)
            for name in self._component_names
        ]

    def create_remote_attachments(self) -> tuple[list[str], list[str]] | None:
        if not self._attachments:
            return None
        names = [name for name, _ in self._attachments]
        payloads = [payload for _, payload in self._attachments]
        return names, payloads

    def create_remote_issue(
        self,
        affects_versions: list[RemoteVersion] | None = None,
        components: list[RemoteComponent] | None = None,
    ) -> RemoteIssue:
        """Build the wire record from the collected fields. Safe to call repeatedly."""
        max_length = self.connection.max_summary_length
        issue_type = self._issue_type or IssueType.BUG
        record = RemoteIssue(
            summary=truncate(self._summary, max_length),
            description="\n".join(self._description),
            project=self._project_key,
            type=str(issue_type),
            environment="\n".join(self._environment),
            assignee=self._assignee,
        )

        if self._summary is not None and len(self._summary) > max_length:
            if not record.description:
                record.description = self._summary
            else:
                record.description = self._summary + "\n\n" + record.description

        if self._exception is not None:
            record.description += render_exception_block(self._exception)

        if affects_versions is not None:
            record.affects_versions = list(affects_versions)
        if components is not None:
            record.components = list(components)

        record.custom_field_values = [
            RemoteCustomFieldValue(customfield_id=str(field_id), values=list(values))
            for field_id, values in self._custom_fields
        ]
        return record


class VersionBuilder:
    """Chooses how the affected version is read from package metadata."""

    def __init__(self, issue_builder: IssueBuilder):
        self._issue_builder = issue_builder

    def distribution_version(self, distribution: str, resolve: VersionResolver | None = None) -> IssueBuilder:
        """Use the version of an installed distribution, e.g. ``"my-app"``."""
        try:
            version = metadata.version(distribution)
        except metadata.PackageNotFoundError:
            raise ValueError(f"Distribution {distribution} is not installed") from None
        return self._add(version, resolve)

    def package_version(self, module: ModuleType, resolve: VersionResolver | None = None) -> IssueBuilder:
        """Use a module's ``__version__`` attribute."""
        version = getattr(module, "__version__", None)
        if not version:
            raise ValueError(f"Attribute __version__ is not declared on module {module.__name__}")
        return self._add(str(version), resolve)

    def from_callable(self, resolve_version_name: Callable[[], str]) -> IssueBuilder:
        return self._issue_builder.affects_version(resolve_version_name())

    def _add(self, version: str, resolve: VersionResolver | None) -> IssueBuilder:
        if resolve is not None:
            version = resolve(Version(version))
        return self._issue_builder.affects_version(version)


class EnvironmentBuilder:
    """Fills the issue environment from the running process or an inbound request."""

    def __init__(self, issue_builder: IssueBuilder):
        self._issue_builder = issue_builder

    def from_server(self) -> IssueBuilder:
        tz = pytz.timezone(self._issue_builder.connection.timezone or TIMEZONE)
        lines = [
            "************ Server ************",
            f"\tCommandLine: {' '.join(sys.argv)}",
            f"\tCurrentDirectory: {os.getcwd()}",
            f"\tIs64BitOperatingSystem: {platform.machine().endswith('64')}",
            f"\tIs64BitProcess: {sys.maxsize > 2**32}",
            f"\tMachineName: {platform.node()}",
            f"\tOSVersion: {platform.platform()}",
            f"\tProcessorCount: {os.cpu_count()}",
            f"\tExecutable: {sys.executable}",
            f"\tProcessId: {os.getpid()}",
            f"\tUserName: {_user_name()}",
            f"\tPythonVersion: {platform.python_version()}",
            f"\tTimestamp: {datetime.now(tz).isoformat()}",
        ]
        return self._issue_builder.environment("\n".join(lines))

    def from_client(self, request: Any = None) -> IssueBuilder:
        """Add an inbound request, given as a WSGI environ or an object exposing ``.environ``."""
        if request is None:
            raise ValueError("Request is not specified")
        environ = getattr(request, "environ", request)
        if not isinstance(environ, Mapping):
            raise TypeError(f"Cannot read a WSGI environ from {type(request).__name__}")
        safe = {key: (MASK if key in SENSITIVE_REQUEST_KEYS else value) for key, value in environ.items()}
        lines = [
            "************ Client ************",
            json.dumps(safe, indent=2, sort_keys=True, default=str),
        ]
        return self._issue_builder.environment("\n".join(lines))


def _user_name() -> str:
    try:
        return getpass.getuser()
    except OSError:
        return "(unknown)"
