"""Wire records exchanged with the Jira service."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class RemoteVersion:
    name: str
    id: str | None = None
    released: bool = False
    archived: bool = False


@dataclass(slots=True)
class RemoteComponent:
    name: str | None = None
    id: str | None = None


@dataclass(slots=True)
class RemoteCustomFieldValue:
    customfield_id: str
    values: list[str] = field(default_factory=list)


@dataclass(slots=True)
class RemoteIssue:
    summary: str | None = None
    description: str | None = None
    project: str | None = None
    type: str | None = None
    environment: str | None = None
    affects_versions: list[RemoteVersion] = field(default_factory=list)
    custom_field_values: list[RemoteCustomFieldValue] = field(default_factory=list)
    assignee: str | None = None
    components: list[RemoteComponent] = field(default_factory=list)
    # Assigned by the service on creation
    key: str | None = None
    id: str | None = None
