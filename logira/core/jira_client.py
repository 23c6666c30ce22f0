"""Jira remote service adapter (token-keyed sessions over the REST API)."""

from __future__ import annotations

import base64
import hashlib
import io
import secrets
from collections.abc import Sequence
from dataclasses import replace
from typing import Protocol

from jira import JIRA

from .config import REST_API_VERSION
from .exceptions import UnknownTokenError
from .mappers import record_to_fields
from .models import RemoteComponent, RemoteIssue, RemoteVersion


class RemoteService(Protocol):
    """Call/response contract of the remote issue tracker."""

    def login(self, username: str, password: str) -> str: ...

    def create_issue(self, token: str, record: RemoteIssue) -> RemoteIssue: ...

    def add_attachments(
        self, token: str, issue_key: str, names: Sequence[str], payloads: Sequence[str]
    ) -> None: ...

    def get_versions(self, token: str, project_key: str) -> list[RemoteVersion]: ...

    def add_version(self, token: str, project_key: str, version: RemoteVersion) -> RemoteVersion: ...

    def get_components(self, token: str, project_key: str) -> list[RemoteComponent]: ...


class JiraRemoteService:
    def __init__(self, server: str, client_factory=JIRA):
        self.server = server.rstrip("/")
        self._client_factory = client_factory
        # One authenticated client per credential pair, reused across logins
        self._logins: dict[str, tuple[str, JIRA]] = {}
        # Opaque token handed out by login() -> client
        self._sessions: dict[str, JIRA] = {}

    def _client(self, token: str) -> JIRA:
        try:
            return self._sessions[token]
        except KeyError:
            raise UnknownTokenError("Token was not issued by this service") from None

    @staticmethod
    def _credentials_key(username: str, password: str) -> str:
        return hashlib.sha256(f"{username}\0{password}".encode()).hexdigest()

    def login(self, username: str, password: str) -> str:
        key = self._credentials_key(username, password)
        existing = self._logins.get(key)
        if existing is not None:
            token, client = existing
            # Fails with JIRAError (401) once the credentials are revoked
            client.myself()
            return token

        client = self._client_factory(
            server=self.server,
            basic_auth=(username, password),
            options={"rest_api_version": REST_API_VERSION},
        )
        # Fails with JIRAError (401) on bad credentials
        client.myself()
        token = secrets.token_hex(16)
        self._logins[key] = (token, client)
        self._sessions[token] = client
        return token

    def close(self) -> None:
        """Close every authenticated client and forget the issued tokens."""
        for _, client in self._logins.values():
            client.close()
        self._logins.clear()
        self._sessions.clear()

    def create_issue(self, token: str, record: RemoteIssue) -> RemoteIssue:
        issue = self._client(token).create_issue(fields=record_to_fields(record))
        return replace(record, key=issue.key, id=str(issue.id))

    def add_attachments(
        self, token: str, issue_key: str, names: Sequence[str], payloads: Sequence[str]
    ) -> None:
        if len(names) != len(payloads):
            raise ValueError("Attachment names and payloads differ in length")
        client = self._client(token)
        for name, payload in zip(names, payloads):
            data = io.BytesIO(base64.b64decode(payload))
            client.add_attachment(issue=issue_key, attachment=data, filename=name)

    def get_versions(self, token: str, project_key: str) -> list[RemoteVersion]:
        return [
            RemoteVersion(
                name=v.name,
                id=str(v.id),
                released=bool(getattr(v, "released", False)),
                archived=bool(getattr(v, "archived", False)),
            )
            for v in self._client(token).project_versions(project_key)
        ]

    def add_version(self, token: str, project_key: str, version: RemoteVersion) -> RemoteVersion:
        created = self._client(token).create_version(
            version.name,
            project_key,
            released=version.released,
            archived=version.archived,
        )
        return RemoteVersion(name=created.name, id=str(created.id))

    def get_components(self, token: str, project_key: str) -> list[RemoteComponent]:
        return [
            RemoteComponent(name=c.name, id=str(c.id))
            for c in self._client(token).project_components(project_key)
        ]
