"""JiraConnection: connection settings plus the calls the issue builder makes.

A module-level default connection backs :func:`configure` so applications can
set Jira up once per process. Reconfiguring replaces every setting in turn
without locking; a concurrent reader may see a half-updated connection, and
the last ``configure`` call to finish wins.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from .config import BROWSE_PATH, MAX_SUMMARY_LENGTH, JiraSettings
from .exceptions import NotConfiguredError, UnsupportedOperationError
from .jira_client import JiraRemoteService, RemoteService
from .models import RemoteComponent, RemoteIssue, RemoteVersion
from .text import ensure_trailing, mask, to_json

logger = logging.getLogger(__name__)

ServiceFactory = Callable[[str], RemoteService]


class JiraConnection:
    def __init__(
        self,
        service_factory: ServiceFactory = JiraRemoteService,
        max_summary_length: int = MAX_SUMMARY_LENGTH,
    ):
        self._service_factory = service_factory
        self.max_summary_length = max_summary_length
        self.timezone: str | None = None
        self.url: str | None = None
        self.username: str | None = None
        self._password: str | None = None
        self.browse_issue_url: str | None = None
        self.service: RemoteService | None = None
        self.is_configured = False

    def configure(self, url: str, username: str, password: str) -> None:
        """Point the connection at a Jira site, replacing any earlier settings.

        Parameters
        ----------
        url : str
            Base URL of the Jira site, e.g. ``https://your-jira-site.com``.
        username, password : str
            Credentials used by :meth:`get_token`.
        """
        self.url = url
        self.username = username
        self._password = password
        self.browse_issue_url = ensure_trailing(url, "/") + BROWSE_PATH
        self.service = self._service_factory(url)
        self.is_configured = True
        logger.debug(
            "JIRA was configured with url, username, password: '%s', '%s', '%s'",
            url,
            username,
            mask(password),
        )

    def configure_from_settings(self, settings: JiraSettings) -> None:
        if not settings.complete:
            raise NotConfiguredError("JIRA settings need url, username and password")
        self.max_summary_length = settings.max_summary_length
        self.timezone = settings.timezone
        self.configure(settings.url, settings.username, settings.password)

    def _require_configured(self) -> RemoteService:
        if not self.is_configured or self.service is None:
            raise NotConfiguredError()
        return self.service

    # ------------------ Remote Calls ------------------
    def get_token(self) -> str:
        service = self._require_configured()
        token = service.login(self.username, self._password)
        logger.debug("Service.login returned token: %s", mask(token))
        return token

    def create_issue(self, token: str, record: RemoteIssue) -> RemoteIssue:
        service = self._require_configured()
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Creating issue:\n%s", to_json(record))
        created = service.create_issue(token, record)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Successfully created issue:\n%s", to_json(created))
        return created

    def add_attachments(
        self, token: str, issue_key: str, names: Sequence[str], payloads: Sequence[str]
    ) -> None:
        service = self._require_configured()
        logger.debug("Adding attachments to issue %s: %s", issue_key, ", ".join(names))
        service.add_attachments(token, issue_key, list(names), list(payloads))

    def get_version(self, project_key: str, name: str) -> RemoteVersion | None:
        """Find a project version by name, ignoring case. ``None`` when absent."""
        service = self._require_configured()
        wanted = name.casefold()
        for version in service.get_versions(self.get_token(), project_key):
            if version.name is not None and version.name.casefold() == wanted:
                return version
        return None

    def create_version(self, project_key: str, name: str) -> RemoteVersion:
        service = self._require_configured()
        logger.debug("Creating version %s in project %s", name, project_key)
        return service.add_version(self.get_token(), project_key, RemoteVersion(name=name))

    def get_component(self, project_key: str, name: str) -> RemoteComponent | None:
        """Find a project component by name, ignoring case. ``None`` when absent."""
        service = self._require_configured()
        wanted = name.casefold()
        for component in service.get_components(self.get_token(), project_key):
            if component.name is not None and component.name.casefold() == wanted:
                return component
        return None

    def create_component(self, project_key: str, name: str) -> RemoteComponent:
        raise UnsupportedOperationError(
            f"Cannot create component '{name}' in project '{project_key}': "
            "the remote service does not support creating components"
        )


_default_connection = JiraConnection()


def get_connection() -> JiraConnection:
    """Return the process-wide connection used when none is passed explicitly."""
    return _default_connection


def configure(url: str, username: str, password: str) -> JiraConnection:
    """Configure the process-wide connection. Must run before issues are created."""
    _default_connection.configure(url, username, password)
    return _default_connection
