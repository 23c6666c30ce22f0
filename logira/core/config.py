"""Central configuration, constants, issue type ids, and connection settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

# =============================================================================
# Jira Connection Settings
# =============================================================================
REST_API_VERSION = "2"
BROWSE_PATH = "browse/"
TIMEZONE = "UTC"
SETTINGS_FILENAME = "logira.yaml"

# The summary is truncated past this many characters; the full text moves into
# the description.
MAX_SUMMARY_LENGTH = 50

# Placeholder written instead of passwords, tokens and auth headers
MASK = "********"


# =============================================================================
# Issue Types
# =============================================================================
class IssueType:
    """Default Jira issue type ids."""

    BUG = 1
    NEW_FEATURE = 2
    TASK = 3
    IMPROVEMENT = 4
    CONFIGURATION = 7
    DOCUMENTATION = 8
    FEATURE_REQUEST = 10
    STORY = 18


# Environment variables overlaying the YAML file
ENV_VARS: dict[str, str] = {
    "url": "JIRA_URL",
    "username": "JIRA_USERNAME",
    "password": "JIRA_PASSWORD",
    "max_summary_length": "JIRA_MAX_SUMMARY_LENGTH",
    "timezone": "LOGIRA_TIMEZONE",
}


@dataclass(slots=True)
class JiraSettings:
    url: str | None = None
    username: str | None = None
    password: str | None = None
    max_summary_length: int = MAX_SUMMARY_LENGTH
    timezone: str = TIMEZONE

    @property
    def complete(self) -> bool:
        return bool(self.url and self.username and self.password)

    def __repr__(self) -> str:
        password = MASK if self.password else None
        return (
            f"JiraSettings(url={self.url!r}, username={self.username!r}, password={password!r}, "
            f"max_summary_length={self.max_summary_length!r}, timezone={self.timezone!r})"
        )


def load_settings(path: str | Path | None = None, environ=None) -> JiraSettings:
    """Load connection settings from YAML, then overlay environment variables.

    Parameters
    ----------
    path : str or Path, optional
        YAML file with a ``jira:`` section. Defaults to ``logira.yaml`` in the
        current working directory; a missing file yields defaults.
    environ : mapping, optional
        Environment to read overrides from (``os.environ`` when omitted).

    Returns
    -------
    JiraSettings
    """
    environ = os.environ if environ is None else environ
    yaml_path = Path(path) if path is not None else Path.cwd() / SETTINGS_FILENAME
    data: dict = {}
    if yaml_path.exists():
        loaded = yaml.safe_load(yaml_path.read_text()) or {}
        data = dict(loaded.get("jira") or {})

    for name, var in ENV_VARS.items():
        value = environ.get(var)
        if value:
            data[name] = value

    settings = JiraSettings()
    settings.url = data.get("url") or None
    settings.username = data.get("username") or None
    settings.password = data.get("password") or None
    if data.get("max_summary_length") is not None:
        settings.max_summary_length = int(data["max_summary_length"])
    if data.get("timezone"):
        settings.timezone = str(data["timezone"])
    return settings
