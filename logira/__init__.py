"""Create Jira issues from application code."""

from logira.core.builder import EnvironmentBuilder, IssueBuilder, VersionBuilder
from logira.core.config import IssueType, JiraSettings, load_settings
from logira.core.exceptions import (
    IssueValidationError,
    LogiraError,
    NotConfiguredError,
    UnknownTokenError,
    UnsupportedOperationError,
)
from logira.core.issue import Issue
from logira.core.service import JiraConnection, configure, get_connection
from logira.visual.macros import CodeMacro, HtmlMacro, Macro, NoFormatMacro, PanelMacro, QuoteMacro

__all__ = [
    "CodeMacro",
    "EnvironmentBuilder",
    "HtmlMacro",
    "Issue",
    "IssueBuilder",
    "IssueType",
    "IssueValidationError",
    "JiraConnection",
    "JiraSettings",
    "LogiraError",
    "Macro",
    "NoFormatMacro",
    "NotConfiguredError",
    "PanelMacro",
    "QuoteMacro",
    "UnknownTokenError",
    "UnsupportedOperationError",
    "VersionBuilder",
    "configure",
    "get_connection",
    "load_settings",
]
