"""File Jira issues from the standard logging pipeline."""

from logira.features.log_handler.context import RecordContext, build_record_context
from logira.features.log_handler.handler import JiraHandler, attach_handler

__all__ = [
    "JiraHandler",
    "RecordContext",
    "attach_handler",
    "build_record_context",
]
