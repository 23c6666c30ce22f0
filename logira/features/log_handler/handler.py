"""logging.Handler that files a Jira issue for every record it handles."""

from __future__ import annotations

import logging
import threading

from logira.core.builder import IssueBuilder
from logira.core.config import IssueType
from logira.core.service import JiraConnection

from .context import build_record_context

logger = logging.getLogger(__name__)


class JiraHandler(logging.Handler):
    """Create an issue in ``project_key`` for each emitted record.

    The summary is the formatted record when a formatter is set, otherwise the
    bare message; the builder truncates it and keeps the overflow in the
    description. Records logged while this handler is already filing an issue
    on the same thread (by logira, the jira library or anything it calls) are
    skipped, as are records from logira's own loggers.
    """

    def __init__(
        self,
        project_key: str,
        issue_type: int = IssueType.BUG,
        *,
        assignee: str | None = None,
        component: str | None = None,
        connection: JiraConnection | None = None,
        level: int = logging.ERROR,
    ):
        super().__init__(level)
        self.project_key = project_key
        self.issue_type = issue_type
        self.assignee = assignee
        self.component = component
        self.connection = connection
        self._local = threading.local()

    def build_issue(self, record: logging.LogRecord) -> IssueBuilder:
        summary = self.format(record) if self.formatter is not None else record.getMessage()
        ctx = build_record_context(record, summary)
        builder = (
            IssueBuilder(self.connection)
            .project(self.project_key)
            .type(self.issue_type)
            .summary(ctx.summary)
            .description(ctx.description)
        )
        if ctx.exception is not None:
            builder.description(ctx.exception)
        if self.assignee:
            builder.assignee(self.assignee)
        if self.component:
            builder.component(self.component)
        return builder

    def emit(self, record: logging.LogRecord) -> None:
        if record.name == "logira" or record.name.startswith("logira."):
            return
        if getattr(self._local, "emitting", False):
            return
        self._local.emitting = True
        try:
            issue = self.build_issue(record).create()
            logger.debug("Created issue: %s", issue.key)
        except Exception:
            self.handleError(record)
        finally:
            self._local.emitting = False


def attach_handler(
    target: logging.Logger | str | None,
    project_key: str,
    level: int = logging.ERROR,
    **kwargs,
) -> JiraHandler:
    """Install a :class:`JiraHandler` on ``target`` (root logger when ``None``)."""
    log = target if isinstance(target, logging.Logger) else logging.getLogger(target)
    handler = JiraHandler(project_key, level=level, **kwargs)
    log.addHandler(handler)
    return handler
