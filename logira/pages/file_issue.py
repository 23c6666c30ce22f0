"""File Issue page: a form over IssueBuilder that shows the created issue."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import streamlit as st
from jira.exceptions import JIRAError

from logira.app import register_page
from logira.core.builder import IssueBuilder
from logira.core.config import IssueType
from logira.core.exceptions import LogiraError
from logira.core.service import JiraConnection

logger = logging.getLogger(__name__)

ISSUE_TYPES = {
    "Bug": IssueType.BUG,
    "Task": IssueType.TASK,
    "Improvement": IssueType.IMPROVEMENT,
    "New Feature": IssueType.NEW_FEATURE,
    "Story": IssueType.STORY,
}


@dataclass(slots=True)
class IssueForm:
    project: str = ""
    summary: str = ""
    issue_type: str = "Bug"
    description: str = ""
    versions: str = ""
    include_server_environment: bool = False
    attachments: list[tuple[str, bytes]] = field(default_factory=list)


def build_issue(form: IssueForm, connection: JiraConnection | None = None) -> IssueBuilder:
    builder = (
        IssueBuilder(connection)
        .project(form.project.strip())
        .summary(form.summary.strip())
        .type(ISSUE_TYPES.get(form.issue_type, IssueType.BUG))
    )
    if form.description.strip():
        builder.description(form.description.strip())
    versions = [v.strip() for v in form.versions.split(",") if v.strip()]
    if versions:
        builder.affects_version(*versions)
    if form.include_server_environment:
        builder.environment().from_server()
    for name, data in form.attachments:
        builder.attachment(name, data)
    return builder


@register_page("File Issue")
def file_issue_page():
    st.title("File a Jira Issue")
    if not st.session_state.get("jira_configured"):
        st.warning("Jira is not configured. Please use the Setup page.")
        return

    with st.form("file_issue"):
        form = IssueForm(
            project=st.text_input("Project key"),
            summary=st.text_input("Summary"),
            issue_type=st.selectbox("Type", list(ISSUE_TYPES)),
            description=st.text_area("Description"),
            versions=st.text_input("Affects versions (comma separated)"),
            include_server_environment=st.checkbox("Include server environment"),
        )
        uploads = st.file_uploader("Attachments", accept_multiple_files=True) or []
        submitted = st.form_submit_button("Create issue", type="primary")

    if not submitted:
        return
    form.attachments = [(upload.name, upload.getvalue()) for upload in uploads]
    try:
        issue = build_issue(form).create()
    except LogiraError as exc:
        st.error(str(exc))
        return
    except JIRAError as exc:
        error_msg = exc.text if hasattr(exc, "text") else str(exc)
        logger.error("Jira API error creating issue: %s", error_msg)
        st.error(f"Failed to create issue: {error_msg}")
        return
    st.success(f"Created [{issue.key}]({issue.url})")
