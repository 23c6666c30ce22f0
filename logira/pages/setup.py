"""Connection setup page: collect Jira credentials and configure logira."""

from __future__ import annotations

from collections.abc import Mapping

import streamlit as st

from logira.app import register_page
from logira.core.config import JiraSettings
from logira.core.service import get_connection


def settings_from_secrets(secrets: Mapping) -> JiraSettings:
    """Read ``JIRA_URL``/``JIRA_USERNAME``/``JIRA_PASSWORD`` from a ``[jira]`` section or top level."""
    section = secrets.get("jira", {}) or {}

    def pick(name: str):
        return section.get(name) or secrets.get(name)

    return JiraSettings(
        url=pick("JIRA_URL"),
        username=pick("JIRA_USERNAME"),
        password=pick("JIRA_PASSWORD"),
    )


@register_page("Setup / Connection")
def setup_page():
    st.title("Jira Connection Setup")
    st.caption("Enter credentials (use secrets manager in production).")

    defaults = settings_from_secrets(st.secrets)
    url = st.text_input("Jira URL", value=st.session_state.get("jira_url") or defaults.url or "")
    username = st.text_input(
        "Username",
        value=st.session_state.get("jira_username") or defaults.username or "",
    )
    password = st.text_input("Password", type="password", value=defaults.password or "")
    max_length = st.number_input(
        "Max summary length",
        min_value=10,
        max_value=255,
        value=get_connection().max_summary_length,
    )

    if st.button("Configure", type="primary"):
        if not (url and username and password):
            st.error("All fields required.")
            return
        connection = get_connection()
        connection.max_summary_length = int(max_length)
        connection.configure(url, username, password)
        st.session_state["jira_url"] = url
        st.session_state["jira_username"] = username
        st.session_state["jira_configured"] = True
        st.success("Connection configured.")

    if get_connection().is_configured:
        st.info(f"Issues will link to {get_connection().browse_issue_url}")
