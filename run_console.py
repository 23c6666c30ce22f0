"""Convenience launcher for the Streamlit filing console.

Usage:
  streamlit run run_console.py

Automatically imports every module in ``logira/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
"""

from importlib import import_module
from pathlib import Path

import streamlit as st

from logira.app import main
from logira.core.config import load_settings
from logira.core.service import get_connection
from logira.pages.setup import settings_from_secrets

st.set_page_config(layout="wide")


def _auto_configure():
    """Configure Jira from Streamlit secrets, falling back to logira.yaml and env."""
    if st.session_state.get("jira_configured"):
        return
    settings = settings_from_secrets(st.secrets)
    if not settings.complete:
        settings = load_settings()
    if settings.complete:
        get_connection().configure_from_settings(settings)
        st.session_state["jira_configured"] = True
        st.sidebar.success("Jira connection configured.")
    else:
        st.sidebar.warning("Jira settings not found. Please use the Setup page.")


_auto_configure()

PAGES_DIR = Path(__file__).parent / "logira" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    import_module(f"logira.pages.{py.stem}")

if __name__ == "__main__":
    main()
