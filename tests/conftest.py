"""Test configuration ensuring local package import when editable install not active.

If users invoke `pytest` outside the project's virtualenv, we still add the project
root to sys.path so `import logira` works. Also provides a recording fake of the
remote Jira service so no test touches the network.
"""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from logira.core.models import RemoteComponent, RemoteVersion  # noqa: E402
from logira.core.service import JiraConnection  # noqa: E402


class FakeService:
    def __init__(self, url="https://jira.example.com"):
        self.url = url
        self.calls = []
        self.versions = {"TST": [RemoteVersion(name="1.0", id="100")]}
        self.components = {"TST": [RemoteComponent(name="Backend", id="200")]}
        self.next_number = 123

    def login(self, username, password):
        self.calls.append(("login", username))
        return "token-1"

    def create_issue(self, token, record):
        self.calls.append(("create_issue", token, record))
        key = f"{record.project}-{self.next_number}"
        self.next_number += 1
        return replace(record, key=key, id="9")

    def add_attachments(self, token, issue_key, names, payloads):
        self.calls.append(("add_attachments", token, issue_key, list(names), list(payloads)))

    def get_versions(self, token, project_key):
        self.calls.append(("get_versions", project_key))
        return list(self.versions.get(project_key, []))

    def add_version(self, token, project_key, version):
        self.calls.append(("add_version", project_key, version.name))
        created = RemoteVersion(name=version.name, id=str(300 + len(self.calls)))
        self.versions.setdefault(project_key, []).append(created)
        return created

    def get_components(self, token, project_key):
        self.calls.append(("get_components", project_key))
        return list(self.components.get(project_key, []))

    def call_names(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def fake_service():
    return FakeService()


@pytest.fixture
def connection(fake_service):
    conn = JiraConnection(service_factory=lambda url: fake_service)
    conn.configure("https://jira.example.com", "user", "pass")
    return conn
