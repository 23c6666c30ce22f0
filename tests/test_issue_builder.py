import base64
import os
import types

import pytest

from logira.core.builder import IssueBuilder
from logira.core.config import IssueType
from logira.core.exceptions import IssueValidationError, NotConfiguredError, UnsupportedOperationError
from logira.core.service import JiraConnection
from logira.visual.macros import CodeMacro, QuoteMacro


@pytest.fixture
def builder(connection):
    return IssueBuilder(connection)


def test_create_fails_when_project_key_is_not_set(builder, fake_service):
    with pytest.raises(IssueValidationError, match="Project"):
        builder.summary("Summary").create()
    assert fake_service.calls == []


def test_create_fails_when_summary_is_not_set(builder, fake_service):
    with pytest.raises(IssueValidationError, match="Summary"):
        builder.project("TST").create()
    assert fake_service.calls == []


def test_create_fails_when_summary_is_empty(builder):
    with pytest.raises(IssueValidationError, match="Summary"):
        builder.project("TST").summary("").create()


def test_create_with_nothing_set_names_a_field(builder):
    with pytest.raises(IssueValidationError) as info:
        builder.create()
    assert "Summary" in str(info.value) or "Project" in str(info.value)


def test_validation_precedes_configuration_check():
    unconfigured = IssueBuilder(JiraConnection())
    with pytest.raises(IssueValidationError):
        unconfigured.project("TST").create()
    with pytest.raises(NotConfiguredError):
        unconfigured.summary("Summary").create()


def test_setters_return_the_builder(builder):
    assert builder.project("TST") is builder
    assert builder.type(IssueType.TASK) is builder
    assert builder.summary("s") is builder
    assert builder.description("d") is builder
    assert builder.attachment("a.txt", "YQ==") is builder
    assert builder.custom_field(10000, "x") is builder
    assert builder.affects_version("1.0") is builder
    assert builder.environment("env") is builder
    assert builder.assignee("bob") is builder
    assert builder.component("Backend") is builder


def test_summary_is_not_truncated_when_less_than_max(builder, connection):
    connection.max_summary_length = 10
    summary = "*" * 10
    record = builder.summary(summary).create_remote_issue()
    assert record.summary == summary
    assert record.description == ""


def test_description_is_unchanged_when_summary_is_at_max(builder, connection):
    connection.max_summary_length = 10
    summary = "0123456789"
    description = "  Steps:\n1. open\n\n2. crash \t"
    record = builder.summary(summary).description(description).create_remote_issue()
    assert record.summary == summary
    assert record.description == description


def test_summary_is_truncated_when_maxchars_is_exceeded(builder, connection):
    connection.max_summary_length = 10
    summary = "0123456789abcdefghij"
    record = builder.summary(summary).create_remote_issue()
    assert record.summary == "0123456789"
    assert record.description == summary


def test_truncated_summary_is_prepended_to_existing_description(builder, connection):
    connection.max_summary_length = 10
    summary = "0123456789abcdefghij"
    record = builder.summary(summary).description("Original text").create_remote_issue()
    assert record.summary == "0123456789"
    assert record.description == summary + "\n\nOriginal text"


def test_default_type_is_bug(builder):
    assert builder.summary("s").create_remote_issue().type == "1"
    assert builder.type(IssueType.STORY).create_remote_issue().type == "18"


def test_description_lines_and_macros(builder):
    record = (
        builder.summary("s")
        .description("first")
        .description(QuoteMacro(quote="quoted"))
        .description(CodeMacro(code="x = 1", title="Snippet"))
        .create_remote_issue()
    )
    assert record.description == "first\n{quote}quoted{quote}\n{code:title=Snippet}x = 1{code}"


def test_create_remote_issue_is_repeatable(builder, connection):
    connection.max_summary_length = 5
    builder.summary("a long summary").description("body")
    first = builder.create_remote_issue()
    second = builder.create_remote_issue()
    assert first == second


def test_environment_is_set(builder):
    record = builder.summary("test").project("test").environment("the environment").create_remote_issue()
    assert record.environment == "the environment"


def test_environment_is_set_from_server(builder):
    record = builder.summary("test").project("test").environment().from_server().create_remote_issue()
    assert "************ Server ************" in record.environment
    assert os.getcwd() in record.environment


def test_environment_from_client_masks_credentials(builder):
    environ = {
        "REQUEST_METHOD": "POST",
        "PATH_INFO": "/checkout",
        "HTTP_AUTHORIZATION": "Basic c2VjcmV0",
        "HTTP_COOKIE": "session=abc",
    }
    record = builder.summary("s").environment().from_client(environ).create_remote_issue()
    assert "************ Client ************" in record.environment
    assert "/checkout" in record.environment
    assert "c2VjcmV0" not in record.environment
    assert "session=abc" not in record.environment


def test_environment_from_client_reads_request_environ(builder):
    class Request:
        environ = {"PATH_INFO": "/orders"}

    record = builder.summary("s").environment().from_client(Request()).create_remote_issue()
    assert "/orders" in record.environment


def test_environment_from_client_requires_request(builder):
    with pytest.raises(ValueError, match="Request"):
        builder.environment().from_client()


def test_custom_fields_keep_order_and_duplicates(builder):
    record = (
        builder.summary("s")
        .custom_field(10010, "a", "b")
        .custom_field(10020)
        .custom_field(10010, "c")
        .create_remote_issue()
    )
    assert [(c.customfield_id, c.values) for c in record.custom_field_values] == [
        ("10010", ["a", "b"]),
        ("10020", []),
        ("10010", ["c"]),
    ]


def test_no_attachments_yields_no_payload(builder):
    assert builder.create_remote_attachments() is None


def test_attachments_are_parallel_lists(builder):
    builder.attachment("a.txt", "YQ==").attachment("b.bin", b"\x00\x01")
    names, payloads = builder.create_remote_attachments()
    assert names == ["a.txt", "b.bin"]
    assert payloads == ["YQ==", base64.b64encode(b"\x00\x01").decode("ascii")]


def test_create_submits_issue_and_returns_handle(builder, fake_service):
    issue = builder.project("TST").summary("Something broke").create()
    assert issue.key == "TST-123"
    assert issue.project_key == "TST"
    assert issue.number == 123
    assert issue.url == "https://jira.example.com/browse/TST-123"
    assert fake_service.call_names() == ["login", "create_issue"]


def test_create_skips_attachment_call_without_attachments(builder, fake_service):
    builder.project("TST").summary("s").create()
    assert "add_attachments" not in fake_service.call_names()


def test_create_uploads_attachments_to_created_issue(builder, fake_service):
    builder.project("TST").summary("s").attachment("log.txt", "bG9n").attachment("b.txt", "Yg==").create()
    assert fake_service.calls[-1] == ("add_attachments", "token-1", "TST-123", ["log.txt", "b.txt"], ["bG9n", "Yg=="])
    # one login for the issue itself
    assert fake_service.call_names().count("login") == 1


def test_create_resolves_and_creates_versions_in_order(builder, fake_service):
    builder.project("TST").summary("s").affects_version("1.0", "2.0").affects_version("2.0")
    builder.create()
    record = next(call[2] for call in fake_service.calls if call[0] == "create_issue")
    assert [v.name for v in record.affects_versions] == ["1.0", "2.0", "2.0"]
    assert record.affects_versions[0].id == "100"
    adds = [call for call in fake_service.calls if call[0] == "add_version"]
    assert adds == [("add_version", "TST", "2.0")]


def test_create_resolves_components_by_name(builder, fake_service):
    builder.project("TST").summary("s").component("backend").create()
    record = next(call[2] for call in fake_service.calls if call[0] == "create_issue")
    assert record.components[0].id == "200"


def test_create_fails_for_unknown_component(builder, fake_service):
    with pytest.raises(UnsupportedOperationError, match="Frontend"):
        builder.project("TST").summary("s").component("Frontend").create()
    assert "create_issue" not in fake_service.call_names()


def test_version_builder_from_package_version(builder):
    module = types.ModuleType("fake_module")
    module.__version__ = "2.3.4"

    builder.affects_version().package_version(module, lambda v: f"{v.major}.{v.minor}")
    builder.affects_version().package_version(module)
    assert builder._affects_version_names == ["2.3", "2.3.4"]


def test_version_builder_requires_version_attribute(builder):
    with pytest.raises(ValueError, match="__version__"):
        builder.affects_version().package_version(types.ModuleType("no_version"))


def test_version_builder_from_distribution(builder, monkeypatch):
    monkeypatch.setattr("logira.core.builder.metadata.version", lambda name: "5.1.0")
    builder.affects_version().distribution_version("my-app")
    assert builder._affects_version_names == ["5.1.0"]


def test_version_builder_unknown_distribution(builder):
    with pytest.raises(ValueError, match="not installed"):
        builder.affects_version().distribution_version("surely-not-installed-distribution-xyz")
