"""Mapping builder state and wire records into Jira text and REST fields."""

from __future__ import annotations

import builtins
import traceback
from typing import Any

from .models import RemoteIssue

INNER_TRACE_SEPARATOR = "\n   --- End of inner exception stack trace ---"
EXCEPTION_BLOCK_START = "\n{code:title=Exception}\n"
EXCEPTION_BLOCK_END = "\n{code}"


def exception_type_name(exc: BaseException) -> str:
    cls = type(exc)
    if cls.__module__ == builtins.__name__:
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def exception_chain(exc: BaseException) -> list[BaseException]:
    """Return ``exc`` followed by its causes, outermost first."""
    chain: list[BaseException] = []
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        chain.append(current)
        seen.add(id(current))
        if current.__cause__ is not None:
            current = current.__cause__
        elif not current.__suppress_context__:
            current = current.__context__
        else:
            current = None
    return chain


def _stack_trace(exc: BaseException) -> str | None:
    if exc.__traceback__ is None:
        return None
    return "".join(traceback.format_tb(exc.__traceback__)).rstrip("\n")


def format_exception_chain(exc: BaseException) -> tuple[str, str]:
    """Render an exception chain as a message line and a stack-trace block.

    The message line lists the chain outermost first, joined by `` ---> ``.
    The traces are prepended one by one while walking inwards, so the text
    reads with the innermost trace first and the outermost last, each inner
    trace followed by the end-of-inner-trace marker.
    """
    outer, *inners = exception_chain(exc)
    message = f"{exception_type_name(outer)}: {outer}"
    stacktrace = ""
    outer_trace = _stack_trace(outer)
    if outer_trace is not None:
        stacktrace = "\n" + outer_trace

    for inner in inners:
        message += f" ---> {exception_type_name(inner)}: {inner}"
        inner_trace = _stack_trace(inner)
        if inner_trace is not None:
            stacktrace = "\n" + inner_trace + INNER_TRACE_SEPARATOR + stacktrace

    return message + "\n", stacktrace


def render_exception_block(exc: BaseException) -> str:
    message, stacktrace = format_exception_chain(exc)
    return EXCEPTION_BLOCK_START + message + stacktrace + EXCEPTION_BLOCK_END


def _ref(item_id: str | None, name: str | None) -> dict[str, str]:
    return {"id": item_id} if item_id else {"name": name}


def record_to_fields(record: RemoteIssue) -> dict[str, Any]:
    """Translate a wire record into the ``fields`` payload of a REST create call.

    Custom field values go out as a scalar when there is one value and as a
    list otherwise. Repeated field ids collapse here with the last one winning.
    """
    fields: dict[str, Any] = {
        "project": {"key": record.project},
        "summary": record.summary,
        "issuetype": {"id": record.type},
    }
    if record.description:
        fields["description"] = record.description
    if record.environment:
        fields["environment"] = record.environment
    if record.affects_versions:
        fields["versions"] = [_ref(v.id, v.name) for v in record.affects_versions]
    if record.components:
        fields["components"] = [_ref(c.id, c.name) for c in record.components]
    if record.assignee:
        fields["assignee"] = {"name": record.assignee}
    for custom in record.custom_field_values:
        values = list(custom.values)
        fields[f"customfield_{custom.customfield_id}"] = values[0] if len(values) == 1 else values
    return fields
