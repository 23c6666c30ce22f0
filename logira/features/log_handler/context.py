"""Turn a logging.LogRecord into issue summary and description text."""

from __future__ import annotations

import logging
from dataclasses import dataclass


@dataclass(slots=True)
class RecordContext:
    summary: str
    description: str
    exception: BaseException | None = None


def build_record_context(record: logging.LogRecord, summary: str) -> RecordContext:
    lines = [
        f"Level: {record.levelname}",
        f"Logger: {record.name}",
        f"Location: {record.pathname}:{record.lineno} ({record.funcName})",
    ]
    exception = None
    if record.exc_info and record.exc_info[1] is not None:
        exception = record.exc_info[1]
    return RecordContext(summary=summary, description="\n".join(lines), exception=exception)
