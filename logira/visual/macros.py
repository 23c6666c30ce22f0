"""Jira wiki-markup macros that can be added to an issue description.

See the Jira text formatting notation; every macro wraps its contents
between a pair of ``{name}`` markers, optionally with a title.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class Macro(Protocol):
    def render(self) -> str: ...


def _open(name: str, title: str | None) -> str:
    return f"{{{name}:title={title or ''}}}"


@dataclass(slots=True)
class CodeMacro:
    """``{code:title=...}code{code}``"""

    code: str = ""
    title: str | None = None

    def render(self) -> str:
        return f"{_open('code', self.title)}{self.code}{{code}}"


@dataclass(slots=True)
class NoFormatMacro:
    contents: str = ""
    title: str | None = None

    def render(self) -> str:
        return f"{_open('noformat', self.title)}{self.contents}{{noformat}}"


@dataclass(slots=True)
class PanelMacro:
    contents: str = ""
    title: str | None = None

    def render(self) -> str:
        return f"{_open('panel', self.title)}{self.contents}{{panel}}"


@dataclass(slots=True)
class QuoteMacro:
    quote: str = ""

    def render(self) -> str:
        return f"{{quote}}{self.quote}{{quote}}"


@dataclass(slots=True)
class HtmlMacro:
    contents: str = ""

    def render(self) -> str:
        return f"{{html}}{self.contents}{{html}}"
