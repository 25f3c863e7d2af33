"""Core document model produced by the help compiler."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class HeadingLevel(enum.IntEnum):
    TITLE = 1
    CAPTION = 2
    SUB_CAPTION = 3
    SUB_SUB_CAPTION = 4


@dataclass(slots=True)
class PlainText:
    text: str


@dataclass(slots=True)
class StyledText:
    text: str
    bold: bool = False
    italic: bool = False


@dataclass(slots=True)
class Heading:
    level: HeadingLevel
    text: str


@dataclass(slots=True)
class Image:
    """Logical image reference; the renderer looks the file up by name."""

    name: str


@dataclass(slots=True)
class LinkTarget:
    id: int


@dataclass(slots=True)
class Link:
    target_id: int
    display_text: str


@dataclass(slots=True)
class ExternalLink:
    url: str
    display_text: str


@dataclass(slots=True)
class PendingReference:
    """Bracketed reference waiting for the resolver.

    Never present in a document returned by the compiler.
    """

    target: str
    display_text: str = ""
    line: int = 0
    column: int | None = None


DocPart = PlainText | StyledText | Heading | Image | LinkTarget | Link | ExternalLink | PendingReference


@dataclass(slots=True)
class Variable:
    value: str
    line: int


@dataclass(slots=True)
class Document:
    title: str | None = None
    parts: list[DocPart] = field(default_factory=list)
