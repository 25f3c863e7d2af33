"""Parser package."""

from .base import (
    Document,
    DocPart,
    ExternalLink,
    Heading,
    HeadingLevel,
    Image,
    Link,
    LinkTarget,
    PendingReference,
    PlainText,
    StyledText,
    Variable,
)
from .help_parser import HelpParser, compile_help

__all__ = [
    "Document",
    "DocPart",
    "ExternalLink",
    "Heading",
    "HeadingLevel",
    "Image",
    "Link",
    "LinkTarget",
    "PendingReference",
    "PlainText",
    "StyledText",
    "Variable",
    "HelpParser",
    "compile_help",
]
