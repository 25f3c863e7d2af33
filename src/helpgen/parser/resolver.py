"""Second compiler pass: turn pending references into links."""

from __future__ import annotations

import logging
import re
from email.utils import parseaddr

from helpgen.errors import UnresolvedReferenceError

from .base import DocPart, ExternalLink, Heading, Link, LinkTarget, PendingReference

logger = logging.getLogger(__name__)

_WEB_PREFIXES = ("www.", "http://www.", "https://www.")
_MAILTO = "mailto:"
_ADDRESS_RE = re.compile(
    r"^[^@\s<>()\[\],;:\"]+@[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)*$"
)


def resolve_references(parts: list[DocPart]) -> list[DocPart]:
    """Insert anchors before referenced headings and rewrite every PendingReference.

    Raises :class:`UnresolvedReferenceError` for the first reference, in
    document order, that is neither a heading, a web address nor a mail
    address.
    """
    referenced = {part.target for part in parts if isinstance(part, PendingReference)}
    if not referenced:
        return list(parts)

    anchored, anchors = _insert_anchors(parts, referenced)
    return [_resolve(part, anchors) if isinstance(part, PendingReference) else part for part in anchored]


def _insert_anchors(parts: list[DocPart], referenced: set[str]) -> tuple[list[DocPart], dict[str, int]]:
    out: list[DocPart] = []
    anchors: dict[str, int] = {}
    next_id = 1
    for part in parts:
        if isinstance(part, Heading) and part.text in referenced:
            out.append(LinkTarget(id=next_id))
            # A repeated heading text gets its own anchor; links go to the first one.
            anchors.setdefault(part.text, next_id)
            logger.debug("Anchor %d inserted before heading %r", next_id, part.text)
            next_id += 1
        out.append(part)
    return out, anchors


def _resolve(ref: PendingReference, anchors: dict[str, int]) -> DocPart:
    target_id = anchors.get(ref.target)
    if target_id is not None:
        return Link(target_id=target_id, display_text=ref.display_text or ref.target)

    if ref.target.startswith(_WEB_PREFIXES):
        return ExternalLink(url=normalize_web_url(ref.target), display_text=ref.display_text or ref.target)

    address = parse_mail_address(ref.target.removeprefix(_MAILTO))
    if address is not None:
        return ExternalLink(url=_MAILTO + address, display_text=ref.display_text or address)

    raise UnresolvedReferenceError(ref.target, line=ref.line, column=ref.column)


def normalize_web_url(target: str) -> str:
    if target.startswith("www."):
        return "http://" + target
    return target


def parse_mail_address(text: str) -> str | None:
    """Return the bare address if *text* is a mail address, else ``None``.

    Accepts ``name <user@host>`` as well as a plain ``user@host``.
    """
    if not text or "@" not in text:
        return None
    _, address = parseaddr(text)
    if "<" not in text and address != text:
        return None
    if not _ADDRESS_RE.match(address):
        return None
    return address
