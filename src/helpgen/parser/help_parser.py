"""Help markup compiler: headings, inline styles, references and variables."""

from __future__ import annotations

import logging
from pathlib import Path

from helpgen.errors import DuplicateTitleError

from .base import DocPart, Document, Heading, HeadingLevel, Image, PendingReference, PlainText, StyledText, Variable
from .lines import Line, LineKind, extract_variables, split_lines, substitute_variables
from .resolver import resolve_references

logger = logging.getLogger(__name__)

_IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".bmp", ".gif")
_RESERVED_CHARACTERS = frozenset("[*/=-.")
_STYLE_DELIMITERS = {"*": "/", "/": "*"}

_UNDERLINE_LEVELS = {
    LineKind.EQUALS_RULE: HeadingLevel.CAPTION,
    LineKind.MINUS_RULE: HeadingLevel.SUB_CAPTION,
    LineKind.DOTTED_RULE: HeadingLevel.SUB_SUB_CAPTION,
}


class HelpParser:
    """Compile a help source file into a resolved Document."""

    def parse(self, input_path: Path) -> Document:
        return compile_help(Path(input_path).read_bytes())


def compile_help(code: bytes | str) -> Document:
    """Compile help markup into a Document.

    Raises a :class:`helpgen.errors.CompileError` subclass on the first fatal
    error; malformed inline markup is kept as literal text instead.
    """
    if isinstance(code, bytes):
        code = code.decode("utf-8", errors="replace")

    lines, variables = extract_variables(split_lines(code))
    doc = _StructureParser(variables).parse(lines)
    doc.parts = resolve_references(coalesce_text(doc.parts))
    return doc


def coalesce_text(parts: list[DocPart]) -> list[DocPart]:
    """Merge every run of adjacent PlainText parts into one."""
    merged: list[DocPart] = []
    for part in parts:
        if isinstance(part, PlainText) and merged and isinstance(merged[-1], PlainText):
            merged[-1] = PlainText(merged[-1].text + part.text)
        else:
            merged.append(part)
    return merged


# ---------------------------------------------------------------------------
# Structure (headings and ordinary lines)
# ---------------------------------------------------------------------------

class _StructureParser:
    def __init__(self, variables: dict[str, Variable]) -> None:
        self.variables = variables
        self.parts: list[DocPart] = []
        self.title: str | None = None
        self.title_line: int | None = None

    def parse(self, lines: list[Line]) -> Document:
        last = len(lines) - 1
        for idx, line in enumerate(lines):
            if line.kind is not LineKind.TEXT:
                continue

            level = _heading_level(lines, idx)
            if level is None:
                self.parts.extend(_InlineScanner(line.text, line.number, self.variables).scan())
                if idx != last:
                    self.parts.append(PlainText("\n"))
                continue

            text = substitute_variables(line.text, self.variables)
            if level is HeadingLevel.TITLE:
                if self.title_line is not None:
                    raise DuplicateTitleError(first_line=self.title_line, second_line=line.number)
                self.title = text
                self.title_line = line.number
            logger.debug("%s %r in line %d", level.name.lower(), text, line.number)
            self.parts.append(Heading(level=level, text=text))

        return Document(title=self.title, parts=self.parts)


def _is_blank(line: Line) -> bool:
    return line.kind is LineKind.TEXT and not line.text.strip()


def _heading_level(lines: list[Line], idx: int) -> HeadingLevel | None:
    """Classify a text line by the rule lines around it."""
    if _is_blank(lines[idx]) or idx + 1 >= len(lines):
        return None

    below = lines[idx + 1].kind
    if below is LineKind.EQUALS_RULE and idx > 0 and _is_overline(lines, idx - 1):
        return HeadingLevel.TITLE
    return _UNDERLINE_LEVELS.get(below)


def _is_overline(lines: list[Line], idx: int) -> bool:
    """An equals rule that does not already underline the text line above it."""
    if lines[idx].kind is not LineKind.EQUALS_RULE:
        return False
    if idx == 0:
        return True
    above = lines[idx - 1]
    return above.kind is not LineKind.TEXT or _is_blank(above)


# ---------------------------------------------------------------------------
# Inline markup
# ---------------------------------------------------------------------------

def _is_space(ch: str) -> bool:
    return ch in (" ", "\t")


def has_image_extension(name: str) -> bool:
    return name.lower().endswith(_IMAGE_EXTENSIONS)


class _InlineScanner:
    """Scan one ordinary line left to right into document parts."""

    def __init__(self, text: str, line_number: int, variables: dict[str, Variable]) -> None:
        self.text = text
        self.line_number = line_number
        self.variables = variables
        self.parts: list[DocPart] = []
        self.start = 0  # first character not yet emitted

    def scan(self) -> list[DocPart]:
        text = self.text
        idx = 0
        while idx < len(text):
            ch = text[idx]
            if ch in _STYLE_DELIMITERS:
                end = self._scan_style(idx)
            elif ch == "[":
                end = self._scan_reference(idx)
            else:
                end = -1

            if end == -1:
                idx += 1
            else:
                self.start = idx = end

        self._flush(len(text))
        return self.parts

    def _flush(self, stop: int) -> None:
        if stop > self.start:
            self.parts.append(PlainText(self.text[self.start:stop]))

    # Style spans -----------------------------------------------------------

    def _scan_style(self, idx: int) -> int:
        text = self.text
        delim = text[idx]
        if idx + 1 >= len(text) or _is_space(text[idx + 1]):
            return -1

        close = _find_style_close(text, idx + 1, delim)
        if close == -1:
            return -1

        self._flush(idx)
        inner = text[idx + 1:close]
        bold = delim == "*"
        italic = not bold
        other = _STYLE_DELIMITERS[delim]
        if len(inner) >= 2 and inner.startswith(other) and inner.endswith(other):
            bold = italic = True
            inner = inner[1:-1]

        self.parts.append(StyledText(text=substitute_variables(inner, self.variables), bold=bold, italic=italic))
        return close + 1

    # References ------------------------------------------------------------

    def _scan_reference(self, idx: int) -> int:
        found = _find_reference(self.text, idx + 1)
        if found is None:
            return -1

        token, sub_target, end = found
        self._flush(idx)
        self.parts.append(self._reference_part(token, sub_target, column=idx + 1))
        return end

    def _reference_part(self, token: str, sub_target: str | None, column: int) -> DocPart:
        if sub_target:
            return PendingReference(target=sub_target, display_text=token, line=self.line_number, column=column)
        if len(token) == 1 and token in _RESERVED_CHARACTERS:
            return PlainText(token)
        variable = self.variables.get(token)
        if variable is not None:
            return PlainText(variable.value)
        if has_image_extension(token):
            return Image(name=token)
        return PendingReference(target=token, line=self.line_number, column=column)


def _find_style_close(text: str, begin: int, delim: str) -> int:
    """Index of the closing delimiter, which must follow a non-space character."""
    for idx in range(begin + 1, len(text)):
        if text[idx] == delim and not _is_space(text[idx - 1]):
            return idx
    return -1


def _find_reference(text: str, begin: int) -> tuple[str, str | None, int] | None:
    """Parse a reference body starting right after its opening ``[``.

    Returns ``(token, sub_target, end)`` where *end* is the index just past
    the closing bracket, or ``None`` when the bracket is literal text.
    """
    if begin >= len(text) or _is_space(text[begin]) or text[begin] == "]":
        return None
    if text.startswith("[]", begin):
        return "[", None, begin + 2

    inner = -1
    for idx in range(begin, len(text)):
        ch = text[idx]
        if ch == "]":
            if inner == -1:
                return text[begin:idx], None, idx + 1
            if text.startswith("]]", idx):
                return text[begin:inner], text[inner + 1:idx], idx + 2
            return None
        if ch == "[":
            if inner != -1:
                return None
            inner = idx
    return None
