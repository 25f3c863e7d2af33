"""Line splitting, rule-line classification and variable definitions."""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass

from helpgen.errors import VariableRedefinedError

from .base import Variable

logger = logging.getLogger(__name__)


class LineKind(enum.Enum):
    TEXT = "text"
    EQUALS_RULE = "="
    MINUS_RULE = "-"
    DOTTED_RULE = "."


@dataclass(slots=True)
class Line:
    text: str
    kind: LineKind
    number: int  # 1-indexed


# ---------------------------------------------------------------------------
# Line splitting
# ---------------------------------------------------------------------------

_RULE_KINDS = {kind.value: kind for kind in LineKind if kind is not LineKind.TEXT}


def normalize_line_breaks(code: str) -> str:
    """Replace ``\\r\\n`` and lone ``\\r`` with ``\\n``."""
    return code.replace("\r\n", "\n").replace("\r", "\n")


def classify_line(text: str) -> LineKind:
    """A rule line is three or more copies of ``=``, ``-`` or ``.``."""
    if len(text) >= 3 and text.count(text[0]) == len(text):
        return _RULE_KINDS.get(text[0], LineKind.TEXT)
    return LineKind.TEXT


def split_lines(code: str) -> list[Line]:
    lines = [
        Line(text=text, kind=classify_line(text), number=idx + 1)
        for idx, text in enumerate(normalize_line_breaks(code).split("\n"))
    ]
    logger.debug("Split source into %d lines", len(lines))
    return lines


# ---------------------------------------------------------------------------
# Variables
# ---------------------------------------------------------------------------

# [\name=value] on a line of its own; the name ends at the first '='.
_VARIABLE_DEF_RE = re.compile(r"^\[\\([^=]*)=(.*)\]$", re.DOTALL)
_VARIABLE_USE_RE = re.compile(r"\[([^\[\]]+)\]")


def is_valid_variable_name(name: str) -> bool:
    return bool(name) and all(ch == " " or ch.isalpha() or ch.isdecimal() for ch in name)


def extract_variables(lines: list[Line]) -> tuple[list[Line], dict[str, Variable]]:
    """Collect ``[\\name=value]`` definitions and drop their lines.

    Returns the remaining lines and the variable table.
    """
    variables: dict[str, Variable] = {}
    remaining: list[Line] = []

    for line in lines:
        m = _VARIABLE_DEF_RE.match(line.text)
        if not m or not is_valid_variable_name(m.group(1)):
            remaining.append(line)
            continue

        name = m.group(1)
        existing = variables.get(name)
        if existing is not None:
            raise VariableRedefinedError(name, first_line=existing.line, second_line=line.number)
        variables[name] = Variable(value=m.group(2), line=line.number)
        logger.debug("Variable %r defined in line %d", name, line.number)

    return remaining, variables


def substitute_variables(text: str, variables: dict[str, Variable]) -> str:
    """Replace every ``[name]`` naming a known variable with its value.

    Substituted values are not scanned again.
    """
    if not variables:
        return text

    def _replace(m: re.Match[str]) -> str:
        variable = variables.get(m.group(1))
        return variable.value if variable is not None else m.group(0)

    return _VARIABLE_USE_RE.sub(_replace, text)
