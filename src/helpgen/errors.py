"""Error types raised while compiling and rendering help documents."""

from __future__ import annotations


class HelpgenError(Exception):
    """Base class for errors caused by the input or the environment."""


class CompileError(HelpgenError, ValueError):
    """The help source text cannot be compiled into a document."""

    def __init__(self, message: str, line: int, column: int | None = None) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


class VariableRedefinedError(CompileError):
    def __init__(self, name: str, first_line: int, second_line: int) -> None:
        super().__init__(
            f"variable '{name}' redefined in line {second_line}, "
            f"first definition was in line {first_line}, each variable can only be defined once",
            line=second_line,
        )
        self.name = name
        self.first_line = first_line
        self.second_line = second_line


class DuplicateTitleError(CompileError):
    def __init__(self, first_line: int, second_line: int) -> None:
        super().__init__(
            f"title redefined in line {second_line}, first definition in line {first_line}, "
            "there can only be one title",
            line=second_line,
        )
        self.first_line = first_line
        self.second_line = second_line


class UnresolvedReferenceError(CompileError):
    def __init__(self, target: str, line: int, column: int | None = None) -> None:
        super().__init__(f"unknown link target '{target}' in line {line}", line=line, column=column)
        self.target = target


class RenderError(HelpgenError):
    """A finished document cannot be turned into output."""


class ImageNotFoundError(RenderError):
    def __init__(self, name: str) -> None:
        super().__init__(f"no image with the name '{name}' found")
        self.name = name


class ImageDecodeError(RenderError):
    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"cannot decode image '{name}': {reason}")
        self.name = name


class UnhandledPartError(RuntimeError):
    """A renderer met a document part it has no branch for.

    This is an internal invariant failure, not a problem with the input.
    """

    def __init__(self, renderer: str, part: object) -> None:
        super().__init__(f"error generating {renderer}: unhandled document part: {type(part).__name__}")
        self.part = part
