"""Render a compiled help Document as RTF."""

from __future__ import annotations

from helpgen.errors import RenderError, UnhandledPartError
from helpgen.parser.base import (
    DocPart,
    Document,
    ExternalLink,
    Heading,
    HeadingLevel,
    Image,
    Link,
    LinkTarget,
    PlainText,
    StyledText,
)

from .images import ImageCache, LoadedImage

_HEADER = r"{\rtf1\ansi\deff0{\fonttbl{\f0\fnil\fcharset0 Calibri;}}"
_MAX_IMAGE_WIDTH = 780

# Font sizes in half-points; sub-sub-captions keep the body size.
_HEADING_SIZES = {
    HeadingLevel.TITLE: "45",
    HeadingLevel.CAPTION: "40",
    HeadingLevel.SUB_CAPTION: "34",
    HeadingLevel.SUB_SUB_CAPTION: "",
}


class RTFRenderer:
    """Render a resolved Document as an RTF text stream.

    Internal links have no RTF equivalent; they render as their display text.
    """

    def __init__(self, images: ImageCache | None = None) -> None:
        self.images = images if images is not None else ImageCache()

    def render(self, document: Document) -> str:
        chunks = [_HEADER]
        chunks.extend(self._render_part(part) for part in document.parts)
        chunks.append("}")
        return "".join(chunks)

    def _render_part(self, part: DocPart) -> str:
        if isinstance(part, PlainText):
            return escape_rtf(part.text)

        if isinstance(part, StyledText):
            opening = (r"\b " if part.bold else "") + (r"\i " if part.italic else "")
            closing = (r"\i0 " if part.italic else "") + (r"\b0 " if part.bold else "")
            return opening + escape_rtf(part.text) + closing

        if isinstance(part, Heading):
            size = _HEADING_SIZES[part.level]
            size = rf"\fs{size}" if size else ""
            return rf"\b{size} " + escape_rtf(part.text) + r"\b0\fs22\line "

        if isinstance(part, Image):
            return self._render_image(part)

        if isinstance(part, LinkTarget):
            return ""

        if isinstance(part, Link):
            return escape_rtf(part.display_text)

        if isinstance(part, ExternalLink):
            url = escape_rtf(part.url)
            return rf'{{\field{{\*\fldinst HYPERLINK "{url}"}}{{\fldrslt {escape_rtf(part.display_text)}}}}}'

        raise UnhandledPartError("RTF", part)

    def _render_image(self, part: Image) -> str:
        try:
            image = self.images.get(part.name)
        except RenderError as exc:
            raise RenderError(f"error generating RTF image '{part.name}': {exc}") from exc
        return rf"{{\*\shppict{{\pict\pngblip{_picture_size(image)} " + image.png.hex() + "\n}}"


def _picture_size(image: LoadedImage) -> str:
    width, height = image.width, image.height
    dest_width, dest_height = width, height
    if dest_width > _MAX_IMAGE_WIDTH:
        scale = _MAX_IMAGE_WIDTH / dest_width
        dest_width = _MAX_IMAGE_WIDTH
        dest_height = int(dest_height * scale + 0.5)
    return (
        rf"\picw{to_twips(width)}\pich{to_twips(height)}"
        rf"\picwgoal{to_twips(dest_width)}\pichgoal{to_twips(dest_height)}"
    )


def to_twips(pixels: int) -> int:
    return pixels * 1440 // 96


def escape_rtf(text: str) -> str:
    """Escape control characters, encode non-ASCII as ``\\uN?`` and newlines as ``\\line``."""
    out: list[str] = []
    for ch in text:
        if ch in "\\{}":
            out.append("\\" + ch)
        elif ch == "\n":
            out.append(r"\line ")
        elif ch == "®":
            out.append(r"{\super \u174?}")
        elif ord(ch) < 128:
            out.append(ch)
        else:
            out.extend(rf"\u{unit}?" for unit in _utf16_units(ch))
    return "".join(out)


def _utf16_units(ch: str) -> list[int]:
    data = ch.encode("utf-16-be")
    units = [int.from_bytes(data[i:i + 2], "big") for i in range(0, len(data), 2)]
    # RTF control words take signed 16-bit values.
    return [unit - 0x10000 if unit > 0x7FFF else unit for unit in units]
