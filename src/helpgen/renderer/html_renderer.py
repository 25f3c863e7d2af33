"""Render a compiled help Document into a self-contained HTML page."""

from __future__ import annotations

import base64
import html
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from helpgen.errors import RenderError, UnhandledPartError
from helpgen.parser.base import (
    DocPart,
    Document,
    ExternalLink,
    Heading,
    Image,
    Link,
    LinkTarget,
    PlainText,
    StyledText,
)

from .images import ImageCache


class HTMLRenderer:
    """Render a resolved Document through the HTML page template."""

    def __init__(self, template_path: Path | None = None, images: ImageCache | None = None) -> None:
        if template_path is None:
            template_path = Path(__file__).resolve().parent.parent / "template" / "help.html"

        loader = FileSystemLoader(str(template_path.parent))
        self._env = Environment(loader=loader, autoescape=True, trim_blocks=True, lstrip_blocks=True)
        self._template_name = template_path.name
        self.images = images if images is not None else ImageCache()

    def render(self, document: Document) -> str:
        body = "".join(self._render_part(part) for part in document.parts)
        template = self._env.get_template(self._template_name)
        return template.render(title=document.title, body=body)

    def _render_part(self, part: DocPart) -> str:
        if isinstance(part, PlainText):
            return "<br>".join(escape_html(line) for line in part.text.split("\n"))

        if isinstance(part, StyledText):
            text = escape_html(part.text)
            if part.italic:
                text = f"<i>{text}</i>"
            if part.bold:
                text = f"<b>{text}</b>"
            return text

        if isinstance(part, Heading):
            tag = f"h{int(part.level)}"
            return f"<{tag}>{escape_html(part.text)}</{tag}>"

        if isinstance(part, Image):
            return self._render_image(part)

        if isinstance(part, LinkTarget):
            return f'<a id="{part.id}"/>'

        if isinstance(part, Link):
            return f'<a href="#{part.target_id}">{escape_html(part.display_text)}</a>'

        if isinstance(part, ExternalLink):
            return f'<a href="{html.escape(part.url)}">{escape_html(part.display_text)}</a>'

        raise UnhandledPartError("HTML", part)

    def _render_image(self, part: Image) -> str:
        try:
            image = self.images.get(part.name)
        except RenderError as exc:
            raise RenderError(f"error generating HTML image '{part.name}': {exc}") from exc
        data = base64.b64encode(image.png).decode("ascii")
        return f'<img src="data:image/png;base64,{data}">'


def escape_html(text: str) -> str:
    """Escape text for HTML, keeping runs of spaces visible."""
    text = text.replace("\t", "    ")
    text = html.escape(text)
    text = text.replace("  ", "&nbsp;&nbsp;")
    text = text.replace("&nbsp; ", "&nbsp;&nbsp;")
    return text.replace("®", "<sup>®</sup>")
