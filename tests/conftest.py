from __future__ import annotations

from pathlib import Path

import pytest

from helpgen.errors import ImageNotFoundError
from helpgen.parser.base import (
    DocPart,
    ExternalLink,
    Heading,
    HeadingLevel,
    Image,
    Link,
    LinkTarget,
    PlainText,
    StyledText,
)
from helpgen.renderer.images import LoadedImage

# Renderers only embed these bytes, they never decode them.
PNG_BYTES = b"\x89PNG\r\n\x1a\n-fake-"


class StaticImages:
    """Image lookup stand-in serving fixed images by name."""

    def __init__(self, images: dict[str, LoadedImage]) -> None:
        self.images = images

    def get(self, name: str) -> LoadedImage:
        try:
            return self.images[name]
        except KeyError:
            raise ImageNotFoundError(name) from None


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def images() -> StaticImages:
    return StaticImages(
        {
            "pic.png": LoadedImage(name="pic.png", path=Path("pic.png"), width=2, height=3, png=PNG_BYTES),
            "wide.png": LoadedImage(name="wide.png", path=Path("wide.png"), width=1560, height=400, png=PNG_BYTES),
        }
    )


@pytest.fixture
def one_of_each_part() -> list[DocPart]:
    """One instance of every part type a renderer must handle."""
    return [
        Heading(HeadingLevel.TITLE, "Manual"),
        PlainText("text\nmore"),
        StyledText("styled", bold=True, italic=True),
        Image("pic.png"),
        LinkTarget(1),
        Link(target_id=1, display_text="link"),
        ExternalLink(url="http://www.example.com", display_text="web"),
    ]
