from __future__ import annotations

from typing import get_args

import pytest

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
    PendingReference,
    PlainText,
    StyledText,
)
from helpgen.renderer.rtf_renderer import RTFRenderer, escape_rtf, to_twips

_HEADER = r"{\rtf1\ansi\deff0{\fonttbl{\f0\fnil\fcharset0 Calibri;}}"


def _render(images, *parts: DocPart) -> str:
    rtf = RTFRenderer(images=images).render(Document(parts=list(parts)))
    assert rtf.startswith(_HEADER)
    assert rtf.endswith("}")
    return rtf[len(_HEADER):-1]


def test_empty_document(images) -> None:
    assert RTFRenderer(images=images).render(Document()) == _HEADER + "}"


@pytest.mark.parametrize(
    ("text", "want"),
    [
        ("line\nbreak", r"line\line break"),
        ("®", r"{\super \u174?}"),
        ("Grüße", r"Gr\u252?\u223?e"),
        ("{a\\b}", r"\{a\\b\}"),
        ("😀", r"\u-10179?\u-8704?"),
    ],
)
def test_escape_rtf(text: str, want: str) -> None:
    assert escape_rtf(text) == want


@pytest.mark.parametrize(
    ("level", "want"),
    [
        (HeadingLevel.TITLE, r"\b\fs45 Cap\b0\fs22\line "),
        (HeadingLevel.CAPTION, r"\b\fs40 Cap\b0\fs22\line "),
        (HeadingLevel.SUB_CAPTION, r"\b\fs34 Cap\b0\fs22\line "),
        (HeadingLevel.SUB_SUB_CAPTION, r"\b Cap\b0\fs22\line "),
    ],
)
def test_headings(images, level: HeadingLevel, want: str) -> None:
    assert _render(images, Heading(level, "Cap")) == want


def test_styles(images) -> None:
    assert _render(images, StyledText("x", bold=True, italic=True)) == r"\b \i x\i0 \b0 "
    assert _render(images, StyledText("x", italic=True)) == r"\i x\i0 "


def test_internal_links_render_as_text(images) -> None:
    assert _render(images, LinkTarget(1), PlainText("see "), Link(target_id=1, display_text="Intro")) == "see Intro"


def test_external_link_is_hyperlink_field(images) -> None:
    want = r'{\field{\*\fldinst HYPERLINK "mailto:a@b.com"}{\fldrslt Mail}}'
    assert _render(images, ExternalLink(url="mailto:a@b.com", display_text="Mail")) == want


def test_image_is_hex_png(images, png_bytes) -> None:
    want = (
        r"{\*\shppict{\pict\pngblip\picw30\pich45\picwgoal30\pichgoal45 "
        + png_bytes.hex()
        + "\n}}"
    )
    assert _render(images, Image("pic.png")) == want


def test_wide_image_is_scaled_down(images) -> None:
    rtf = _render(images, Image("wide.png"))
    assert r"\picw23400\pich6000\picwgoal11700\pichgoal3000 " in rtf


def test_missing_image_is_render_error(images) -> None:
    with pytest.raises(RenderError, match="error generating RTF image 'gone.png'"):
        _render(images, Image("gone.png"))


def test_to_twips() -> None:
    assert to_twips(96) == 1440
    assert to_twips(780) == 11700


def test_every_part_type_is_handled(images, one_of_each_part) -> None:
    assert {type(part) for part in one_of_each_part} == set(get_args(DocPart)) - {PendingReference}

    for part in one_of_each_part:
        _render(images, part)


def test_pending_reference_is_internal_error(images) -> None:
    with pytest.raises(UnhandledPartError, match="error generating RTF: unhandled document part: PendingReference"):
        _render(images, PendingReference(target="x", line=1))
