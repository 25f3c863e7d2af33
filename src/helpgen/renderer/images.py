"""Image lookup for renderers: find a file by logical name and re-encode it as PNG."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from helpgen.errors import ImageDecodeError, ImageNotFoundError
from helpgen.parser.help_parser import has_image_extension

try:  # pragma: no cover - optional import guard for environments without pymupdf
    import fitz  # type: ignore
except ImportError:  # pragma: no cover
    fitz = None

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LoadedImage:
    name: str
    path: Path
    width: int
    height: int
    png: bytes


class ImageCache:
    """Find images below *root* and keep the decoded result per name.

    One instance is passed to the renderers of a run; nothing is shared
    between instances.
    """

    def __init__(self, root: Path | str = ".") -> None:
        self.root = Path(root)
        self._images: dict[str, LoadedImage] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._images

    def get(self, name: str) -> LoadedImage:
        cached = self._images.get(name)
        if cached is not None:
            logger.debug("Image cache hit: %s", name)
            return cached

        path = self._find_file(name)
        logger.debug("Image %s loaded from %s", name, path)
        image = _load_png(name, path)
        self._images[name] = image
        return image

    def _find_file(self, name: str) -> Path:
        stem = Path(name).stem
        candidates: list[Path] = []
        if self.root.is_dir():
            candidates = sorted(p for p in self.root.rglob("*") if p.is_file())

        for path in candidates:
            if path.name == name:
                return path
        for path in candidates:
            if path.stem == stem and has_image_extension(path.name):
                return path
        raise ImageNotFoundError(name)


def _load_png(name: str, path: Path) -> LoadedImage:
    if fitz is None:
        raise RuntimeError("pymupdf is required for image rendering")

    try:
        pix = fitz.Pixmap(str(path))
        if pix.colorspace is not None and pix.colorspace.n > 3:
            pix = fitz.Pixmap(fitz.csRGB, pix)
        data = pix.tobytes("png")
    except Exception as exc:  # mupdf error classes differ between pymupdf releases
        raise ImageDecodeError(name, str(exc)) from exc

    return LoadedImage(name=name, path=path, width=pix.width, height=pix.height, png=data)
