"""Read slide XML out of an OOXML presentation package.

Slides are extracted into a private temporary directory which is removed
before `read_slide_xml` returns or raises. Every entry of the archive is
checked against that directory first, so a crafted name such as
`../../etc/passwd` rejects the whole deck instead of escaping it.
"""
from __future__ import annotations

import io
import logging
import re
import tempfile
import zipfile
import zlib
from dataclasses import dataclass
from pathlib import Path

from ..errors import ArchiveError

logger = logging.getLogger(__name__)

SLIDE_ENTRY_RE = re.compile(r"^ppt/slides/slide(\d+)\.xml$")


@dataclass(frozen=True)
class SlideXml:
    index: int
    xml: str
    size: int


def _check_contained(root: Path, name: str, path: Path) -> Path:
    target = path.resolve()
    if not target.is_relative_to(root):
        raise ArchiveError(f"Unsafe archive entry {name!r}: resolves outside extraction directory")
    return target


def read_slide_xml(data: bytes) -> list[SlideXml]:
    """Return the deck's slide payloads ordered by slide number."""
    try:
        zf = zipfile.ZipFile(io.BytesIO(data))
    except (zipfile.BadZipFile, ValueError) as e:
        raise ArchiveError("Failed to open deck. Make sure it's a valid PowerPoint file.") from e

    with zf, tempfile.TemporaryDirectory(prefix="vatdeck-") as tmp:
        root = Path(tmp).resolve()
        slides: list[tuple[int, zipfile.ZipInfo, Path]] = []
        for info in zf.infolist():
            target = _check_contained(root, info.filename, root / info.filename)
            m = SLIDE_ENTRY_RE.match(info.filename)
            if m and not info.is_dir():
                slides.append((int(m.group(1)), info, target))

        if not slides:
            raise ArchiveError("No slides found in the deck.")

        slides.sort(key=lambda s: s[0])
        out: list[SlideXml] = []
        for index, info, target in slides:
            try:
                payload = zf.read(info)
            except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError) as e:
                raise ArchiveError(f"Corrupt slide entry {info.filename!r}") from e
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(payload)
            # The written file must still resolve inside root (no symlinked parents).
            _check_contained(root, info.filename, target)
            raw = target.read_bytes()
            out.append(SlideXml(index=index, xml=raw.decode("utf-8", errors="replace"), size=len(raw)))

        logger.debug(f"Read {len(out)} slides from {len(zf.infolist())} archive entries")
        return out
