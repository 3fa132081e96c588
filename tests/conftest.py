"""Shared builders for synthetic slide XML and decks."""
from __future__ import annotations

import io
import zipfile
from xml.sax.saxutils import escape

import pytest

NS = (
    'xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" '
    'xmlns:p="http://schemas.openxmlformats.org/presentationml/2006/main"'
)


def _para(text: str) -> str:
    if not text:
        return "<a:p/>"
    return f'<a:p><a:r><a:rPr lang="en-AU"/><a:t>{escape(text)}</a:t></a:r></a:p>'


def _table(rows: list[list[str]]) -> str:
    body = "".join(
        "<a:tr h=\"370840\">"
        + "".join(f"<a:tc><a:txBody><a:bodyPr/>{_para(c)}</a:txBody><a:tcPr/></a:tc>" for c in row)
        + "</a:tr>"
        for row in rows
    )
    return f'<p:graphicFrame><a:graphic><a:graphicData><a:tbl><a:tblPr firstRow="1"/>{body}</a:tbl></a:graphicData></a:graphic></p:graphicFrame>'


def build_slide_xml(paragraphs: list[str] = (), tables: list[list[list[str]]] = ()) -> str:
    shape = f"<p:sp><p:txBody><a:bodyPr/>{''.join(_para(p) for p in paragraphs)}</p:txBody></p:sp>" if paragraphs else ""
    frames = "".join(_table(t) for t in tables)
    return f'<?xml version="1.0" encoding="UTF-8"?><p:sld {NS}><p:cSld><p:spTree>{shape}{frames}</p:spTree></p:cSld></p:sld>'


def build_deck(slides: list[str], extra: dict[str, bytes] | None = None) -> bytes:
    """Zip slide XML strings as ppt/slides/slide1.xml, slide2.xml, ..."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("[Content_Types].xml", "<Types/>")
        zf.writestr("ppt/presentation.xml", f"<p:presentation {NS}/>")
        for i, xml in enumerate(slides, start=1):
            zf.writestr(f"ppt/slides/slide{i}.xml", xml)
        for name, payload in (extra or {}).items():
            zf.writestr(name, payload)
    return buf.getvalue()


STATUS_GRID = [
    ["RED", "STATUS OVERALL", ""],
    ["Pipeline is behind target", "Status Summary", ""],
    ["Two new opportunities qualified", "Open Opps", "GREEN"],
    ["Migration play stalled", "Big Plays", "AMBER"],
    ["Quarterly goals on track", "Account Goals", "GREEN"],
    ["CIO meeting booked", "Relationships", "N/A"],
]

TASK_TABLE = [
    ["Bucket", "Task", "Progress", "Due date", "Priority", "Assigned to", "Labels"],
    ["Sales", "Close deal", "50", "2024-07-01", "High", "Alice", "GREEN"],
]


@pytest.fixture
def slide_xml():
    return build_slide_xml


@pytest.fixture
def make_deck():
    return build_deck


@pytest.fixture
def daff_deck() -> bytes:
    """Title slide, one status grid slide and one planner slide for DAFF."""
    return build_deck([
        build_slide_xml(["DAFF VAT"]),
        build_slide_xml(["DAFF status", "Week ending 5 July 2024"], [STATUS_GRID]),
        build_slide_xml(["Planner Status Update"], [TASK_TABLE]),
    ])
