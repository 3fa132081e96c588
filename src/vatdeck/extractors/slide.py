"""Paragraph and table text from one slide's DrawingML markup.

Markup is parsed with python-pptx's oxml parser and walked by qualified
name, so any prefix bound to the DrawingML namespace is understood and the
parser takes care of entities and CDATA.
"""
from __future__ import annotations

import logging

from lxml import etree
from pptx.oxml import parse_xml
from pptx.oxml.ns import qn

from ..models import Slide, Table
from ..utils import normalize_dashes
from .archive import SlideXml

logger = logging.getLogger(__name__)

_RECOVER_PARSER = etree.XMLParser(recover=True, resolve_entities=False)


def _parse(xml: str):
    data = xml.encode("utf-8")
    try:
        return parse_xml(data)
    except etree.XMLSyntaxError as e:
        logger.debug(f"Malformed slide markup, recovering what parses: {e}")
    try:
        return etree.fromstring(data, _RECOVER_PARSER)
    except etree.XMLSyntaxError:
        return None


def _text(element) -> list[str]:
    return [t.text or "" for t in element.iter(qn("a:t"))]


def _paragraphs(root) -> list[str]:
    paragraphs: list[str] = []
    for p in root.iter(qn("a:p")):
        text = normalize_dashes("".join(_text(p))).strip()
        if text:
            paragraphs.append(text)
    return paragraphs


def _tables(root) -> list[Table]:
    tables: list[Table] = []
    for tbl in root.iter(qn("a:tbl")):
        rows: Table = []
        for tr in tbl.iter(qn("a:tr")):
            rows.append([normalize_dashes(" ".join(_text(tc)).strip()) for tc in tr.iter(qn("a:tc"))])
        tables.append(rows)
    return tables


def extract_paragraphs(xml: str) -> list[str]:
    """Text of every non-blank `<a:p>` in document order.

    Table cells hold paragraphs too, so cell text shows up here as well as in
    `extract_tables`.
    """
    return extract_slide(xml)[0]


def extract_tables(xml: str) -> list[Table]:
    return extract_slide(xml)[1]


def extract_slide(xml: str) -> tuple[list[str], list[Table]]:
    if not xml.strip():
        return [], []
    root = _parse(xml)
    if root is None:
        return [], []
    return _paragraphs(root), _tables(root)


def build_slide(payload: SlideXml) -> Slide:
    paragraphs, tables = extract_slide(payload.xml)
    return Slide(index=payload.index, paragraphs=tuple(paragraphs), tables=tuple(tables), size=payload.size)
