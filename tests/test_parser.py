"""
End-to-end tests: deck bytes in, per-entity reports out.
"""

import io
from datetime import date

import pytest
from pptx import Presentation
from pptx.util import Inches

from conftest import STATUS_GRID, TASK_TABLE, build_deck, build_slide_xml
from vatdeck import ArchiveError, DeckParser, ParserConfig, debug_slides, parse_deck
from vatdeck.parser import preview_reports, select_reports

TODAY = date(2030, 1, 1)
RISK_HEADER = [
    "Raised By", "Description", "Impact", "Date Risk Becomes Issue", "Status", "Owner",
    "Impact Rating", "Likelihood", "Mitigation", "Comments", "Risk Rating",
]


class TestParseDeck:
    """Test parsing whole decks."""

    def test_single_entity(self, daff_deck):
        """Title, status grid and planner slide produce one DAFF report."""
        result = parse_deck(daff_deck, today=TODAY)

        assert len(result.reports) == 1
        r = result.reports[0]
        assert r.entity_name == "DAFF"
        assert r.overall_status == "RED"
        assert r.report_date == date(2024, 7, 5)
        assert r.status_summary == "Pipeline is behind target"
        assert r.open_opps_status == "GREEN"
        assert r.big_plays_status == "AMBER"
        assert r.account_goals_status == "GREEN"
        assert r.relationships_status == "N/A"
        assert r.research_status == ""
        assert len(r.tasks) == 1
        t = r.tasks[0]
        assert (t.bucket_name, t.task_name, t.progress, t.due_date) == ("Sales", "Close deal", "50", "2024-07-01")
        assert (t.priority, t.assigned_to, t.labels) == ("High", "Alice", "GREEN")
        assert r.risks == ()
        assert result.summary == "DAFF: 0 risks, 1 planner tasks, status: RED"
        assert result.warnings == []

    def test_idempotent(self, daff_deck):
        first = parse_deck(daff_deck, today=TODAY)
        second = parse_deck(daff_deck, today=TODAY)
        assert first.to_dict() == second.to_dict()

    def test_multiple_entities_in_order(self):
        deck = build_deck([
            build_slide_xml(["VAT Report - Sales Committee", "July 2024"]),
            build_slide_xml(["DAFF VAT"]),
            build_slide_xml(["Pipeline steady"]),
            build_slide_xml(["SAU VAT"]),
            build_slide_xml(["Hiring in progress"], [[RISK_HEADER, ["Ann", "Budget cut"] + [""] * 9]]),
        ])
        result = parse_deck(deck, today=TODAY)

        assert [r.entity_name for r in result.reports] == ["DAFF", "SAU"]
        assert result.reports[0].status_summary == "Pipeline steady"
        assert result.reports[0].report_date == TODAY
        assert [x.description for x in result.reports[1].risks] == ["Budget cut"]
        assert result.summary == (
            "DAFF: 0 risks, 0 planner tasks, status: not set; "
            "SAU: 1 risks, 0 planner tasks, status: not set"
        )

    def test_slides_before_first_title_warned(self):
        """Slides ahead of any entity title are dropped with a warning."""
        deck = build_deck([
            build_slide_xml(["Agenda", "Intro", "Housekeeping"]),
            build_slide_xml(["DAFF"]),
            build_slide_xml(["Content"]),
        ])
        result = parse_deck(deck, today=TODAY)
        assert [r.entity_name for r in result.reports] == ["DAFF"]
        assert result.warnings == ["Slide 1 dropped: no entity title slide before it"]

    def test_no_entities(self):
        deck = build_deck([build_slide_xml(["Agenda", "Intro", "Housekeeping"])])
        result = parse_deck(deck, today=TODAY)
        assert result.reports == []
        assert result.summary == ""

    def test_empty_slides_ignored(self):
        deck = build_deck([build_slide_xml(["DAFF"]), build_slide_xml(), build_slide_xml(["GREEN"])])
        result = parse_deck(deck, today=TODAY)
        assert result.reports[0].overall_status == "GREEN"
        assert result.reports[0].status_summary == ""

    def test_not_a_deck(self):
        with pytest.raises(ArchiveError):
            parse_deck(b"plain text, not a zip")

    def test_zip_without_slides(self):
        with pytest.raises(ArchiveError, match="No slides"):
            parse_deck(build_deck([]))

    def test_custom_config(self):
        cfg = ParserConfig(entity_aliases=(("NORTH", "North"),))
        deck = build_deck([build_slide_xml(["North VAT"]), build_slide_xml(["All good"])])
        result = DeckParser(cfg).parse(deck, today=TODAY)
        assert [r.entity_name for r in result.reports] == ["North"]

    def test_parse_file(self, daff_deck, tmp_path):
        path = tmp_path / "deck.pptx"
        path.write_bytes(daff_deck)
        result = DeckParser().parse_file(path, today=TODAY)
        assert result.reports[0].entity_name == "DAFF"

    def test_to_dict_is_json_ready(self, daff_deck):
        d = parse_deck(daff_deck, today=TODAY).to_dict()
        report = d["reports"][0]
        assert report["report_date"] == "2024-07-05"
        assert report["tasks"][0]["task_name"] == "Close deal"
        assert d["warnings"] == []


class TestPreviewAndSelect:
    """Test the condensed preview and entity filter."""

    def test_preview(self, daff_deck):
        preview = preview_reports(parse_deck(daff_deck, today=TODAY))
        p = preview["reports"][0]
        assert p["entity_name"] == "DAFF"
        assert p["report_date"] == "2024-07-05"
        assert p["status_summary_preview"] == "Pipeline is behind target"
        assert p["big_plays_status"] == "AMBER"
        assert p["tasks_count"] == 1 and p["risks_count"] == 0
        assert p["has_approach"] is False
        assert p["has_open_opps"] is True
        assert preview["summary"].startswith("DAFF:")

    def test_preview_truncates_summary(self):
        long_line = "x" * 500
        deck = build_deck([build_slide_xml(["DAFF"]), build_slide_xml([long_line])])
        p = preview_reports(parse_deck(deck, today=TODAY))["reports"][0]
        assert len(p["status_summary_preview"]) == 200

    def test_select_reports(self):
        deck = build_deck([
            build_slide_xml(["DAFF"]), build_slide_xml(["a"]),
            build_slide_xml(["SAU"]), build_slide_xml(["b"]),
        ])
        reports = parse_deck(deck, today=TODAY).reports
        assert [r.entity_name for r in select_reports(reports, ["SAU"])] == ["SAU"]
        assert len(select_reports(reports, None)) == 2
        assert len(select_reports(reports, [])) == 2
        assert select_reports(reports, ["DISR"]) == []


def test_debug_slides(daff_deck):
    slides = debug_slides(daff_deck)
    assert [s.index for s in slides] == [1, 2, 3]
    assert slides[0].paragraphs == ("DAFF VAT",)
    assert slides[1].tables[0] == STATUS_GRID
    assert slides[2].tables[0] == TASK_TABLE
    assert slides[1].to_dict()["index"] == 2


def test_deck_built_with_python_pptx():
    """A deck saved by python-pptx parses the same as the synthetic ones."""
    prs = Presentation()
    blank = prs.slide_layouts[6]

    title = prs.slides.add_slide(blank)
    title.shapes.add_textbox(Inches(1), Inches(1), Inches(6), Inches(1)).text_frame.text = "DAFF VAT"

    content = prs.slides.add_slide(blank)
    content.shapes.add_textbox(Inches(1), Inches(0.2), Inches(6), Inches(0.5)).text_frame.text = "Week ending 5 July 2024"
    rows = [
        ["AMBER", "STATUS OVERALL", ""],
        ["Renewals slipping", "Status Summary", ""],
        ["", "Open Opps", "GREEN"],
        ["", "Big Plays", "RED"],
        ["", "Research", "N/A"],
    ]
    table = content.shapes.add_table(len(rows), 3, Inches(1), Inches(1), Inches(8), Inches(3)).table
    for r, row in enumerate(rows):
        for c, text in enumerate(row):
            table.cell(r, c).text = text

    buf = io.BytesIO()
    prs.save(buf)
    result = parse_deck(buf.getvalue(), today=TODAY)

    assert len(result.reports) == 1
    r = result.reports[0]
    assert r.entity_name == "DAFF"
    assert r.overall_status == "AMBER"
    assert r.report_date == date(2024, 7, 5)
    assert r.status_summary == "Renewals slipping"
    assert (r.open_opps_status, r.big_plays_status, r.research_status) == ("GREEN", "RED", "N/A")
