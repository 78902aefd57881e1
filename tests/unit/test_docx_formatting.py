"""Unit tests for DOCX run formatting extraction."""

import docx
import pytest
from docx.oxml import OxmlElement, parse_xml
from docx.oxml.ns import nsdecls, qn
from docx.shared import Pt, RGBColor
from fixtures.generators.docx_fixtures import create_docx_with_formatting

from doxx.ast import TextFormatting
from doxx.parsers._docx_formatting import (
    extract_formatted_runs,
    extract_paragraph_text,
    extract_run_formatting,
    first_run_formatting,
    iter_paragraph_runs,
    is_visible_run,
    run_element_text,
)


@pytest.mark.unit
class TestRunFormatting:
    """Tests for reading direct run properties."""

    def test_plain_run_has_default_formatting(self) -> None:
        doc = docx.Document()
        run = doc.add_paragraph().add_run("plain")

        assert extract_run_formatting(run) == TextFormatting()

    def test_style_bits(self) -> None:
        doc = docx.Document()
        run = doc.add_paragraph().add_run("styled")
        run.bold = True
        run.italic = True
        run.underline = True
        run.font.strike = True

        formatting = extract_run_formatting(run)

        assert formatting.bold and formatting.italic and formatting.underline
        assert formatting.strikethrough

    def test_double_strike_counts_as_strikethrough(self) -> None:
        doc = docx.Document()
        run = doc.add_paragraph().add_run("gone")
        run.font.double_strike = True

        assert extract_run_formatting(run).strikethrough is True

    def test_size_and_color(self) -> None:
        doc = docx.Document()
        run = doc.add_paragraph().add_run("red")
        run.font.size = Pt(14)
        run.font.color.rgb = RGBColor(0xFF, 0x00, 0x00)

        formatting = extract_run_formatting(run)

        assert formatting.font_size == 14.0
        assert formatting.color == "FF0000"

    def test_explicitly_off_bold_is_false(self) -> None:
        doc = docx.Document()
        run = doc.add_paragraph().add_run("not bold")
        run.bold = False

        assert extract_run_formatting(run).bold is False


@pytest.mark.unit
class TestParagraphRuns:
    """Tests for walking paragraph runs."""

    def test_formatted_runs_from_fixture(self) -> None:
        doc = create_docx_with_formatting()
        runs = extract_formatted_runs(doc.paragraphs[0])

        assert [run.text for run in runs] == [
            "This paragraph contains ",
            "bold text",
            " and ",
            "italic text",
            " in one line.",
        ]
        assert runs[1].formatting.bold is True
        assert runs[3].formatting.italic is True

    def test_empty_runs_are_skipped(self) -> None:
        doc = docx.Document()
        paragraph = doc.add_paragraph("text")
        paragraph.add_run("")

        assert len(extract_formatted_runs(paragraph)) == 1

    def test_hyperlink_runs_are_included(self) -> None:
        doc = docx.Document()
        paragraph = doc.add_paragraph("See ")
        hyperlink = OxmlElement("w:hyperlink")
        run = OxmlElement("w:r")
        text = OxmlElement("w:t")
        text.text = "the docs"
        run.append(text)
        hyperlink.append(run)
        paragraph._p.append(hyperlink)

        assert [r.text for r in iter_paragraph_runs(paragraph)] == ["See ", "the docs"]
        assert extract_paragraph_text(paragraph) == "See the docs"

    def test_paragraph_text_is_trimmed(self) -> None:
        doc = docx.Document()
        paragraph = doc.add_paragraph("  padded  ")

        assert extract_paragraph_text(paragraph) == "padded"

    def test_first_run_formatting(self) -> None:
        doc = docx.Document()
        paragraph = doc.add_paragraph()
        paragraph.add_run("")
        paragraph.add_run("Bold start").bold = True

        assert first_run_formatting(paragraph).bold is True

    def test_first_run_formatting_of_empty_paragraph(self) -> None:
        doc = docx.Document()
        paragraph = doc.add_paragraph()
        assert paragraph._p.find(qn("w:r")) is None

        assert first_run_formatting(paragraph) == TextFormatting()

    def test_content_control_runs_are_included(self) -> None:
        doc = docx.Document()
        paragraph = doc.add_paragraph("Due ")
        paragraph._p.append(
            parse_xml(
                f'<w:sdt {nsdecls("w")}><w:sdtContent><w:r><w:t>Friday</w:t></w:r></w:sdtContent></w:sdt>'
            )
        )

        assert [r.text for r in iter_paragraph_runs(paragraph)] == ["Due ", "Friday"]
        assert extract_paragraph_text(paragraph) == "Due Friday"

    def test_deleted_runs_are_not_visible(self) -> None:
        doc = docx.Document()
        paragraph = doc.add_paragraph("kept")
        paragraph._p.append(parse_xml(f'<w:del {nsdecls("w")}><w:r><w:delText>gone</w:delText></w:r></w:del>'))

        assert [is_visible_run(r) for r in paragraph._p.iter(qn("w:r"))] == [True, False]
        assert extract_paragraph_text(paragraph) == "kept"


@pytest.mark.unit
class TestRunElementText:
    """Tests for the text rendering of a single run element."""

    @pytest.mark.parametrize(
        "children,expected",
        [
            ("<w:t>x</w:t><w:noBreakHyphen/><w:t>y</w:t>", "x-y"),
            ("<w:t>a</w:t><w:ptab/><w:t>b</w:t>", "a\tb"),
            ("<w:t>a</w:t><w:cr/><w:t>b</w:t>", "a\nb"),
            ('<w:t>a</w:t><w:br w:type="page"/><w:t>b</w:t>', "ab"),
            ("<w:t>a</w:t><w:br/><w:t>b</w:t>", "a\nb"),
            ("<w:softHyphen/>", ""),
        ],
    )
    def test_children(self, children: str, expected: str) -> None:
        run = parse_xml(f'<w:r {nsdecls("w")}>{children}</w:r>')

        assert run_element_text(run) == expected
