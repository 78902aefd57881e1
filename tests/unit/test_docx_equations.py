"""Unit tests for locating equations and merging them into the element stream."""

import pytest
from fixtures.generators.docx_fixtures import FRACTION_ONE_HALF, SQUARED_R, SUM_TO_N

from doxx.ast import Equation, FormattedRun, Heading, Paragraph, TextFormatting
from doxx.constants import MATH_NS, WORD_LIST_MARKER, WORDPROCESSING_NS
from doxx.parsers._docx_equations import (
    EquationInfo,
    InlineEquationContent,
    TextContent,
    apply_inline_equations,
    insert_display_equations,
    scan_document_xml,
    splice_heading_text,
    splice_inline_equations,
)

BOLD = TextFormatting(bold=True)


def _document(body: str) -> bytes:
    return (
        f'<w:document xmlns:w="{WORDPROCESSING_NS}" xmlns:m="{MATH_NS}"><w:body>{body}</w:body></w:document>'
    ).encode("utf-8")


def _text_paragraph(text: str) -> str:
    return f"<w:p><w:r><w:t xml:space=\"preserve\">{text}</w:t></w:r></w:p>"


def _display_paragraph(inner: str) -> str:
    return f"<w:p><m:oMathPara><m:oMath>{inner}</m:oMath></m:oMathPara></w:p>"


def _equation(index: int, latex: str = "x", inline: bool = False) -> EquationInfo:
    return EquationInfo(latex=latex, fallback=latex, is_inline=inline, paragraph_index=index)


@pytest.mark.unit
class TestScanDocumentXml:
    """Tests for the streaming equation scan."""

    def test_inline_and_display_equations(self) -> None:
        body = (
            '<w:p><w:r><w:t xml:space="preserve">Area is </w:t></w:r>'
            f"<m:oMath>{SQUARED_R}</m:oMath>"
            '<w:r><w:t xml:space="preserve"> here</w:t></w:r></w:p>'
            + _display_paragraph(FRACTION_ONE_HALF)
        )

        scan = scan_document_xml(_document(body))

        assert [(eq.latex, eq.is_inline, eq.paragraph_index) for eq in scan.equations] == [
            ("r^{2}", True, 1),
            ("\\frac{1}{2}", False, 2),
        ]
        assert scan.equations[1].unicode == "½"
        assert scan.inline_contents(1) == [
            TextContent("Area is "),
            InlineEquationContent(latex="r^{2}", fallback="r2"),
            TextContent(" here"),
        ]
        assert scan.inline_contents(2) == []
        assert scan.display_equations == [scan.equations[1]]

    def test_table_paragraphs_are_counted(self) -> None:
        table = (
            "<w:tbl><w:tr>"
            + "".join(f"<w:tc>{_text_paragraph(text)}</w:tc>" for text in ("a", "b"))
            + "</w:tr></w:tbl>"
        )
        body = _text_paragraph("before") + table + _display_paragraph(SUM_TO_N)

        scan = scan_document_xml(_document(body))

        assert scan.display_equations[0].paragraph_index == 4
        assert scan.display_equations[0].latex == "\\sum_{i=1}^{n} i"

    def test_paragraphs_without_equations_are_not_inline(self) -> None:
        scan = scan_document_xml(_document(_text_paragraph("just text")))

        assert scan.equations == []
        assert scan.inline_contents(1) == []

    def test_text_matches_run_rendering(self) -> None:
        body = (
            '<w:p><w:pPr><w:tabs><w:tab w:val="left" w:pos="720"/></w:tabs></w:pPr>'
            "<w:r><w:t>A</w:t><w:tab/><w:t>B</w:t><w:br/><w:t>C</w:t>"
            '<w:br w:type="page"/><w:t>D</w:t></w:r>'
            f"<m:oMath>{SQUARED_R}</m:oMath></w:p>"
        )

        scan = scan_document_xml(_document(body))

        assert scan.inline_contents(1)[0] == TextContent("A\tB\nCD")

    def test_hyphen_and_content_control_text_keep_offsets(self) -> None:
        body = (
            "<w:p><w:r><w:t>x</w:t><w:noBreakHyphen/><w:t>y</w:t></w:r>"
            '<w:sdt><w:sdtContent><w:r><w:t xml:space="preserve"> is</w:t></w:r></w:sdtContent></w:sdt>'
            f"<m:oMath>{SQUARED_R}</m:oMath>"
            '<w:del><w:r><w:delText>old</w:delText></w:r></w:del>'
            '<w:r><w:t xml:space="preserve"> tail</w:t></w:r></w:p>'
        )

        contents = scan_document_xml(_document(body)).inline_contents(1)

        assert contents == [TextContent("x-y is"), InlineEquationContent("r^{2}", "r2"), TextContent(" tail")]
        runs = splice_inline_equations([FormattedRun("x-y is"), FormattedRun(" tail")], contents)
        assert [run.text for run in runs] == ["x-y is", "$r^{2}$", " tail"]

    def test_nested_math_is_one_equation(self) -> None:
        body = f"<w:p><m:oMath><m:r><m:t>a</m:t></m:r><m:oMath>{SQUARED_R}</m:oMath></m:oMath></w:p>"

        scan = scan_document_xml(_document(body))

        assert len(scan.equations) == 1

    @pytest.mark.parametrize("payload", [b"not xml at all", b""])
    def test_malformed_xml_yields_empty_scan(self, payload: bytes) -> None:
        scan = scan_document_xml(payload)

        assert scan.equations == []
        assert scan.paragraphs == {}


@pytest.mark.unit
class TestSpliceInlineEquations:
    """Tests for inserting inline equations into runs."""

    def test_equation_between_runs(self) -> None:
        runs = [FormattedRun("The area is "), FormattedRun(" times pi.")]
        contents = [TextContent("The area is "), InlineEquationContent("r^{2}", "r2"), TextContent(" times pi.")]

        result = splice_inline_equations(runs, contents)

        assert [run.text for run in result] == ["The area is ", "$r^{2}$", " times pi."]

    def test_run_is_split_with_formatting_kept(self) -> None:
        runs = [FormattedRun("abcdef", BOLD)]
        contents = [TextContent("abc"), InlineEquationContent("x", "x"), TextContent("def")]

        result = splice_inline_equations(runs, contents)

        assert result == [FormattedRun("abc", BOLD), FormattedRun("$x$"), FormattedRun("def", BOLD)]

    def test_adjacent_equations(self) -> None:
        contents = [TextContent("a"), InlineEquationContent("x", "x"), InlineEquationContent("y", "y"), TextContent("b")]

        result = splice_inline_equations([FormattedRun("ab")], contents)

        assert [run.text for run in result] == ["a", "$x$", "$y$", "b"]

    def test_marker_run_stays_first(self) -> None:
        marker = FormattedRun(f"{WORD_LIST_MARKER}1. ")
        contents = [InlineEquationContent("x", "x"), TextContent("Item")]

        result = splice_inline_equations([marker, FormattedRun("Item")], contents)

        assert [run.text for run in result] == [marker.text, "$x$", "Item"]

    def test_trailing_equations_are_appended(self) -> None:
        contents = [TextContent("ab"), InlineEquationContent("x", "x")]

        assert [run.text for run in splice_inline_equations([FormattedRun("ab")], contents)] == ["ab", "$x$"]
        assert [run.text for run in splice_inline_equations([], contents)] == ["$x$"]


@pytest.mark.unit
class TestApplyInlineEquations:
    """Tests for applying inline equations to elements."""

    def test_heading_equation_stays_in_place(self) -> None:
        heading = Heading(level=1, text="Geometry", number="1")
        contents = [TextContent("Geometry "), InlineEquationContent("x", "x")]

        result = apply_inline_equations(heading, contents)

        assert result == Heading(level=1, text="Geometry $x$", number="1")

    def test_heading_equation_in_middle_of_title(self) -> None:
        heading = Heading(level=2, text="Area  bound")
        contents = [TextContent("Area "), InlineEquationContent("r^{2}", "r2"), TextContent(" bound")]

        result = apply_inline_equations(heading, contents)

        assert result.text == "Area $r^{2}$ bound"

    def test_heading_literal_number_is_dropped(self) -> None:
        contents = [TextContent("2. Area "), InlineEquationContent("r^{2}", "r2"), TextContent(" bound")]

        assert splice_heading_text("Area  bound", contents) == "Area $r^{2}$ bound"

    def test_heading_leading_equation(self) -> None:
        contents = [InlineEquationContent("x", "x"), TextContent(" axis")]

        assert splice_heading_text("axis", contents) == "$x$ axis"

    def test_paragraph_is_spliced(self) -> None:
        paragraph = Paragraph(runs=[FormattedRun("Let ")])
        contents = [TextContent("Let "), InlineEquationContent("x", "x")]

        assert apply_inline_equations(paragraph, contents).text == "Let $x$"

    def test_no_contents_returns_element(self) -> None:
        paragraph = Paragraph(runs=[FormattedRun("Plain")])
        assert apply_inline_equations(paragraph, []) is paragraph


@pytest.mark.unit
class TestInsertDisplayEquations:
    """Tests for positioning display equations between blocks."""

    def test_equations_follow_their_paragraph(self) -> None:
        first = Paragraph(runs=[FormattedRun("first")])
        table_stand_in = Paragraph(runs=[FormattedRun("table")])
        last = Paragraph(runs=[FormattedRun("last")])
        blocks = [(1, [first]), (2, []), (4, [table_stand_in]), (8, [last])]
        equations = [_equation(2, "a"), _equation(5, "b"), _equation(9, "c")]

        result = insert_display_equations(blocks, equations)

        assert result == [
            first,
            Equation(latex="a", fallback="a"),
            table_stand_in,
            Equation(latex="b", fallback="b"),
            last,
            Equation(latex="c", fallback="c"),
        ]

    def test_equation_outside_paragraphs_goes_first(self) -> None:
        only = Paragraph(runs=[FormattedRun("only")])

        result = insert_display_equations([(1, [only])], [_equation(0)])

        assert result == [Equation(latex="x", fallback="x"), only]

    def test_no_blocks(self) -> None:
        assert insert_display_equations([], [_equation(3)]) == [Equation(latex="x", fallback="x")]
