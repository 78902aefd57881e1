"""Unit tests for document search and outline generation."""

import pytest

from doxx.ast import (
    Document,
    Equation,
    FormattedRun,
    Heading,
    Image,
    List,
    ListItem,
    OutlineItem,
    PageBreak,
    Paragraph,
    SearchResult,
    Table,
    generate_outline,
    search_document,
)
from doxx.parsers._docx_tables import build_cell, build_table_data


def _sample_document() -> Document:
    table = build_table_data(
        [build_cell("Region"), build_cell("Revenue")],
        [[build_cell("North"), build_cell("$1,200")]],
    )
    return Document(
        title="Sample",
        elements=[
            Heading(level=1, text="Quarterly Revenue", number="1"),
            Paragraph(runs=[FormattedRun("Revenue grew. "), FormattedRun("Revenue is up.")]),
            List(items=[ListItem(runs=[FormattedRun("north region")]), ListItem(runs=[FormattedRun("south")])]),
            Table(table=table),
            PageBreak(),
            Image(description="Revenue chart"),
            Equation(latex="\\frac{r}{2}", fallback="r2"),
            Heading(level=2, text="Details"),
        ],
    )


@pytest.mark.unit
class TestSearchDocument:
    """Tests for case-insensitive search."""

    def test_hits_in_document_order(self) -> None:
        results = search_document(_sample_document(), "revenue")

        assert [result.element_index for result in results] == [0, 1, 3, 5]

    def test_positions(self) -> None:
        results = search_document(_sample_document(), "REVENUE")

        first = results[0]
        assert first == SearchResult(element_index=0, text="Quarterly Revenue", start_pos=10, end_pos=17)
        assert first.text[first.start_pos : first.end_pos] == "Revenue"

    def test_positions_after_characters_that_change_length_when_lowercased(self) -> None:
        document = Document(title="Cities", elements=[Paragraph(runs=[FormattedRun("\u0130stanbul revenue")])])

        result = search_document(document, "REVENUE")[0]

        assert (result.start_pos, result.end_pos) == (9, 16)
        assert result.text[result.start_pos : result.end_pos] == "revenue"

    def test_one_result_per_fragment(self) -> None:
        results = search_document(_sample_document(), "revenue")
        paragraph_hits = [result for result in results if result.element_index == 1]

        assert len(paragraph_hits) == 1
        assert paragraph_hits[0].start_pos == 0

    def test_list_items_and_cells_are_separate_fragments(self) -> None:
        results = search_document(_sample_document(), "north")

        assert [(result.element_index, result.text) for result in results] == [(2, "north region"), (3, "North")]

    def test_equations_search_latex(self) -> None:
        results = search_document(_sample_document(), "frac")
        assert [result.element_index for result in results] == [6]

    @pytest.mark.parametrize("query", ["", "   ", "\t"])
    def test_blank_queries_match_nothing(self, query: str) -> None:
        assert search_document(_sample_document(), query) == []

    def test_no_match(self) -> None:
        assert search_document(_sample_document(), "absent") == []


@pytest.mark.unit
class TestGenerateOutline:
    """Tests for the heading outline."""

    def test_outline(self) -> None:
        assert generate_outline(_sample_document()) == [
            OutlineItem(title="1 Quarterly Revenue", level=1, element_index=0),
            OutlineItem(title="Details", level=2, element_index=7),
        ]

    def test_empty_document(self) -> None:
        assert generate_outline(Document(title="Empty")) == []
