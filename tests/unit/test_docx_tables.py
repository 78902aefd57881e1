"""Unit tests for DOCX table extraction and inference."""

import docx
import pytest
from fixtures.generators.docx_fixtures import create_docx_with_table

from doxx.ast import CellDataType, TextAlignment
from doxx.parsers._docx_tables import (
    appears_to_be_header,
    build_cell,
    build_table_data,
    calculate_column_widths,
    detect_cell_data_type,
    determine_column_alignments,
    extract_table,
)


@pytest.mark.unit
class TestCellDataTypes:
    """Tests for cell content type inference."""

    @pytest.mark.parametrize(
        "content,expected",
        [
            ("", CellDataType.EMPTY),
            ("   ", CellDataType.EMPTY),
            ("$1,200", CellDataType.CURRENCY),
            ("€5", CellDataType.CURRENCY),
            ("£0.99", CellDataType.CURRENCY),
            ("12%", CellDataType.PERCENTAGE),
            ("Yes", CellDataType.BOOLEAN),
            ("false", CellDataType.BOOLEAN),
            ("n", CellDataType.BOOLEAN),
            ("42", CellDataType.NUMBER),
            ("1,234.5", CellDataType.NUMBER),
            ("-3", CellDataType.NUMBER),
            ("2024-01-15", CellDataType.DATE),
            ("01/15/2024", CellDataType.DATE),
            ("1-2", CellDataType.TEXT),
            ("1_000", CellDataType.TEXT),
            ("North", CellDataType.TEXT),
        ],
    )
    def test_detect_cell_data_type(self, content: str, expected: CellDataType) -> None:
        assert detect_cell_data_type(content) is expected

    def test_build_cell_alignment_follows_type(self) -> None:
        assert build_cell("42").alignment is TextAlignment.RIGHT
        assert build_cell("yes").alignment is TextAlignment.CENTER
        assert build_cell("word").alignment is TextAlignment.LEFT


@pytest.mark.unit
class TestHeaderDetection:
    """Tests for header row heuristics."""

    def test_short_labels(self) -> None:
        assert appears_to_be_header(["Name", "Value", "Unit"]) is True

    def test_long_cells_rejected(self) -> None:
        assert appears_to_be_header(["x" * 60, "y" * 60]) is False

    def test_sentences_rejected(self) -> None:
        assert appears_to_be_header(["a long sentence with many words here", "more words in this cell too"]) is False

    def test_keyword_counts_as_indicator(self) -> None:
        assert appears_to_be_header(["Customer name as printed on card", "Total"]) is True

    def test_empty_row(self) -> None:
        assert appears_to_be_header([]) is False


@pytest.mark.unit
class TestColumnLayout:
    """Tests for column widths and alignments."""

    def test_widths_have_minimum(self) -> None:
        headers = [build_cell("A"), build_cell("Longer")]
        rows = [[build_cell("x"), build_cell("Much longer value")]]

        assert calculate_column_widths(headers, rows, 2) == [3, 17]

    def test_widths_count_characters_not_bytes(self) -> None:
        headers = [build_cell("Café"), build_cell("été")]
        assert calculate_column_widths(headers, [], 2) == [4, 3]

    @pytest.mark.parametrize(
        "numeric,expected",
        [(71, TextAlignment.RIGHT), (70, TextAlignment.LEFT), (69, TextAlignment.LEFT)],
    )
    def test_numeric_threshold(self, numeric: int, expected: TextAlignment) -> None:
        rows = [[build_cell("10")] for _ in range(numeric)] + [[build_cell("text")] for _ in range(100 - numeric)]

        assert determine_column_alignments(rows, 1) == [expected]

    def test_boolean_column_is_centered(self) -> None:
        rows = [[build_cell("yes")], [build_cell("no")], [build_cell("yes")]]
        assert determine_column_alignments(rows, 1) == [TextAlignment.CENTER]

    def test_ragged_rows(self) -> None:
        headers = [build_cell("A"), build_cell("B"), build_cell("C")]
        rows = [[build_cell("1")], [build_cell("2"), build_cell("3")]]

        data = build_table_data(headers, rows)

        assert data.metadata.column_count == 3
        assert data.metadata.row_count == 2
        assert data.metadata.column_alignments == [TextAlignment.RIGHT, TextAlignment.RIGHT, TextAlignment.LEFT]


@pytest.mark.unit
class TestExtractTable:
    """Tests for reading python-docx tables."""

    def test_fixture_table(self) -> None:
        doc = create_docx_with_table()

        data = extract_table(doc.tables[0])

        assert [cell.content for cell in data.headers] == ["Region", "Revenue", "Active"]
        assert all(cell.formatting.bold for cell in data.headers)
        assert data.rows[0][1].data_type is CellDataType.CURRENCY
        assert data.metadata.row_count == 3
        assert data.metadata.has_headers is True
        assert data.metadata.column_widths == [6, 7, 6]
        assert data.metadata.column_alignments == [TextAlignment.LEFT, TextAlignment.RIGHT, TextAlignment.CENTER]

    def test_first_row_promoted_without_header_look(self) -> None:
        doc = docx.Document()
        table = doc.add_table(rows=2, cols=1)
        table.cell(0, 0).text = "this first row reads like an ordinary sentence of prose"
        table.cell(1, 0).text = "second"

        data = extract_table(table)

        assert data.headers[0].content.startswith("this first row")
        assert len(data.rows) == 1

    def test_merged_cells_appear_once(self) -> None:
        doc = docx.Document()
        table = doc.add_table(rows=2, cols=2)
        merged = table.cell(0, 0).merge(table.cell(0, 1))
        merged.text = "Merged"
        table.cell(1, 0).text = "a"
        table.cell(1, 1).text = "b"

        data = extract_table(table)

        assert [cell.content for cell in data.headers] == ["Merged"]
        assert data.metadata.column_count == 2

    def test_runs_are_joined_with_spaces(self) -> None:
        doc = docx.Document()
        table = doc.add_table(rows=1, cols=1)
        paragraph = table.cell(0, 0).paragraphs[0]
        paragraph.add_run("Total")
        paragraph.add_run("due")

        data = extract_table(table)

        assert data.headers[0].content == "Total due"
