"""Unit tests for DOCX list detection, grouping and marker cleanup."""

import pytest

from doxx.ast import FormattedRun, Heading, List, ListItem, Paragraph, TextFormatting
from doxx.constants import WORD_LIST_MARKER
from doxx.parsers._docx_cleanup import clean_word_list_markers
from doxx.parsers._docx_lists import (
    build_word_list_runs,
    clean_list_item_runs,
    group_list_items,
    is_likely_list_item,
    list_level_from_indent,
    word_list_prefix,
)
from doxx.parsers._docx_numbering import ListNumberingManager, NumberingInfo

BOLD = TextFormatting(bold=True)


def _paragraph(text: str) -> Paragraph:
    return Paragraph(runs=[FormattedRun(text)])


@pytest.mark.unit
class TestListItemDetection:
    """Tests for recognizing hand-typed list items."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("• first", True),
            ("- second", True),
            ("* third", True),
            ("1. Pick up the order from the store downtown", True),
            ("1. Short", False),
            ("a. lettered item", True),
            ("a.", False),
            ("3.5 million people", False),
            ("Plain sentence.", False),
            ("", False),
            (f"{WORD_LIST_MARKER}1. Item", False),
        ],
    )
    def test_is_likely_list_item(self, text: str, expected: bool) -> None:
        assert is_likely_list_item(text) is expected

    @pytest.mark.parametrize("text,level", [("- a", 0), ("  - a", 1), ("    - a", 2), ("   - a", 1)])
    def test_list_level_from_indent(self, text: str, level: int) -> None:
        assert list_level_from_indent(text) == level


@pytest.mark.unit
class TestCleanListItemRuns:
    """Tests for removing list prefixes from runs."""

    def test_bullet_prefix(self) -> None:
        assert clean_list_item_runs([FormattedRun("- apples")]) == [FormattedRun("apples")]

    def test_number_prefix(self) -> None:
        runs = [FormattedRun("12. Twelfth item")]
        assert clean_list_item_runs(runs) == [FormattedRun("Twelfth item")]

    def test_prefix_spanning_runs_keeps_formatting(self) -> None:
        runs = [FormattedRun("1"), FormattedRun(". "), FormattedRun("Bold", BOLD), FormattedRun(" tail")]

        assert clean_list_item_runs(runs) == [FormattedRun("Bold", BOLD), FormattedRun(" tail")]

    def test_leading_whitespace_is_removed(self) -> None:
        runs = [FormattedRun("  - nested")]
        assert clean_list_item_runs(runs) == [FormattedRun("nested")]

    def test_text_without_prefix_is_unchanged(self) -> None:
        runs = [FormattedRun("No prefix here")]
        assert clean_list_item_runs(runs) == runs

    def test_empty(self) -> None:
        assert clean_list_item_runs([]) == []


@pytest.mark.unit
class TestGroupListItems:
    """Tests for coalescing list paragraphs."""

    def test_groups_consecutive_items(self) -> None:
        elements = [_paragraph("Intro"), _paragraph("- one"), _paragraph("- two"), _paragraph("Outro")]

        result = group_list_items(elements)

        assert len(result) == 3
        assert isinstance(result[1], List)
        assert result[1].ordered is False
        assert [item.text for item in result[1].items] == ["one", "two"]

    def test_switching_kind_starts_new_list(self) -> None:
        elements = [
            _paragraph("- bullet"),
            _paragraph("1. Pick up the order from the store downtown"),
            _paragraph("2. Drop the parcel at the post office today"),
        ]

        result = group_list_items(elements)

        assert [type(element) for element in result] == [List, List]
        assert result[0].ordered is False
        assert result[1].ordered is True
        assert len(result[1].items) == 2

    def test_non_paragraph_breaks_list(self) -> None:
        elements = [_paragraph("- one"), Heading(level=1, text="Break"), _paragraph("- two")]

        result = group_list_items(elements)

        assert [type(element) for element in result] == [List, Heading, List]

    def test_nested_levels(self) -> None:
        result = group_list_items([_paragraph("- outer"), _paragraph("  - inner")])
        assert [item.level for item in result[0].items] == [0, 1]

    def test_word_list_paragraphs_are_not_grouped(self) -> None:
        tagged = Paragraph(runs=[FormattedRun(f"{WORD_LIST_MARKER}1. "), FormattedRun("Item")])
        assert group_list_items([tagged]) == [tagged]


@pytest.mark.unit
class TestWordListRuns:
    """Tests for Word list numbering runs and cleanup."""

    def test_prefixes(self) -> None:
        manager = ListNumberingManager()

        assert word_list_prefix(NumberingInfo(num_id=2, level=0), manager) == "1. "
        assert word_list_prefix(NumberingInfo(num_id=2, level=1), manager) == "a. "
        assert word_list_prefix(NumberingInfo(num_id=None, level=0), manager) == "* "

    def test_marker_run_is_first_and_unformatted(self) -> None:
        manager = ListNumberingManager()
        runs = build_word_list_runs(NumberingInfo(num_id=2, level=1), [FormattedRun("Item", BOLD)], manager)

        assert runs[0] == FormattedRun(f"{WORD_LIST_MARKER}  a. ")
        assert runs[1] == FormattedRun("Item", BOLD)

    def test_cleanup_removes_marker(self) -> None:
        elements = [
            Paragraph(runs=[FormattedRun(f"{WORD_LIST_MARKER}1. "), FormattedRun("Item")]),
            List(items=[ListItem(runs=[FormattedRun(f"{WORD_LIST_MARKER}x")])]),
            Heading(level=1, text="Untouched"),
        ]

        cleaned = clean_word_list_markers(elements)

        assert cleaned[0].text == "1. Item"
        assert cleaned[1].items[0].text == "x"
        assert cleaned[2] == elements[2]
