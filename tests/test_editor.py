"""Tests for structural editing of note content."""

import pytest

from notemark.core.editor import (
    delete_lines,
    edit_line,
    find_section,
    get_lines,
    insert_at,
    normalize_heading,
    replace_lines,
)
from notemark.core.errors import (
    HeadingNotFoundError,
    InvalidLineRangeError,
    MissingOptionError,
    UnknownPositionError,
    ValidationError,
)
from notemark.core.lines import to_physical
from notemark.core.model import ContentLine, InsertOptions

SECTIONS = "# Title\n\n## Work\n- item1\n\n## Home\n"
WITH_FM = "---\na: 1\n---\nl1\nl2\nl3"


def test_in_section_inserts_before_trailing_blank_lines():
    """Test section inserts go after the last non-blank line."""
    result = insert_at(SECTIONS, "- item2", InsertOptions("in-section", heading="Work"))
    assert result == "# Title\n\n## Work\n- item1\n- item2\n\n## Home\n"


def test_end_with_heading_means_in_section():
    """Test end plus heading appends to the section."""
    result = insert_at(SECTIONS, "- item2", InsertOptions("end", heading="work"))
    assert result == "# Title\n\n## Work\n- item1\n- item2\n\n## Home\n"


def test_start_with_heading_means_after_heading():
    """Test start plus heading inserts right below the heading."""
    result = insert_at("# T\n## A\nx", "new", InsertOptions("start", heading="a"))
    assert result == "# T\n## A\nnew\nx"


def test_bold_marker_sections():
    """Test **Bold** lines act as section boundaries."""
    content = "# T\n**Tasks**:\n- a\n**Notes**\n- b"
    result = insert_at(content, "- c", InsertOptions("in-section", heading="Tasks"))
    assert result == "# T\n**Tasks**:\n- a\n- c\n**Notes**\n- b"


def test_heading_not_found_lists_available():
    """Test the error names the headings that do exist."""
    with pytest.raises(HeadingNotFoundError) as exc:
        insert_at("# T\n## A\nx", "new", InsertOptions("after-heading", heading="Missing"))
    assert str(exc.value) == 'Heading "Missing" not found. Available headings: "T", "A"'
    assert exc.value.available == ["T", "A"]


def test_heading_required():
    """Test heading positions need a heading."""
    with pytest.raises(MissingOptionError):
        insert_at("# T", "x", InsertOptions("after-heading"))
    with pytest.raises(MissingOptionError):
        insert_at("# T", "x", InsertOptions("in-section"))


def test_start_skips_frontmatter():
    """Test start inserts after the frontmatter block."""
    result = insert_at("---\na: 1\n---\nbody", "top", InsertOptions("start"))
    assert result == "---\na: 1\n---\ntop\nbody"
    assert insert_at("body", "top", InsertOptions("start")) == "top\nbody"


def test_start_strips_one_trailing_newline():
    """Test inserted text loses a single trailing newline."""
    assert insert_at("body", "new\n", InsertOptions("start")) == "new\nbody"


def test_end_appends_raw():
    """Test end appends text unchanged."""
    assert insert_at("a", "b\n", InsertOptions("end")) == "a\nb\n"
    assert insert_at("a\n", "b", InsertOptions("end")) == "a\nb"
    assert insert_at("", "x", InsertOptions("end")) == "x"


def test_at_line_uses_content_lines():
    """Test at-line counts lines after frontmatter."""
    result = insert_at("---\na: 1\n---\nl1\nl2", "X", InsertOptions("at-line", line=2))
    assert result == "---\na: 1\n---\nl1\nX\nl2"


def test_at_line_pads_short_notes():
    """Test inserting past the end pads with blank lines."""
    assert insert_at("l1", "X", InsertOptions("at-line", line=4)) == "l1\n\n\nX"


def test_at_line_validation():
    """Test missing and non-positive line numbers."""
    with pytest.raises(MissingOptionError):
        insert_at("l1", "X", InsertOptions("at-line"))
    with pytest.raises(ValidationError):
        insert_at("l1", "X", InsertOptions("at-line", line=0))


def test_unknown_position():
    """Test unknown positions raise."""
    with pytest.raises(UnknownPositionError):
        insert_at("l1", "X", InsertOptions("middle"))  # type: ignore[arg-type]


def test_heading_inside_frontmatter_is_ignored():
    """Test heading search starts after frontmatter."""
    content = "---\nsection: Work\n---\n# Work\nx"
    result = insert_at(content, "new", InsertOptions("after-heading", heading="Work"))
    assert result == "---\nsection: Work\n---\n# Work\nnew\nx"


def test_find_section():
    """Test section bounds end at the next boundary."""
    lines = SECTIONS.split("\n")
    assert find_section(lines, "Work") == (2, 5)
    assert find_section(lines, "Home") == (5, 7)


def test_normalize_heading():
    """Test heading spellings that compare equal."""
    for text in ("## Work", "**Work**:", "**Work:**", "__Work__", "  work  ", "Work:"):
        assert normalize_heading(text) == "work"


def test_delete_lines_offsets_frontmatter():
    """Test content line numbers skip frontmatter."""
    assert delete_lines(WITH_FM, 2, 2) == "---\na: 1\n---\nl1\nl3"


def test_delete_lines_clamps_end():
    """Test an end line past the note is clamped."""
    assert delete_lines(WITH_FM, 2, 99) == "---\na: 1\n---\nl1"


def test_delete_lines_invalid_ranges():
    """Test out-of-range and inverted ranges."""
    with pytest.raises(InvalidLineRangeError, match="exceeds content length"):
        delete_lines(WITH_FM, 5, 6)
    with pytest.raises(InvalidLineRangeError):
        delete_lines(WITH_FM, 0, 1)
    with pytest.raises(InvalidLineRangeError):
        delete_lines(WITH_FM, 3, 2)


def test_get_lines_matches_delete_range():
    """Test preview returns the lines a delete would remove."""
    assert get_lines(WITH_FM, 1, 2) == ["l1", "l2"]
    assert get_lines(WITH_FM, 3, 10) == ["l3"]


def test_replace_lines():
    """Test a range is swapped for new lines."""
    assert replace_lines(WITH_FM, 1, 2, "A\nB\nC") == "---\na: 1\n---\nA\nB\nC\nl3"


def test_edit_line():
    """Test single line replacement and bounds."""
    assert edit_line(WITH_FM, 3, "Z") == "---\na: 1\n---\nl1\nl2\nZ"
    with pytest.raises(InvalidLineRangeError, match="line 4 does not exist"):
        edit_line(WITH_FM, 4, "Z")


def test_long_asterisk_break_is_not_a_section_boundary():
    """Test a thematic break of five asterisks stays inside the section."""
    content = "## Work\n- a\n*****\n- b"
    result = insert_at(content, "- c", InsertOptions("in-section", heading="Work"))
    assert result == "## Work\n- a\n*****\n- b\n- c"


def test_inline_bold_line_is_not_a_section_boundary():
    """Test a line with several bold spans is ordinary text."""
    content = "## Work\n- a\n**Note** and **more**\n- b"
    result = insert_at(content, "- c", InsertOptions("in-section", heading="Work"))
    assert result == "## Work\n- a\n**Note** and **more**\n- b\n- c"


def test_closing_hashes_are_ignored():
    """Test '## Work ##' is found as 'Work' and listed without the hashes."""
    content = "# T\n## Work ##\nx"
    result = insert_at(content, "new", InsertOptions("after-heading", heading="Work"))
    assert result == "# T\n## Work ##\nnew\nx"
    assert normalize_heading("## Work ##") == "work"

    with pytest.raises(HeadingNotFoundError) as exc:
        insert_at(content, "new", InsertOptions("after-heading", heading="Home"))
    assert exc.value.available == ["T", "Work"]


def test_edits_land_on_resolved_physical_line():
    """Test every content line edit hits the index the resolver reports."""
    for n in range(1, 4):
        line = ContentLine(n)
        edited = edit_line(WITH_FM, line, "X").split("\n")
        assert edited[to_physical(WITH_FM, line)] == "X"
        assert edited.count("X") == 1
