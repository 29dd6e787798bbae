"""Tests for line classification."""

from notemark.core.model import PARAGRAPH_TYPES, Heading, TaskMarkerConfig
from notemark.core.paragraphs import (
    classify,
    extract_headings,
    parse_paragraphs,
    search_paragraphs,
)

NOTE = """# Title

## Work
* Call Bob !! #work @alice >2024-05-01
- [x] Done thing
+ check
- bullet
> quote #q
---
plain text"""


def _types(content, config=None):
    return [p.meta.type for p in parse_paragraphs(content, config)]


def test_parse_paragraphs_types():
    """Test every line kind with default marker preferences."""
    assert _types(NOTE) == [
        "title",
        "empty",
        "heading",
        "task",
        "task",
        "checklist",
        "bullet",
        "quote",
        "separator",
        "text",
    ]


def test_task_metadata():
    """Test tags, mentions, date and priority on a plain task line."""
    meta = parse_paragraphs(NOTE)[3].meta

    assert meta.marker == "*"
    assert meta.has_checkbox is False
    assert meta.task_status == "open"
    assert meta.tags == ["#work"]
    assert meta.mentions == ["@alice"]
    assert meta.scheduled_date == "2024-05-01"
    assert meta.priority == 2


def test_checkbox_metadata():
    """Test checkbox status is read from the bracket."""
    meta = parse_paragraphs(NOTE)[4].meta
    assert meta.has_checkbox is True
    assert meta.task_status == "done"
    assert meta.content == "Done thing"


def test_heading_levels():
    """Test heading level and content."""
    paragraphs = parse_paragraphs(NOTE)
    assert paragraphs[0].meta.heading_level == 1
    assert paragraphs[0].meta.content == "Title"
    assert paragraphs[2].meta.heading_level == 2
    assert paragraphs[2].meta.content == "Work"


def test_quote_content():
    """Test the quote marker is stripped from content."""
    meta = parse_paragraphs(NOTE)[7].meta
    assert meta.content == "quote #q"
    assert meta.tags == ["#q"]


def test_first_line_is_title():
    """Test a non-heading first line becomes a level 1 title."""
    meta = classify("Meeting !! >2024-01-01 #x", 0, True)
    assert meta.type == "title"
    assert meta.heading_level == 1
    assert meta.tags == ["#x"]
    assert meta.priority is None
    assert meta.scheduled_date is None


def test_first_line_rules_before_title():
    """Test empty and separator lines win over the title rule."""
    assert classify("", 0, True).type == "empty"
    assert classify("---", 0, True).type == "separator"
    assert classify("***", 0, True).type == "separator"


def test_tag_like_line_is_not_heading():
    """Test '#tag' without a space is text, not a heading."""
    meta = classify("#tag only", 4, False)
    assert meta.type == "text"
    assert meta.tags == ["#tag"]
    assert classify("####### seven", 4, False).type == "text"


def test_unknown_checkbox_character():
    """Test an unknown bracket character falls through to plain markers."""
    meta = classify("- [?] maybe", 1, False)
    assert meta.type == "bullet"
    assert meta.content == "[?] maybe"

    meta = classify("* [?] maybe", 1, False)
    assert meta.type == "task"
    assert meta.has_checkbox is False


def test_indent_level():
    """Test nested tasks report their indent level."""
    meta = classify("\t\t* [ ] sub", 1, False)
    assert meta.type == "task"
    assert meta.indent_level == 2


def test_dash_todo_preference():
    """Test marker meaning follows the injected preferences."""
    config = TaskMarkerConfig(is_asterisk_todo=False, is_dash_todo=True)
    assert classify("- item", 1, False, config).type == "task"
    assert classify("* item", 1, False, config).type == "bullet"


def test_frontmatter_lines_are_skipped():
    """Test paragraphs start after frontmatter with content line 1."""
    paragraphs = parse_paragraphs("---\ntitle: X\n---\n# Heading\ntext")

    assert len(paragraphs) == 2
    assert paragraphs[0].line == 1
    assert paragraphs[0].line_index == 3
    assert paragraphs[0].meta.type == "title"
    assert paragraphs[1].meta.type == "text"


def test_search_paragraphs():
    """Test case-insensitive search with optional type filter."""
    assert len(search_paragraphs(NOTE, "WORK")) == 2
    matches = search_paragraphs(NOTE, "work", types=["task"])
    assert [p.line for p in matches] == [4]


def test_extract_headings():
    """Test headings are listed with physical indices."""
    assert extract_headings("# T\ntext\n### Sub") == [
        Heading(level=1, text="T", line_index=0),
        Heading(level=3, text="Sub", line_index=2),
    ]


def test_classify_is_total():
    """Test every line gets a known type, first or not."""
    corpus = [
        "", "   ", "---", "*****", "___", "# H", "###### deep", "####### seven",
        "#nospace", "> quote", ">", "* task", "- bullet", "+ check", "* [ ] open",
        "- [x] done", "+ [-] cancelled", "* [?] odd", "\t\t- nested", "**Bold**:",
        "plain text #tag @me", "[ ]", "*", "-", ">> deeper", "1. numbered",
    ]
    for line in corpus:
        for is_first in (True, False):
            meta = classify(line, 0, is_first)
            assert meta.type in PARAGRAPH_TYPES, line


def test_parse_paragraphs_is_deterministic():
    """Test parsing the same content twice yields equal results."""
    assert parse_paragraphs(NOTE) == parse_paragraphs(NOTE)
    config = TaskMarkerConfig(is_asterisk_todo=False, is_dash_todo=True)
    assert parse_paragraphs(NOTE, config) == parse_paragraphs(NOTE, config)
