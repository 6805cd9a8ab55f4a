"""Tests for the USFM parser."""

from __future__ import annotations

import pytest

from usfm2doc.exceptions import ParseError
from usfm2doc.schemas import MarkerKind
from usfm2doc.usfm_parser import parse_usfm


class TestBookStructure:
    """Tests for book, chapter, paragraph and verse nesting."""

    def test_builds_nested_tree(self, genesis_usfm: str) -> None:
        """A book holds chapters, paragraphs and verses in source order."""
        markers = parse_usfm(genesis_usfm)

        assert len(markers) == 1
        book = markers[0]
        assert book.kind == MarkerKind.BOOK
        chapters = book.children
        assert [c.kind for c in chapters] == [MarkerKind.CHAPTER, MarkerKind.CHAPTER]
        assert [c.number for c in chapters] == [1, 2]

        paragraph = chapters[0].children[0]
        assert paragraph.kind == MarkerKind.PARAGRAPH
        assert [v.number for v in paragraph.children] == [1, 2]

    def test_book_title_prefers_header(self, genesis_usfm: str) -> None:
        """\\h wins over \\toc1 and \\mt for the book title."""
        book = parse_usfm(genesis_usfm)[0]
        assert book.text == "Genesis"

    def test_book_title_falls_back_to_code(self) -> None:
        """Without title markers the book code is used."""
        book = parse_usfm("\\id RUT\n\\c 1\n\\p\n\\v 1 Text.")[0]
        assert book.text == "RUT"

    def test_verse_text_becomes_text_run(self, genesis_usfm: str) -> None:
        """Text after the verse number is a TextRun child of the verse."""
        verse = parse_usfm(genesis_usfm)[0].children[0].children[0].children[1]
        assert verse.number == 2
        assert verse.children[0].kind == MarkerKind.TEXT_RUN
        assert verse.children[0].text == "The earth was without form and empty."

    def test_verse_range_uses_first_number(self) -> None:
        """Bridged verses like 1-2 keep their first number."""
        markers = parse_usfm("\\id RUT\n\\c 1\n\\p\n\\v 1-2 Bridged text.")
        verse = markers[0].children[0].children[0].children[0]
        assert verse.number == 1
        assert verse.children[0].text == "Bridged text."

    def test_chapter_label_sets_chapter_text(self) -> None:
        """\\cl after \\c names that chapter."""
        markers = parse_usfm("\\id PSA\n\\c 1\n\\cl Psalm 1\n\\p\n\\v 1 Blessed.")
        assert markers[0].children[0].text == "Psalm 1"

    def test_section_heading_is_other(self) -> None:
        """Section headings become Other markers under the chapter."""
        markers = parse_usfm("\\id GEN\n\\c 1\n\\s1 The Creation\n\\p\n\\v 1 Text.")
        heading = markers[0].children[0].children[0]
        assert heading.kind == MarkerKind.OTHER
        assert heading.text == "The Creation"

    def test_ignored_markers_are_skipped(self) -> None:
        """Configured ignored markers leave no trace in the tree."""
        markers = parse_usfm("\\id GEN\n\\c 1\n\\p\n\\s5\n\\v 1 Text.", ignored_markers={"s5"})
        paragraph = markers[0].children[0].children[0]
        assert [child.kind for child in paragraph.children] == [MarkerKind.VERSE]

    def test_character_markers_keep_text(self) -> None:
        """Text inside character markers stays inline."""
        markers = parse_usfm("\\id MAT\n\\c 5\n\\p\n\\v 3 \\wj Blessed are the poor\\wj* in spirit.")
        verse = markers[0].children[0].children[0].children[0]
        assert [run.text for run in verse.children] == ["Blessed are the poor", "in spirit."]

    def test_word_attributes_are_dropped(self) -> None:
        """Text from "|" up to the closing marker is attribute data."""
        markers = parse_usfm(
            "\\id GEN\n\\c 1\n\\p\n\\v 1 \\w In|strong=\"H7225\"\\w* the beginning"
        )
        verse = markers[0].children[0].children[0].children[0]
        assert [run.text for run in verse.children] == ["In", "the beginning"]

    def test_alignment_milestones_are_dropped(self) -> None:
        """Milestone pairs like \\zaln-s ... \\* and \\zaln-e\\* leave only the words."""
        markers = parse_usfm(
            "\\id GEN\n\\c 1\n\\p\n"
            "\\v 1 \\zaln-s |x-strong=\"H7225\" x-content=\"\u05d1\"\\*"
            "\\w In|x-occurrence=\"1\"\\w*\\zaln-e\\* the beginning"
        )
        verse = markers[0].children[0].children[0].children[0]
        assert [run.text for run in verse.children] == ["In", "the beginning"]

    def test_book_level_chapter_label(self) -> None:
        """\\cl before the first chapter prefixes each chapter number."""
        markers = parse_usfm(
            "\\id PSA\n\\h Psalms\n\\cl Psalm\n\\c 22\n\\p\n\\v 1 My God.\n\\c 23\n\\cl The Shepherd\n"
        )
        chapters = markers[0].children
        assert [chapter.kind for chapter in chapters] == [MarkerKind.CHAPTER] * 2
        assert [chapter.text for chapter in chapters] == ["Psalm 22", "The Shepherd"]

    def test_byte_order_mark_is_ignored(self) -> None:
        """A leading BOM does not produce a text run."""
        markers = parse_usfm("\ufeff\\id GEN\n\\c 1")
        assert markers[0].kind == MarkerKind.BOOK


class TestNotes:
    """Tests for footnotes and cross-references."""

    def test_footnote_text_excludes_reference_and_caller(self, genesis_usfm: str) -> None:
        """Only note text fields are kept."""
        verse = parse_usfm(genesis_usfm)[0].children[0].children[0].children[0]
        note = verse.children[1]
        assert note.kind == MarkerKind.FOOTNOTE
        assert note.text == "Or in the beginning"

    def test_cross_reference_text(self, genesis_usfm: str) -> None:
        """\\x ... \\x* becomes a CrossReference with the \\xt text."""
        verse = parse_usfm(genesis_usfm)[0].children[1].children[0].children[0]
        xref = verse.children[1]
        assert xref.kind == MarkerKind.CROSS_REFERENCE
        assert xref.text == "Exod 20:11"

    def test_text_after_note_continues_verse(self) -> None:
        """Text following a closed note returns to the verse."""
        markers = parse_usfm("\\id GEN\n\\c 1\n\\p\n\\v 1 Before\\f + \\ft note\\f* after.")
        verse = markers[0].children[0].children[0].children[0]
        assert [child.kind for child in verse.children] == [
            MarkerKind.TEXT_RUN,
            MarkerKind.FOOTNOTE,
            MarkerKind.TEXT_RUN,
        ]
        assert verse.children[2].text == "after."


class TestParseErrors:
    """Tests for malformed input."""

    def test_chapter_without_number(self) -> None:
        with pytest.raises(ParseError, match="requires a number") as exc_info:
            parse_usfm("\\id GEN\n\\c\n\\p")
        assert exc_info.value.line == 2

    def test_verse_with_non_numeric_number(self) -> None:
        with pytest.raises(ParseError, match="\\\\v requires a number"):
            parse_usfm("\\id GEN\n\\c 1\n\\p\n\\v x Text")

    def test_unterminated_footnote(self) -> None:
        with pytest.raises(ParseError, match="Unterminated note"):
            parse_usfm("\\id GEN\n\\c 1\n\\p\n\\v 1 Text\\f + \\ft dangling")

    def test_structural_marker_inside_note(self) -> None:
        with pytest.raises(ParseError, match="inside note"):
            parse_usfm("\\id GEN\n\\c 1\n\\p\n\\v 1 Text\\f + \\ft note\n\\v 2 More")

    def test_closer_without_opener(self) -> None:
        with pytest.raises(ParseError, match="without an open note"):
            parse_usfm("\\id GEN\n\\c 1\n\\p\n\\v 1 Text\\f*")

    def test_mismatched_closer(self) -> None:
        with pytest.raises(ParseError, match="closes a note opened with"):
            parse_usfm("\\id GEN\n\\c 1\n\\p\n\\v 1 Text\\f + \\ft note\\x*")
