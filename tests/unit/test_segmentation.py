"""Unit tests for the segmentation engine."""

import pytest

from tandem.core import AlreadySegmentedError, SegmentationStrategy
from tandem.core.segmentation import (
    is_segmented,
    plan_boundaries,
    regex_mover,
    segment_subtree,
    sentence_mover,
)
from tandem.document import OrgDocument


def _source(body: str) -> tuple[OrgDocument, str]:
    doc = OrgDocument(f"* Source\n:PROPERTIES:\n:ID:       src\n:END:\n{body}* Next\n")
    return doc, "src"


def _segmented_body(doc: OrgDocument) -> str:
    start, end = doc.content_range("src")
    return doc.read_range(start, end)


@pytest.mark.unit
class TestMovers:
    """Tests for boundary movers."""

    def test_sentence_mover_skips_blanks(self) -> None:
        text = "One. Two."
        assert sentence_mover(text, 0, len(text)) == text.index("Two")

    def test_sentence_mover_closing_quotes(self) -> None:
        text = 'He said "stop." Then left.'
        assert sentence_mover(text, 0, len(text)) == text.index("Then")

    def test_sentence_mover_ignores_inner_dots(self) -> None:
        text = "Version 1.5 is out"
        assert sentence_mover(text, 0, len(text)) is None

    def test_sentence_mover_cjk(self) -> None:
        text = "你好。世界。"
        assert sentence_mover(text, 0, len(text)) == 3

    def test_regex_mover_zero_width_match(self) -> None:
        mover = regex_mover(r"(?=b)")
        assert mover("abab", 1, 4) == 3

    def test_regex_mover_no_match(self) -> None:
        assert regex_mover(";")("abc", 0, 3) is None


@pytest.mark.unit
class TestSentenceSegmentation:
    """Tests for sentence strategy placement."""

    def test_sentences_and_paragraphs(self) -> None:
        doc, section_id = _source("Hello world. How are you?\n\nSecond paragraph.\n")
        inserted = segment_subtree(doc, section_id, SegmentationStrategy.sentence(), "µ")

        assert inserted == 3
        assert _segmented_body(doc) == "µHello world. µHow are you?\n\nµSecond paragraph.\n"

    def test_delimiter_count_matches_boundaries(self) -> None:
        doc, section_id = _source("First one. Second one! Third?\n\n** Sub\nMore text.\n")
        segment_subtree(doc, section_id, SegmentationStrategy.sentence(), "µ")

        body = _segmented_body(doc)
        # Three sentences, one sub-heading, one paragraph after it
        assert body.count("µ") == 5
        assert "** µSub\n" in body
        assert body.startswith("µFirst one. µSecond one! µThird?")

    def test_boundary_at_line_end_moves_to_next_line(self) -> None:
        doc, section_id = _source("One.\nTwo.\n")
        segment_subtree(doc, section_id, SegmentationStrategy.sentence(), "µ")
        assert _segmented_body(doc) == "µOne.\nµTwo.\n"

    def test_no_delimiter_at_paragraph_end(self) -> None:
        doc, section_id = _source("Only one sentence.\n")
        segment_subtree(doc, section_id, SegmentationStrategy.sentence(), "µ")
        assert _segmented_body(doc) == "µOnly one sentence.\n"

    def test_heading_drawer_stays_intact(self) -> None:
        doc, section_id = _source("Intro.\n** Chapter\n:PROPERTIES:\n:ID:       ch1\n:END:\nText.\n")
        segment_subtree(doc, section_id, SegmentationStrategy.sentence(), "µ")

        body = _segmented_body(doc)
        assert "** µChapter\n:PROPERTIES:\n:ID:       ch1\n:END:\nµText.\n" in body
        assert doc.find_section("ch1").title == "µChapter"

    def test_lists_and_tables_are_single_segments(self) -> None:
        doc, section_id = _source("- a. b.\n- c.\n\n| x. | y. |\n")
        segment_subtree(doc, section_id, SegmentationStrategy.sentence(), "µ")
        assert _segmented_body(doc) == "µ- a. b.\n- c.\n\nµ| x. | y. |\n"

    def test_page_delimiter_starts_segment(self) -> None:
        doc, section_id = _source("Page one\n\fpage two\n")
        segment_subtree(doc, section_id, SegmentationStrategy.paragraph(), "µ")
        assert _segmented_body(doc) == "µPage one\n\fµpage two\n"


@pytest.mark.unit
class TestOtherStrategies:
    """Tests for paragraph and regex strategies."""

    def test_paragraph_strategy(self) -> None:
        doc, section_id = _source("One. Two.\n\nThree.\n")
        segment_subtree(doc, section_id, SegmentationStrategy.paragraph(), "µ")
        assert _segmented_body(doc) == "µOne. Two.\n\nµThree.\n"

    def test_regex_strategy(self) -> None:
        doc, section_id = _source("a; b. c\n")
        segment_subtree(doc, section_id, SegmentationStrategy.regex(r"[;.]\s*"), "µ")
        assert _segmented_body(doc) == "µa; µb. µc\n"

    def test_custom_delimiter(self) -> None:
        doc, section_id = _source("One. Two.\n")
        segment_subtree(doc, section_id, SegmentationStrategy.sentence(), "§")
        assert _segmented_body(doc) == "§One. §Two.\n"


@pytest.mark.unit
class TestSegmentationPreconditions:
    """Tests for determinism and re-segmentation."""

    def test_planning_is_deterministic(self) -> None:
        body = "A. B! C?\n\n** Sub\nD.\n"
        first, _ = _source(body)
        second, _ = _source(body)
        strategy = SegmentationStrategy.sentence()

        assert plan_boundaries(first, "src", strategy) == plan_boundaries(second, "src", strategy)

    def test_planning_does_not_mutate(self) -> None:
        doc, section_id = _source("A. B.\n")
        before = doc.text
        plan_boundaries(doc, section_id, SegmentationStrategy.sentence())
        assert doc.text == before

    def test_already_segmented_raises(self) -> None:
        doc, section_id = _source("A. B.\n")
        segment_subtree(doc, section_id, SegmentationStrategy.sentence(), "µ")
        text = doc.text

        with pytest.raises(AlreadySegmentedError, match="source"):
            segment_subtree(doc, section_id, SegmentationStrategy.sentence(), "µ")
        assert doc.text == text

    def test_is_segmented(self) -> None:
        doc, section_id = _source("A.\n")
        assert not is_segmented(doc, section_id, "µ")
        segment_subtree(doc, section_id, SegmentationStrategy.sentence(), "µ")
        assert is_segmented(doc, section_id, "µ")

    def test_empty_section(self) -> None:
        doc, section_id = _source("")
        assert segment_subtree(doc, section_id, SegmentationStrategy.sentence(), "µ") == 0
