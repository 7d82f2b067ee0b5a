"""Unit tests for the alignment tracker."""

import logging

import pytest

from tandem.core import PreconditionError, Project, ProjectConfig, TrackerState
from tandem.core.tracker import Tracker
from tandem.document import OrgDocument

MISMATCHED_ORG = """* Source
:PROPERTIES:
:ID:       src
:END:
µOne. µTwo. µThree.
* Translation
:PROPERTIES:
:ID:       tr
:END:
µUn. µDeux. µTrois. µQuatre. µCinq. µSix.
"""


@pytest.fixture
def tracker(aligned_document: OrgDocument) -> Tracker:
    return Tracker(aligned_document, "src", "tr", "µ", TrackerState())


@pytest.mark.unit
class TestOrdinals:
    """Tests for segment ordinal arithmetic."""

    def test_segment_index(self, tracker: Tracker, aligned_document: OrgDocument) -> None:
        text = aligned_document.text
        start, _ = aligned_document.content_range("tr")

        assert tracker.segment_index("tr", start) == 0
        assert tracker.segment_index("tr", text.index("Bonjour")) == 0
        assert tracker.segment_index("tr", text.index("Monde")) == 1

    def test_segment_start(self, tracker: Tracker, aligned_document: OrgDocument) -> None:
        text = aligned_document.text

        assert tracker.segment_start("src", 0) == text.index("Hello")
        assert tracker.segment_start("src", 1) == text.index("World")
        assert tracker.segment_start("src", 2) is None

    def test_segment_count(self, tracker: Tracker) -> None:
        assert tracker.segment_count("src") == 2
        assert tracker.segment_count("tr") == 2


@pytest.mark.unit
class TestLocateInSource:
    """Tests for translation to source mapping."""

    def test_second_segment_maps_to_second_segment(
        self, tracker: Tracker, aligned_document: OrgDocument
    ) -> None:
        text = aligned_document.text
        position = tracker.locate_in_source(text.index("Monde"))

        assert position == text.index("World")
        assert tracker.state.probable_source_position == position
        highlight = tracker.state.highlight_range
        assert text[highlight.start : highlight.end] == "World.\n"

    def test_highlight_runs_to_stream_end_for_last_segment(
        self, tracker: Tracker, aligned_document: OrgDocument
    ) -> None:
        _, end = aligned_document.content_range("src")
        tracker.locate_in_source(aligned_document.text.index("Monde"))
        assert tracker.state.highlight_range.end == end

    def test_highlight_trims_before_next_delimiter(
        self, tracker: Tracker, aligned_document: OrgDocument
    ) -> None:
        text = aligned_document.text
        tracker.locate_in_source(text.index("Bonjour"))

        highlight = tracker.state.highlight_range
        assert text[highlight.start : highlight.end] == "Hello."

    def test_highlight_stops_at_blank_line(self) -> None:
        doc = OrgDocument(
            "* S\n:PROPERTIES:\n:ID:       s\n:END:\nµFirst part  \n\nloose tail\n"
            "* T\n:PROPERTIES:\n:ID:       t\n:END:\nµPremier\n"
        )
        tracker = Tracker(doc, "s", "t", "µ", TrackerState())
        tracker.locate_in_source(doc.text.index("Premier"))

        highlight = tracker.state.highlight_range
        assert doc.text[highlight.start : highlight.end] == "First part"

    def test_position_outside_translation(self, tracker: Tracker) -> None:
        with pytest.raises(PreconditionError, match="translation"):
            tracker.locate_in_source(0)
        assert tracker.state.probable_source_position is None

    def test_mismatch_leaves_state_unchanged(self, caplog: pytest.LogCaptureFixture) -> None:
        doc = OrgDocument(MISMATCHED_ORG)
        tracker = Tracker(doc, "src", "tr", "µ", TrackerState())
        text = doc.text
        tracker.locate_in_source(text.index("Deux"))
        before = tracker.state.model_copy()

        with caplog.at_level(logging.WARNING):
            result = tracker.locate_in_source(text.index("Six"))

        assert result is None
        assert tracker.state == before
        assert tracker.last_inconsistency is not None
        assert tracker.last_inconsistency.requested_index == 5
        assert tracker.last_inconsistency.available_segments == 3
        assert "re-segment" in caplog.text

    def test_successful_resync_clears_inconsistency(self) -> None:
        doc = OrgDocument(MISMATCHED_ORG)
        tracker = Tracker(doc, "src", "tr", "µ", TrackerState())
        tracker.locate_in_source(doc.text.index("Six"))
        tracker.locate_in_source(doc.text.index("Un"))

        assert tracker.last_inconsistency is None
        assert tracker.state.probable_source_position == doc.text.index("One")

    def test_blank_line_after_one_heading_keeps_ordinals_aligned(self) -> None:
        doc = OrgDocument(
            "* S\n:PROPERTIES:\n:ID:       s\n:END:\n\nµHello. µWorld.\n"
            "* T\n:PROPERTIES:\n:ID:       t\n:END:\nµBonjour. µMonde.\n"
        )
        tracker = Tracker(doc, "s", "t", "µ", TrackerState())
        text = doc.text

        assert tracker.segment_count("s") == tracker.segment_count("t") == 2
        assert tracker.locate_in_source(text.index("Bonjour")) == text.index("Hello")
        assert tracker.locate_in_source(text.index("Monde")) == text.index("World")

    def test_blank_line_after_heading_survives_segmentation(
        self, project_config: ProjectConfig
    ) -> None:
        document = OrgDocument(
            "* Source\n\nHello. World.\n* Translation\nBonjour. Monde.\n* Glossary\n"
        )
        project = Project(document, project_config)
        project.activate()
        project.segment()
        text = document.text

        assert "\n\nµHello. µWorld." in text
        assert project.resync(text.index("Monde")) == text.index("World")
        assert project.current_source_segment() == "World.\n"


@pytest.mark.unit
class TestMoveSegments:
    """Tests for segment navigation."""

    def test_forward_then_backward_round_trip(
        self, tracker: Tracker, aligned_document: OrgDocument
    ) -> None:
        text = aligned_document.text
        cursor = text.index("Bonjour")
        original = tracker.locate_in_source(cursor)

        forward = tracker.move_segments(cursor, 1)
        assert forward == text.index("Monde")
        assert tracker.state.probable_source_position == text.index("World")

        back = tracker.move_segments(forward, -1)
        assert back == cursor
        assert tracker.state.probable_source_position == original
        assert tracker.locate_in_source(back) == original

    def test_forward_past_last_segment_stops_at_stream_end(
        self, tracker: Tracker, aligned_document: OrgDocument
    ) -> None:
        _, end = aligned_document.content_range("tr")
        cursor = aligned_document.text.index("Monde")
        assert tracker.move_segments(cursor, 3) == end

    def test_backward_past_first_segment_stops_at_first(
        self, tracker: Tracker, aligned_document: OrgDocument
    ) -> None:
        text = aligned_document.text
        assert tracker.move_segments(text.index("Monde"), -5) == text.index("Bonjour")

    def test_without_probable_position_recomputes(
        self, tracker: Tracker, aligned_document: OrgDocument
    ) -> None:
        text = aligned_document.text
        tracker.move_segments(text.index("Bonjour"), 1)
        assert tracker.state.probable_source_position == text.index("World")

    def test_advance_source(self, tracker: Tracker, aligned_document: OrgDocument) -> None:
        text = aligned_document.text
        assert tracker.advance_source(1) is None

        tracker.locate_in_source(text.index("Bonjour"))
        assert tracker.advance_source(1) == text.index("World")
        assert tracker.advance_source(1) is None
        assert tracker.state.probable_source_position == text.index("World")
        assert tracker.last_inconsistency is not None


@pytest.mark.unit
class TestEditsKeepPositions:
    """Tests for offset maintenance through document edits."""

    def test_insert_before_source_shifts_probable_position(self, aligned_project: Project) -> None:
        document = aligned_project.document
        aligned_project.resync(document.text.index("Monde"))

        document.insert_at(0, "#+TITLE: Shifted\n")

        assert aligned_project.state.probable_source_position == document.text.index("World")
        assert aligned_project.current_source_segment() == "World.\n"
