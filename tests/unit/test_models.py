"""Unit tests for engine data models."""

import pytest

from tandem.core import (
    ConfigurationError,
    HighlightRange,
    ProjectConfig,
    SegmentationKind,
    SegmentationStrategy,
    SegmentCountMismatch,
    TrackerState,
)
from tandem.utils.config import Settings


@pytest.mark.unit
class TestSegmentationStrategy:
    """Tests for strategy validation."""

    def test_default_constructors(self) -> None:
        assert SegmentationStrategy.sentence().kind is SegmentationKind.SENTENCE
        assert SegmentationStrategy.paragraph().kind is SegmentationKind.PARAGRAPH
        assert SegmentationStrategy.regex(r"[;.]\s*").pattern == r"[;.]\s*"

    def test_parse_is_case_insensitive(self) -> None:
        assert SegmentationStrategy.parse(" Paragraph ").kind is SegmentationKind.PARAGRAPH

    def test_regex_requires_pattern(self) -> None:
        with pytest.raises(ConfigurationError):
            SegmentationStrategy.parse("regex")

    def test_invalid_regex_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            SegmentationStrategy.parse("regex", "(unclosed")

    def test_unknown_strategy(self) -> None:
        with pytest.raises(ConfigurationError):
            SegmentationStrategy.parse("word")


@pytest.mark.unit
class TestProjectConfig:
    """Tests for project configuration."""

    def test_defaults(self) -> None:
        config = ProjectConfig()

        assert config.delimiter == "µ"
        assert config.source_locator == "heading:^source$"
        assert config.strategy.kind is SegmentationKind.SENTENCE

    @pytest.mark.parametrize("delimiter", ["", "ab", " ", "x", "7", "[", "*", ":"])
    def test_invalid_delimiters(self, delimiter: str) -> None:
        with pytest.raises(ValueError):
            ProjectConfig(delimiter=delimiter)

    def test_malformed_locator(self) -> None:
        with pytest.raises(ValueError):
            ProjectConfig(source_locator="nowhere")

    def test_from_settings(self) -> None:
        settings = Settings(
            segment_delimiter="§",
            segmentation_strategy="regex",
            segmentation_regex=r";\s*",
            source_locator="tag:en",
        )
        config = ProjectConfig.from_settings(settings, name="novel", glossary_locator=None)

        assert config.name == "novel"
        assert config.delimiter == "§"
        assert config.strategy == SegmentationStrategy.regex(r";\s*")
        assert config.source_locator == "tag:en"
        assert config.glossary_locator == "heading:^glossary$"

    def test_from_settings_wraps_validation_errors(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid project configuration"):
            ProjectConfig.from_settings(Settings(), delimiter="a")


@pytest.mark.unit
class TestTrackerState:
    """Tests for offset maintenance across edits."""

    def test_insert_before_shifts(self) -> None:
        state = TrackerState(probable_source_position=10, highlight_range=HighlightRange(start=10, end=20))
        state.shift(5, 5, 3)

        assert state.probable_source_position == 13
        assert state.highlight_range == HighlightRange(start=13, end=23)

    def test_insert_at_position_shifts(self) -> None:
        state = TrackerState(probable_source_position=10)
        state.shift(10, 10, 1)
        assert state.probable_source_position == 11

    def test_edit_after_is_ignored(self) -> None:
        state = TrackerState(probable_source_position=10)
        state.shift(30, 35, 0)
        assert state.probable_source_position == 10

    def test_deleted_range_clamps_to_start(self) -> None:
        state = TrackerState(probable_source_position=10, highlight_range=HighlightRange(start=10, end=20))
        state.shift(2, 12, 0)

        assert state.probable_source_position == 2
        assert state.highlight_range == HighlightRange(start=2, end=10)

    def test_reset(self) -> None:
        state = TrackerState(probable_source_position=4, highlight_range=HighlightRange(start=4, end=8))
        state.reset()

        assert state.probable_source_position is None
        assert state.highlight_range is None


@pytest.mark.unit
class TestSegmentCountMismatch:
    def test_message_names_stream_and_recovery(self) -> None:
        mismatch = SegmentCountMismatch(requested_index=5, available_segments=3)

        assert "source stream" in mismatch.message
        assert "re-segment" in mismatch.message
