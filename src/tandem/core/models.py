# Copyright 2025 KTTC AI (https://github.com/kttc-ai)
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Core data models for the segment alignment engine.

This module defines the configuration and state objects shared by the
engine components:
- Segmentation strategies and per-project configuration
- Tracker state (probable source position and highlight range)
- Soft inconsistency records reported by the correspondence tracker
"""

from __future__ import annotations

import re
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from tandem.core.errors import ConfigurationError

if TYPE_CHECKING:
    from tandem.utils.config import Settings

DEFAULT_DELIMITER = "µ"

# Characters that would break the Org markup the delimiter is inserted into
_RESERVED_DELIMITERS = frozenset("[]*:|#\\")


class SegmentationKind(str, Enum):
    """Intra-paragraph splitting strategies."""

    SENTENCE = "sentence"  # One segment per sentence
    PARAGRAPH = "paragraph"  # One segment per paragraph
    REGEX = "regex"  # Split after every match of a pattern


class SegmentationStrategy(BaseModel):
    """Configured splitting strategy.

    A ``REGEX`` strategy carries the pattern whose matches end a segment.
    """

    kind: SegmentationKind = Field(default=SegmentationKind.SENTENCE)
    pattern: str | None = Field(default=None, description="Boundary regex for REGEX strategy")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_pattern(self) -> SegmentationStrategy:
        if self.kind is SegmentationKind.REGEX:
            if not self.pattern:
                raise ValueError("regex segmentation requires a pattern")
            try:
                re.compile(self.pattern)
            except re.error as e:
                raise ValueError(f"invalid segmentation regex {self.pattern!r}: {e}") from e
        return self

    @classmethod
    def sentence(cls) -> SegmentationStrategy:
        return cls(kind=SegmentationKind.SENTENCE)

    @classmethod
    def paragraph(cls) -> SegmentationStrategy:
        return cls(kind=SegmentationKind.PARAGRAPH)

    @classmethod
    def regex(cls, pattern: str) -> SegmentationStrategy:
        return cls(kind=SegmentationKind.REGEX, pattern=pattern)

    @classmethod
    def parse(cls, kind: str, pattern: str | None = None) -> SegmentationStrategy:
        """Build a strategy from its textual name.

        Raises:
            ConfigurationError: If the name is unknown or the pattern invalid
        """
        try:
            return cls(kind=SegmentationKind(kind.strip().lower()), pattern=pattern)
        except ValueError as e:
            raise ConfigurationError(f"Invalid segmentation strategy {kind!r}: {e}") from e


class ProjectConfig(BaseModel):
    """Validated configuration of one bilingual project.

    Locators use the textual forms ``tag:NAME``, ``id:ID``,
    ``property:NAME=VALUE`` and ``heading:REGEX``.
    """

    name: str = Field(default="default", description="Project name")
    source_locator: str = Field(default="heading:^source$")
    translation_locator: str = Field(default="heading:^translation$")
    glossary_locator: str = Field(default="heading:^glossary$")
    strategy: SegmentationStrategy = Field(default_factory=SegmentationStrategy.sentence)
    delimiter: str = Field(default=DEFAULT_DELIMITER, description="Segment delimiter character")

    model_config = ConfigDict(frozen=True)

    @field_validator("delimiter")
    @classmethod
    def _check_delimiter(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("segment delimiter must be exactly one character")
        if value.isspace() or value.isalnum() or value in _RESERVED_DELIMITERS:
            raise ValueError(f"{value!r} cannot be used as a segment delimiter")
        return value

    @field_validator("source_locator", "translation_locator", "glossary_locator")
    @classmethod
    def _check_locator(cls, value: str) -> str:
        from tandem.core.locator import parse_locator

        try:
            parse_locator(value)
        except ConfigurationError as e:
            raise ValueError(str(e)) from e
        return value

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: object) -> ProjectConfig:
        """Build a project configuration from application settings.

        Args:
            settings: Loaded settings
            **overrides: Field values taking precedence over settings

        Raises:
            ConfigurationError: If any value is invalid
        """
        strategy = SegmentationStrategy.parse(
            settings.segmentation_strategy, settings.segmentation_regex
        )
        values: dict[str, object] = {
            "source_locator": settings.source_locator,
            "translation_locator": settings.translation_locator,
            "glossary_locator": settings.glossary_locator,
            "strategy": strategy,
            "delimiter": settings.segment_delimiter,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            issues = "; ".join(err["msg"] for err in e.errors())
            raise ConfigurationError(f"Invalid project configuration: {issues}") from e


class HighlightRange(BaseModel):
    """Half-open ``[start, end)`` span of the current source segment."""

    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)

    model_config = ConfigDict(frozen=True)

    @property
    def length(self) -> int:
        return self.end - self.start


class TrackerState(BaseModel):
    """Mutable tracker state owned by an active project.

    ``probable_source_position`` is a heuristic and is recomputed rather than
    trusted; both fields are ``None`` until the first successful resync.
    """

    probable_source_position: int | None = None
    highlight_range: HighlightRange | None = None

    def reset(self) -> None:
        self.probable_source_position = None
        self.highlight_range = None

    def shift(self, start: int, end: int, new_length: int) -> None:
        """Adjust offsets after ``[start, end)`` was replaced by ``new_length`` chars."""
        delta = new_length - (end - start)

        def moved(position: int) -> int:
            if position >= end:
                return position + delta
            if position > start:
                return start
            return position

        if self.probable_source_position is not None:
            self.probable_source_position = moved(self.probable_source_position)
        if self.highlight_range is not None:
            self.highlight_range = HighlightRange(
                start=moved(self.highlight_range.start),
                end=moved(self.highlight_range.end),
            )


class SegmentCountMismatch(BaseModel):
    """Soft inconsistency: the source stream has too few segments."""

    stream: str = Field(default="source")
    requested_index: int = Field(..., ge=0, description="Segment ordinal that was requested")
    available_segments: int = Field(..., ge=0, description="Segments present in the stream")

    @property
    def message(self) -> str:
        return (
            f"The {self.stream} stream has {self.available_segments} segment(s) but segment "
            f"{self.requested_index} was requested; re-segment the project to recover"
        )
