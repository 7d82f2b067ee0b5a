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

"""Document text source abstraction.

The engine never parses documents itself: it reads and mutates text through
this interface, addressing sections by stable identifiers and positions by
0-based character offsets.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

Pattern = str | re.Pattern[str]
Span = tuple[int, int]

# Called with (start, end, new_length) after [start, end) was replaced
ChangeListener = Callable[[int, int, int], None]


class ElementKind(str, Enum):
    """Structural element kinds seen by the segmentation walk."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    OTHER_BLOCK = "other_block"


@dataclass(frozen=True)
class Element:
    """Structural element inside a section.

    Attributes:
        kind: Element kind
        start: Offset of the element's first character
        content_end: End of its last non-blank line
        end: Start of the following element (trailing blank lines included)
        marker_end: For headings, the offset right after the heading marker
    """

    kind: ElementKind
    start: int
    content_end: int
    end: int
    marker_end: int | None = None


@dataclass(frozen=True)
class TagReference:
    """Inline reference linking a span of text to a glossary term."""

    term_id: str
    display_text: str
    start: int
    end: int


@dataclass
class Section:
    """Outline section as parsed from the current text."""

    title: str
    level: int
    start: int
    heading_end: int
    content_start: int
    end: int
    marker_end: int
    tags: list[str] = field(default_factory=list)
    properties: dict[str, str] = field(default_factory=dict)
    properties_body_start: int | None = None

    @property
    def section_id(self) -> str | None:
        return self.properties.get("ID")


class DocumentTextSource(ABC):
    """Text stream with structural queries, consumed by the engine."""

    @abstractmethod
    def sections(self) -> list[Section]:
        """All sections in document order."""

    @abstractmethod
    def find_section(self, section_id: str) -> Section | None:
        """Direct lookup by stable identifier."""

    @abstractmethod
    def ensure_id(self, section: Section) -> str:
        """Return the section's stable identifier, creating one if missing."""

    @abstractmethod
    def section_range(self, section_id: str) -> Span:
        """``(start, end)`` of the whole section, heading included."""

    @abstractmethod
    def content_range(self, section_id: str) -> Span:
        """``(start, end)`` of the section after its metadata region."""

    @abstractmethod
    def section_has_children(self, section_id: str) -> bool:
        """Whether the section contains sub-headings."""

    @abstractmethod
    def subsections(self, section_id: str) -> list[Section]:
        """Direct child sections in document order."""

    @abstractmethod
    def first_child_insertion_point(self, section_id: str) -> int:
        """Line-start offset where a new first child heading goes."""

    @abstractmethod
    def read_range(self, start: int, end: int) -> str:
        """Text in ``[start, end)``."""

    @abstractmethod
    def insert_at(self, position: int, text: str) -> int:
        """Insert text and return the number of characters inserted."""

    @abstractmethod
    def replace_range(self, start: int, end: int, text: str) -> int:
        """Replace ``[start, end)`` and return the length delta."""

    @abstractmethod
    def search_forward(
        self, pattern: Pattern, start: int, end: int | None = None, occurrence: int = 1
    ) -> Span | None:
        """Span of the ``occurrence``-th match in ``[start, end)``."""

    @abstractmethod
    def search_backward(
        self, pattern: Pattern, start: int, end: int | None = None, occurrence: int = 1
    ) -> Span | None:
        """Span of the ``occurrence``-th match before ``start``, bounded below by ``end``."""

    @abstractmethod
    def tag_references_in_range(self, start: int, end: int) -> list[TagReference]:
        """Tagged references fully inside ``[start, end)``."""

    @abstractmethod
    def elements_in_range(self, start: int, end: int) -> list[Element]:
        """Structural elements in ``[start, end)``."""

    @abstractmethod
    def add_listener(self, listener: ChangeListener) -> None:
        """Subscribe to text mutations."""

    @abstractmethod
    def remove_listener(self, listener: ChangeListener) -> None:
        """Unsubscribe from text mutations."""
