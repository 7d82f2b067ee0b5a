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

"""Segmentation engine.

Splits a section's text into translation units by inserting a reserved
delimiter character. One delimiter precedes every segment:

- Paragraphs and other blocks get one at their start
- Sub-headings get one right after the heading marker (``** ``)
- Inside paragraphs, the strategy's mover proposes further boundaries
- A form feed at the start of a line always starts a new segment

Boundaries are planned on the unmodified text and then inserted from the end
backwards, so planning is deterministic and insertion never reorders content.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable

from tandem.core.errors import AlreadySegmentedError
from tandem.core.models import SegmentationKind, SegmentationStrategy
from tandem.document.base import DocumentTextSource, Element, ElementKind

logger = logging.getLogger(__name__)

# A mover takes (text, position, bound) and returns the next boundary or None
Mover = Callable[[str, int, int], int | None]

SENTENCE_END_RE = re.compile(
    r"(?:[.!?…‽][\"'”’»)\]]*(?=\s|$))|(?:[。！？][」』”’)）]*)"
)
PAGE_DELIMITER_RE = re.compile(r"^\f", re.MULTILINE)


def _skip_blanks(text: str, position: int, bound: int) -> int:
    while position < bound and text[position] in " \t":
        position += 1
    return position


def sentence_mover(text: str, position: int, bound: int) -> int | None:
    """Advance past the next sentence end and the blanks after it."""
    match = SENTENCE_END_RE.search(text, position, bound)
    if not match:
        return None
    return _skip_blanks(text, match.end(), bound)


def paragraph_mover(text: str, position: int, bound: int) -> int | None:
    """Never splits inside a paragraph."""
    return None


def regex_mover(pattern: str) -> Mover:
    """Build a mover that advances past each match of ``pattern``."""
    compiled = re.compile(pattern)

    def mover(text: str, position: int, bound: int) -> int | None:
        match = compiled.search(text, position, bound)
        if match and match.end() == position:
            # Zero-width match at the current position, look further
            match = compiled.search(text, position + 1, bound) if position < bound else None
        return match.end() if match else None

    return mover


def get_mover(strategy: SegmentationStrategy) -> Mover:
    """Return the mover implementing a strategy."""
    if strategy.kind is SegmentationKind.SENTENCE:
        return sentence_mover
    if strategy.kind is SegmentationKind.PARAGRAPH:
        return paragraph_mover
    return regex_mover(strategy.pattern or "")


def paragraph_boundaries(text: str, element: Element, mover: Mover) -> list[int]:
    """Boundaries strictly inside a paragraph.

    A boundary at end of line moves to the start of the next line; one at the
    paragraph's content end is the element end and is dropped.
    """
    limit = element.content_end
    boundaries: list[int] = []
    position = element.start

    while position < limit:
        boundary = mover(text, position, limit)
        if boundary is None or boundary <= position or boundary >= limit:
            break
        if text[boundary] == "\n":
            boundary += 1
            if boundary >= limit:
                break
        boundaries.append(boundary)
        position = boundary

    for page in PAGE_DELIMITER_RE.finditer(text, element.start, limit):
        boundaries.append(page.end())

    return sorted({b for b in boundaries if element.start < b < limit})


def plan_boundaries(
    document: DocumentTextSource,
    section_id: str,
    strategy: SegmentationStrategy,
) -> list[int]:
    """Compute delimiter positions for a section without mutating it.

    Returns:
        Sorted insertion offsets in the current text
    """
    start, end = document.content_range(section_id)
    text = document.read_range(0, end)
    mover = get_mover(strategy)
    positions: list[int] = []

    for element in document.elements_in_range(start, end):
        if element.kind is ElementKind.HEADING:
            positions.append(element.marker_end if element.marker_end is not None else element.start)
        elif element.kind is ElementKind.PARAGRAPH:
            positions.append(element.start)
            positions.extend(paragraph_boundaries(text, element, mover))
        else:
            # Lists, tables and blocks stay one indivisible segment
            positions.append(element.start)

    return sorted(set(positions))


def is_segmented(document: DocumentTextSource, section_id: str, delimiter: str) -> bool:
    """Whether the section's content already contains the delimiter."""
    start, end = document.content_range(section_id)
    return document.search_forward(re.escape(delimiter), start, end) is not None


def apply_boundaries(document: DocumentTextSource, positions: Iterable[int], delimiter: str) -> int:
    """Insert the delimiter at every position, last first.

    Returns:
        Number of delimiters inserted
    """
    count = 0
    for position in sorted(set(positions), reverse=True):
        document.insert_at(position, delimiter)
        count += 1
    return count


def segment_subtree(
    document: DocumentTextSource,
    section_id: str,
    strategy: SegmentationStrategy,
    delimiter: str,
    stream: str = "source",
) -> int:
    """Segment one section in place.

    Args:
        document: Document holding the section
        section_id: Stable identifier of the section
        strategy: Intra-paragraph splitting strategy
        delimiter: Reserved delimiter character
        stream: Stream name used in error messages

    Returns:
        Number of delimiters inserted

    Raises:
        AlreadySegmentedError: If the section already contains the delimiter
    """
    if is_segmented(document, section_id, delimiter):
        raise AlreadySegmentedError(stream, delimiter)

    positions = plan_boundaries(document, section_id, strategy)
    inserted = apply_boundaries(document, positions, delimiter)
    logger.info(f"Inserted {inserted} segment delimiters into the {stream} stream")
    return inserted
