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

"""Correspondence tracking between the translation and source streams.

Segments are never stored: the ordinal of the segment under a position is
the number of delimiters between the stream's content start and that
position. The tracker maps a translation position to the start of the
segment with the same ordinal in the source stream.
"""

from __future__ import annotations

import logging
import re

from tandem.core.errors import PreconditionError
from tandem.core.models import HighlightRange, SegmentCountMismatch, TrackerState
from tandem.document.base import DocumentTextSource

logger = logging.getLogger(__name__)

BLANK_LINE_RE = re.compile(r"\n[ \t]*\n")


class Tracker:
    """Ordinal segment tracker for one project.

    The tracker shares its :class:`TrackerState` with the owning project. A
    segment-count mismatch leaves the state untouched and is recorded in
    :attr:`last_inconsistency`.

    Example:
        >>> tracker = Tracker(document, source_id, translation_id, "µ", TrackerState())
        >>> tracker.locate_in_source(cursor)
        118
    """

    def __init__(
        self,
        document: DocumentTextSource,
        source_id: str,
        translation_id: str,
        delimiter: str,
        state: TrackerState,
    ):
        self.document = document
        self.source_id = source_id
        self.translation_id = translation_id
        self.delimiter = delimiter
        self.state = state
        self.last_inconsistency: SegmentCountMismatch | None = None
        self._delimiter_re = re.compile(re.escape(delimiter))

    # --- Ordinal arithmetic -----------------------------------------------

    def segment_index(self, stream_id: str, position: int) -> int:
        """0-based ordinal of the segment containing ``position``.

        A delimiter sitting exactly on the content start is not counted.
        """
        start, _ = self.document.content_range(stream_id)
        if position <= start + 1:
            return 0
        return self.document.read_range(start + 1, position).count(self.delimiter)

    def segment_count(self, stream_id: str) -> int:
        start, end = self.document.content_range(stream_id)
        return self.segment_index(stream_id, end) + 1 if end > start else 0

    def segment_start(self, stream_id: str, index: int) -> int | None:
        """Offset where segment ``index`` starts, or None if it doesn't exist."""
        start, end = self.document.content_range(stream_id)
        if index <= 0:
            if start < end and self.document.read_range(start, start + 1) == self.delimiter:
                return start + 1
            return start
        span = self.document.search_forward(self._delimiter_re, start + 1, end, occurrence=index)
        return span[1] if span else None

    def check_translation_position(self, position: int) -> None:
        """Reject positions outside the translation stream.

        Raises:
            PreconditionError: If ``position`` lies outside the stream
        """
        start, end = self.document.content_range(self.translation_id)
        if not start <= position <= end:
            raise PreconditionError(
                f"Position {position} is outside the translation stream ({start}-{end})"
            )

    # --- Operations -------------------------------------------------------

    def locate_in_source(self, translation_position: int) -> int | None:
        """Resync the probable source position from a translation position.

        Returns:
            Start of the matching source segment, or None on a count mismatch

        Raises:
            PreconditionError: If the position is outside the translation stream
        """
        self.check_translation_position(translation_position)
        index = self.segment_index(self.translation_id, translation_position)
        position = self.segment_start(self.source_id, index)
        if position is None:
            self._report_mismatch(index)
            return None

        logger.debug(f"Translation segment {index} maps to source offset {position}")
        self._set_probable(position)
        return position

    def move_segments(self, cursor: int, count: int) -> int:
        """Move the translation cursor across ``count`` segments.

        Negative counts move backward. Forward movement stops at the end of
        the stream, backward movement at the first segment. The source side
        mirrors the actual movement from the current probable position, or is
        recomputed when no usable probable position exists.

        Returns:
            New translation cursor
        """
        self.check_translation_position(cursor)
        old_index = self.segment_index(self.translation_id, cursor)
        new_cursor = self._step(self.translation_id, old_index, count)
        delta = self.segment_index(self.translation_id, new_cursor) - old_index

        probable = self._usable_probable()
        if probable is None:
            self.locate_in_source(new_cursor)
            return new_cursor

        target = max(0, self.segment_index(self.source_id, probable) + delta)
        position = self.segment_start(self.source_id, target)
        if position is None:
            self._report_mismatch(target)
        else:
            self._set_probable(position)
        return new_cursor

    def advance_source(self, count: int = 1) -> int | None:
        """Move the probable source position by ``count`` segments.

        Returns:
            New probable position, or None on a count mismatch
        """
        probable = self._usable_probable()
        if probable is None:
            return None
        target = max(0, self.segment_index(self.source_id, probable) + count)
        position = self.segment_start(self.source_id, target)
        if position is None:
            self._report_mismatch(target)
            return None
        self._set_probable(position)
        return position

    def compute_highlight(self, position: int) -> HighlightRange:
        """Span of the source segment implied by ``position``.

        A position sitting on a delimiter selects the following segment. The
        end is the next delimiter, else the next blank line, else the stream
        end; trailing whitespace is trimmed from the first two.
        """
        start, end = self.document.content_range(self.source_id)
        if position < end and self.document.read_range(position, position + 1) == self.delimiter:
            position += 1

        previous = self.document.search_backward(self._delimiter_re, position, start)
        segment_start = previous[1] if previous else start

        following = self.document.search_forward(self._delimiter_re, position, end)
        if following:
            segment_end = self._trim(segment_start, following[0])
        else:
            blank = self.document.search_forward(BLANK_LINE_RE, position, end)
            segment_end = self._trim(segment_start, blank[0]) if blank else end

        return HighlightRange(start=segment_start, end=max(segment_start, segment_end))

    # --- Helpers ----------------------------------------------------------

    def _step(self, stream_id: str, index: int, count: int) -> int:
        target = max(0, index + count)
        position = self.segment_start(stream_id, target)
        if position is None:
            return self.document.content_range(stream_id)[1]
        return position

    def _usable_probable(self) -> int | None:
        probable = self.state.probable_source_position
        if probable is None:
            return None
        start, end = self.document.content_range(self.source_id)
        if not start <= probable <= end:
            logger.debug(f"Discarding stale probable source position {probable}")
            return None
        return probable

    def _set_probable(self, position: int) -> None:
        self.state.probable_source_position = position
        self.state.highlight_range = self.compute_highlight(position)
        self.last_inconsistency = None

    def _trim(self, start: int, end: int) -> int:
        return start + len(self.document.read_range(start, end).rstrip())

    def _report_mismatch(self, index: int) -> None:
        mismatch = SegmentCountMismatch(
            stream="source",
            requested_index=index,
            available_segments=self.segment_count(self.source_id),
        )
        self.last_inconsistency = mismatch
        logger.warning(mismatch.message)
