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

"""Project session tying the engine components to one document.

A :class:`Project` owns the tracker state and the glossary table of one open
document. Interactive decisions (segmentation confirmation, term translation
choice) are synchronous callbacks; an abort leaves all state unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from tandem.core.errors import (
    AlreadySegmentedError,
    ChoiceAborted,
    ConfigurationError,
    LocatorNotFoundError,
    PreconditionError,
)
from tandem.core.glossary import GlossaryManager, GlossaryTable, TranslationChoice
from tandem.core.locator import LocatorResolver, parse_locator
from tandem.core.models import ProjectConfig, TrackerState
from tandem.core.progress import compute_progress
from tandem.core.segmentation import apply_boundaries, is_segmented, plan_boundaries
from tandem.core.tracker import Tracker
from tandem.document.base import DocumentTextSource
from tandem.document.org import format_tag_reference

logger = logging.getLogger(__name__)


@dataclass
class SegmentationPlan:
    """Delimiter positions planned for a project, before insertion."""

    source_positions: list[int]
    translation_positions: list[int]

    @property
    def source_segments(self) -> int:
        return len(self.source_positions)

    @property
    def translation_segments(self) -> int:
        return len(self.translation_positions)


ConfirmCallback = Callable[[SegmentationPlan], bool]
ChoiceCallback = Callable[[TranslationChoice], str | None]


class Project:
    """Active translation session over a document.

    Example:
        >>> project = Project(OrgDocument.from_path(path), ProjectConfig())
        >>> project.activate()
        >>> project.segment()
        >>> project.resync(cursor)
        >>> print(project.progress())
    """

    def __init__(self, document: DocumentTextSource, config: ProjectConfig | None = None):
        self.document = document
        self.config = config or ProjectConfig()
        self.state = TrackerState()
        self.glossary = GlossaryTable()
        self.manager = GlossaryManager(document, self.glossary)
        self.source_id: str | None = None
        self.translation_id: str | None = None
        self.glossary_id: str | None = None
        self._tracker: Tracker | None = None

    @property
    def active(self) -> bool:
        return self._tracker is not None

    @property
    def tracker(self) -> Tracker:
        if self._tracker is None:
            raise PreconditionError(f"Project '{self.config.name}' is not active")
        return self._tracker

    # --- Lifecycle --------------------------------------------------------

    def activate(self) -> None:
        """Resolve the root sections and rebuild the glossary table.

        Raises:
            ConfigurationError: If a root is missing or roots are not distinct
        """
        if self.active:
            return

        resolver = LocatorResolver(self.document)
        resolved: dict[str, str] = {}
        for stream, spec in (
            ("source", self.config.source_locator),
            ("translation", self.config.translation_locator),
            ("glossary", self.config.glossary_locator),
        ):
            section_id = resolver.resolve(parse_locator(spec))
            if section_id is None:
                raise LocatorNotFoundError(stream, spec)
            resolved[stream] = section_id

        if len(set(resolved.values())) != len(resolved):
            raise ConfigurationError(
                "Source, translation and glossary locators must resolve to distinct sections"
            )

        self.source_id = resolved["source"]
        self.translation_id = resolved["translation"]
        self.glossary_id = resolved["glossary"]
        self.state.reset()
        self._tracker = Tracker(
            self.document, self.source_id, self.translation_id, self.config.delimiter, self.state
        )
        self.manager.rebuild(self.source_id, self.translation_id, self.glossary_id)
        self.document.add_listener(self._on_change)
        logger.info(f"Activated project '{self.config.name}' ({len(self.glossary)} glossary terms)")

    def deactivate(self) -> None:
        if not self.active:
            return
        self.document.remove_listener(self._on_change)
        self.state.reset()
        self._tracker = None
        logger.info(f"Deactivated project '{self.config.name}'")

    # --- Segmentation -----------------------------------------------------

    def plan_segmentation(self, include_translation: bool = True) -> SegmentationPlan:
        """Plan delimiter insertion for both streams.

        The translation is planned only if it has no delimiter yet.

        Raises:
            AlreadySegmentedError: If the source is already segmented
        """
        tracker = self.tracker
        if is_segmented(self.document, tracker.source_id, self.config.delimiter):
            raise AlreadySegmentedError("source", self.config.delimiter)

        source = plan_boundaries(self.document, tracker.source_id, self.config.strategy)
        translation: list[int] = []
        if include_translation and not is_segmented(
            self.document, tracker.translation_id, self.config.delimiter
        ):
            translation = plan_boundaries(self.document, tracker.translation_id, self.config.strategy)
        return SegmentationPlan(source_positions=source, translation_positions=translation)

    def segment(
        self, include_translation: bool = True, confirm: ConfirmCallback | None = None
    ) -> SegmentationPlan | None:
        """Segment the project, asking for confirmation first if a callback is given.

        Returns:
            The applied plan, or None if confirmation was refused
        """
        plan = self.plan_segmentation(include_translation)
        if confirm is not None:
            try:
                accepted = confirm(plan)
            except ChoiceAborted:
                accepted = False
            if not accepted:
                logger.info("Segmentation aborted; document unchanged")
                return None

        inserted = apply_boundaries(
            self.document, plan.source_positions + plan.translation_positions, self.config.delimiter
        )
        logger.info(
            f"Segmented project '{self.config.name}': {plan.source_segments} source and "
            f"{plan.translation_segments} translation segments ({inserted} delimiters)"
        )
        return plan

    # --- Navigation -------------------------------------------------------

    def resync(self, translation_position: int) -> int | None:
        """Recompute the probable source position from the translation cursor."""
        return self.tracker.locate_in_source(translation_position)

    def navigate(self, cursor: int, count: int) -> int:
        """Move the translation cursor by ``count`` segments; returns the new cursor."""
        return self.tracker.move_segments(cursor, count)

    def new_segment(self, cursor: int) -> int:
        """Insert a segment boundary at the translation cursor.

        The probable source position advances one segment.

        Returns:
            Cursor after the inserted delimiter
        """
        tracker = self.tracker
        tracker.check_translation_position(cursor)
        self.document.insert_at(cursor, self.config.delimiter)
        new_cursor = cursor + len(self.config.delimiter)
        if self.state.probable_source_position is None:
            tracker.locate_in_source(new_cursor)
        else:
            tracker.advance_source(1)
        return new_cursor

    def progress(self) -> float:
        return compute_progress(self.document, self.tracker.source_id, self.state)

    def current_source_segment(self) -> str | None:
        """Text of the highlighted source segment, if any."""
        if self.state.highlight_range is None:
            return None
        return self.document.read_range(self.state.highlight_range.start, self.state.highlight_range.end)

    # --- Glossary ---------------------------------------------------------

    def register_term(self, source_text: str) -> str:
        tracker = self.tracker
        return self.manager.register_term(source_text, str(self.glossary_id), tracker.source_id)

    def next_translation_choice(self, cursor: int) -> TranslationChoice | None:
        return self.manager.next_translation_choice(self.tracker, cursor)

    def record_translation(self, term_id: str, chosen_text: str) -> None:
        self.manager.record_translation(term_id, chosen_text)

    def insert_term_translation(self, cursor: int, choose: ChoiceCallback) -> int | None:
        """Ask for the next term's translation and insert it at the cursor.

        Args:
            cursor: Translation cursor
            choose: Callback returning the chosen text, or None to abort.
                An abort leaves all project state untouched.

        Returns:
            Cursor after the inserted reference, or None if nothing was inserted
        """
        choice = self.next_translation_choice(cursor)
        if choice is None:
            return None
        try:
            chosen = choose(choice)
        except ChoiceAborted:
            chosen = None
        if not chosen:
            logger.info(f"Translation choice for '{choice.source_text}' aborted")
            return None

        if self.state.probable_source_position is None:
            self.tracker.locate_in_source(cursor)
        self.glossary.ensure(choice.term_id).add_source_term(choice.source_text)
        self.manager.record_translation(choice.term_id, chosen)
        reference = format_tag_reference(choice.term_id, chosen)
        self.document.insert_at(cursor, reference)
        return cursor + len(reference)

    # --- Change tracking --------------------------------------------------

    def _on_change(self, start: int, end: int, new_length: int) -> None:
        self.state.shift(start, end, new_length)
