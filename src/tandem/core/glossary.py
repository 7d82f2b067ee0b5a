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

"""Glossary of recurring terms and their chosen translations.

Supports:
- Registering a source term as a glossary entry and linking its occurrences
- Retrieving previously used translations of the next term in a segment
- Most-recently-used ordering of translation alternatives
- Rebuilding the whole table from the tagged references in the document
"""

from __future__ import annotations

import logging
import re
import uuid
from collections.abc import Iterator
from dataclasses import dataclass, field

from tandem.core.errors import GlossaryError, PreconditionError
from tandem.core.tracker import Tracker
from tandem.document.base import DocumentTextSource, Span, TagReference
from tandem.document.org import format_tag_reference

logger = logging.getLogger(__name__)


@dataclass
class GlossaryEntry:
    """One glossary term.

    Attributes:
        term_id: Stable term identifier
        source_terms: Literal source strings registered under this id
        translation_alternatives: Translations used so far, most recent first
    """

    term_id: str
    source_terms: list[str] = field(default_factory=list)
    translation_alternatives: list[str] = field(default_factory=list)

    def add_source_term(self, text: str) -> None:
        if text not in self.source_terms:
            self.source_terms.append(text)

    def add_alternative(self, text: str) -> None:
        """Append a translation unless already known."""
        if text not in self.translation_alternatives:
            self.translation_alternatives.append(text)

    def promote(self, text: str) -> None:
        """Move (or add) a translation to the front."""
        if text in self.translation_alternatives:
            self.translation_alternatives.remove(text)
        self.translation_alternatives.insert(0, text)

    @property
    def label(self) -> str:
        return self.source_terms[0] if self.source_terms else self.term_id


@dataclass
class TranslationChoice:
    """Next term awaiting translation in the current segment."""

    term_id: str
    source_text: str
    candidates: list[str]


class GlossaryTable:
    """Per-project glossary table keyed by term id.

    The table is a derived cache: it can always be rebuilt from the
    document's tagged references.
    """

    def __init__(self) -> None:
        self._entries: dict[str, GlossaryEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[GlossaryEntry]:
        return iter(self._entries.values())

    def __contains__(self, term_id: object) -> bool:
        return term_id in self._entries

    def get(self, term_id: str) -> GlossaryEntry | None:
        return self._entries.get(term_id)

    def ensure(self, term_id: str) -> GlossaryEntry:
        if term_id not in self._entries:
            self._entries[term_id] = GlossaryEntry(term_id=term_id)
        return self._entries[term_id]

    def find_by_source(self, text: str) -> GlossaryEntry | None:
        for entry in self._entries.values():
            if text in entry.source_terms:
                return entry
        return None

    def clear(self) -> None:
        self._entries.clear()


class GlossaryManager:
    """Glossary operations against a document.

    Example:
        >>> manager = GlossaryManager(document, GlossaryTable())
        >>> term_id = manager.register_term("apple", glossary_id, source_id)
        >>> manager.record_translation(term_id, "pomme")
    """

    def __init__(self, document: DocumentTextSource, table: GlossaryTable):
        self.document = document
        self.table = table

    def rebuild(self, source_id: str, translation_id: str, glossary_id: str) -> int:
        """Reconstruct the table from glossary entries and tagged references.

        Returns:
            Number of entries in the rebuilt table
        """
        self.table.clear()

        for child in self.document.subsections(glossary_id):
            if child.section_id:
                self.table.ensure(child.section_id).add_source_term(child.title)

        for reference in self._references(source_id):
            self.table.ensure(reference.term_id).add_source_term(reference.display_text)
        for reference in self._references(translation_id):
            self.table.ensure(reference.term_id).add_alternative(reference.display_text)

        logger.debug(f"Rebuilt glossary table with {len(self.table)} entries")
        return len(self.table)

    def register_term(self, source_text: str, glossary_id: str, source_id: str) -> str:
        """Register a term and link its occurrences in the source stream.

        A text already registered reuses its entry. Occurrences already
        inside a tagged reference are left alone. A term spanning a line
        break is not matched.

        Returns:
            Term identifier

        Raises:
            GlossaryError: If the term is empty or contains link brackets
        """
        if not source_text.strip():
            raise GlossaryError("Cannot register an empty glossary term")
        if "[" in source_text or "]" in source_text:
            raise GlossaryError(f"Glossary term {source_text!r} cannot contain brackets")

        existing = self.table.find_by_source(source_text)
        if existing:
            term_id = existing.term_id
        else:
            term_id = str(uuid.uuid4())
            self._insert_entry(glossary_id, source_text, term_id)

        self.table.ensure(term_id).add_source_term(source_text)
        linked = self._link_occurrences(source_id, source_text, term_id)
        logger.info(f"Registered term '{source_text}' ({term_id}), linked {linked} occurrence(s)")
        return term_id

    def term_ordinal_in_segment(self, tracker: Tracker, translation_position: int) -> int:
        """Number of term references already typed in the current translation segment."""
        start, _ = self.document.content_range(tracker.translation_id)
        previous = self.document.search_backward(
            re.escape(tracker.delimiter), translation_position, start
        )
        segment_start = previous[1] if previous else start
        return len(self.document.tag_references_in_range(segment_start, translation_position))

    def next_translation_choice(
        self, tracker: Tracker, translation_position: int
    ) -> TranslationChoice | None:
        """Find the next source term to translate and its known translations.

        With ``k`` references already in the current translation segment,
        the next term is the ``(k+1)``-th reference after the probable source
        position. Neither the tracker state nor the glossary table is modified.

        Returns:
            The choice, or None when no further term follows

        Raises:
            PreconditionError: If no source location can be established
        """
        tracker.check_translation_position(translation_position)
        ordinal = self.term_ordinal_in_segment(tracker, translation_position)

        source_position = tracker.state.probable_source_position
        if source_position is None:
            index = tracker.segment_index(tracker.translation_id, translation_position)
            source_position = tracker.segment_start(tracker.source_id, index)
        if source_position is None:
            raise PreconditionError(
                "No probable position in the source stream; resync or re-segment the project"
            )

        _, source_end = self.document.content_range(tracker.source_id)
        references = self.document.tag_references_in_range(source_position, source_end)
        if len(references) <= ordinal:
            logger.debug(f"No term #{ordinal + 1} after source offset {source_position}")
            return None

        reference = references[ordinal]
        entry = self.table.get(reference.term_id)
        return TranslationChoice(
            term_id=reference.term_id,
            source_text=reference.display_text,
            candidates=list(entry.translation_alternatives) if entry else [],
        )

    def record_translation(self, term_id: str, chosen_text: str) -> GlossaryEntry:
        """Record a chosen translation as the most recent alternative.

        Raises:
            GlossaryError: If the term is unknown or the text empty
        """
        entry = self.table.get(term_id)
        if entry is None:
            raise GlossaryError(f"Unknown glossary term: {term_id}")
        if not chosen_text.strip():
            raise GlossaryError("Cannot record an empty translation")
        entry.promote(chosen_text)
        return entry

    # --- Helpers ----------------------------------------------------------

    def _references(self, section_id: str) -> list[TagReference]:
        start, end = self.document.content_range(section_id)
        return self.document.tag_references_in_range(start, end)

    def _insert_entry(self, glossary_id: str, title: str, term_id: str) -> None:
        glossary = self.document.find_section(glossary_id)
        if glossary is None:
            raise PreconditionError(f"Glossary section {glossary_id} no longer exists")

        position = self.document.first_child_insertion_point(glossary_id)
        prefix = "" if position == 0 or self.document.read_range(position - 1, position) == "\n" else "\n"
        heading = " ".join(title.split())
        entry = (
            f"{prefix}{'*' * (glossary.level + 1)} {heading}\n"
            f":PROPERTIES:\n:ID:       {term_id}\n:END:\n"
        )
        self.document.insert_at(position, entry)

    def _inside_reference(self, span: Span, references: list[TagReference]) -> bool:
        return any(ref.start <= span[0] and span[1] <= ref.end for ref in references)

    def _link_occurrences(self, source_id: str, source_text: str, term_id: str) -> int:
        pattern = re.compile(re.escape(source_text))
        replacement = format_tag_reference(term_id, source_text)
        position, _ = self.document.content_range(source_id)
        linked = 0

        while True:
            start, end = self.document.content_range(source_id)
            span = self.document.search_forward(pattern, position, end)
            if span is None:
                break
            if self._inside_reference(span, self.document.tag_references_in_range(start, end)):
                position = span[1]
                continue
            self.document.replace_range(span[0], span[1], replacement)
            position = span[0] + len(replacement)
            linked += 1

        return linked
