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

"""In-memory Org outline document.

Implements :class:`DocumentTextSource` over plain Org text:
- Headings (``* Title :tag:``) delimit sections by level
- Property drawers carry stable ``ID`` identifiers
- ``[[trans:ID][text]]`` links are the tagged term references
- A line-based classifier yields paragraphs, headings and other blocks
"""

from __future__ import annotations

import logging
import re
import uuid
from pathlib import Path

from tandem.core.errors import PreconditionError
from tandem.document.base import (
    ChangeListener,
    DocumentTextSource,
    Element,
    ElementKind,
    Pattern,
    Section,
    Span,
    TagReference,
)

logger = logging.getLogger(__name__)

HEADING_RE = re.compile(
    r"^(?P<stars>\*+)[ \t]+(?P<title>.*?)(?:[ \t]+(?P<tags>:(?:[\w@#%]+:)+))?[ \t]*$",
    re.MULTILINE,
)
PLANNING_RE = re.compile(r"^[ \t]*(?:SCHEDULED|DEADLINE|CLOSED):", re.MULTILINE)
DRAWER_RE = re.compile(r"^[ \t]*:(?P<name>[\w-]+):[ \t]*$", re.MULTILINE)
DRAWER_END_RE = re.compile(r"^[ \t]*:END:[ \t]*$", re.MULTILINE | re.IGNORECASE)
PROPERTY_RE = re.compile(
    r"^[ \t]*:(?P<key>[^:\s]+):(?:[ \t]+(?P<value>.*?))?[ \t]*$", re.MULTILINE
)
TAG_REFERENCE_RE = re.compile(r"\[\[trans:(?P<id>[^\[\]]+)\]\[(?P<text>[^\[\]]*)\]\]")

BLOCK_BEGIN_RE = re.compile(r"^[ \t]*#\+begin_(?P<name>\S+)", re.MULTILINE | re.IGNORECASE)
TABLE_RE = re.compile(r"^[ \t]*\|", re.MULTILINE)
KEYWORD_RE = re.compile(r"^[ \t]*#(?:\+|[ \t]|$)", re.MULTILINE)
FIXED_WIDTH_RE = re.compile(r"^[ \t]*:(?:[ \t]|$)", re.MULTILINE)
RULE_RE = re.compile(r"^[ \t]*-{5,}[ \t]*$", re.MULTILINE)
ITEM_RE = re.compile(r"^(?:[ \t]*[-+]|[ \t]+\*|[ \t]*\d+[.)])(?:[ \t]+|$)", re.MULTILINE)

# Line-level matchers that end a running paragraph
_INTERRUPTERS = (HEADING_RE, BLOCK_BEGIN_RE, TABLE_RE, KEYWORD_RE, FIXED_WIDTH_RE, RULE_RE, ITEM_RE)


def format_tag_reference(term_id: str, display_text: str) -> str:
    """Render a tagged reference for a glossary term."""
    return f"[[trans:{term_id}][{display_text}]]"


def _compile(pattern: Pattern) -> re.Pattern[str]:
    return pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)


class OrgDocument(DocumentTextSource):
    """Mutable Org text with outline queries.

    Parsed sections are cached until the next mutation. Every mutation
    notifies registered listeners with ``(start, end, new_length)``.

    Example:
        >>> doc = OrgDocument("* Source\\nHello.\\n* Translation\\n")
        >>> [s.title for s in doc.sections()]
        ['Source', 'Translation']
    """

    def __init__(self, text: str = "", path: Path | None = None):
        self._text = text
        self.path = path
        self.modified = False
        self._listeners: list[ChangeListener] = []
        self._sections: list[Section] | None = None

    @classmethod
    def from_path(cls, path: Path) -> OrgDocument:
        """Load a document from a UTF-8 file.

        Raises:
            FileNotFoundError: If file doesn't exist
        """
        if not path.exists():
            raise FileNotFoundError(f"Document not found: {path}")
        return cls(path.read_text(encoding="utf-8"), path=path)

    def save(self, path: Path | None = None) -> Path:
        """Write the document and clear the modified flag."""
        target = path or self.path
        if target is None:
            raise ValueError("No path given and document was not loaded from a file")
        target.write_text(self._text, encoding="utf-8")
        self.path = target
        self.modified = False
        return target

    @property
    def text(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    def position_of_line(self, line: int) -> int:
        """Offset of the start of a 1-based line number."""
        if line < 1:
            raise ValueError("Line numbers start at 1")
        position = 0
        for _ in range(line - 1):
            newline = self._text.find("\n", position)
            if newline == -1:
                raise ValueError(f"Document has fewer than {line} lines")
            position = newline + 1
        return position

    # --- Sections ---------------------------------------------------------

    def sections(self) -> list[Section]:
        if self._sections is None:
            self._sections = self._parse_sections()
        return list(self._sections)

    def find_section(self, section_id: str) -> Section | None:
        for section in self.sections():
            if section.section_id == section_id:
                return section
        return None

    def ensure_id(self, section: Section) -> str:
        if section.section_id:
            return section.section_id

        new_id = str(uuid.uuid4())
        if section.properties_body_start is not None:
            self.insert_at(section.properties_body_start, f":ID:       {new_id}\n")
        elif section.heading_end >= len(self._text):
            self.insert_at(section.heading_end, f"\n:PROPERTIES:\n:ID:       {new_id}\n:END:")
        else:
            position = section.heading_end + 1
            if PLANNING_RE.match(self._text, position):
                position = self._line_end(position, len(self._text)) + 1
                position = min(position, len(self._text))
            self.insert_at(position, f":PROPERTIES:\n:ID:       {new_id}\n:END:\n")

        logger.debug(f"Assigned ID {new_id} to section '{section.title}'")
        return new_id

    def section_range(self, section_id: str) -> Span:
        section = self._require(section_id)
        return section.start, section.end

    def content_range(self, section_id: str) -> Span:
        section = self._require(section_id)
        return section.content_start, section.end

    def section_has_children(self, section_id: str) -> bool:
        return bool(self._descendants(self._require(section_id)))

    def subsections(self, section_id: str) -> list[Section]:
        children: list[Section] = []
        for candidate in self._descendants(self._require(section_id)):
            if not any(c.start < candidate.start < c.end for c in children):
                children.append(candidate)
        return children

    def first_child_insertion_point(self, section_id: str) -> int:
        section = self._require(section_id)
        descendants = self._descendants(section)
        return descendants[0].start if descendants else section.end

    # --- Text access ------------------------------------------------------

    def read_range(self, start: int, end: int) -> str:
        return self._text[max(start, 0) : max(end, 0)]

    def insert_at(self, position: int, text: str) -> int:
        if not 0 <= position <= len(self._text):
            raise ValueError(f"Position {position} outside document (0-{len(self._text)})")
        if not text:
            return 0
        self._text = self._text[:position] + text + self._text[position:]
        self._changed(position, position, len(text))
        return len(text)

    def replace_range(self, start: int, end: int, text: str) -> int:
        if not 0 <= start <= end <= len(self._text):
            raise ValueError(f"Invalid range {start}-{end} (document length {len(self._text)})")
        self._text = self._text[:start] + text + self._text[end:]
        self._changed(start, end, len(text))
        return len(text) - (end - start)

    def search_forward(
        self, pattern: Pattern, start: int, end: int | None = None, occurrence: int = 1
    ) -> Span | None:
        if occurrence < 1:
            raise ValueError("occurrence must be positive")
        limit = len(self._text) if end is None else end
        for index, match in enumerate(_compile(pattern).finditer(self._text, start, limit), 1):
            if index == occurrence:
                return match.span()
        return None

    def search_backward(
        self, pattern: Pattern, start: int, end: int | None = None, occurrence: int = 1
    ) -> Span | None:
        if occurrence < 1:
            raise ValueError("occurrence must be positive")
        matches = list(_compile(pattern).finditer(self._text, end or 0, start))
        if len(matches) < occurrence:
            return None
        return matches[-occurrence].span()

    def tag_references_in_range(self, start: int, end: int) -> list[TagReference]:
        return [
            TagReference(
                term_id=m.group("id"),
                display_text=m.group("text"),
                start=m.start(),
                end=m.end(),
            )
            for m in TAG_REFERENCE_RE.finditer(self._text, start, end)
        ]

    def elements_in_range(self, start: int, end: int) -> list[Element]:
        lines = self._lines(start, end)
        found: list[tuple[ElementKind, int, int, int | None]] = []

        index = 0
        while index < len(lines):
            if self._is_blank(lines[index]):
                index += 1
                continue
            kind, next_index, marker_end = self._element_at(lines, index)
            last = next_index - 1
            while last > index and self._is_blank(lines[last]):
                last -= 1
            found.append((kind, lines[index][0], lines[last][1], marker_end))
            index = next_index

        elements = []
        for position, (kind, element_start, content_end, marker_end) in enumerate(found):
            element_end = found[position + 1][1] if position + 1 < len(found) else end
            elements.append(Element(kind, element_start, content_end, element_end, marker_end))
        return elements

    # --- Change notification ----------------------------------------------

    def add_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _changed(self, start: int, end: int, new_length: int) -> None:
        self._sections = None
        self.modified = True
        for listener in list(self._listeners):
            listener(start, end, new_length)

    # --- Parsing helpers --------------------------------------------------

    def _require(self, section_id: str) -> Section:
        section = self.find_section(section_id)
        if section is None:
            raise PreconditionError(f"Section with ID {section_id} no longer exists")
        return section

    def _descendants(self, section: Section) -> list[Section]:
        return [
            s
            for s in self.sections()
            if section.start < s.start < section.end and s.level > section.level
        ]

    def _line_end(self, position: int, limit: int) -> int:
        newline = self._text.find("\n", position, limit)
        return limit if newline == -1 else newline

    def _parse_sections(self) -> list[Section]:
        text = self._text
        matches = list(HEADING_RE.finditer(text))
        sections = []

        for index, match in enumerate(matches):
            level = len(match.group("stars"))
            end = len(text)
            for later in matches[index + 1 :]:
                if len(later.group("stars")) <= level:
                    end = later.start()
                    break
            next_heading = matches[index + 1].start() if index + 1 < len(matches) else len(text)
            content_start, properties, body_start = self._parse_metadata(match.end(), next_heading)
            tags = [tag for tag in (match.group("tags") or "").split(":") if tag]

            sections.append(
                Section(
                    title=match.group("title").strip(),
                    level=level,
                    start=match.start(),
                    heading_end=match.end(),
                    content_start=content_start,
                    end=end,
                    marker_end=match.start("title"),
                    tags=tags,
                    properties=properties,
                    properties_body_start=body_start,
                )
            )
        return sections

    def _parse_metadata(self, heading_end: int, limit: int) -> tuple[int, dict[str, str], int | None]:
        """Skip planning line, drawers and blank lines after a heading.

        Returns:
            (content start, properties, offset of the first property line)
        """
        text = self._text
        properties: dict[str, str] = {}
        body_start: int | None = None
        if heading_end >= limit:
            return limit, properties, body_start

        position = heading_end + 1
        if position < limit and PLANNING_RE.match(text, position):
            position = self._line_end(position, limit) + 1

        while position < limit:
            line_end = self._line_end(position, limit)
            drawer = DRAWER_RE.match(text, position, line_end)
            if not drawer or drawer.group("name").upper() == "END":
                break
            closing = DRAWER_END_RE.search(text, line_end, limit)
            if not closing:
                break
            if drawer.group("name").upper() == "PROPERTIES":
                body_start = min(line_end + 1, limit)
                for prop in PROPERTY_RE.finditer(text, body_start, closing.start()):
                    properties[prop.group("key").upper()] = prop.group("value") or ""
            position = closing.end() + 1

        # Contents begin at the first non-blank line
        while position < limit:
            line_end = self._line_end(position, limit)
            if self._text[position:line_end].strip(" \t\r"):
                break
            position = line_end + 1

        return min(position, limit), properties, body_start

    def _lines(self, start: int, end: int) -> list[Span]:
        lines = []
        position = start
        while position < end:
            line_end = self._line_end(position, end)
            lines.append((position, line_end))
            position = line_end + 1
        return lines

    def _is_blank(self, line: Span) -> bool:
        return self._text[line[0] : line[1]].strip(" \t\r") == ""

    def _matches(self, pattern: re.Pattern[str], line: Span) -> re.Match[str] | None:
        return pattern.match(self._text, line[0], line[1])

    def _interrupts(self, line: Span) -> bool:
        if any(self._matches(p, line) for p in _INTERRUPTERS):
            return True
        drawer = self._matches(DRAWER_RE, line)
        return bool(drawer and drawer.group("name").upper() != "END")

    def _closing_line(self, lines: list[Span], index: int, pattern: re.Pattern[str]) -> int | None:
        for candidate in range(index + 1, len(lines)):
            if self._matches(pattern, lines[candidate]):
                return candidate
        return None

    def _element_at(self, lines: list[Span], index: int) -> tuple[ElementKind, int, int | None]:
        """Classify the element starting at ``lines[index]``.

        Returns:
            (kind, index of the first line after the element, heading marker end)
        """
        line = lines[index]

        heading = self._matches(HEADING_RE, line)
        if heading:
            next_index = index + 1
            if next_index < len(lines) and self._matches(PLANNING_RE, lines[next_index]):
                next_index += 1
            while next_index < len(lines):
                drawer = self._matches(DRAWER_RE, lines[next_index])
                if not drawer or drawer.group("name").upper() == "END":
                    break
                closing = self._closing_line(lines, next_index, DRAWER_END_RE)
                if closing is None:
                    break
                next_index = closing + 1
            return ElementKind.HEADING, next_index, heading.start("title")

        begin = self._matches(BLOCK_BEGIN_RE, line)
        if begin:
            end_re = re.compile(rf"^[ \t]*#\+end_{re.escape(begin.group('name'))}", re.IGNORECASE)
            closing = self._closing_line(lines, index, end_re)
            if closing is not None:
                return ElementKind.OTHER_BLOCK, closing + 1, None

        drawer = self._matches(DRAWER_RE, line)
        if drawer and drawer.group("name").upper() != "END":
            closing = self._closing_line(lines, index, DRAWER_END_RE)
            if closing is not None:
                return ElementKind.OTHER_BLOCK, closing + 1, None

        if self._matches(RULE_RE, line):
            return ElementKind.OTHER_BLOCK, index + 1, None

        for pattern in (TABLE_RE, KEYWORD_RE, FIXED_WIDTH_RE):
            if self._matches(pattern, line):
                next_index = index + 1
                while next_index < len(lines) and self._matches(pattern, lines[next_index]):
                    next_index += 1
                return ElementKind.OTHER_BLOCK, next_index, None

        if self._matches(ITEM_RE, line):
            return ElementKind.OTHER_BLOCK, self._list_end(lines, index), None

        next_index = index + 1
        while (
            next_index < len(lines)
            and not self._is_blank(lines[next_index])
            and not self._interrupts(lines[next_index])
        ):
            next_index += 1
        return ElementKind.PARAGRAPH, next_index, None

    def _list_end(self, lines: list[Span], index: int) -> int:
        def continues(line: Span) -> bool:
            if self._matches(ITEM_RE, line):
                return True
            return not self._is_blank(line) and self._text[line[0]] in " \t"

        next_index = index + 1
        while next_index < len(lines):
            if continues(lines[next_index]):
                next_index += 1
            elif (
                self._is_blank(lines[next_index])
                and next_index + 1 < len(lines)
                and continues(lines[next_index + 1])
            ):
                next_index += 2
            else:
                break
        return next_index
