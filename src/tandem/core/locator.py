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

"""Locator resolution for the source, translation and glossary roots.

A locator finds a section once; the section then receives a durable ``ID``
property so later activations resolve it directly.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from tandem.core.errors import ConfigurationError
from tandem.document.base import DocumentTextSource, Section

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TagLocator:
    """First section carrying the tag."""

    text: str

    def matches(self, section: Section) -> bool:
        return self.text in section.tags


@dataclass(frozen=True)
class StableIdLocator:
    """Section whose ``ID`` property equals the identifier."""

    id: str

    def matches(self, section: Section) -> bool:
        return section.section_id == self.id


@dataclass(frozen=True)
class PropertyLocator:
    """First section whose property equals the value."""

    name: str
    value: str

    def matches(self, section: Section) -> bool:
        return section.properties.get(self.name.upper()) == self.value


@dataclass(frozen=True)
class HeadingTextLocator:
    """First section whose heading text matches the pattern, ignoring case."""

    pattern: str

    def matches(self, section: Section) -> bool:
        return re.search(self.pattern, section.title, re.IGNORECASE) is not None


Locator = TagLocator | StableIdLocator | PropertyLocator | HeadingTextLocator


def parse_locator(spec: str) -> Locator:
    """Parse ``kind:argument`` into a locator.

    Supported forms: ``tag:NAME``, ``id:ID``, ``property:NAME=VALUE``,
    ``heading:REGEX``.

    Raises:
        ConfigurationError: If the form is unknown or the argument invalid
    """
    kind, sep, argument = spec.partition(":")
    kind = kind.strip().lower()
    if not sep or not argument:
        raise ConfigurationError(f"Malformed locator {spec!r}; expected kind:argument")

    if kind == "tag":
        return TagLocator(argument.strip())
    if kind == "id":
        return StableIdLocator(argument.strip())
    if kind == "property":
        name, eq, value = argument.partition("=")
        if not eq or not name.strip():
            raise ConfigurationError(f"Malformed property locator {spec!r}; expected NAME=VALUE")
        return PropertyLocator(name.strip(), value.strip())
    if kind == "heading":
        try:
            re.compile(argument)
        except re.error as e:
            raise ConfigurationError(f"Invalid heading pattern in locator {spec!r}: {e}") from e
        return HeadingTextLocator(argument)

    raise ConfigurationError(f"Unknown locator kind {kind!r} in {spec!r}")


class LocatorResolver:
    """Resolve locators against a document.

    Example:
        >>> resolver = LocatorResolver(document)
        >>> section_id = resolver.resolve(TagLocator("source"))
    """

    def __init__(self, document: DocumentTextSource):
        self.document = document

    def resolve(self, locator: Locator) -> str | None:
        """Return the stable identifier of the first matching section.

        Sections are scanned in document order. Non-``StableIdLocator``
        matches receive an ``ID`` property if they lack one.

        Returns:
            Section identifier, or None if nothing matches
        """
        for section in self.document.sections():
            if not locator.matches(section):
                continue
            if isinstance(locator, StableIdLocator):
                return locator.id
            section_id = self.document.ensure_id(section)
            logger.debug(f"Resolved {locator} to section '{section.title}' ({section_id})")
            return section_id

        logger.debug(f"Locator {locator} matched no section")
        return None

    def resolve_spec(self, spec: str) -> str | None:
        """Parse and resolve a textual locator."""
        return self.resolve(parse_locator(spec))
