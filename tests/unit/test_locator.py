"""Unit tests for root section locators."""

import pytest

from tandem.core import ConfigurationError
from tandem.core.locator import (
    HeadingTextLocator,
    LocatorResolver,
    PropertyLocator,
    StableIdLocator,
    TagLocator,
    parse_locator,
)
from tandem.document import OrgDocument

DOCUMENT = """* Notes
* Original :en:
:PROPERTIES:
:LANG:     en
:END:
Text.
* Version française :fr:
Texte.
"""


@pytest.mark.unit
class TestParseLocator:
    """Tests for the textual locator forms."""

    @pytest.mark.parametrize(
        "spec,expected",
        [
            ("tag:en", TagLocator("en")),
            ("id:abc-123", StableIdLocator("abc-123")),
            ("property:lang=fr", PropertyLocator("lang", "fr")),
            ("heading:^source$", HeadingTextLocator("^source$")),
            ("HEADING:glossary", HeadingTextLocator("glossary")),
        ],
    )
    def test_valid_forms(self, spec: str, expected: object) -> None:
        assert parse_locator(spec) == expected

    @pytest.mark.parametrize(
        "spec",
        ["source", "tag:", "colour:red", "property:lang", "property:=x", "heading:(unclosed"],
    )
    def test_invalid_forms(self, spec: str) -> None:
        with pytest.raises(ConfigurationError):
            parse_locator(spec)


@pytest.mark.unit
class TestLocatorResolver:
    """Tests for resolving locators to stable identifiers."""

    def test_resolve_by_tag_assigns_id(self) -> None:
        doc = OrgDocument(DOCUMENT)
        section_id = LocatorResolver(doc).resolve(TagLocator("fr"))

        assert section_id is not None
        assert doc.find_section(section_id).title == "Version française"

    def test_resolve_by_property(self) -> None:
        doc = OrgDocument(DOCUMENT)
        section_id = LocatorResolver(doc).resolve(PropertyLocator("lang", "en"))
        assert doc.find_section(section_id).title == "Original"

    def test_heading_match_ignores_case(self) -> None:
        doc = OrgDocument(DOCUMENT)
        section_id = LocatorResolver(doc).resolve_spec("heading:^original$")
        assert doc.find_section(section_id).title == "Original"

    def test_first_match_wins(self) -> None:
        doc = OrgDocument(DOCUMENT)
        section_id = LocatorResolver(doc).resolve(HeadingTextLocator("o"))
        assert doc.find_section(section_id).title == "Notes"

    def test_resolving_twice_keeps_the_id(self) -> None:
        doc = OrgDocument(DOCUMENT)
        resolver = LocatorResolver(doc)

        first = resolver.resolve(TagLocator("en"))
        text = doc.text
        second = resolver.resolve(TagLocator("en"))

        assert first == second
        assert doc.text == text
        assert resolver.resolve(StableIdLocator(first)) == first

    def test_no_match(self) -> None:
        doc = OrgDocument(DOCUMENT)
        resolver = LocatorResolver(doc)

        assert resolver.resolve(TagLocator("de")) is None
        assert resolver.resolve(StableIdLocator("nope")) is None
        assert doc.text == DOCUMENT
