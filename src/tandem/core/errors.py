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

"""Exception hierarchy for the alignment and glossary engine.

Configuration and precondition errors propagate to the caller. Segment-count
inconsistencies are not exceptions: they are recorded on the tracker and
logged (see ``tandem.core.models.SegmentCountMismatch``).
"""

from __future__ import annotations


class TandemError(Exception):
    """Base exception for all engine errors."""

    pass


class ConfigurationError(TandemError):
    """Raised when a project cannot be configured or activated.

    Covers unresolved locators, malformed locators, invalid segmentation
    strategies and root sections that are not distinct.
    """

    pass


class LocatorNotFoundError(ConfigurationError):
    """Raised when a root section locator does not resolve."""

    def __init__(self, stream: str, locator: str):
        self.stream = stream
        self.locator = locator
        super().__init__(f"No {stream} heading located (locator: {locator!r})")


class PreconditionError(TandemError):
    """Raised when an operation is invoked in a state that forbids it.

    The operation is rejected before any state change.
    """

    pass


class AlreadySegmentedError(PreconditionError):
    """Raised when segmentation runs on a subtree that already has delimiters."""

    def __init__(self, stream: str, delimiter: str):
        self.stream = stream
        self.delimiter = delimiter
        super().__init__(
            f"The {stream} stream already contains the segment delimiter "
            f"{delimiter!r}; remove existing delimiters before re-segmenting"
        )


class GlossaryError(TandemError):
    """Raised for invalid glossary operations (unknown term, empty term)."""

    pass


class ProjectNotFoundError(TandemError):
    """Raised when a named project is missing from the registry."""

    pass


class ChoiceAborted(TandemError):
    """Raised by an interactive callback to abandon the current operation."""

    pass
