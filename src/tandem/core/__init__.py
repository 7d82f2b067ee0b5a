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

"""Core engine: segmentation, correspondence tracking, glossary and progress."""

from tandem.core.errors import (
    AlreadySegmentedError,
    ChoiceAborted,
    ConfigurationError,
    GlossaryError,
    LocatorNotFoundError,
    PreconditionError,
    ProjectNotFoundError,
    TandemError,
)
from tandem.core.models import (
    HighlightRange,
    ProjectConfig,
    SegmentationKind,
    SegmentationStrategy,
    SegmentCountMismatch,
    TrackerState,
)
from tandem.core.locator import (
    HeadingTextLocator,
    LocatorResolver,
    PropertyLocator,
    StableIdLocator,
    TagLocator,
    parse_locator,
)
from tandem.core.segmentation import plan_boundaries, segment_subtree
from tandem.core.tracker import Tracker
from tandem.core.glossary import GlossaryEntry, GlossaryManager, GlossaryTable, TranslationChoice
from tandem.core.progress import compute_progress
from tandem.core.project import Project, SegmentationPlan

__all__ = [
    "AlreadySegmentedError",
    "ChoiceAborted",
    "ConfigurationError",
    "GlossaryEntry",
    "GlossaryError",
    "GlossaryManager",
    "GlossaryTable",
    "HeadingTextLocator",
    "HighlightRange",
    "LocatorNotFoundError",
    "LocatorResolver",
    "PreconditionError",
    "Project",
    "ProjectConfig",
    "ProjectNotFoundError",
    "PropertyLocator",
    "SegmentCountMismatch",
    "SegmentationKind",
    "SegmentationPlan",
    "SegmentationStrategy",
    "StableIdLocator",
    "TagLocator",
    "TandemError",
    "Tracker",
    "TrackerState",
    "TranslationChoice",
    "compute_progress",
    "parse_locator",
    "plan_boundaries",
    "segment_subtree",
]
