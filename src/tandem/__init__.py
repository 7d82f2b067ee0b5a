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

"""
Tandem - segment alignment and glossary engine

Keeps a source text and its translation in ordinal correspondence inside one
Org document, with a glossary of recurring terms and their translations.
"""

__version__ = "0.1.0"
__author__ = "Tandem Development"

from tandem.core import (
    GlossaryEntry,
    Project,
    ProjectConfig,
    SegmentationStrategy,
    TandemError,
)
from tandem.document import OrgDocument

__all__ = [
    "GlossaryEntry",
    "OrgDocument",
    "Project",
    "ProjectConfig",
    "SegmentationStrategy",
    "TandemError",
    "__version__",
]
