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

"""Translation progress over the source stream."""

from __future__ import annotations

from tandem.core.errors import PreconditionError
from tandem.core.models import TrackerState
from tandem.document.base import DocumentTextSource


def compute_progress(document: DocumentTextSource, source_id: str, state: TrackerState) -> float:
    """Percentage of the source stream before the probable source position.

    The value is not clamped: a position before the content start yields a
    negative figure.

    Raises:
        PreconditionError: If the tracker has no probable source position
    """
    if state.probable_source_position is None:
        raise PreconditionError(
            "No probable position in the source stream yet; resync from the translation first"
        )
    start, end = document.content_range(source_id)
    if end <= start:
        return 100.0
    return (state.probable_source_position - start) / (end - start) * 100


def format_progress(percentage: float) -> str:
    return f"{percentage:.1f}%"
