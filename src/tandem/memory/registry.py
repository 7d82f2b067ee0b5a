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

"""Named project registry.

Records where each bilingual project lives so a session can be resumed by
name. Engine state itself is never stored here: it lives in the documents
as tagged references and section IDs.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from tandem.core.errors import ProjectNotFoundError, TandemError

logger = logging.getLogger(__name__)


class ProjectRecord(BaseModel):
    """Bookmark-like record of one project."""

    name: str = Field(..., min_length=1, description="Project name")
    path: Path = Field(..., description="Document location")
    active: bool = Field(default=False, description="Whether the project is the active session")
    source_locator: str | None = Field(default=None, description="Source locator override")
    translation_locator: str | None = Field(default=None, description="Translation locator override")
    glossary_locator: str | None = Field(default=None, description="Glossary locator override")
    updated_at: datetime | None = Field(default=None, description="Last modification time")


class ProjectRegistry:
    """JSON-backed registry of named projects.

    At most one project is marked active.

    Example:
        >>> registry = ProjectRegistry(Path("~/.tandem/projects.json").expanduser())
        >>> registry.add(ProjectRecord(name="novel", path=Path("novel.org")))
        >>> registry.set_active("novel")
    """

    def __init__(self, path: Path):
        self.path = path
        self._records: dict[str, ProjectRecord] = {}
        self._loaded = False

    def load(self) -> None:
        """Read the registry file if it exists.

        Raises:
            TandemError: If the file is not a valid registry
        """
        self._records = {}
        self._loaded = True
        if not self.path.exists():
            return

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            records = [ProjectRecord.model_validate(item) for item in data.get("projects", [])]
        except (json.JSONDecodeError, ValidationError, AttributeError) as e:
            raise TandemError(f"Invalid project registry {self.path}: {e}") from e

        self._records = {record.name: record for record in records}
        logger.debug(f"Loaded {len(self._records)} projects from {self.path}")

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {"projects": [r.model_dump(mode="json") for r in self._records.values()]}
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def add(self, record: ProjectRecord) -> ProjectRecord:
        """Add or replace a project and persist the registry."""
        self._ensure_loaded()
        stored = record.model_copy(update={"updated_at": datetime.now()})
        if stored.active:
            for other in self._records.values():
                other.active = False
        self._records[stored.name] = stored
        self.save()
        logger.info(f"Registered project '{stored.name}' at {stored.path}")
        return stored

    def get(self, name: str) -> ProjectRecord:
        """Look up a project by name.

        Raises:
            ProjectNotFoundError: If no such project is registered
        """
        self._ensure_loaded()
        record = self._records.get(name)
        if record is None:
            raise ProjectNotFoundError(f"Project '{name}' not found in {self.path}")
        return record

    def list_projects(self) -> list[ProjectRecord]:
        self._ensure_loaded()
        return sorted(self._records.values(), key=lambda r: r.name)

    def remove(self, name: str) -> bool:
        self._ensure_loaded()
        if name not in self._records:
            return False
        del self._records[name]
        self.save()
        return True

    def set_active(self, name: str) -> ProjectRecord:
        """Mark one project active and all others inactive."""
        record = self.get(name)
        for other in self._records.values():
            other.active = other.name == name
        record.updated_at = datetime.now()
        self.save()
        return record

    def clear_active(self) -> None:
        self._ensure_loaded()
        for record in self._records.values():
            record.active = False
        self.save()

    def active(self) -> ProjectRecord | None:
        self._ensure_loaded()
        for record in self._records.values():
            if record.active:
                return record
        return None
