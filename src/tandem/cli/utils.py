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

"""Shared helpers for CLI commands."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.markup import escape

from tandem.core import Project, ProjectConfig, SegmentationStrategy
from tandem.document import OrgDocument
from tandem.memory import ProjectRecord
from tandem.utils.config import Settings, get_settings
from tandem.utils.console import console, print_error, print_warning


def configure_logging(verbose: bool, settings: Settings | None = None) -> None:
    """Configure root logging from --verbose or the configured level."""
    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, (settings or get_settings()).log_level, logging.WARNING)
    logging.basicConfig(level=level, format="%(message)s", force=True)


def build_config(
    settings: Settings,
    record: ProjectRecord | None = None,
    strategy: str | None = None,
    pattern: str | None = None,
    delimiter: str | None = None,
) -> ProjectConfig:
    """Project configuration from settings, registry record and command options."""
    overrides: dict[str, object] = {}
    if record is not None:
        overrides.update(
            name=record.name,
            source_locator=record.source_locator,
            translation_locator=record.translation_locator,
            glossary_locator=record.glossary_locator,
        )
    if strategy is not None:
        overrides["strategy"] = SegmentationStrategy.parse(
            strategy, pattern if pattern is not None else settings.segmentation_regex
        )
    if delimiter is not None:
        overrides["delimiter"] = delimiter
    return ProjectConfig.from_settings(settings, **overrides)


def open_project(file: Path, config: ProjectConfig) -> Project:
    """Load a document and activate a project on it.

    Raises:
        typer.Exit: If the file does not exist
    """
    if not file.exists():
        print_error(f"File not found: {file}")
        raise typer.Exit(code=1)
    project = Project(OrgDocument.from_path(file), config)
    project.activate()
    return project


def resolve_cursor(project: Project, position: int | None, line: int | None) -> int:
    """Translation cursor from --position or --line.

    Without either, the cursor is the end of the translation stream.
    """
    document = project.document
    if position is not None:
        return position
    if line is not None:
        if not isinstance(document, OrgDocument):
            raise typer.BadParameter("--line requires an Org document")
        return document.position_of_line(line)
    return document.content_range(project.tracker.translation_id)[1]


def save_if_modified(project: Project) -> None:
    document = project.document
    if isinstance(document, OrgDocument) and document.modified:
        path = document.save()
        console.print(f"[dim]Saved {escape(str(path))}[/dim]")


def report_inconsistency(project: Project) -> bool:
    """Print the tracker's soft inconsistency, if any.

    Returns:
        True if an inconsistency was reported
    """
    mismatch = project.tracker.last_inconsistency
    if mismatch is None:
        return False
    print_warning(mismatch.message)
    return True


def show_source_segment(project: Project) -> None:
    text = project.current_source_segment()
    if text is None:
        console.print("[dim]No source segment located[/dim]")
        return
    highlight = project.state.highlight_range
    if highlight is not None:
        console.print(f"[bold]Source segment[/bold] [dim]({highlight.start}-{highlight.end})[/dim]")
    console.print(escape(text.strip()) or "[dim](empty)[/dim]")
