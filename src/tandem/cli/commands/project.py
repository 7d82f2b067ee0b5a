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

"""Project registry commands."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from tandem.cli.utils import build_config, configure_logging, open_project, save_if_modified
from tandem.core import TandemError
from tandem.core.locator import parse_locator
from tandem.core.progress import format_progress
from tandem.memory import ProjectRecord, ProjectRegistry
from tandem.utils.config import get_settings
from tandem.utils.console import console, print_error, print_success, print_warning

PROJECT_NAME_HELP = "Project name"

project_app = typer.Typer(
    name="project",
    help="Manage named bilingual projects",
    no_args_is_help=True,
)


def _registry() -> ProjectRegistry:
    return ProjectRegistry(get_settings().registry_path.expanduser())


@project_app.command("add")
def add_project(
    name: str = typer.Argument(..., help=PROJECT_NAME_HELP),
    file: Path = typer.Argument(..., help="Org document holding the project"),
    source: str | None = typer.Option(None, "--source", help="Source section locator"),
    translation: str | None = typer.Option(
        None, "--translation", help="Translation section locator"
    ),
    glossary: str | None = typer.Option(None, "--glossary", help="Glossary section locator"),
    activate: bool = typer.Option(False, "--activate", "-a", help="Mark as the active project"),
) -> None:
    """
    Register a project under a name.

    Example:
        tandem project add novel novel.org --source "tag:en" --translation "tag:fr"
    """
    try:
        for spec in (source, translation, glossary):
            if spec is not None:
                parse_locator(spec)
        record = _registry().add(
            ProjectRecord(
                name=name,
                path=file.resolve(),
                active=activate,
                source_locator=source,
                translation_locator=translation,
                glossary_locator=glossary,
            )
        )
        print_success(f"Project '{record.name}' registered ({record.path})")
    except TandemError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


@project_app.command("list")
def list_projects() -> None:
    """
    List registered projects.

    Example:
        tandem project list
    """
    try:
        records = _registry().list_projects()
    except TandemError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    if not records:
        console.print("[yellow]No projects registered[/yellow]")
        console.print("\nRegister one with:")
        console.print("  tandem project add <name> <file>")
        return

    table = Table(title="Projects", show_lines=True)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Active", justify="center")
    table.add_column("Path", style="dim")
    table.add_column("Locators")

    for record in records:
        locators = [
            f"{stream}={spec}"
            for stream, spec in (
                ("source", record.source_locator),
                ("translation", record.translation_locator),
                ("glossary", record.glossary_locator),
            )
            if spec
        ]
        table.add_row(
            escape(record.name),
            "[green]●[/green]" if record.active else "",
            escape(str(record.path)),
            escape(", ".join(locators)) or "[dim]defaults[/dim]",
        )

    console.print(table)
    console.print(f"\n[dim]Total: {len(records)} projects[/dim]")


@project_app.command("remove")
def remove_project(name: str = typer.Argument(..., help=PROJECT_NAME_HELP)) -> None:
    """Forget a registered project. The document itself is left untouched."""
    try:
        removed = _registry().remove(name)
    except TandemError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    if not removed:
        print_warning(f"Project '{name}' is not registered")
        raise typer.Exit(code=1)
    print_success(f"Project '{name}' removed")


@project_app.command("resume")
def resume_project(
    name: str | None = typer.Argument(None, help="Project name (defaults to the active project)"),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose output"),
) -> None:
    """
    Activate a registered project and summarise its state.

    Example:
        tandem project resume novel
    """
    settings = get_settings()
    configure_logging(verbose, settings)
    registry = _registry()
    try:
        if name is None:
            record = registry.active()
            if record is None:
                print_error("No active project; pass a project name")
                raise typer.Exit(code=1)
        else:
            record = registry.get(name)

        project = open_project(record.path, build_config(settings, record=record))
        save_if_modified(project)
        registry.set_active(record.name)

        tracker = project.tracker
        cursor = project.document.content_range(tracker.translation_id)[1]
        project.resync(cursor)

        table = Table(title=f"Project {escape(record.name)}", show_header=False)
        table.add_column("Key", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("Document", escape(str(record.path)))
        table.add_row("Source segments", str(tracker.segment_count(tracker.source_id)))
        table.add_row("Translation segments", str(tracker.segment_count(tracker.translation_id)))
        table.add_row("Glossary terms", str(len(project.glossary)))
        if project.state.probable_source_position is not None:
            table.add_row("Progress", format_progress(project.progress()))
        console.print(table)

        if tracker.last_inconsistency is not None:
            print_warning(tracker.last_inconsistency.message)
    except TandemError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
