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

"""Navigation commands: locate, navigate, split and progress."""

from __future__ import annotations

from pathlib import Path

import typer

from tandem.cli.utils import (
    build_config,
    configure_logging,
    open_project,
    report_inconsistency,
    resolve_cursor,
    save_if_modified,
    show_source_segment,
)
from tandem.core import Project, TandemError
from tandem.core.progress import format_progress
from tandem.utils.config import get_settings
from tandem.utils.console import console, print_error, print_success

FILE_ARGUMENT = typer.Argument(..., help="Org document holding the project")
POSITION_OPTION = typer.Option(None, "--position", "-P", help="Translation cursor offset")
LINE_OPTION = typer.Option(None, "--line", "-l", help="Translation cursor line (1-based)")
VERBOSE_OPTION = typer.Option(False, "--verbose", help="Verbose output")


def _open(file: Path, verbose: bool) -> Project:
    settings = get_settings()
    configure_logging(verbose, settings)
    project = open_project(file, build_config(settings))
    # Keep the IDs assigned to the roots on activation
    save_if_modified(project)
    return project


def locate(
    file: Path = FILE_ARGUMENT,
    position: int | None = POSITION_OPTION,
    line: int | None = LINE_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """
    Show the source segment matching the translation cursor.

    Example:
        tandem locate novel.org --line 42
    """
    try:
        project = _open(file, verbose)
        cursor = resolve_cursor(project, position, line)
        project.resync(cursor)
        if report_inconsistency(project):
            raise typer.Exit(code=2)
        show_source_segment(project)
    except TandemError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


def navigate(
    file: Path = FILE_ARGUMENT,
    count: int = typer.Option(1, "--count", "-n", help="Segments to move (negative moves back)"),
    position: int | None = POSITION_OPTION,
    line: int | None = LINE_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """
    Move the translation cursor by whole segments.

    Prints the new cursor offset and the matching source segment.

    Example:
        tandem navigate novel.org --position 120 --count -2
    """
    try:
        project = _open(file, verbose)
        cursor = resolve_cursor(project, position, line)
        new_cursor = project.navigate(cursor, count)
        console.print(f"Cursor: [bold cyan]{new_cursor}[/bold cyan]")
        if report_inconsistency(project):
            raise typer.Exit(code=2)
        show_source_segment(project)
    except TandemError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


def split(
    file: Path = FILE_ARGUMENT,
    position: int | None = POSITION_OPTION,
    line: int | None = LINE_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """
    Start a new translation segment at the cursor.

    Example:
        tandem split novel.org --position 310
    """
    try:
        project = _open(file, verbose)
        cursor = resolve_cursor(project, position, line)
        new_cursor = project.new_segment(cursor)
        save_if_modified(project)
        print_success(f"New segment started at {new_cursor}")
        report_inconsistency(project)
        show_source_segment(project)
    except TandemError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


def progress(
    file: Path = FILE_ARGUMENT,
    position: int | None = POSITION_OPTION,
    line: int | None = LINE_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """
    Report how far the translation has progressed through the source.

    Example:
        tandem progress novel.org
    """
    try:
        project = _open(file, verbose)
        cursor = resolve_cursor(project, position, line)
        project.resync(cursor)
        if report_inconsistency(project):
            raise typer.Exit(code=2)
        console.print(f"Progress: [bold green]{format_progress(project.progress())}[/bold green]")
    except TandemError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
