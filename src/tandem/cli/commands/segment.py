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

"""Segment command: insert segment delimiters into source and translation."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from tandem.cli.utils import build_config, configure_logging, open_project, save_if_modified
from tandem.core import SegmentationPlan, TandemError
from tandem.utils.config import get_settings
from tandem.utils.console import console, print_error, print_info, print_success


def _show_plan(plan: SegmentationPlan) -> None:
    table = Table(title="Segmentation plan", show_header=True, header_style="bold cyan")
    table.add_column("Stream", style="cyan")
    table.add_column("Delimiters", justify="right", style="green")
    table.add_row("source", str(plan.source_segments))
    table.add_row("translation", str(plan.translation_segments))
    console.print(table)


def segment(
    file: Path = typer.Argument(..., help="Org document holding the project"),
    strategy: str | None = typer.Option(
        None, "--strategy", "-s", help="Splitting strategy (sentence, paragraph, regex)"
    ),
    pattern: str | None = typer.Option(
        None, "--pattern", "-p", help="Boundary regex for the regex strategy"
    ),
    delimiter: str | None = typer.Option(None, "--delimiter", "-d", help="Segment delimiter"),
    no_translation: bool = typer.Option(
        False, "--no-translation", help="Leave the translation stream untouched"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose output"),
) -> None:
    """
    Insert segment delimiters into the source and translation sections.

    Example:
        tandem segment novel.org --strategy regex --pattern "[;.]\\s*"
    """
    settings = get_settings()
    configure_logging(verbose, settings)

    def confirm(plan: SegmentationPlan) -> bool:
        _show_plan(plan)
        if yes:
            return True
        return typer.confirm("Insert these delimiters?", default=True)

    try:
        config = build_config(settings, strategy=strategy, pattern=pattern, delimiter=delimiter)
        project = open_project(file, config)
        plan = project.segment(include_translation=not no_translation, confirm=confirm)
        if plan is None:
            print_info("Segmentation cancelled; document unchanged")
            return
        save_if_modified(project)
        print_success(
            f"Segmented {plan.source_segments} source and "
            f"{plan.translation_segments} translation segments"
        )
    except TandemError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
