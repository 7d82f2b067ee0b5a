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

"""Glossary commands."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from tandem.cli.utils import build_config, configure_logging, open_project, save_if_modified
from tandem.core import TandemError
from tandem.utils.config import get_settings
from tandem.utils.console import console, print_error

glossary_app = typer.Typer(
    name="glossary",
    help="Inspect the project glossary",
    no_args_is_help=True,
)


@glossary_app.command("show")
def show_glossary(
    file: Path = typer.Argument(..., help="Org document holding the project"),
    show_ids: bool = typer.Option(False, "--ids", help="Show term identifiers"),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose output"),
) -> None:
    """
    Show the glossary rebuilt from the document's tagged references.

    Example:
        tandem glossary show novel.org --ids
    """
    settings = get_settings()
    configure_logging(verbose, settings)
    try:
        project = open_project(file, build_config(settings))
        save_if_modified(project)
    except TandemError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    entries = sorted(project.glossary, key=lambda e: e.label.lower())
    if not entries:
        console.print("[yellow]Glossary is empty[/yellow]")
        console.print("\nRegister a term with:")
        console.print("  tandem term add <file> <text>")
        return

    table = Table(title="Glossary", show_lines=True)
    if show_ids:
        table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Source", style="cyan")
    table.add_column("Translations", style="green")

    for entry in entries:
        row = [
            escape(", ".join(entry.source_terms)) or "-",
            escape(", ".join(entry.translation_alternatives)) or "[dim]-[/dim]",
        ]
        if show_ids:
            row.insert(0, entry.term_id)
        table.add_row(*row)

    console.print(table)
    console.print(f"\n[dim]Total: {len(entries)} terms[/dim]")
