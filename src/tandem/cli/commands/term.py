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

"""Term commands: register glossary terms and translate them interactively."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape
from rich.prompt import Prompt

from tandem.cli.utils import (
    build_config,
    configure_logging,
    open_project,
    resolve_cursor,
    save_if_modified,
)
from tandem.core import ChoiceAborted, TandemError, TranslationChoice
from tandem.utils.config import get_settings
from tandem.utils.console import console, print_error, print_info, print_success, print_warning

term_app = typer.Typer(
    name="term",
    help="Register glossary terms and insert their translations",
    no_args_is_help=True,
)


def _prompt_choice(choice: TranslationChoice) -> str | None:
    """Ask for a translation of the pending term.

    A number picks a known candidate, other text is taken as a new
    translation and an empty answer aborts. A number matching no
    candidate is rejected and the question asked again.
    """
    console.print(f"\nTerm: [bold cyan]{escape(choice.source_text)}[/bold cyan]")
    for number, candidate in enumerate(choice.candidates, 1):
        console.print(f"  [yellow]{number}[/yellow]. {escape(candidate)}")

    while True:
        try:
            answer = Prompt.ask("Translation (number or new text, empty to abort)", default="")
        except (EOFError, KeyboardInterrupt) as e:
            raise ChoiceAborted("Term translation aborted") from e

        answer = answer.strip()
        if not answer.isdecimal():
            return answer or None
        if 1 <= int(answer) <= len(choice.candidates):
            return choice.candidates[int(answer) - 1]
        print_warning(f"No candidate numbered {answer}")


@term_app.command("add")
def add_term(
    file: Path = typer.Argument(..., help="Org document holding the project"),
    text: str = typer.Argument(..., help="Source text of the term"),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose output"),
) -> None:
    """
    Register a source term and link all of its occurrences.

    Example:
        tandem term add novel.org "apple"
    """
    settings = get_settings()
    configure_logging(verbose, settings)
    try:
        project = open_project(file, build_config(settings))
        term_id = project.register_term(text)
        save_if_modified(project)
        print_success(f"Term '{text}' registered as {term_id}")
    except TandemError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


@term_app.command("translate")
def translate_term(
    file: Path = typer.Argument(..., help="Org document holding the project"),
    position: int | None = typer.Option(
        None, "--position", "-P", help="Translation cursor offset"
    ),
    line: int | None = typer.Option(None, "--line", "-l", help="Translation cursor line (1-based)"),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose output"),
) -> None:
    """
    Insert the translation of the next pending term at the cursor.

    Known translations are offered most recent first.

    Example:
        tandem term translate novel.org --line 57
    """
    settings = get_settings()
    configure_logging(verbose, settings)
    try:
        project = open_project(file, build_config(settings))
        cursor = resolve_cursor(project, position, line)
        if project.next_translation_choice(cursor) is None:
            print_info("No pending term in the current source segment")
            return

        new_cursor = project.insert_term_translation(cursor, _prompt_choice)
        if new_cursor is None:
            print_info("Term translation cancelled; document unchanged")
            return
        save_if_modified(project)
        print_success(f"Translation inserted, cursor now at {new_cursor}")
    except TandemError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
