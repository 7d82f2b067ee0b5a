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

"""Main CLI application entry point for Tandem.

All commands are organized in separate modules under `tandem.cli.commands/`.
"""

from __future__ import annotations

import typer

from tandem import __version__
from tandem.cli.commands.glossary import glossary_app
from tandem.cli.commands.navigate import locate, navigate, progress, split
from tandem.cli.commands.project import project_app
from tandem.cli.commands.segment import segment
from tandem.cli.commands.term import term_app
from tandem.utils.console import console

# Create main app
app = typer.Typer(
    name="tandem",
    help="Tandem - bilingual segment alignment and glossary tracking for Org documents",
    add_completion=True,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

# Register commands
app.command()(segment)
app.command()(locate)
app.command()(navigate)
app.command()(split)
app.command()(progress)

# Add sub-apps for grouped commands
app.add_typer(term_app, name="term")
app.add_typer(glossary_app, name="glossary")
app.add_typer(project_app, name="project")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"Tandem version: [bold cyan]{__version__}[/bold cyan]")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(  # noqa: ARG001 - Used by Typer callback
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """
    Tandem - keep a translation aligned with its source, segment by segment.
    """
    pass


def run() -> None:
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    run()
