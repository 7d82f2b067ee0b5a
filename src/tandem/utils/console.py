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

"""Console utilities for rich terminal output."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

# Global console instance shared across the application
console = Console()


def print_success(message: str) -> None:
    console.print(f"[green]✓[/green] {escape(message)}")


def print_error(message: str) -> None:
    console.print(f"[red]✗[/red] {escape(message)}")


def print_warning(message: str) -> None:
    console.print(f"[yellow]⚠[/yellow] {escape(message)}")


def print_info(message: str) -> None:
    console.print(f"[cyan]ℹ[/cyan] {escape(message)}")


__all__ = ["console", "print_success", "print_error", "print_warning", "print_info"]
