"""
Reporter for door validation and rename results.

Console output for the doorlink CLI, plus a JSON rendering for tooling.
"""

import json
from typing import Any

import click

from .validation import DoorValidationError


class Reporter:
    """
    Formats and displays validation results.
    """

    def __init__(self, use_colors: bool = True):
        """
        Initialize the reporter.

        Args:
            use_colors: Whether to use ANSI color codes
        """
        self.use_colors = use_colors

    def _echo(self, message: str, fg: str | None = None, err: bool = False) -> None:
        if self.use_colors and fg:
            message = click.style(message, fg=fg)
        click.echo(message, err=err)

    def print_header(self, title: str = "Door Validator"):
        """Print validator header."""
        self._echo(f"\n{title}", fg="cyan")
        self._echo("=" * 40)

    def print_document_header(self, label: str):
        self._echo(f"\n{label}", fg="cyan")

    def print_error(self, message: str):
        """Print error message."""
        self._echo(f"ERROR: {message}", fg="red")

    def print_warning(self, message: str):
        self._echo(f"WARNING: {message}", fg="yellow")

    def print_success(self, message: str):
        self._echo(message, fg="green")

    def print_progress(self, message: str):
        self._echo(f"... {message}")

    def print_parsing_errors(self, errors: list[tuple[str, str]]):
        """Print files that could not be parsed during discovery."""
        if errors:
            self._echo("\nParsing errors:", fg="red")
            for path, message in errors:
                self._echo(f"  - {path}: {message}")

    def print_validation_errors(self, errors: list[DoorValidationError]):
        """Print validation errors grouped by document."""
        current_document = None
        for error in errors:
            if error.door.document_guid != current_document:
                current_document = error.door.document_guid
                self.print_document_header(error.door.document_path or current_document)
            self.print_error(f"[{error.error_type.value}] {error.message}")

    def print_summary(self, stats: dict[str, Any]):
        """Print validation summary."""
        self._echo("\n=== Validation Summary ===")
        self._echo(f"Documents: {stats['documents']}")
        self._echo(f"Doors: {stats['doors']}")
        self._echo(f"Errors: {stats['errors']}")
        if stats["success"]:
            self.print_success("Doors validation: OK")
        else:
            self.print_error("Doors validation failed")

    def generate_json_output(self, stats: dict[str, Any], errors: list[DoorValidationError]) -> str:
        """Render stats and errors as a JSON document."""
        return json.dumps({"stats": stats, "errors": [error.to_dict() for error in errors]}, indent=2)
