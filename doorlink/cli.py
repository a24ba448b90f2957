"""
doorlink command-line interface.

Headless access to door validation, the build gate, the door index and the
rename operation for a project directory.
"""

import logging
import sys

import click

from .config import get_config
from .container import AuthoringSession
from .doors.identity import MAX_LENGTH, MIN_LENGTH, generate_id
from .exceptions import BuildGateError, DoorLinkError
from .reporter import Reporter
from .structured_logging.enhanced_logging_config import get_logger, setup_enhanced_logging

logger = get_logger(__name__)


@click.group()
@click.option("--project-root", type=click.Path(file_okay=False), help="Project root directory (overrides config)")
@click.option("--verbose", "-v", is_flag=True, help="Detailed output and progress bars")
@click.option("--no-colors", is_flag=True, help="Disable colored output")
@click.pass_context
def main(ctx: click.Context, project_root: str | None, verbose: bool, no_colors: bool):
    """
    Validate and maintain door links in a project.
    """
    try:
        config = get_config()
    except DoorLinkError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    setup_enhanced_logging(config)
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    ctx.obj = {
        "session": AuthoringSession(config, project_root=project_root),
        "reporter": Reporter(use_colors=not no_colors),
        "verbose": verbose,
    }


@main.command()
@click.option("--document", "document_guid", help="Validate a single document by guid")
@click.option("--output-format", type=click.Choice(["console", "json"]), default="console")
@click.pass_obj
def validate(obj: dict, document_guid: str | None, output_format: str):
    """Validate door ids and links of one or every document."""
    session: AuthoringSession = obj["session"]
    reporter: Reporter = obj["reporter"]
    console = output_format == "console"

    try:
        session.store.refresh()
        parsing_errors = list(session.store.parsing_errors)
        guids = [document_guid] if document_guid else session.accessor.all_document_guids()

        if console:
            reporter.print_header()
            reporter.print_progress(f"Scanning {session.project_root}")
            reporter.print_parsing_errors(parsing_errors)

        errors = []
        doors = 0
        for guid in guids:
            with session.accessor.using_document(guid) as document:
                doors += len(document.doors())
                errors.extend(session.validator.validate(document))
    except (DoorLinkError, FileNotFoundError) as e:
        reporter.print_error(getattr(e, "message", str(e)))
        sys.exit(1)

    stats = {
        "documents": len(guids),
        "doors": doors,
        "errors": len(errors),
        "parsing_errors": len(parsing_errors),
        "success": not errors and not parsing_errors,
    }

    if console:
        reporter.print_validation_errors(errors)
        reporter.print_summary(stats)
    else:
        click.echo(reporter.generate_json_output(stats, errors))

    sys.exit(0 if stats["success"] else 1)


@main.command("build-check")
@click.pass_obj
def build_check(obj: dict):
    """Run the packaging gate over every document in the project."""
    session: AuthoringSession = obj["session"]
    reporter: Reporter = obj["reporter"]

    try:
        validated = session.build_gate.run(show_progress=obj["verbose"])
    except BuildGateError as e:
        reporter.print_error(e.message)
        sys.exit(1)
    except FileNotFoundError as e:
        reporter.print_error(str(e))
        sys.exit(1)

    reporter.print_success(f"Doors validation: OK ({validated} documents)")


@main.command("list-doors")
@click.argument("document_guid")
@click.pass_obj
def list_doors(obj: dict, document_guid: str):
    """List the doors of a document, sorted by id."""
    session: AuthoringSession = obj["session"]
    reporter: Reporter = obj["reporter"]

    session.store.refresh()
    if not session.accessor.exists(document_guid):
        reporter.print_error(f"Document '{document_guid}' not found")
        sys.exit(1)

    doors = session.door_index.get_doors(document_guid)
    if not doors:
        reporter.print_warning("No doors")
        return
    for info in doors:
        click.echo(info.label)


@main.command()
@click.argument("document_guid")
@click.argument("old_id")
@click.argument("new_id")
@click.option("--no-full-sweep", is_flag=True, help="Skip documents on disk; update open documents and templates only")
@click.pass_obj
def rename(obj: dict, document_guid: str, old_id: str, new_id: str, no_full_sweep: bool):
    """Rename a door and update every link that points at it."""
    session: AuthoringSession = obj["session"]
    reporter: Reporter = obj["reporter"]
    accessor = session.accessor

    try:
        session.store.refresh()
        document = session.open_document(document_guid)
    except DoorLinkError as e:
        reporter.print_error(e.message)
        sys.exit(1)

    try:
        door = document.find_door(old_id)
        if door is None:
            reporter.print_error(f"Door '{old_id}' not found in document '{document_guid}'")
            sys.exit(1)

        try:
            report = session.rename_service.rename(
                document, door, new_id, full_sweep=not no_full_sweep, show_progress=obj["verbose"]
            )
        except DoorLinkError as e:
            reporter.print_error(e.message)
            sys.exit(1)

        # No operator will save the owning document later in a headless run.
        if document.dirty:
            accessor.save(document)

        click.echo(report.summary())
        if report.disk is not None and report.disk.failed:
            for path, error in report.disk.failed:
                reporter.print_warning(f"Could not update {path}: {error}")
    finally:
        accessor.close(document_guid)


@main.command("assign-ids")
@click.option("--document", "document_guid", help="Only process a single document by guid")
@click.pass_obj
def assign_ids(obj: dict, document_guid: str | None):
    """Give every blank or template-inherited door a fresh id and clear ids stored in templates."""
    session: AuthoringSession = obj["session"]
    reporter: Reporter = obj["reporter"]
    accessor = session.accessor

    try:
        session.store.refresh()
        guids = [document_guid] if document_guid else accessor.all_document_guids()
        template_paths = [] if document_guid else session.templates.template_paths()
    except FileNotFoundError as e:
        reporter.print_error(str(e))
        sys.exit(1)

    failures = 0
    doors_changed = 0
    for guid in guids:
        try:
            document = accessor.open(guid)
        except DoorLinkError as e:
            reporter.print_error(e.message)
            failures += 1
            continue
        try:
            changed = session.run_authoring_pass(document)
            if changed:
                accessor.save(document)
                doors_changed += changed
                reporter.print_progress(f"Assigned {changed} door ids in {document.display_path}")
        finally:
            accessor.close(guid)

    templates_saved = 0
    for path in template_paths:
        try:
            with session.templates.editing(path) as template:
                if session.run_authoring_pass(template):
                    session.templates.save(template)
                    templates_saved += 1
                    reporter.print_progress(f"Cleared door ids in template {path}")
        except DoorLinkError as e:
            reporter.print_error(e.message)
            failures += 1

    reporter.print_success(f"Door ids assigned: {doors_changed}, templates cleaned: {templates_saved}")
    sys.exit(1 if failures else 0)


@main.command("new-id")
@click.option("--length", type=click.IntRange(MIN_LENGTH, MAX_LENGTH, clamp=True), default=None)
def new_id(length: int | None):
    """Print a random door id."""
    if length is None:
        length = get_config().identity.generated_length
    click.echo(generate_id(length))


if __name__ == "__main__":
    main()  # pylint: disable=no-value-for-parameter
