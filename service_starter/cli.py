"""Service Starter command-line front end.

Walks the wizard in the terminal, or builds an archive straight from a
wizard URL.

Usage::

    python -m service_starter.cli
    python -m service_starter.cli "https://start.example.dev/?page=DataFormats&preferredEditor=VSCode"
    python -m service_starter.cli "<url>" --no-input -o ./out
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.prompt import Prompt

from service_starter.config import Config
from service_starter.scaffolder.archive import Archive
from service_starter.utils import (
    console,
    print_error,
    print_file_table,
    print_page_header,
    print_success,
    print_summary_table,
    print_url,
    print_warning,
)
from service_starter.wizard.controller import WizardController
from service_starter.wizard.models import (
    DataFormat,
    Database,
    Editor,
    LoggingFramework,
    Page,
    Selection,
)
from service_starter.wizard.navigator import HistoryNavigator
from service_starter.wizard.pages import TOTAL_STEPS, page_spec, step_number

_HELP = (
    "[dim]number[/dim] choose  [dim]n[/dim] next  [dim]b[/dim] back  "
    "[dim]u[/dim]/[dim]r[/dim] history back/forward  [dim]d[/dim] download  [dim]q[/dim] quit"
)


# ---------------------------------------------------------------------------
# Page rendering
# ---------------------------------------------------------------------------


def selected_values(selection: Selection, page: Page) -> set[str]:
    """Option values currently chosen on *page*."""
    if page is Page.PREFERRED_EDITOR and selection.preferred_editor is not None:
        return {selection.preferred_editor.value}
    if page is Page.DATA_FORMATS:
        return {f.value for f in selection.data_formats}
    if page is Page.PRIMARY_DATABASE and selection.primary_database is not None:
        return {selection.primary_database.value}
    if page is Page.PICK_LOGGING_FRAMEWORK and selection.logging_framework is not None:
        return {selection.logging_framework.value}
    return set()


def render_page(controller: WizardController) -> None:
    """Draw the current page to the console."""
    selection = controller.selection
    spec = page_spec(selection.page)
    print_page_header(step_number(selection.page), TOTAL_STEPS, spec.title)
    console.print(spec.prompt)
    if spec.advice:
        console.print(f"[italic]{spec.advice}[/italic]")

    chosen = selected_values(selection, selection.page)
    for index, option in enumerate(spec.options, start=1):
        mark = "[green]✔[/green]" if option.value in chosen else " "
        console.print(f"  {index}. {mark} {option.label}")
    if spec.multi_select:
        console.print("[dim]Pick any number of options; pick again to remove.[/dim]")

    if selection.page is Page.FINISH:
        print_summary_table(selection.summary(), title="Your project")
    console.print(_HELP)


def choose_option(controller: WizardController, index: int) -> bool:
    """Apply the 1-based option *index* of the current page."""
    page = controller.page
    options = page_spec(page).options
    if not 1 <= index <= len(options):
        print_warning(f"No option {index} on this page.")
        return False

    value = options[index - 1].value
    if page is Page.PREFERRED_EDITOR:
        return controller.choose_editor(Editor(value))
    if page is Page.DATA_FORMATS:
        return controller.toggle_data_format(DataFormat(value))
    if page is Page.PRIMARY_DATABASE:
        return controller.choose_database(Database(value))
    if page is Page.PICK_LOGGING_FRAMEWORK:
        return controller.choose_logging_framework(LoggingFramework(value))
    return False


# ---------------------------------------------------------------------------
# Session loops
# ---------------------------------------------------------------------------


def run_interactive(
    controller: WizardController,
    navigator: HistoryNavigator,
    output_dir: Path,
) -> Optional[Path]:
    """Run the wizard until the user downloads or quits.

    Returns:
        Path of the written archive, or ``None`` if the user quit.
    """
    while True:
        render_page(controller)
        print_url(controller.url)
        try:
            command = Prompt.ask("[bold]>[/bold]", console=console, default="n")
        except (EOFError, KeyboardInterrupt):
            print_warning("Aborted.")
            return None
        command = command.strip().lower()

        if command in ("q", "quit"):
            return None
        if command in ("n", "next"):
            if not controller.next():
                if controller.page is Page.PREFERRED_EDITOR:
                    print_warning("Pick an editor first.")
                else:
                    print_warning("This is the last page. Press d to download.")
        elif command in ("b", "back"):
            if not controller.back():
                print_warning("Already on the first page.")
        elif command in ("u", "undo"):
            if navigator.back() is None:
                print_warning("No earlier history entry.")
        elif command in ("r", "redo"):
            if navigator.forward() is None:
                print_warning("No later history entry.")
        elif command in ("d", "download"):
            archive = controller.download()
            if archive is None:
                print_warning("Download is available on the Finish page.")
                continue
            return save_archive(archive, output_dir)
        elif command.isdigit():
            choose_option(controller, int(command))
        else:
            print_warning(f"Unknown command: {command}")


def save_archive(archive: Archive, output_dir: Path) -> Path:
    """Write *archive* and report it; exit with status 1 on I/O failure."""
    try:
        path = archive.save(output_dir)
    except OSError as exc:
        print_error(f"Could not write {archive.filename} to {output_dir}: {exc}")
        sys.exit(1)
    print_success(f"Wrote {path} ({len(archive.content)} bytes, {archive.mime_type})")
    return path


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point for ``python -m service_starter.cli``."""
    parser = argparse.ArgumentParser(
        description="Service Starter -- scaffold a Clojure web service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  service-starter\n"
            "  service-starter 'https://start.example.dev/?page=Finish&primaryDatabase=Postgres'\n"
            "  service-starter '<url>' --no-input -o ./out\n"
            "  service-starter '<url>' --list\n"
        ),
    )
    parser.add_argument(
        "url",
        nargs="?",
        default=None,
        help="Wizard URL to resume from (default: the start page)",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Directory the archive is written to (default: ./output)",
    )
    parser.add_argument(
        "--project-name",
        default=None,
        help="Name of the generated project (default: my-service)",
    )
    parser.add_argument(
        "--no-input",
        action="store_true",
        help="Skip the questions and build the archive from the URL as-is",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print the files that would be generated instead of writing them",
    )

    args = parser.parse_args(argv)

    try:
        config = Config.from_env()
        overrides = {}
        if args.output:
            overrides["output_dir"] = Path(args.output)
        if args.project_name:
            overrides["project_name"] = args.project_name
        if overrides:
            config = Config(**{**config.model_dump(), **overrides})
    except ValidationError as exc:
        print_error(f"Invalid configuration: {exc}")
        sys.exit(1)

    navigator = HistoryNavigator()
    controller = WizardController.from_url(
        args.url or config.base_url,
        navigator,
        defaults=config.defaults(),
        clock=config.clock(),
    )
    navigator.subscribe(controller.url_changed)
    controller.start()

    if args.list or args.no_input:
        selection = controller.selection
        files = controller.composer.compose(selection)
        if args.list:
            print_summary_table(selection.summary(), title="Selection")
            print_file_table(files)
            return
        archive = controller.assembler.assemble(
            files, controller.started_at, project_name=selection.project_name
        )
        save_archive(archive, config.output_dir)
        return

    if run_interactive(controller, navigator, config.output_dir) is None:
        console.print("[dim]Resume any time from:[/dim]")
        print_url(controller.url)


if __name__ == "__main__":
    main()
