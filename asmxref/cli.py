"""Typer application and entry point for the asmxref CLI.

Lines and columns on the command line are 1-based.
"""

import os
import re
from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from asmxref import SCRIPT_NAME
from asmxref.config.manager import ConfigManager
from asmxref.config.settings import WorkspaceConfig
from asmxref.host.local import LocalWorkspace
from asmxref.utils.console import console, print_error, print_info, print_success, show_version
from asmxref.utils.errors import AsmXrefError, ConfigNotFoundError, ExitCode
from asmxref.utils.logging import setup_logging
from asmxref.xref.grep_engine import GrepLocation, grep
from asmxref.xref.patterns import SearchPattern, reference_pattern
from asmxref.xref.references import find_references, find_unreferenced_labels
from asmxref.xref.rename import RenameProvider
from asmxref.xref.types import LanguageId, Position

_NAME_RE = re.compile(r"^[A-Za-z_]\w*$")

app = typer.Typer(
    name=SCRIPT_NAME,
    help="asmxref - find and rename label references in assembler projects",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version and exit."""
    if value:
        show_version()
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version information",
        ),
    ] = None,
) -> None:
    """Find and rename label references in assembler projects."""
    setup_logging()


def _workspace(root: Path | None) -> WorkspaceConfig:
    manager = ConfigManager()
    return manager.workspace_config(root)


def _document_workspace(file: Path) -> WorkspaceConfig:
    config = ConfigManager().config_for_document(file)
    if config is None:
        raise ConfigNotFoundError(f"{file} is in no workspace folder.")
    return config


def _print_locations(locations: list[GrepLocation], root_folder: str, title: str) -> None:
    table = Table(title=title, show_lines=False, expand=False)
    table.add_column("File")
    table.add_column("Line", justify="right")
    table.add_column("Col", justify="right")
    table.add_column("Label")
    table.add_column("Text")
    for loc in locations:
        table.add_row(
            os.path.relpath(loc.path, root_folder),
            str(loc.range.start.line + 1),
            str(loc.range.start.character + 1),
            loc.module_label or loc.symbol,
            loc.match.line_contents.strip(),
        )
    console.print(table)


def _run(action) -> None:
    try:
        action()
    except AsmXrefError as e:
        print_error(str(e))
        raise typer.Exit(e.exit_code) from e
    except OSError as e:
        print_error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR) from e


@app.command("grep")
def grep_command(
    pattern: Annotated[str, typer.Argument(help="Word to search for (a regex with --regex)")],
    root: Annotated[
        Path | None,
        typer.Option("--root", "-r", help="Directory to start the configuration lookup in"),
    ] = None,
    language: Annotated[
        LanguageId,
        typer.Option("--language", "-l", help="Search assembler sources or list files"),
    ] = LanguageId.ASM_COLLECTION,
    regex: Annotated[
        bool,
        typer.Option("--regex", help="Treat PATTERN as a regular expression"),
    ] = False,
    ignore_case: Annotated[
        bool,
        typer.Option("--ignore-case", "-i", help="Case-insensitive regex search"),
    ] = False,
) -> None:
    """Print every occurrence of a word (comments excluded)."""

    def action() -> None:
        config = _workspace(root)
        if regex:
            try:
                search = SearchPattern.compile(pattern, re.IGNORECASE if ignore_case else 0)
            except re.error as e:
                raise AsmXrefError(f"Invalid regular expression {pattern!r}: {e}") from e
        else:
            search = reference_pattern(pattern)
        host = LocalWorkspace(Path(config.root_folder))
        locations = grep(search, config.search_config(language), host)
        _print_locations(locations, config.root_folder, f"{len(locations)} matches")

    _run(action)


@app.command("refs")
def refs_command(
    file: Annotated[Path, typer.Argument(help="File containing the label", exists=True, dir_okay=False)],
    line: Annotated[int, typer.Argument(help="Line of the label (1-based)", min=1)],
    column: Annotated[int, typer.Argument(help="Column of the label (1-based)", min=1)],
    loose: Annotated[
        bool,
        typer.Option("--loose", help="Fuzzy comparison of label names"),
    ] = False,
    include_declaration: Annotated[
        bool,
        typer.Option("--include-declaration", help="Also list the hit at the given position"),
    ] = False,
) -> None:
    """List the references of the label at FILE:LINE:COLUMN."""

    def action() -> None:
        config = _document_workspace(file)
        host = LocalWorkspace(Path(config.root_folder))
        locations = find_references(
            file,
            Position(line - 1, column - 1),
            config,
            host,
            loose=loose,
            include_declaration=include_declaration,
        )
        _print_locations(locations, config.root_folder, f"{len(locations)} references")

    _run(action)


@app.command("rename")
def rename_command(
    file: Annotated[Path, typer.Argument(help="File containing the label", exists=True, dir_okay=False)],
    line: Annotated[int, typer.Argument(help="Line of the label (1-based)", min=1)],
    column: Annotated[int, typer.Argument(help="Column of the label (1-based)", min=1)],
    new_name: Annotated[str, typer.Argument(help="The new name")],
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", "-n", help="Only show what would be replaced"),
    ] = False,
) -> None:
    """Rename the label at FILE:LINE:COLUMN in all project files."""
    if not _NAME_RE.match(new_name):
        print_error(f"Invalid label name: {new_name!r}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    def action() -> None:
        config = _document_workspace(file)
        host = LocalWorkspace(Path(config.root_folder))
        provider = RenameProvider(host)
        plan = provider.plan_rename(file, Position(line - 1, column - 1), new_name)

        if dry_run:
            table = Table(title=f"Rename {plan.old_name} -> {plan.new_name}")
            table.add_column("File")
            table.add_column("Line", justify="right")
            table.add_column("Col", justify="right")
            for path, ranges in plan.disk_changes.items():
                for range_ in sorted(ranges, key=lambda r: r.start):
                    table.add_row(
                        os.path.relpath(path, config.root_folder),
                        str(range_.start.line + 1),
                        str(range_.start.character + 1),
                    )
            console.print(table)
            print_info(f"{plan.total} replacements in {len(plan.files)} files (dry run)")
            return

        provider.write_disk_changes(plan)
        print_success(
            f"Renamed {plan.old_name} to {plan.new_name}: "
            f"{plan.total} replacements in {len(plan.files)} files"
        )

    _run(action)


@app.command("unused")
def unused_command(
    root: Annotated[
        Path | None,
        typer.Option("--root", "-r", help="Directory to start the configuration lookup in"),
    ] = None,
    language: Annotated[
        LanguageId,
        typer.Option("--language", "-l", help="Search assembler sources or list files"),
    ] = LanguageId.ASM_COLLECTION,
) -> None:
    """List labels that are referenced nowhere."""

    def action() -> None:
        config = _workspace(root)
        host = LocalWorkspace(Path(config.root_folder))
        locations = find_unreferenced_labels(config, host, language)
        _print_locations(locations, config.root_folder, f"{len(locations)} unreferenced labels")

    _run(action)


__all__ = ["app", "main"]
