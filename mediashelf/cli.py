"""CLI commands for mediashelf."""

from __future__ import annotations

import logging
import shlex

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from mediashelf.errors import ImportExportError, InvalidFilepath
from mediashelf.interchange import ImportExportManager
from mediashelf.library import Library
from mediashelf.models.config import OverwritePolicy, ShelfConfig
from mediashelf.models.media import FILTER_FLAGS, MediaRecord
from mediashelf.shell import Shell

console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def records_table(title: str, records: list[MediaRecord]) -> Table:
    table = Table(title=title)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="yellow")
    table.add_column("Creator", style="green")
    table.add_column("Path", style="dim")

    for index, record in enumerate(records):
        table.add_row(
            str(index),
            record.filename,
            record.type.value,
            record.creator or "-",
            record.path,
        )
    return table


def load_files(manager: ImportExportManager, files: tuple[str, ...]) -> int:
    """Import files, printing problems.

    Returns the number of rejected entries, counting each missing or
    undecodable file as one.
    """
    rejected = 0
    for filename in files:
        try:
            report = manager.read_report(filename)
        except InvalidFilepath as e:
            console.print(f"[red]{escape(str(e))}[/red]")
            rejected += 1
            continue
        rejected += len(report.rejected)
        if report.error:
            console.print(f"[red]{escape(filename)}:[/red]")
            console.print(f"  [red]* {escape(report.error)}[/red]")
            rejected += 1
        for entry in report.rejected:
            label = entry.fullpath or "(no path)"
            console.print(f"[yellow]{escape(filename)}: {escape(label)}[/yellow]")
            for reason in entry.reasons:
                console.print(f"  [dim]* {escape(reason)}[/dim]")
    return rejected


@click.group()
@click.option("--config", "config_path", default=None, help="YAML config file")
@click.option("--verbose", "-v", is_flag=True, help="Log at INFO level")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """mediashelf - Media metadata library CLI."""
    ctx.ensure_object(dict)
    config = ShelfConfig.load(config_path)
    configure_logging("INFO" if verbose else config.log_level)

    library = Library()
    ctx.obj["config"] = config
    ctx.obj["library"] = library
    ctx.obj["manager"] = ImportExportManager(library, config)


@main.command()
@click.argument("files", nargs=-1)
@click.pass_context
def shell(ctx: click.Context, files: tuple[str, ...]) -> None:
    """Start the interactive shell, optionally loading FILES first."""
    config: ShelfConfig = ctx.obj["config"]
    session = Shell(ctx.obj["library"], config, console=console)

    preload = [*config.autoload, *files]
    if preload:
        session.execute(shlex.join(["load", *preload]))

    console.print('[dim]Type "help" for a list of commands.[/dim]')
    session.run()


@main.command("list")
@click.argument("files", nargs=-1, required=True)
@click.option("--term", "-t", "terms", multiple=True, help="Search term (can repeat)")
@click.option(
    "--category",
    "-c",
    type=click.Choice(sorted(FILTER_FLAGS.values())),
    default=None,
    help="Limit to one kind of media",
)
@click.pass_context
def list_records(
    ctx: click.Context, files: tuple[str, ...], terms: tuple[str, ...], category: str | None
) -> None:
    """Load FILES and list matching records."""
    library: Library = ctx.obj["library"]
    load_files(ctx.obj["manager"], files)

    if category:
        results = library.filter_by([category, *terms])
    elif terms:
        results = library.search_terms(terms)
    else:
        results = library.all()

    console.print(records_table("Media", results))
    console.print(f"[dim]Found {len(results)} files[/dim]")


@main.command()
@click.argument("files", nargs=-1, required=True)
@click.pass_context
def validate(ctx: click.Context, files: tuple[str, ...]) -> None:
    """Check FILES and explain entries that would not import."""
    library: Library = ctx.obj["library"]
    rejected = load_files(ctx.obj["manager"], files)

    stats = library.stats()
    table = Table(title="Accepted")
    table.add_column("Type", style="cyan")
    table.add_column("Files", justify="right", style="green")
    total = stats.pop("total", 0)
    for media_type, count in stats.items():
        table.add_row(media_type, str(count))
    table.add_row("[bold]Total[/bold]", f"[bold]{total}[/bold]")
    console.print(table)

    if rejected:
        console.print(f"[red]Rejected: {rejected}[/red]")
        ctx.exit(1)


@main.command()
@click.argument("files", nargs=-1, required=True)
@click.option("--output", "-o", required=True, help="Output JSON file")
@click.option(
    "--overwrite",
    type=click.Choice([policy.value for policy in OverwritePolicy]),
    default=None,
    help="What to do if the output exists (default from config)",
)
@click.pass_context
def merge(
    ctx: click.Context, files: tuple[str, ...], output: str, overwrite: str | None
) -> None:
    """Load FILES and save the combined library to one file."""
    library: Library = ctx.obj["library"]
    manager: ImportExportManager = ctx.obj["manager"]
    load_files(manager, files)

    try:
        result = manager.write_report(output, library.all(), overwrite=overwrite)
    except ImportExportError as e:
        raise click.ClickException(str(e)) from e

    console.print(f"[green]Saved {result.written} files to {escape(str(result.target))}[/green]")
    if result.skipped:
        console.print(f"[yellow]Skipped invalid files: {escape(', '.join(result.skipped))}[/yellow]")


if __name__ == "__main__":
    main()
