"""Interactive command shell over a library session."""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import click
from rich.console import Console
from rich.markup import escape

from mediashelf.errors import (
    CommandError,
    DestinationExists,
    EmptyLibrary,
    ImportExportError,
    InvalidFilepath,
    InvalidParameters,
    MissingResultSet,
    NoCommand,
    UnknownCommand,
)
from mediashelf.interchange import ImportExportManager, ImportReport
from mediashelf.library import Library
from mediashelf.models.config import ShelfConfig
from mediashelf.models.media import FILTER_FLAGS, MediaRecord
from mediashelf.models.metadata import Metadata

logger = logging.getLogger(__name__)

HELP_TEXT = """\
    help                              - this text
    load <filename> ...               - load file into the collection
    list <term> ...                   - list all the files that have the term specified
    list -a|-d|-i|-v <term> ...       - as above, limited to one kind of media
    list                              - list all the files in the collection
    add <number> <key> <value> ...    - add some metadata to a file
    set <number> <key> <value> ...    - this is really a del followed by an add
    del <number> <key> ...            - removes a metadata item from a file
    save-search <filename>            - saves the last list results to a file
    save <filename>                   - saves the whole collection to a file
    quit                              - quit the program
"""


@dataclass
class ResultSet:
    """Files produced by the last command, numbered for follow-up commands."""

    results: list[MediaRecord] = field(default_factory=list)

    def has_results(self) -> bool:
        return bool(self.results)

    def get(self, index: str, command: str) -> MediaRecord:
        """Resolve a user-typed index into the result list."""
        try:
            position = int(index)
        except ValueError:
            raise InvalidParameters(command) from None
        if not 0 <= position < len(self.results):
            raise InvalidParameters(command)
        return self.results[position]


class Shell:
    """Reads commands, runs them against a library, and prints the results."""

    def __init__(
        self,
        library: Library | None = None,
        config: ShelfConfig | None = None,
        console: Console | None = None,
        ask: Callable[..., str] = click.prompt,
    ) -> None:
        self.config = config or ShelfConfig()
        self.library = library if library is not None else Library()
        self.manager = ImportExportManager(self.library, self.config)
        self.console = console or Console()
        self.ask = ask
        self.last = ResultSet()
        self.running = True

        self._handlers: dict[str, Callable[[list[str]], ResultSet]] = {
            "help": self.do_help,
            "load": self.do_load,
            "list": self.do_list,
            "add": self.do_add,
            "set": self.do_set,
            "del": self.do_del,
            "save": self.do_save,
            "save-search": self.do_save_search,
            "quit": self.do_quit,
            "exit": self.do_quit,
        }

    def run(self) -> None:
        """Prompt for commands until quit or end of input."""
        while self.running:
            try:
                line = self.console.input(self.config.prompt)
            except EOFError:
                break
            self.execute(line)

    def execute(self, line: str) -> None:
        """Run a single command line and print its results."""
        command = ""
        try:
            try:
                parts = shlex.split(line)
            except ValueError:
                # Unbalanced quotes
                words = line.split()
                raise InvalidParameters(words[0].lower() if words else "") from None
            if not parts:
                raise NoCommand()

            command = parts[0].lower()
            handler = self._handlers.get(command)
            if handler is None:
                raise UnknownCommand(command)

            self.last = handler(parts[1:])
            if self.running:
                self.show_results()
        except CommandError as e:
            self.console.print(f"[yellow]{escape(str(e))}[/yellow]")
        except ImportExportError as e:
            self.console.print(f"[red]{escape(str(e))}[/red]")

    def show_results(self) -> None:
        for index, record in enumerate(self.last.results):
            self.console.print(f"{index}: {escape(record.filename)}")

    # Command handlers

    def do_help(self, params: list[str]) -> ResultSet:
        self.console.print(HELP_TEXT, markup=False)
        return ResultSet()

    def do_load(self, params: list[str]) -> ResultSet:
        if not params:
            raise InvalidParameters("load")

        loaded: list[MediaRecord] = []
        for filename in params:
            try:
                report = self.manager.read_report(filename)
            except InvalidFilepath as e:
                self.console.print(f"[red]{escape(str(e))}[/red]")
                continue
            self.print_rejections(filename, report)
            loaded.extend(report.accepted)
        return ResultSet(loaded)

    def print_rejections(self, filename: str, report: ImportReport) -> None:
        if report.error:
            self.console.print(f"[red]{escape(filename)} {escape(report.error)}[/red]")
        if not report.rejected:
            return
        self.console.print(f"> Files not successfully imported for {escape(filename)}:")
        for rejected in report.rejected:
            if rejected.fullpath:
                self.console.print(f"\t{escape(rejected.fullpath)}:")
            else:
                self.console.print(
                    "\tThis piece of media did not contain a path -- it was not added to the library."
                )
            for reason in rejected.reasons:
                self.console.print(f"\t* {escape(reason)}")

    def do_list(self, params: list[str]) -> ResultSet:
        if not params:
            results = self.library.all()
            if not results:
                raise EmptyLibrary("list")
        elif params[0] in FILTER_FLAGS.values():
            results = self.library.filter_by(params)
        else:
            results = self.library.search_terms(params)

        if not results:
            self.console.print(
                f"No files with metadata containing the key(s) {escape(str(params))} found."
            )
        return ResultSet(results)

    def _pairs(self, params: list[str], command: str) -> tuple[MediaRecord, list[tuple[str, str]]]:
        if not self.last.has_results():
            raise MissingResultSet(command)
        if len(params) < 3 or (len(params) - 1) % 2 != 0:
            raise InvalidParameters(command)
        record = self.last.get(params[0], command)
        pairs = list(zip(params[1::2], params[2::2]))
        return record, pairs

    def do_add(self, params: list[str]) -> ResultSet:
        record, pairs = self._pairs(params, "add")
        for key, value in pairs:
            self.library.add_metadata(Metadata(key, value), record)
        return ResultSet()

    def do_set(self, params: list[str]) -> ResultSet:
        record, pairs = self._pairs(params, "set")
        for key, value in pairs:
            self.library.set_metadata(record, key, value)
        return ResultSet()

    def do_del(self, params: list[str]) -> ResultSet:
        if not self.last.has_results():
            raise MissingResultSet("del")
        if len(params) < 2:
            raise InvalidParameters("del")
        record = self.last.get(params[0], "del")
        for key in params[1:]:
            if not self.library.remove_record_field(record, key):
                self.console.print(
                    f"[yellow]{escape(key)} was not removed from {escape(record.filename)}[/yellow]"
                )
        return ResultSet()

    def do_save(self, params: list[str]) -> ResultSet:
        if len(params) != 1:
            raise InvalidParameters("save")
        self.save(params[0], self.library.all())
        return ResultSet()

    def do_save_search(self, params: list[str]) -> ResultSet:
        if not self.last.has_results():
            raise MissingResultSet("save-search")
        if len(params) != 1:
            raise InvalidParameters("save-search")
        self.save(params[0], self.last.results)
        return ResultSet()

    def do_quit(self, params: list[str]) -> ResultSet:
        if self.last.has_results():
            answer = self.ask(
                "Your results from the previous search have not been saved. "
                "Would you like to save them before exiting?",
                type=click.Choice(["y", "n"]),
            )
            if answer == "y":
                filename = self.ask("Please enter the file you would like your results saved in")
                self.save(filename, self.last.results)
        self.running = False
        return ResultSet()

    def save(self, filename: str, records: list[MediaRecord]) -> Path:
        """Write records, prompting for another name while the target exists."""
        while True:
            try:
                target = self.manager.write(filename, records)
            except DestinationExists as e:
                filename = self.ask(
                    f'The file "{e.path}" already exists -- please enter another filename'
                )
                continue
            self.console.print(
                f"[green]Data has been successfully saved to {escape(str(target))}.[/green]"
            )
            return target
