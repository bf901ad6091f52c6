"""Exception hierarchy for mediashelf."""

from __future__ import annotations

from pathlib import Path


class MediaShelfError(Exception):
    """Base class for all mediashelf errors."""


# Protected metadata fields


class ProtectedFieldError(MediaShelfError):
    """Removing a field would break the record type's required fields."""

    field: str = ""

    def __init__(self, filename: str, media_type: str) -> None:
        self.filename = filename
        self.media_type = media_type
        super().__init__(
            f"Cannot remove {self.field} from {filename} because it is of type {media_type}"
        )


class CannotRemoveCreator(ProtectedFieldError):
    field = "creator"


class CannotRemoveResolution(ProtectedFieldError):
    field = "resolution"


class CannotRemoveRuntime(ProtectedFieldError):
    field = "runtime"


# Import / export


class ImportExportError(MediaShelfError):
    """Base class for interchange failures."""


class InvalidFilepath(ImportExportError):
    """The file to import does not exist."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(
            f'File path: "{self.path}" does not exist -- please try again with a valid path.'
        )


class DestinationExists(ImportExportError):
    """The export target exists and the overwrite policy is ``fail``."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(f'The file "{self.path}" already exists')


class ExportError(ImportExportError):
    """The exported document could not be encoded or written."""


# Command layer


class CommandError(MediaShelfError):
    """A shell command failed; the message is shown to the user."""

    message = "Command failed"

    def __init__(self, command: str = "") -> None:
        self.command = command
        super().__init__(self.message.format(command=command))


class InvalidParameters(CommandError):
    message = 'Invalid parameters for "{command}" -- see "help" for details.'


class MissingResultSet(CommandError):
    message = "No previous results to work from."


class UnknownCommand(CommandError):
    message = 'Command "{command}" not found -- see "help" for details.'


class NoCommand(CommandError):
    message = 'No command given -- see "help" for details.'


class EmptyLibrary(CommandError):
    message = "The library is empty -- load some files first."
