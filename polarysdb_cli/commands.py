"""Registry of the commands understood at the prompt."""
from dataclasses import dataclass
from typing import Dict, List, Tuple

from .errors import UnknownCommandError


@dataclass(frozen=True)
class Command:
    name: str
    description: str
    args: Tuple[str, ...] = ()
    requires_database: bool = False

    @property
    def usage(self) -> str:
        return " ".join(["usage:", self.name] + [f"<{arg}>" for arg in self.args])


COMMANDS: Tuple[Command, ...] = (
    Command("init", "Initialize database", ("key", "path")),
    Command("export", "Export data to a file .json", ("key", "path"), True),
    Command("import", "Import data from a file .json", ("key", "path"), True),
    Command("export-encrypted", "Export encrypted data to a file .json", ("key", "path"), True),
    Command("import-encrypted", "Import encrypted data from a file .json", ("key", "path"), True),
    Command("change-key", "Re-encrypt the database with a new key", ("old", "new"), True),
    Command("new-key", "Generate a random key"),
    Command("key-from", "Derive a key from a string", ("string",)),
    Command("close", "Close the open database", (), True),
    Command("version", "Show CLI version"),
    Command("help", "Show help"),
    Command("exit", "Close the database and quit"),
)

_BY_NAME: Dict[str, Command] = {command.name: command for command in COMMANDS}


def lookup(name: str) -> Command:
    try:
        return _BY_NAME[name]
    except KeyError:
        raise UnknownCommandError(name) from None


def all_commands() -> Tuple[Command, ...]:
    return COMMANDS


def names() -> List[str]:
    return [command.name for command in COMMANDS]
