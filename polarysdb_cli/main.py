import sys
from typing import Optional, Sequence

import pyfiglet
from rich.console import Console
from rich.text import Text

from .backend import Backend, load_backend
from .config import load_settings
from .errors import BackendError
from .logger import Logger
from .session import Session
from .shell import Shell

console = Console()


def print_banner():
    console.print(Text(pyfiglet.figlet_format("PolarysDB", font="starwars"), style="#56b6c2"))


def open_backend(name: str, logger: Logger) -> Backend:
    """Load the database library, or run without one so key commands still work."""
    try:
        return load_backend(name)
    except BackendError as e:
        logger.warn(e)
        logger.warn("Only key commands are available until a database backend is installed.")
        return Backend(None, name)


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = load_settings(argv)

    logger = Logger(settings.log)
    logger.init()

    if settings.banner and settings.log.to_console:
        print_banner()

    session = Session(logger, open_backend(settings.backend, logger))
    return Shell(session, logger).run()


if __name__ == "__main__":
    sys.exit(main())
