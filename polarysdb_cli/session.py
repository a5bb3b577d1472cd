"""
Session state and command dispatch.

A Session owns at most one open database handle. Commands arrive as token
lists, are checked against the registry, have their key arguments resolved
and are forwarded to the handle. Errors are raised to the caller; the
session keeps whatever state it had before the failing command.
"""
import functools
import threading
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from . import __version__, commands
from .backend import Backend, DatabaseHandle
from .errors import AlreadyInitializedError, NotInitializedError, SessionClosedError, UsageError
from .keys import Key, KeySource, classify_key, resolve_key
from .logger import Logger

VERSION = f"v{__version__}"


class State(Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    CLOSED = "closed"


# command -> (handle method, progress message, success message)
_TRANSFERS = {
    "export": ("export", "Exporting database to path:", "Database exported successfully."),
    "import": ("import_", "Importing database from path:", "Database imported successfully."),
    "export-encrypted": ("export_encrypted", "Exporting encrypted database to path:",
                         "Encrypted database exported successfully."),
    "import-encrypted": ("import_encrypted", "Importing encrypted database from path:",
                         "Encrypted database imported successfully."),
}


def tokenize(line: str) -> List[str]:
    return line.split()


class Session:
    """Interactive session around one database handle."""

    def __init__(self,
                 logger: Logger,
                 backend: Optional[Backend] = None,
                 version: str = VERSION,
                 stop_event: Optional[threading.Event] = None):
        self.logger = logger
        self.backend = backend or Backend()
        self.version = version
        self.stop_event = stop_event or threading.Event()
        self.handle: Optional[DatabaseHandle] = None
        self.path: Optional[str] = None
        self._closed = False
        # held for each command and for shutdown
        self._lock = threading.RLock()

        self._handlers: Dict[str, Callable[..., None]] = {
            "init": self._cmd_init,
            "change-key": self._cmd_change_key,
            "new-key": self._cmd_new_key,
            "key-from": self._cmd_key_from,
            "close": self._cmd_close,
            "version": self._cmd_version,
            "help": self._cmd_help,
            "exit": self._cmd_exit,
        }
        for name in _TRANSFERS:
            self._handlers[name] = functools.partial(self._transfer, name)

    @property
    def state(self) -> State:
        if self._closed:
            return State.CLOSED
        if self.handle is None:
            return State.UNINITIALIZED
        return State.ACTIVE

    # ========================================================================
    # Dispatch
    # ========================================================================

    def execute(self, line: str) -> None:
        """Tokenize and dispatch one line of input."""
        self.dispatch(tokenize(line))

    def dispatch(self, args: Sequence[str]) -> None:
        if not args:
            return

        with self._lock:
            if self._closed:
                raise SessionClosedError()

            command = commands.lookup(args[0])
            params = list(args[1:])
            if len(params) != len(command.args):
                raise UsageError(command.usage)
            if command.requires_database and self.handle is None:
                raise NotInitializedError()

            self._handlers[command.name](*params)

    def _resolve(self, token: str) -> Key:
        key = resolve_key(token, self.backend, self.logger)
        if classify_key(token) is KeySource.GENERATED:
            self.logger.info("Key not usable as given, generated a random key:", key.hex())
        return key

    # ========================================================================
    # Commands
    # ========================================================================

    def _cmd_init(self, key_token: str, path: str) -> None:
        if self.handle is not None:
            raise AlreadyInitializedError(self.path)
        key = self._resolve(key_token)
        self.logger.info("Initializing database at path:", path)
        self.handle = self.backend.open(key, path)
        self.path = path
        self.logger.info("Database initialized successfully.")

    def _transfer(self, name: str, key_token: str, path: str) -> None:
        method, progress, done = _TRANSFERS[name]
        key = self._resolve(key_token)
        self.logger.info(progress, path)
        getattr(self.handle, method)(bytes(key), path)
        self.logger.info(done)

    def _cmd_change_key(self, old_token: str, new_token: str) -> None:
        old_key = self._resolve(old_token)
        new_key = self._resolve(new_token)
        self.logger.info("Changing database key.")
        self.handle.change_key(bytes(old_key), bytes(new_key))
        self.logger.info("Database key changed successfully.")

    def _cmd_new_key(self) -> None:
        self.logger.info("New key:", self.backend.generate_key().hex())

    def _cmd_key_from(self, text: str) -> None:
        self.logger.info("Key:", self._resolve(text).hex())

    def _cmd_close(self) -> None:
        self.handle.close()
        self.handle, self.path = None, None
        self.logger.info("Database closed.")

    def _cmd_version(self) -> None:
        self.logger.info("PolarysDB CLI Version:", self.version)

    def _cmd_help(self) -> None:
        self.logger.info("Available commands:")
        for command in commands.all_commands():
            self.logger.info(f"{command.name}:", command.description)

    def _cmd_exit(self) -> None:
        self.logger.info("Exiting...")
        self.stop_event.set()

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def shutdown(self) -> None:
        """Close the handle, once. Later calls do nothing."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            handle, self.handle, self.path = self.handle, None, None

        if handle is None:
            return
        self.logger.info("Closing database...")
        try:
            handle.close()
        except Exception as e:
            self.logger.error("Failed to close database:", e)
        else:
            self.logger.info("Database closed.")
