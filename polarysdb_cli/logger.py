"""
Leveled logger for the PolarysDB shell.

Records are rendered with rich as ``TAG: YYYY/MM/DD HH:MM:SS message``.
INFO and WARN go to stdout, ERROR and FATAL to stderr, and every record
is mirrored to an append-only log file when one is configured.
"""
import sys
import threading
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import IO, Any, Dict, List, Optional, Union

from rich.console import Console
from rich.text import Text


class Level(IntEnum):
    """Log levels, lowest first."""
    INFO = 0
    WARN = 1
    ERROR = 2
    FATAL = 3

    @classmethod
    def parse(cls, value: Union[str, int, "Level"]) -> "Level":
        """Accept a level, its number, or a name such as ``warn``/``warning``."""
        if isinstance(value, Level):
            return value
        if isinstance(value, int):
            return cls(value)
        name = value.strip().upper()
        if name == "WARNING":
            name = "WARN"
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"unknown log level: {value}") from None


# (tag, style) per level
_TAGS = {
    Level.INFO: ("INFO:", "blue"),
    Level.WARN: ("WARN:", "yellow"),
    Level.ERROR: ("ERROR:", "red"),
    Level.FATAL: ("FATAL:", "magenta"),
}

TIME_FORMAT = "%Y/%m/%d %H:%M:%S"


@dataclass(frozen=True)
class LoggerConfig:
    """Logger options, fixed at construction."""
    file_path: Optional[str] = None
    min_level: Level = Level.INFO
    to_console: bool = True
    to_file: bool = False


class Logger:
    """Process-wide logger shared by the prompt loop and the shutdown path."""

    def __init__(self,
                 config: Optional[LoggerConfig] = None,
                 stdout: Optional[IO[str]] = None,
                 stderr: Optional[IO[str]] = None):
        self.config = config or LoggerConfig()
        self._stdout = stdout
        self._stderr = stderr
        self._init_lock = threading.Lock()
        self._emit_lock = threading.Lock()
        self._initialized = False
        self._file: Optional[IO[str]] = None
        self._sinks: Dict[Level, List[Console]] = {level: [] for level in Level}

    # ------------------------------------------------------------------
    # Sinks
    # ------------------------------------------------------------------

    def init(self) -> None:
        """Build the sinks. Runs once; later calls return immediately."""
        if self._initialized:
            return
        with self._init_lock:
            if self._initialized:
                return

            file_console = None
            if self.config.to_file and self.config.file_path:
                self._file = self._open_file(self.config.file_path)
                # keep the colored tags in the file, like the terminal
                file_console = Console(file=self._file, force_terminal=True,
                                       color_system="standard", soft_wrap=True,
                                       highlight=False)

            consoles: List[Console] = []
            if self.config.to_console:
                out = Console(file=self._stdout, soft_wrap=True, highlight=False)
                err = Console(file=self._stderr, stderr=True, soft_wrap=True,
                              highlight=False)
                consoles = [out, err]

            for level in Level:
                sinks = []
                if consoles:
                    sinks.append(consoles[0] if level < Level.ERROR else consoles[1])
                if file_console is not None:
                    sinks.append(file_console)
                self._sinks[level] = sinks

            self._initialized = True

    def _open_file(self, path: str) -> IO[str]:
        try:
            return open(path, "a", encoding="utf-8")
        except OSError as e:
            err = self._stderr or sys.stderr
            err.write(f"failed to open log file: {e}\n")
            err.flush()
            raise SystemExit(1)

    def close(self) -> None:
        """Release the file sink, if any."""
        with self._init_lock:
            if self._file is None:
                return
            with self._emit_lock:
                for level in Level:
                    self._sinks[level] = [s for s in self._sinks[level]
                                          if s.file is not self._file]
                self._file.close()
                self._file = None

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def enabled(self, level: Level) -> bool:
        return level >= self.config.min_level

    def _log(self, level: Level, values: tuple) -> None:
        if not self.enabled(level):
            return
        self.init()
        tag, style = _TAGS[level]
        line = Text.assemble(
            (tag, style), " ",
            datetime.now().strftime(TIME_FORMAT), " ",
            " ".join(str(v) for v in values),
        )
        with self._emit_lock:
            for sink in self._sinks[level]:
                sink.print(line, soft_wrap=True)

    def info(self, *values: Any) -> None:
        """Log an informational message."""
        self._log(Level.INFO, values)

    def warn(self, *values: Any) -> None:
        """Log a warning."""
        self._log(Level.WARN, values)

    def error(self, *values: Any) -> None:
        """Log an error."""
        self._log(Level.ERROR, values)

    def fatal(self, *values: Any) -> None:
        """Log a fatal error and exit with status 1."""
        self._log(Level.FATAL, values)
        raise SystemExit(1)
