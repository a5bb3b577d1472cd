"""
Prompt loop and shutdown coordination.

The prompt runs in a worker thread while the main thread waits for a stop
signal: SIGINT/SIGTERM, the ``exit`` command, or the end of input. Every
one of those paths ends in Shell.shutdown(), which closes the database,
then the logger.
"""
import functools
import signal
import threading
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter

from . import commands
from .lexer import CommandLexer
from .logger import Logger
from .session import Session

PROMPT = "> "


class Shell:
    """Interactive front-end for a Session."""

    def __init__(self, session: Session, logger: Logger, prompt_session=None):
        self.session = session
        self.logger = logger
        self.stop_event = session.stop_event
        self.exit_code = 0
        self._prompt = prompt_session
        self._thread: Optional[threading.Thread] = None
        self._shutdown_lock = threading.Lock()
        self._shut_down = False

    def _build_prompt(self) -> PromptSession:
        words = commands.names()
        return PromptSession(completer=WordCompleter(words, ignore_case=True),
                             lexer=CommandLexer(words))

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def handle_line(self, line: str) -> None:
        """Run one line; report failures and carry on."""
        if not line.strip():
            return
        try:
            self.session.execute(line)
        except Exception as e:
            self.logger.warn("Error:", e)

    def read_loop(self) -> None:
        """Read and run lines until end of input or a stop request."""
        try:
            if self._prompt is None:
                try:
                    self._prompt = self._build_prompt()
                except Exception as e:
                    self.logger.fatal(e)

            while not self.stop_event.is_set():
                try:
                    line = self._prompt.prompt(PROMPT, handle_sigint=False,
                                               set_exception_handler=False)
                except (EOFError, KeyboardInterrupt):
                    break
                self.handle_line(line)
        except SystemExit as e:
            self.exit_code = e.code if isinstance(e.code, int) else 1
        finally:
            self.stop_event.set()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self, install_signals: bool = True) -> int:
        """Start the prompt, wait for it to stop, shut down. Returns the exit status."""
        self.logger.init()
        self.logger.info("PolarysDB CLI Version:", self.session.version)

        if install_signals:
            self._install_signal_handlers()

        self._thread = threading.Thread(target=self.read_loop, name="polarysdb-prompt",
                                        daemon=True)
        self._thread.start()

        # short waits keep the main thread responsive to signals
        while not self.stop_event.wait(0.2):
            pass

        self.shutdown()
        return self.exit_code

    def _install_signal_handlers(self) -> None:
        if threading.current_thread() is not threading.main_thread():
            return
        signal.signal(signal.SIGINT, self._on_signal)
        signal.signal(signal.SIGTERM, self._on_signal)

    def _on_signal(self, signum, frame) -> None:
        self.stop_event.set()

    def _interrupt_prompt(self) -> None:
        app = getattr(self._prompt, "app", None)
        if app is None or not app.is_running or app.loop is None:
            return
        try:
            app.loop.call_soon_threadsafe(functools.partial(app.exit, exception=EOFError))
        except RuntimeError:
            # prompt finished and its loop closed in the meantime
            pass

    def shutdown(self) -> None:
        """Stop input, close the database and the logger. Runs once."""
        with self._shutdown_lock:
            if self._shut_down:
                return
            self._shut_down = True

        self.stop_event.set()
        self._interrupt_prompt()
        self.session.shutdown()

        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=1.0)

        self.logger.info("Goodbye.")
        self.logger.close()
