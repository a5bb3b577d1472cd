"""Tests for the entry point wiring."""

from __future__ import annotations

from typing import Any

import pytest

from polarysdb_cli import main as main_module
from polarysdb_cli.backend import Backend
from polarysdb_cli.logger import Logger, LoggerConfig


class RecordingShell:
    instances: list["RecordingShell"] = []

    def __init__(self, session: Any, logger: Logger) -> None:
        self.session = session
        self.logger = logger
        RecordingShell.instances.append(self)

    def run(self) -> int:
        return 0


@pytest.fixture
def recording_shell(monkeypatch: pytest.MonkeyPatch) -> type[RecordingShell]:
    RecordingShell.instances = []
    monkeypatch.setattr(main_module, "Shell", RecordingShell)
    return RecordingShell


class TestMain:
    def test_missing_backend_still_starts(self, recording_shell: type[RecordingShell],
                                          capsys: pytest.CaptureFixture[str]) -> None:
        status = main_module.main(["--no-banner", "--backend", "no_such_polarys_module"])
        assert status == 0
        (shell,) = recording_shell.instances
        assert not shell.session.backend.available
        assert "cannot import database backend" in capsys.readouterr().out

    def test_log_file_is_used(self, recording_shell: type[RecordingShell], tmp_path) -> None:
        log_file = tmp_path / "cli.log"
        main_module.main(["--no-banner", "--no-console", "--log-file", str(log_file),
                          "--backend", "no_such_polarys_module"])
        (shell,) = recording_shell.instances
        shell.logger.close()
        assert "cannot import database backend" in log_file.read_text(encoding="utf-8")

    def test_banner(self, capsys: pytest.CaptureFixture[str]) -> None:
        main_module.print_banner()
        assert capsys.readouterr().out.strip()


class TestOpenBackend:
    def test_falls_back_to_unloaded_backend(self) -> None:
        logger = Logger(LoggerConfig(to_console=False))
        backend = main_module.open_backend("no_such_polarys_module", logger)
        assert isinstance(backend, Backend)
        assert backend.name == "no_such_polarys_module"
        assert not backend.available
