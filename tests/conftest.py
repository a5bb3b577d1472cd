"""Shared fixtures: a fake database library and a captured logger."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import Any

import pytest

from polarysdb_cli.backend import Backend
from polarysdb_cli.logger import Logger, LoggerConfig
from polarysdb_cli.session import Session


class FakeHandle:
    """Records every call made on an open database."""

    def __init__(self, key: bytes, path: str) -> None:
        self.key = key
        self.path = path
        self.calls: list[tuple[Any, ...]] = []
        self.close_count = 0
        self.fail_with: Exception | None = None

    def _record(self, *call: Any) -> None:
        self.calls.append(call)
        if self.fail_with is not None:
            raise self.fail_with

    def export(self, key: bytes, path: str) -> None:
        self._record("export", key, path)

    def import_(self, key: bytes, path: str) -> None:
        self._record("import", key, path)

    def export_encrypted(self, key: bytes, path: str) -> None:
        self._record("export_encrypted", key, path)

    def import_encrypted(self, key: bytes, path: str) -> None:
        self._record("import_encrypted", key, path)

    def change_key(self, old_key: bytes, new_key: bytes) -> None:
        self._record("change_key", old_key, new_key)

    def close(self) -> None:
        self.close_count += 1


class FakeDatabaseModule:
    """Stands in for the database library module."""

    def __init__(self) -> None:
        self.opened: list[FakeHandle] = []

    def init(self, key: bytes, path: str) -> FakeHandle:
        if path.startswith("/unwritable"):
            raise PermissionError(f"permission denied: {path}")
        handle = FakeHandle(key, path)
        self.opened.append(handle)
        return handle


@dataclass
class CapturedLogger:
    logger: Logger
    out: io.StringIO
    err: io.StringIO
    config: LoggerConfig = field(default_factory=LoggerConfig)

    def lines(self) -> list[str]:
        return self.out.getvalue().splitlines()

    def err_lines(self) -> list[str]:
        return self.err.getvalue().splitlines()

    def text(self) -> str:
        return self.out.getvalue() + self.err.getvalue()

    def clear(self) -> None:
        for stream in (self.out, self.err):
            stream.seek(0)
            stream.truncate()


def make_captured(config: LoggerConfig | None = None) -> CapturedLogger:
    config = config or LoggerConfig()
    out, err = io.StringIO(), io.StringIO()
    return CapturedLogger(Logger(config, stdout=out, stderr=err), out, err, config)


@pytest.fixture(autouse=True)
def _plain_terminal(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep rich from forcing or dropping colors based on the environment."""
    for name in ("FORCE_COLOR", "NO_COLOR", "TTY_COMPATIBLE", "TTY_INTERACTIVE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def captured() -> CapturedLogger:
    """Console-only logger writing to in-memory streams."""
    cap = make_captured()
    try:
        yield cap
    finally:
        cap.logger.close()


@pytest.fixture
def database() -> FakeDatabaseModule:
    return FakeDatabaseModule()


@pytest.fixture
def backend(database: FakeDatabaseModule) -> Backend:
    return Backend(database, "fake")


@pytest.fixture
def session(captured: CapturedLogger, backend: Backend) -> Session:
    s = Session(captured.logger, backend)
    try:
        yield s
    finally:
        s.shutdown()
