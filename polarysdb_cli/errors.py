"""Exceptions raised by the PolarysDB shell."""


class PolarysCliError(Exception):
    """Base exception for polarysdb-cli errors."""
    pass

class UsageError(PolarysCliError):
    """Wrong number of arguments for a known command."""
    pass

class UnknownCommandError(PolarysCliError):
    """Command name is not in the registry."""

    def __init__(self, name: str):
        super().__init__(f"unknown command: {name}")
        self.name = name

class NotInitializedError(PolarysCliError):
    """Operation needs an open database."""

    def __init__(self, message: str = "database not initialized. Please run 'init' first"):
        super().__init__(message)

class SessionClosedError(PolarysCliError):
    """Session was shut down."""

    def __init__(self, message: str = "session is closed"):
        super().__init__(message)

class BackendError(PolarysCliError):
    """Database backend missing or misbehaving."""
    pass

class InvalidKeyError(PolarysCliError):
    """Key material has the wrong size."""
    pass

class AlreadyInitializedError(PolarysCliError):
    """A database is already open."""

    def __init__(self, path: str):
        super().__init__(f"database already initialized at {path}. Please run 'close' first")
        self.path = path
