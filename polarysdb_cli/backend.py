"""
Binding to the external database library.

The library is any importable module (``module`` or ``module:attribute``)
exposing::

    init(key: bytes, path: str) -> handle
    generate_key() -> bytes                   # optional
    generate_key_from_bytes(data: bytes) -> bytes   # optional

where the handle provides the DatabaseHandle methods below. Keys cross this
boundary as raw 32-byte ``bytes``.
"""
import importlib
from typing import Any, Optional, Protocol

from . import keys
from .errors import BackendError
from .keys import Key

DEFAULT_BACKEND = "polarysdb"


class DatabaseHandle(Protocol):
    """Open database owned by a session."""

    def export(self, key: bytes, path: str) -> None: ...

    def import_(self, key: bytes, path: str) -> None: ...

    def export_encrypted(self, key: bytes, path: str) -> None: ...

    def import_encrypted(self, key: bytes, path: str) -> None: ...

    def change_key(self, old_key: bytes, new_key: bytes) -> None: ...

    def close(self) -> None: ...


class Backend:
    """Narrow view of a database library module."""

    def __init__(self, module: Optional[Any] = None, name: str = DEFAULT_BACKEND):
        self.module = module
        self.name = name

    @property
    def available(self) -> bool:
        return self.module is not None

    def open(self, key: Key, path: str) -> DatabaseHandle:
        """Open or create the database at ``path``."""
        if self.module is None:
            raise BackendError(f"database backend '{self.name}' is not loaded")
        opener = getattr(self.module, "init", None) or getattr(self.module, "open", None)
        if opener is None:
            raise BackendError(f"database backend '{self.name}' has no init()")
        return opener(bytes(key), path)

    def generate_key(self) -> Key:
        fn = getattr(self.module, "generate_key", None) or keys.generate_key
        return Key(fn())

    def generate_key_from_bytes(self, data: bytes) -> Key:
        fn = getattr(self.module, "generate_key_from_bytes", None) or keys.generate_key_from_bytes
        return Key(fn(data))


def load_backend(name: str = DEFAULT_BACKEND) -> Backend:
    """Import the database library named ``module`` or ``module:attribute``."""
    module_name, _, attr = name.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise BackendError(f"cannot import database backend '{name}': {e}") from e
    if attr:
        try:
            module = getattr(module, attr)
        except AttributeError:
            raise BackendError(f"database backend '{module_name}' has no attribute '{attr}'") from None
    return Backend(module, name)
