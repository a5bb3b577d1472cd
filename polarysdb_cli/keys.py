"""
Key material and key resolution.

A user-typed key token becomes exactly KEY_SIZE bytes, checked in order:

1. ``""`` (two quote characters) is the empty key, with a warning.
2. Exactly KEY_SIZE bytes of hex is decoded as-is.
3. 1 to KEY_SIZE-1 bytes of text are run through the key derivation.
4. Anything else (missing, too long, malformed) gets a fresh random key.

The branch in step 3 is taken on the length of the token itself. An
earlier revision of this logic tested the length of the not-yet-assigned
result instead, which never matched; that behaviour is not reproduced.
"""
import secrets
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional

from cryptography.hazmat.primitives import hashes

from .errors import InvalidKeyError

if TYPE_CHECKING:
    from .logger import Logger

KEY_SIZE = 32
EMPTY_TOKEN = '""'


@dataclass(frozen=True)
class Key:
    """Fixed-size key material."""
    material: bytes = field(repr=False)

    def __post_init__(self):
        if len(self.material) != KEY_SIZE:
            raise InvalidKeyError(
                f"key must be {KEY_SIZE} bytes, got {len(self.material)}")

    @classmethod
    def from_hex(cls, text: str) -> "Key":
        try:
            return cls(bytes.fromhex(text))
        except ValueError as e:
            raise InvalidKeyError(f"invalid hex key: {e}") from None

    @property
    def is_empty(self) -> bool:
        return not any(self.material)

    def hex(self) -> str:
        return self.material.hex()

    def __bytes__(self) -> bytes:
        return self.material


EMPTY_KEY = Key(bytes(KEY_SIZE))


class KeySource(Enum):
    """Which rule produced a key."""
    EMPTY = "empty"
    HEX = "hex"
    DERIVED = "derived"
    GENERATED = "generated"


def generate_key() -> bytes:
    """Random key bytes; never all zeros."""
    while True:
        material = secrets.token_bytes(KEY_SIZE)
        if any(material):
            return material


def generate_key_from_bytes(data: bytes) -> bytes:
    """SHA-256 of ``data``."""
    digest = hashes.Hash(hashes.SHA256())
    digest.update(data)
    return digest.finalize()


def _decode_hex(token: str) -> Optional[bytes]:
    if len(token) != KEY_SIZE * 2:
        return None
    try:
        return bytes.fromhex(token)
    except ValueError:
        return None


def classify_key(token: Optional[str]) -> KeySource:
    """Pick the resolution rule for ``token`` without producing a key."""
    if token is None:
        return KeySource.GENERATED
    if token == EMPTY_TOKEN:
        return KeySource.EMPTY
    if _decode_hex(token) is not None:
        return KeySource.HEX
    if 1 <= len(token.encode("utf-8")) < KEY_SIZE:
        return KeySource.DERIVED
    return KeySource.GENERATED


class _DefaultKeys:
    def generate_key(self) -> Key:
        return Key(generate_key())

    def generate_key_from_bytes(self, data: bytes) -> Key:
        return Key(generate_key_from_bytes(data))


def resolve_key(token: Optional[str], backend=None,
                logger: Optional["Logger"] = None) -> Key:
    """
    Turn a key token into a Key.

    ``backend`` supplies ``generate_key()`` and ``generate_key_from_bytes()``
    returning Key objects; the module defaults are used without one.
    """
    keys = backend if backend is not None else _DefaultKeys()
    source = classify_key(token)

    if source is KeySource.EMPTY:
        if logger is not None:
            logger.warn("No key provided, using an empty key. "
                        "The database will not be protected.")
        return EMPTY_KEY
    if source is KeySource.HEX:
        return Key(_decode_hex(token))
    if source is KeySource.DERIVED:
        return keys.generate_key_from_bytes(token.encode("utf-8"))
    return keys.generate_key()
