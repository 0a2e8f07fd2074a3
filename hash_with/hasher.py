"""Structural hasher used by generated hash methods.

Contributions are type-tagged and length-prefixed before they reach the
digest, so both the order of contributions and their boundaries affect
the result: ("ab", "c") and ("a", "bc") hash differently.
"""

import hashlib
import struct
from enum import Enum
from typing import Any

HASH_METHOD = "__hash_into__"

_TAG_NONE = b"N"
_TAG_FALSE = b"F"
_TAG_TRUE = b"T"
_TAG_INT = b"i"
_TAG_STR = b"s"
_TAG_BYTES = b"b"
_TAG_SEQ = b"q"
_TAG_SET = b"S"
_TAG_RECORD = b"r"


def _length(n: int) -> bytes:
    return struct.pack(">Q", n)


class StructuralHasher:
    """SHA256-backed hasher state.

    ``contribute`` accepts values with a native contribution; ``float``
    deliberately has none, so float fields need a hash_with directive
    (see ``hash_f64_bits``).
    """

    def __init__(self, method_name: str = HASH_METHOD):
        self._digest = hashlib.sha256()
        self._method_name = method_name

    def write(self, data: bytes) -> None:
        """Feed raw bytes to the digest."""
        self._digest.update(data)

    def contribute(self, value: Any) -> None:
        self.write(self._encode(value))

    def _encode(self, value: Any) -> bytes:
        if value is None:
            return _TAG_NONE
        if isinstance(value, bool):
            return _TAG_TRUE if value else _TAG_FALSE
        if isinstance(value, Enum):
            return self._encode(value.value)
        if isinstance(value, int):
            raw = value.to_bytes((value.bit_length() + 8) // 8, "big", signed=True)
            return _TAG_INT + _length(len(raw)) + raw
        if isinstance(value, str):
            raw = value.encode("utf-8")
            return _TAG_STR + _length(len(raw)) + raw
        if isinstance(value, (bytes, bytearray)):
            return _TAG_BYTES + _length(len(value)) + bytes(value)
        if isinstance(value, (tuple, list)):
            return _TAG_SEQ + _length(len(value)) + b"".join(self._encode(v) for v in value)
        if isinstance(value, frozenset):
            members = sorted(self._encode(v) for v in value)
            return _TAG_SET + _length(len(members)) + b"".join(members)
        if hasattr(value, self._method_name):
            # Nested records hash into a sub-state so their boundary is preserved
            sub = StructuralHasher(self._method_name)
            getattr(value, self._method_name)(sub)
            return _TAG_RECORD + sub.finalize()
        raise TypeError(
            f"{type(value).__name__} has no native hash contribution; "
            f"add a hash_with directive for it"
        )

    def finalize(self) -> bytes:
        return self._digest.copy().digest()

    def hexdigest(self) -> str:
        return self._digest.copy().hexdigest()

    def finish(self) -> int:
        """Digest folded to a signed 64-bit int, suitable for ``__hash__``."""
        return int.from_bytes(self.finalize()[:8], "big", signed=True)


def hash_f64_bits(value: float, state: Any) -> None:
    """Contribute a float by its IEEE-754 bit pattern."""
    bits, = struct.unpack(">Q", struct.pack(">d", value))
    state.contribute(bits)
