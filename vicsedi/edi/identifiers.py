"""Document identifier minting.

ASN, bill-of-lading and invoice numbers must never repeat, including across
worker processes generating documents at the same instant. The default
source combines a process-wide counter, a millisecond timestamp and a
random suffix. Generators take the source as a parameter so tests and
callers with their own numbering can swap it out.
"""

import itertools
import secrets
import threading
import time
from typing import Protocol


class IdentifierSource(Protocol):
    """Mints fresh opaque identifiers for generated documents."""

    def asn_number(self) -> str: ...

    def bol_number(self) -> str: ...

    def invoice_number(self) -> str: ...


class MonotonicIdentifierSource:
    """Thread-safe identifier source.

    Identifiers look like ``ASN-<ms base36>-<seq>-<rand>``. The sequence
    keeps them unique within a process; the random suffix separates
    processes that share a clock tick.
    """

    def __init__(self, suffix_bytes: int = 3) -> None:
        self._counter = itertools.count(1)
        self._lock = threading.Lock()
        self._suffix_bytes = suffix_bytes

    def _mint(self, prefix: str) -> str:
        with self._lock:
            sequence = next(self._counter)
        millis = _base36(time.time_ns() // 1_000_000)
        suffix = secrets.token_hex(self._suffix_bytes).upper()
        return f"{prefix}-{millis}-{sequence:04d}-{suffix}"

    def asn_number(self) -> str:
        return self._mint("ASN")

    def bol_number(self) -> str:
        return self._mint("BOL")

    def invoice_number(self) -> str:
        return self._mint("INV")


def _base36(value: int) -> str:
    digits = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    out = []
    while value:
        value, rem = divmod(value, 36)
        out.append(digits[rem])
    return "".join(reversed(out)) or "0"


_default_source: MonotonicIdentifierSource | None = None
_default_lock = threading.Lock()


def get_identifier_source() -> MonotonicIdentifierSource:
    """Return the process-wide default identifier source."""
    global _default_source
    with _default_lock:
        if _default_source is None:
            _default_source = MonotonicIdentifierSource()
        return _default_source
