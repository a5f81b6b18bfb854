"""Identifier generation for stored keywords."""

from __future__ import annotations

import secrets
import threading
import time

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
_state = {"millis": 0, "counter": 0}
_LOCK = threading.Lock()


def _base36(value: int) -> str:
    digits: list[str] = []
    while True:
        value, remainder = divmod(value, 36)
        digits.append(_ALPHABET[remainder])
        if not value:
            return "".join(reversed(digits))


def generate_cuid(length: int = 24) -> str:
    """Return a time-ordered lowercase identifier prefixed with `c`.

    Ids created in the same millisecond are disambiguated by a counter, so
    rows from one batch insert keep their insertion order when sorted.
    """
    now_millis = int(time.time() * 1000)
    with _LOCK:
        if now_millis == _state["millis"]:
            _state["counter"] += 1
        else:
            _state["millis"] = now_millis
            _state["counter"] = 0
        counter = _state["counter"]

    body_len = max(length - 1, 8)
    prefix = f"{_base36(now_millis)}{_base36(counter).rjust(4, '0')}"
    padding = "".join(secrets.choice(_ALPHABET) for _ in range(max(body_len - len(prefix), 0)))
    return f"c{(prefix + padding)[:body_len]}"
