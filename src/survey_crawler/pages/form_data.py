"""
Ordered form field accumulator.

Mirrors how a browser builds an url-encoded body: set() replaces every
earlier value of a name in place (keeping the position of the first one),
append() adds another value under the same name.
"""
from __future__ import annotations

from typing import Iterator, Optional


__all__ = ["FormFields"]


class FormFields:
    """Ordered, multi-valued name/value pairs."""

    def __init__(self) -> None:
        self._fields: list[tuple[str, str]] = []

    def set(self, name: str, value: str) -> None:
        """Set a single value for a name, dropping any later duplicates."""
        replaced = False
        kept: list[tuple[str, str]] = []
        for key, old in self._fields:
            if key != name:
                kept.append((key, old))
            elif not replaced:
                kept.append((name, value))
                replaced = True
        if not replaced:
            kept.append((name, value))
        self._fields = kept

    def append(self, name: str, value: str) -> None:
        self._fields.append((name, value))

    def get(self, name: str) -> Optional[str]:
        """First value stored under a name."""
        for key, value in self._fields:
            if key == name:
                return value
        return None

    def items(self) -> list[tuple[str, str]]:
        return list(self._fields)

    def __contains__(self, name: object) -> bool:
        return any(key == name for key, _ in self._fields)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)
