"""Lazily populated symbol to provider-identifier lookup."""

from __future__ import annotations

from collections.abc import Callable


class SymbolCache:
    """Read-mostly mapping shared across concurrent lookups.

    Entries are written once with ``dict.setdefault``, so when two lookups race
    on the same key the first stored value wins and later writes are ignored.
    Resolvers must be idempotent.
    """

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}

    def __contains__(self, key: str) -> bool:
        return key.upper() in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> str | None:
        return self._entries.get(key.upper())

    def put(self, key: str, value: str) -> str:
        return self._entries.setdefault(key.upper(), value)

    def get_or_resolve(self, key: str, resolver: Callable[[str], str]) -> str:
        cached = self.get(key)
        if cached is not None:
            return cached
        return self.put(key, resolver(key))
