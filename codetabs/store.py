"""Key-value stores remembering which tab a reader selected."""

from __future__ import annotations

import dataclasses as dc
import typing as typ


class TabStore(typ.Protocol):
    """Minimal key-value interface used for tab selection."""

    def get(self, key: str) -> str | None:
        """Return the stored title for ``key``, if any."""
        ...

    def set(self, key: str, value: str) -> None:
        """Remember ``value`` under ``key``."""
        ...


@dc.dataclass(slots=True)
class MemoryTabStore:
    """Dictionary-backed :class:`TabStore`."""

    values: dict[str, str] = dc.field(default_factory=dict)

    def get(self, key: str) -> str | None:
        """Return the stored title for ``key``, if any."""
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        """Remember ``value`` under ``key``."""
        self.values[key] = value


__all__ = ["MemoryTabStore", "TabStore"]
