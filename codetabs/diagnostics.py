"""Warning channels used while parsing code block metadata.

Parsing never fails on malformed metadata; problems such as unknown flag
characters are reported through a :class:`DiagnosticsSink` instead. Callers
pick the sink: :class:`LoggingDiagnostics` forwards to the standard library
logger and :class:`CollectingDiagnostics` keeps the messages in memory so they
can be asserted on.

Examples
--------
>>> from codetabs.diagnostics import CollectingDiagnostics
>>> sink = CollectingDiagnostics()
>>> sink.warn("Unknown flag: z")
>>> sink.warnings
['Unknown flag: z']
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

logger = logging.getLogger(__name__)


class DiagnosticsSink(typ.Protocol):
    """Receive non-fatal warnings emitted during parsing."""

    def warn(self, message: str) -> None:
        """Record ``message`` as a warning."""
        ...


class LoggingDiagnostics:
    """Forward warnings to a :mod:`logging` logger."""

    def __init__(self, target: logging.Logger | None = None) -> None:
        self.logger = target or logger

    def warn(self, message: str) -> None:
        """Log ``message`` at ``WARNING`` level."""
        self.logger.warning(message)


@dc.dataclass(slots=True)
class CollectingDiagnostics:
    """Keep warnings in memory, in emission order."""

    warnings: list[str] = dc.field(default_factory=list)

    def warn(self, message: str) -> None:
        """Append ``message`` to :attr:`warnings`."""
        self.warnings.append(message)


__all__ = ["CollectingDiagnostics", "DiagnosticsSink", "LoggingDiagnostics"]
