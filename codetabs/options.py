"""Turn flag tokens into :class:`~codetabs.models.CodeOptions` and merge them.

Examples
--------
>>> from codetabs.options import flags_to_options, merge_options
>>> flags_to_options("na").as_dict()
{'line_numbers': True, 'animate': True}
>>> merged = merge_options(flags_to_options("c"), flags_to_options("n"))
>>> merged.as_dict()
{'copy_button': True, 'line_numbers': True}
"""

from __future__ import annotations

import dataclasses as dc

from .diagnostics import DiagnosticsSink, LoggingDiagnostics
from .models import OPTION_NAMES, CodeOptions

FLAG_OPTIONS: dict[str, str] = {
    "c": "copy_button",
    "n": "line_numbers",
    "w": "word_wrap",
    "a": "animate",
}


def flags_to_options(
    flags: str | None = "", diagnostics: DiagnosticsSink | None = None
) -> CodeOptions:
    """Map each character of ``flags`` to an enabled option.

    Parameters
    ----------
    flags : str or None
        Flags token, for example ``"cn"``. Characters are read one by one.
    diagnostics : DiagnosticsSink, optional
        Receives ``"Unknown flag: <char>"`` for every unmapped character.
        Defaults to :class:`~codetabs.diagnostics.LoggingDiagnostics`.

    Returns
    -------
    CodeOptions
        Options with every recognised flag set to ``True``; other options are
        left unset.
    """
    sink = diagnostics or LoggingDiagnostics()
    enabled: dict[str, bool] = {}
    for flag in flags or "":
        name = FLAG_OPTIONS.get(flag)
        if name is None:
            sink.warn(f"Unknown flag: {flag}")
            continue
        enabled[name] = True
    return CodeOptions(**enabled)


def merge_options(group: CodeOptions, tab: CodeOptions) -> CodeOptions:
    """Overlay ``tab`` on ``group``; keys set on the tab win."""
    merged = {
        name: getattr(tab, name) if tab.is_set(name) else getattr(group, name)
        for name in OPTION_NAMES
    }
    return dc.replace(group, **merged)


__all__ = ["FLAG_OPTIONS", "flags_to_options", "merge_options"]
