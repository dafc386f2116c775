"""Pygments-backed highlighter used by the group builder.

The builder only depends on the :class:`Highlighter` protocol; any object with
an async ``highlight(language, source)`` method returning
:class:`~codetabs.models.HighlightedCode` can be injected. The default
:class:`PygmentsHighlighter` strips annotation comments, tokenizes the rest and
emits one HTML fragment per line. Unknown languages degrade to plain text
instead of raising, so one odd block does not abort a whole group.
"""

from __future__ import annotations

import typing as typ

from pygments import highlight as pygments_highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.styles import get_style_by_name
from pygments.token import Text
from pygments.util import ClassNotFound

from .annotations import extract_annotations
from .errors import ConfigError
from .models import HighlightedCode

if typ.TYPE_CHECKING:
    from pygments.lexer import Lexer

LANGUAGE_ALIASES: dict[str, str] = {
    "terminal": "console",
    "shell": "bash",
    "clarity": "lisp",
    "package-install": "console",
}


class Highlighter(typ.Protocol):
    """Convert a language tag and source text into highlighted lines."""

    async def highlight(self, language: str, source: str) -> HighlightedCode:
        """Return the highlighted rendering of ``source``."""
        ...


def _lexer_for(language: str) -> Lexer:
    """Return a lexer for ``language``, falling back to plain text."""
    name = LANGUAGE_ALIASES.get(language.lower(), language) if language else "text"
    try:
        return get_lexer_by_name(name, stripnl=False, ensurenl=True)
    except ClassNotFound:
        return get_lexer_by_name("text", stripnl=False, ensurenl=True)


def _hex(color: str | None) -> str:
    return f"#{color}" if color else ""


class PygmentsHighlighter:
    """Highlight code with Pygments using a named style."""

    def __init__(self, style: str = "monokai") -> None:
        """Create a highlighter for ``style``.

        Raises
        ------
        ConfigError
            If Pygments does not know ``style``.
        """
        try:
            style_class = get_style_by_name(style)
        except ClassNotFound as exc:
            msg = f"Unknown Pygments style '{style}'."
            raise ConfigError(msg) from exc
        self.style_name = style
        self._formatter = HtmlFormatter(style=style, nowrap=True)
        self._style_payload = {
            "background": style_class.background_color or "",
            "foreground": _hex(style_class.style_for_token(Text)["color"]),
            "highlight": style_class.highlight_color or "",
        }

    @property
    def stylesheet(self) -> str:
        """CSS rules for the token classes emitted by :meth:`highlight`."""
        return HtmlFormatter(style=self.style_name).get_style_defs(".codetabs pre")

    async def highlight(self, language: str, source: str) -> HighlightedCode:
        """Highlight ``source`` as ``language``.

        Annotation comments are removed first and returned on the result.
        """
        code, annotations = extract_annotations(source)
        line_count = len(code.split("\n"))
        html = pygments_highlight(code, _lexer_for(language), self._formatter)
        lines = html.split("\n")[:line_count]
        lines.extend([""] * (line_count - len(lines)))
        return HighlightedCode(
            code=code,
            lines=tuple(lines),
            language=language,
            annotations=annotations,
            style=dict(self._style_payload),
        )


__all__ = ["LANGUAGE_ALIASES", "Highlighter", "PygmentsHighlighter"]
