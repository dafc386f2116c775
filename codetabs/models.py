"""Dataclasses shared by the code group pipeline.

Raw blocks come in from the document layer, :class:`CodeGroup` goes out to the
renderer. Everything in between is rebuilt for every render; records handed to
the renderer are frozen.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from html import escape

from .errors import NoCodeBlocksError

if typ.TYPE_CHECKING:
    from .annotations import AnnotationHandler


OPTION_NAMES: tuple[str, ...] = ("copy_button", "line_numbers", "word_wrap", "animate")


@dc.dataclass(slots=True, frozen=True)
class RawCodeBlock:
    """A fenced code block as written in the source document.

    Attributes
    ----------
    language_tag : str
        Language given after the opening fence (``python``, ``terminal``...).
    metadata : str
        Free-form text following the language tag.
    source_text : str
        Body of the block.
    """

    language_tag: str
    metadata: str = ""
    source_text: str = ""


@dc.dataclass(slots=True, frozen=True)
class ParsedMeta:
    """Title, flags token and filename extracted from block metadata."""

    title: str
    flags: str
    filename: str


@dc.dataclass(slots=True, frozen=True)
class CodeOptions:
    """Rendering options for a group or a tab.

    ``None`` means the option was not set, which is different from ``False``
    when options are merged.
    """

    copy_button: bool | None = None
    line_numbers: bool | None = None
    word_wrap: bool | None = None
    animate: bool | None = None

    def is_set(self, name: str) -> bool:
        """Return whether option ``name`` was given a value."""
        return getattr(self, name) is not None

    def enabled(self, name: str) -> bool:
        """Return whether option ``name`` is set and truthy."""
        return bool(getattr(self, name))

    def as_dict(self) -> dict[str, bool]:
        """Return only the options that were set."""
        return {
            name: getattr(self, name) for name in OPTION_NAMES if self.is_set(name)
        }


@dc.dataclass(slots=True, frozen=True)
class Annotation:
    """An annotation comment lifted out of a code block.

    Attributes
    ----------
    name : str
        Annotation name without the ``!`` prefix (``mark``, ``diff``...).
    query : str | None
        Inline pattern from ``[/.../]``; ``None`` for whole-line annotations.
    from_line : int
        First targeted line, 1-based, in the cleaned code.
    to_line : int
        Last targeted line (inclusive).
    value : str
        Remaining comment text, stripped.
    """

    name: str
    query: str | None
    from_line: int
    to_line: int
    value: str = ""

    def covers(self, line_number: int) -> bool:
        """Return whether ``line_number`` falls inside the annotation range."""
        return self.from_line <= line_number <= self.to_line


@dc.dataclass(slots=True, frozen=True)
class HighlightedCode:
    """Highlighter output for one block.

    ``lines`` holds one HTML fragment per line of ``code`` with balanced tags.
    """

    code: str
    lines: tuple[str, ...]
    language: str
    annotations: tuple[Annotation, ...] = ()
    style: dict[str, str] = dc.field(default_factory=dict)

    @classmethod
    def plain(cls, language: str, source: str) -> HighlightedCode:
        """Return an unstyled rendering of ``source``."""
        code_lines = source.replace("\r\n", "\n").split("\n")
        if len(code_lines) > 1 and code_lines[-1] == "":
            code_lines.pop()
        return cls(
            code="\n".join(code_lines),
            lines=tuple(escape(line, quote=False) for line in code_lines),
            language=language,
        )

    @property
    def line_count(self) -> int:
        """Number of rendered lines."""
        return len(self.lines)


@dc.dataclass(slots=True)
class CodeLine:
    """Mutable per-line record rewritten by annotation handlers."""

    number: int
    html: str
    classes: list[str] = dc.field(default_factory=list)
    attributes: dict[str, str] = dc.field(default_factory=dict)
    gutter: str = ""
    after: list[str] = dc.field(default_factory=list)
    hidden: bool = False


@dc.dataclass(slots=True, frozen=True)
class IconRef:
    """Icon attached to a tab title."""

    name: str
    svg_markup: str
    accent_color: str | None = None
    builtin: bool = False


@dc.dataclass(slots=True, frozen=True)
class TabDescriptor:
    """One selectable variant of a code group.

    Attributes
    ----------
    title : str
        Tab label; also the identity used when selecting a tab.
    filename : str
        Filename shown above the code, empty when absent.
    options : CodeOptions
        Group options merged with the tab's own flags.
    highlighted : HighlightedCode
        Highlighter output.
    icon : IconRef
        Icon rendered next to the title.
    source_text : str
        Original block body.
    handlers : tuple[AnnotationHandler, ...]
        Annotation pipeline resolved from ``options``.
    hide_output : bool
        Terminal tabs only: hide lines that are not ``$`` prompts.
    """

    title: str
    filename: str
    options: CodeOptions
    highlighted: HighlightedCode
    icon: IconRef
    source_text: str
    handlers: tuple[AnnotationHandler, ...] = ()
    hide_output: bool = False


@dc.dataclass(slots=True, frozen=True)
class CodeGroup:
    """Ordered tabs plus the group-level options and storage key."""

    storage: str | None
    options: CodeOptions
    tabs: tuple[TabDescriptor, ...]

    def __post_init__(self) -> None:
        if not self.tabs:
            raise NoCodeBlocksError

    @property
    def is_single(self) -> bool:
        """Return whether the group renders as a plain block."""
        return len(self.tabs) == 1

    @property
    def titles(self) -> list[str]:
        """Tab titles in display order."""
        return [tab.title for tab in self.tabs]

    def find_tab(self, title: str | None) -> TabDescriptor:
        """Return the first tab titled ``title``, else the first tab.

        Titles are not unique, so this is a linear scan where the first match
        wins.
        """
        for tab in self.tabs:
            if tab.title == title:
                return tab
        return self.tabs[0]


__all__ = [
    "OPTION_NAMES",
    "Annotation",
    "CodeGroup",
    "CodeLine",
    "CodeOptions",
    "HighlightedCode",
    "IconRef",
    "ParsedMeta",
    "RawCodeBlock",
    "TabDescriptor",
]
