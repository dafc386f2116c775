r"""Annotation comments and the handler pipeline that renders them.

Code blocks can carry annotation comments such as ``// !mark`` or
``# !diff +``. :func:`extract_annotations` lifts them out of the source before
highlighting; the handlers built by :func:`build_handlers` then decorate the
highlighted lines. Handlers run in a fixed order and each one reads the output
of the previous ones, so the order returned by :func:`build_handlers` is part
of the contract.

Annotation syntax
-----------------
``<comment> !name(range)[/query/] value`` where:

* ``range`` is ``(n)`` for ``n`` lines or ``(a:b)`` for lines ``a`` to ``b``,
  counted from the line after the comment. Without a range the annotation
  targets the next line.
* ``[/query/]`` is an optional regular expression; inline handlers wrap its
  first match on each targeted line.

Example
-------
>>> from codetabs.annotations import extract_annotations
>>> code, notes = extract_annotations("# !mark\nprint('hi')")
>>> code
"print('hi')"
>>> notes[0].name, notes[0].from_line
('mark', 1)
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import re
from html import escape, unescape

from .models import Annotation, CodeLine, CodeOptions, HighlightedCode

ANNOTATION_PATTERN = re.compile(
    r"^\s*(?://|#|--|;+|%|/\*|<!--)\s*!(?P<name>[A-Za-z][\w-]*)"
    r"(?:\((?P<range>\d+(?::\d+)?)\))?"
    r"(?:\[/(?P<query>(?:[^/\\]|\\.)*)/\])?"
    r"(?P<value>.*?)\s*(?:\*/|-->)?\s*$"
)
_TAG_SPLIT = re.compile(r"(<[^>]+>)")

Transform = cabc.Callable[[list[CodeLine], cabc.Sequence[Annotation]], list[CodeLine]]


@dc.dataclass(slots=True, frozen=True)
class AnnotationHandler:
    """A named transform over highlighted lines."""

    name: str
    transform: Transform = dc.field(repr=False, compare=False)

    def __call__(
        self, lines: list[CodeLine], annotations: cabc.Sequence[Annotation]
    ) -> list[CodeLine]:
        """Apply the handler to ``lines``."""
        return self.transform(lines, annotations)


def split_code_lines(source: str) -> list[str]:
    """Split ``source`` into lines, ignoring one trailing newline."""
    lines = source.replace("\r\n", "\n").split("\n")
    if len(lines) > 1 and lines[-1] == "":
        lines.pop()
    return lines


def _parse_range(raw: str | None, start: int) -> tuple[int, int]:
    if not raw:
        return start, start
    first, _, last = raw.partition(":")
    if not last:
        return start, start + max(int(first), 1) - 1
    low, high = sorted((int(first), int(last)))
    return start + max(low, 1) - 1, start + max(high, 1) - 1


def extract_annotations(source: str) -> tuple[str, tuple[Annotation, ...]]:
    """Remove annotation comments from ``source``.

    Parameters
    ----------
    source : str
        Raw code block body.

    Returns
    -------
    tuple[str, tuple[Annotation, ...]]
        The code without annotation lines, and the annotations with line
        numbers relative to that cleaned code.
    """
    kept: list[str] = []
    found: list[Annotation] = []
    for line in split_code_lines(source):
        match = ANNOTATION_PATTERN.match(line)
        if match is None:
            kept.append(line)
            continue
        from_line, to_line = _parse_range(match.group("range"), len(kept) + 1)
        found.append(
            Annotation(
                name=match.group("name"),
                query=match.group("query"),
                from_line=from_line,
                to_line=to_line,
                value=match.group("value").strip(),
            )
        )
    return "\n".join(kept), tuple(found)


def _compile_query(query: str) -> re.Pattern[str]:
    try:
        return re.compile(query)
    except re.error:
        return re.compile(re.escape(query))


def wrap_query(html: str, query: str, open_tag: str, close_tag: str) -> str:
    """Wrap the first match of ``query`` found inside one text run of ``html``.

    Matches that would straddle a tag boundary are left alone.
    """
    pattern = _compile_query(query)
    pieces = _TAG_SPLIT.split(html)
    for index, piece in enumerate(pieces):
        if not piece or piece.startswith("<"):
            continue
        text = unescape(piece)
        match = pattern.search(text)
        if match is None or not match.group(0):
            continue
        pieces[index] = (
            escape(text[: match.start()], quote=False)
            + open_tag
            + escape(match.group(0), quote=False)
            + close_tag
            + escape(text[match.end() :], quote=False)
        )
        return "".join(pieces)
    return html


def _named(
    annotations: cabc.Sequence[Annotation], name: str
) -> list[Annotation]:
    return [annotation for annotation in annotations if annotation.name == name]


def _targets(
    lines: list[CodeLine], annotation: Annotation
) -> cabc.Iterator[CodeLine]:
    return (line for line in lines if annotation.covers(line.number))


def _add_class(line: CodeLine, name: str) -> None:
    if name not in line.classes:
        line.classes.append(name)


def _inline_handler(
    name: str,
    make_tags: cabc.Callable[[Annotation], tuple[str, str]],
    line_class: str,
) -> Transform:
    """Build a transform that wraps queries or tags whole lines."""

    def transform(
        lines: list[CodeLine], annotations: cabc.Sequence[Annotation]
    ) -> list[CodeLine]:
        for annotation in _named(annotations, name):
            for line in _targets(lines, annotation):
                if annotation.query:
                    open_tag, close_tag = make_tags(annotation)
                    line.html = wrap_query(
                        line.html, annotation.query, open_tag, close_tag
                    )
                else:
                    _add_class(line, line_class)
                    if annotation.value:
                        line.attributes[f"data-{name}"] = annotation.value
        return lines

    return transform


def _mark_tags(annotation: Annotation) -> tuple[str, str]:
    color = escape(annotation.value, quote=True)
    attrs = f' data-color="{color}"' if color else ""
    return f'<mark class="mark"{attrs}>', "</mark>"


def _tooltip_tags(annotation: Annotation) -> tuple[str, str]:
    name = escape(annotation.value, quote=True)
    return f'<span class="tooltip" data-tooltip="{name}">', "</span>"


def _fold_tags(_annotation: Annotation) -> tuple[str, str]:
    return '<span class="fold" data-folded="true">', "</span>"


def _link_tags(annotation: Annotation) -> tuple[str, str]:
    href = escape(annotation.value, quote=True)
    return f'<a class="link" href="{href}">', "</a>"


def _token_transitions(
    lines: list[CodeLine], _annotations: cabc.Sequence[Annotation]
) -> list[CodeLine]:
    for line in lines:
        line.attributes["data-token-transitions"] = "true"
    return lines


def _line_numbers(
    lines: list[CodeLine], _annotations: cabc.Sequence[Annotation]
) -> list[CodeLine]:
    width = len(str(len(lines))) + 1
    for line in lines:
        line.gutter = str(line.number).rjust(width)
    return lines


def _diff(
    lines: list[CodeLine], annotations: cabc.Sequence[Annotation]
) -> list[CodeLine]:
    for annotation in _named(annotations, "diff"):
        marker = annotation.value[:1]
        if marker not in {"+", "-"}:
            continue
        css_class = "diff-add" if marker == "+" else "diff-remove"
        for line in _targets(lines, annotation):
            _add_class(line, css_class)
            line.gutter = f"{line.gutter}{marker}"
    return lines


def _collapse(
    lines: list[CodeLine], annotations: cabc.Sequence[Annotation]
) -> list[CodeLine]:
    for index, annotation in enumerate(_named(annotations, "collapse")):
        state = "collapsed" if annotation.value == "collapsed" else "expanded"
        for line in _targets(lines, annotation):
            line.attributes["data-collapse"] = state
            line.attributes["data-collapse-id"] = str(index)
    return lines


def _collapse_trigger(
    lines: list[CodeLine], _annotations: cabc.Sequence[Annotation]
) -> list[CodeLine]:
    seen: set[str] = set()
    for line in lines:
        region = line.attributes.get("data-collapse-id")
        if region is None or region in seen:
            continue
        seen.add(region)
        _add_class(line, "collapse-trigger")
    return lines


def _collapse_content(
    lines: list[CodeLine], _annotations: cabc.Sequence[Annotation]
) -> list[CodeLine]:
    for line in lines:
        if "data-collapse-id" not in line.attributes:
            continue
        if "collapse-trigger" in line.classes:
            continue
        _add_class(line, "collapse-content")
        if line.attributes["data-collapse"] == "collapsed":
            line.hidden = True
    return lines


def _word_wrap(
    lines: list[CodeLine], _annotations: cabc.Sequence[Annotation]
) -> list[CodeLine]:
    for line in lines:
        _add_class(line, "word-wrap")
    return lines


def _callout(
    lines: list[CodeLine], annotations: cabc.Sequence[Annotation]
) -> list[CodeLine]:
    for annotation in _named(annotations, "callout"):
        targets = list(_targets(lines, annotation))
        if not targets:
            continue
        text = escape(annotation.value, quote=False)
        targets[-1].after.append(f'<div class="callout">{text}</div>')
        if annotation.query:
            for line in targets:
                line.html = wrap_query(
                    line.html, annotation.query, '<span class="callout-anchor">', "</span>"
                )
    return lines


def _hover(
    lines: list[CodeLine], annotations: cabc.Sequence[Annotation]
) -> list[CodeLine]:
    for annotation in _named(annotations, "hover"):
        for line in _targets(lines, annotation):
            line.attributes["data-hover"] = annotation.value
    return lines


mark = AnnotationHandler("mark", _inline_handler("mark", _mark_tags, "mark"))
tooltip = AnnotationHandler(
    "tooltip", _inline_handler("tooltip", _tooltip_tags, "tooltip")
)
fold = AnnotationHandler("fold", _inline_handler("fold", _fold_tags, "fold"))
link = AnnotationHandler("link", _inline_handler("link", _link_tags, "link"))
token_transitions = AnnotationHandler("token-transitions", _token_transitions)
line_numbers = AnnotationHandler("line-numbers", _line_numbers)
diff = AnnotationHandler("diff", _diff)
collapse = (
    AnnotationHandler("collapse", _collapse),
    AnnotationHandler("collapse-trigger", _collapse_trigger),
    AnnotationHandler("collapse-content", _collapse_content),
)
word_wrap = AnnotationHandler("word-wrap", _word_wrap)
callout = AnnotationHandler("callout", _callout)
hover = AnnotationHandler("hover", _hover)


def build_handlers(options: CodeOptions) -> tuple[AnnotationHandler, ...]:
    """Return the annotation pipeline for ``options``.

    The order is fixed: semantic regions (``mark``, ``tooltip``, ``fold``,
    ``link``) first, then the optional ``token-transitions`` and
    ``line-numbers``, then ``diff`` and the collapse handlers, then the
    optional ``word-wrap``, and finally ``callout`` and ``hover``.
    """
    optional: list[AnnotationHandler | None] = [
        mark,
        tooltip,
        fold,
        link,
        token_transitions if options.animate else None,
        line_numbers if options.line_numbers else None,
        diff,
        *collapse,
        word_wrap if options.word_wrap else None,
        callout,
        hover,
    ]
    return tuple(handler for handler in optional if handler is not None)


def apply_handlers(
    handlers: cabc.Iterable[AnnotationHandler], highlighted: HighlightedCode
) -> list[CodeLine]:
    """Run ``handlers`` in order over fresh lines built from ``highlighted``."""
    lines = [
        CodeLine(number=index, html=html)
        for index, html in enumerate(highlighted.lines, start=1)
    ]
    for handler in handlers:
        lines = handler(lines, highlighted.annotations)
    return lines


def handler_names(handlers: cabc.Iterable[AnnotationHandler]) -> list[str]:
    """Return the names of ``handlers`` in order."""
    return [handler.name for handler in handlers]


__all__ = [
    "ANNOTATION_PATTERN",
    "AnnotationHandler",
    "apply_handlers",
    "build_handlers",
    "callout",
    "collapse",
    "diff",
    "extract_annotations",
    "fold",
    "handler_names",
    "hover",
    "line_numbers",
    "link",
    "mark",
    "split_code_lines",
    "token_transitions",
    "tooltip",
    "word_wrap",
    "wrap_query",
]
