r"""Split a Markdown document into prose and code group declarations.

Fenced blocks become :class:`~codetabs.models.RawCodeBlock` records. Fences can
be grouped into tabs by wrapping them in a ``<CodeTabs>`` or
``<TerminalPicker>`` element; inside a wrapper only fences whose metadata
starts with ``!!`` belong to the group::

    <CodeTabs flags="c" storage="lang">

    ```python !! main.py
    print("hi")
    ```

    ```javascript !! main.js
    console.log("hi")
    ```

    </CodeTabs>

Every fence outside a wrapper is a standalone declaration.

Example
-------
>>> from codetabs.document import extract_fenced_blocks
>>> blocks = extract_fenced_blocks("```python app.py -n\nprint(1)\n```\n")
>>> blocks[0].language_tag, blocks[0].metadata, blocks[0].source_text
('python', 'app.py -n', 'print(1)')
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import re
import typing as typ

from .formatting import format_code
from .models import RawCodeBlock

FENCE_PATTERN = re.compile(
    r"^(?P<indent>[ ]{0,3})(?P<fence>`{3,}|~{3,})(?P<info>[^\n]*)\n"
    r"(?P<body>.*?)"
    r"^[ ]{0,3}(?P=fence)[`~]*[ \t]*$\n?",
    re.MULTILINE | re.DOTALL,
)
WRAPPER_PATTERN = re.compile(
    r"<(?P<component>CodeTabs|TerminalPicker)(?P<attrs>[^>]*)>"
    r"(?P<body>.*?)</(?P=component)>",
    re.DOTALL,
)
ATTRIBUTE_PATTERN = re.compile(r"""(?P<name>\w+)\s*=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)')""")
GROUP_MARKER = "!!"
STANDALONE_COMPONENT = "DocsKitCode"


@dc.dataclass(slots=True, frozen=True)
class ProseChunk:
    """Markdown text between code declarations."""

    markdown: str


@dc.dataclass(slots=True, frozen=True)
class CodeChunk:
    """A code declaration: the component name and its raw props.

    ``props`` mirrors what a documentation author wrote: ``code`` holds the
    blocks, ``flags`` and ``storage`` come from wrapper attributes.
    """

    component: str
    props: dict[str, typ.Any]


DocumentPart = ProseChunk | CodeChunk


def _split_info(info: str) -> tuple[str, str]:
    """Split a fence info string into language tag and metadata."""
    stripped = info.strip()
    if not stripped:
        return "", ""
    language, _, metadata = stripped.partition(" ")
    # ``rust,no_run`` style attributes are not part of the language name.
    return language.split(",", 1)[0], metadata.strip()


def _dedent(body: str, indent: int) -> str:
    if not indent:
        return body
    prefix = re.compile(rf"^[ ]{{0,{indent}}}", re.MULTILINE)
    return prefix.sub("", body)


def _block_from_match(match: re.Match[str], *, format_blocks: bool) -> RawCodeBlock:
    language, metadata = _split_info(match.group("info"))
    body = _dedent(match.group("body"), len(match.group("indent")))
    if body.endswith("\n"):
        body = body[:-1]
    if format_blocks:
        body = format_code(body, language)
    return RawCodeBlock(language_tag=language, metadata=metadata, source_text=body)


def extract_fenced_blocks(
    markdown_text: str, *, format_blocks: bool = False
) -> list[RawCodeBlock]:
    """Return every fenced block in ``markdown_text`` in document order."""
    return [
        _block_from_match(match, format_blocks=format_blocks)
        for match in FENCE_PATTERN.finditer(markdown_text)
    ]


def _parse_attributes(raw: str) -> dict[str, str]:
    return {
        match.group("name"): match.group("dq")
        if match.group("dq") is not None
        else match.group("sq")
        for match in ATTRIBUTE_PATTERN.finditer(raw)
    }


def _group_blocks(body: str, *, format_blocks: bool) -> list[RawCodeBlock]:
    """Return the ``!!`` marked blocks of a wrapper body, marker removed."""
    grouped: list[RawCodeBlock] = []
    for block in extract_fenced_blocks(body, format_blocks=format_blocks):
        if not block.metadata.startswith(GROUP_MARKER):
            continue
        metadata = block.metadata[len(GROUP_MARKER) :].strip()
        grouped.append(dc.replace(block, metadata=metadata))
    return grouped


def _prose_and_fences(
    text: str, *, format_blocks: bool
) -> cabc.Iterator[DocumentPart]:
    cursor = 0
    for match in FENCE_PATTERN.finditer(text):
        if match.start() > cursor:
            yield ProseChunk(text[cursor : match.start()])
        block = _block_from_match(match, format_blocks=format_blocks)
        yield CodeChunk(STANDALONE_COMPONENT, {"code": [block]})
        cursor = match.end()
    if cursor < len(text):
        yield ProseChunk(text[cursor:])


def _top_level_wrappers(text: str) -> cabc.Iterator[re.Match[str]]:
    """Yield wrapper matches that do not start inside a fenced block.

    A ``<CodeTabs>`` written inside a fence is example code, not a declaration.
    """
    fences = [match.span() for match in FENCE_PATTERN.finditer(text)]
    position = 0
    while (wrapper := WRAPPER_PATTERN.search(text, position)) is not None:
        enclosing = next(
            (end for start, end in fences if start <= wrapper.start() < end), None
        )
        if enclosing is None:
            yield wrapper
            position = wrapper.end()
        else:
            position = enclosing


def parse_document(
    markdown_text: str, *, format_blocks: bool = True
) -> list[DocumentPart]:
    """Split ``markdown_text`` into prose chunks and code chunks.

    Parameters
    ----------
    markdown_text : str
        Document source.
    format_blocks : bool, optional
        Apply :func:`~codetabs.formatting.format_code` to every block.

    Returns
    -------
    list[DocumentPart]
        Chunks in document order. Whitespace-only prose is dropped. Wrapper
        chunks carry their attributes in ``props`` alongside ``code``; they
        are not validated here.
    """
    parts: list[DocumentPart] = []
    cursor = 0
    for wrapper in _top_level_wrappers(markdown_text):
        parts.extend(
            _prose_and_fences(
                markdown_text[cursor : wrapper.start()], format_blocks=format_blocks
            )
        )
        props: dict[str, typ.Any] = _parse_attributes(wrapper.group("attrs"))
        props["code"] = _group_blocks(
            wrapper.group("body"), format_blocks=format_blocks
        )
        parts.append(CodeChunk(wrapper.group("component"), props))
        cursor = wrapper.end()
    parts.extend(
        _prose_and_fences(markdown_text[cursor:], format_blocks=format_blocks)
    )
    return [
        part
        for part in parts
        if not (isinstance(part, ProseChunk) and not part.markdown.strip())
    ]


__all__ = [
    "FENCE_PATTERN",
    "STANDALONE_COMPONENT",
    "WRAPPER_PATTERN",
    "CodeChunk",
    "DocumentPart",
    "ProseChunk",
    "extract_fenced_blocks",
    "parse_document",
]
