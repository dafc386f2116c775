"""Unit tests for concurrent group assembly.

The builder fans out one highlight call per block and must keep the input
order regardless of completion order. Fake highlighters with controlled delays
make the completion order deterministic.
"""

from __future__ import annotations

import asyncio

import pytest

from codetabs.builder import GroupBuilder, build_group_sync
from codetabs.diagnostics import CollectingDiagnostics
from codetabs.errors import HighlightError, NoCodeBlocksError
from codetabs.models import CodeGroup, CodeOptions, HighlightedCode, RawCodeBlock


class DelayedHighlighter:
    """Finish each block after a per-source delay and record completion order."""

    def __init__(self, delays: dict[str, float]) -> None:
        self.delays = delays
        self.completed: list[str] = []

    async def highlight(self, language: str, source: str) -> HighlightedCode:
        await asyncio.sleep(self.delays[source])
        self.completed.append(source)
        return HighlightedCode.plain(language, source)


class FailingHighlighter:
    """Raise for one source, highlight the rest as plain text."""

    def __init__(self, failing_source: str) -> None:
        self.failing_source = failing_source

    async def highlight(self, language: str, source: str) -> HighlightedCode:
        if source == self.failing_source:
            msg = "lexer exploded"
            raise RuntimeError(msg)
        return HighlightedCode.plain(language, source)


def _blocks() -> list[RawCodeBlock]:
    return [
        RawCodeBlock("text", "A", "A"),
        RawCodeBlock("text", "B", "B"),
        RawCodeBlock("text", "C", "C"),
    ]


def test_tabs_follow_input_order_not_completion_order() -> None:
    """Blocks finishing C, A, B should still produce tabs A, B, C."""
    highlighter = DelayedHighlighter({"A": 0.02, "B": 0.04, "C": 0.0})
    builder = GroupBuilder(highlighter, diagnostics=CollectingDiagnostics())
    group = asyncio.run(builder.build(_blocks()))
    assert highlighter.completed == ["C", "A", "B"]
    assert group.titles == ["A", "B", "C"]


def test_empty_input_raises() -> None:
    """Building from no blocks should fail with the declaration message."""
    with pytest.raises(NoCodeBlocksError, match="should contain at least one codeblock"):
        build_group_sync([])


def test_empty_group_record_cannot_exist() -> None:
    """A CodeGroup with no tabs should be rejected at construction."""
    with pytest.raises(NoCodeBlocksError):
        CodeGroup(storage=None, options=CodeOptions(), tabs=())


def test_highlight_failure_fails_the_group() -> None:
    """By default one failing tab should fail the whole group."""
    builder = GroupBuilder(FailingHighlighter("B"))
    with pytest.raises(HighlightError) as excinfo:
        asyncio.run(builder.build(_blocks()))
    assert excinfo.value.index == 1
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_isolated_failure_renders_plain_tab() -> None:
    """With isolation enabled the failing tab should fall back to plain text."""
    builder = GroupBuilder(FailingHighlighter("B"), isolate_failures=True)
    group = asyncio.run(builder.build(_blocks()))
    assert group.titles == ["A", "B", "C"]
    assert group.tabs[1].highlighted.lines == ("B",)


def test_group_flags_merge_with_tab_flags() -> None:
    """Tab flags should be layered over group flags."""
    sink = CollectingDiagnostics()
    group = build_group_sync(
        [
            RawCodeBlock("python", "main.py -n", "print(1)"),
            RawCodeBlock("javascript", "main.js", "console.log(1)"),
        ],
        flags="c",
        storage="lang",
        diagnostics=sink,
    )
    first, second = group.tabs
    assert first.options.as_dict() == {"copy_button": True, "line_numbers": True}
    assert second.options.as_dict() == {"copy_button": True}
    assert group.storage == "lang"
    assert sink.warnings == []


def test_tabs_carry_filename_icon_and_source() -> None:
    """Each tab should expose its filename, icon and original source."""
    group = build_group_sync(
        [RawCodeBlock("rust", "Main -f src/main.rs", "fn main() {}")]
    )
    tab = group.tabs[0]
    assert tab.title == "Main"
    assert tab.filename == "src/main.rs"
    assert tab.source_text == "fn main() {}"
    assert tab.icon.name == "rust"


def test_unknown_tab_flags_reach_the_sink() -> None:
    """Unknown flags in tab metadata should be reported, not raised."""
    sink = CollectingDiagnostics()
    build_group_sync([RawCodeBlock("text", "t -qz", "x")], diagnostics=sink)
    assert sink.warnings == ["Unknown flag: q", "Unknown flag: z"]
