"""Unit tests for declaration validation and dispatch."""

from __future__ import annotations

import asyncio

import pytest

from codetabs.builder import GroupBuilder
from codetabs.components import (
    build_chunk,
    build_code_block,
    build_code_tabs,
    build_terminal_picker,
    validate_declaration,
)
from codetabs.diagnostics import CollectingDiagnostics
from codetabs.document import STANDALONE_COMPONENT, CodeChunk
from codetabs.errors import DeclarationError, NoCodeBlocksError
from codetabs.models import HighlightedCode, RawCodeBlock


class PlainHighlighter:
    async def highlight(self, language: str, source: str) -> HighlightedCode:
        return HighlightedCode.plain(language, source)


@pytest.fixture
def builder() -> GroupBuilder:
    """Return a builder that skips Pygments."""
    return GroupBuilder(PlainHighlighter())


@pytest.mark.parametrize("component", ["CodeTabs", "TerminalPicker"])
def test_empty_declaration_names_the_component(component: str) -> None:
    """A wrapper without ``!!`` blocks should fail with its own name."""
    with pytest.raises(NoCodeBlocksError) as excinfo:
        validate_declaration(component, {"code": []})
    assert str(excinfo.value) == (
        f"<{component}> should contain at least one codeblock marked with `!!`"
    )


def test_bad_attribute_types_raise_declaration_error() -> None:
    """Structural problems other than emptiness should be reported as such."""
    with pytest.raises(DeclarationError) as excinfo:
        validate_declaration(
            "CodeTabs",
            {"code": [RawCodeBlock("js", "a", "1")], "storage": 3},
        )
    assert excinfo.value.component == "CodeTabs"


def test_validation_accepts_plain_mappings() -> None:
    """Blocks given as mappings should be converted to records."""
    declaration = validate_declaration(
        "CodeTabs",
        {"code": [{"language_tag": "js", "metadata": "a", "source_text": "1"}]},
    )
    assert declaration.code == [RawCodeBlock("js", "a", "1")]
    assert declaration.flags is None


def test_code_tabs_apply_flags_and_storage(builder: GroupBuilder) -> None:
    """``<CodeTabs>`` attributes should flow into the group."""
    group = asyncio.run(
        build_code_tabs(
            {
                "code": [RawCodeBlock("js", "a.js", "1"), RawCodeBlock("py", "a.py", "1")],
                "flags": "n",
                "storage": "lang",
            },
            builder=builder,
        )
    )
    assert group.storage == "lang"
    assert all(tab.options.line_numbers for tab in group.tabs)


def test_terminal_picker_hides_output_with_o_flag(builder: GroupBuilder) -> None:
    """``-o`` on a picker should hide output in every tab."""
    group = asyncio.run(
        build_terminal_picker(
            {
                "code": [
                    RawCodeBlock("terminal", "bash", "$ ls\nfile"),
                    RawCodeBlock("terminal", "zsh", "$ ls\nfile"),
                ],
                "flags": "-o",
            },
            builder=builder,
        )
    )
    assert all(tab.hide_output for tab in group.tabs)


def test_terminal_block_reads_o_from_metadata(builder: GroupBuilder) -> None:
    """A standalone terminal block should honour ``-o`` in its metadata."""
    group = asyncio.run(
        build_code_block(RawCodeBlock("terminal", "-o", "$ ls"), builder=builder)
    )
    assert group.tabs[0].hide_output


def test_terminal_o_flag_is_not_reported_as_unknown() -> None:
    """Consuming ``-o`` on a terminal block should not emit a flag warning."""
    sink = CollectingDiagnostics()
    builder = GroupBuilder(PlainHighlighter(), diagnostics=sink)
    group = asyncio.run(
        build_code_block(RawCodeBlock("terminal", "-o", "$ ls\nfile"), builder=builder)
    )
    assert sink.warnings == [], sink.warnings
    assert group.tabs[0].hide_output
    assert group.tabs[0].title == ""


def test_package_install_block_expands(builder: GroupBuilder) -> None:
    """A standalone package-install block should become a tool group."""
    group = asyncio.run(
        build_code_block(
            RawCodeBlock("package-install", "python -no-venv", "httpx"),
            builder=builder,
        )
    )
    assert group.titles == ["uv", "poetry", "pip"]
    assert group.storage == "package-install"


def test_standalone_chunk_uses_default_flags(builder: GroupBuilder) -> None:
    """Standalone blocks should pick up the configured default flags."""
    chunk = CodeChunk(STANDALONE_COMPONENT, {"code": [RawCodeBlock("js", "", "x")]})
    group = asyncio.run(build_chunk(chunk, default_flags="c", builder=builder))
    assert group.tabs[0].options.copy_button is True


def test_unknown_component_is_rejected(builder: GroupBuilder) -> None:
    """Only known components should be dispatched."""
    chunk = CodeChunk("Mystery", {"code": [RawCodeBlock("js", "", "x")]})
    with pytest.raises(DeclarationError):
        asyncio.run(build_chunk(chunk, builder=builder))
