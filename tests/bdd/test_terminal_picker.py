"""Behaviour tests for ``<TerminalPicker>`` declarations."""

from __future__ import annotations

import asyncio
import typing as typ
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from codetabs.builder import GroupBuilder
from codetabs.components import build_terminal_picker
from codetabs.highlight import PygmentsHighlighter
from codetabs.models import RawCodeBlock
from codetabs.renderer import CodeGroupRenderer
from codetabs.store import MemoryTabStore

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "terminal_picker.feature"
)
scenarios(FEATURE_FILE)

TRANSCRIPT = "$ echo hi\nhi\n$ echo bye\nbye"


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {"store": MemoryTabStore()}


def _props(flags: str | None) -> dict[str, object]:
    return {
        "code": [
            RawCodeBlock("terminal", "bash", TRANSCRIPT),
            RawCodeBlock("terminal", "zsh", TRANSCRIPT),
        ],
        "flags": flags,
        "storage": "shell",
    }


@given(parsers.parse('a terminal picker with flags "{flags}"'))
def given_picker_with_flags(scenario_state: dict[str, object], flags: str) -> None:
    """Declare a picker carrying ``flags``."""
    scenario_state["props"] = _props(flags)


@given("a terminal picker without flags")
def given_picker(scenario_state: dict[str, object]) -> None:
    """Declare a picker without flags."""
    scenario_state["props"] = _props(None)


@given(parsers.parse('the reader previously chose "{title}"'))
def given_previous_choice(scenario_state: dict[str, object], title: str) -> None:
    """Seed the tab store as if the reader had picked ``title`` before."""
    store = typ.cast("MemoryTabStore", scenario_state["store"])
    store.set("shell", title)


@when("I render the picker")
def when_render(scenario_state: dict[str, object]) -> None:
    """Build and render the picker."""
    props = typ.cast("dict[str, object]", scenario_state["props"])
    group = asyncio.run(
        build_terminal_picker(props, builder=GroupBuilder(PygmentsHighlighter()))
    )
    store = typ.cast("MemoryTabStore", scenario_state["store"])
    html = CodeGroupRenderer(store=store).render(group)
    scenario_state["soup"] = BeautifulSoup(html, "html.parser")


def _visible_lines(panel: typ.Any) -> list[str]:
    return [
        line.select_one(".line-content").get_text()
        for line in panel.select(".line")
        if not line.has_attr("hidden")
    ]


@then(parsers.parse('the visible lines in every panel start with "{prefix}"'))
def then_only_prompts(scenario_state: dict[str, object], prefix: str) -> None:
    """Output lines should be hidden, prompts kept."""
    soup = typ.cast("BeautifulSoup", scenario_state["soup"])
    for panel in soup.select(".codetabs-panel"):
        lines = _visible_lines(panel)
        assert lines == ["$ echo hi", "$ echo bye"]
        assert all(line.startswith(prefix) for line in lines)


@then(parsers.parse("the first panel shows {count:d} lines"))
def then_line_count(scenario_state: dict[str, object], count: int) -> None:
    """Without ``-o`` every line should be visible."""
    soup = typ.cast("BeautifulSoup", scenario_state["soup"])
    assert len(_visible_lines(soup.select(".codetabs-panel")[0])) == count


@then(parsers.parse('the active tab is "{title}"'))
def then_active_tab(scenario_state: dict[str, object], title: str) -> None:
    """The remembered title should be selected."""
    soup = typ.cast("BeautifulSoup", scenario_state["soup"])
    selected = soup.select_one('.codetabs-tab[aria-selected="true"]')
    assert selected is not None
    assert selected["data-title"] == title
