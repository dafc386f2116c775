"""Render finished code groups to HTML with Jinja2.

The renderer owns the presentation decisions the builder leaves open:

* which tab is active (the first one, or the title remembered in a
  :class:`~codetabs.store.TabStore` under the group's storage key);
* whether a copy button is shown (``copy_button`` option or a filename bar);
* whether a one-tab group renders as a plain block or a tab strip;
* the "show more lines" toggle for long single blocks.

Example
-------
>>> from codetabs.builder import build_group_sync
>>> from codetabs.models import RawCodeBlock
>>> from codetabs.renderer import CodeGroupRenderer
>>> group = build_group_sync([RawCodeBlock("python", "app.py", "print(1)")])
>>> html = CodeGroupRenderer().render(group)
>>> "codetabs-single" in html
True
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from .annotations import apply_handlers
from .store import MemoryTabStore, TabStore

if typ.TYPE_CHECKING:
    from .models import CodeGroup, CodeLine, TabDescriptor

COLLAPSE_THRESHOLD = 10
PROMPT_PREFIX = "$"
DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"


class CollapseState(enum.Enum):
    """State of the "show more lines" toggle."""

    COLLAPSED = "collapsed"
    EXPANDED = "expanded"


@dc.dataclass(slots=True, frozen=True)
class CollapseToggle:
    """Toggle shown under a block longer than ``threshold`` lines."""

    line_count: int
    threshold: int = COLLAPSE_THRESHOLD
    state: CollapseState = CollapseState.COLLAPSED

    @classmethod
    def for_lines(
        cls, line_count: int, threshold: int = COLLAPSE_THRESHOLD
    ) -> CollapseToggle | None:
        """Return a collapsed toggle, or ``None`` when the block is short."""
        if line_count <= threshold:
            return None
        return cls(line_count=line_count, threshold=threshold)

    @property
    def hidden_count(self) -> int:
        """Lines hidden while collapsed."""
        return self.line_count - self.threshold

    @property
    def collapsed(self) -> bool:
        """Whether the extra lines are currently hidden."""
        return self.state is CollapseState.COLLAPSED

    @property
    def label(self) -> str:
        """Button text for the current state."""
        if self.collapsed:
            return f"Show {self.hidden_count} more lines"
        return "Show less"

    def toggle(self) -> CollapseToggle:
        """Return the toggle in the opposite state."""
        state = (
            CollapseState.EXPANDED if self.collapsed else CollapseState.COLLAPSED
        )
        return dc.replace(self, state=state)

    def shows(self, position: int) -> bool:
        """Return whether the visible line at 0-based ``position`` is shown."""
        return not self.collapsed or position < self.threshold


@dc.dataclass(slots=True)
class TabView:
    """Template context for one tab."""

    tab: TabDescriptor
    active: bool
    lines: list[CodeLine]
    collapse: CollapseToggle | None = None

    @property
    def copy_button(self) -> bool:
        """Whether a copy affordance is rendered for this tab."""
        return bool(self.tab.options.copy_button or self.tab.filename)

    @property
    def rows(self) -> list[tuple[CodeLine, bool, bool]]:
        """Return ``(line, shown, collapsible)`` for every line.

        ``collapsible`` marks visible lines past the collapse threshold.
        """
        rows: list[tuple[CodeLine, bool, bool]] = []
        position = 0
        for line in self.lines:
            if line.hidden:
                rows.append((line, False, False))
                continue
            if self.collapse is None:
                rows.append((line, True, False))
            else:
                rows.append(
                    (
                        line,
                        self.collapse.shows(position),
                        position >= self.collapse.threshold,
                    )
                )
            position += 1
        return rows


def _style_attribute(style: dict[str, str]) -> str:
    declarations = [
        f"--codetabs-{key}: {value}" for key, value in sorted(style.items()) if value
    ]
    return "; ".join(declarations)


class CodeGroupRenderer:
    """Render :class:`~codetabs.models.CodeGroup` objects to HTML fragments."""

    def __init__(
        self,
        *,
        store: TabStore | None = None,
        collapse_threshold: int = COLLAPSE_THRESHOLD,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the renderer and its Jinja environment.

        Parameters
        ----------
        store : TabStore, optional
            Remembers selected tabs per storage key; defaults to an in-memory
            store.
        collapse_threshold : int, optional
            Single blocks with more visible lines than this get a collapse
            toggle.
        templates_dir : Path, optional
            Directory holding ``code_group.jinja``; defaults to the package
            templates.
        """
        self.store = store if store is not None else MemoryTabStore()
        self.collapse_threshold = collapse_threshold
        self.templates_dir = templates_dir or DEFAULT_TEMPLATES_DIR
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("code_group.jinja")

    def active_tab(self, group: CodeGroup) -> TabDescriptor:
        """Return the tab to show first.

        Single-tab groups never consult the store.
        """
        if group.is_single or not group.storage:
            return group.tabs[0]
        return group.find_tab(self.store.get(group.storage))

    def select_tab(self, group: CodeGroup, title: str) -> TabDescriptor:
        """Make the first tab titled ``title`` active and remember it."""
        tab = group.find_tab(title)
        if group.storage and not group.is_single:
            self.store.set(group.storage, tab.title)
        return tab

    def render_lines(self, tab: TabDescriptor) -> list[CodeLine]:
        """Run the tab's annotation handlers and apply terminal output hiding."""
        lines = apply_handlers(tab.handlers, tab.highlighted)
        if tab.hide_output:
            code_lines = tab.highlighted.code.split("\n")
            for line, text in zip(lines, code_lines, strict=False):
                if not text.lstrip().startswith(PROMPT_PREFIX):
                    line.hidden = True
        return lines

    def _collapse_for(
        self, group: CodeGroup, lines: list[CodeLine]
    ) -> CollapseToggle | None:
        if not group.is_single:
            return None
        visible = sum(1 for line in lines if not line.hidden)
        return CollapseToggle.for_lines(visible, self.collapse_threshold)

    def tab_views(self, group: CodeGroup) -> list[TabView]:
        """Return template views for every tab, in group order."""
        active = self.active_tab(group)
        views: list[TabView] = []
        for tab in group.tabs:
            lines = self.render_lines(tab)
            views.append(
                TabView(
                    tab=tab,
                    active=tab is active,
                    lines=lines,
                    collapse=self._collapse_for(group, lines),
                )
            )
        return views

    def render(self, group: CodeGroup) -> str:
        """Render ``group`` to an HTML fragment."""
        views = self.tab_views(group)
        active = next(view for view in views if view.active)
        return self.template.render(
            group=group,
            tabs=views,
            style=_style_attribute(active.tab.highlighted.style),
        )


__all__ = [
    "COLLAPSE_THRESHOLD",
    "CodeGroupRenderer",
    "CollapseState",
    "CollapseToggle",
    "TabView",
]
