"""Render fenced code blocks as tabbed, highlighted code groups.

The package turns documentation code declarations (standalone fences,
``<CodeTabs>`` and ``<TerminalPicker>`` wrappers, ``package-install`` blocks)
into :class:`~codetabs.models.CodeGroup` records and renders them to HTML.

Exports
-------
- ``GroupBuilder`` / ``build_group``: assemble groups from raw blocks.
- ``CodeGroupRenderer``: render a group to an HTML fragment.
- ``app`` / ``main``: the ``codetabs`` command line.

Examples
--------
>>> from codetabs import RawCodeBlock, build_group_sync
>>> build_group_sync([RawCodeBlock("python", "app.py", "print(1)")]).titles
['app.py']
"""

from __future__ import annotations

from .builder import GroupBuilder, build_group, build_group_sync
from .cli import app, main
from .errors import CodeTabsError, NoCodeBlocksError
from .models import CodeGroup, CodeOptions, RawCodeBlock, TabDescriptor
from .renderer import CodeGroupRenderer

__all__ = [
    "CodeGroup",
    "CodeGroupRenderer",
    "CodeOptions",
    "CodeTabsError",
    "GroupBuilder",
    "NoCodeBlocksError",
    "RawCodeBlock",
    "TabDescriptor",
    "app",
    "build_group",
    "build_group_sync",
    "main",
]
