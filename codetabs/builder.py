"""Assemble raw code blocks into a :class:`~codetabs.models.CodeGroup`.

:class:`GroupBuilder` parses each block's metadata, resolves its options,
highlights it and picks an icon. Blocks are processed concurrently with
:func:`asyncio.gather`; the resulting tabs keep the order of the input blocks
whatever order the highlighter finishes in.

By default a failing highlight aborts the whole group (join-all-or-fail) and
surfaces as :class:`~codetabs.errors.HighlightError`. Setting
``isolate_failures`` replaces a failing tab with an unstyled rendering instead.

Example
-------
>>> import asyncio
>>> from codetabs.builder import GroupBuilder
>>> from codetabs.models import RawCodeBlock
>>> blocks = [
...     RawCodeBlock("python", "main.py -n", "print('hi')"),
...     RawCodeBlock("javascript", "main.js", "console.log('hi')"),
... ]
>>> group = asyncio.run(GroupBuilder().build(blocks, flags="c"))
>>> group.titles
['main.py', 'main.js']
"""

from __future__ import annotations

import asyncio
import collections.abc as cabc
import logging
import typing as typ

from .annotations import build_handlers
from .diagnostics import DiagnosticsSink, LoggingDiagnostics
from .errors import HighlightError, NoCodeBlocksError
from .highlight import Highlighter, PygmentsHighlighter
from .icons import icon_for
from .meta import parse_meta
from .models import (
    CodeGroup,
    CodeOptions,
    HighlightedCode,
    IconRef,
    RawCodeBlock,
    TabDescriptor,
)
from .options import flags_to_options, merge_options

logger = logging.getLogger(__name__)

IconResolver = cabc.Callable[[str, str], IconRef]


class GroupBuilder:
    """Build code groups with a shared highlighter and diagnostics sink."""

    def __init__(
        self,
        highlighter: Highlighter | None = None,
        *,
        diagnostics: DiagnosticsSink | None = None,
        icon_resolver: IconResolver = icon_for,
        isolate_failures: bool = False,
    ) -> None:
        """Configure the collaborators used for every group.

        Parameters
        ----------
        highlighter : Highlighter, optional
            Async highlighter; defaults to :class:`PygmentsHighlighter`.
        diagnostics : DiagnosticsSink, optional
            Receives unknown-flag warnings; defaults to logging.
        icon_resolver : callable, optional
            ``(language_tag, title) -> IconRef``.
        isolate_failures : bool, optional
            Render a failing tab unstyled instead of failing the group.
        """
        self.highlighter = highlighter or PygmentsHighlighter()
        self.diagnostics = diagnostics or LoggingDiagnostics()
        self.icon_resolver = icon_resolver
        self.isolate_failures = isolate_failures

    async def build(
        self,
        raw_blocks: cabc.Sequence[RawCodeBlock],
        flags: str | None = None,
        storage: str | None = None,
        *,
        hide_output: bool = False,
    ) -> CodeGroup:
        """Build a group from ``raw_blocks``.

        Parameters
        ----------
        raw_blocks : Sequence[RawCodeBlock]
            Blocks in display order; must not be empty.
        flags : str, optional
            Group-level flags token applied under every tab's own flags.
        storage : str, optional
            Key under which the renderer persists the selected tab.
        hide_output : bool, optional
            Mark every tab as a terminal transcript with output hidden.

        Returns
        -------
        CodeGroup
            Tabs in the same order as ``raw_blocks``.

        Raises
        ------
        NoCodeBlocksError
            If ``raw_blocks`` is empty.
        HighlightError
            If the highlighter fails for a tab and failures are not isolated.
        """
        if not raw_blocks:
            raise NoCodeBlocksError
        group_options = flags_to_options(flags, self.diagnostics)
        tabs = await asyncio.gather(
            *(
                self._build_tab(index, block, group_options, hide_output=hide_output)
                for index, block in enumerate(raw_blocks)
            )
        )
        logger.debug("Built code group %r with %d tab(s)", storage, len(tabs))
        return CodeGroup(storage=storage, options=group_options, tabs=tuple(tabs))

    async def _build_tab(
        self,
        index: int,
        block: RawCodeBlock,
        group_options: CodeOptions,
        *,
        hide_output: bool,
    ) -> TabDescriptor:
        meta = parse_meta(block.metadata)
        options = merge_options(
            group_options, flags_to_options(meta.flags, self.diagnostics)
        )
        highlighted = await self._highlight(index, block)
        return TabDescriptor(
            title=meta.title,
            filename=meta.filename,
            options=options,
            highlighted=highlighted,
            icon=self.icon_resolver(block.language_tag, meta.title),
            source_text=block.source_text,
            handlers=build_handlers(options),
            hide_output=hide_output,
        )

    async def _highlight(self, index: int, block: RawCodeBlock) -> HighlightedCode:
        try:
            return await self.highlighter.highlight(
                block.language_tag, block.source_text
            )
        except Exception as exc:
            if not self.isolate_failures:
                raise HighlightError(index, block.language_tag) from exc
            logger.warning(
                "Highlighting tab %d (%s) failed; rendering it unstyled",
                index,
                block.language_tag,
                exc_info=exc,
            )
            return HighlightedCode.plain(block.language_tag, block.source_text)


async def build_group(
    raw_blocks: cabc.Sequence[RawCodeBlock],
    flags: str | None = None,
    storage: str | None = None,
    **builder_options: typ.Any,
) -> CodeGroup:
    """Build a group with a one-off :class:`GroupBuilder`.

    ``builder_options`` are forwarded to the :class:`GroupBuilder` constructor.
    """
    return await GroupBuilder(**builder_options).build(raw_blocks, flags, storage)


def build_group_sync(
    raw_blocks: cabc.Sequence[RawCodeBlock],
    flags: str | None = None,
    storage: str | None = None,
    **builder_options: typ.Any,
) -> CodeGroup:
    """Run :func:`build_group` to completion from synchronous code."""
    return asyncio.run(build_group(raw_blocks, flags, storage, **builder_options))


__all__ = ["GroupBuilder", "IconResolver", "build_group", "build_group_sync"]
