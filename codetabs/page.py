"""Render a Markdown document with code groups into a standalone HTML page.

:class:`DocumentPageGenerator` splits the document with
:func:`~codetabs.document.parse_document`, builds every code declaration in a
single event loop run, renders prose with :mod:`markdown` and groups with
:class:`~codetabs.renderer.CodeGroupRenderer`, then wraps the fragments in
``page.jinja``.
"""

from __future__ import annotations

import asyncio
import datetime as dt
import html
import logging
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markdown import Markdown

from .builder import GroupBuilder
from .components import build_chunk
from .config import RenderConfig
from .document import CodeChunk, ProseChunk, parse_document
from .errors import CodeTabsError
from .highlight import PygmentsHighlighter
from .renderer import DEFAULT_TEMPLATES_DIR, CodeGroupRenderer

if typ.TYPE_CHECKING:
    from .diagnostics import DiagnosticsSink
    from .document import DocumentPart
    from .models import CodeGroup
    from .store import TabStore

logger = logging.getLogger(__name__)

MARKDOWN_EXTENSIONS = ["tables", "sane_lists"]

BASE_CSS = """\
body { font-family: system-ui, sans-serif; max-width: 56rem; margin: 2rem auto; padding: 0 1rem; }
.codetabs { margin: 1.5rem 0; border-radius: 6px; overflow: hidden;
  background: var(--codetabs-background, #272822); color: var(--codetabs-foreground, #f8f8f2); }
.codetabs-titlebar, .codetabs-filename { display: flex; gap: 0.5rem; align-items: center;
  padding: 0.25rem 0.75rem; font-size: 0.85rem; border-bottom: 1px solid rgba(255, 255, 255, 0.1); }
.codetabs-tab { background: none; border: 0; color: inherit; opacity: 0.6; cursor: pointer; }
.codetabs-tab[aria-selected="true"] { opacity: 1; border-bottom: 2px solid currentColor; }
.codetabs-copy { margin-left: auto; background: none; border: 0; color: inherit; cursor: pointer; }
.codetabs-icon svg { vertical-align: middle; }
.codetabs pre { margin: 0; padding: 0.75rem 0; overflow-x: auto; }
.codetabs pre .line { display: block; min-height: 1.4em; padding: 0 0.75rem; }
.codetabs pre .line[hidden] { display: none; }
.codetabs pre .line-gutter { opacity: 0.5; user-select: none; white-space: pre; }
.codetabs pre .word-wrap { white-space: pre-wrap; }
.codetabs pre .mark { background: var(--codetabs-highlight, rgba(255, 255, 255, 0.1)); }
.codetabs pre .diff-add { background: rgba(46, 160, 67, 0.2); }
.codetabs pre .diff-remove { background: rgba(248, 81, 73, 0.2); }
.codetabs-fallback { margin: 1.5rem 0; padding: 0.75rem; overflow-x: auto; border: 1px dashed #c33; }
.codetabs-collapse { display: block; width: 100%; background: none; border: 0; color: inherit;
  padding: 0.4rem; cursor: pointer; border-top: 1px solid rgba(255, 255, 255, 0.1); }
"""


class DocumentPageGenerator:
    """Turn Markdown documents into themed HTML pages."""

    def __init__(
        self,
        config: RenderConfig | None = None,
        *,
        diagnostics: DiagnosticsSink | None = None,
        store: TabStore | None = None,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the generator from render settings.

        Parameters
        ----------
        config : RenderConfig, optional
            Render settings; defaults to :class:`RenderConfig` defaults.
        diagnostics : DiagnosticsSink, optional
            Receives parsing warnings; defaults to logging.
        store : TabStore, optional
            Tab selection store shared by every group on the page.
        templates_dir : Path, optional
            Directory containing ``page.jinja`` and ``code_group.jinja``.
        """
        self.config = config or RenderConfig()
        self.highlighter = PygmentsHighlighter(self.config.pygments_style)
        self.builder = GroupBuilder(
            self.highlighter,
            diagnostics=diagnostics,
            isolate_failures=self.config.isolate_failures,
        )
        self.templates_dir = templates_dir or DEFAULT_TEMPLATES_DIR
        self.renderer = CodeGroupRenderer(
            store=store,
            collapse_threshold=self.config.collapse_threshold,
            templates_dir=self.templates_dir,
        )
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("page.jinja")

    def parse(self, markdown_text: str) -> list[DocumentPart]:
        """Split ``markdown_text`` using the configured formatting setting."""
        return parse_document(markdown_text, format_blocks=self.config.format_code)

    async def _build_each(
        self, chunks: typ.Sequence[CodeChunk]
    ) -> list[CodeGroup | CodeTabsError]:
        results = await asyncio.gather(
            *(
                build_chunk(
                    chunk,
                    default_flags=self.config.default_flags or None,
                    builder=self.builder,
                )
                for chunk in chunks
            ),
            return_exceptions=self.config.isolate_failures,
        )
        outcomes: list[CodeGroup | CodeTabsError] = []
        for chunk, result in zip(chunks, results, strict=True):
            if isinstance(result, CodeTabsError):
                logger.warning("Could not build %s declaration: %s", chunk.component, result)
            elif isinstance(result, BaseException):
                raise result
            outcomes.append(result)
        return outcomes

    async def build_groups(
        self, parts: typ.Sequence[DocumentPart]
    ) -> list[CodeGroup]:
        """Build every code chunk in ``parts``, preserving document order.

        With ``isolate_failures`` set, declarations that fail to build are
        logged and left out instead of failing the whole document.
        """
        chunks = [part for part in parts if isinstance(part, CodeChunk)]
        outcomes = await self._build_each(chunks)
        return [group for group in outcomes if not isinstance(group, CodeTabsError)]

    def collect_groups(self, markdown_text: str) -> list[CodeGroup]:
        """Parse ``markdown_text`` and build its groups synchronously."""
        return asyncio.run(self.build_groups(self.parse(markdown_text)))

    def render_fallback(self, chunk: CodeChunk, error: CodeTabsError) -> str:
        """Return an escaped plain ``<pre>`` for a declaration that failed."""
        blocks = chunk.props.get("code") or []
        sources = "\n\n".join(block.source_text for block in blocks)
        return (
            f'<pre class="codetabs-fallback" title="{html.escape(str(error))}">'
            f"{html.escape(sources)}</pre>"
        )

    def render_fragments(self, markdown_text: str) -> list[str]:
        """Return HTML fragments for every prose and code chunk, in order."""
        parts = self.parse(markdown_text)
        chunks = [part for part in parts if isinstance(part, CodeChunk)]
        outcomes = iter(asyncio.run(self._build_each(chunks)))
        fragments: list[str] = []
        for part in parts:
            if isinstance(part, ProseChunk):
                md = Markdown(extensions=MARKDOWN_EXTENSIONS)
                fragments.append(md.convert(part.markdown))
                continue
            outcome = next(outcomes)
            if isinstance(outcome, CodeTabsError):
                fragments.append(self.render_fallback(part, outcome))
            else:
                fragments.append(self.renderer.render(outcome))
        return fragments

    def render(self, markdown_text: str, *, title: str | None = None) -> str:
        """Render ``markdown_text`` to a complete HTML page."""
        fragments = self.render_fragments(markdown_text)
        return self.template.render(
            title=title or self.config.page_title,
            base_css=BASE_CSS,
            pygments_css=self.highlighter.stylesheet,
            fragments=fragments,
            generated_at=dt.datetime.now(dt.UTC),
        )

    def run(self, source: Path, output: Path | None = None) -> Path:
        """Render ``source`` and write the page next to it or to ``output``.

        Returns
        -------
        Path
            Location of the written HTML file.
        """
        target = output or source.with_suffix(".html")
        html = self.render(source.read_text(encoding="utf-8"))
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(html if html.endswith("\n") else f"{html}\n", encoding="utf-8")
        logger.info("Rendered %s to %s", source, target)
        return target


__all__ = ["BASE_CSS", "MARKDOWN_EXTENSIONS", "DocumentPageGenerator"]
