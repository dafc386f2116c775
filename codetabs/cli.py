"""Cyclopts CLI entrypoint for rendering documents with code groups.

The ``codetabs`` console script renders a Markdown document containing fenced
blocks, ``<CodeTabs>`` and ``<TerminalPicker>`` declarations into a single HTML
page, or prints the built groups as JSON for inspection.

Examples
--------
Render a document next to its source:

>>> from codetabs.cli import app
>>> app(["render", "docs/install.md"])  # doctest: +SKIP

Inspect the groups a document declares:

>>> app(["groups", "docs/install.md"])  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from pathlib import Path

import cyclopts
import msgspec
from cyclopts import App, Parameter

from .annotations import handler_names
from .config import load_render_config
from .page import DocumentPageGenerator

if typ.TYPE_CHECKING:
    from .models import CodeGroup

app = App(name="codetabs", config=cyclopts.config.Env("CODETABS_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(), format="%(levelname)s %(name)s: %(message)s"
    )


def group_summary(group: CodeGroup) -> dict[str, typ.Any]:
    """Return a JSON-friendly description of ``group`` without markup."""
    return {
        "storage": group.storage,
        "options": group.options.as_dict(),
        "tabs": [
            {
                "title": tab.title,
                "filename": tab.filename,
                "language": tab.highlighted.language,
                "options": tab.options.as_dict(),
                "icon": tab.icon.name,
                "handlers": handler_names(tab.handlers),
                "hide_output": tab.hide_output,
                "code": tab.highlighted.code,
            }
            for tab in group.tabs
        ],
    }


@app.command(help="Render a Markdown document with code groups to HTML.")
def render(
    source: typ.Annotated[Path, Parameter(help="Markdown document to render")],
    *,
    output: typ.Annotated[
        Path | None, Parameter(help="Where to write the HTML page")
    ] = None,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to a YAML render config")
    ] = None,
    style: typ.Annotated[
        str | None, Parameter(help="Override the Pygments style")
    ] = None,
    isolate_failures: typ.Annotated[
        bool, Parameter(help="Render tabs that fail to highlight as plain text")
    ] = False,
    log_level: typ.Annotated[str, Parameter(help="Logging level")] = "WARNING",
) -> None:
    """Render ``source`` into a standalone HTML page.

    Parameters
    ----------
    source : Path
        Markdown document to render.
    output : Path or None, optional
        Output file; defaults to ``source`` with an ``.html`` suffix.
    config : Path or None, optional
        YAML render configuration (see :mod:`codetabs.config`).
    style : str or None, optional
        Pygments style overriding the configured one.
    isolate_failures : bool, optional
        Keep rendering when a tab fails to highlight.
    log_level : str, optional
        Level passed to :func:`logging.basicConfig`.

    Returns
    -------
    None
        Writes the page and prints its path.
    """
    _configure_logging(log_level)
    settings = load_render_config(config)
    if style:
        settings = dc.replace(settings, pygments_style=style)
    if isolate_failures:
        settings = dc.replace(settings, isolate_failures=True)
    written = DocumentPageGenerator(settings).run(source, output)
    print(f"wrote {_format_path(written)}")


@app.command(help="Print the code groups declared in a document as JSON.")
def groups(
    source: typ.Annotated[Path, Parameter(help="Markdown document to inspect")],
    *,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to a YAML render config")
    ] = None,
) -> None:
    """Print every group built from ``source`` as indented JSON."""
    settings = load_render_config(config)
    built = DocumentPageGenerator(settings).collect_groups(
        source.read_text(encoding="utf-8")
    )
    payload = msgspec.json.encode([group_summary(group) for group in built])
    print(msgspec.json.format(payload, indent=2).decode("utf-8"))


def main() -> None:
    """Invoke the Cyclopts application behind the ``codetabs`` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
