"""Expand a ``package-install`` block into per-tool terminal tabs.

A block such as::

    ```package-install python
    requests
    ```

becomes one ``terminal`` block per package manager. The ecosystem is read from
the block metadata; JavaScript is the default when no Python marker is present.

Examples
--------
>>> from codetabs.models import RawCodeBlock
>>> from codetabs.package_install import expand_package_install
>>> blocks = expand_package_install(RawCodeBlock("package-install", "", "lodash"))
>>> [block.metadata for block in blocks]
['npm', 'yarn', 'pnpm', 'bun']
>>> blocks[0].source_text
'$ npm install lodash'
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from .builder import GroupBuilder
from .models import RawCodeBlock

if typ.TYPE_CHECKING:
    from .models import CodeGroup

PACKAGE_INSTALL_LANGUAGE = "package-install"
PACKAGE_INSTALL_STORAGE = "package-install"
TERMINAL_LANGUAGE = "terminal"
PROMPT = "$ "

JS_COMMANDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("npm", ("npm install {pkg}",)),
    ("yarn", ("yarn add {pkg}",)),
    ("pnpm", ("pnpm add {pkg}",)),
    ("bun", ("bun add {pkg}",)),
)
PYTHON_COMMANDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("uv", ("uv add {pkg}",)),
    ("poetry", ("poetry add {pkg}",)),
    ("pip", ("pip install {pkg}",)),
)
PYTHON_VENV_COMMANDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("uv", ("uv venv", "source .venv/bin/activate", "uv add {pkg}")),
    ("poetry", ("poetry shell", "poetry add {pkg}")),
    (
        "pip",
        ("python -m venv .venv", "source .venv/bin/activate", "pip install {pkg}"),
    ),
)


@dc.dataclass(slots=True, frozen=True)
class EcosystemHint:
    """Package ecosystem signals read from block metadata."""

    is_python: bool
    is_js: bool
    no_venv: bool

    @classmethod
    def from_metadata(cls, metadata: str) -> EcosystemHint:
        """Detect the ecosystem from ``metadata`` (case-insensitive)."""
        meta = (metadata or "").lower()
        tokens = meta.split()
        is_python = "python" in meta or "py" in tokens
        is_js = (
            "javascript" in meta
            or "typescript" in meta
            or "js" in tokens
            or "ts" in tokens
            or not is_python
        )
        return cls(is_python=is_python, is_js=is_js, no_venv="-no-venv" in tokens)


def _transcript(commands: tuple[str, ...], package: str) -> str:
    return "\n".join(f"{PROMPT}{command.format(pkg=package)}" for command in commands)


def expand_package_install(block: RawCodeBlock) -> list[RawCodeBlock]:
    """Synthesize one terminal block per package manager.

    Parameters
    ----------
    block : RawCodeBlock
        The ``package-install`` block; its source text is the package list.

    Returns
    -------
    list[RawCodeBlock]
        ``terminal`` blocks whose metadata is the tool name, in a fixed order:
        npm, yarn, pnpm, bun for JavaScript; uv, poetry, pip for Python. Python
        transcripts create and activate a virtualenv unless ``-no-venv`` is
        given.
    """
    hint = EcosystemHint.from_metadata(block.metadata)
    if hint.is_python:
        table = PYTHON_COMMANDS if hint.no_venv else PYTHON_VENV_COMMANDS
    else:
        table = JS_COMMANDS
    package = block.source_text.strip()
    return [
        RawCodeBlock(
            language_tag=TERMINAL_LANGUAGE,
            metadata=tool,
            source_text=_transcript(commands, package),
        )
        for tool, commands in table
    ]


async def build_package_install_group(
    block: RawCodeBlock, builder: GroupBuilder | None = None
) -> CodeGroup:
    """Expand ``block`` and build the resulting terminal tab group."""
    active = builder or GroupBuilder()
    return await active.build(
        expand_package_install(block), storage=PACKAGE_INSTALL_STORAGE
    )


__all__ = [
    "PACKAGE_INSTALL_LANGUAGE",
    "PACKAGE_INSTALL_STORAGE",
    "TERMINAL_LANGUAGE",
    "EcosystemHint",
    "build_package_install_group",
    "expand_package_install",
]
