"""Dispatch code declarations to the right group builder.

Documentation authors use three shapes of code declaration:

* a standalone fence, which is either a ``package-install`` block (expanded
  into package-manager tabs), a ``terminal`` block, or ordinary code;
* ``<CodeTabs>``, several fences shown as tabs;
* ``<TerminalPicker>``, several terminal transcripts shown as tabs.

Wrapper props are validated with :mod:`msgspec` before anything is built. A
wrapper with no ``!!`` fences raises :class:`~codetabs.errors.NoCodeBlocksError`
naming the component; any other structural problem raises
:class:`~codetabs.errors.DeclarationError`.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

import msgspec

from .builder import GroupBuilder
from .document import STANDALONE_COMPONENT, CodeChunk
from .errors import DeclarationError, NoCodeBlocksError
from .models import CodeGroup, RawCodeBlock
from .package_install import (
    PACKAGE_INSTALL_LANGUAGE,
    TERMINAL_LANGUAGE,
    build_package_install_group,
)

HIDE_OUTPUT_FLAG = "-o"
CODE_TABS = "CodeTabs"
TERMINAL_PICKER = "TerminalPicker"


@dc.dataclass(slots=True, frozen=True)
class GroupDeclaration:
    """Validated props of a ``<CodeTabs>`` or ``<TerminalPicker>`` element."""

    code: typ.Annotated[list[RawCodeBlock], msgspec.Meta(min_length=1)]
    flags: str | None = None
    storage: str | None = None


def _plain_props(props: cabc.Mapping[str, typ.Any]) -> dict[str, typ.Any]:
    plain = dict(props)
    code = plain.get("code")
    if isinstance(code, list | tuple):
        plain["code"] = [
            dc.asdict(block) if isinstance(block, RawCodeBlock) else block
            for block in code
        ]
    return plain


def validate_declaration(
    component: str, props: cabc.Mapping[str, typ.Any]
) -> GroupDeclaration:
    """Validate wrapper ``props`` for ``component``.

    Raises
    ------
    NoCodeBlocksError
        If ``code`` is missing or empty.
    DeclarationError
        For any other validation failure.
    """
    if not props.get("code"):
        raise NoCodeBlocksError(component)
    try:
        return msgspec.convert(_plain_props(props), type=GroupDeclaration)
    except msgspec.ValidationError as exc:
        raise DeclarationError(component, str(exc)) from exc


def hides_output(text: str | None) -> bool:
    """Return whether ``text`` carries the terminal ``-o`` flag."""
    return HIDE_OUTPUT_FLAG in (text or "")


def _without_hide_flag(metadata: str) -> str:
    return " ".join(
        token for token in metadata.split() if token != HIDE_OUTPUT_FLAG
    )


async def build_code_block(
    block: RawCodeBlock,
    *,
    flags: str | None = None,
    builder: GroupBuilder | None = None,
) -> CodeGroup:
    """Build the group for a standalone fence."""
    active = builder or GroupBuilder()
    if block.language_tag == PACKAGE_INSTALL_LANGUAGE:
        return await build_package_install_group(block, active)
    if block.language_tag == TERMINAL_LANGUAGE:
        hidden = hides_output(block.metadata)
        if hidden:
            # `-o` is consumed here; the meta parser would warn about it.
            block = dc.replace(block, metadata=_without_hide_flag(block.metadata))
        return await active.build([block], flags, hide_output=hidden)
    return await active.build([block], flags)


async def build_code_tabs(
    props: cabc.Mapping[str, typ.Any], *, builder: GroupBuilder | None = None
) -> CodeGroup:
    """Validate and build a ``<CodeTabs>`` declaration."""
    declaration = validate_declaration(CODE_TABS, props)
    active = builder or GroupBuilder()
    return await active.build(
        declaration.code, declaration.flags, declaration.storage
    )


async def build_terminal_picker(
    props: cabc.Mapping[str, typ.Any], *, builder: GroupBuilder | None = None
) -> CodeGroup:
    """Validate and build a ``<TerminalPicker>`` declaration.

    ``-o`` in the picker's flags hides command output in every tab. The flags
    are not otherwise applied to the tabs.
    """
    declaration = validate_declaration(TERMINAL_PICKER, props)
    active = builder or GroupBuilder()
    return await active.build(
        declaration.code,
        storage=declaration.storage,
        hide_output=hides_output(declaration.flags),
    )


async def build_chunk(
    chunk: CodeChunk,
    *,
    default_flags: str | None = None,
    builder: GroupBuilder | None = None,
) -> CodeGroup:
    """Build the group for a parsed document chunk."""
    match chunk.component:
        case "CodeTabs":
            return await build_code_tabs(chunk.props, builder=builder)
        case "TerminalPicker":
            return await build_terminal_picker(chunk.props, builder=builder)
        case _ if chunk.component == STANDALONE_COMPONENT:
            blocks = chunk.props.get("code") or []
            if not blocks:
                raise NoCodeBlocksError(chunk.component)
            return await build_code_block(
                blocks[0], flags=default_flags, builder=builder
            )
        case _:
            msg = f"unknown component '{chunk.component}'"
            raise DeclarationError(chunk.component, msg)


__all__ = [
    "CODE_TABS",
    "TERMINAL_PICKER",
    "GroupDeclaration",
    "build_chunk",
    "build_code_block",
    "build_code_tabs",
    "build_terminal_picker",
    "hides_output",
    "validate_declaration",
]
