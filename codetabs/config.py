"""Load render settings from YAML into a :class:`RenderConfig`.

A configuration file is optional; every key has a default::

    pygments_style: monokai
    collapse_threshold: 10
    isolate_failures: false
    format_code: true
    default_flags: ""
    page_title: Code samples

Examples
--------
>>> from codetabs.config import load_render_config
>>> load_render_config(None).collapse_threshold
10
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from ruamel.yaml import YAML

from .errors import ConfigError
from .renderer import COLLAPSE_THRESHOLD

if typ.TYPE_CHECKING:
    from pathlib import Path


@dc.dataclass(slots=True)
class RenderConfig:
    """Settings shared by the CLI commands.

    Attributes
    ----------
    pygments_style : str
        Pygments style used by the default highlighter.
    collapse_threshold : int
        Single blocks with more lines than this collapse behind a toggle.
    isolate_failures : bool
        Render a tab unstyled when highlighting fails instead of failing the
        whole group.
    format_code : bool
        Clean up whitespace in JavaScript, TypeScript, Python and JSON blocks.
    default_flags : str
        Group flags applied to standalone code blocks.
    page_title : str
        ``<title>`` of the rendered HTML page.
    """

    pygments_style: str = "monokai"
    collapse_threshold: int = COLLAPSE_THRESHOLD
    isolate_failures: bool = False
    format_code: bool = True
    default_flags: str = ""
    page_title: str = "Code samples"


def _expect(payload: typ.Mapping[str, typ.Any], key: str, kind: type, default: object):
    value = payload.get(key, default)
    if value is None:
        return default
    # bool is an int subclass; reject it where an int is expected.
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        msg = f"'{key}' must be of type {kind.__name__}, got {type(value).__name__}."
        raise ConfigError(msg)
    return value


def build_render_config(payload: typ.Mapping[str, typ.Any]) -> RenderConfig:
    """Build a :class:`RenderConfig` from a parsed mapping.

    Raises
    ------
    ConfigError
        If a value has the wrong type or the collapse threshold is negative.
    """
    base = RenderConfig()
    config = RenderConfig(
        pygments_style=_expect(payload, "pygments_style", str, base.pygments_style),
        collapse_threshold=_expect(
            payload, "collapse_threshold", int, base.collapse_threshold
        ),
        isolate_failures=_expect(
            payload, "isolate_failures", bool, base.isolate_failures
        ),
        format_code=_expect(payload, "format_code", bool, base.format_code),
        default_flags=_expect(payload, "default_flags", str, base.default_flags),
        page_title=_expect(payload, "page_title", str, base.page_title),
    )
    if config.collapse_threshold < 0:
        msg = "'collapse_threshold' must not be negative."
        raise ConfigError(msg)
    return config


def load_render_config(path: Path | None) -> RenderConfig:
    """Load render settings from ``path``.

    Parameters
    ----------
    path : Path or None
        YAML file to read; ``None`` returns the defaults.

    Returns
    -------
    RenderConfig
        Parsed settings with defaults for missing keys.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    TypeError
        If the top-level YAML structure is not a mapping.
    ConfigError
        If a value is invalid.
    """
    if path is None:
        return RenderConfig()
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    return build_render_config(loaded)


__all__ = ["RenderConfig", "build_render_config", "load_render_config"]
