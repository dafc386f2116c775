"""Icons shown next to code tab titles.

Builtin language tags (``clarity``, ``bash``/shell, ``json``, ``typescript``,
``python``) have fixed icons. Every other tab goes through a filename lookup:
the tab title (or ``x`` when empty) gets ``.<language>`` appended when it has
no extension, and the basename and extension are then resolved against a
static registry. Each name is tried as a short list of candidate keys (exact,
``<name>Icon``, capitalized, capitalized + ``Icon``) so that registry entries
can be written in either naming convention. A miss falls back to a generic
glyph; icon lookup never raises.

Examples
--------
>>> from codetabs.icons import icon_for
>>> icon_for("python", "app.py").name
'python'
>>> icon_for("rust", "main").name
'rust'
>>> icon_for("brainfuck", "").name
'default'
"""

from __future__ import annotations

import collections.abc as cabc
import posixpath
import re

from .models import IconRef

IconFactory = cabc.Callable[[], IconRef]

# seti-ui palette
SETI_COLORS: dict[str, str] = {
    "white": "#d4d7d6",
    "grey": "#4d5a5e",
    "grey-light": "#6d8086",
    "blue": "#519aba",
    "green": "#8dc149",
    "orange": "#e37933",
    "pink": "#f55385",
    "purple": "#a074c4",
    "red": "#cc3e44",
    "yellow": "#cbcb41",
    "ignore": "#41535b",
}
MUTED_COLOR = "var(--muted-foreground)"

_SVG_OPEN = re.compile(r"<svg")
_UNFILLED = {
    tag: re.compile(rf"<{tag}(?![^>]*fill=)", re.IGNORECASE)
    for tag in ("path", "rect", "circle")
}

_GLYPHS: dict[str, str] = {
    "bash": (
        '<svg viewBox="0 0 24 24"><path d="M4 17l6-5-6-5"/>'
        '<rect x="12" y="16" width="8" height="2"/></svg>'
    ),
    "braces": (
        '<svg viewBox="0 0 24 24"><path d="M8 3H7a2 2 0 0 0-2 2v5a2 2 0 0 1-2 2 '
        '2 2 0 0 1 2 2v5a2 2 0 0 0 2 2h1"/><path d="M16 21h1a2 2 0 0 0 2-2v-5a2 '
        '2 0 0 1 2-2 2 2 0 0 1-2-2V5a2 2 0 0 0-2-2h-1"/></svg>'
    ),
    "typescript": (
        '<svg viewBox="0 0 24 24"><rect x="2" y="2" width="20" height="20" rx="2"/>'
        '<path fill="#fff" d="M7 11h6v2h-2v6H9v-6H7z"/></svg>'
    ),
    "python": (
        '<svg viewBox="0 0 24 24"><path d="M12 2c-5 0-5 2-5 3v2h5v1H5c-2 0-3 2-3 '
        '4s1 4 3 4h2v-2c0-2 1-3 3-3h5c2 0 3-1 3-3V5c0-2-2-3-6-3z"/>'
        '<circle fill="#fff" cx="9.5" cy="4.5" r="1"/></svg>'
    ),
    "clarity": (
        '<svg viewBox="0 0 24 24"><path d="M4 4l6 8-6 8h4l6-8-6-8z"/>'
        '<path d="M14 4l6 8-6 8h-2l6-8-6-8z"/></svg>'
    ),
    "file": (
        '<svg viewBox="0 0 32 32"><path d="M8 4h11l7 7v17H8z"/>'
        '<rect x="11" y="16" width="10" height="2"/></svg>'
    ),
    "code": (
        '<svg viewBox="0 0 32 32"><path d="M12 9l-7 7 7 7 1.5-1.5L8 16l5.5-5.5z"/>'
        '<path d="M20 9l7 7-7 7-1.5-1.5L24 16l-5.5-5.5z"/></svg>'
    ),
    "terminal": (
        '<svg viewBox="0 0 32 32"><path d="M6 9l7 7-7 7-1.5-1.5L10 16l-5.5-5.5z"/>'
        '<rect x="14" y="21" width="12" height="2"/></svg>'
    ),
    "config": (
        '<svg viewBox="0 0 32 32"><circle cx="16" cy="16" r="4"/>'
        '<rect x="15" y="5" width="2" height="6"/><rect x="15" y="21" width="2" '
        'height="6"/></svg>'
    ),
    "markdown": (
        '<svg viewBox="0 0 32 32"><path d="M4 9h3l3 4 3-4h3v14h-3v-9l-3 4-3-4v9H4z"/>'
        '<path d="M22 9h3v8h3l-4.5 6-4.5-6h3z"/></svg>'
    ),
}


def normalise_svg(svg: str) -> str:
    """Size ``svg`` for a tab bar and make unfilled shapes use ``currentColor``."""
    sized = _SVG_OPEN.sub("<svg height='28' style='margin: -8px'", svg, count=1)
    for tag, pattern in _UNFILLED.items():
        sized = pattern.sub(f'<{tag} fill="currentColor"', sized)
    return sized


def _builtin(name: str, glyph: str) -> IconFactory:
    def factory() -> IconRef:
        return IconRef(
            name=name,
            svg_markup=normalise_svg(_GLYPHS[glyph]),
            accent_color=MUTED_COLOR,
            builtin=True,
        )

    return factory


def _seti(name: str, glyph: str, color: str) -> IconFactory:
    def factory() -> IconRef:
        return IconRef(
            name=name,
            svg_markup=normalise_svg(_GLYPHS[glyph]),
            accent_color=SETI_COLORS[color],
        )

    return factory


BUILTIN_ICONS: dict[str, IconFactory] = {
    "clarity": _builtin("clarity", "clarity"),
    "bash": _builtin("bash", "bash"),
    "sh": _builtin("bash", "bash"),
    "shell": _builtin("bash", "bash"),
    "json": _builtin("json", "braces"),
    "typescript": _builtin("typescript", "typescript"),
    "python": _builtin("python", "python"),
}

ICON_REGISTRY: dict[str, IconFactory] = {
    "ClarityIcon": BUILTIN_ICONS["clarity"],
    "BashIcon": BUILTIN_ICONS["bash"],
    "JsonIcon": BUILTIN_ICONS["json"],
    "TypescriptIcon": BUILTIN_ICONS["typescript"],
    "PythonIcon": BUILTIN_ICONS["python"],
    "clar": BUILTIN_ICONS["clarity"],
    "py": _seti("python", "code", "blue"),
    "js": _seti("javascript", "code", "yellow"),
    "mjs": _seti("javascript", "code", "yellow"),
    "cjs": _seti("javascript", "code", "yellow"),
    "jsx": _seti("react", "code", "blue"),
    "ts": _seti("typescript", "code", "blue"),
    "tsx": _seti("react", "code", "blue"),
    "rs": _seti("rust", "code", "grey-light"),
    "rust": _seti("rust", "code", "grey-light"),
    "go": _seti("go", "code", "blue"),
    "rb": _seti("ruby", "code", "red"),
    "java": _seti("java", "code", "red"),
    "c": _seti("c", "code", "blue"),
    "cpp": _seti("cpp", "code", "blue"),
    "h": _seti("c", "code", "purple"),
    "css": _seti("css", "code", "blue"),
    "html": _seti("html", "code", "orange"),
    "sql": _seti("sql", "code", "pink"),
    "toml": _seti("config", "config", "grey-light"),
    "yaml": _seti("yaml", "config", "purple"),
    "yml": _seti("yaml", "config", "purple"),
    "ini": _seti("config", "config", "grey-light"),
    "env": _seti("config", "config", "grey-light"),
    "md": _seti("markdown", "markdown", "blue"),
    "mdx": _seti("markdown", "markdown", "yellow"),
    "txt": _seti("text", "file", "white"),
    "terminal": _seti("terminal", "terminal", "grey-light"),
    "console": _seti("terminal", "terminal", "grey-light"),
    "zsh": _seti("terminal", "terminal", "grey-light"),
    "Dockerfile": _seti("docker", "config", "blue"),
    "Makefile": _seti("makefile", "config", "orange"),
}

DEFAULT_ICON: IconFactory = _seti("default", "file", "grey-light")


def candidate_keys(name: str) -> list[str]:
    """Return the registry keys tried for ``name``, in lookup order."""
    if not name:
        return []
    capitalized = name[:1].upper() + name[1:]
    keys = [name, f"{name}Icon", capitalized, f"{capitalized}Icon"]
    return list(dict.fromkeys(keys))


def resolve_icon(name_or_extension: str) -> IconRef | None:
    """Look ``name_or_extension`` up in :data:`ICON_REGISTRY`.

    Returns ``None`` when no candidate key is registered.
    """
    for key in candidate_keys(name_or_extension):
        factory = ICON_REGISTRY.get(key)
        if factory is not None:
            return factory()
    return None


def icon_for_filename(filename: str) -> IconRef:
    """Resolve an icon from a filename's basename, then its extension."""
    basename = posixpath.basename(filename)
    _stem, extension = posixpath.splitext(basename)
    for candidate in (basename, extension.lstrip(".").lower()):
        icon = resolve_icon(candidate)
        if icon is not None:
            return icon
    return DEFAULT_ICON()


def icon_for(language_tag: str, title: str = "") -> IconRef:
    """Return the icon for a tab.

    Parameters
    ----------
    language_tag : str
        Fence language; builtin tags short-circuit the filename lookup.
    title : str, optional
        Tab title, used as a filename for every other language.
    """
    builtin = BUILTIN_ICONS.get(language_tag)
    if builtin is not None:
        return builtin()
    filename = title or "x"
    if "." not in filename:
        filename = f"{filename}.{language_tag}"
    return icon_for_filename(filename)


__all__ = [
    "BUILTIN_ICONS",
    "DEFAULT_ICON",
    "ICON_REGISTRY",
    "SETI_COLORS",
    "candidate_keys",
    "icon_for",
    "icon_for_filename",
    "normalise_svg",
    "resolve_icon",
]
