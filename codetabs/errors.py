"""Exception types raised while building code groups."""

from __future__ import annotations


class CodeTabsError(Exception):
    """Base class for all errors raised by codetabs."""


class NoCodeBlocksError(CodeTabsError, ValueError):
    """Raised when a tab-group declaration does not contain any code block."""

    def __init__(self, component: str = "CodeTabs") -> None:
        self.component = component
        msg = f"<{component}> should contain at least one codeblock marked with `!!`"
        super().__init__(msg)


class DeclarationError(CodeTabsError, ValueError):
    """Raised when a tab-group declaration is structurally invalid."""

    def __init__(self, component: str, detail: str) -> None:
        self.component = component
        self.detail = detail
        super().__init__(f"<{component}> is invalid: {detail}")


class HighlightError(CodeTabsError, RuntimeError):
    """Raised when the highlighter rejects one tab of a group."""

    def __init__(self, index: int, language: str) -> None:
        self.index = index
        self.language = language
        msg = f"Failed to highlight tab {index} (language '{language}')."
        super().__init__(msg)


class ConfigError(CodeTabsError, ValueError):
    """Raised when the render configuration is invalid."""


__all__ = [
    "CodeTabsError",
    "ConfigError",
    "DeclarationError",
    "HighlightError",
    "NoCodeBlocksError",
]
