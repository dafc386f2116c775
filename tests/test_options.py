"""Unit tests for flag resolution and option merging."""

from __future__ import annotations

import logging

import pytest

from codetabs.diagnostics import CollectingDiagnostics, LoggingDiagnostics
from codetabs.models import CodeOptions
from codetabs.options import flags_to_options, merge_options


def test_flags_map_to_options() -> None:
    """Known characters should enable exactly their options."""
    options = flags_to_options("na", CollectingDiagnostics())
    assert options == CodeOptions(line_numbers=True, animate=True)
    assert options.copy_button is None
    assert options.word_wrap is None


def test_unknown_flags_warn_once_per_character() -> None:
    """Every unknown character should produce its own warning."""
    sink = CollectingDiagnostics()
    options = flags_to_options("zzz", sink)
    assert options.as_dict() == {}
    assert sink.warnings == ["Unknown flag: z"] * 3


def test_mixed_flags_keep_known_characters() -> None:
    """Unknown characters should not stop known ones from applying."""
    sink = CollectingDiagnostics()
    options = flags_to_options("cxw", sink)
    assert options.as_dict() == {"copy_button": True, "word_wrap": True}
    assert sink.warnings == ["Unknown flag: x"]


@pytest.mark.parametrize("flags", ["", None])
def test_empty_flags_leave_everything_unset(flags: str | None) -> None:
    """No flags should produce fully unset options without warnings."""
    sink = CollectingDiagnostics()
    assert flags_to_options(flags, sink) == CodeOptions()
    assert sink.warnings == []


def test_default_sink_logs_warnings(caplog: pytest.LogCaptureFixture) -> None:
    """Without an explicit sink, warnings should reach the logging module."""
    with caplog.at_level(logging.WARNING, logger="codetabs.diagnostics"):
        flags_to_options("q")
    assert "Unknown flag: q" in caplog.text


def test_logging_diagnostics_uses_given_logger(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """A custom logger should receive the warning."""
    target = logging.getLogger("codetabs.tests")
    with caplog.at_level(logging.WARNING, logger="codetabs.tests"):
        LoggingDiagnostics(target).warn("hello")
    assert [record.name for record in caplog.records] == ["codetabs.tests"]


def test_tab_options_override_group_options() -> None:
    """Keys set on the tab should win, even when set to False."""
    merged = merge_options(
        CodeOptions(line_numbers=True),
        CodeOptions(line_numbers=False, word_wrap=True),
    )
    assert merged.line_numbers is False
    assert merged.word_wrap is True
    assert merged.copy_button is None


def test_unset_tab_options_inherit_group_options() -> None:
    """Unset tab keys should fall back to the group value."""
    merged = merge_options(CodeOptions(copy_button=True), CodeOptions())
    assert merged == CodeOptions(copy_button=True)
