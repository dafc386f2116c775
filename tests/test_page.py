"""Unit tests for rendering whole documents with :class:`DocumentPageGenerator`."""

from __future__ import annotations

import logging

import pytest
from bs4 import BeautifulSoup

from codetabs.config import RenderConfig
from codetabs.errors import NoCodeBlocksError
from codetabs.page import DocumentPageGenerator

BROKEN_DOCUMENT = """\
Before the broken group.

<CodeTabs>

```python
print("<unmarked>")
```

</CodeTabs>

```python
print("after")
```

After the broken group.
"""


def test_failing_declaration_aborts_page_by_default() -> None:
    """Without isolation a declaration error should surface unchanged."""
    generator = DocumentPageGenerator(RenderConfig())
    with pytest.raises(NoCodeBlocksError):
        generator.render(BROKEN_DOCUMENT)


def test_isolated_failure_renders_plain_fallback(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """With isolation the failing declaration should become an escaped ``<pre>``."""
    generator = DocumentPageGenerator(RenderConfig(isolate_failures=True))
    with caplog.at_level(logging.WARNING, logger="codetabs.page"):
        page = generator.render(BROKEN_DOCUMENT)

    soup = BeautifulSoup(page, "html.parser")
    text = soup.get_text()
    assert "Before the broken group." in text
    assert "After the broken group." in text
    (fallback,) = soup.select("pre.codetabs-fallback")
    assert "<CodeTabs>" in fallback["title"]
    assert len(soup.select(".codetabs")) == 1, "the valid block should still render"
    assert "Could not build CodeTabs declaration" in caplog.text


def test_isolated_collect_groups_skips_failures() -> None:
    """Group collection should leave out declarations that failed to build."""
    generator = DocumentPageGenerator(RenderConfig(isolate_failures=True))
    groups = generator.collect_groups(BROKEN_DOCUMENT)
    assert len(groups) == 1
    assert groups[0].tabs[0].highlighted.code == 'print("after")'
