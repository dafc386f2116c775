"""Unit tests for the ``codetabs`` command functions.

The command functions are called directly; Cyclopts only adds argument
parsing on top of them.
"""

from __future__ import annotations

import typing as typ

import msgspec.json as msgspec_json
from bs4 import BeautifulSoup

from codetabs import cli

if typ.TYPE_CHECKING:
    from pathlib import Path

    import pytest

DOCUMENT = """\
# Example

<CodeTabs storage="lang">

```python !! main.py -c
print("hi")
```

```javascript !! main.js -n
console.log("hi")
```

</CodeTabs>

```package-install
lodash
```
"""


def _document(tmp_path: Path) -> Path:
    path = tmp_path / "example.md"
    path.write_text(DOCUMENT, encoding="utf-8")
    return path


def test_render_writes_html_next_to_source(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """``render`` should write an HTML page and report its path."""
    source = _document(tmp_path)
    cli.render(source)
    output = source.with_suffix(".html")
    assert output.exists()
    assert "wrote" in capsys.readouterr().out

    soup = BeautifulSoup(output.read_text(encoding="utf-8"), "html.parser")
    assert soup.title.get_text() == "Code samples"
    assert soup.select_one("h1").get_text() == "Example"
    groups = soup.select(".codetabs")
    assert len(groups) == 2
    assert groups[0]["data-storage"] == "lang"
    assert groups[1]["data-storage"] == "package-install"


def test_render_honours_output_and_style(tmp_path: Path) -> None:
    """Explicit output paths and style overrides should be used."""
    source = _document(tmp_path)
    target = tmp_path / "out" / "page.html"
    cli.render(source, output=target, style="friendly")
    assert target.read_text(encoding="utf-8").endswith("\n")


def test_render_reads_config_file(tmp_path: Path) -> None:
    """The page title should come from the config file."""
    source = _document(tmp_path)
    config = tmp_path / "codetabs.yaml"
    config.write_text("page_title: Install guide\n", encoding="utf-8")
    cli.render(source, config=config)
    soup = BeautifulSoup(
        source.with_suffix(".html").read_text(encoding="utf-8"), "html.parser"
    )
    assert soup.title.get_text() == "Install guide"


def test_groups_prints_json_summary(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """``groups`` should print one JSON object per group, without markup."""
    cli.groups(_document(tmp_path))
    payload = msgspec_json.decode(capsys.readouterr().out)
    assert [group["storage"] for group in payload] == ["lang", "package-install"]
    tabs = payload[0]["tabs"]
    assert [tab["title"] for tab in tabs] == ["main.py", "main.js"]
    assert tabs[0]["options"] == {"copy_button": True}
    assert "line-numbers" in tabs[1]["handlers"]
    assert tabs[0]["code"] == 'print("hi")'
    assert [tab["title"] for tab in payload[1]["tabs"]] == ["npm", "yarn", "pnpm", "bun"]
