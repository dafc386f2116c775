r"""Parse the metadata string that follows a code fence's language tag.

The metadata is free text such as ``app.py -cn -f src/app.py``. Two
independent regex scans run over the original string: the first ``-<word>``
run is the flags token and the first ``-f <name>`` run is the filename.
Whatever is left once both matches are removed is the title.

Because the flags scan takes the first ``-<word>`` run it finds, a ``-f``
filename marker that comes before the real flags is read as the flags token
``"f"``. Callers then see an unknown-flag warning while the filename is still
extracted correctly. A ``-f <name>`` marker with no flags after it is not
taken as a flags token.

Example
-------
>>> from codetabs.meta import parse_meta
>>> parse_meta("app.py -cn -f src/app.py")
ParsedMeta(title='app.py', flags='cn', filename='src/app.py')
"""

from __future__ import annotations

import re

from .models import ParsedMeta

FLAGS_PATTERN = re.compile(r"-(\w+)")
FILENAME_PATTERN = re.compile(r"-f\s+(\S+)")


def parse_meta(metadata: str | None) -> ParsedMeta:
    """Split ``metadata`` into title, flags token and filename.

    Parameters
    ----------
    metadata : str or None
        Text following the language tag on the opening fence.

    Returns
    -------
    ParsedMeta
        Best-effort result; missing parts are empty strings. This function
        never raises.
    """
    meta = metadata or ""
    flag_match = FLAGS_PATTERN.search(meta)
    file_match = FILENAME_PATTERN.search(meta)
    if (
        flag_match
        and file_match
        and flag_match.start() == file_match.start()
        and FLAGS_PATTERN.search(meta, file_match.end()) is None
    ):
        flag_match = None
    flags = flag_match.group(1) if flag_match else ""
    filename = file_match.group(1) if file_match else ""

    title = meta
    if flag_match:
        title = title.replace(flag_match.group(0), "", 1)
    if file_match:
        title = title.replace(file_match.group(0), "", 1)
    return ParsedMeta(title=title.strip(), flags=flags, filename=filename)


__all__ = ["FILENAME_PATTERN", "FLAGS_PATTERN", "parse_meta"]
