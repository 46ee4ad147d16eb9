"""
Variable substitution over a single line of text.

Two scanners share one algorithm: a doubled delimiter opens a span, the next
doubled delimiter closes it. A span holding a valid identifier is replaced by
its value; any other span is deleted. An opening delimiter without a closing
one leaves the rest of the text as it is.

- content lines use `$$NAME$$`; unset names expand to the empty string.
- #include arguments use `##NAME##`; only defined names are expanded.
"""

from __future__ import annotations

import re
from typing import Callable

from textpp.definitions import Definitions

_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")


def is_identifier(text: str) -> bool:
    return _IDENT_RE.match(text) is not None


def _replace_spans(text: str, delimiter: str, accept: Callable[[str], bool], definitions: Definitions) -> str:
    marker = delimiter * 2
    out = []
    i = 0
    n = len(text)
    while i + 1 < n:
        if text.startswith(marker, i):
            end = text.find(marker, i + 2)
            if end != -1:
                name = text[i + 2 : end]
                if is_identifier(name) and accept(name):
                    out.append(definitions.get_value(name))
                i = end + 2
                continue
        out.append(text[i])
        i += 1
    out.append(text[i:])
    return "".join(out)


def substitute_content(text: str, definitions: Definitions) -> str:
    return _replace_spans(text, "$", lambda _name: True, definitions)


def substitute_include_path(text: str, definitions: Definitions) -> str:
    return _replace_spans(text, "#", definitions.is_defined, definitions)
