"""
Definition store.

Every name is in one of three states: unset, defined (with a value, `TRUE`
when none was given) or explicitly undefined (`NAME=`). Explicitly undefined
names look exactly like unset ones; the state only exists so that a later
`NAME=` can switch off an earlier `NAME`.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

DEFAULT_VALUE = "TRUE"


def parse_definition(text: str) -> Tuple[str, Optional[str]]:
    """Split a `NAME[=VALUE]` argument into its name and value.

    `NAME` yields `TRUE`, `NAME=` yields None (explicitly undefined).
    """
    if "=" not in text:
        return text, DEFAULT_VALUE
    name, value = text.split("=", 1)
    if value == "":
        return name, None
    return name, value


class Definitions:
    """Key/value definitions with an explicit defined flag per name."""

    def __init__(self, values: Optional[Dict[str, Optional[str]]] = None) -> None:
        self._values: Dict[str, str] = {}
        self._defined: Dict[str, bool] = {}
        for name, value in (values or {}).items():
            self.set(name, value)

    @classmethod
    def from_arguments(cls, arguments: Iterable[str]) -> "Definitions":
        definitions = cls()
        for arg in arguments:
            if not arg:
                continue
            name, value = parse_definition(arg)
            definitions.set(name, value)
        return definitions

    def set(self, name: str, value: Optional[str] = None) -> None:
        if value is None:
            self._values.pop(name, None)
            self._defined[name] = False
        else:
            self._values[name] = value
            self._defined[name] = True

    def is_defined(self, name: str) -> bool:
        return self._defined.get(name, False)

    def get_value(self, name: str) -> str:
        if not self.is_defined(name):
            return ""
        return self._values.get(name, DEFAULT_VALUE)

    def __repr__(self) -> str:
        shown = {k: self._values.get(k) for k, v in self._defined.items() if v}
        return f"Definitions({shown!r})"
