"""
Conditional stack for #if/#ifdef/#ifndef ... #else ... #endif.

One stack is owned by each file being processed. Lines are emitted while
`active` is true, which is `parent_active and own_condition` of the innermost
open frame.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from textpp.errors import DirectiveStructureError


@dataclass
class CondFrame:
    parent_active: bool
    own_condition: bool
    else_consumed: bool = False


class ConditionalStack:
    def __init__(self) -> None:
        self._frames: List[CondFrame] = []
        self.active = True

    def __len__(self) -> int:
        return len(self._frames)

    def push(self, condition: bool) -> None:
        """Open a scope (#if, #ifdef, #ifndef)."""
        frame = CondFrame(parent_active=self.active, own_condition=condition)
        self._frames.append(frame)
        self.active = frame.parent_active and frame.own_condition

    def toggle(self) -> None:
        """Handle #else. Only the first #else of a scope flips it."""
        if not self._frames:
            raise DirectiveStructureError("#else without matching #if/#ifdef/#ifndef")
        top = self._frames[-1]
        if top.else_consumed:
            return
        top.else_consumed = True
        top.own_condition = not top.own_condition
        self.active = top.parent_active and top.own_condition

    def pop(self) -> None:
        """Close the innermost scope (#endif)."""
        if not self._frames:
            raise DirectiveStructureError("#endif without matching #if/#ifdef/#ifndef")
        top = self._frames.pop()
        self.active = top.parent_active

    def finish(self) -> None:
        if self._frames:
            raise DirectiveStructureError("missing #endif")
