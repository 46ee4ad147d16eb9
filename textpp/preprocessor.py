"""
Directive interpreter.

Processes one document line by line: `#`-in-column-zero directives drive a
per-file conditional stack, `#include` recurses into other files, and active
content lines get `$$NAME$$` expanded into a shared output buffer.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from textpp.conditionals import ConditionalStack
from textpp.definitions import Definitions
from textpp.errors import IncludeCycleError, PreprocessError
from textpp.expression import evaluate
from textpp.substitution import substitute_content, substitute_include_path

logger = logging.getLogger(__name__)

# Prefix order matters: "ifdef" and "ifndef" must be tried before "if".
DIRECTIVES = ("include", "ifdef", "ifndef", "if", "else", "endif")

Reader = Callable[[str], Optional[str]]


def read_text_file(path: str) -> Optional[str]:
    """Return the file's text, or None when it cannot be read as UTF-8."""
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError):
        return None


def split_lines(text: str) -> List[str]:
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def match_directive(line: str) -> Optional[Tuple[str, str]]:
    """Split a directive line into (keyword, argument text).

    Only a `#` in column zero starts a directive. Lines naming no known
    keyword are not directives and return None.
    """
    if not line.startswith("#"):
        return None
    rest = line[1:].lstrip()
    for keyword in DIRECTIVES:
        if rest.startswith(keyword):
            return keyword, rest[len(keyword) :]
    return None


@dataclass
class PreprocessResult:
    success: bool
    text: str = ""
    errors: List[str] = None

    def __post_init__(self) -> None:
        if self.errors is None:
            self.errors = []


class Preprocessor:
    """Directive interpreter for text documents.

    Supported directives (column zero only):
    - #include "path"   relative to the including file, `##NAME##` expanded
    - #ifdef NAME / #ifndef NAME
    - #if EXPR          see textpp.expression
    - #else / #endif

    Content lines in active scopes get `$$NAME$$` expanded. Files that cannot
    be read, including the root document, contribute nothing.
    """

    def __init__(self, definitions: Optional[Definitions] = None, *, reader: Optional[Reader] = None) -> None:
        self.definitions = definitions if definitions is not None else Definitions()
        self._reader = reader or read_text_file
        # Canonical paths of the files currently being processed.
        self._chain: List[str] = []

    def _canonical(self, path: str) -> str:
        # Symlinks are only resolved for files read from disk; a custom
        # reader's paths are compared lexically.
        if self._reader is read_text_file:
            return os.path.realpath(path)
        return os.path.normpath(os.path.abspath(path))

    def preprocess(self, path: str) -> PreprocessResult:
        out: List[str] = []
        try:
            self.process_file(path, out)
        except PreprocessError as e:
            return PreprocessResult(success=False, text="".join(out), errors=[str(e)])
        return PreprocessResult(success=True, text="".join(out))

    def preprocess_text(self, text: str, filename: str = "<string>") -> PreprocessResult:
        out: List[str] = []
        try:
            self._process_text(text, filename, out)
        except PreprocessError as e:
            return PreprocessResult(success=False, text="".join(out), errors=[str(e)])
        return PreprocessResult(success=True, text="".join(out))

    def process_file(self, path: str, out: List[str]) -> None:
        if self._canonical(path) in self._chain:
            raise IncludeCycleError(path)
        text = self._reader(path)
        if text is None:
            logger.debug("skipping unreadable file %s", path)
            return
        self._process_text(text, path, out)

    def _process_text(self, text: str, path: str, out: List[str]) -> None:
        logger.debug("processing %s", path)
        base_dir = os.path.dirname(path)
        conds = ConditionalStack()
        lines = split_lines(text)

        self._chain.append(self._canonical(path))
        try:
            for line_no, line in enumerate(lines, 1):
                directive = match_directive(line)
                if directive is not None:
                    keyword, arg = directive
                    try:
                        self._handle_directive(keyword, arg, conds, base_dir, out)
                    except PreprocessError as e:
                        e.with_location(path, line_no)
                        raise
                    continue

                if not conds.active:
                    continue
                out.append(substitute_content(line, self.definitions))
                out.append("\n")

            try:
                conds.finish()
            except PreprocessError as e:
                e.with_location(path, len(lines))
                raise
        finally:
            self._chain.pop()

    def _handle_directive(self, keyword: str, arg: str, conds: ConditionalStack, base_dir: str, out: List[str]) -> None:
        if keyword == "include":
            if not conds.active:
                return
            inc_name = self._include_target(arg)
            if not inc_name:
                logger.debug("skipping #include with empty path")
                return
            inc_path = os.path.join(base_dir, inc_name)
            logger.debug("including %s", inc_path)
            self.process_file(inc_path, out)
        elif keyword == "ifdef":
            conds.push(self.definitions.is_defined(arg.strip()))
        elif keyword == "ifndef":
            conds.push(not self.definitions.is_defined(arg.strip()))
        elif keyword == "if":
            conds.push(evaluate(arg.strip(), self.definitions))
        elif keyword == "else":
            conds.toggle()
        elif keyword == "endif":
            conds.pop()

    def _include_target(self, arg: str) -> str:
        # Every double quote goes, not only a surrounding pair.
        cleaned = arg.strip().replace('"', "")
        return substitute_include_path(cleaned, self.definitions)


def preprocess_file(path: str, definitions: Optional[Definitions] = None) -> PreprocessResult:
    return Preprocessor(definitions).preprocess(path)
