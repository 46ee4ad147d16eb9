"""textpp command-line driver

Usage examples:
  python textpp.py -DNAME=Alice README.in.md
  python textpp.py -DDEBUG -DLEVEL= notes.txt -o notes.out.txt
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from textpp import __version__
from textpp.definitions import Definitions
from textpp.preprocessor import Preprocessor


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="textpp", description="Expand #include/#if directives and $$NAME$$ variables in text files")
    ap.add_argument("input", help="Input text file (a missing file yields empty output)")
    ap.add_argument(
        "-D",
        dest="defines",
        action="append",
        default=[],
        metavar="NAME[=VALUE]",
        help="Define NAME (as TRUE when no value is given); NAME= undefines it",
    )
    ap.add_argument("-o", dest="output", required=False, help="Write output to this file instead of stdout")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log include resolution to stderr")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    definitions = Definitions.from_arguments(args.defines)
    result = Preprocessor(definitions).preprocess(args.input)
    if not result.success:
        for e in result.errors:
            print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output:
        try:
            with open(args.output, "w", encoding="utf-8", newline="") as f:
                f.write(result.text)
        except OSError as e:
            print(f"Error: cannot write {args.output}: {e}", file=sys.stderr)
            return 1
    else:
        sys.stdout.write(result.text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
