#!/usr/bin/env python3
"""textpp - top-level CLI wrapper

Compatible with Python 3.8+.

Usage examples:
  ./textpp.py -DNAME=Alice input.md
  ./textpp.py -DSUF=x input.md -o out.md
"""
from textpp.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
