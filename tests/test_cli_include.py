import subprocess
import sys
from pathlib import Path


def _run(args, cwd=None) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "textpp.py", *args],
        cwd=cwd or Path(__file__).resolve().parents[1],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )


def test_include_with_hash_vars_and_dollar_replacement(tmp_path: Path):
    (tmp_path / "inc").mkdir()
    (tmp_path / "inc" / "part_x.txt").write_text("value $$VAL$$\n")
    src = tmp_path / "input.md"
    src.write_text('hello\n#include "inc/part_##SUF##.txt"\n')

    res = _run(["-DSUF=x", "-DVAL=42", str(src)])
    assert res.returncode == 0, res.stderr
    assert res.stdout == "hello\nvalue 42\n"


def test_missing_include_is_ignored(tmp_path: Path):
    src = tmp_path / "input.md"
    src.write_text('before\n#include "missing.txt"\nafter\n')

    res = _run([str(src)])
    assert res.returncode == 0, res.stderr
    assert res.stdout == "before\nafter\n"


def test_include_resolves_against_including_file(tmp_path: Path):
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / "b").mkdir()
    (tmp_path / "a" / "one.txt").write_text('one\n#include "b/two.txt"\n')
    (tmp_path / "a" / "b" / "two.txt").write_text("two\n")
    src = tmp_path / "input.md"
    src.write_text('#include "a/one.txt"\nthree\n')

    res = _run([str(src)])
    assert res.returncode == 0, res.stderr
    assert res.stdout == "one\ntwo\nthree\n"


def test_directives_require_hash_at_column_zero(tmp_path: Path):
    (tmp_path / "no.txt").write_text("should not appear\n")
    src = tmp_path / "input.md"
    src.write_text(' #include "no.txt"\nval $$VAL$$\n')

    res = _run(["-DVAL=1", str(src)])
    assert res.returncode == 0, res.stderr
    assert res.stdout == ' #include "no.txt"\nval 1\n'


def test_include_cycle_is_reported(tmp_path: Path):
    (tmp_path / "a.txt").write_text('a\n#include "b.txt"\n')
    (tmp_path / "b.txt").write_text('b\n#include "a.txt"\n')
    src = tmp_path / "input.md"
    src.write_text('#include "a.txt"\n')

    res = _run([str(src)])
    assert res.returncode == 1
    assert "include cycle detected" in res.stderr


def test_self_include_is_reported(tmp_path: Path):
    src = tmp_path / "input.md"
    src.write_text('#include "input.md"\n')

    res = _run([str(src)])
    assert res.returncode == 1
    assert "include cycle detected" in res.stderr


def test_same_file_included_twice_is_not_a_cycle(tmp_path: Path):
    (tmp_path / "part.txt").write_text("part\n")
    src = tmp_path / "input.md"
    src.write_text('#include "part.txt"\n#include "part.txt"\n')

    res = _run([str(src)])
    assert res.returncode == 0, res.stderr
    assert res.stdout == "part\npart\n"
