import subprocess
import sys
from pathlib import Path

import pytest


def _run_pp(tmp_path: Path, text: str, args=()) -> subprocess.CompletedProcess:
    src = tmp_path / "input.md"
    src.write_text(text)
    return subprocess.run(
        [sys.executable, "textpp.py", *args, str(src)],
        cwd=Path(__file__).resolve().parents[1],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )


def test_undefined_dollar_var_is_empty(tmp_path: Path):
    res = _run_pp(tmp_path, "a $$NOPE$$ b\n")
    assert res.returncode == 0, res.stderr
    assert res.stdout == "a  b\n"


def test_ifdef_fails_when_defined_as_empty(tmp_path: Path):
    res = _run_pp(tmp_path, "#ifdef KEY\nyes\n#else\nno\n#endif\n", args=["-DKEY="])
    assert res.returncode == 0, res.stderr
    assert res.stdout == "no\n"


def test_D_separate_argument_and_redefinition(tmp_path: Path):
    res = _run_pp(tmp_path, "#if KEY == 2\ntwo\n#endif\n", args=["-D", "KEY=1", "-D", "KEY=2"])
    assert res.returncode == 0, res.stderr
    assert res.stdout == "two\n"


def test_if_expression_truthiness_and_comparisons(tmp_path: Path):
    res = _run_pp(
        tmp_path,
        '#if (VAR || VAR2 == 3 && VAR3 == "aaa" || VAR4 != "bbb" || !(VAR3 == "aaa" || VAR5=="ccc"))\nTRUE\n#else\nFALSE\n#endif\n',
        args=["-DVAR=", "-DVAR2=3", "-DVAR3=aaa", "-DVAR4=bbb", "-DVAR5=ccc"],
    )
    assert res.returncode == 0, res.stderr
    assert res.stdout == "TRUE\n"


def test_unknown_directives_are_preserved(tmp_path: Path):
    res = _run_pp(tmp_path, "#notadirective $$VAL$$\n", args=["-DVAL=7"])
    assert res.returncode == 0, res.stderr
    assert res.stdout == "#notadirective 7\n"


def test_invalid_expression_fails(tmp_path: Path):
    res = _run_pp(tmp_path, "#if (VAR &&)\nX\n#endif\n", args=["-DVAR=1"])
    assert res.returncode == 1
    assert "invalid expression" in res.stderr
    assert res.stdout == ""


@pytest.mark.parametrize(
    "text,message",
    [
        ("#else\nX\n", "#else without matching"),
        ("#endif\nX\n", "#endif without matching"),
        ("#if VAR\nX\n", "missing #endif"),
    ],
)
def test_unbalanced_directives_fail(tmp_path: Path, text: str, message: str):
    res = _run_pp(tmp_path, text, args=["-DVAR=1"])
    assert res.returncode == 1
    assert "invalid directive structure" in res.stderr
    assert message in res.stderr
