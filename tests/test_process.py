"""
Tests for running external programs
"""
import os
import sys

import pytest

from nativebuild.utils.process import ProcessRunner, LaunchFailure


def test_output_is_merged_and_streamed():
    lines = []
    code = "import sys\nprint('out', flush=True)\nprint('err', file=sys.stderr, flush=True)\nprint('end')\nsys.exit(3)"
    ret = ProcessRunner(lines.append).run(sys.executable, ["-c", code])
    assert ret == 3
    assert lines == ["out", "err", "end"]


def test_arguments_are_passed_verbatim():
    lines = []
    code = "import sys\nfor arg in sys.argv[1:]: print(arg)"
    assert ProcessRunner(lines.append).run(sys.executable, ["-c", code, "a b", "--", "-x"]) == 0
    assert lines == ["a b", "--", "-x"]


def test_default_sink_prints(capsys):
    assert ProcessRunner().run(sys.executable, ["-c", "print('hello')"]) == 0
    assert capsys.readouterr().out == "hello\n"


def test_missing_executable(tmp_path):
    with pytest.raises(LaunchFailure) as info:
        ProcessRunner().run(str(tmp_path / "missing"), [])
    assert isinstance(info.value.cause, OSError)


def test_not_executable(tmp_path):
    path = tmp_path / "native-image"
    path.write_text("echo hi")
    os.chmod(str(path), 0o644)
    with pytest.raises(LaunchFailure):
        ProcessRunner().run(str(path), [])


def test_undecodable_output():
    lines = []
    code = "import sys\nsys.stdout.buffer.write(b'ok\\n\\xff\\xfe bad\\nafter\\n')\nsys.exit(4)"
    assert ProcessRunner(lines.append).run(sys.executable, ["-c", code]) == 4
    assert len(lines) == 3
    assert lines[0] == "ok"
    assert lines[1].endswith(" bad")
    assert lines[2] == "after"


def test_failing_line_sink_stops_the_program():
    def sink(line: str):
        raise RuntimeError(line)

    code = "import time\nprint('started', flush=True)\ntime.sleep(60)"
    with pytest.raises(RuntimeError, match="started"):
        ProcessRunner(sink).run(sys.executable, ["-c", code])
