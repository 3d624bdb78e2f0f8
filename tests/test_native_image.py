"""
Tests for locating and calling native-image
"""
import os

from nativebuild.build.native_image import native_image_args, munge_entry_point, format_invocation, \
    exec_native_image, native_image_bin_path
from nativebuild.utils.environment import Environment
from tests.utils import fake_native_image


class RecordingRunner:

    def __init__(self, exit_code: int = 0):
        self.calls = []
        self.exit_code = exit_code

    def run(self, executable, args):
        self.calls.append((executable, args))
        return self.exit_code


def test_munge_entry_point():
    assert munge_entry_point("my-app") == "my_app"
    assert munge_entry_point("my-app.main-module") == "my_app.main_module"
    assert munge_entry_point("app.core") == "app.core"


def test_args():
    assert native_image_args(["-H:Name=app"], "classes:/lib", "app.core") == \
           ["-H:Name=app", "-cp", "classes:/lib", "app.core", "--no-server"]
    assert native_image_args(None, "", None) == ["--no-server"]
    assert native_image_args([], "classes", "app", windows=True) == ["-cp", "classes", "app"]


def test_format_invocation():
    assert format_invocation("/graal/bin/native-image", ["-H:Name=my app", "-cp", "classes", "app"]) == \
           "/graal/bin/native-image '-H:Name=my app' -cp classes app"


def test_exec_native_image():
    runner = RecordingRunner(exit_code=5)
    lines = []
    ret = exec_native_image("/graal/bin/native-image", ["--verbose"], "classes", "my_app", echo=True,
                            runner=runner, environment=Environment(env={}, windows=False), out=lines.append)
    assert ret == 5
    assert runner.calls == [("/graal/bin/native-image", ["--verbose", "-cp", "classes", "my_app", "--no-server"])]
    assert lines == ["/graal/bin/native-image --verbose -cp classes my_app --no-server"]


def test_exec_native_image_without_echo():
    lines = []
    exec_native_image("native-image", [], "classes", "app", runner=RecordingRunner(),
                      environment=Environment(env={}, windows=True), out=lines.append)
    assert lines == []


def test_graalvm_home_is_preferred(tmp_path):
    home_bin = fake_native_image(str(tmp_path / "graal" / "bin"))
    fake_native_image(str(tmp_path / "path"))
    env = Environment(env={"GRAALVM_HOME": str(tmp_path / "graal"), "PATH": str(tmp_path / "path")}, windows=False)
    assert native_image_bin_path(env) == home_bin


def test_graalvm_home_without_bin(tmp_path):
    binary = fake_native_image(str(tmp_path / "graal"))
    env = Environment(env={"GRAALVM_HOME": str(tmp_path / "graal")}, windows=False)
    assert native_image_bin_path(env) == binary


def test_search_path_variable(tmp_path):
    binary = fake_native_image(str(tmp_path / "b"))
    path = os.pathsep.join([str(tmp_path / "a"), str(tmp_path / "b")])
    assert native_image_bin_path(Environment(env={"PATH": path}, windows=False)) == binary


def test_windows_binary_name(tmp_path):
    fake_native_image(str(tmp_path))
    env = Environment(env={"PATH": str(tmp_path)}, windows=True)
    assert native_image_bin_path(env) is None
    (tmp_path / "native-image.cmd").write_text("@echo off")
    assert native_image_bin_path(env) == str(tmp_path / "native-image.cmd")


def test_not_found():
    assert native_image_bin_path(Environment(env={}, windows=False)) is None
