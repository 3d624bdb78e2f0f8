import os
import stat
import sys
import typing as t
from typing import Dict, Union, NamedTuple

import yaml
from click.testing import CliRunner

from nativebuild.scripts.cli import cli, split_native_image_args
from nativebuild.utils.environment import Environment


class Result(NamedTuple):
    out: str
    ret_code: int
    file_contents: Dict[str, bytes]
    exception: t.Optional[BaseException]


FAKE_NATIVE_IMAGE = """#!{python}
import sys
print("native-image " + " ".join(sys.argv[1:]))
print("native-image warning", file=sys.stderr)
sys.exit({exit_code})
"""


def store_files(files: Dict[str, Union[dict, list, str]] = None, d: str = "."):
    """
    Store the passed files, dictionaries and lists are stored as YAML.
    Parent directories are created if needed.
    """
    for file, content in (files or {}).items():
        path = os.path.join(d, file)
        if os.path.dirname(path):
            os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as f:
            if isinstance(content, str):
                f.write(content)
            else:
                yaml.dump(content, f)


def fake_native_image(directory: str, exit_code: int = 0) -> str:
    """
    Creates an executable native-image script in the passed directory that prints its arguments,
    writes a line to its error output and exits with the passed exit code.

    :return: absolute path of the script
    """
    os.makedirs(directory, exist_ok=True)
    path = os.path.abspath(os.path.join(directory, "native-image"))
    with open(path, "w") as f:
        f.write(FAKE_NATIVE_IMAGE.format(python=sys.executable, exit_code=exit_code))
    os.chmod(path, os.stat(path).st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def _load_files(d: str = ".") -> Dict[str, bytes]:
    contents = {}
    for root, _, fs in os.walk(d):
        for f in fs:
            path = os.path.join(root, f)
            with open(path, "rb") as fd:
                contents[os.path.relpath(path, d)] = fd.read()
    return contents


def run_nativebuild(args: t.List[str], files: Dict[str, Union[dict, list, str]] = None,
                    env: Dict[str, str] = None, native_image_exit_code: t.Optional[int] = 0,
                    expect_success: bool = True) -> Result:
    """
    Run nativebuild with the passed arguments in an isolated directory.

    :param args: arguments for nativebuild, including native-image arguments after "--"
    :param files: {file name: content as string or dictionary that is converted into YAML first}
    :param env: environment variables, GRAALVM_HOME is set to a directory with a fake native-image
                if native_image_exit_code isn't None
    :param native_image_exit_code: exit code of the fake native-image or None to create no fake native-image
    :param expect_success: expect a zero return code
    :return: result of the call, its file contents are the files of the isolated directory after the call
    """
    runner = CliRunner()
    with runner.isolated_filesystem():
        store_files(files)
        env = dict(env or {})
        env.setdefault("NATIVEBUILD_CONFIG", os.path.abspath("user_config"))
        if native_image_exit_code is not None:
            fake_native_image(os.path.join("graalvm", "bin"), native_image_exit_code)
            env.setdefault("GRAALVM_HOME", os.path.abspath("graalvm"))
        environment = Environment(env=env, search_path=[os.path.abspath("site-packages")], windows=False)
        own_args, native_image_args = split_native_image_args(args)
        result = runner.invoke(cli, own_args, obj={"native_image_args": native_image_args,
                                                   "environment": environment})
        ret = Result(result.output.strip(), result.exit_code, _load_files(), result.exception)
        if expect_success:
            assert result.exit_code == 0, repr(ret)
        return ret
