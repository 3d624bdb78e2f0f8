"""
Locates and calls GraalVM's native-image.
"""

import os
import typing as t

import click

from nativebuild.utils.environment import Environment
from nativebuild.utils.process import ProcessRunner
from nativebuild.utils.util import NativeBuildError, InsertionTimeOrderedDict


class BinaryNotFound(NativeBuildError):
    """
    Error raised if no native-image binary is available.
    """

    def __str__(self) -> str:
        return "Could not find GraalVM's native-image"


def native_image_bin_path(environment: Environment = None) -> t.Optional[str]:
    """
    Search the native-image binary in $GRAALVM_HOME/bin, $GRAALVM_HOME and the directories in $PATH.

    :param environment: environment that provides the variables
    :return: absolute path of the binary or None if it isn't found
    """
    environment = environment or Environment()
    graal_home = environment.getenv("GRAALVM_HOME")
    paths = [os.path.join(graal_home, "bin"), graal_home] if graal_home else []
    paths += environment.executable_path_entries()
    filename = "native-image.cmd" if environment.windows else "native-image"
    for path in InsertionTimeOrderedDict.from_list(paths):
        file = os.path.join(path, filename)
        if os.path.isfile(file):
            return os.path.abspath(file)
    return None


def munge_entry_point(name: str) -> str:
    """
    Converts a module name into the name of the entry point, replacing hyphens with underscores.
    """
    return name.replace("-", "_")


def native_image_args(compiler_args: t.Optional[t.List[str]], classpath: t.Optional[str],
                      entry_point: t.Optional[str], windows: bool = False) -> t.List[str]:
    """
    Assembles the arguments of the native-image call.

    :param compiler_args: arguments that are passed verbatim
    :param classpath: search path passed with -cp
    :param entry_point: name of the entry point
    :param windows: running on windows?
    """
    args = []
    if compiler_args:
        args.extend(compiler_args)
    if classpath:
        args.extend(["-cp", classpath])
    if entry_point:
        args.append(entry_point)
    # native-image doesn't support --no-server on windows
    if not windows:
        args.append("--no-server")
    return args


def format_invocation(native_image_path: str, args: t.List[str]) -> str:
    """
    Returns the invocation as a single line, arguments containing spaces are quoted.
    """
    return " ".join([native_image_path] + ["'{}'".format(arg) if " " in arg else arg for arg in args])


def exec_native_image(native_image_path: str, compiler_args: t.Optional[t.List[str]], classpath: t.Optional[str],
                      entry_point: t.Optional[str], echo: bool = False, runner: ProcessRunner = None,
                      environment: Environment = None, out: t.Callable[[str], None] = click.echo) -> int:
    """
    Calls native-image and returns its exit code.

    :param native_image_path: path of the native-image binary
    :param compiler_args: arguments passed verbatim to native-image
    :param classpath: search path of the compiled modules
    :param entry_point: name of the entry point
    :param echo: print the invocation before executing it?
    :param runner: used process runner
    :param environment: used environment
    :param out: function that gets the echoed invocation
    :raises LaunchFailure: if native-image couldn't be started
    """
    environment = environment or Environment()
    runner = runner or ProcessRunner()
    args = native_image_args(compiler_args, classpath, entry_point, windows=environment.windows)
    if echo:
        out(format_invocation(native_image_path, args))
    return runner.run(native_image_path, args)
