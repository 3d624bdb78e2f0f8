import logging
import sys
import typing as t
from enum import Enum

import click

import nativebuild.scripts.version
from nativebuild.build.builder import BuildOptions, NativeImageBuilder
from nativebuild.build.native_image import native_image_bin_path
from nativebuild.utils.click_helper import settings_option
from nativebuild.utils.environment import Environment
from nativebuild.utils.process import LaunchFailure
from nativebuild.utils.settings import Settings, SettingsError
from nativebuild.utils.util import NativeBuildError


Settings().load_files()


class ErrorCode(Enum):
    NO_ERROR = 0
    PROGRAM_ERROR = 1
    NATIVEBUILD_ERROR = 255


class MissingEntryUnit(NativeBuildError):
    """
    Error raised if no entry module is passed.
    """

    def __str__(self) -> str:
        return "Main module required e.g. \"script\" if the main file is ./src/script.py"


USAGE = "Usage: nativebuild [MAIN_MODULE] [OPTIONS] -- [NATIVE_IMAGE_ARGS]"

EPILOG = """
If no --native-image-path is provided then it is searched for in $GRAALVM_HOME/bin,
$GRAALVM_HOME and $PATH.

Any arguments after -- are passed on verbatim to native-image.
"""

BINARY_NOT_FOUND_MESSAGE = """Could not find GraalVM's native-image! Please make sure that the environment variable \
$GRAALVM_HOME is set. The native-image tool must also be installed ($GRAALVM_HOME/bin/gu install native-image).
If you do not wish to set the GRAALVM_HOME environment variable, you can use the --native-image-path flag \
to set the binary explicitly. Try --help for options."""


def split_native_image_args(args: t.List[str]) -> t.Tuple[t.List[str], t.List[str]]:
    """
    Splits the command line arguments at the first "--" into the arguments of nativebuild
    and the arguments that are passed verbatim to native-image (without the "--").
    """
    if "--" in args:
        split_index = args.index("--")
        return args[:split_index], args[split_index + 1:]
    return list(args), []


@click.command(context_settings={"help_option_names": ["-h", "--help"]}, epilog=EPILOG,
               options_metavar="[OPTIONS] -- [NATIVE_IMAGE_ARGS]")
@click.argument("main_module", required=False, metavar="[MAIN_MODULE]")
@settings_option("settings", eager=True)
@settings_option("log_level", name="log-level", eager=True)
@settings_option("build/native_image_path", short="n")
@settings_option("build/echo", short="e")
@settings_option("build/precompile", short="p")
@settings_option("build/compile_path", short="c")
@click.version_option(nativebuild.scripts.version.version)
@click.pass_context
def cli(ctx: click.Context, main_module: t.Optional[str]):
    """
    Builds GraalVM native images from Python projects described by deps.yaml files.
    """
    native_image_args = (ctx.obj or {}).get("native_image_args", [])
    environment = (ctx.obj or {}).get("environment") or Environment()
    native_image_path = Settings()["build/native_image_path"] or native_image_bin_path(environment)
    if not native_image_path:
        for line in BINARY_NOT_FOUND_MESSAGE.split("\n"):
            logging.error(line)
        sys.exit(ErrorCode.PROGRAM_ERROR.value)
    if not main_module:
        logging.error(str(MissingEntryUnit()))
        click.echo(ctx.get_help(), err=True)
        sys.exit(ErrorCode.PROGRAM_ERROR.value)
    options = BuildOptions(entry_unit=main_module,
                           compile_path=Settings()["build/compile_path"],
                           precompile=Settings()["build/precompile"],
                           native_image_path=native_image_path,
                           echo=Settings()["build/echo"],
                           compiler_args=tuple(native_image_args))
    build_and_exit(options, environment=environment)


def build_and_exit(options: BuildOptions, **builder_args):
    """
    Build the native image and exit with the exit code of native-image,
    or 255 if the build was interrupted.
    """
    try:
        exit_code = NativeImageBuilder(options, **builder_args).build()
    except KeyboardInterrupt:
        logging.error("Aborted")
        sys.exit(ErrorCode.NATIVEBUILD_ERROR.value)
    sys.exit(exit_code)


def cli_with_verb_arg_handling(args: t.List[str] = None, **kwargs):
    """
    Handles ` -- ` properly and calls the cli
    """
    args = sys.argv[1:] if args is None else args
    own_args, native_image_args = split_native_image_args(args)
    cli.main(args=own_args, prog_name="nativebuild", obj={"native_image_args": native_image_args}, **kwargs)


def cli_with_error_catching():
    """
    Process the command line arguments and catch (some) errors.
    """
    try:
        cli_with_verb_arg_handling()
    except LaunchFailure as err:
        logging.error(err)
        logging.error("Please make sure that the environment variable $GRAALVM_HOME is set "
                      "or pass the native-image binary via --native-image-path.")
        sys.exit(ErrorCode.PROGRAM_ERROR.value)
    except (NativeBuildError, SettingsError, TypeError) as err:
        logging.error(err)
        sys.exit(ErrorCode.PROGRAM_ERROR.value)


if __name__ == "__main__":
    cli_with_error_catching()
