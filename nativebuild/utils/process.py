"""
Runs external programs and streams their output.
"""

import logging
import subprocess
import typing as t

import click

from nativebuild.utils.util import NativeBuildError


class LaunchFailure(NativeBuildError):
    """
    Error raised if an external program couldn't be started.
    """

    def __init__(self, executable: str, cause: OSError):
        super().__init__()
        self.executable = executable  # type: str
        """ Program that couldn't be started """
        self.cause = cause  # type: OSError
        """ Error raised by the operating system """

    def __str__(self) -> str:
        return "Could not launch {!r}: {}".format(self.executable, self.cause)


def echo_line(line: str):
    """ Writes the passed line to the standard output """
    click.echo(line)


class ProcessRunner:
    """
    Launches programs, merges their error output into their standard output and passes
    every line of it to a line sink as soon as it is read.
    """

    def __init__(self, line_sink: t.Callable[[str], None] = None):
        """
        Creates a runner.

        :param line_sink: function that gets every output line (without the line break),
               defaults to printing it on the standard output
        """
        self.line_sink = line_sink or echo_line  # type: t.Callable[[str], None]
        """ Function that gets every output line """

    def run(self, executable: str, args: t.List[str]) -> int:
        """
        Run the passed program and block until it terminates.

        :param executable: path of the program
        :param args: arguments passed to the program
        :return: exit code of the program
        :raises LaunchFailure: if the program couldn't be started
        """
        logging.debug("Run {!r} with arguments {!r}".format(executable, args))
        try:
            proc = subprocess.Popen([executable] + list(args),
                                    stdout=subprocess.PIPE,
                                    stderr=subprocess.STDOUT,
                                    universal_newlines=True,
                                    errors="replace",
                                    bufsize=1)
        except OSError as err:
            raise LaunchFailure(executable, err)
        try:
            with proc.stdout:
                for line in proc.stdout:
                    self.line_sink(line.rstrip("\r\n"))
        except BaseException:
            proc.kill()
            raise
        finally:
            exit_code = proc.wait()
        return exit_code
