"""
Prepares the scratch directory that the modules are compiled into.
"""

import logging
import os

from nativebuild.utils.util import NativeBuildError


class IOFailure(NativeBuildError):
    """
    Error raised if the scratch directory couldn't be cleared or created.
    """

    def __init__(self, path: str, cause: OSError):
        super().__init__()
        self.path = path  # type: str
        """ Path of the file or directory that couldn't be removed or created """
        self.cause = cause  # type: OSError
        """ Error raised by the operating system """

    def __str__(self) -> str:
        return "Could not prepare the compile path at {!r}: {}".format(self.path, self.cause)


def prepare_compile_path(compile_path: str):
    """
    Removes everything inside the passed directory, deepest entries first, and creates the
    directory if it doesn't exist. Symbolic links are removed, not followed.

    :param compile_path: scratch directory
    :raises IOFailure: if an entry couldn't be removed or the directory couldn't be created
    """
    logging.debug("Clear compile path {}".format(compile_path))
    for dirpath, dirnames, filenames in os.walk(compile_path, topdown=False):
        for name in filenames:
            _remove(os.path.join(dirpath, name), os.remove)
        for name in dirnames:
            path = os.path.join(dirpath, name)
            _remove(path, os.unlink if os.path.islink(path) else os.rmdir)
    try:
        os.makedirs(compile_path, exist_ok=True)
    except OSError as err:
        raise IOFailure(compile_path, err)


def _remove(path: str, remove_func):
    try:
        remove_func(path)
    except OSError as err:
        raise IOFailure(path, err)
