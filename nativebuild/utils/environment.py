"""
Access to the process wide state (environment variables, module search path, platform)
that the build reads. Passing an Environment around instead of reading os.environ and
sys.path directly allows tests to use a fixed environment.
"""

import os
import sys
import typing as t

from nativebuild.utils.util import on_windows


class Environment:
    """
    Environment of the current process.
    """

    def __init__(self, env: t.Optional[t.Dict[str, str]] = None, search_path: t.Optional[t.List[str]] = None,
                 windows: t.Optional[bool] = None, path_separator: str = os.pathsep):
        """
        Creates an environment. Every value that isn't passed is read from the current process.

        :param env: environment variables
        :param search_path: module search path entries
        :param windows: running on windows?
        :param path_separator: separator of the entries of search path strings
        """
        self._env = env
        self._search_path = search_path
        self.windows = on_windows() if windows is None else windows  # type: bool
        """ Running on windows? """
        self.path_separator = path_separator  # type: str
        """ Separator of the entries of search path strings like PATH """

    def getenv(self, key: str, default: t.Optional[str] = None) -> t.Optional[str]:
        """ Returns the value of the passed environment variable """
        env = os.environ if self._env is None else self._env
        return env.get(key, default)

    def search_path_entries(self) -> t.List[str]:
        """
        Returns the entries of the module search path.
        The empty entry (the current working directory) is replaced by the absolute path of the working directory.
        """
        entries = sys.path if self._search_path is None else self._search_path
        return [entry or os.getcwd() for entry in entries]

    def search_path(self) -> str:
        """ Returns the module search path as a single string """
        return self.path_separator.join(self.search_path_entries())

    def executable_path_entries(self) -> t.List[str]:
        """ Returns the entries of the PATH environment variable """
        return [entry for entry in self.getenv("PATH", "").split(self.path_separator) if entry]
