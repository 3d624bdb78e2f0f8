"""
Compiles modules into the scratch directory.
"""

import logging
import os
import py_compile
import time
import typing as t

import click
import humanfriendly

from nativebuild.utils.util import NativeBuildError


class CompileFailure(NativeBuildError):
    """
    Error raised if a module couldn't be compiled.
    """

    def __init__(self, unit: str, cause: BaseException):
        super().__init__()
        self.unit = unit  # type: str
        """ Name of the module """
        self.cause = cause  # type: BaseException
        """ Underlying error """

    def __str__(self) -> str:
        return "Could not compile {}: {}".format(self.unit, self.cause)


class UnitCompiler:
    """
    Compiles single modules.
    """

    def compile(self, unit: str):
        """
        Compile the module with the passed name.

        :raises CompileFailure: if the module couldn't be compiled
        """
        raise NotImplementedError()


class PyUnitCompiler(UnitCompiler):
    """
    Compiles modules with py_compile into sourceless byte code files below the compile path,
    so that the compile path can be used as an entry of a module search path.
    """

    def __init__(self, compile_path: str, source_roots: t.List[str], search_path: t.List[str] = None):
        """
        Creates a compiler.

        :param compile_path: directory the byte code files are written to
        :param source_roots: directories that are searched for the module sources first
        :param search_path: directories that are searched afterwards (e.g. the module search path)
        """
        self.compile_path = compile_path  # type: str
        self.dirs = list(source_roots) + list(search_path or [])  # type: t.List[str]
        """ Directories that are searched for module sources, in this order """

    def find_source(self, unit: str) -> t.Tuple[str, str]:
        """
        Find the source file of the passed module.

        :param unit: module name
        :return: (source file, path of the source file relative to its source directory)
        :raises FileNotFoundError: if no source file exists
        """
        parts = unit.split(".")
        candidates = [os.path.join(*parts) + ".py", os.path.join(*(parts + ["__init__.py"]))]
        for directory in self.dirs:
            for candidate in candidates:
                path = os.path.join(directory, candidate)
                if os.path.isfile(path):
                    return path, candidate
        raise FileNotFoundError("No source file for module {} in {}".format(unit, self.dirs))

    def compile(self, unit: str):
        try:
            source, rel_path = self.find_source(unit)
            target = os.path.join(self.compile_path, rel_path[:-len(".py")] + ".pyc")
            logging.debug("Compile {} into {}".format(source, target))
            py_compile.compile(source, cfile=target, dfile=rel_path, doraise=True)
        except (py_compile.PyCompileError, OSError) as err:
            raise CompileFailure(unit, err)


def compile_units(units: t.List[str], compiler: UnitCompiler, out: t.Callable[[str], None] = click.echo):
    """
    Compile the passed modules in order. Stops at the first module that couldn't be compiled.

    :param units: names of the modules
    :param compiler: used compiler
    :param out: function that gets the progress lines
    :raises CompileFailure: if a module couldn't be compiled
    """
    start = time.time()
    for unit in units:
        out("Compiling {}".format(unit))
        compiler.compile(unit)
    logging.info("Compiled {} modules in {}".format(len(units), humanfriendly.format_timespan(time.time() - start)))
