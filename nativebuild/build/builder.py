import logging
import typing as t
from collections import namedtuple

import click

from nativebuild.build.classpath import native_image_classpath
from nativebuild.build.compile_path import prepare_compile_path
from nativebuild.build.compiler import UnitCompiler, PyUnitCompiler, compile_units
from nativebuild.build.deps import merged_deps, descriptor_paths
from nativebuild.build.native_image import BinaryNotFound, exec_native_image, munge_entry_point
from nativebuild.build.units import discover_units
from nativebuild.utils.environment import Environment
from nativebuild.utils.process import ProcessRunner
from nativebuild.utils.typecheck import *

BuildOptions = namedtuple("BuildOptions", ["entry_unit", "compile_path", "precompile", "native_image_path", "echo",
                                           "compiler_args"],
                          defaults=("classes", "", None, False, ()))

options_scheme = Dict({
    "entry_unit": Str(lambda x: x != ""),
    "compile_path": Str(lambda x: x != ""),
    "precompile": Optional(Str()),
    "native_image_path": Optional(Str()),
    "echo": Bool(),
    "compiler_args": T(tuple) | List(Str())
})
""" Type scheme of the build options (as a dict) """


class NativeImageBuilder:
    """
    Builds a native image: compiles the modules of the project into the compile path
    and calls native-image with the resulting search path.
    """

    def __init__(self, options: BuildOptions, environment: Environment = None,
                 descriptor_paths: t.Dict[str, str] = None, compiler: UnitCompiler = None,
                 runner: ProcessRunner = None, out: t.Callable[[str], None] = click.echo):
        """
        Creates a new builder.

        :param options: build options
        :param environment: environment that provides the search path and the environment variables
        :param descriptor_paths: dependency descriptor file per layer, defaults to the conventional locations
        :param compiler: compiler for the modules, defaults to a PyUnitCompiler for the compile path
        :param runner: runner for native-image
        :param out: function that gets the progress lines
        """
        typecheck(options._asdict(), options_scheme, "build options")
        self.options = options  # type: BuildOptions
        self.environment = environment or Environment()  # type: Environment
        self.descriptor_paths = descriptor_paths  # type: t.Optional[t.Dict[str, str]]
        self.compiler = compiler  # type: t.Optional[UnitCompiler]
        self.runner = runner or ProcessRunner()  # type: ProcessRunner
        self.out = out

    def build(self) -> int:
        """
        Build the native image.

        :return: exit code of native-image
        :raises BinaryNotFound: if no native-image binary is configured
        :raises ConfigNotFound: if no dependency descriptor exists
        :raises IOFailure: if the compile path couldn't be prepared
        :raises CompileFailure: if a module couldn't be compiled
        :raises LaunchFailure: if native-image couldn't be started
        """
        options = self.options
        if not options.native_image_path:
            raise BinaryNotFound()
        deps_map = merged_deps(self.descriptor_paths or descriptor_paths(self.environment))
        units = discover_units(options.entry_unit, options.precompile, deps_map["paths"])
        logging.debug("Modules to compile: {}".format(", ".join(units)))

        prepare_compile_path(options.compile_path)
        compiler = self.compiler or PyUnitCompiler(options.compile_path, deps_map["paths"],
                                                   self.environment.search_path_entries())
        compile_units(units, compiler, self.out)

        logging.info("Run native-image")
        return exec_native_image(options.native_image_path,
                                 list(options.compiler_args),
                                 native_image_classpath(options.compile_path, self.environment),
                                 munge_entry_point(options.entry_unit),
                                 echo=options.echo,
                                 runner=self.runner,
                                 environment=self.environment,
                                 out=self.out)
