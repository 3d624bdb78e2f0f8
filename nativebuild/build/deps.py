"""
Reads the install, user and project dependency descriptors (``deps.yaml`` files)
and merges them into the effective configuration.
"""

import copy
import logging
import os
import typing as t

import click
import yaml

from nativebuild.utils.environment import Environment
from nativebuild.utils.settings import Settings
from nativebuild.utils.typecheck import *
from nativebuild.utils.util import NativeBuildError

LAYERS = ["install", "user", "project"]
""" Descriptor layers, ordered by increasing precedence """

INSTALL_DESCRIPTOR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "data", "deps.yaml")
""" Descriptor shipped with nativebuild """

descriptor_scheme = Dict({
    "paths": List(Str()) // Default([]) // Description("Source roots, relative to the project directory"),
    "deps": Dict(unknown_keys=True, key_type=Str(), value_type=Dict(unknown_keys=True) | Exact(None))
            // Default({}) // Description("Dependencies with their coordinates")
}, unknown_keys=True, key_type=Str())  # type: Dict
""" Type scheme of a single descriptor """


class ConfigNotFound(NativeBuildError):
    """
    Error raised if none of the dependency descriptors exists.
    """

    def __init__(self, paths: t.Dict[str, str]):
        super().__init__()
        self.paths = paths  # type: t.Dict[str, str]
        """ Searched descriptor files per layer """

    def __str__(self) -> str:
        return "No dependency descriptor found, looked for {}".format(
            ", ".join("{} ({})".format(self.paths[layer], layer) for layer in LAYERS if layer in self.paths))


class InvalidDescriptor(NativeBuildError):
    """
    Error raised if a descriptor file isn't valid YAML.
    """

    def __init__(self, path: str, cause: yaml.YAMLError):
        super().__init__()
        self.path = path  # type: str
        """ Path of the descriptor file """
        self.cause = cause  # type: yaml.YAMLError
        """ Error raised by the YAML parser """

    def __str__(self) -> str:
        return "Could not parse descriptor {!r}: {}".format(self.path, self.cause)


def descriptor_paths(environment: Environment = None, project_dir: str = ".") -> t.Dict[str, str]:
    """
    Returns the conventional locations of the install, user and project descriptors.

    :param environment: used environment, the NATIVEBUILD_CONFIG variable overrides the user config directory
    :param project_dir: directory of the project
    """
    environment = environment or Environment()
    user_dir = environment.getenv("NATIVEBUILD_CONFIG") or click.get_app_dir(Settings.app_name)
    file_name = Settings()["build/deps_file"]
    return {
        "install": INSTALL_DESCRIPTOR,
        "user": os.path.join(user_dir, "deps.yaml"),
        "project": os.path.join(project_dir, file_name)
    }


def read_descriptor(path: str) -> t.Optional[t.Dict[str, t.Any]]:
    """
    Reads a single descriptor.

    :param path: path of the descriptor file
    :return: the descriptor or None if the file doesn't exist
    :raises InvalidDescriptor: if the file isn't valid YAML
    :raises: TypeError if the descriptor doesn't match the descriptor scheme
    """
    if not os.path.isfile(path):
        return None
    with open(path, "r") as f:
        try:
            descriptor = yaml.safe_load(f)
        except yaml.YAMLError as err:
            raise InvalidDescriptor(path, err)
    if descriptor is None:
        descriptor = {}
    typecheck(descriptor, descriptor_scheme, "descriptor {!r}".format(path))
    return descriptor


def read_descriptors(paths: t.Dict[str, str]) -> t.List[t.Optional[t.Dict[str, t.Any]]]:
    """
    Reads the descriptors of all layers, missing ones are None.
    """
    return [read_descriptor(paths[layer]) if layer in paths else None for layer in LAYERS]


def _merge_or_replace(old, new):
    if isinstance(old, dict) and isinstance(new, dict):
        merged = dict(old)
        merged.update(new)
        return merged
    return new


def merge_descriptors(descriptors: t.List[t.Optional[t.Dict[str, t.Any]]]) -> t.Dict[str, t.Any]:
    """
    Merges the passed descriptors left to right. Later values replace earlier ones,
    except if both values are maps, then the later map is merged into the earlier one.
    Missing descriptors (None) are skipped.

    :param descriptors: descriptors ordered by increasing precedence
    :return: effective configuration, containing at least the keys "paths" and "deps"
    """
    merged = copy.deepcopy(descriptor_scheme.get_default())
    for descriptor in descriptors:
        if descriptor is None:
            continue
        for key, value in descriptor.items():
            merged[key] = _merge_or_replace(merged.get(key), copy.deepcopy(value))
    return merged


def merged_deps(paths: t.Dict[str, str] = None) -> t.Dict[str, t.Any]:
    """
    Reads and merges the install, user and project descriptors.

    :param paths: descriptor file per layer, defaults to the conventional locations
    :return: effective configuration
    :raises ConfigNotFound: if none of the descriptors exists
    """
    paths = paths or descriptor_paths()
    descriptors = read_descriptors(paths)
    if all(descriptor is None for descriptor in descriptors):
        raise ConfigNotFound(paths)
    for layer, descriptor in zip(LAYERS, descriptors):
        if descriptor is not None:
            logging.debug("Use {} descriptor {}".format(layer, paths[layer]))
    return merge_descriptors(descriptors)
