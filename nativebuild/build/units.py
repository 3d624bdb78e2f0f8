"""
Finds the modules (compilation units) that have to be compiled before native-image is called.
"""

import os
import typing as t

from nativebuild.utils.util import InsertionTimeOrderedDict

SOURCE_SUFFIX = ".py"


def _is_module_name(name: str) -> bool:
    return name.isidentifier()


def find_modules_in_dir(directory: str) -> t.List[str]:
    """
    Returns the names of all modules below the passed source root, e.g. "app.core" for "app/core.py"
    and "app" for "app/__init__.py". Hidden directories, ``__pycache__`` directories and files whose
    names aren't valid module names are skipped.

    :param directory: source root
    :return: module names in the order of the sorted file paths, empty if the directory doesn't exist
    """
    modules = []
    if not os.path.isdir(directory):
        return modules
    for dirpath, dirnames, filenames in os.walk(directory):
        dirnames[:] = sorted(name for name in dirnames if _is_module_name(name) and name != "__pycache__")
        rel = os.path.relpath(dirpath, directory)
        package = [] if rel == os.curdir else rel.split(os.sep)
        for filename in sorted(filenames):
            stem, ext = os.path.splitext(filename)
            if ext != SOURCE_SUFFIX or not _is_module_name(stem):
                continue
            parts = package if stem == "__init__" else package + [stem]
            if parts:
                modules.append(".".join(parts))
    return modules


def parse_precompile(precompile: t.Optional[str]) -> t.List[str]:
    """
    Splits the comma separated list of modules that are compiled before the entry module.
    Empty entries are dropped.
    """
    return [name.strip() for name in (precompile or "").split(",") if name.strip()]


def discover_units(entry_unit: str, precompile: t.Optional[str], source_roots: t.Iterable[str]) -> t.List[str]:
    """
    Returns the modules to compile in the order they are compiled: the precompiled modules,
    the entry module and then all modules found in the source roots that aren't already listed.
    Every module occurs only once, at its first position.

    :param entry_unit: name of the entry module
    :param precompile: comma separated names of the modules to compile before the entry module
    :param source_roots: directories that are searched for modules, non existing ones are skipped
    """
    units = InsertionTimeOrderedDict.from_list(parse_precompile(precompile) + [entry_unit])
    for root in source_roots:
        for module in find_modules_in_dir(root):
            if module not in units:
                units[module] = module
    return units.keys()
