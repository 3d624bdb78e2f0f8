"""
Utility functions and classes that don't depend on the rest of the nativebuild code base.
"""

import logging
import sys
import typing as t

from rainbow_logging_handler import RainbowLoggingHandler


class NativeBuildError(Exception):
    """
    Base class of all errors that abort a build
    """
    pass


def recursive_exec_for_leafs(data: dict, func, _path_prep = []):
    """
    Executes the function for every leaf key (a key without any sub keys) of the data dict tree.

    :param data: dict tree
    :param func: function that gets passed the leaf key, the key path and the actual value
    """
    if not isinstance(data, dict):
        return
    for subkey in data.keys():
        if type(data[subkey]) is dict:
            recursive_exec_for_leafs(data[subkey], func, _path_prep=_path_prep + [subkey])
        else:
            func(subkey, _path_prep + [subkey], data[subkey])


def on_windows() -> bool:
    """ Is the current operating system a windows? """
    return sys.platform.startswith("win")


class Singleton(type):
    """
    Singleton meta class.
    @see http://stackoverflow.com/a/6798042
    """
    _instances = {}
    def __call__(cls, *args, **kwargs):
        if cls not in cls._instances:
            cls._instances[cls] = super(Singleton, cls).__call__(*args, **kwargs)
        return cls._instances[cls]


class InsertionTimeOrderedDict:
    """
    A dictionary which's elements are sorted by their insertion time.
    Setting an already present key keeps its original position.
    """

    def __init__(self):
        self._dict = {}
        self._keys = []

    def __setitem__(self, key, value):
        """ Set the value of the item with the passed key """
        if key not in self._dict:
            self._keys.append(key)
        self._dict[key] = value

    def __contains__(self, key) -> bool:
        return key in self._dict

    def __iter__(self):
        """ Iterate over all keys """
        return self._keys.__iter__()

    def keys(self) -> t.List:
        """ Returns all keys of this dictionary. They are sorted by their insertion time. """
        return list(self._keys)

    @classmethod
    def from_list(cls, items: t.Optional[t.Iterable], key_func: t.Callable[[t.Any], t.Any] = lambda x: x) \
            -> 'InsertionTimeOrderedDict':
        """
        Creates an ordered dict out of a list of elements.
        Later elements with an already present key don't change the position of the key.

        :param items: list of elements
        :param key_func: function that returns a key for each passed list element
        :return: created ordered dict with the elements in the same order as in the passed list
        """
        ret = InsertionTimeOrderedDict()
        for item in items or []:
            key = key_func(item)
            if key not in ret:
                ret[key] = item
        return ret


handler = RainbowLoggingHandler(sys.stderr, color_funcName=('black', 'yellow', True))
""" Colored logging handler that is used for the root logger """
handler.setFormatter(logging.Formatter("[%(asctime)s] %(message)s"))
logging.getLogger().addHandler(handler)
