import copy
import logging
import os
import typing as t

import click
import yaml

from nativebuild.utils.typecheck import *
from nativebuild.utils.util import recursive_exec_for_leafs, Singleton


class SettingsError(ValueError):
    """ Error raised if something with the settings goes wrong """
    pass


class Settings(metaclass=Singleton):
    """
    Manages the Settings.
    The settings keys and sub keys are combined by a slash, e.g. "build/compile_path".
    """

    config_file_name = "nativebuild.yaml"  # type: str
    """ Default name of the configuration file in the current working directory """
    app_name = "nativebuild"  # type: str
    """ Name of the application directory (see click.get_app_dir) """
    type_scheme = Dict({
        "settings": Str() // Default("") // Description("Additional settings file"),
        "log_level": ExactEither("debug", "info", "warn", "error", "quiet") // Default("info")
                     // Description("Logging level"),
        "build": Dict({
            "compile_path": Str() // Default("classes")
                            // Description("Scratch directory the compilation units are compiled into, "
                                           "it is cleared at the start of every build"),
            "precompile": Str() // Default("")
                          // Description("Modules to compile before the entry module, comma separated"),
            "native_image_path": Str() // Default("")
                                 // Description("Use a specific native-image binary"),
            "echo": Bool() // Default(False) // Description("Print out the native-image invocation"),
            "deps_file": Str() // Default("deps.yaml")
                         // Description("Name of the dependency descriptor file of the project")
        }, unknown_keys=True)
    }, unknown_keys=True)  # type: Dict
    """ Type scheme of the settings """

    def __init__(self):
        """
        Initializes a Settings singleton object with the default settings.
        The settings files are loaded by load_files.

        :raises: SettingsError if the defaults aren't in the format described via the type_scheme class property
        """
        self.prefs = copy.deepcopy(self.type_scheme.get_default())  # type: t.Dict[str, t.Any]
        """ The set configurations """
        res = self._validate_settings_dict(self.prefs, "default settings")
        if not res:
            raise SettingsError(str(res))
        self._setup()

    def load_files(self):
        """ Loads the configuration files from the config and the current directory """
        self.load_from_config_dir()
        self.load_from_current_dir()
        self._setup()

    def _setup(self):
        """
        Applies the log level setting to the root logger.
        """
        log_level = self["log_level"]
        mapping = {
            "debug": logging.DEBUG,
            "info": logging.INFO,
            "warn": logging.WARNING,
            "error": logging.ERROR,
            "quiet": logging.ERROR
        }
        logging.getLogger().setLevel(mapping[log_level])

    def reset(self):
        """
        Resets the current settings to the defaults.
        """
        self.prefs = copy.deepcopy(self.type_scheme.get_default())
        self._setup()

    def _validate_settings_dict(self, data: t.Dict[str, t.Any], description: str = None):
        """
        Check whether the passed dictionary matches the settings type scheme.

        :param data: passed dictionary
        :param description: short description of the passed dictionary
        :return: True like object if valid, else string like object which is the error message
        """
        return verbose_isinstance(data, self.type_scheme, description or "Settings")

    def load_file(self, file: str):
        """
        Loads the configuration from the configuration YAML file.

        :param file: path to the file
        :raises: SettingsError if the settings file is incorrect or doesn't exist
        """
        tmp = copy.deepcopy(self.prefs)
        try:
            with open(file, 'r') as stream:
                map = yaml.safe_load(stream) or {}

            def func(key, path, value):
                self._set(path, value)

            recursive_exec_for_leafs(map, func)
        except (yaml.YAMLError, IOError) as err:
            self.prefs = tmp
            raise SettingsError(str(err))
        res = self._validate_settings_dict(self.prefs, "settings with ones from file '{}'".format(file))
        if not res:
            self.prefs = tmp
            raise SettingsError(str(res))
        self._setup()

    def load_from_config_dir(self):
        """
        Load the config file from the application directory (e.g. in the users home folder) if it exists.
        """
        conf = os.path.join(click.get_app_dir(self.app_name), "config.yaml")
        if os.path.exists(conf) and os.path.isfile(conf):
            self.load_file(conf)

    def load_from_current_dir(self):
        """
        Load the configuration from the configuration file in the current working directory if it exists.
        """
        if os.path.exists(self.config_file_name) and os.path.isfile(self.config_file_name):
            self.load_file(self.config_file_name)

    def get(self, key: str) -> t.Any:
        """
        Get the setting with the given key.

        :param key: name of the setting
        :return: value of the setting
        :raises: SettingsError if the setting doesn't exist
        """
        path = key.split("/")
        if not self.validate_key_path(path):
            raise SettingsError("No such setting {}".format(key))
        data = self.prefs
        for sub in path:
            data = data[sub]
        return data

    def __getitem__(self, key: str) -> t.Any:
        """
        Alias for self.get(self, key).
        """
        return self.get(key)

    def _set(self, path: t.List[str], value):
        """
        Set the setting at the passed path.

        :param path: passed key path
        :param value: new value
        """
        tmp_pref = self.prefs
        for key in path[0:-1]:
            if key not in tmp_pref:
                tmp_pref[key] = {}
            tmp_pref = tmp_pref[key]
        tmp_pref[path[-1]] = value
        if path == ["settings"] and value != "":
            self.load_file(value)

    def set(self, key: str, value, validate: bool = True):
        """
        Sets the setting key to the passed new value

        :param key: settings key
        :param value: new value
        :param validate: validate after the setting operation
        :raises: SettingsError if the setting isn't valid
        """
        tmp = copy.deepcopy(self.prefs)
        path = key.split("/")
        if not self.validate_key_path(path[:-1]):
            raise SettingsError("Setting domain {} doesn't exist".format("/".join(path[:-1])))
        self._set(path, value)
        if validate:
            res = self._validate_settings_dict(self.prefs, "settings with new setting ({}={!r})".format(key, value))
            if not res:
                self.prefs = tmp
                raise SettingsError(str(res))
        self._setup()

    def __setitem__(self, key: str, value):
        """
        Alias for self.set(key, value).
        """
        self.set(key, value)

    def validate_key_path(self, path: t.List[str]) -> bool:
        """
        Validates a path into in to the settings trees,
        :param path: list of sub keys
        :return: Is this key path valid?
        """
        tmp = self.prefs
        for item in path:
            if not isinstance(tmp, dict) or item not in tmp:
                return False
            tmp = tmp[item]
        return True

    def get_type_scheme(self, key: str) -> Type:
        """
        Returns the type scheme of the given key.

        :param key: given key
        :return: type scheme
        :raises: SettingsError if the setting with the given key doesn't exist
        """
        tmp_typ = self.type_scheme
        try:
            for subkey in key.split("/"):
                tmp_typ = tmp_typ[subkey]
        except KeyError:
            raise SettingsError("Setting {} doesn't exist".format(key))
        return tmp_typ
