"""
This module simplifies the creation of click options from settings and their type schemes.
"""

import typing as t

import click
from click.core import ParameterSource

from nativebuild.utils.settings import Settings
from nativebuild.utils.typecheck import *


def settings_option(key: str, short: str = None, name: str = None, eager: bool = False) \
        -> t.Callable[[t.Callable], t.Callable]:
    """
    Is essentially a wrapper around click.option that creates an option for a setting.
    The help text is the description of the setting, the default is its current value.
    Options that are passed on the command line are stored in the settings, options that aren't passed
    leave the settings (e.g. from a settings file) untouched.

    :param key: settings key, e.g. "build/echo"
    :param short: short name of the option without the leading dash
    :param name: long name of the option without the leading dashes, defaults to the last part of the key
                 with underscores replaced by hyphens
    :param eager: process the option before all non eager options?
    """
    type_scheme = Settings().get_type_scheme(key)
    name = name or key.split("/")[-1].replace("_", "-")
    decls = ["--" + name] + (["-" + short] if short else [])

    def callback(ctx: click.Context, param: click.Parameter, value):
        if ctx.get_parameter_source(param.name) != ParameterSource.DEFAULT:
            Settings()[key] = value
        return Settings()[key]

    option_args = {
        "callback": callback,
        "expose_value": False,
        "is_eager": eager,
        "help": type_scheme.description,
        "default": type_scheme.get_default(),
        "show_default": True
    }
    if isinstance(type_scheme, Bool):
        option_args["is_flag"] = True
        option_args["show_default"] = False
    elif isinstance(type_scheme, ExactEither):
        option_args["type"] = click.Choice(type_scheme.exp_values)
    else:
        option_args["type"] = str
    return click.option(*decls, **option_args)
