"""
Implements basic type checking for the structures that come directly from the user
(settings files and ``deps.yaml`` descriptors).

The Type instances are usable with the standard isinstance function::

    isinstance(["src"], List(Str()))

Type instances also support the "|" operator (produces Either(one, two)) and
can be annotated with a description and a default value via "//"::

    Str() // Default("classes") // Description("Scratch directory")
"""

import typing as t

__all__ = [
    "Type",
    "Exact",
    "ExactEither",
    "T",
    "Any",
    "Bool",
    "Str",
    "Description",
    "Default",
    "Either",
    "Optional",
    "List",
    "Dict",
    "verbose_isinstance",
    "typecheck",
]


class ConstraintError(ValueError):
    """
    Error that is thrown if a constraint isn't met.
    """
    pass


class Info:
    """
    Information object that is used to produce meaningful type check error messages.
    """

    def __init__(self, value_name: str = None, value = None, _app_str: str = None):
        """
        Creates a new info object.

        :param value_name: name of the value that is type checked
        :param value: value that is type checked
        """
        self.value_name = value_name  # type: str
        """ Name of the value that is typechecked """
        self._app_str = _app_str or ""  # type: str
        if value_name is None:
            self._value_name = "value {{!r}}{}".format(self._app_str)
        else:
            self._value_name = "{}{} of value {{!r}}".format(self.value_name, self._app_str)
        self.value = value
        """ Main value that is type checked """
        self.has_value = value is not None  # type: bool
        """ Is the value property of this info object set to a meaningful value? """

    def set_value(self, value):
        """ Set the main value of this object """
        self.value = value
        self.has_value = True

    def add_to_name(self, app_str: str) -> 'Info':
        """
        Creates a new info object based on this one with the given appendix to its value representation.
        It's used to give information about what part of the main value is currently examined.
        """
        return Info(self.value_name, self.value, self._app_str + app_str)

    def _str(self) -> str:
        return self._value_name.format(self.value)

    def errormsg(self, constraint: 'Type', msg: str = None) -> 'InfoMsg':
        """
        Creates an info message object with the passed expected type and the optional message.

        :param constraint: passed expected type
        :param msg: additional message, it should give more information about why the constraint isn't met
        """
        app = ": " + msg if msg else ""
        return InfoMsg("{} hasn't the expected type {}{}".format(self._str(), constraint, app))

    def errormsg_cond(self, cond: bool, constraint: 'Type', msg: str = None) -> 'InfoMsg':
        if cond:
            return InfoMsg(True)
        return self.errormsg(constraint, msg)

    def errormsg_non_existent(self, constraint: 'Type') -> 'InfoMsg':
        """
        Creates an info message object that says that the currently examined part of the value is missing.
        """
        return InfoMsg("{} is non existent, expected value of type {}".format(self._str(), constraint))

    def errormsg_unknown_key(self, constraint: 'Type', key) -> 'InfoMsg':
        return InfoMsg("{} has the unexpected key {!r}, expected value of type {}".format(self._str(), key,
                                                                                          constraint))

    def wrap(self, result: bool) -> 'InfoMsg':
        """
        Wrap the passed bool into a InfoMsg object.
        """
        return InfoMsg(result)


class InfoMsg:
    """
    Simple message class used by the Info class.
    """

    def __init__(self, msg_or_bool: t.Union[str, bool]):
        """
        Creates an message object.

        :param msg_or_bool: if the value isn't true than is expected to be unsuccessful
        """
        self.success = msg_or_bool is True  # type: bool
        """ Was the type checking successful? """
        self.msg = msg_or_bool if isinstance(msg_or_bool, str) else str(self.success)  # type: str
        """ The error message or true if the type checking was successful """

    def __str__(self) -> str:
        return self.msg

    def __bool__(self) -> bool:
        return self.success


class Description:
    """
    A description of a Type, that annotates it.
    Usage example::

        Str() // Description("Description of Str()")
    """

    def __init__(self, description: str):
        typecheck(description, str)
        self.description = description
        """ Description string """

    def __str__(self) -> str:
        return self.description


class Default:
    """
    A default value annotation for a Type.
    Allows to use Dict(...).get_default() -> dict.
    """

    def __init__(self, default):
        self.default = default
        """ Default value of the annotated type """


class Type(object):
    """
    A simple type checker type class.
    """

    def __init__(self):
        self.description = None  # type: t.Optional[str]
        """ Description of this type instance """
        self.default = None  # type: t.Optional[Default]
        """ Default value of this type instance """

    def __instancecheck__(self, value, info: Info = None) -> InfoMsg:
        """
        Checks whether or not the passed value has the type specified by this instance.

        :param value: passed value
        :param info: info object for creating error messages
        """
        info = info or Info()
        if not info.has_value:
            info.set_value(value)
        return self._instancecheck_impl(value, info)

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        """
        Checks whether or not the passed value has the type specified by this type instance.
        Implemented by all sub classes.
        """
        return info.wrap(False)

    def __str__(self) -> str:
        return "Type()"

    def _validate_types(self, *types: 'Type'):
        for type in types:
            if not isinstance(type, Type):
                raise ConstraintError("{} is not an instance of a Type subclass".format(type))

    def __or__(self, other: 'Type') -> 'Either':
        """
        Alias for Either(self, other).
        """
        return Either(self, other)

    def __floordiv__(self, other: t.Union[str, Description, Default]) -> 'Type':
        """
        Annotates this type with a description (strings or Description objects) or a default value.
        """
        if isinstance(other, str) or isinstance(other, Description):
            self.description = str(other)
            return self
        if isinstance(other, Default):
            self.default = other
            typecheck(self.default.default, self)
            return self
        raise ConstraintError("Can't annotate {} with {!r}".format(self, other))

    def get_default(self) -> t.Any:
        """
        Returns the default value of this type
        :raises: ValueError if the default value isn't set
        """
        if self.default is None:
            raise ValueError("{} has no default value.".format(self))
        return self.default.default

    def has_default(self) -> bool:
        """
        Does this type instance have an default value?
        """
        return self.default is not None


class Exact(Type):
    """
    Checks for value equivalence.
    """

    def __init__(self, exp_value):
        super().__init__()
        self.exp_value = exp_value
        """ Expected value """

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        return info.errormsg_cond(value == self.exp_value, self)

    def __str__(self) -> str:
        return "Exact({!r})".format(self.exp_value)


class Either(Type):
    """
    Checks for the value to be of one of several types.
    """

    def __init__(self, *types: Type):
        super().__init__()
        self._validate_types(*types)
        self.types = list(types)
        """ Possible types """

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        for type in self.types:
            if type.__instancecheck__(value, info):
                return info.wrap(True)
        return info.errormsg(self)

    def __str__(self) -> str:
        return "Either({})".format("|".join(str(type) for type in self.types))


class ExactEither(Type):
    """
    Checks for the value to be of one of several exact values.
    """

    def __init__(self, *exp_values):
        super().__init__()
        self.exp_values = list(exp_values)
        """ Expected values """

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        return info.errormsg_cond(value in self.exp_values, self)

    def __str__(self) -> str:
        return "ExactEither({})".format("|".join(repr(val) for val in self.exp_values))


class Any(Type):
    """
    Checks for the value to be of any type.
    """

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        return info.wrap(True)

    def __str__(self) -> str:
        return "Any"


class T(Type):
    """
    Wrapper around a native type.
    """

    def __init__(self, native_type: type):
        super().__init__()
        if not isinstance(native_type, type):
            raise ConstraintError("{} is not a native type".format(native_type))
        self.native_type = native_type
        """ Native type that is wrapped """

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        return info.errormsg_cond(isinstance(value, self.native_type), self)

    def __str__(self) -> str:
        return "T({})".format(self.native_type.__name__)


class Optional(Either):
    """
    Checks that the value is either None or of another Type.
    """

    def __init__(self, other_type: Type):
        super().__init__(Exact(None), other_type)


class List(Type):
    """
    Checks for the value to be a list with elements of a given type.
    """

    def __init__(self, elem_type: Type = None):
        """
        Creates a new instance.

        :param elem_type: type of the list elements
        """
        super().__init__()
        self.elem_type = elem_type or Any()  # type: Type
        """ Expected type of the list elements """
        self._validate_types(self.elem_type)

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        if not isinstance(value, list):
            return info.errormsg(self)
        for (i, elem) in enumerate(value):
            res = self.elem_type.__instancecheck__(elem, info.add_to_name("[{}]".format(i)))
            if not res:
                return res
        return info.wrap(True)

    def __str__(self) -> str:
        return "List({})".format(self.elem_type)


class Dict(Type):
    """
    Checks for the value to be a dictionary with expected keys whose values satisfy given type constraints.
    Missing keys are allowed if their type has a default value.
    """

    def __init__(self, data: t.Dict[t.Any, Type] = None, unknown_keys: bool = False, key_type: Type = None,
                 value_type: Type = None):
        """
        Creates a new instance.

        :param data: dictionary with the expected keys and the expected types of the associated values
        :param unknown_keys: allow keys that are not present in data?
        :param key_type: expected Type of all other dictionary keys
        :param value_type: expected Type of all other dictionary values
        """
        super().__init__()
        self.data = data or {}  # type: t.Dict[t.Any, Type]
        self.unknown_keys = unknown_keys  # type: bool
        """ Are keys allowed that are not present in data? """
        self.key_type = key_type or Any()  # type: Type
        """ Expected Type of all other dictionary keys """
        self.value_type = value_type or Any()  # type: Type
        """ Expected Type of all other dictionary values """
        self._validate_types(*self.data.values())
        self._validate_types(self.key_type, self.value_type)

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        if not isinstance(value, dict):
            return info.errormsg(self)
        for key in self.data:
            if key in value:
                res = self.data[key].__instancecheck__(value[key], info.add_to_name("[{!r}]".format(key)))
                if not res:
                    return res
            elif not self.data[key].has_default():
                return info.add_to_name("[{!r}]".format(key)).errormsg_non_existent(self.data[key])
        for key in value:
            if key in self.data:
                continue
            if not self.unknown_keys:
                return info.errormsg_unknown_key(self, key)
            res = self.key_type.__instancecheck__(key, info.add_to_name("(key={!r})".format(key)))
            if not res:
                return res
            res = self.value_type.__instancecheck__(value[key], info.add_to_name("[{!r}]".format(key)))
            if not res:
                return res
        return info.wrap(True)

    def __str__(self) -> str:
        data_str = ", ".join("{!r}: {}".format(key, self.data[key]) for key in self.data)
        return "Dict({{{}}}, unknown_keys={})".format(data_str, self.unknown_keys)

    def __getitem__(self, key) -> Type:
        """
        Returns the Type of the keys value.
        """
        if key in self.data:
            return self.data[key]
        if self.unknown_keys:
            return self.value_type
        raise KeyError(key)

    def get_default(self) -> dict:
        default_dict = {}
        if self.default is not None:
            default_dict = dict(self.default.default)
        for key in self.data:
            if key not in default_dict:
                default_dict[key] = self.data[key].get_default()
        return default_dict

    def has_default(self) -> bool:
        default_dict = self.default.default if self.default is not None else {}
        return all(self.data[key].has_default() for key in self.data if key not in default_dict)


class Str(Type):
    """
    Checks for the value to be a string an optionally meet some constraints.
    """

    def __init__(self, constraint: t.Callable[[t.Any], bool] = None):
        """
        Creates an instance.

        :param constraint: function that returns True if the user defined constraint is satisfied
        """
        super().__init__()
        self.constraint = constraint  # type: t.Optional[t.Callable[[t.Any], bool]]
        """ Function that returns True if the user defined constraint is satisfied """

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        if not isinstance(value, str):
            return info.errormsg(self)
        if self.constraint is not None and not self.constraint(value):
            return info.errormsg(self)
        return info.wrap(True)

    def __str__(self) -> str:
        return "Str()"


class Bool(Type):
    """
    Checks for the value to be a bool.
    """

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        return info.errormsg_cond(value is True or value is False, self)

    def __str__(self) -> str:
        return "Bool()"


def verbose_isinstance(value, type: t.Union[Type, type], value_name: str = None) -> InfoMsg:
    """
    Verbose version of isinstance that returns a InfoMsg object.

    :param value: value to check
    :param type: type or Type to check for
    :param value_name: name of the passed value (improves the error message)
    """
    if not isinstance(type, Type):
        type = T(type)
    return type.__instancecheck__(value, Info(value_name, value))


def typecheck(value, type: t.Union[Type, type], value_name: str = None):
    """
    Like verbose_isinstance but raises an error if the value hasn't the expected type.

    :param value: passed value
    :param type: expected type of the value
    :param value_name: optional description of the value
    :raises: TypeError
    """
    ret = verbose_isinstance(value, type, value_name)
    if not ret:
        raise TypeError(str(ret))
