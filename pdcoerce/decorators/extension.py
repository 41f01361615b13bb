"""This module describes an ``@extension_func`` decorator that transforms an
ordinary Python function into one that can accept managed arguments with custom
validators and dynamic defaults.

``pdcoerce`` uses these to expose its global settings.  For instance, the
default ``strict`` flag of :func:`combine() <pdcoerce.combine>` can be changed
by assigning to ``combine.strict``, and restored with ``del combine.strict``.
"""
from __future__ import annotations
from functools import wraps
import inspect
import threading
from types import MappingProxyType
from typing import Any, Callable, Mapping

from .base import EMPTY, Arguments, FunctionDecorator, Signature


######################
####    PUBLIC    ####
######################


def extension_func(func: Callable) -> Callable:
    """A decorator that allows a function to accept managed arguments with
    dynamic defaults.

    Parameters
    ----------
    func : Callable
        A Python function or other callable to be decorated.

    Returns
    -------
    ExtensionFunc
        A cooperative decorator that allows transparent access to the decorated
        function.  These objects manage default values and argument validators
        for the decorated callable.

    Notes
    -----
    The returned :class:`ExtensionFunc` inherits from
    :class:`threading.local <python:threading.local>`, which isolates its
    default values to the current thread.  Each instance inherits the default
    values of the main thread at the time it is first accessed.

    Examples
    --------
    .. doctest::

        >>> @extension_func
        ... def foo(bar, baz=2):
        ...     return bar, baz

        >>> @foo.argument
        ... def baz(val, context: dict) -> int:
        ...     return int(val)

        >>> foo(1)
        (1, 2)
        >>> foo.baz = "5"
        >>> foo(1)
        (1, 5)
        >>> del foo.baz
        >>> foo(1)
        (1, 2)
    """
    main_thread = []  # using a one-element list bypasses UnboundLocalError

    class _ExtensionFunc(ExtensionFunc):
        """A subclass of :class:`ExtensionFunc` that supports dynamic
        assignment of ``@properties`` without affecting other instances.
        """

        def __init__(self, _func: Callable):
            super().__init__(_func)

            # store attributes from main thread
            if not main_thread:
                main_thread.append(self._signature)

            # load attributes from main thread
            else:
                self._signature.copy_settings(main_thread[0])

    return _ExtensionFunc(func)


class ExtensionFunc(FunctionDecorator, threading.local):
    """A wrapper for a function that manages its arguments.

    Parameters
    ----------
    func : Callable
        The decorated function or other callable.

    Notes
    -----
    Whenever an argument is :meth:`registered <ExtensionFunc.argument>` with
    this function, it is added as a managed :class:`property <python:property>`
    with appropriate getter, setter, and deleter methods.  These are
    automatically derived from the validation function itself, and can be used
    to manage its default value externally, without touching any hard code.
    """

    _reserved = FunctionDecorator._reserved | {"_signature"}

    def __init__(self, func: Callable):
        super().__init__(func=func)
        self._signature = ExtensionSignature(func)

    ####################
    ####    BASE    ####
    ####################

    # NOTE: @properties will be added to this class by the @argument decorator

    @property
    def arguments(self) -> Mapping[str, Callable]:
        """A read-only mapping of all managed arguments to their respective
        validators.
        """
        return MappingProxyType(self._signature.validators)

    @property
    def settings(self) -> Mapping[str, Any]:
        """A read-only mapping of all managed arguments to their current
        values.

        Examples
        --------
        .. doctest::

            >>> from pdcoerce import combine
            >>> combine.settings
            mappingproxy({'strict': True, 'lossy': 'warn'})
        """
        return self._signature.settings

    def argument(
        self,
        func: Callable = None,
        *,
        name: str | None = None,
        default: Any = EMPTY
    ) -> Callable:
        """A decorator that transforms a validation function into a managed
        argument for this :class:`ExtensionFunc`.

        Parameters
        ----------
        name : str | None, default None
            The name of the argument that the validator validates.  If this is
            left as :data:`None <python:None>`, then the name of the validator
            will be used instead.
        default : Any, default EMPTY
            The default value to use for this argument.  This is implicitly
            passed to the validator itself.  If omitted, the default from the
            decorated function's signature is used instead.

        Returns
        -------
        Callable
            A decorated version of the validation function that automatically
            fills out its second positional argument (a ``context`` dict) with
            the current value of each managed argument.

        Raises
        ------
        TypeError
            If the decorated object is not callable, if its ``name`` conflicts
            with a built-in attribute of the :class:`ExtensionFunc`, or if
            ``name`` is absent from the function's signature.
        KeyError
            If a managed argument of the same name already exists.

        Notes
        -----
        Validation functions must accept at least two positional arguments:

        .. code:: python

            def validator(val, context: dict):
                ...

        Where ``val`` is an arbitrary input to the argument and ``context`` is
        a dictionary containing the values of the other arguments at the time
        the :class:`ExtensionFunc` was invoked.
        """

        def decorator(validator: Callable) -> Callable:
            """Attach a validation function to the ExtensionFunc as a managed
            property.
            """
            self._signature.check_validator(validator)

            # use name of validator as argument name if not explicitly given
            _name = name
            if _name is None:
                _name = validator.__name__
            elif not isinstance(_name, str):
                raise TypeError(f"name must be a string, not {type(_name)}")

            if _name in self._signature.validators:
                raise KeyError(f"argument '{_name}' already exists")
            if _name in dir(self):
                raise TypeError(f"'{_name}' is a reserved attribute")

            @wraps(validator)
            def validate_context(val, context=None, **kwargs):
                """Automatically populate `context` argument of validator."""
                if context is None:
                    context = self.settings
                return validator(val, context, **kwargs)

            # add argument to signature and generate @property
            prop = self._signature.register_argument(
                name=_name,
                validator=validate_context,
                default=default
            )
            setattr(type(self), _name, prop)
            return validate_context

        if func is None:
            return decorator
        return decorator(func)

    def reset_defaults(self) -> None:
        """Reset all arguments to their original defaults.

        This is equivalent to calling ``del`` on every managed argument.
        """
        self._signature.reset_defaults()

    ###############################
    ####    SPECIAL METHODS    ####
    ###############################

    def __call__(self, *args, **kwargs) -> Any:
        """Execute the decorated function with the managed arguments.

        Notes
        -----
        Validators are only called for the arguments that are explicitly passed
        to this method.  Defaults are validated when they are assigned.
        """
        bound = self._signature(*args, **kwargs)
        bound.validate()  # implicitly applies defaults
        return self.__wrapped__(*bound.args, **bound.kwargs)

    def __repr__(self) -> str:
        return self._signature.reconstruct(annotations=False)


class ExtensionSignature(Signature):
    """A :class:`Signature` that keeps track of managed arguments, their
    validators, and their original defaults.
    """

    def __init__(self, func: Callable):
        super().__init__(func=func)
        self.defaults = {
            par.name: par.default for par in self.parameters
            if par.default is not EMPTY
        }
        self.validators = {}

    @property
    def settings(self) -> Mapping[str, Any]:
        """A read-only mapping of managed arguments to their current values.
        """
        return MappingProxyType({
            par.name: par.default for par in self.parameters
            if par.name in self.validators and par.default is not EMPTY
        })

    def copy_settings(self, other: ExtensionSignature) -> None:
        """Copy the current settings of another signature.  This is used to
        seed a child thread's instance with the main thread's values.
        """
        self.signature = other.signature
        self.validators = other.validators.copy()
        self.defaults = other.defaults.copy()

    def reset_defaults(self) -> None:
        """Reset all settings to their hardcoded defaults."""
        self.parameters = tuple(
            par.replace(default=self.defaults.get(par.name, EMPTY))
            for par in self.parameters
        )

    def check_validator(self, validator: Callable) -> None:
        """Confirm that a validator is callable and accepts at least 2
        arguments: the value itself and a context dictionary.
        """
        if not callable(validator):
            raise TypeError(f"validator must be callable: {validator}")
        if len(inspect.signature(validator).parameters) < 2:
            raise TypeError(
                f"validator must accept at least 2 arguments: {validator}"
            )

    def register_argument(
        self,
        name: str,
        validator: Callable,
        default: Any = EMPTY
    ) -> property:
        """Add a managed argument to this signature.

        Returns
        -------
        property
            A managed :class:`property <python:property>` to be added to the
            :class:`ExtensionFunc` itself.  Getting it returns the current
            default, setting it passes the new value through the validator,
            and deleting it restores the original default.

        Raises
        ------
        TypeError
            If the argument name does not appear in the function's signature.
        """
        if name not in self.parameter_map:
            raise TypeError(f"'{self.func_name}()' has no argument '{name}'")

        # pass default value through validator
        if default is EMPTY:
            default = self.parameter_map[name].default
        if default is not EMPTY:
            default = validator(default)
            self.set_parameter(name, default=default)
            self.defaults[name] = default

        self.validators[name] = validator

        def getter(self) -> Any:
            """Get the value of a managed argument."""
            result = self._signature.parameter_map[name].default
            if result is EMPTY:
                raise TypeError(f"'{name}' has no default value")
            return result

        def setter(self, val: Any) -> None:
            """Set the value of a managed argument."""
            self._signature.set_parameter(name, default=validator(val))

        def deleter(self) -> None:
            """Replace the value of a managed argument with its default."""
            val = self._signature.defaults.get(name, EMPTY)
            self._signature.set_parameter(name, default=val)

        return property(getter, setter, deleter, doc=validator.__doc__)

    # pylint: disable=no-self-argument
    def __call__(__self, *args, **kwargs) -> ExtensionArguments:
        """Bind the arguments to this signature and return a corresponding
        :class:`ExtensionArguments` object.
        """
        bound = __self.signature.bind_partial(*args, **kwargs)
        return ExtensionArguments(bound=bound, signature=__self)


class ExtensionArguments(Arguments):
    """Captured arguments from a call to an :class:`ExtensionFunc`, with an
    extra step to validate explicitly-passed values.
    """

    def validate(self) -> None:
        """Pass each explicit argument through its associated validator, then
        apply the (pre-validated) defaults.
        """
        # record original arguments before applying defaults
        explicit = tuple(self.arguments)

        self.apply_defaults()

        for name in explicit:
            if name in self.signature.validators:
                validator = self.signature.validators[name]
                self.arguments[name] = validator(
                    self.arguments[name],
                    self.arguments
                )
