"""This module describes a base class for decorators that allow cooperative
attribute access with nested objects, along with thin wrappers around
:mod:`inspect` signatures and bound arguments.
"""
from __future__ import annotations
from functools import update_wrapper, WRAPPER_ASSIGNMENTS
import inspect
from types import MappingProxyType
from typing import Any, Callable, Mapping


# shortcut for inspect.Parameter.empty
EMPTY = inspect.Parameter.empty


class FunctionDecorator:
    """Base class for cooperative decorators.

    These decorators implement the Gang of Four's `Decorator pattern
    <https://en.wikipedia.org/wiki/Decorator_pattern>`_ to cooperatively pass
    attribute access down a (possibly nested) decorator stack.

    Parameters
    ----------
    func : Callable
        The function (or other callable) to decorate.  Any attributes that are
        not found on this decorator will be dynamically passed down to this
        object.
    **kwargs : dict
        Keyword arguments to use for multiple inheritance.

    Notes
    -----
    This expects all subclasses to define the following attribute at the class
    level:

        *   ``_reserved``: a set of strings describing attribute names that are
            reserved for this decorator.

    The special string ``"__wrapped__"`` is always added to this set,
    representing the decorated callable itself.  This is automatically assigned
    by :func:`update_wrapper <python:functools.update_wrapper>` during
    ``__init__``.
    """

    _reserved = set(WRAPPER_ASSIGNMENTS) | {"__wrapped__", "__dict__"}

    def __init__(self, func: Callable, **kwargs):
        super().__init__(**kwargs)  # allow multiple inheritance
        update_wrapper(self, func)

    ################################
    ####    ATTRIBUTE ACCESS    ####
    ################################

    def __getattr__(self, name: str) -> Any:
        """Delegate getters to wrapped object."""
        if name == "__wrapped__":
            raise AttributeError(name)
        return getattr(self.__wrapped__, name)

    def __setattr__(self, name: str, value: Any) -> None:
        """Delegate setters to wrapped object."""
        if name in self._reserved or hasattr(type(self), name):
            super().__setattr__(name, value)
        else:
            setattr(self.__wrapped__, name, value)

    def __delattr__(self, name: str) -> None:
        """Delegate deleters to wrapped object."""
        # NOTE: hasattr() doesn't respect nested decorators
        try:
            object.__getattribute__(self, name)
            super().__delattr__(name)
        except AttributeError:
            delattr(self.__wrapped__, name)

    ################################
    ####     SPECIAL METHODS    ####
    ################################

    def __call__(self, *args, **kwargs):
        """Invoke the wrapped object's ``__call__()`` method."""
        return self.__wrapped__(*args, **kwargs)

    def __dir__(self) -> list:
        """Include attributes of wrapped object."""
        result = dir(type(self))
        result += [k for k in self.__dict__ if k not in result]
        result += [k for k in dir(self.__wrapped__) if k not in result]
        return result

    def __str__(self) -> str:
        """Pass ``str()`` calls to wrapped object."""
        return str(self.__wrapped__)

    def __repr__(self) -> str:
        """Pass ``repr()`` calls to wrapped object."""
        return repr(self.__wrapped__)


class Signature:
    """An extensible wrapper around an
    :class:`inspect.Signature <python:inspect.Signature>` object that allows
    easy modification of parameters and annotations.

    Parameters
    ----------
    func : Callable
        A function or other callable to introspect.
    """

    def __init__(self, func: Callable):
        self.func_name = func.__qualname__
        self.signature = inspect.signature(func)
        self.original = self.signature.replace()  # store a copy

    @property
    def parameter_map(self) -> Mapping[str, inspect.Parameter]:
        """A read-only mapping from argument names to their corresponding
        :class:`Parameters <python:inspect.Parameter>`.
        """
        return self.signature.parameters

    @property
    def parameters(self) -> tuple[inspect.Parameter, ...]:
        """A tuple of :class:`Parameters <python:inspect.Parameter>` in
        signature order.  This can be assigned to in order to replace the
        parameters, or deleted to restore the original ones.
        """
        return tuple(self.signature.parameters.values())

    @parameters.setter
    def parameters(self, val: tuple[inspect.Parameter, ...]) -> None:
        self.signature = self.signature.replace(parameters=val)

    @parameters.deleter
    def parameters(self) -> None:
        self.signature = self.original

    def set_parameter(self, _name: str, **kwargs) -> None:
        """Modify a parameter by name.

        Parameters
        ----------
        _name : str
            The name of the parameter to modify.
        **kwargs
            Keyword arguments to pass to
            :meth:`Parameter.replace() <python:inspect.Parameter.replace>`.

        Raises
        ------
        KeyError
            If the named argument is not contained within the signature.
        """
        if _name not in self.parameter_map:
            raise KeyError(f"'{self.func_name}()' has no argument '{_name}'")

        self.parameters = tuple(
            par.replace(**kwargs) if par.name == _name else par
            for par in self.parameters
        )

    def reconstruct(
        self,
        defaults: bool = True,
        annotations: bool = True,
        return_annotation: bool = True,
    ) -> str:
        """Return a complete string representation of the signature.

        Parameters
        ----------
        defaults : bool, default True
            Indicates whether to include the current default value of each
            parameter.
        annotations : bool, default True
            Indicates whether to include type annotations for each parameter in
            the resulting string.
        return_annotation : bool, default True
            Indicates whether to include the return annotation.

        Returns
        -------
        str
            The function's name followed by its signature.
        """
        parameters = []
        for par in self.parameters:
            if not defaults:
                par = par.replace(default=EMPTY)
            if not annotations:
                par = par.replace(annotation=EMPTY)
            parameters.append(par)

        signature = self.signature.replace(parameters=parameters)
        if not return_annotation:
            signature = signature.replace(return_annotation=EMPTY)
        return f"{self.func_name}{signature}"

    def __call__(self, *args, **kwargs) -> Arguments:
        """Bind the arguments to the signature, returning a corresponding
        :class:`Arguments` object.
        """
        bound = self.signature.bind_partial(*args, **kwargs)
        return Arguments(bound=bound, signature=self)

    def __str__(self) -> str:
        return str(self.signature)

    def __repr__(self) -> str:
        return repr(self.signature)


class Arguments:
    """An extensible wrapper around a
    :class:`BoundArguments <python:inspect.BoundArguments>` object with extra
    context for decorator-related functionality.

    Parameters
    ----------
    bound : inspect.BoundArguments
        The :class:`BoundArguments <python:inspect.BoundArguments>` to wrap.
    signature : Signature
        A reference to the :class:`Signature` that spawned this object.
    """

    def __init__(
        self,
        bound: inspect.BoundArguments,
        signature: Signature
    ):
        self.bound = bound
        self.signature = signature

    @property
    def arguments(self) -> dict[str, Any]:
        """A mutable mapping containing the current value of each argument.
        Changes to this dictionary are reflected in :attr:`args` and
        :attr:`kwargs`.
        """
        return self.bound.arguments

    @property
    def args(self) -> tuple[Any, ...]:
        """Positional arguments that can be supplied to the original function.
        """
        return self.bound.args

    @property
    def kwargs(self) -> Mapping[str, Any]:
        """Keyword arguments that can be supplied to the original function."""
        return MappingProxyType(self.bound.kwargs)

    def apply_defaults(self) -> None:
        """Apply the signature's current default values to the bound
        arguments.
        """
        # NOTE: BoundArguments holds a reference to the signature it was bound
        # from, so defaults are taken from the current (managed) signature
        self.bound.apply_defaults()

    def __str__(self) -> str:
        return str(self.bound)

    def __repr__(self) -> str:
        return repr(self.bound)
