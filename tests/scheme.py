from __future__ import annotations
from typing import Any

import pytest

from pdcoerce import Vector


def parametrize(*test_cases: Case, ids: list[str] | callable = None):
    """A simplified interface for `pytest.mark.parametrize()` calls that
    forces the use of `Case` containers.

    When used to decorate a test function, that function must accept only one
    argument: an individual Case object with the required information.
    """
    return pytest.mark.parametrize("case", list(test_cases), ids=ids)


class Raises:
    """Base class for exception handler objects.

    This is a static wrapper for `pytest.raises()` objects, with some slight
    modifications to make test code more compact and readable.
    """

    def __init__(
        self,
        error_type: type,
        msg: str = None,
        nomatch: str = None
    ):
        self.ctx = pytest.raises(Exception)
        self.error_type = error_type
        self.msg = msg
        self.nomatch = nomatch

    def __enter__(self) -> pytest.ExceptionInfo[Exception]:
        return self.ctx.__enter__()

    def __exit__(self, *tp):
        # preempt nomatch failure and use corresponding message instead
        if tp[0] is None:
            pytest.fail(self.nomatch or f"did not raise {self}")

        # invoke normal pytest.RaisesContext.__exit__() method
        result = self.ctx.__exit__(*tp)

        # cleanup assertions
        assert issubclass(self.ctx.excinfo.type, self.error_type)
        if self.msg is not None:
            assert self.ctx.excinfo.match(self.msg)

        # return result of pytest.RaisesContext.__exit__()
        return result

    def __repr__(self) -> str:
        return f"{self.error_type.__name__}: ... {self.msg} ..."

    def __str__(self) -> str:
        return repr(self)


class Case:
    """A single test case, consisting of keyword arguments, an input, and an
    expected output (or a `Raises` object if the case should fail).
    """

    def __init__(self, kwargs: dict, test_input: Any, test_output: Any):
        self.kwargs = kwargs
        self.input = test_input
        self.output = test_output

    @property
    def is_valid(self) -> bool:
        """Indicates whether this case is expected to succeed."""
        return not isinstance(self.output, Raises)

    def signature(self, *exclude) -> str:
        """Render the case's keyword arguments as they would appear in a call.
        """
        return ", ".join(
            f"{k}={repr(v)}" for k, v in self.kwargs.items()
            if k not in exclude
        )

    def __repr__(self) -> str:
        return f"Case({self.signature()}; {repr(self.input)})"


def assert_vector(result: Vector, expected: Vector, context: str = "") -> None:
    """Check that two vectors have the same type and values, with an
    informative message if they don't.
    """
    assert result.equals(expected), (
        f"{context} failed:\n"
        f"expected:\n"
        f"{expected}\n"
        f"received:\n"
        f"{result}"
    )
