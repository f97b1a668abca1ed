from __future__ import annotations

import logging
import timeit
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from cdf_attrs.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")

def timed_function(func_name:str|None=None) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """A decorator that logs the execution time of a function.

    This decorator measures the time it takes for a decorated function to execute
    and logs the result to a logger at the DEBUG level, since attribute reads are
    usually fast and happen many times per file. The log message can be prefixed
    with an optional function name.

    Parameters:
        func_name (str | None): An optional name to use in the log message. If `None`,
                                the qualified name of the function is used.

    Returns:
        Callable: A decorator that wraps the target function with timing logic.
    """
    def timed_function_(f: Callable[P, R]) -> Callable[P, R]:
        name = func_name if func_name else f.__qualname__

        @wraps(f)
        def wrap(*args: P.args, **kwargs: P.kwargs) -> R:
            tic = timeit.default_timer()
            result = f(*args, **kwargs)
            toc = timeit.default_timer()
            logger.debug(f"\t\t{name} finished in {toc-tic:0.3f} seconds")

            return result
        return wrap
    return timed_function_

def validate_name(name:object, kind:str) -> str:
    """Checks that an attribute or variable name is a non-empty string.

    Parameters:
        name (object): The name supplied by the caller.
        kind (str): What the name refers to, used in the error message (e.g. "attribute").

    Returns:
        str: The validated name.

    Raises:
        InvalidArgumentError: If `name` is not a string or contains only whitespace.
    """
    if not isinstance(name, str) or not name.strip():
        msg = f"Invalid {kind} name: {name!r}! Must be a non-empty string."
        raise InvalidArgumentError(msg)

    return name
