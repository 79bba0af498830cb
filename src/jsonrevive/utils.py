"""
Various utilities used in jsonrevive yet unrelated to reviving itself
"""
from __future__ import annotations

import functools
import inspect
from typing import (
    Any,
    Callable,
    Iterable,
    Tuple,
    Union,
    overload,
)

__all__ = [
    # Decorators
    "autoformat",
    # functions
    "json_kind",
    "format_path",
]

PathKey = Union[int, str]  # pylint: disable=unsubscriptable-object
Path = Tuple[PathKey, ...]


@overload
def autoformat(
    cls: None,
    /,
    params: Union[str, Iterable[str]] = (  # pylint: disable=unsubscriptable-object
        "message",
        "msg",
    ),
) -> Callable[[type], type]:
    ...


@overload
def autoformat(
    cls: type,
    /,
    params: Union[str, Iterable[str]] = (  # pylint: disable=unsubscriptable-object
        "message",
        "msg",
    ),
) -> type:
    ...


def autoformat(
    cls: type = None,
    /,
    params: Union[str, Iterable[str]] = (  # pylint: disable=unsubscriptable-object
        "message",
        "msg",
    ),
):
    """
    Class decorator to autoformat string arguments in the ``__init__`` method.

    Modifies the class ``__init__`` method in place by wrapping it. The wrapped
    method will call the str.format() method on arguments specified in the ``params``
    argument of the decorator, if they exist in the decorated class's __init__
    function signature. All other arguments are passed to str.format() as a dict.

    Arguments:
        params: names of the arguments to autoformat

    Returns:
        The decorated class (same object), with a wrapped ``__init__``

    Usage::

        @autoformat
        class MyException(Exception):
            def __init__(self, elem, msg="{elem} is invalid"):
                super().__init__(msg)
                self.msg = msg
                self.elem = elem

        assert MyException(8).msg == "8 is invalid"
    """
    if isinstance(params, str):
        params = (params,)

    if cls is not None:
        orig_init = getattr(cls, "__init__")
        signature = inspect.signature(orig_init)
        params = signature.parameters.keys() & set(params)

        @functools.wraps(orig_init)
        def init(*args, **kwargs):
            bounds = signature.bind(*args, **kwargs)
            bounds.apply_defaults()
            pre_formatted = {
                name: bounds.arguments.pop(name)
                for name in params
                if name in bounds.arguments
            }
            formatted = {
                name: string.format(**bounds.arguments)
                for name, string in pre_formatted.items()
            }
            for name, arg in formatted.items():
                bounds.arguments[name] = arg
            return orig_init(*bounds.args, **bounds.kwargs)

        setattr(cls, "__init__", init)
        return cls
    else:
        return functools.partial(autoformat, params=params)


def json_kind(value: Any) -> str:
    """
    Name of the JSON kind of a parsed JSON value

    Values that the `json` module never produces are reported by their
    python type name
    """
    if value is None:
        return "null"
    # bool before int, as bool is a subclass of int
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def format_path(path: Path) -> str:
    """
    Render a path of keys and indices in a JSON document

    Usage::

        assert format_path(("friends", 0, "name")) == '<json>["friends"][0]["name"]'
    """
    keys = ['"%s"' % k if isinstance(k, str) else str(k) for k in path]
    return "".join(("<json>", *("[%s]" % k for k in keys)))
