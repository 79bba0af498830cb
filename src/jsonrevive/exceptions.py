"""Module containing all the exceptions used in `jsonrevive`

All exception are subclasses of `ReviveError`. Each of them also subclasses
the builtin exception closest to its meaning, so that callers may catch either.

Errors raised by the `json` module while parsing the document
(`json.JSONDecodeError`) are never wrapped and propagate as-is.
"""
from __future__ import annotations

from typing import Any

import attr

from jsonrevive.utils import Path, autoformat, format_path

__all__ = [
    "ReviveError",
    "SchemaError",
    "JSONKindError",
    "UnknownFieldError",
    "MissingFieldError",
    "ConstructionError",
]


class ReviveError(Exception):
    """
    Base exception in jsonrevive for all other exceptions

    If the error has a ``path`` attribute, the position in the JSON document
    is appended to the message
    """

    msg: str

    def __str__(self):
        path = getattr(self, "path", None)
        if path is None:
            return self.msg
        return f"{self.msg}, at {format_path(path)}"


@autoformat
@attr.dataclass(auto_exc=True)
class SchemaError(ReviveError, TypeError):
    """
    Raised when a value is used as a schema but is not one

    Attributes:
        schema: invalid schema value
        detail: precision on the context of the error
        msg: explanation of the error
    """

    schema: Any
    detail: str = ""
    msg: str = "{schema!r} is not a revival schema{detail}"


@autoformat
@attr.dataclass(auto_exc=True)
class JSONKindError(ReviveError, TypeError):
    """
    Raised when a JSON value is not of the kind its schema requires

    Attributes:
        expected: JSON kind required by the schema, "object" or "array"
        kind: JSON kind of the value found in the document
        value: offending JSON value
        path: keys and indices leading to the value
        msg: explanation of the error
    """

    expected: str
    kind: str
    value: Any
    path: Path = ()
    msg: str = "Expected a JSON {expected}, got {kind} {value!r}"


@autoformat
@attr.dataclass(auto_exc=True)
class UnknownFieldError(ReviveError, KeyError):
    """
    Raised when a JSON object has a field the revived instance doesn't have

    Only raised when `RevivalOptions.fail_on_unknown_fields` is set

    Attributes:
        cls: name of the revived class
        field: name of the unknown field
        path: keys and indices leading to the JSON object
        msg: explanation of the error
    """

    cls: str
    field: str
    path: Path = ()
    msg: str = "'{cls}' has no field '{field}'"


@autoformat
@attr.dataclass(auto_exc=True)
class MissingFieldError(ReviveError, KeyError):
    """
    Raised when declared properties are absent from a JSON object

    Only raised when `RevivalOptions.fail_on_missing_fields` is set

    Attributes:
        cls: name of the revived class
        fields: names of the declared properties absent from the JSON object
        path: keys and indices leading to the JSON object
        msg: explanation of the error
    """

    cls: str
    fields: tuple[str, ...]
    path: Path = ()
    msg: str = "Missing declared fields {fields} for '{cls}'"


@autoformat
@attr.dataclass(auto_exc=True)
class ConstructionError(ReviveError):
    """
    Raised when calling a class without arguments fails

    The exception raised by the class is available as ``__cause__``

    Attributes:
        cls: name of the class that could not be instanciated
        path: keys and indices leading to the JSON object
        msg: explanation of the error
    """

    cls: str
    path: Path = ()
    msg: str = "Cannot instanciate '{cls}' without arguments"
