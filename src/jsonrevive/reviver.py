"""
Module reviving JSON documents into instances of python classes

The reviving is guided by a schema (see `jsonrevive.schema`): JSON objects
become instances of the schema's class, JSON arrays become lists, and values
without a schema are assigned as-is.
"""
from __future__ import annotations

import json
import logging
from typing import IO, Any, Dict, List, Mapping, Optional, Union

import attr

from jsonrevive.exceptions import (
    ConstructionError,
    JSONKindError,
    MissingFieldError,
    UnknownFieldError,
)
from jsonrevive.schema import ArraySchema, ObjectSchema, Schema, resolve, type_schema
from jsonrevive.utils import Path, PathKey, json_kind

__all__ = ["RevivalOptions", "DEFAULT_OPTIONS", "unmarshal", "load", "revive"]

logger = logging.getLogger(__name__)

# Type Aliases
JSONType = Union[  # pylint: disable=unsubscriptable-object
    None, bool, int, float, str, List[Any], Dict[str, Any]
]


@attr.dataclass(frozen=True)
class RevivalOptions:
    """
    Options controlling how strict reviving is

    All options are independent and default to False.

    Attributes:
        fail_on_unknown_fields: raise `UnknownFieldError` when a JSON object has
            a field that the revived instance doesn't have
        fail_on_missing_fields: raise `MissingFieldError` when a JSON object lacks
            a property declared in the schema
        assign_only: ignore the schemas classes report for themselves, only
            apply the schemas given by the caller
    """

    fail_on_unknown_fields: bool = False
    fail_on_missing_fields: bool = False
    assign_only: bool = False


DEFAULT_OPTIONS = RevivalOptions()
"""Options used when none are given"""


@attr.dataclass(frozen=True)
class RevivalContext:
    """
    Internal class to keep track of the position in the document during reviving

    RevivalContext are immutable
    """

    options: RevivalOptions
    path: Path = ()

    def child(self, /, key: PathKey) -> RevivalContext:
        return attr.evolve(self, path=(*self.path, key))

    def revive(self, /, value: JSONType, schema: Schema) -> Any:
        schema = resolve(schema)
        if value is None and schema.nullable:
            return None
        if isinstance(schema, ArraySchema):
            return self.revive_array(value, schema)
        return self.revive_object(value, schema)

    def revive_array(self, /, value: JSONType, schema: ArraySchema) -> list:
        if not isinstance(value, list):
            raise JSONKindError("array", json_kind(value), value, self.path)
        return [
            self.child(index).revive(item, schema.items)
            for index, item in enumerate(value)
        ]

    def properties_of(self, /, schema: ObjectSchema) -> Mapping[str, Schema]:
        """
        Merge the caller's property schemas with those the class reports

        Properties given by the caller take precedence
        """
        if self.options.assign_only:
            return schema.properties
        reported = type_schema(schema.type)
        if reported is None or not reported.properties:
            return schema.properties
        logger.debug(
            "Using the schema reported by '%s' at %s",
            schema.type.__qualname__,
            self.path,
        )
        return {**reported.properties, **schema.properties}

    def construct(self, /, cls: type) -> Any:
        try:
            return cls()
        except Exception as err:
            raise ConstructionError(cls.__qualname__, self.path) from err

    def revive_object(self, /, value: JSONType, schema: ObjectSchema) -> Any:
        if not isinstance(value, dict):
            raise JSONKindError("object", json_kind(value), value, self.path)
        cls = schema.type
        instance = self.construct(cls)
        properties = self.properties_of(schema)
        for key, item in value.items():
            # special attributes are never fields
            special = key.startswith("__") and key.endswith("__")
            if self.options.fail_on_unknown_fields and (
                special or not hasattr(instance, key)
            ):
                raise UnknownFieldError(cls.__qualname__, key, self.path)
            if special:
                logger.debug(
                    "Ignoring special field '%s' of '%s'", key, cls.__qualname__
                )
                continue
            if key in properties:
                item = self.child(key).revive(item, properties[key])
            else:
                logger.debug("Assigning '%s.%s' without schema", cls.__qualname__, key)
            setattr(instance, key, item)
        if self.options.fail_on_missing_fields:
            # Only declared properties can be missing
            missing = tuple(name for name in properties if name not in value)
            if missing:
                raise MissingFieldError(cls.__qualname__, missing, self.path)
        return instance


def _make_options(
    options: Optional[RevivalOptions], overrides: Dict[str, bool]
) -> RevivalOptions:
    if options is None:
        options = DEFAULT_OPTIONS
    if overrides:
        options = attr.evolve(options, **overrides)
    return options


def revive(
    value: JSONType,
    schema: Schema,
    options: RevivalOptions = None,
    **overrides: bool,
) -> Any:
    """
    Revive an already parsed JSON value

    Arguments:
        value: JSON value, as returned by `json.loads`
        schema: schema to revive ``value`` with
        options: strictness options, defaults to `DEFAULT_OPTIONS`
        **overrides: `RevivalOptions` fields overriding those of ``options``

    Returns:
        An instance of the schema's class, or a list for array schemas
    """
    options = _make_options(options, overrides)
    return RevivalContext(options).revive(value, schema)


def unmarshal(
    json_text: Union[str, bytes],  # pylint: disable=unsubscriptable-object
    schema: Schema,
    options: RevivalOptions = None,
    **overrides: bool,
) -> Any:
    """
    Parse a JSON document and revive it as instances of python classes

    JSON objects are revived by calling the schema's class without arguments
    and assigning each field of the object on the new instance. Fields with
    a schema in the ``properties`` of the `ObjectSchema`, or in the schema
    the class reports for itself, are revived recursively first. The other
    fields are assigned the JSON value unchanged.

    Arguments:
        json_text: JSON document to parse
        schema: a class, an `ObjectSchema` or an `ArraySchema`
        options: strictness options, defaults to `DEFAULT_OPTIONS`
        **overrides: `RevivalOptions` fields overriding those of ``options``

    Returns:
        An instance of the schema's class, or a list for array schemas

    Raises:
        json.JSONDecodeError: ``json_text`` is not valid JSON
        SchemaError: ``schema`` or one of its nested schemas is invalid
        JSONKindError: a JSON value doesn't have the kind its schema requires
        UnknownFieldError: a field is unknown and ``fail_on_unknown_fields`` is set
        MissingFieldError: a property is missing and ``fail_on_missing_fields`` is set
        ConstructionError: a class cannot be called without arguments

    Usage::

        class Person:
            def __init__(self):
                self.name = ""

        person = unmarshal('{"name": "John Smith"}', Person)
        assert person.name == "John Smith"
    """
    logger.debug("Unmarshalling JSON document with schema %r", schema)
    return revive(json.loads(json_text), schema, options, **overrides)


def load(
    fp: IO, schema: Schema, options: RevivalOptions = None, **overrides: bool
) -> Any:
    """Same as `unmarshal`, but reads the JSON document from a file"""
    logger.debug("Loading JSON document from %r with schema %r", fp, schema)
    return revive(json.load(fp), schema, options, **overrides)
