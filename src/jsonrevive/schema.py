"""
Module for revival schemas

A schema describes how a JSON value is turned back into python instances.
There are exactly three kinds of schemas:

    - a class, used as a shorthand for ``ObjectSchema(cls)``
    - `ObjectSchema`, a class plus the schemas of some of its properties
    - `ArraySchema`, the schema of every element of a JSON array

`resolve` rewrites the shorthand so that the rest of the package only
deals with the two explicit forms.
"""
from __future__ import annotations

import inspect
from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Mapping,
    Optional,
    Protocol,
    Type,
    TypeVar,
    Union,
    runtime_checkable,
)

import attr
from attr import attrib

from jsonrevive.exceptions import SchemaError

__all__ = [
    "ObjectSchema",
    "ArraySchema",
    "Schema",
    "HasSchema",
    "resolve",
    "is_schema",
    "type_schema",
    "revivable",
]

T = TypeVar("T")
AnyClass = TypeVar("AnyClass", bound=type)


def _freeze_properties(properties: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(properties or {}))


def _check_properties(instance, attribute, properties: Mapping[str, Any]) -> None:
    for name, schema in properties.items():
        if not isinstance(name, str):
            raise SchemaError(
                properties, detail=f": property name {name!r} is not a string"
            )
        if not is_schema(schema):
            raise SchemaError(schema, detail=f" for property '{name}'")


def _check_type(instance, attribute, value) -> None:
    if not isinstance(value, type):
        raise SchemaError(value, detail=": ObjectSchema.type must be a class")


def _check_items(instance, attribute, value) -> None:
    if not is_schema(value):
        raise SchemaError(value)


@attr.dataclass(frozen=True)
class ObjectSchema:
    """
    Schema reviving a JSON object as an instance of ``type``

    Attributes:
        type: class to instanciate, called without arguments
        properties: schemas of the properties that are not plain JSON values.
            Properties not listed here are assigned the raw JSON value.
        nullable: if True, a JSON ``null`` revives to ``None`` instead of
            raising `JSONKindError`
    """

    type: type = attrib(validator=_check_type)
    properties: Mapping[str, Schema] = attrib(
        factory=dict, converter=_freeze_properties, validator=_check_properties
    )
    nullable: bool = False


@attr.dataclass(frozen=True)
class ArraySchema:
    """
    Schema reviving each element of a JSON array with ``items``

    Attributes:
        items: schema applied to every element
        nullable: if True, a JSON ``null`` revives to ``None`` instead of
            raising `JSONKindError`
    """

    items: Schema = attrib(validator=_check_items)
    nullable: bool = False


Schema = Union[type, ObjectSchema, ArraySchema]  # pylint: disable=unsubscriptable-object
"""Type alias for the three kinds of schemas"""


@runtime_checkable
class HasSchema(Protocol):
    """
    Capability of classes that know their own revival schema

    A class has the capability if it defines a ``revive_schema()`` classmethod
    (or staticmethod). Check with ``isinstance(cls, HasSchema)``.
    """

    def revive_schema(self) -> Schema:
        ...


def is_schema(value: Any) -> bool:
    """Test if a value is a revival schema"""
    return isinstance(value, (type, ObjectSchema, ArraySchema))


def resolve(schema: Schema) -> Union[ObjectSchema, ArraySchema]:
    """
    Normalize a schema to either an `ObjectSchema` or an `ArraySchema`

    A bare class is rewritten to an `ObjectSchema` without properties. The
    explicit forms are returned unchanged.

    Raises:
        SchemaError: ``schema`` is not a schema
    """
    if isinstance(schema, (ObjectSchema, ArraySchema)):
        return schema
    elif isinstance(schema, type):
        return ObjectSchema(schema)
    raise SchemaError(schema)


def type_schema(cls: type) -> Optional[ObjectSchema]:
    """
    Get the schema a class reports for itself, if it has one

    Returns:
        The resolved self-reported schema, or None if ``cls`` doesn't have the
        `HasSchema` capability

    Raises:
        SchemaError: the class reports something that doesn't describe an object,
            or its ``revive_schema`` is not a classmethod or staticmethod
    """
    if not isinstance(cls, HasSchema):
        return None
    if not isinstance(
        inspect.getattr_static(cls, "revive_schema"), (classmethod, staticmethod)
    ):
        raise SchemaError(
            cls,
            msg="revive_schema() of {schema!r} must be a classmethod or staticmethod",
        )
    schema = resolve(cls.revive_schema())
    if not isinstance(schema, ObjectSchema):
        raise SchemaError(
            schema, detail=f" for an object, as reported by '{cls.__qualname__}'"
        )
    return schema


#############
# DECORATOR #
#############


def _from_json(cls: Type[T], /, obj, options=None, **overrides) -> T:
    """Revive an instance of the class this method is called on.

    Tries to guess how to parse ``obj`` in the following order:
        - if ``obj`` supports ``read``, use load()
        - if ``obj`` is a string or bytes, use unmarshal()
        - else, revive it as an already parsed JSON value
    """
    # Imported here, the reviver depends on this module
    from jsonrevive.reviver import load, revive, unmarshal

    if hasattr(obj, "read"):
        return load(obj, cls, options, **overrides)
    elif isinstance(obj, (str, bytes)):
        return unmarshal(obj, cls, options, **overrides)
    else:
        return revive(obj, cls, options, **overrides)


def _revive_schema_factory(
    properties: Union[Mapping[str, Schema], Callable[[], Mapping[str, Schema]], None]
):
    def revive_schema(cls) -> ObjectSchema:
        """
        Returns the revival schema of this class
        """
        props = properties() if callable(properties) else properties
        return ObjectSchema(cls, props)

    return revive_schema


def _decorate(cls: AnyClass, *, properties) -> AnyClass:
    if "revive_schema" in cls.__dict__:
        raise SchemaError(
            cls, msg="Cannot override already-defined revive_schema() of {schema!r}"
        )
    if properties is not None and not callable(properties):
        # fail early on invalid static properties
        ObjectSchema(cls, properties)
    setattr(cls, "revive_schema", classmethod(_revive_schema_factory(properties)))
    if "from_json" not in cls.__dict__:
        setattr(cls, "from_json", classmethod(_from_json))
    return cls


def revivable(
    cls: AnyClass = None,
    /,
    *,
    properties: Union[  # pylint: disable=unsubscriptable-object
        Mapping[str, Schema], Callable[[], Mapping[str, Schema]], None
    ] = None,
):
    """
    Class decorator giving a class the `HasSchema` capability

    Adds the ``revive_schema()`` and ``from_json()`` classmethods to the
    decorated class. ``from_json()`` is not added if the class defines its own.

    Arguments:
        properties: schemas of the properties of the class, or a callable
            without arguments returning them. Use a callable when the schemas
            reference the decorated class itself or classes defined later.

    Raises:
        SchemaError: the class already defines ``revive_schema()``, or
            ``properties`` contains an invalid schema

    Usage::

        @revivable(properties=lambda: {"friends": ArraySchema(Employee)})
        class Employee:
            def __init__(self):
                self.name = ""
                self.friends = []

        employee = Employee.from_json('{"name": "Mary", "friends": []}')
    """
    if cls is None:
        return lambda cls: _decorate(cls, properties=properties)
    return _decorate(cls, properties=properties)
