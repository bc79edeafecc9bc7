import datetime
import decimal
import types
import typing
import uuid

__all__ = (
    "base_type",
    "is_compatible",
    "is_nullable",
    "resolve_type",
    "type_name",
)

_TYPES: typing.Final[dict[str, typing.Any]] = {
    "any": typing.Any,
    "bool": bool,
    "bytes": bytes,
    "date": datetime.date,
    "datetime": datetime.datetime,
    "decimal": decimal.Decimal,
    "float": float,
    "int": int,
    "json": dict[str, typing.Any],
    "str": str,
    "time": datetime.time,
    "uuid": uuid.UUID,
}


def resolve_type(value_type: typing.Any, /) -> typing.Any | None:
    """Resolve a type name such as ``"datetime | None"`` to a Python type.

    Non-string values are assumed to already be types and are returned as is.
    Returns None when the name is not recognized.
    """
    if not isinstance(value_type, str):
        return value_type

    name = value_type.strip()
    nullable = False
    if name.endswith("| None"):
        name = name.removesuffix("| None").strip()
        nullable = True
    elif name.lower().startswith("optional[") and name.endswith("]"):
        name = name[len("optional["):-1].strip()
        nullable = True

    resolved = _TYPES.get(name.lower())
    if resolved is None:
        return None

    if nullable and resolved is not typing.Any:
        return typing.Optional[resolved]

    return resolved


def base_type(value_type: typing.Any, /) -> typing.Any:
    """Strip ``None`` from an optional type: ``int | None`` -> ``int``"""
    members = _members(value_type)
    members.discard(type(None))
    if len(members) == 1:
        return next(iter(members))
    return value_type


def is_nullable(value_type: typing.Any, /) -> bool:
    return value_type is typing.Any or type(None) in _members(value_type)


def is_compatible(arg_type: typing.Any, value_type: typing.Any, /) -> bool:
    """Can a value of arg_type be compared against a column holding value_type?"""
    if value_type is typing.Any or arg_type is typing.Any:
        return True

    arg_members = _members(arg_type)
    arg_members.discard(type(None))
    return bool(arg_members) and arg_members <= _members(value_type)


def type_name(value_type: typing.Any, /) -> str:
    for name, t in _TYPES.items():
        if t == value_type:
            return name

    if is_nullable(value_type):
        return f"{type_name(base_type(value_type))} | None"

    return getattr(value_type, "__name__", repr(value_type))


def _members(value_type: typing.Any, /) -> set[typing.Any]:
    if typing.get_origin(value_type) in (typing.Union, types.UnionType):
        return set(typing.get_args(value_type))
    return {value_type}
