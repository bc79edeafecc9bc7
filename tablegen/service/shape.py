"""Runtime classes for a table's entity, insert payload and patches.

Each class is a pydantic dataclass with keyword-only fields in declaration
order. Nullable fields of the insert and patch classes default to None.
"""
import functools
import typing

import pydantic

from tablegen import data

__all__ = (
    "derive_entity_class",
    "derive_insert_class",
    "derive_patch_class",
)

_CONFIG: typing.Final[pydantic.ConfigDict] = pydantic.ConfigDict(arbitrary_types_allowed=True)


@functools.lru_cache
def derive_entity_class(table: data.Table, /) -> type:
    return _build_class(
        name=table.entity_name,
        fields=table.fields,
        frozen=False,
        optional_defaults=False,
    )


@functools.lru_cache
def derive_insert_class(table: data.Table, /) -> type | None:
    if table.insertable is None:
        return None

    return _build_class(
        name=table.insertable,
        fields=table.insertable_fields(),
        frozen=True,
        optional_defaults=True,
    )


@functools.lru_cache
def derive_patch_class(table: data.Table, patch: data.PatchShape, /) -> type:
    return _build_class(
        name=patch.name,
        fields=tuple(table.field(name) for name in patch.fields),
        frozen=True,
        optional_defaults=True,
    )


def _build_class(
    *,
    name: str,
    fields: tuple[data.Field, ...],
    frozen: bool,
    optional_defaults: bool,
) -> type:
    namespace: dict[str, typing.Any] = {
        "__annotations__": {f.name: f.value_type for f in fields},
        "__module__": __name__,
        "__qualname__": name,
    }
    if optional_defaults:
        for field in fields:
            if data.value_type.is_nullable(field.value_type):
                namespace[field.name] = None

    cls = type(name, (), namespace)

    return pydantic.dataclasses.dataclass(frozen=frozen, kw_only=True, config=_CONFIG)(cls)
