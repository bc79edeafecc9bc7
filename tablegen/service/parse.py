from __future__ import annotations

import dataclasses
import typing

from tablegen import data

__all__ = ("parse_patch", "parse_table")

RESERVED_NAMES: typing.Final[frozenset[str]] = frozenset(
    {
        "delete",
        "entity_class",
        "fetch",
        "get",
        "insert",
        "insert_class",
        "operations",
        "patch",
        "patch_class",
        "reload",
        "set_field",
        "update",
    }
)

_TABLE_KEYS: typing.Final[frozenset[str]] = frozenset(
    {"fields", "id", "insertable", "name", "patches", "table"}
)
_FIELD_KEYS: typing.Final[frozenset[str]] = frozenset(
    {"column", "custom_type", "default", "id", "name", "set", "type"}
    | {c.value for c in data.Cardinality}
)
_ACCESSOR_KEYS: typing.Final[frozenset[str]] = frozenset({"arg", "func"})
_PATCH_KEYS: typing.Final[frozenset[str]] = frozenset({"fields", "name"})


def parse_table(description: typing.Mapping[str, typing.Any], /) -> data.Table:
    """Validate a table description and build the Table it describes.

    Raises SchemaError if the description is incomplete or inconsistent.
    """
    if not isinstance(description, typing.Mapping):
        raise data.SchemaError(
            f"A table description must be a mapping, but got {type(description).__name__}."
        )

    table_name = description.get("table")
    if not isinstance(table_name, str) or not table_name:
        raise data.SchemaError("The table description is missing an entry for 'table'.")

    _check_keys(description, allowed=_TABLE_KEYS, table_name=table_name)

    field_descriptions = description.get("fields")
    if not isinstance(field_descriptions, typing.Sequence) or isinstance(field_descriptions, str):
        raise data.SchemaError("'fields' must be a list of field descriptions.", table_name=table_name)

    if not field_descriptions:
        raise data.SchemaError("A table must have at least one field.", table_name=table_name)

    fields: list[data.Field] = []
    flagged_ids: list[str] = []
    for field_description in field_descriptions:
        field, is_id = _parse_field(field_description, table_name=table_name)
        if any(f.name == field.name for f in fields):
            raise data.SchemaError(
                "The field is declared more than once.",
                table_name=table_name,
                field_name=field.name,
            )

        fields.append(field)
        if is_id:
            flagged_ids.append(field.name)

    identifier = _resolve_identifier(
        table_id=description.get("id"),
        flagged_ids=flagged_ids,
        field_names=[f.name for f in fields],
        table_name=table_name,
    )

    id_field = next(f for f in fields if f.name == identifier)
    if id_field.settable:
        raise data.SchemaError(
            "The identifier cannot be set after the row is created.",
            table_name=table_name,
            field_name=identifier,
        )

    entity_name = description.get("name") or _camel_case(table_name)
    if not isinstance(entity_name, str) or not entity_name.isidentifier():
        raise data.SchemaError(f"{entity_name!r} is not a valid entity name.", table_name=table_name)

    table = data.Table(
        name=table_name,
        entity_name=entity_name,
        identifier=identifier,
        fields=tuple(fields),
        insertable=_parse_insertable(
            description.get("insertable", True),
            entity_name=entity_name,
            table_name=table_name,
        ),
    )

    patches = tuple(parse_patch(table, d) for d in description.get("patches") or ())

    seen_patches: set[str] = set()
    for patch in patches:
        if patch.name in seen_patches or patch.name in (table.entity_name, table.insertable):
            raise data.SchemaError(
                f"The patch name, {patch.name!r}, is already in use.",
                table_name=table_name,
            )
        seen_patches.add(patch.name)

    _check_name_collisions(table)

    return dataclasses.replace(table, patches=patches)


def parse_patch(table: data.Table, description: typing.Mapping[str, typing.Any], /) -> data.PatchShape:
    """Validate a patch description against the table it updates."""
    if not isinstance(description, typing.Mapping):
        raise data.SchemaError("A patch description must be a mapping.", table_name=table.name)

    _check_keys(description, allowed=_PATCH_KEYS, table_name=table.name)

    name = description.get("name")
    if not isinstance(name, str) or not name.isidentifier():
        raise data.SchemaError(f"{name!r} is not a valid patch name.", table_name=table.name)

    field_names = description.get("fields")
    if not isinstance(field_names, typing.Sequence) or isinstance(field_names, str) or not field_names:
        raise data.SchemaError(f"The patch, {name}, must name at least one field.", table_name=table.name)

    known = {f.name for f in table.fields}
    for field_name in field_names:
        if field_name not in known:
            raise data.SchemaError(
                f"The patch, {name}, names a field that does not exist.",
                table_name=table.name,
                field_name=field_name,
            )

        if field_name == table.identifier:
            raise data.SchemaError(
                f"The patch, {name}, cannot update the identifier.",
                table_name=table.name,
                field_name=field_name,
            )

    if len(set(field_names)) != len(field_names):
        raise data.SchemaError(f"The patch, {name}, names a field more than once.", table_name=table.name)

    return data.PatchShape(name=name, table_name=table.name, fields=tuple(field_names))


def _parse_field(description: typing.Any, /, *, table_name: str) -> tuple[data.Field, bool]:
    if not isinstance(description, typing.Mapping):
        raise data.SchemaError("A field description must be a mapping.", table_name=table_name)

    name = description.get("name")
    if not isinstance(name, str) or not name.isidentifier():
        raise data.SchemaError(f"{name!r} is not a valid field name.", table_name=table_name)

    _check_keys(description, allowed=_FIELD_KEYS, table_name=table_name, field_name=name)

    column = description.get("column", name)
    if not isinstance(column, str) or not column:
        raise data.SchemaError(
            "'column' must be a non-empty string.",
            table_name=table_name,
            field_name=name,
        )

    if "type" not in description:
        raise data.SchemaError(
            "The field is missing an entry for 'type'.",
            table_name=table_name,
            field_name=name,
        )

    value_type = data.value_type.resolve_type(description["type"])
    if value_type is None:
        raise data.SchemaError(
            f"The type, {description['type']!r}, was not recognized.",
            table_name=table_name,
            field_name=name,
        )

    field = data.Field(
        name=name,
        column=column,
        value_type=value_type,
        has_custom_type=bool(description.get("custom_type", False)),
        has_default=bool(description.get("default", False)),
        setter=_parse_setter(description.get("set"), field_name=name, table_name=table_name),
    )

    accessors = tuple(
        _parse_accessor(
            description[cardinality.value],
            cardinality=cardinality,
            field=field,
            table_name=table_name,
        )
        for cardinality in data.Cardinality
        if description.get(cardinality.value) not in (None, False)
    )

    return dataclasses.replace(field, accessors=accessors), bool(description.get("id", False))


def _parse_accessor(
    description: typing.Any,
    /,
    *,
    cardinality: data.Cardinality,
    field: data.Field,
    table_name: str,
) -> data.Accessor:
    func: str | None = None
    arg: typing.Any = None

    if isinstance(description, str):
        func = description
    elif isinstance(description, typing.Mapping):
        _check_keys(description, allowed=_ACCESSOR_KEYS, table_name=table_name, field_name=field.name)
        func = description.get("func")
        arg = description.get("arg")
    elif description is not True:
        raise data.SchemaError(
            f"{cardinality.value} must be true, a function name, or a mapping with 'func' and 'arg'.",
            table_name=table_name,
            field_name=field.name,
        )

    if func is not None and (not isinstance(func, str) or not func.isidentifier()):
        raise data.SchemaError(
            f"{func!r} is not a valid function name.",
            table_name=table_name,
            field_name=field.name,
        )

    arg_type: typing.Any = None
    if arg is not None:
        arg_type = data.value_type.resolve_type(arg)
        if arg_type is None:
            raise data.SchemaError(
                f"The argument type, {arg!r}, of {cardinality.value} was not recognized.",
                table_name=table_name,
                field_name=field.name,
            )

        if not data.value_type.is_compatible(arg_type, field.value_type):
            raise data.SchemaError(
                f"The argument type, {arg!r}, of {cardinality.value} does not match the field's type, "
                f"{data.value_type.type_name(field.value_type)}.",
                table_name=table_name,
                field_name=field.name,
            )

    return data.Accessor(cardinality=cardinality, func=func, arg_type=arg_type)


def _parse_setter(description: typing.Any, /, *, field_name: str, table_name: str) -> str | None:
    if description is None or description is False:
        return None

    if description is True:
        return f"set_{field_name}"

    if isinstance(description, str) and description.isidentifier():
        return description

    raise data.SchemaError(
        f"'set' must be true or a function name, but got {description!r}.",
        table_name=table_name,
        field_name=field_name,
    )


def _parse_insertable(description: typing.Any, /, *, entity_name: str, table_name: str) -> str | None:
    if description is False or description is None:
        return None

    if description is True:
        return f"Insert{entity_name}"

    if isinstance(description, str) and description.isidentifier():
        return description

    raise data.SchemaError(
        f"'insertable' must be true, false, or a class name, but got {description!r}.",
        table_name=table_name,
    )


def _resolve_identifier(
    *,
    table_id: typing.Any,
    flagged_ids: list[str],
    field_names: list[str],
    table_name: str,
) -> str:
    if table_id is not None and table_id not in field_names:
        raise data.SchemaError(f"The identifier, {table_id!r}, is not a field.", table_name=table_name)

    candidates = set(flagged_ids)
    if table_id is not None:
        candidates.add(table_id)

    if len(flagged_ids) > 1 or len(candidates) > 1:
        raise data.SchemaError(
            f"More than one field is designated as the identifier: {', '.join(sorted(candidates))}.",
            table_name=table_name,
        )

    if not candidates:
        raise data.SchemaError("No field is designated as the identifier.", table_name=table_name)

    return candidates.pop()


def _check_name_collisions(table: data.Table, /) -> None:
    owners: dict[str, str] = {}

    def claim(name: str, owner: str) -> None:
        if name.startswith("_"):
            raise data.SchemaError(
                f"{owner} would generate {name!r}; generated names cannot start with an underscore.",
                table_name=table.name,
            )

        if name in RESERVED_NAMES:
            raise data.SchemaError(
                f"{owner} would generate {name!r}, which is a reserved name.",
                table_name=table.name,
            )

        if name in owners:
            raise data.SchemaError(
                f"{owner} and {owners[name]} would both generate {name!r}.",
                table_name=table.name,
            )

        owners[name] = owner

    for field in table.fields:
        for accessor in field.accessors:
            func, _ = accessor.or_fallback(field)
            claim(func, f"{field.name}.{accessor.cardinality.value}")

        if field.setter is not None:
            claim(field.setter, f"{field.name}.set")


def _check_keys(
    description: typing.Mapping[str, typing.Any],
    /,
    *,
    allowed: frozenset[str],
    table_name: str,
    field_name: str | None = None,
) -> None:
    if unknown := set(description.keys()) - allowed:
        raise data.SchemaError(
            f"Unrecognized keys: {', '.join(sorted(map(str, unknown)))}.",
            table_name=table_name,
            field_name=field_name,
        )


def _camel_case(name: str, /) -> str:
    return "".join(part[:1].upper() + part[1:] for part in name.split("_") if part)
