import functools
import typing

import pydantic

from tablegen import data

__all__ = ("row_to_values", "to_param", "validate_value")


def row_to_values(*, table: data.Table, row: data.Row) -> dict[str, typing.Any] | data.Error:
    """Map a row selected with ``table.column_list()`` to field values.

    Custom-typed fields arrive under their cast label and are converted to the
    field's value type; all other values are passed through unchanged.
    """
    values: dict[str, typing.Any] = {}
    for field in table.fields:
        if field.label not in row:
            return data.BackendError.new(
                f"The row is missing the column, {field.label!r}.",
                table_name=table.name,
                columns=tuple(row.keys()),
            )

        value = row[field.label]
        if field.has_custom_type and value is not None:
            try:
                value = _from_db(field.value_type, value)
            except pydantic.ValidationError as e:
                return data.BackendError.new(
                    f"Could not convert {field.label!r} to "
                    f"{data.value_type.type_name(field.value_type)}: {e!s}",
                    table_name=table.name,
                )

        values[field.name] = value

    return values


def to_param(*, field: data.Field, value: typing.Any) -> typing.Any:
    """Convert a custom-typed value to something the driver can bind."""
    if not field.has_custom_type or value is None:
        return value

    dumped = _adapter(field.value_type).dump_python(value, mode="json")
    if isinstance(dumped, (dict, list)):
        return _adapter(field.value_type).dump_json(value).decode()

    return dumped


def validate_value(*, field: data.Field, value: typing.Any) -> typing.Any:
    """Coerce value to the field's type. Raises pydantic.ValidationError."""
    return _adapter(field.value_type).validate_python(value)


def _from_db(value_type: typing.Any, value: typing.Any, /) -> typing.Any:
    adapter = _adapter(value_type)
    if isinstance(value, (str, bytes)) and data.value_type.base_type(value_type) not in (str, bytes):
        try:
            return adapter.validate_json(value)
        except pydantic.ValidationError:
            return adapter.validate_python(value)

    return adapter.validate_python(value)


@functools.lru_cache
def _adapter(value_type: typing.Any, /) -> pydantic.TypeAdapter[typing.Any]:
    return pydantic.TypeAdapter(value_type)
