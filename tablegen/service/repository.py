from __future__ import annotations

import typing

import pydantic
from loguru import logger

from tablegen import data
from tablegen.service import shape
from tablegen.service.deserialize import row_to_values, to_param, validate_value

__all__ = ("Repository",)


class Repository:
    """Runs a table's generated operations against a cursor.

    Every method returns its result or a ``data.Error`` (``NotFound``,
    ``Conflict``, ``BackendError``); runtime failures are never raised.
    Accessors and setters are available under their generated names, e.g.
    ``repo.by_email("a@b.c")`` or ``repo.set_last_login(user, ts)``.
    """

    def __init__(self, *, operations: data.OperationSet, cursor: data.Cursor):
        self.operations: typing.Final[data.OperationSet] = operations
        self.entity_class: typing.Final[type] = shape.derive_entity_class(operations.table)
        self.insert_class: typing.Final[type | None] = shape.derive_insert_class(operations.table)

        self._cur: typing.Final[data.Cursor] = cursor
        self._table: typing.Final[data.Table] = operations.table

    def __getattr__(self, name: str) -> typing.Callable[..., typing.Any]:
        operations: data.OperationSet | None = self.__dict__.get("operations")
        if operations is None:
            raise AttributeError(name)

        if name in operations.accessors:

            def accessor(arg: typing.Any, /) -> typing.Any:
                return self.fetch(name, arg)

            return accessor

        for field in operations.table.fields:
            if field.setter == name:

                def setter(entity: typing.Any, value: typing.Any, /) -> None | data.Error:
                    return self.set_field(entity, field.name, value)

                return setter

        raise AttributeError(f"{type(self).__name__} for {operations.table.name} has no operation named {name!r}.")

    def patch_class(self, /, name: str) -> type:
        return shape.derive_patch_class(self._table, self._table.patch(name))

    def get(self, id_value: typing.Any, /) -> typing.Any | data.Error:
        op = self.operations.get
        row = self._fetch_one(op=op, source={self._table.identifier: id_value})
        if isinstance(row, data.Error):
            return row

        if row is None:
            return self._failed(
                data.NotFound.new(
                    f"No {self._table.name} row has {self._table.identifier} = {id_value!r}.",
                    table_name=self._table.name,
                )
            )

        return self._to_entity(row)

    def fetch(self, accessor_name: str, arg: typing.Any, /) -> typing.Any:
        """Run the accessor named accessor_name.

        Returns an entity for exactly-one accessors, an entity or None for
        zero-or-one accessors, and a lazy iterator of entities for many
        accessors. Each call reissues the query.
        """
        op = self.operations.accessors.get(accessor_name)
        if op is None:
            return self._failed(
                data.Error.new(
                    f"{self._table.name} has no accessor named {accessor_name!r}.",
                    accessor_name=accessor_name,
                )
            )

        source = {op.params[0]: arg}

        if op.result == data.ResultShape.Many:
            return self._iterate(op=op, source=source)

        row = self._fetch_one(op=op, source=source)
        if isinstance(row, data.Error):
            return row

        if row is None:
            if op.result == data.ResultShape.Optional:
                return None

            return self._failed(
                data.NotFound.new(
                    f"No {self._table.name} row has {op.params[0]} = {arg!r}.",
                    table_name=self._table.name,
                    accessor_name=accessor_name,
                )
            )

        return self._to_entity(row)

    def insert(self, payload: typing.Any, /) -> typing.Any | data.Error:
        op = self.operations.insert
        if op is None or self.insert_class is None:
            return self._failed(
                data.Error.new(f"{self._table.name} was not declared insertable.", table_name=self._table.name)
            )

        try:
            if isinstance(payload, typing.Mapping):
                payload = self.insert_class(**payload)
            elif not isinstance(payload, self.insert_class):
                return self._failed(
                    data.Error.new(
                        f"Expected a {self.insert_class.__name__} or a mapping, but got {type(payload).__name__}.",
                        table_name=self._table.name,
                    )
                )
        except pydantic.ValidationError as e:
            return self._failed(data.Error.new(str(e), table_name=self._table.name))

        source = {name: getattr(payload, name) for name in op.params}

        if op.result == data.ResultShape.One:
            row = self._fetch_one(op=op, source=source)
            if isinstance(row, data.Error):
                return row

            if row is None:
                return self._failed(
                    data.BackendError.new(
                        f"The insert into {self._table.name} returned no row.",
                        table_name=self._table.name,
                    )
                )

            return self._to_entity(row)

        row_count = self._execute(op=op, source=source)
        if isinstance(row_count, data.Error):
            return row_count

        id_value = self._cur.last_insert_id()
        if isinstance(id_value, data.Error):
            return self._failed(id_value)

        return self.get(id_value)

    def update(self, entity: typing.Any, /) -> None | data.Error:
        """Write every non-identifier field of entity to its row."""
        op = self.operations.update
        if op is None:
            # the table only has an identifier, so the row merely has to exist
            fresh = self.get(getattr(entity, self._table.identifier))
            if isinstance(fresh, data.NotFound):
                return self._conflict(entity, op_name="update")
            if isinstance(fresh, data.Error):
                return fresh
            return None

        source = self._entity_values(entity)
        if isinstance(source, data.Error):
            return source

        return self._execute_one(op=op, source=source, entity=entity)

    def patch(self, entity: typing.Any, patch: typing.Any, /) -> None | data.Error:
        """Write the fields of patch to entity's row and merge them into entity."""
        name = type(patch).__name__
        op = self.operations.patches.get(name)
        if op is None or not isinstance(patch, self.patch_class(name)):
            return self._failed(
                data.Error.new(
                    f"{name} is not a patch for {self._table.name}.",
                    table_name=self._table.name,
                )
            )

        patch_fields = self._table.patch(name).fields
        source = {f: getattr(patch, f) for f in patch_fields}
        try:
            source[self._table.identifier] = getattr(entity, self._table.identifier)
        except AttributeError as e:
            return self._failed(data.Error.new(str(e), table_name=self._table.name))

        result = self._execute_one(op=op, source=source, entity=entity)
        if isinstance(result, data.Error):
            return result

        for f in patch_fields:
            setattr(entity, f, source[f])

        return None

    def set_field(self, entity: typing.Any, field_name: str, value: typing.Any, /) -> None | data.Error:
        """Update a single settable field, in the row and on entity."""
        try:
            field = self._table.field(field_name)
        except KeyError as e:
            return self._failed(data.Error.new(str(e), table_name=self._table.name))

        if field.setter is None:
            return self._failed(
                data.Error.new(
                    f"{self._table.name}.{field_name} was not declared settable.",
                    table_name=self._table.name,
                )
            )

        try:
            value = validate_value(field=field, value=value)
        except pydantic.ValidationError as e:
            return self._failed(
                data.Error.new(
                    f"{self._table.name}.{field_name} cannot be set to {value!r}: {e!s}",
                    table_name=self._table.name,
                )
            )

        try:
            source = {
                field.name: value,
                self._table.identifier: getattr(entity, self._table.identifier),
            }
        except AttributeError as e:
            return self._failed(data.Error.new(str(e), table_name=self._table.name))

        result = self._execute_one(op=self.operations.setters[field.setter], source=source, entity=entity)
        if isinstance(result, data.Error):
            return result

        setattr(entity, field.name, value)

        return None

    def reload(self, entity: typing.Any, /) -> None | data.Error:
        """Overwrite every field of entity with the row's current values."""
        try:
            id_value = getattr(entity, self._table.identifier)
        except AttributeError as e:
            return self._failed(data.Error.new(str(e), table_name=self._table.name))

        fresh = self.get(id_value)
        if isinstance(fresh, data.Error):
            return fresh

        for field in self._table.fields:
            setattr(entity, field.name, getattr(fresh, field.name))

        return None

    def delete(self, entity: typing.Any, /) -> None | data.Error:
        op = self.operations.delete
        try:
            source = {self._table.identifier: getattr(entity, self._table.identifier)}
        except AttributeError as e:
            return self._failed(data.Error.new(str(e), table_name=self._table.name))

        row_count = self._execute(op=op, source=source)
        if isinstance(row_count, data.Error):
            return row_count

        if row_count == 0:
            return self._failed(
                data.NotFound.new(
                    f"The {self._table.name} row with {self._table.identifier} = "
                    f"{source[self._table.identifier]!r} had already been deleted.",
                    table_name=self._table.name,
                )
            )

        return None

    def _conflict(self, entity: typing.Any, /, *, op_name: str) -> data.Error:
        return self._failed(
            data.Conflict.new(
                f"{op_name} affected no rows; the {self._table.name} row with {self._table.identifier} = "
                f"{getattr(entity, self._table.identifier)!r} no longer exists.",
                table_name=self._table.name,
            )
        )

    def _entity_values(self, entity: typing.Any, /) -> dict[str, typing.Any] | data.Error:
        try:
            return {field.name: getattr(entity, field.name) for field in self._table.fields}
        except AttributeError as e:
            return self._failed(data.Error.new(str(e), table_name=self._table.name))

    def _execute(self, *, op: data.Operation, source: typing.Mapping[str, typing.Any]) -> int | data.Error:
        params = self._params(op=op, source=source)
        logger.debug(f"{self._table.name}.{op.name}: {op.sql} {params!r}")
        result = self._cur.execute(sql=op.sql, params=params)
        if isinstance(result, data.Error):
            return self._failed(result)
        return result

    def _execute_one(
        self,
        *,
        op: data.Operation,
        source: typing.Mapping[str, typing.Any],
        entity: typing.Any,
    ) -> None | data.Error:
        row_count = self._execute(op=op, source=source)
        if isinstance(row_count, data.Error):
            return row_count

        if row_count == 0:
            return self._conflict(entity, op_name=op.name)

        return None

    def _fetch_one(
        self,
        *,
        op: data.Operation,
        source: typing.Mapping[str, typing.Any],
    ) -> data.Row | None | data.Error:
        params = self._params(op=op, source=source)
        logger.debug(f"{self._table.name}.{op.name}: {op.sql} {params!r}")
        row = self._cur.fetch_one(sql=op.sql, params=params)
        if isinstance(row, data.Error):
            return self._failed(row)
        return row

    def _iterate(
        self,
        *,
        op: data.Operation,
        source: typing.Mapping[str, typing.Any],
    ) -> typing.Iterator[typing.Any]:
        params = self._params(op=op, source=source)
        logger.debug(f"{self._table.name}.{op.name}: {op.sql} {params!r}")
        for row in self._cur.iterate(sql=op.sql, params=params):
            if isinstance(row, data.Error):
                yield self._failed(row)
                return

            yield self._to_entity(row)

    def _params(self, *, op: data.Operation, source: typing.Mapping[str, typing.Any]) -> list[typing.Any]:
        return [to_param(field=self._table.field(name), value=source[name]) for name in op.params]

    def _to_entity(self, row: data.Row, /) -> typing.Any | data.Error:
        values = row_to_values(table=self._table, row=row)
        if isinstance(values, data.Error):
            return self._failed(values)

        try:
            return self.entity_class(**values)
        except pydantic.ValidationError as e:
            return self._failed(data.BackendError.new(str(e), table_name=self._table.name))

    def _failed(self, error: data.Error, /) -> data.Error:
        logger.warning(f"{type(error).__name__}: {error!s}")
        return error
