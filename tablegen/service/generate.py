import typing

from loguru import logger

from tablegen import data

__all__ = ("generate",)


def generate(*, table: data.Table, dialect: data.Dialect) -> data.OperationSet:
    id_field = table.identifier_field

    get = data.Operation(
        name="get",
        sql=_select_sql(table=table, dialect=dialect, key=id_field),
        params=(id_field.name,),
        result=data.ResultShape.One,
    )

    accessors: dict[str, data.Operation] = {}
    for field in table.fields:
        for accessor in field.accessors:
            func, _ = accessor.or_fallback(field)
            accessors[func] = data.Operation(
                name=func,
                sql=_select_sql(table=table, dialect=dialect, key=field),
                params=(field.name,),
                result=_ACCESSOR_RESULT[accessor.cardinality],
            )

    setters = {
        field.setter: _update_operation(
            name=field.setter,
            table=table,
            dialect=dialect,
            fields=(field,),
        )
        for field in table.fields
        if field.setter is not None
    }

    patches = {
        patch.name: _update_operation(
            name=patch.name,
            table=table,
            dialect=dialect,
            fields=tuple(table.field(name) for name in patch.fields),
        )
        for patch in table.patches
    }

    if updatable := table.fields_except_identifier():
        update: data.Operation | None = _update_operation(
            name="update",
            table=table,
            dialect=dialect,
            fields=updatable,
        )
    else:
        update = None

    operations = data.OperationSet(
        table=table,
        dialect=dialect,
        get=get,
        insert=_insert_operation(table=table, dialect=dialect) if table.insertable else None,
        update=update,
        delete=data.Operation(
            name="delete",
            sql=f"DELETE FROM {table.name} WHERE {id_field.column} = {dialect.placeholder(1)}",
            params=(id_field.name,),
            result=data.ResultShape.RowCount,
        ),
        accessors=accessors,
        setters=setters,
        patches=patches,
    )

    logger.debug(
        f"Generated {sum(1 for _ in operations)} operations for {table.name} using the "
        f"{dialect.name} dialect."
    )

    return operations


_ACCESSOR_RESULT: typing.Final[dict[data.Cardinality, data.ResultShape]] = {
    data.Cardinality.One: data.ResultShape.One,
    data.Cardinality.Optional: data.ResultShape.Optional,
    data.Cardinality.Many: data.ResultShape.Many,
}


def _select_sql(*, table: data.Table, dialect: data.Dialect, key: data.Field) -> str:
    return (
        f"SELECT {table.column_list(dialect)} FROM {table.name} "
        f"WHERE {key.column} = {dialect.placeholder(1)}"
    )


def _insert_operation(*, table: data.Table, dialect: data.Dialect) -> data.Operation:
    fields = table.insertable_fields()

    if fields:
        col_name_csv = ", ".join(f.column for f in fields)
        placeholder_csv = ", ".join(dialect.placeholders(len(fields)))
        sql = f"INSERT INTO {table.name} ({col_name_csv}) VALUES ({placeholder_csv})"
    else:
        sql = f"INSERT INTO {table.name} {dialect.empty_insert}"

    if dialect.generated_values == data.GeneratedValues.Returning:
        sql += f" RETURNING {table.column_list(dialect)}"
        result = data.ResultShape.One
    else:
        result = data.ResultShape.RowCount

    return data.Operation(
        name="insert",
        sql=sql,
        params=tuple(f.name for f in fields),
        result=result,
    )


def _update_operation(
    *,
    name: str,
    table: data.Table,
    dialect: data.Dialect,
    fields: tuple[data.Field, ...],
) -> data.Operation:
    id_field = table.identifier_field

    set_clause = ", ".join(
        f"{field.column} = {placeholder}"
        for field, placeholder in zip(fields, dialect.placeholders(len(fields)))
    )

    return data.Operation(
        name=name,
        sql=(
            f"UPDATE {table.name} SET {set_clause} "
            f"WHERE {id_field.column} = {dialect.placeholder(len(fields) + 1)}"
        ),
        params=tuple(f.name for f in fields) + (id_field.name,),
        result=data.ResultShape.RowCount,
    )
