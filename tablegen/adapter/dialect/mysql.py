from tablegen import data

__all__ = ("MYSQL",)


MYSQL: data.Dialect = data.Dialect(
    name="mysql",
    quote="`",
    param_style=data.ParamStyle.QMark,
    generated_values=data.GeneratedValues.LastInsertId,
    empty_insert="() VALUES ()",
)
