from tablegen import data

__all__ = ("SQLITE",)


SQLITE: data.Dialect = data.Dialect(
    name="sqlite",
    quote='"',
    param_style=data.ParamStyle.Numeric,
    generated_values=data.GeneratedValues.LastInsertId,
)
