from tablegen import data

__all__ = ("POSTGRES",)


POSTGRES: data.Dialect = data.Dialect(
    name="postgres",
    quote='"',
    param_style=data.ParamStyle.Format,
    generated_values=data.GeneratedValues.Returning,
)
