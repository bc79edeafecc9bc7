from tablegen import data
from tablegen.adapter.dialect.mysql import MYSQL
from tablegen.adapter.dialect.pg import POSTGRES
from tablegen.adapter.dialect.sqlite import SQLITE

__all__ = ("create", "lookup")

_DIALECTS: dict[str, data.Dialect] = {d.name: d for d in (MYSQL, POSTGRES, SQLITE)}


def create(*, api: data.API) -> data.Dialect | data.Error:
    match api:
        case data.API.PSYCOPG:
            return POSTGRES
        case data.API.PYODBC:
            return MYSQL
        case data.API.SQLITE:
            return SQLITE
        case _:
            return data.Error.new(f"There is no dialect for the {api!s} api.", api=api)


def lookup(name: str, /) -> data.Dialect | data.Error:
    if dialect := _DIALECTS.get(name.lower()):
        return dialect

    return data.Error.new(
        f"The dialect specified, {name!r}, was not recognized. "
        f"Expected one of {', '.join(sorted(_DIALECTS))}.",
        name=name,
    )
