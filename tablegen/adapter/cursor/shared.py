import typing

from tablegen import data

__all__ = (
    "execute",
    "fetch_all",
    "fetch_one",
    "iterate",
)

BATCH_SIZE: typing.Final[int] = 500


class DbApiCursor(typing.Protocol):
    connection: typing.Any
    description: typing.Any
    rowcount: int

    def execute(self, sql: typing.Any, params: typing.Any = ..., /) -> typing.Any: ...

    def fetchone(self) -> typing.Any: ...

    def fetchmany(self, size: int = ..., /) -> typing.Sequence[typing.Any]: ...

    def fetchall(self) -> typing.Sequence[typing.Any]: ...

    def close(self) -> typing.Any: ...


def execute(
    *,
    cur: DbApiCursor,
    sql: str,
    params: typing.Sequence[typing.Any] | None,
) -> int | data.Error:
    try:
        _execute(cur=cur, sql=sql, params=params)
        return cur.rowcount
    except Exception as e:
        return data.BackendError.new(str(e), sql=sql, params=_params_tuple(params))


def fetch_one(
    *,
    cur: DbApiCursor,
    sql: str,
    params: typing.Sequence[typing.Any] | None,
) -> data.Row | None | data.Error:
    try:
        _execute(cur=cur, sql=sql, params=params)

        if (result := cur.fetchone()) is not None:
            return _to_row(cur=cur, values=result)

        return None
    except Exception as e:
        return data.BackendError.new(str(e), sql=sql, params=_params_tuple(params))


def fetch_all(
    *,
    cur: DbApiCursor,
    sql: str,
    params: typing.Sequence[typing.Any] | None,
) -> tuple[data.Row, ...] | data.Error:
    try:
        _execute(cur=cur, sql=sql, params=params)

        return tuple(_to_row(cur=cur, values=row) for row in cur.fetchall())
    except Exception as e:
        return data.BackendError.new(str(e), sql=sql, params=_params_tuple(params))


def iterate(
    *,
    cur: DbApiCursor,
    sql: str,
    params: typing.Sequence[typing.Any] | None,
    batch_size: int = BATCH_SIZE,
) -> typing.Generator[data.Row | data.Error, None, None]:
    """Yield rows in batches from a cursor of their own.

    The shared cursor stays free for other statements while the rows are
    being consumed.
    """
    try:
        own_cur = cur.connection.cursor()
    except Exception as e:
        yield data.BackendError.new(str(e), sql=sql, params=_params_tuple(params))
        return

    try:
        _execute(cur=own_cur, sql=sql, params=params)

        while batch := own_cur.fetchmany(batch_size):
            for row in batch:
                yield _to_row(cur=own_cur, values=row)
    except Exception as e:
        yield data.BackendError.new(str(e), sql=sql, params=_params_tuple(params))
    finally:
        own_cur.close()


def _execute(*, cur: DbApiCursor, sql: str, params: typing.Sequence[typing.Any] | None) -> None:
    if params:
        cur.execute(sql, list(params))
    else:
        cur.execute(sql)


def _to_row(*, cur: DbApiCursor, values: typing.Any) -> data.Row:
    if isinstance(values, dict):
        return data.Row(values)

    col_names = [col[0] for col in cur.description]
    return data.Row(zip(col_names, values))


def _params_tuple(params: typing.Sequence[typing.Any] | None, /) -> tuple[typing.Any, ...] | None:
    return None if params is None else tuple(params)
