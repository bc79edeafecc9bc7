import typing

import pyodbc

from tablegen import data
from tablegen.adapter.cursor import shared

__all__ = ("OdbcCursor",)


class OdbcCursor(data.Cursor):
    """Cursor for MySQL over ODBC.

    Connect with ``FOUND_ROWS=1`` in the connection string so that an UPDATE
    reports matched rows instead of changed rows.
    """

    def __init__(self, *, cursor: pyodbc.Cursor):
        self._cursor: typing.Final[pyodbc.Cursor] = cursor

    def execute(
        self,
        *,
        sql: str,
        params: typing.Sequence[typing.Any] | None,
    ) -> int | data.Error:
        return shared.execute(cur=self._cursor, sql=sql, params=params)

    def fetch_one(
        self,
        *,
        sql: str,
        params: typing.Sequence[typing.Any] | None,
    ) -> data.Row | None | data.Error:
        return shared.fetch_one(cur=self._cursor, sql=sql, params=params)

    def fetch_all(
        self,
        *,
        sql: str,
        params: typing.Sequence[typing.Any] | None,
    ) -> tuple[data.Row, ...] | data.Error:
        return shared.fetch_all(cur=self._cursor, sql=sql, params=params)

    def iterate(
        self,
        *,
        sql: str,
        params: typing.Sequence[typing.Any] | None,
    ) -> typing.Iterator[data.Row | data.Error]:
        return shared.iterate(cur=self._cursor, sql=sql, params=params)

    def last_insert_id(self) -> typing.Hashable | data.Error:
        row = shared.fetch_one(cur=self._cursor, sql="SELECT LAST_INSERT_ID() AS id", params=None)
        if isinstance(row, data.Error):
            return row

        if row is None:
            return data.BackendError.new("SELECT LAST_INSERT_ID() returned no rows.")

        return typing.cast(typing.Hashable, row["id"])
