import datetime
import decimal
import sqlite3
import typing
import uuid

from tablegen import data
from tablegen.adapter.cursor import shared

__all__ = ("SqliteCursor",)


class SqliteCursor(data.Cursor):
    def __init__(self, *, cursor: sqlite3.Cursor):
        self._cursor: typing.Final[sqlite3.Cursor] = cursor

    def execute(
        self,
        *,
        sql: str,
        params: typing.Sequence[typing.Any] | None,
    ) -> int | data.Error:
        return shared.execute(cur=self._cursor, sql=sql, params=_adapt(params))

    def fetch_one(
        self,
        *,
        sql: str,
        params: typing.Sequence[typing.Any] | None,
    ) -> data.Row | None | data.Error:
        return shared.fetch_one(cur=self._cursor, sql=sql, params=_adapt(params))

    def fetch_all(
        self,
        *,
        sql: str,
        params: typing.Sequence[typing.Any] | None,
    ) -> tuple[data.Row, ...] | data.Error:
        return shared.fetch_all(cur=self._cursor, sql=sql, params=_adapt(params))

    def iterate(
        self,
        *,
        sql: str,
        params: typing.Sequence[typing.Any] | None,
    ) -> typing.Iterator[data.Row | data.Error]:
        return shared.iterate(cur=self._cursor, sql=sql, params=_adapt(params))

    def last_insert_id(self) -> typing.Hashable | data.Error:
        if self._cursor.lastrowid is None:
            return data.BackendError.new("No row has been inserted using this cursor.")

        return self._cursor.lastrowid


def _adapt(params: typing.Sequence[typing.Any] | None, /) -> list[typing.Any] | None:
    # dates, times, decimals and uuids are bound as text
    if params is None:
        return None

    return [_adapt_value(p) for p in params]


def _adapt_value(value: typing.Any, /) -> typing.Any:
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    elif isinstance(value, (decimal.Decimal, uuid.UUID)):
        return str(value)
    else:
        return value
