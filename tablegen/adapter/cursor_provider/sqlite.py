import contextlib
import sqlite3
import typing

from tablegen import data
from tablegen.adapter.cursor.sqlite import SqliteCursor

__all__ = ("SqliteCursorProvider",)


class SqliteCursorProvider(data.CursorProvider):
    def __init__(self, *, db_config: data.DbConfig):
        self._db_config: typing.Final[data.DbConfig] = db_config

    @contextlib.contextmanager
    def open(self) -> typing.Generator[data.Cursor | data.Error, None, None]:
        if self._db_config.connection_string is not None:
            path = self._db_config.connection_string.get_secret_value()
        else:
            path = self._db_config.db_name

        if not path:
            yield data.Error.new(
                "Either db-name or connection-string is required for a sqlite database.",
                db_config=self._db_config,
            )
            return

        try:
            con = sqlite3.connect(path)
        except sqlite3.Error as e:
            yield data.BackendError.new(
                f"An error occurred while opening the database: {e!s}",
                db_config=self._db_config,
            )
        else:
            cur = con.cursor()
            try:
                yield SqliteCursor(cursor=cur)
            except BaseException:
                con.rollback()
                raise
            else:
                con.commit()
            finally:
                con.close()
