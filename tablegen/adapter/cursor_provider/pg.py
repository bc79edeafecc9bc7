import contextlib
import typing

import keyring
import psycopg

from tablegen import data
from tablegen.adapter.cursor.pg import PgCursor

__all__ = ("PgCursorProvider",)


class PgCursorProvider(data.CursorProvider):
    def __init__(self, *, db_config: data.DbConfig):
        self._db_config: typing.Final[data.DbConfig] = db_config

    @contextlib.contextmanager
    def open(self) -> typing.Generator[data.Cursor | data.Error, None, None]:
        try:
            con = self._connect()
        except Exception as e:
            yield data.BackendError.new(
                f"An error occurred while connecting to the database: {e!s}",
                db_config=self._db_config,
            )
        else:
            try:
                with con.cursor() as cur:
                    cur.execute("SET SESSION idle_in_transaction_session_timeout = '15min';")
                    cur.execute("SET SESSION lock_timeout = '5min';")
                    yield PgCursor(cursor=cur)
            except BaseException:
                con.rollback()
                raise
            else:
                con.commit()
            finally:
                con.close()

    def _connect(self) -> psycopg.Connection:
        if self._db_config.connection_string is not None:
            return psycopg.connect(self._db_config.connection_string.get_secret_value())

        username = keyring.get_password("system", self._db_config.keyring_db_username_entry or "")
        password = keyring.get_password("system", self._db_config.keyring_db_password_entry or "")

        return psycopg.connect(
            host=self._db_config.host,
            dbname=self._db_config.db_name,
            user=username,
            password=password,
        )
