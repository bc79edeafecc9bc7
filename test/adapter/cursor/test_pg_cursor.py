import datetime
import typing

import psycopg
import pytest

from tablegen import data, service
from tablegen.adapter.cursor.pg import PgCursor
from tablegen.adapter.dialect import POSTGRES


@pytest.fixture(scope="function")
def pg_cursor_fixture(pg_connection_str_fixture: str) -> typing.Generator[PgCursor, None, None]:
    with psycopg.connect(pg_connection_str_fixture) as con:
        with con.cursor() as cur:
            cur.execute(
                """
                CREATE TEMP TABLE users (
                    id          SERIAL PRIMARY KEY
                ,   first_name  TEXT NOT NULL
                ,   last_name   TEXT NOT NULL
                ,   email       TEXT NOT NULL
                ,   disabled    TEXT NULL
                ,   last_login  TIMESTAMP NULL
                );
                """
            )
            yield PgCursor(cursor=cur)

        con.rollback()


def test_users_round_trip(users_table_fixture: data.Table, pg_cursor_fixture: PgCursor):
    repo = service.Repository(
        operations=service.generate(table=users_table_fixture, dialect=POSTGRES),
        cursor=pg_cursor_fixture,
    )

    user = repo.insert({"first_name": "Moritz", "last_name": "Bischof", "email": "moritz@x.io"})
    assert not isinstance(user, data.Error), str(user)
    assert user.last_login is None

    last_login = datetime.datetime(2024, 1, 2, 3, 4, 5)
    assert repo.set_last_login(user, last_login) is None
    assert repo.get(user.user_id).last_login == last_login

    assert pg_cursor_fixture.last_insert_id() == user.user_id

    assert repo.delete(user) is None
    assert repo.by_email("moritz@x.io") is None
    assert isinstance(repo.update(user), data.Conflict)
