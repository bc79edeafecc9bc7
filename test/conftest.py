import json
import pathlib
import sqlite3
import typing

import pytest

from tablegen import data, service
from tablegen.adapter.cursor.sqlite import SqliteCursor
from tablegen.adapter.dialect import SQLITE


@pytest.fixture(scope="function")
def _root_dir_fixture(request: typing.Any) -> pathlib.Path:
    return next(p for p in pathlib.Path(request.fspath).parents if p.name == "test")


@pytest.fixture(scope="function")
def _config_fixture(_root_dir_fixture: pathlib.Path) -> dict[str, typing.Any]:
    config_path = _root_dir_fixture / "test-config.json"
    if not config_path.exists():
        pytest.skip(f"{config_path} does not exist.")

    with config_path.open("r") as fh:
        return typing.cast(dict[str, typing.Any], json.load(fh))


@pytest.fixture(scope="function")
def pg_connection_str_fixture(_config_fixture: dict[str, typing.Any]) -> str:
    return typing.cast(str, _config_fixture["ds"]["pg"]["connection-string"])


@pytest.fixture(scope="function")
def users_description_fixture() -> dict[str, typing.Any]:
    return {
        "table": "users",
        "name": "User",
        "id": "user_id",
        "insertable": "InsertUser",
        "fields": [
            {
                "name": "user_id",
                "column": "id",
                "type": "int",
                "get_one": {"func": "get_by_user_id", "arg": "int"},
            },
            {"name": "first_name", "type": "str"},
            {"name": "last_name", "type": "str"},
            {"name": "email", "type": "str", "get_optional": {"arg": "str"}},
            {"name": "disabled", "type": "str | None"},
            {"name": "last_login", "type": "datetime | None", "default": True, "set": True},
        ],
        "patches": [
            {"name": "UpdateName", "fields": ["first_name", "last_name", "disabled"]},
        ],
    }


@pytest.fixture(scope="function")
def users_table_fixture(users_description_fixture: dict[str, typing.Any]) -> data.Table:
    return service.parse_table(users_description_fixture)


@pytest.fixture(scope="function")
def notes_table_fixture() -> data.Table:
    return service.parse_table(
        {
            "table": "notes",
            "fields": [
                {"name": "note_id", "column": "id", "type": "int", "id": True},
                {"name": "author", "type": "str", "get_many": True},
                {"name": "meta", "type": "json | None", "custom_type": True},
                {"name": "created", "type": "datetime", "default": True},
            ],
        }
    )


@pytest.fixture(scope="function")
def sqlite_connection_fixture() -> typing.Generator[sqlite3.Connection, None, None]:
    con = sqlite3.connect(":memory:")
    con.executescript(
        """
        CREATE TABLE users (
            id          INTEGER PRIMARY KEY AUTOINCREMENT
        ,   first_name  TEXT NOT NULL
        ,   last_name   TEXT NOT NULL
        ,   email       TEXT NOT NULL
        ,   disabled    TEXT NULL
        ,   last_login  TEXT NULL
        );

        CREATE TABLE notes (
            id       INTEGER PRIMARY KEY AUTOINCREMENT
        ,   author   TEXT NOT NULL
        ,   meta     TEXT NULL
        ,   created  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
        );
        """
    )
    try:
        yield con
    finally:
        con.close()


@pytest.fixture(scope="function")
def sqlite_cursor_fixture(sqlite_connection_fixture: sqlite3.Connection) -> SqliteCursor:
    return SqliteCursor(cursor=sqlite_connection_fixture.cursor())


@pytest.fixture(scope="function")
def users_repo_fixture(
    users_table_fixture: data.Table,
    sqlite_cursor_fixture: SqliteCursor,
) -> service.Repository:
    return service.Repository(
        operations=service.generate(table=users_table_fixture, dialect=SQLITE),
        cursor=sqlite_cursor_fixture,
    )


@pytest.fixture(scope="function")
def notes_repo_fixture(
    notes_table_fixture: data.Table,
    sqlite_cursor_fixture: SqliteCursor,
) -> service.Repository:
    return service.Repository(
        operations=service.generate(table=notes_table_fixture, dialect=SQLITE),
        cursor=sqlite_cursor_fixture,
    )


class RecordingCursor(data.Cursor):
    """Returns canned results and remembers every statement it was given."""

    def __init__(self, *, rows: typing.Iterable[data.Row | None] = (), row_count: int | data.Error = 1):
        self.rows: list[data.Row | None] = list(rows)
        self.row_count = row_count
        self.calls: list[tuple[str, tuple[typing.Any, ...]]] = []

    def execute(self, *, sql: str, params: typing.Sequence[typing.Any] | None) -> int | data.Error:
        self.calls.append((sql, tuple(params or ())))
        return self.row_count

    def fetch_one(self, *, sql: str, params: typing.Sequence[typing.Any] | None) -> data.Row | None | data.Error:
        self.calls.append((sql, tuple(params or ())))
        return self.rows.pop(0) if self.rows else None

    def fetch_all(self, *, sql: str, params: typing.Sequence[typing.Any] | None) -> tuple[data.Row, ...] | data.Error:
        self.calls.append((sql, tuple(params or ())))
        return tuple(row for row in self.rows if row is not None)

    def iterate(self, *, sql: str, params: typing.Sequence[typing.Any] | None) -> typing.Iterator[data.Row | data.Error]:
        self.calls.append((sql, tuple(params or ())))
        yield from (row for row in self.rows if row is not None)

    def last_insert_id(self) -> typing.Hashable | data.Error:
        return data.BackendError.new("RecordingCursor does not generate ids.")


@pytest.fixture(scope="function")
def recording_cursor_factory() -> typing.Callable[..., RecordingCursor]:
    return RecordingCursor
