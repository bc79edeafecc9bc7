import pathlib

import pydantic
import pytest

from tablegen import adapter, data


def _sqlite_config(path: pathlib.Path) -> data.DbConfig:
    return data.DbConfig(
        db_id="local",
        api=data.API.SQLITE,
        host=None,
        db_name=None,
        keyring_db_username_entry=None,
        keyring_db_password_entry=None,
        connection_string=pydantic.SecretStr(str(path)),
    )


def test_sqlite_provider_commits_on_exit(tmp_path: pathlib.Path):
    provider = adapter.cursor_provider.create(db_config=_sqlite_config(tmp_path / "test.db"))
    assert isinstance(provider, data.CursorProvider)

    with provider.open() as cur:
        assert isinstance(cur, data.Cursor)
        cur.execute(sql="CREATE TABLE t (id INTEGER PRIMARY KEY, v TEXT)", params=None)
        cur.execute(sql="INSERT INTO t (v) VALUES (?1)", params=["a"])

    with provider.open() as cur:
        assert isinstance(cur, data.Cursor)
        assert cur.fetch_all(sql="SELECT v FROM t", params=None) == ({"v": "a"},)


def test_sqlite_provider_rolls_back_on_error(tmp_path: pathlib.Path):
    provider = adapter.cursor_provider.create(db_config=_sqlite_config(tmp_path / "test.db"))
    assert isinstance(provider, data.CursorProvider)

    with provider.open() as cur:
        assert isinstance(cur, data.Cursor)
        cur.execute(sql="CREATE TABLE t (id INTEGER PRIMARY KEY, v TEXT)", params=None)

    with pytest.raises(RuntimeError):
        with provider.open() as cur:
            assert isinstance(cur, data.Cursor)
            cur.execute(sql="INSERT INTO t (v) VALUES (?1)", params=["a"])
            raise RuntimeError("boom")

    with provider.open() as cur:
        assert isinstance(cur, data.Cursor)
        assert cur.fetch_all(sql="SELECT v FROM t", params=None) == ()
