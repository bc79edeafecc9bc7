import functools
import json
import pathlib
import typing

import pydantic

from tablegen import data

__all__ = ("load",)


@functools.lru_cache(maxsize=1)
def load(*, config_file: pathlib.Path) -> data.Config | data.Error:
    try:
        if not config_file.exists():
            return data.Error.new(
                f"The config file specified, {config_file.resolve()!s}, does not exist.",
                config_file=config_file,
            )

        with config_file.open("r") as fh:
            d = typing.cast(dict[str, typing.Any], json.load(fh))

        if "databases" not in d.keys():
            return data.Error.new("config file is missing an entry for 'databases'.")

        databases: list[data.DbConfig] = []
        for database_dict in d["databases"]:
            database = _parse_database_dict(database_dict)
            if isinstance(database, data.Error):
                return database

            databases.append(database)

        return data.Config(databases=tuple(databases))
    except Exception as e:
        return data.Error.new(
            f"An error occurred while loading the config file: {e!s}",
            config_file=config_file,
        )


def _parse_database_dict(database_dict: dict[str, typing.Any], /) -> data.DbConfig | data.Error:
    try:
        if "name" not in database_dict.keys():
            return data.Error.new("database entry in config file is missing an entry for 'name'.")

        name: typing.Final[str] = database_dict["name"]

        if "api" not in database_dict.keys():
            return data.Error.new(f"database entry, {name}, is missing an entry for 'api'.")

        try:
            api: typing.Final[data.API] = data.API(database_dict["api"])
        except ValueError:
            return data.Error.new(
                f"could not convert api entry, {database_dict['api']!r}, to a data.API instance."
            )

        host: typing.Final[str | None] = database_dict.get("host")
        db_name: typing.Final[str | None] = database_dict.get("db-name")
        keyring_db_username_entry: typing.Final[str | None] = database_dict.get(
            "keyring-db-username-entry"
        )
        keyring_db_password_entry: typing.Final[str | None] = database_dict.get(
            "keyring-db-password-entry"
        )
        connection_string: typing.Final[str | None] = database_dict.get("connection-string")

        if connection_string is None:
            if api == data.API.SQLITE:
                if db_name is None:
                    return data.Error.new(
                        f"database entry, {name}, is a sqlite database, so if connection-string is "
                        f"null, then db-name must be provided."
                    )
            elif api == data.API.PYODBC:
                return data.Error.new(f"database entry, {name}, requires a connection-string.")
            elif (
                host is None
                or db_name is None
                or keyring_db_username_entry is None
                or keyring_db_password_entry is None
            ):
                return data.Error.new(
                    "If connection-string is null, then host, db-name, keyring-db-username-entry, and "
                    "keyring-db-password-entry must be provided."
                )

        return data.DbConfig(
            db_id=name,
            api=api,
            host=host,
            db_name=db_name,
            keyring_db_username_entry=keyring_db_username_entry,
            keyring_db_password_entry=keyring_db_password_entry,
            connection_string=None if connection_string is None else pydantic.SecretStr(connection_string),
        )
    except Exception as e:
        return data.Error.new(f"An error occurred while parsing database entry from json: {e!s}")
