import argparse
import json
import pathlib

import pydantic
from loguru import logger

from tablegen import adapter, data, service

__all__ = (
    "CheckArgs",
    "GetArgs",
    "SqlArgs",
    "create_parser",
    "parse_args",
    "run",
)


@pydantic.dataclasses.dataclass(frozen=True, kw_only=True)
class CheckArgs:
    schema_file: pathlib.Path


@pydantic.dataclasses.dataclass(frozen=True, kw_only=True)
class SqlArgs:
    schema_file: pathlib.Path
    dialect: str


@pydantic.dataclasses.dataclass(frozen=True, kw_only=True)
class GetArgs:
    schema_file: pathlib.Path
    db: str
    id_value: str
    config_file: pathlib.Path | None


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tablegen")
    subparser = parser.add_subparsers(dest="command")

    check_parser = subparser.add_parser("check")
    sql_parser = subparser.add_parser("sql")
    get_parser = subparser.add_parser("get")

    check_parser.add_argument("--schema", type=str, required=True)

    sql_parser.add_argument("--schema", type=str, required=True)
    sql_parser.add_argument("--dialect", type=str, required=True)

    get_parser.add_argument("--schema", type=str, required=True)
    get_parser.add_argument("--db", type=str, required=True)
    get_parser.add_argument("--id", type=str, required=True)
    get_parser.add_argument("--config", type=str)

    return parser


def parse_args(args: argparse.Namespace, /) -> CheckArgs | GetArgs | SqlArgs | data.Error:
    try:
        match args.command:
            case "check":
                return CheckArgs(schema_file=pathlib.Path(args.schema))
            case "sql":
                if not args.dialect:
                    return data.Error.new("--dialect is required.")

                return SqlArgs(schema_file=pathlib.Path(args.schema), dialect=args.dialect)
            case "get":
                if not args.db:
                    return data.Error.new("--db is required.")

                return GetArgs(
                    schema_file=pathlib.Path(args.schema),
                    db=args.db,
                    id_value=args.id,
                    config_file=pathlib.Path(args.config) if args.config else None,
                )
            case None:
                return data.Error.new("A command is required: check, sql, or get.")
            case _:
                return data.Error.new(f"{args.command} is invalid.")
    except (AttributeError, pydantic.ValidationError) as e:
        return data.Error.new(f"An error occurred while parsing command line args: {e!s}")


def run(args: CheckArgs | GetArgs | SqlArgs, /) -> str | data.Error:
    """Run a command and return the text to print."""
    table = _load_table(schema_file=args.schema_file)
    if isinstance(table, data.Error):
        return table

    match args:
        case CheckArgs():
            return (
                f"{table.name} is valid: {len(table.fields)} fields, identifier {table.identifier}, "
                f"{len(table.patches)} patches."
            )
        case SqlArgs(dialect=dialect_name):
            dialect = adapter.dialect.lookup(dialect_name)
            if isinstance(dialect, data.Error):
                return dialect

            operations = service.generate(table=table, dialect=dialect)
            return json.dumps([op.to_dict() for op in operations], indent=2)
        case GetArgs():
            return _get(args=args, table=table)


def _get(*, args: GetArgs, table: data.Table) -> str | data.Error:
    config_file = args.config_file or adapter.fs.get_config_path()
    if isinstance(config_file, data.Error):
        return config_file

    config = adapter.config.load(config_file=config_file)
    if isinstance(config, data.Error):
        return config

    db_config = config.db(args.db)
    if db_config is None:
        return data.Error.new(
            f"--db was {args.db}, but could not find database entry by that name in the config file.",
            config_file=config_file,
        )

    dialect = adapter.dialect.create(api=db_config.api)
    if isinstance(dialect, data.Error):
        return dialect

    try:
        id_value = pydantic.TypeAdapter(table.identifier_field.value_type).validate_python(args.id_value)
    except pydantic.ValidationError as e:
        return data.Error.new(f"--id could not be converted: {e!s}", id_value=args.id_value)

    cursor_provider = adapter.cursor_provider.create(db_config=db_config)
    if isinstance(cursor_provider, data.Error):
        return cursor_provider

    operations = service.generate(table=table, dialect=dialect)
    with cursor_provider.open() as cur:
        if isinstance(cur, data.Error):
            return cur

        entity = service.Repository(operations=operations, cursor=cur).get(id_value)
        if isinstance(entity, data.Error):
            return entity

    logger.info(f"Fetched {table.name} {id_value!r} from {db_config.db_id}.")

    return pydantic.TypeAdapter(type(entity)).dump_json(entity, indent=2).decode()


def _load_table(*, schema_file: pathlib.Path) -> data.Table | data.Error:
    schema_file = adapter.fs.resolve_schema_path(schema_file)

    description = adapter.schema_file.load_description(schema_file=schema_file)
    if isinstance(description, data.Error):
        return description

    try:
        return service.parse_table(description)
    except data.SchemaError as e:
        return data.Error.new(str(e), schema_file=schema_file)
