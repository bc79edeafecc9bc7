import json
import pathlib
import typing

from tablegen import data

__all__ = ("load_description",)


def load_description(*, schema_file: pathlib.Path) -> dict[str, typing.Any] | data.Error:
    """Read a table description from a json file."""
    try:
        if not schema_file.exists():
            return data.Error.new(
                f"The schema file specified, {schema_file.resolve()!s}, does not exist.",
                schema_file=schema_file,
            )

        with schema_file.open("r") as fh:
            description = json.load(fh)

        if not isinstance(description, dict):
            return data.Error.new(
                f"The schema file, {schema_file!s}, must contain a json object, "
                f"but got {type(description).__name__}.",
                schema_file=schema_file,
            )

        return typing.cast(dict[str, typing.Any], description)
    except (OSError, json.JSONDecodeError) as e:
        return data.Error.new(str(e), schema_file=schema_file)
