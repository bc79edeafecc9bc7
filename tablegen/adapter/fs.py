import functools
import os
import pathlib
import sys

from tablegen import data

__all__ = (
    "get_config_path",
    "get_log_folder",
    "resolve_schema_path",
)


@functools.lru_cache
def _root_dir() -> pathlib.Path | data.Error:
    if getattr(sys, "frozen", False):
        path = pathlib.Path(os.path.dirname(sys.executable))

        if not path.exists():
            return data.Error.new(
                "os.path.dirname(sys.executable) returned an invalid path for a frozen executable."
            )

        return path

    try:
        return next(p for p in pathlib.Path(__file__).parents if (p / "tablegen").is_dir())
    except StopIteration:
        return data.Error.new(f"Could not find the project root above {__file__}.")


def _assets_dir() -> pathlib.Path | data.Error:
    root = _root_dir()
    if isinstance(root, data.Error):
        return root

    return root / "assets"


@functools.lru_cache
def get_config_path() -> pathlib.Path | data.Error:
    assets = _assets_dir()
    if isinstance(assets, data.Error):
        return assets

    return assets / "config.json"


@functools.lru_cache
def get_log_folder() -> pathlib.Path | data.Error:
    root = _root_dir()
    if isinstance(root, data.Error):
        return root

    try:
        folder = root / "logs"
        folder.mkdir(exist_ok=True)
        return folder
    except OSError as e:
        return data.Error.new(f"Could not create the log folder: {e!s}", root=root)


def resolve_schema_path(schema_file: pathlib.Path, /) -> pathlib.Path:
    """Find a schema file given as-is or by name in the assets folder.

    ``--schema users.json`` works from any directory as long as
    ``assets/users.json`` exists. The path is returned unchanged when it
    cannot be found in either place, so the caller reports the original name.
    """
    if schema_file.exists() or schema_file.is_absolute():
        return schema_file

    assets = _assets_dir()
    if isinstance(assets, data.Error):
        return schema_file

    if (candidate := assets / schema_file).exists():
        return candidate

    return schema_file
