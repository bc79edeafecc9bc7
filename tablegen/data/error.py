from __future__ import annotations

import dataclasses
import inspect
import typing

__all__ = (
    "BackendError",
    "Conflict",
    "Error",
    "NotFound",
    "SchemaError",
    "TableGenError",
)


class TableGenError(Exception):
    """Base class for errors raised in the tablegen codebase"""


class SchemaError(TableGenError):
    """The table description is incomplete or contradicts itself."""

    def __init__(self, message: str, /, *, table_name: str | None = None, field_name: str | None = None):
        self.message = message
        self.table_name = table_name
        self.field_name = field_name

        if table_name and field_name:
            prefix = f"{table_name}.{field_name}: "
        elif table_name:
            prefix = f"{table_name}: "
        else:
            prefix = ""

        super().__init__(prefix + message)


@dataclasses.dataclass(frozen=True)
class Error:
    error_message: str
    file: str
    fn: str
    fn_args: dict[str, typing.Any]

    @classmethod
    def new(cls, error_message: str, /, **fn_args: typing.Any) -> typing.Self:
        frame = inspect.currentframe()
        caller = frame.f_back if frame is not None else None
        try:
            if caller is None:
                return cls(error_message=error_message, file="", fn="", fn_args=fn_args)

            return cls(
                error_message=error_message,
                file=caller.f_code.co_filename,
                fn=caller.f_code.co_name,
                fn_args=fn_args,
            )
        finally:
            del frame, caller

    def __str__(self) -> str:
        if self.fn_args:
            args = ", ".join(f"{k}={v!r}" for k, v in self.fn_args.items())
            return f"{self.error_message} [{self.fn}({args})]"
        return self.error_message


@dataclasses.dataclass(frozen=True)
class NotFound(Error):
    """A query expected to return a row returned none."""


@dataclasses.dataclass(frozen=True)
class Conflict(Error):
    """A write expected to affect exactly one row affected none."""


@dataclasses.dataclass(frozen=True)
class BackendError(Error):
    """The database driver failed."""
