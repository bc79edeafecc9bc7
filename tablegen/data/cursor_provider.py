import abc
import contextlib
import typing

from tablegen.data.cursor import Cursor
from tablegen.data.error import Error

__all__ = ("CursorProvider",)


class CursorProvider(abc.ABC):
    @contextlib.contextmanager
    @abc.abstractmethod
    def open(self) -> typing.Generator[Cursor | Error, None, None]:
        """Yield a cursor, committing when the block exits cleanly and rolling back otherwise."""
        raise NotImplementedError
