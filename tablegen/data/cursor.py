import abc
import typing

from tablegen.data.error import Error
from tablegen.data.row import Row

__all__ = ("Cursor",)


class Cursor(abc.ABC):
    @abc.abstractmethod
    def execute(
        self,
        *,
        sql: str,
        params: typing.Sequence[typing.Any] | None,
    ) -> int | Error:
        """Run a statement and return the number of affected rows."""
        raise NotImplementedError

    @abc.abstractmethod
    def fetch_one(
        self,
        *,
        sql: str,
        params: typing.Sequence[typing.Any] | None,
    ) -> Row | None | Error:
        raise NotImplementedError

    @abc.abstractmethod
    def fetch_all(
        self,
        *,
        sql: str,
        params: typing.Sequence[typing.Any] | None,
    ) -> tuple[Row, ...] | Error:
        raise NotImplementedError

    @abc.abstractmethod
    def iterate(
        self,
        *,
        sql: str,
        params: typing.Sequence[typing.Any] | None,
    ) -> typing.Iterator[Row | Error]:
        """Lazily yield rows; a failure part way through is yielded as the last item."""
        raise NotImplementedError

    @abc.abstractmethod
    def last_insert_id(self) -> typing.Hashable | Error:
        raise NotImplementedError
