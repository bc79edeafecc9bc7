import dataclasses
import typing

from tablegen.data.dialect import Dialect
from tablegen.data.operation import Operation
from tablegen.data.table import Table

__all__ = ("OperationSet",)


@dataclasses.dataclass(frozen=True, kw_only=True)
class OperationSet:
    table: Table
    dialect: Dialect
    get: Operation
    insert: Operation | None
    update: Operation | None
    delete: Operation
    accessors: dict[str, Operation]
    setters: dict[str, Operation]
    patches: dict[str, Operation]

    def __iter__(self) -> typing.Iterator[Operation]:
        yield self.get
        if self.insert is not None:
            yield self.insert
        if self.update is not None:
            yield self.update
        yield from self.patches.values()
        yield from self.setters.values()
        yield self.delete
        yield from self.accessors.values()
