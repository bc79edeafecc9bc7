import enum

import pydantic

__all__ = ("Operation", "ResultShape")


# noinspection PyArgumentList
class ResultShape(enum.Enum):
    One = "one"
    Optional = "optional"
    Many = "many"
    RowCount = "row-count"


@pydantic.dataclasses.dataclass(frozen=True, kw_only=True, config=pydantic.ConfigDict(strict=True))
class Operation:
    name: str
    sql: str
    params: tuple[str, ...]
    result: ResultShape

    def to_dict(self) -> dict[str, str | list[str]]:
        return {
            "name": self.name,
            "sql": self.sql,
            "params": list(self.params),
            "result": self.result.value,
        }
