import dataclasses
import typing

from tablegen.data.accessor import Accessor
from tablegen.data.dialect import Dialect

__all__ = ("Field",)


@dataclasses.dataclass(frozen=True, kw_only=True)
class Field:
    name: str
    column: str
    value_type: typing.Any
    has_custom_type: bool = False
    has_default: bool = False
    accessors: tuple[Accessor, ...] = ()
    setter: str | None = None

    @property
    def settable(self) -> bool:
        return self.setter is not None

    @property
    def label(self) -> str:
        """The key this field's value is found under in a fetched row."""
        if self.has_custom_type:
            return f"{self.name}: _"
        return self.name

    def fmt_for_select(self, /, dialect: Dialect) -> str:
        if self.has_custom_type:
            q = dialect.quote
            return f"{self.column} AS {q}{self.name}: _{q}"
        elif self.name == self.column:
            return self.column
        else:
            return f"{self.column} AS {self.name}"
