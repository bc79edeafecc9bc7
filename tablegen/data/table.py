from __future__ import annotations

import dataclasses

from tablegen.data.dialect import Dialect
from tablegen.data.error import SchemaError
from tablegen.data.field import Field
from tablegen.data.patch_shape import PatchShape

__all__ = ("Table",)


@dataclasses.dataclass(frozen=True, kw_only=True)
class Table:
    name: str
    entity_name: str
    identifier: str
    fields: tuple[Field, ...]
    insertable: str | None = None
    patches: tuple[PatchShape, ...] = ()

    def __post_init__(self) -> None:
        if sum(1 for f in self.fields if f.name == self.identifier) != 1:
            raise SchemaError(
                f"The identifier, {self.identifier!r}, must name exactly one field.",
                table_name=self.name,
            )

    @property
    def identifier_field(self) -> Field:
        return self.field(self.identifier)

    def field(self, /, name: str) -> Field:
        try:
            return next(f for f in self.fields if f.name == name)
        except StopIteration:
            raise KeyError(f"{self.name} has no field named {name!r}.") from None

    def patch(self, /, name: str) -> PatchShape:
        try:
            return next(p for p in self.patches if p.name == name)
        except StopIteration:
            raise KeyError(f"{self.name} has no patch named {name!r}.") from None

    def fields_except_identifier(self) -> tuple[Field, ...]:
        return tuple(f for f in self.fields if f.name != self.identifier)

    def insertable_fields(self) -> tuple[Field, ...]:
        return tuple(f for f in self.fields_except_identifier() if not f.has_default)

    def default_fields(self) -> tuple[Field, ...]:
        return tuple(f for f in self.fields if f.has_default)

    def column_list(self, /, dialect: Dialect) -> str:
        return ", ".join(f.fmt_for_select(dialect) for f in self.fields)
