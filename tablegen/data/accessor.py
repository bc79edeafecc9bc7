from __future__ import annotations

import dataclasses
import typing

from tablegen.data.cardinality import Cardinality

if typing.TYPE_CHECKING:
    from tablegen.data.field import Field

__all__ = ("Accessor",)


@dataclasses.dataclass(frozen=True, kw_only=True)
class Accessor:
    cardinality: Cardinality
    func: str | None = None
    arg_type: typing.Any = None

    def or_fallback(self, /, field: Field) -> tuple[str, typing.Any]:
        """The generated function name and argument type.

        The name defaults to ``by_<field name>`` and the argument type to the
        field's own value type.
        """
        func = self.func if self.func is not None else f"by_{field.name}"
        arg_type = self.arg_type if self.arg_type is not None else field.value_type
        return func, arg_type
