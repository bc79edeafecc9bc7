import enum

import pydantic

__all__ = ("Dialect", "GeneratedValues", "ParamStyle")


# noinspection PyArgumentList
class ParamStyle(enum.Enum):
    Format = "format"  # %s
    Numeric = "numeric"  # ?1, ?2, ...
    QMark = "qmark"  # ?

    def placeholder(self, /, index: int) -> str:
        if index < 1:
            raise ValueError(f"Parameter indices start at 1, but got {index}.")

        match self:
            case ParamStyle.Format:
                return "%s"
            case ParamStyle.Numeric:
                return f"?{index}"
            case ParamStyle.QMark:
                return "?"


# noinspection PyArgumentList
class GeneratedValues(enum.Enum):
    Returning = "returning"
    LastInsertId = "last-insert-id"


@pydantic.dataclasses.dataclass(frozen=True, kw_only=True, config=pydantic.ConfigDict(strict=True))
class Dialect:
    name: str
    quote: str = pydantic.Field(min_length=1, max_length=1)
    param_style: ParamStyle
    generated_values: GeneratedValues
    empty_insert: str = "DEFAULT VALUES"

    def placeholder(self, /, index: int) -> str:
        return self.param_style.placeholder(index)

    def placeholders(self, /, count: int, *, start: int = 1) -> list[str]:
        return [self.placeholder(i) for i in range(start, start + count)]

    def __repr__(self) -> str:
        return f"Dialect(name={self.name!r})"
