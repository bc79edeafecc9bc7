import enum

__all__ = ("Cardinality",)


# noinspection PyArgumentList
class Cardinality(enum.Enum):
    One = "get_one"
    Optional = "get_optional"
    Many = "get_many"
