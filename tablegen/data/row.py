import typing

__all__ = ("Row",)


Row: typing.TypeAlias = dict[str, typing.Any]
