import dataclasses

__all__ = ("PatchShape",)


@dataclasses.dataclass(frozen=True, kw_only=True)
class PatchShape:
    name: str
    table_name: str
    fields: tuple[str, ...]
