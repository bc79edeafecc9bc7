import pydantic

from tablegen.data.db_config import DbConfig

__all__ = ("Config",)


@pydantic.dataclasses.dataclass(frozen=True, kw_only=True)
class Config:
    databases: tuple[DbConfig, ...]

    def db(self, /, db_id: str) -> DbConfig | None:
        return next((db for db in self.databases if db.db_id == db_id), None)

    def __repr__(self) -> str:
        return f"Config(databases={self.databases})"
