from tablegen import data

__all__ = ("create",)


def create(*, db_config: data.DbConfig) -> data.CursorProvider | data.Error:
    # driver modules are imported per api
    try:
        match db_config.api:
            case data.API.PSYCOPG:
                from tablegen.adapter.cursor_provider.pg import PgCursorProvider

                return PgCursorProvider(db_config=db_config)
            case data.API.PYODBC:
                from tablegen.adapter.cursor_provider.odbc import OdbcCursorProvider

                return OdbcCursorProvider(db_config=db_config)
            case data.API.SQLITE:
                from tablegen.adapter.cursor_provider.sqlite import SqliteCursorProvider

                return SqliteCursorProvider(db_config=db_config)
            case _:
                return data.Error.new(
                    f"CursorProvider is not implemented for the {db_config.api!s} api.",
                    db_config=db_config,
                )
    except ImportError as e:
        return data.Error.new(str(e), db_config=db_config)
