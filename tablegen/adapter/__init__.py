from tablegen.adapter import config, cursor_provider, dialect, fs, schema_file
