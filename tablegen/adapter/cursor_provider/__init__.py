from tablegen.adapter.cursor_provider.strategy import *
