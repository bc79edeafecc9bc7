from tablegen.adapter.dialect.mysql import *
from tablegen.adapter.dialect.pg import *
from tablegen.adapter.dialect.sqlite import *
from tablegen.adapter.dialect.strategy import *
