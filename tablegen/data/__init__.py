from tablegen.data import value_type
from tablegen.data.accessor import *
from tablegen.data.api import *
from tablegen.data.cardinality import *
from tablegen.data.config import *
from tablegen.data.cursor import *
from tablegen.data.cursor_provider import *
from tablegen.data.db_config import *
from tablegen.data.dialect import *
from tablegen.data.error import *
from tablegen.data.field import *
from tablegen.data.operation import *
from tablegen.data.operation_set import *
from tablegen.data.patch_shape import *
from tablegen.data.row import *
from tablegen.data.table import *
