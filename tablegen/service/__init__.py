from tablegen.service.deserialize import *
from tablegen.service.generate import *
from tablegen.service.parse import *
from tablegen.service.repository import *
from tablegen.service.shape import *
