# Schemas package (re-export feature modules for stable imports)
from .auth import *
from .reports import *
from .admin import *
from .webhooks import *
from .common import *
