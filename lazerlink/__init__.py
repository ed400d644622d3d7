from __future__ import annotations

from . import constants
from . import context
from . import errors
from . import logging
from . import models
from . import objects
from . import repositories
from . import settings
from . import storage
from . import usecases
from . import wire
