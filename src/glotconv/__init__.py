from . import version

__version__ = version.__version__

from . import errors
from . import formats
