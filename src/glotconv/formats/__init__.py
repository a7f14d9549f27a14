"""

formats

Containers for the various data files. The instrument containers consist of:

- A settings dataclass describing the layout of the instrument export.
- A measurement table (awkward array) of the unmodified data.

Along with the helper functions to check the table and write it in the
wavelength explicit format used by the Glotaran analysis tool.

"""

from . import common
from . import explicit
from . import table
from . import transient
from . import fluorescence
