__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'cliengine'
__author__ = 'Cliengine Developers'
__license__ = 'BSD-3-Clause'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .commands import *
from .engine import *
from .execution import *
from .faults import *
from .lexer import *
from .output import *
from .resolution import *
from .switches import *
from . import standard

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info",
    "standard",
)

# Load the exposed API of the commands
__all__ += commands.__all__  # type: ignore[attr-defined]
# Load the exposed API of the engine
__all__ += engine.__all__  # type: ignore[attr-defined]
# Load the exposed API of the execution
__all__ += execution.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the lexer
__all__ += lexer.__all__  # type: ignore[attr-defined]
# Load the exposed API of the output
__all__ += output.__all__  # type: ignore[attr-defined]
# Load the exposed API of the resolution
__all__ += resolution.__all__  # type: ignore[attr-defined]
# Load the exposed API of the switches
__all__ += switches.__all__  # type: ignore[attr-defined]
