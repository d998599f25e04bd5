__title__ = 'postmortem'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .catalog import *
from .classifier import *
from .config import configure
from .faults import *
from .policy import *
from .presenter import *
from .terminal import *

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

# Library: leave handler configuration to the application.
__import__("logging").getLogger(__name__).addHandler(__import__("logging").NullHandler())

__all__ = (
    "__title__",
    "__license__",
    "__version__",
    "configure",
    "version_info"
)

# Load the exposed API of the catalog
__all__ += catalog.__all__  # type: ignore[attr-defined]
# Load the exposed API of the classifier
__all__ += classifier.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the policy
__all__ += policy.__all__  # type: ignore[attr-defined]
# Load the exposed API of the presenter
__all__ += presenter.__all__  # type: ignore[attr-defined]
# Load the exposed API of the terminal
__all__ += terminal.__all__  # type: ignore[attr-defined]
