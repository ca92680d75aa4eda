import logging
from importlib.metadata import PackageNotFoundError, version
from .settings import (
    set_sort_warning_threshold,
    get_sort_warning_threshold,
    set_max_nstate,
    get_max_nstate,
)
from . import tools, modeling
from .tools import *
from .modeling import *

try:
    __version__ = version("ed_hilbert")
except PackageNotFoundError:
    # Source tree usage without installed package metadata.
    __version__ = "0.0.0+local"

# Configure the root logger
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

__all__ = [
    "__version__",
    "set_sort_warning_threshold",
    "get_sort_warning_threshold",
    "set_max_nstate",
    "get_max_nstate",
    "tools",
    "modeling",
]
__all__ += tools.__all__.copy()
__all__ += modeling.__all__.copy()
