"""Basis states, Hilbert spaces and canonical ordering of :mod:`ed_hilbert`."""

from . import (
    quantum_statistics,
    canonical_order,
    quantum_state,
    hilbert_space,
)

from .quantum_statistics import *
from .canonical_order import *
from .quantum_state import *
from .hilbert_space import *

# All modules have an __all__ defined
__all__ = quantum_statistics.__all__.copy()
__all__ += canonical_order.__all__.copy()
__all__ += quantum_state.__all__.copy()
__all__ += hilbert_space.__all__.copy()
