"""
relrt: radiative transfer at ray-object intersections in curved spacetime.

Computes intensity, redshift, binned and differential spectra and Stokes
parameters each time a light ray crosses an emitting or absorbing object,
for emission models implementing any subset of the emission operations.
"""

# Enable 64-bit precision in JAX for accurate redshift factors.
# This MUST be done before any other JAX imports or operations.
# Note: If jax has already been imported elsewhere, you may need to set
# the environment variable JAX_ENABLE_X64=true before running Python.
import os
os.environ.setdefault("JAX_ENABLE_X64", "true")
import jax
jax.config.update("jax_enable_x64", True)

__version__ = "0.1.0"

from . import constants

from .constants import DBL_MAX, ALL_CHANNELS
from .errors import (TransferError, MissingMetricError, IncompatibleOptionsError,
                     CoordinateKindError)
from .quantities import Quantity
from .properties import Properties, Slot
from .metric import Metric, Minkowski, CoordKind
from .spectrometer import Spectrometer
from .photon import Photon
from .emitter import Emitter, Capability, DefaultFeature
from .radiative_transfer import (Hit, process_hit_quantities, integrate_emission,
                                 RadiativeQuantities, PolarizedQuantities)
from .logging_config import setup_logging

__all__ = [
    # Version
    "__version__",
    # Submodules
    "constants",
    # Constants
    "DBL_MAX",
    "ALL_CHANNELS",
    # Errors
    "TransferError",
    "MissingMetricError",
    "IncompatibleOptionsError",
    "CoordinateKindError",
    # Key classes
    "Quantity",
    "Properties",
    "Slot",
    "Metric",
    "Minkowski",
    "CoordKind",
    "Spectrometer",
    "Photon",
    "Emitter",
    "Capability",
    "DefaultFeature",
    "Hit",
    "RadiativeQuantities",
    "PolarizedQuantities",
    # Key functions
    "process_hit_quantities",
    "integrate_emission",
    "setup_logging",
]
