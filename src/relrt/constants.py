"""
Numerical constants used throughout relrt.

Frequencies are in Hz and lengths in metres (SI) unless otherwise specified.
"""

# Enable 64-bit precision in JAX for accurate redshift factors.
# This must be done before any JAX operations are performed.
import jax
jax.config.update("jax_enable_x64", True)

import numpy as np

# Largest representable double, used as "not yet set" sentinel
DBL_MAX = float(np.finfo(np.float64).max)

# Smallest positive normal double
DBL_MIN = float(np.finfo(np.float64).tiny)

# Channel index addressing the broadband (observer frequency) transmission
ALL_CHANNELS = -1

# Impact coordinates store the object state and the photon state (8 + 8)
IMPACTCOORDS_SIZE = 16

# Below this transmission the absorption coefficient is floored to +inf
OPACITY_FLOOR = 0.1

# Relative tolerance of the band integrator
INTEGRATION_RTOL = 1e-2

# Speed of light
c_SI = 2.99792458e8  # m/s
