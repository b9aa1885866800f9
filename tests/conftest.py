"""
Pytest configuration for relrt tests.

This file ensures JAX x64 mode is enabled before any tests run, and
provides the kinematics shared by the hit tests.
"""

import os

# Set x64 mode via environment variable BEFORE any imports
os.environ["JAX_ENABLE_X64"] = "true"

# Now import relrt which will also set x64 mode
import relrt  # noqa: E402

import numpy as np  # noqa: E402
import pytest  # noqa: E402

from relrt import Minkowski, Hit  # noqa: E402


# Photon moving along +x with dt/dlambda = 1 (observer frequency 1)
PHOTON_STATE = np.array([5., 10., 0., 0., 1., 1., 0., 0.])

# Object moving along +x at v = 0.6: gamma = 1.25, so -p.u = 1.25 - 0.75 = 0.5
MOVING_OBJECT = np.array([5., 10., 0., 0., 1.25, 0.75, 0., 0.])
STATIC_OBJECT = np.array([5., 10., 0., 0., 1., 0., 0., 0.])


@pytest.fixture
def metric():
    """Flat Cartesian metric."""
    return Minkowski()


@pytest.fixture
def moving_hit():
    """Hit with ggredm1 = 0.5 (ggred = 2), dt = 0.4 so dsem = 0.2."""
    return Hit(PHOTON_STATE.copy(), MOVING_OBJECT.copy(), 0.4)


@pytest.fixture
def static_hit():
    """Hit with no frequency shift, dt = 0.4."""
    return Hit(PHOTON_STATE.copy(), STATIC_OBJECT.copy(), 0.4)


@pytest.fixture
def polarized_hit():
    """Moving hit carrying a polarization basis (16 photon coordinates)."""
    basis = np.array([0., 0., 1., 0., 0., 0., 0., 1.])
    return Hit(np.concatenate([PHOTON_STATE, basis]), MOVING_OBJECT.copy(), 0.4)
