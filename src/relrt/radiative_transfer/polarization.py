"""
Containers and conversions for per-channel radiative quantities.

Emitters return unpolarized results as :class:`RadiativeQuantities`
(intensity increment and transmission of the path element) and polarized
results as :class:`PolarizedQuantities` (Stokes increments plus absorption
and Faraday rotation coefficients).
"""

from typing import NamedTuple, Tuple

import jax.numpy as jnp
import numpy as np

from ..constants import OPACITY_FLOOR


class RadiativeQuantities(NamedTuple):
    """
    Unpolarized emission and transmission over one path element.

    Attributes
    ----------
    I : ndarray, shape (nbnu,)
        Emitted specific intensity increment in each channel.
    transmission : ndarray, shape (nbnu,)
        Fraction of incoming intensity surviving the element.
    """
    I: np.ndarray
    transmission: np.ndarray


class PolarizedQuantities(NamedTuple):
    """
    Polarized emission, absorption and rotation over one path element.

    Attributes
    ----------
    I, Q, U, V : ndarray, shape (nbnu,)
        Emitted Stokes increments.
    alpha_I, alpha_Q, alpha_U, alpha_V : ndarray, shape (nbnu,)
        Absorption coefficients.
    r_Q, r_U, r_V : ndarray, shape (nbnu,)
        Faraday rotation/conversion coefficients.
    """
    I: np.ndarray
    Q: np.ndarray
    U: np.ndarray
    V: np.ndarray
    alpha_I: np.ndarray
    alpha_Q: np.ndarray
    alpha_U: np.ndarray
    alpha_V: np.ndarray
    r_Q: np.ndarray
    r_U: np.ndarray
    r_V: np.ndarray

    @classmethod
    def unpolarized(cls, intensity, transmission) -> "PolarizedQuantities":
        """
        Polarized view of unpolarized results.

        Q = U = V = 0 and every coefficient but alpha_I vanishes. alpha_I
        is derived from the transmission by
        :func:`absorption_from_transmission`.
        """
        intensity = np.array(intensity, dtype=np.float64)
        zeros = np.zeros_like(intensity)
        return cls(intensity, zeros, zeros.copy(), zeros.copy(),
                   absorption_from_transmission(transmission),
                   zeros.copy(), zeros.copy(), zeros.copy(),
                   zeros.copy(), zeros.copy(), zeros.copy())


def absorption_from_transmission(transmission) -> np.ndarray:
    """
    Absorption coefficient matching a transmission, alpha = -ln(T).

    Transmissions below 0.1 are treated as opaque (alpha = +inf) so that
    nearly black elements do not produce huge finite coefficients.

    Parameters
    ----------
    transmission : float or array

    Returns
    -------
    ndarray
    """
    t = jnp.atleast_1d(jnp.asarray(transmission, dtype=jnp.float64))
    opaque = t < OPACITY_FLOOR
    alpha = jnp.where(opaque, jnp.inf, -jnp.log(jnp.where(opaque, 1.0, t)))
    return np.array(alpha)


def transmission_from_absorption(alpha_I) -> np.ndarray:
    """Transmission exp(-alpha_I) of a path element."""
    return np.array(jnp.exp(-jnp.asarray(alpha_I, dtype=jnp.float64)))


def attenuate(quantities: PolarizedQuantities,
              transmission) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Scalar-absorption transfer of one element.

    Emitted Stokes increments are attenuated by the transmission accumulated
    so far, and the transmission is then multiplied by exp(-alpha_I).
    Dichroism and Faraday rotation are neglected.

    Parameters
    ----------
    quantities : PolarizedQuantities
        Coefficients of the element.
    transmission : array, shape (nbnu,)
        Transmission accumulated along the ray before this element.

    Returns
    -------
    I, Q, U, V : ndarray
        Attenuated Stokes increments.
    transmission : ndarray
        Updated transmission.
    """
    t = jnp.asarray(transmission, dtype=jnp.float64)
    stokes = jnp.stack([jnp.asarray(quantities.I), jnp.asarray(quantities.Q),
                        jnp.asarray(quantities.U), jnp.asarray(quantities.V)])
    attenuated = np.array(stokes * t)
    new_t = np.array(t * jnp.exp(-jnp.asarray(quantities.alpha_I, dtype=jnp.float64)))
    return attenuated[0], attenuated[1], attenuated[2], attenuated[3], new_t
