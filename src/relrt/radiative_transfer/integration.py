"""
Band integration of an emission function.

A spectrometer channel collects the emission integrated over its frequency
band. The integral is computed by successive global refinement: each pass
halves the sampling step over the whole band and averages the refined
midpoint sum with the previous estimate, until two successive estimates
agree to 1%.
"""

import logging
import warnings
from typing import Callable, Sequence

import numpy as np

from ..constants import INTEGRATION_RTOL

logger = logging.getLogger(__name__)


def integrate_emission(emission: Callable[[float], float], nu1: float, nu2: float,
                       rtol: float = INTEGRATION_RTOL, max_refinements: int = 20) -> float:
    """
    Integrate ``emission`` over the band [nu1, nu2].

    Parameters
    ----------
    emission : callable
        Scalar function of the emitted frequency [Hz].
    nu1, nu2 : float
        Band edges. They may be given in either order.
    rtol : float, optional
        Relative tolerance between successive estimates. Default: 1e-2
    max_refinements : int, optional
        Maximum number of halvings. The stopping rule can never be met by
        a negative integral, in which case the last estimate is returned
        with a RuntimeWarning. Default: 20

    Returns
    -------
    float
        Integral of the emission over the band.

    Notes
    -----
    Starting from the trapezoid over the whole band,

        I_0 = (f(nu1) + f(nu2)) (nu2 - nu1) / 2

    pass k samples the 2^(k-1) new midpoints at spacing h_k = (nu2 - nu1) / 2^(k-1)
    and sets

        I_k = 0.5 * (I_{k-1} + h_k * sum f(midpoints))

    until |I_k - I_{k-1}| <= rtol * I_k.

    Examples
    --------
    >>> integrate_emission(lambda nu: 2.0, 1.0, 3.0)
    4.0
    """
    if nu1 > nu2:
        nu1, nu2 = nu2, nu1

    f1 = emission(nu1)
    f2 = emission(nu2)
    dnux2 = (nu2 - nu1) * 2.
    Icur = (f2 + f1) * dnux2 * 0.25
    logger.debug("integrate_emission: [%g, %g] I0=%g", nu1, nu2, Icur)

    for _ in range(max_refinements):
        Iprev = Icur
        dnux2 *= 0.5
        nu = nu1 + 0.5 * dnux2
        while nu < nu2:
            Icur += emission(nu) * dnux2
            nu += dnux2
        Icur *= 0.5
        logger.debug("integrate_emission: dnu=%g I=%g", dnux2, Icur)
        # A NaN estimate also stops
        if not abs(Icur - Iprev) > rtol * Icur:
            return Icur

    warnings.warn(
        f"Band integral over [{nu1:g}, {nu2:g}] Hz did not converge after "
        f"{max_refinements} refinements; returning {Icur:g}",
        RuntimeWarning
    )
    return Icur


def integrate_emission_channels(emission: Callable[[float], float],
                                boundaries: Sequence[float],
                                chaninds, **kwargs) -> np.ndarray:
    """
    Integrate ``emission`` over every channel of a spectrometer.

    Parameters
    ----------
    emission : callable
        Scalar function of the emitted frequency [Hz].
    boundaries : array
        Channel boundaries [Hz], usually already shifted to the emitter
        frame.
    chaninds : array of int, shape (nbnu, 2) or (2*nbnu,)
        Indices into ``boundaries`` of the edges of each channel.
    **kwargs
        Passed to :func:`integrate_emission`.

    Returns
    -------
    ndarray, shape (nbnu,)
    """
    chaninds = np.asarray(chaninds).reshape(-1, 2)
    return np.array([
        integrate_emission(emission, boundaries[lo], boundaries[hi], **kwargs)
        for lo, hi in chaninds
    ], dtype=np.float64)
