"""
Observables of a single ray-object intersection.

:func:`process_hit_quantities` turns one hit (photon and object state at an
intersection point, plus the coordinate time step spent inside the object)
into increments of the requested observables, and updates the transmission
carried by the ray.

Frequency bookkeeping
---------------------
With the photon 4-momentum p normalized to an observer frequency of 1,

    ggredm1 = -p·u_obj = nu_em / nu_obs

and ggred = 1 / ggredm1 = nu_obs / nu_em. Since I_nu / nu^3 is invariant
along the ray, emitted intensities are multiplied by ggred^3. Binned
spectra are weighted by ggred^4.

The proper length crossed in the emitter frame is

    dsem = dlambda * ggredm1,    dlambda = dt / (dt/dlambda)

where dt/dlambda is the time component of p.
"""

import logging
from dataclasses import dataclass

import numpy as np

from ..constants import ALL_CHANNELS, DBL_MAX
from ..errors import IncompatibleOptionsError, MissingMetricError
from ..quantities import Quantity, STOKES

logger = logging.getLogger(__name__)


@dataclass
class Hit:
    """
    State at a ray-object intersection.

    Attributes
    ----------
    coord_ph : ndarray, shape (8,) or (16,)
        Photon 4-position and 4-velocity, optionally followed by the two
        parallel-transported polarization basis vectors.
    coord_obj : ndarray, shape (8,)
        Object 4-position and 4-velocity.
    dt : float
        Coordinate time step spent inside the object.
    """
    coord_ph: np.ndarray
    coord_obj: np.ndarray
    dt: float

    def __post_init__(self):
        self.coord_ph = np.asarray(self.coord_ph, dtype=np.float64)
        self.coord_obj = np.asarray(self.coord_obj, dtype=np.float64)
        if len(self.coord_ph) not in (8, 16):
            raise ValueError(f"Photon state must have 8 or 16 elements, "
                             f"got {len(self.coord_ph)}")
        if len(self.coord_obj) != 8:
            raise ValueError(f"Object state must have 8 elements, "
                             f"got {len(self.coord_obj)}")

    @property
    def extended(self) -> bool:
        """Whether the photon state carries a polarization basis."""
        return len(self.coord_ph) > 8


def emission_frequency_ratio(metric, hit: Hit, redshift: bool = True) -> float:
    """
    Ratio nu_em / nu_obs of emitted to observed frequency.

    Parameters
    ----------
    metric : Metric
        Spacetime metric, only needed when ``redshift`` is True.
    hit : Hit
    redshift : bool, optional
        If False, frequency shifts are ignored and 1 is returned.

    Returns
    -------
    float
        ggredm1 = -g(p_photon, u_object).

    Raises
    ------
    MissingMetricError
        If ``redshift`` is True and no metric is given.
    """
    if not redshift:
        return 1.
    if metric is None:
        raise MissingMetricError("Please set metric before computing redshift")
    return -metric.scalar_prod(hit.coord_ph[:4], hit.coord_obj[4:8], hit.coord_ph[4:8])


def process_hit_quantities(emitter, photon, hit: Hit, data=None):
    """
    Accumulate the observables of one hit.

    Parameters
    ----------
    emitter : Emitter
        Object that was hit. Its metric gives the redshift, its
        ``redshift`` flag enables Doppler/gravitational shifts, and its
        (possibly default) emission operations give the radiation.
    photon : Photon
        Ray. Provides observer frequency and spectrometer; its transmission
        is updated in place.
    hit : Hit
        Intersection state.
    data : Properties, optional
        Output slots. Nothing is done when None.

    Raises
    ------
    IncompatibleOptionsError
        If impact coordinates are requested for a hit carrying a
        polarization basis.
    MissingMetricError
        If redshift is enabled and the emitter has no metric.

    Notes
    -----
    Increments are added to the slots, never assigned, except for the
    redshift and emission time which reflect the last hit and the impact
    coordinates which reflect the first hit.
    """
    if data is None:
        logger.debug("process_hit_quantities: no data requested")
        return

    coord_ph, coord_obj = hit.coord_ph, hit.coord_obj
    freq_obs = photon.freq_obs
    spr = photon.spectrometer
    nbnuobs = spr.n_samples if spr is not None else 0
    nuobs = spr.midpoints if nbnuobs else np.empty(0)

    ggredm1 = emission_frequency_ratio(emitter.metric, hit, emitter.redshift)
    ggred = 1. / ggredm1
    dlambda = hit.dt / coord_ph[4]
    dsem = dlambda * ggredm1
    logger.debug("process_hit_quantities: freq_obs=%g, ggredm1=%g, ggred=%g, "
                 "dlambda=%g, dsem=%g", freq_obs, ggredm1, ggred, dlambda, dsem)

    if Quantity.REDSHIFT in data:
        data.slot(Quantity.REDSHIFT)[0] = ggred

    if Quantity.EMISSION_TIME in data:
        data.slot(Quantity.EMISSION_TIME)[0] = coord_ph[0]

    impactcoords = data.slot(Quantity.IMPACTCOORDS)
    if impactcoords is not None and impactcoords[0] == DBL_MAX:
        if hit.extended:
            raise IncompatibleOptionsError(
                "ImpactCoords is incompatible with parallel transport")
        for ii in range(8):
            impactcoords[ii] = coord_obj[ii]
            impactcoords[8 + ii] = coord_ph[ii]

    if Quantity.INTENSITY in data:
        # I_nu / nu^3 is invariant
        inc = (emitter.emission(freq_obs * ggredm1, dsem, coord_ph, coord_obj)
               * photon.get_transmission(ALL_CHANNELS)
               * ggred**3)
        inc = data.convert(Quantity.INTENSITY, inc)
        data.add(Quantity.INTENSITY, inc)
        logger.debug("process_hit_quantities: intensity += %g -> %g",
                     inc, data.get(Quantity.INTENSITY))

    stokes_requested = bool(data.quantities & STOKES)

    if Quantity.BINSPECTRUM in data and nbnuobs:
        boundaries = spr.channel_boundaries * ggredm1
        I = emitter.integrate_emission_channels(boundaries, spr.channel_indices,
                                                dsem, coord_ph, coord_obj)
        ggred4 = ggred**4
        for ii in range(nbnuobs):
            inc = I[ii] * photon.get_transmission(ii) * ggred4
            inc = data.convert(Quantity.BINSPECTRUM, inc)
            data.add(Quantity.BINSPECTRUM, inc, ii)
            # Otherwise the spectrum branch below updates the transmission
            if not stokes_requested:
                photon.transmit(ii, emitter.transmission(nuobs[ii] * ggredm1, dsem,
                                                         coord_ph, coord_obj))
        logger.debug("process_hit_quantities: binspectrum increments %s", I)

    if stokes_requested and nbnuobs:
        nuem = nuobs * ggredm1
        ggred3 = ggred**3
        if photon.parallel_transport:
            quantities = emitter.radiative_q_polarized(nuem, dsem, coord_ph, coord_obj)
            I, Q, U, V = photon.transfer(quantities)
            for quantity, values in ((Quantity.SPECTRUM, I),
                                     (Quantity.SPECTRUM_STOKES_Q, Q),
                                     (Quantity.SPECTRUM_STOKES_U, U),
                                     (Quantity.SPECTRUM_STOKES_V, V)):
                if quantity not in data:
                    continue
                for ii in range(nbnuobs):
                    data.add(quantity, data.convert(quantity, values[ii] * ggred3), ii)
        else:
            I, transmission = emitter.radiative_q(nuem, dsem, coord_ph, coord_obj)
            for ii in range(nbnuobs):
                if Quantity.SPECTRUM in data:
                    inc = I[ii] * photon.get_transmission(ii) * ggred3
                    data.add(Quantity.SPECTRUM,
                             data.convert(Quantity.SPECTRUM, inc), ii)
                photon.transmit(ii, transmission[ii])
        logger.debug("process_hit_quantities: nuem=%s", nuem)

    photon.transmit(ALL_CHANNELS, emitter.transmission(freq_obs * ggredm1, dsem,
                                                       coord_ph, coord_obj))
