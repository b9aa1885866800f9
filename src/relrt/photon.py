"""
Light ray state seen by the hit engine.

A :class:`Photon` carries the observer frequency, the optional spectrometer
and the transmission accumulated along the ray, both broadband and per
channel. Transmissions start at 1 and only ever decrease as the ray crosses
absorbing matter.
"""

import logging
from typing import Optional

import numpy as np

from .constants import ALL_CHANNELS
from .spectrometer import Spectrometer
from .radiative_transfer.polarization import PolarizedQuantities, attenuate

logger = logging.getLogger(__name__)


class Photon:
    """
    Transmission and polarization track of one ray.

    Parameters
    ----------
    freq_obs : float, optional
        Observer frequency used to parametrize the geodesic [Hz]. Default: 1.0
    spectrometer : Spectrometer, optional
        Observed channels. Default: None (no spectral output)
    parallel_transport : bool, optional
        Whether the polarization basis is parallel-transported along the
        ray, i.e. whether hits carry 16 photon coordinates. Default: False

    Attributes
    ----------
    transmission : ndarray, shape (nbnuobs,)
        Per-channel transmission accumulated so far.
    transmission_freqobs : float
        Broadband transmission at ``freq_obs``.
    """

    def __init__(self, freq_obs: float = 1.0,
                 spectrometer: Optional[Spectrometer] = None,
                 parallel_transport: bool = False):
        self.freq_obs = freq_obs
        self.spectrometer = spectrometer
        self.parallel_transport = parallel_transport
        self.reset_transmission()

    @property
    def n_channels(self) -> int:
        return self.spectrometer.n_samples if self.spectrometer is not None else 0

    def reset_transmission(self):
        """Restore a fully transparent track."""
        self.transmission_freqobs = 1.
        self.transmission = np.ones(self.n_channels, dtype=np.float64)

    def get_transmission(self, channel: int = ALL_CHANNELS) -> float:
        """Transmission in ``channel``, or broadband with ALL_CHANNELS."""
        if channel == ALL_CHANNELS:
            return self.transmission_freqobs
        return float(self.transmission[channel])

    def transmit(self, channel: int, t: float):
        """Multiply the transmission of ``channel`` (or broadband) by ``t``."""
        if channel == ALL_CHANNELS:
            self.transmission_freqobs *= t
        else:
            self.transmission[channel] *= t

    def transfer(self, quantities: PolarizedQuantities):
        """
        Propagate polarized quantities of one element through the track.

        Parameters
        ----------
        quantities : PolarizedQuantities
            Emission and absorption coefficients in every channel.

        Returns
        -------
        I, Q, U, V : ndarray
            Stokes increments reaching the observer (before redshift).
        """
        I, Q, U, V, self.transmission = attenuate(quantities, self.transmission)
        logger.debug("transfer: transmission=%s", self.transmission)
        return I, Q, U, V

    def __repr__(self) -> str:
        return (f"Photon(freq_obs={self.freq_obs}, channels={self.n_channels}, "
                f"parallel_transport={self.parallel_transport})")
