"""
Spectrometers: sets of observed frequency channels.

A spectrometer is an ordered list of channel boundaries plus, for each
channel, the indices of its two boundaries in that list. Contiguous
channels share boundaries (``n_samples + 1`` boundaries), while channels
built from explicit (low, high) pairs use ``2 * n_samples`` boundaries.

All frequencies are in Hz, as seen by the observer.
"""

from typing import Sequence, Tuple

import numpy as np

from .constants import c_SI


# Band units for each kind of uniform spectrometer
UNIFORM_KINDS = ("freq", "freqlog", "wave", "wavelog")


class Spectrometer:
    """
    Set of observed frequency channels.

    Parameters
    ----------
    boundaries : array
        Channel boundaries in Hz.
    chaninds : array of int, shape (n_samples, 2), optional
        Indices into ``boundaries`` of the low and high edge of each
        channel. Default: contiguous channels ``(i, i + 1)``.
    midpoints : array, optional
        Representative frequency of each channel. Default: arithmetic
        mean of the channel edges.

    Attributes
    ----------
    n_samples : int
        Number of channels.
    n_boundaries : int
        Number of boundaries.
    """

    def __init__(self, boundaries: Sequence[float], chaninds=None, midpoints=None):
        self.channel_boundaries = np.asarray(boundaries, dtype=np.float64)
        if self.channel_boundaries.ndim != 1 or len(self.channel_boundaries) < 2:
            raise ValueError("A spectrometer needs at least two boundaries")

        if chaninds is None:
            n = len(self.channel_boundaries) - 1
            chaninds = np.column_stack([np.arange(n), np.arange(1, n + 1)])
        self.channel_indices = np.asarray(chaninds, dtype=np.intp).reshape(-1, 2)
        if (self.channel_indices.min() < 0 or
                self.channel_indices.max() >= len(self.channel_boundaries)):
            raise ValueError("Channel indices out of range of boundaries")

        if midpoints is None:
            lo, hi = self.channel_edges()
            midpoints = 0.5 * (lo + hi)
        self.midpoints = np.asarray(midpoints, dtype=np.float64)
        if len(self.midpoints) != self.n_samples:
            raise ValueError(f"Expected {self.n_samples} midpoints, "
                             f"got {len(self.midpoints)}")

    @classmethod
    def uniform(cls, n_samples: int, band: Tuple[float, float],
                kind: str = "freq") -> "Spectrometer":
        """
        Channels evenly spaced in frequency, wavelength, or their logarithms.

        Parameters
        ----------
        n_samples : int
            Number of channels.
        band : tuple of float
            (low, high) edges of the band. Units depend on ``kind``:
            Hz for "freq", log10(Hz) for "freqlog", m for "wave",
            log10(m) for "wavelog".
        kind : str, optional
            One of "freq", "freqlog", "wave", "wavelog". Default: "freq"

        Returns
        -------
        Spectrometer
            Midpoints are the centre of each channel in the spacing
            variable, converted to Hz.
        """
        if kind not in UNIFORM_KINDS:
            raise ValueError(f"Unknown spectrometer kind: {kind}. "
                             f"Must be one of {UNIFORM_KINDS}")
        if n_samples < 1:
            raise ValueError("A spectrometer needs at least one channel")

        edges = np.linspace(band[0], band[1], n_samples + 1)
        centres = 0.5 * (edges[:-1] + edges[1:])

        if kind in ("freqlog", "wavelog"):
            edges = 10.0**edges
            centres = 10.0**centres
        if kind in ("wave", "wavelog"):
            edges = c_SI / edges
            centres = c_SI / centres

        return cls(edges, midpoints=centres)

    @property
    def n_samples(self) -> int:
        return len(self.channel_indices)

    @property
    def n_boundaries(self) -> int:
        return len(self.channel_boundaries)

    def channel_edges(self) -> Tuple[np.ndarray, np.ndarray]:
        """(low, high) boundary of every channel, in channel order."""
        return (self.channel_boundaries[self.channel_indices[:, 0]],
                self.channel_boundaries[self.channel_indices[:, 1]])

    def __len__(self) -> int:
        return self.n_samples

    def __repr__(self) -> str:
        return (f"Spectrometer({self.n_samples} channels, "
                f"{self.channel_boundaries.min():.3g}-"
                f"{self.channel_boundaries.max():.3g} Hz)")
