"""
Observable accumulator.

A :class:`Properties` instance maps each requested :class:`Quantity` to a
:class:`Slot`, i.e. an addressable location inside a caller-owned flat
buffer. The hit engine only ever adds to (or, for a few scalar quantities,
overwrites) the location a slot points at, so several hits along one ray
accumulate naturally. After a pixel is done, the caller advances every
slot at once to the next pixel.

Layout
------
Per-channel quantities (spectrum, Stokes parameters, binned spectrum) store
channel ``ii`` at ``position + ii * offset``; ``offset`` is shared by all
slots of one accumulator. Impact coordinates use 16 consecutive entries
per pixel (object state, then photon state) and therefore advance 16 times
faster than the other slots.

Examples
--------
>>> image = np.zeros((3, 4, 4))            # (nchannels, ny, nx)
>>> data = Properties(spectrum=image, offset=16)
>>> data.init(3)
>>> data += 1                              # next pixel
"""

from typing import Callable, Dict, Optional

import numpy as np

from .constants import DBL_MAX, IMPACTCOORDS_SIZE
from .quantities import Quantity, PER_CHANNEL


# Keyword names accepted by Properties(), in the order they are reset
SLOT_NAMES = {
    "intensity": Quantity.INTENSITY,
    "time": Quantity.EMISSION_TIME,
    "distance": Quantity.MIN_DISTANCE,
    "first_dmin": Quantity.FIRST_DMIN,
    "redshift": Quantity.REDSHIFT,
    "nbcrosseqplane": Quantity.NBCROSSEQPLANE,
    "spectrum": Quantity.SPECTRUM,
    "stokes_q": Quantity.SPECTRUM_STOKES_Q,
    "stokes_u": Quantity.SPECTRUM_STOKES_U,
    "stokes_v": Quantity.SPECTRUM_STOKES_V,
    "binspectrum": Quantity.BINSPECTRUM,
    "impactcoords": Quantity.IMPACTCOORDS,
    "user1": Quantity.USER1,
    "user2": Quantity.USER2,
    "user3": Quantity.USER3,
    "user4": Quantity.USER4,
    "user5": Quantity.USER5,
}

# Reset values used by Properties.init()
_SENTINEL_QUANTITIES = (Quantity.EMISSION_TIME | Quantity.MIN_DISTANCE
                        | Quantity.FIRST_DMIN)


class Slot:
    """
    Addressable location inside a flat float64 buffer.

    Parameters
    ----------
    buffer : ndarray
        Output array. It is flattened without copying, so it must be
        C-contiguous and of dtype float64.
    position : int, optional
        Index of the current element. Default: 0
    step : int, optional
        Number of elements one advance moves by. Default: 1

    Raises
    ------
    ValueError
        If the buffer cannot be addressed without a copy.
    """

    def __init__(self, buffer: np.ndarray, position: int = 0, step: int = 1):
        if not isinstance(buffer, np.ndarray):
            raise ValueError("Slot buffers must be numpy arrays")
        if buffer.dtype != np.float64 or not buffer.flags.c_contiguous:
            raise ValueError("Slot buffers must be C-contiguous float64 arrays")
        self.buffer = buffer.reshape(-1)
        self.position = position
        self.step = step

    def advance(self, k: int = 1):
        """Move the slot by ``k`` pixels."""
        self.position += k * self.step

    def __getitem__(self, index: int) -> float:
        return float(self.buffer[self.position + index])

    def __setitem__(self, index: int, value: float):
        self.buffer[self.position + index] = value

    def add(self, index: int, value: float):
        """Accumulate ``value`` at ``position + index``."""
        self.buffer[self.position + index] += value

    def __repr__(self) -> str:
        return (f"Slot(size={self.buffer.size}, position={self.position}, "
                f"step={self.step})")


class Properties:
    """
    Sparse record of the output slots requested for one pixel.

    Parameters
    ----------
    offset : int, optional
        Stride between two channels of a per-channel quantity. Default: 1
    **buffers : ndarray
        One keyword per requested quantity (see ``SLOT_NAMES``), e.g.
        ``intensity=array``. Quantities not given are not computed.

    Attributes
    ----------
    offset : int
        Channel stride shared by every per-channel slot.
    first_dmin_found : bool
        Whether the first minimum distance has been reached.
    converters : dict
        Optional per-quantity callables applied to each increment before it
        is stored. Stokes quantities fall back to the SPECTRUM converter.
    """

    def __init__(self, offset: int = 1, **buffers):
        self.offset = offset
        self.first_dmin_found = False
        self.converters: Dict[Quantity, Callable[[float], float]] = {}
        self._slots: Dict[Quantity, Slot] = {}
        for name, buffer in buffers.items():
            if name not in SLOT_NAMES:
                raise KeyError(f"Unknown output slot: {name}")
            if buffer is None:
                continue
            self.set_slot(SLOT_NAMES[name], buffer)

    def set_slot(self, quantity: Quantity, buffer: Optional[np.ndarray],
                 position: int = 0):
        """Attach (or, with ``buffer=None``, detach) the output of a quantity."""
        if buffer is None:
            self._slots.pop(quantity, None)
            return
        step = IMPACTCOORDS_SIZE if quantity == Quantity.IMPACTCOORDS else 1
        self._slots[quantity] = Slot(buffer, position * step, step)

    def slot(self, quantity: Quantity) -> Optional[Slot]:
        """Slot of ``quantity``, or None if it was not requested."""
        return self._slots.get(quantity)

    def __contains__(self, quantity: Quantity) -> bool:
        return quantity in self._slots

    @property
    def quantities(self) -> Quantity:
        """Quantities requested, derived from the active slots."""
        result = Quantity.NONE
        for quantity in self._slots:
            result |= quantity
        return result

    def set_converter(self, quantity: Quantity,
                      converter: Optional[Callable[[float], float]]):
        """Install (or remove, with None) a unit converter for ``quantity``."""
        if converter is None:
            self.converters.pop(quantity, None)
        else:
            self.converters[quantity] = converter

    def convert(self, quantity: Quantity, value: float) -> float:
        """Apply the unit converter of ``quantity``, identity if there is none."""
        converter = self.converters.get(quantity)
        if converter is None and quantity & PER_CHANNEL and quantity != Quantity.BINSPECTRUM:
            converter = self.converters.get(Quantity.SPECTRUM)
        if converter is None:
            return value
        return converter(value)

    def add(self, quantity: Quantity, value: float, channel: int = 0):
        """Add ``value`` to channel ``channel`` of ``quantity``."""
        self._slots[quantity].add(channel * self.offset, value)

    def get(self, quantity: Quantity, channel: int = 0) -> float:
        """Current value of channel ``channel`` of ``quantity``."""
        return self._slots[quantity][channel * self.offset]

    def init(self, nbnuobs: int = 0):
        """
        Reset every active slot of the current pixel.

        Additive quantities are set to 0, distances and emission time to
        the largest representable double, impact coordinates to the same
        sentinel across their 16 entries.

        Parameters
        ----------
        nbnuobs : int
            Number of spectral channels of per-channel quantities.
        """
        for quantity, slot in self._slots.items():
            if quantity == Quantity.IMPACTCOORDS:
                for ii in range(IMPACTCOORDS_SIZE):
                    slot[ii] = DBL_MAX
            elif quantity & PER_CHANNEL:
                for ii in range(nbnuobs):
                    slot[ii * self.offset] = 0.
            elif quantity & _SENTINEL_QUANTITIES:
                slot[0] = DBL_MAX
            else:
                slot[0] = 0.
        if Quantity.FIRST_DMIN in self._slots:
            self.first_dmin_found = False

    def advance(self, k: int = 1) -> "Properties":
        """Move every active slot by ``k`` pixels."""
        for slot in self._slots.values():
            slot.advance(k)
        return self

    def __iadd__(self, k: int) -> "Properties":
        return self.advance(k)

    def next(self) -> "Properties":
        """Move every active slot to the next pixel."""
        return self.advance(1)

    def __repr__(self) -> str:
        return (f"Properties({self.quantities.to_string() or 'none'}, "
                f"offset={self.offset})")
