"""
Physical quantities that can be requested from a ray tracing computation.

Each quantity owns one output slot in a :class:`relrt.properties.Properties`
accumulator. Quantities combine as bit flags, and can be parsed from the
space-separated names used in scenery descriptions, e.g.
``"Intensity Spectrum SpectrumStokesQ"``.
"""

import enum


class Quantity(enum.IntFlag):
    """Bit flags naming the observables written by the hit engine."""
    NONE = 0
    INTENSITY = 1 << 0
    EMISSION_TIME = 1 << 1
    MIN_DISTANCE = 1 << 2
    FIRST_DMIN = 1 << 3
    REDSHIFT = 1 << 4
    IMPACTCOORDS = 1 << 5
    SPECTRUM = 1 << 6
    BINSPECTRUM = 1 << 7
    NBCROSSEQPLANE = 1 << 8
    SPECTRUM_STOKES_Q = 1 << 9
    SPECTRUM_STOKES_U = 1 << 10
    SPECTRUM_STOKES_V = 1 << 11
    USER1 = 1 << 12
    USER2 = 1 << 13
    USER3 = 1 << 14
    USER4 = 1 << 15
    USER5 = 1 << 16

    @classmethod
    def from_string(cls, names: str) -> "Quantity":
        """
        Parse a space-separated list of quantity names.

        Parameters
        ----------
        names : str
            e.g. ``"Intensity EmissionTime Spectrum"``. Matching is
            case-sensitive, as in scenery files.

        Returns
        -------
        Quantity
            Union of the named quantities.

        Raises
        ------
        ValueError
            If a name is not a known quantity.
        """
        result = cls.NONE
        for name in names.split():
            if name not in QUANTITY_NAMES:
                raise ValueError(f"Unknown quantity: {name}. "
                                 f"Available: {', '.join(QUANTITY_NAMES)}")
            result |= QUANTITY_NAMES[name]
        return result

    def to_string(self) -> str:
        """Space-separated names of the quantities set in this flag."""
        return " ".join(name for name, q in QUANTITY_NAMES.items()
                        if q & self)


# Scenery names, in output order
QUANTITY_NAMES = {
    "Intensity": Quantity.INTENSITY,
    "EmissionTime": Quantity.EMISSION_TIME,
    "MinDistance": Quantity.MIN_DISTANCE,
    "FirstDistMin": Quantity.FIRST_DMIN,
    "Redshift": Quantity.REDSHIFT,
    "ImpactCoords": Quantity.IMPACTCOORDS,
    "Spectrum": Quantity.SPECTRUM,
    "SpectrumStokesQ": Quantity.SPECTRUM_STOKES_Q,
    "SpectrumStokesU": Quantity.SPECTRUM_STOKES_U,
    "SpectrumStokesV": Quantity.SPECTRUM_STOKES_V,
    "BinSpectrum": Quantity.BINSPECTRUM,
    "NbCrossEqPlane": Quantity.NBCROSSEQPLANE,
    "User1": Quantity.USER1,
    "User2": Quantity.USER2,
    "User3": Quantity.USER3,
    "User4": Quantity.USER4,
    "User5": Quantity.USER5,
}

# Quantities stored once per channel, at the accumulator's channel stride
PER_CHANNEL = (Quantity.SPECTRUM | Quantity.SPECTRUM_STOKES_Q
               | Quantity.SPECTRUM_STOKES_U | Quantity.SPECTRUM_STOKES_V
               | Quantity.BINSPECTRUM)

STOKES = (Quantity.SPECTRUM | Quantity.SPECTRUM_STOKES_Q
          | Quantity.SPECTRUM_STOKES_U | Quantity.SPECTRUM_STOKES_V)
