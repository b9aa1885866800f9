"""
Emitters: whatever emits or absorbs light.

A physical emission model subclasses :class:`Emitter` and implements any
subset of five related operations:

- ``emission(nu_em, ...)``: emitted intensity at one frequency;
- ``emission_spectrum(nu_em[], ...)``: the same on an array of frequencies;
- ``radiative_q(nu_em[], ...)``: intensity and transmission per channel;
- ``radiative_q_polarized(nu_em[], ...)``: Stokes increments, absorption and
  rotation coefficients per channel;
- ``transmission(nu_em, ...)``: transmission at one frequency.

The base class derives the operations a model does not provide from those
it does. Which operations a model genuinely implements is recorded once,
when the subclass is created, in its ``capabilities`` descriptor. Default
implementations consult that descriptor to delegate directly to a genuine
implementation, falling back to a uniform leaf computation when there is
none, so no default can ever call back into itself:

=====================  ===============================================
operation (default)    tries, in order
=====================  ===============================================
radiative_q_polarized  radiative_q, with Q = U = V = 0
radiative_q            radiative_q_polarized; emission_spectrum and
                       transmission
emission_spectrum      radiative_q; radiative_q_polarized;
                       element-wise emission
emission               emission_spectrum; radiative_q; uniform emission
transmission           radiative_q; uniform transmission
=====================  ===============================================

All operations take the emitted frequency ``nu_em`` [Hz], the proper length
``dsem`` crossed in the emitter frame, and the photon and object states
``coord_ph`` (8 or 16 elements) and ``coord_obj`` (8 elements).

Examples
--------
>>> class Glowing(Emitter):
...     def emission(self, nu_em, dsem, coord_ph, coord_obj):
...         return 2.0 * dsem
>>> Glowing.capabilities
<Capability.EMISSION: 1>
"""

import enum
import logging
import math
from typing import Any, Mapping, Optional

import numpy as np

from .config import apply_parameters, EMITTER_PARAMETERS
from .constants import DBL_MAX
from .errors import CoordinateKindError, MissingMetricError
from .metric import CoordKind, Metric
from .quantities import Quantity
from .radiative_transfer.core import Hit, process_hit_quantities
from .radiative_transfer.integration import integrate_emission, integrate_emission_channels
from .radiative_transfer.polarization import (RadiativeQuantities, PolarizedQuantities,
                                              transmission_from_absorption)

logger = logging.getLogger(__name__)


class Capability(enum.Flag):
    """Operations an emitter variant implements itself."""
    NONE = 0
    EMISSION = enum.auto()
    EMISSION_SPECTRUM = enum.auto()
    RADIATIVE_Q = enum.auto()
    POLARIZED_RADIATIVE_Q = enum.auto()
    TRANSMISSION = enum.auto()


class DefaultFeature(enum.Flag):
    """Operations for which an emitter variant relies on the default."""
    NONE = 0
    POLARIZED_RADIATIVE_Q = 1
    RADIATIVE_Q = 2
    EMISSION_SPECTRUM = 4


# Method implementing each capability
CAPABILITY_METHODS = {
    Capability.EMISSION: "emission",
    Capability.EMISSION_SPECTRUM: "emission_spectrum",
    Capability.RADIATIVE_Q: "radiative_q",
    Capability.POLARIZED_RADIATIVE_Q: "radiative_q_polarized",
    Capability.TRANSMISSION: "transmission",
}

_RADIATIVE_Q_ANY = Capability.RADIATIVE_Q | Capability.POLARIZED_RADIATIVE_Q


def detect_capabilities(cls) -> Capability:
    """
    Capabilities of ``cls``.

    Those declared or detected on its Emitter bases, plus the operations
    ``cls`` defines in its own body.
    """
    result = Capability.NONE
    for base in cls.__bases__:
        result |= getattr(base, "capabilities", Capability.NONE)
    for capability, name in CAPABILITY_METHODS.items():
        if name in cls.__dict__:
            result |= capability
    return result


def check_capabilities(cls):
    """Raise TypeError if ``cls`` claims an operation it leaves to the default."""
    for capability, name in CAPABILITY_METHODS.items():
        if cls.capabilities & capability and getattr(cls, name) is getattr(Emitter, name):
            raise TypeError(f"{cls.__name__} declares {capability.name} "
                            f"but does not implement {name}()")


class Emitter:
    """
    Base class of emitting/absorbing objects.

    Parameters
    ----------
    metric : Metric, optional
        Spacetime metric. Required for redshift computations.
    r_max : float, optional
        Maximum distance from the centre of mass (geometrical units).
        Default: largest double
    delta_max_inside_r_max : float, optional
        Maximum integration step inside ``r_max``. Default: 1.0
    redshift : bool, optional
        Whether to take redshift into account. Default: True
    show_shadow : bool, optional
        Whether to highlight the shadow region on images. Default: False
    optically_thin : bool, optional
        Whether radiative transfer is computed through the object (True)
        or only its surface is seen (False). Default: False

    Attributes
    ----------
    capabilities : Capability
        Class attribute. Operations this variant implements. When a
        subclass is created it inherits the capabilities of its bases and
        adds the operations defined in its own body. A subclass may set it
        explicitly instead, e.g. when an override merely calls the default;
        its own subclasses keep that declaration. Declaring an operation
        that is not overridden raises TypeError.
    """

    capabilities = Capability.NONE

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if "capabilities" not in cls.__dict__:
            cls.capabilities = detect_capabilities(cls)
        check_capabilities(cls)
        logger.debug("%s capabilities: %s", cls.__name__, cls.capabilities)

    def __init__(self, metric: Optional[Metric] = None, r_max: float = DBL_MAX,
                 delta_max_inside_r_max: float = 1., redshift: bool = True,
                 show_shadow: bool = False, optically_thin: bool = False):
        self.metric = metric
        self.r_max = r_max
        self.delta_max_inside_r_max = delta_max_inside_r_max
        self.redshift = redshift
        self.show_shadow = show_shadow
        self.optically_thin = optically_thin

    @property
    def default_features(self) -> DefaultFeature:
        """Operations among the resolvable three that use the default."""
        caps = self.capabilities
        result = DefaultFeature.NONE
        if not caps & Capability.POLARIZED_RADIATIVE_Q:
            result |= DefaultFeature.POLARIZED_RADIATIVE_Q
        if not caps & Capability.RADIATIVE_Q:
            result |= DefaultFeature.RADIATIVE_Q
        if not caps & Capability.EMISSION_SPECTRUM:
            result |= DefaultFeature.EMISSION_SPECTRUM
        return result

    def set_parameters(self, parameters: Mapping[str, Any]):
        """Apply named parameters such as ``{"OpticallyThin": None}``."""
        apply_parameters(self, parameters, EMITTER_PARAMETERS)

    def default_quantities(self) -> Quantity:
        """Quantities computed when the caller does not choose."""
        return Quantity.INTENSITY

    def delta_max(self, coord) -> float:
        """
        Maximum integration step at ``coord``.

        Parameters
        ----------
        coord : array
            Photon state; only the position (first 4 elements) is used.

        Returns
        -------
        float
            ``delta_max_inside_r_max`` inside ``r_max``, half the distance
            to the centre outside.

        Raises
        ------
        MissingMetricError
            If no metric is set.
        CoordinateKindError
            If the metric uses neither spherical nor Cartesian coordinates.
        """
        if self.metric is None:
            raise MissingMetricError(
                "Please set metric before calling Emitter.delta_max()")
        kind = self.metric.coord_kind
        if kind == CoordKind.SPHERICAL:
            rr = coord[1]
        elif kind == CoordKind.CARTESIAN:
            rr = math.sqrt(coord[1]**2 + coord[2]**2 + coord[3]**2)
        else:
            raise CoordinateKindError(f"Incompatible coordinate kind: {kind}")
        if rr < self.r_max:
            return self.delta_max_inside_r_max
        return rr * 0.5

    # Emission operations

    def transmission(self, nu_em: float, dsem: float, coord_ph, coord_obj) -> float:
        """
        Transmission of the path element at frequency ``nu_em``.

        Default: the transmission returned by ``radiative_q`` if either
        radiative_q variant is implemented, else 1 for optically thin
        objects and 0 for optically thick ones.
        """
        if self.capabilities & _RADIATIVE_Q_ANY:
            return float(self.radiative_q(np.array([nu_em]), dsem,
                                          coord_ph, coord_obj).transmission[0])
        return float(self.optically_thin)

    def emission(self, nu_em: float, dsem: float, coord_ph, coord_obj) -> float:
        """
        Emitted intensity increment at frequency ``nu_em``.

        Default: ``emission_spectrum`` or ``radiative_q`` on a single
        frequency if implemented, else uniform emission: ``dsem`` for
        optically thin objects (unit emission coefficient integrated over
        the path) and 1 for optically thick ones.
        """
        if self.capabilities & Capability.EMISSION_SPECTRUM:
            return float(self.emission_spectrum(np.array([nu_em]), dsem,
                                                coord_ph, coord_obj)[0])
        if self.capabilities & _RADIATIVE_Q_ANY:
            return float(self.radiative_q(np.array([nu_em]), dsem,
                                          coord_ph, coord_obj).I[0])
        if self.optically_thin:
            return dsem
        return 1.

    def emission_spectrum(self, nu_em, dsem: float, coord_ph, coord_obj) -> np.ndarray:
        """
        Emitted intensity increments at frequencies ``nu_em``.

        Default: intensity from ``radiative_q`` or ``radiative_q_polarized``
        if implemented, else ``emission`` element-wise.
        """
        nu_em = np.atleast_1d(np.asarray(nu_em, dtype=np.float64))
        if self.capabilities & Capability.RADIATIVE_Q:
            return np.asarray(self.radiative_q(nu_em, dsem, coord_ph, coord_obj).I)
        if self.capabilities & Capability.POLARIZED_RADIATIVE_Q:
            return np.asarray(self.radiative_q_polarized(nu_em, dsem,
                                                         coord_ph, coord_obj).I)
        return np.array([self.emission(nu, dsem, coord_ph, coord_obj) for nu in nu_em],
                        dtype=np.float64)

    def radiative_q(self, nu_em, dsem: float, coord_ph, coord_obj) -> RadiativeQuantities:
        """
        Intensity increment and transmission at frequencies ``nu_em``.

        Default: from ``radiative_q_polarized`` if implemented (transmission
        exp(-alpha_I)), else ``emission_spectrum`` and ``transmission``.
        """
        nu_em = np.atleast_1d(np.asarray(nu_em, dtype=np.float64))
        if self.capabilities & Capability.POLARIZED_RADIATIVE_Q:
            quantities = self.radiative_q_polarized(nu_em, dsem, coord_ph, coord_obj)
            return RadiativeQuantities(np.asarray(quantities.I),
                                       transmission_from_absorption(quantities.alpha_I))
        intensity = self.emission_spectrum(nu_em, dsem, coord_ph, coord_obj)
        transmission = np.array([self.transmission(nu, dsem, coord_ph, coord_obj)
                                 for nu in nu_em], dtype=np.float64)
        return RadiativeQuantities(intensity, transmission)

    def radiative_q_polarized(self, nu_em, dsem: float, coord_ph,
                              coord_obj) -> PolarizedQuantities:
        """
        Stokes increments, absorption and rotation coefficients.

        Default: unpolarized emission. I and the transmission come from
        ``radiative_q``, Q = U = V = 0, alpha_I = -ln(transmission) (+inf
        below a transmission of 0.1) and all other coefficients are 0.
        """
        nu_em = np.atleast_1d(np.asarray(nu_em, dtype=np.float64))
        intensity, transmission = self.radiative_q(nu_em, dsem, coord_ph, coord_obj)
        return PolarizedQuantities.unpolarized(intensity, transmission)

    # Band integration

    def integrate_emission(self, nu1: float, nu2: float, dsem: float,
                           coord_ph, coord_obj) -> float:
        """Emission integrated over [nu1, nu2] (see radiative_transfer.integration)."""
        return integrate_emission(
            lambda nu: self.emission(nu, dsem, coord_ph, coord_obj), nu1, nu2)

    def integrate_emission_channels(self, boundaries, chaninds, dsem: float,
                                    coord_ph, coord_obj) -> np.ndarray:
        """Emission integrated over every channel delimited by ``boundaries``."""
        return integrate_emission_channels(
            lambda nu: self.emission(nu, dsem, coord_ph, coord_obj),
            boundaries, chaninds)

    # Hit processing

    def process_hit_quantities(self, photon, hit: Hit, data=None):
        """Accumulate the observables of ``hit`` into ``data``."""
        process_hit_quantities(self, photon, hit, data)

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(metric={self.metric!r}, "
                f"optically_thin={self.optically_thin}, redshift={self.redshift})")
