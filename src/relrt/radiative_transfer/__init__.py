"""
Radiative transfer at ray-object intersections.

This module turns individual hits into accumulated observables and
integrates emission over spectrometer channels.

Main functions:
- process_hit_quantities: Observables of one hit
- integrate_emission: Band integral of an emission function
"""

from .core import Hit, emission_frequency_ratio, process_hit_quantities
from .integration import integrate_emission, integrate_emission_channels
from .polarization import (RadiativeQuantities, PolarizedQuantities,
                           absorption_from_transmission,
                           transmission_from_absorption, attenuate)

__all__ = [
    'Hit',
    'emission_frequency_ratio',
    'process_hit_quantities',
    'integrate_emission',
    'integrate_emission_channels',
    'RadiativeQuantities',
    'PolarizedQuantities',
    'absorption_from_transmission',
    'transmission_from_absorption',
    'attenuate',
]
