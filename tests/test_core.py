"""
Tests for the hit engine.

The moving hit has ggredm1 = 0.5 (ggred = 2, ggred^3 = 8, ggred^4 = 16) and
dsem = 0.2, see conftest.py.
"""

import math

import numpy as np
import pytest

from relrt import (Emitter, Hit, Photon, Properties, Quantity, Spectrometer,
                   PolarizedQuantities, DBL_MAX, IncompatibleOptionsError,
                   MissingMetricError)
from relrt.radiative_transfer import emission_frequency_ratio, process_hit_quantities

from conftest import PHOTON_STATE, MOVING_OBJECT


class Uniform(Emitter):
    """Constant emission 3 and transmission 0.5 at every frequency."""

    def emission(self, nu_em, dsem, coord_ph, coord_obj):
        return 3.0

    def transmission(self, nu_em, dsem, coord_ph, coord_obj):
        return 0.5


class Linear(Emitter):
    """Emission equal to the emitted frequency, transparent."""

    def emission(self, nu_em, dsem, coord_ph, coord_obj):
        return nu_em

    def transmission(self, nu_em, dsem, coord_ph, coord_obj):
        return 1.0


class Polarized(Emitter):
    """Linearly polarized emitter, I = 2, Q = 0.5, transmission 0.5."""

    def radiative_q_polarized(self, nu_em, dsem, coord_ph, coord_obj):
        n = len(nu_em)
        zeros = np.zeros(n)
        return PolarizedQuantities(np.full(n, 2.0), np.full(n, 0.5), zeros, zeros,
                                   np.full(n, math.log(2.0)), zeros, zeros, zeros,
                                   zeros, zeros, zeros)


def two_channels():
    """Observer channels [1, 2] and [2, 3] Hz, midpoints 1.5 and 2.5."""
    return Spectrometer([1.0, 2.0, 3.0])


class TestHit:
    """Intersection state validation and frequency ratio."""

    def test_extended(self, moving_hit, polarized_hit):
        assert not moving_hit.extended
        assert polarized_hit.extended

    def test_wrong_sizes(self):
        with pytest.raises(ValueError):
            Hit(np.zeros(7), MOVING_OBJECT, 1.0)
        with pytest.raises(ValueError):
            Hit(PHOTON_STATE, np.zeros(16), 1.0)

    def test_frequency_ratio(self, metric, moving_hit, static_hit):
        assert emission_frequency_ratio(metric, moving_hit) == pytest.approx(0.5)
        assert emission_frequency_ratio(metric, static_hit) == pytest.approx(1.0)

    def test_frequency_ratio_without_redshift(self, moving_hit):
        assert emission_frequency_ratio(None, moving_hit, redshift=False) == 1.0

    def test_frequency_ratio_needs_metric(self, moving_hit):
        with pytest.raises(MissingMetricError):
            emission_frequency_ratio(None, moving_hit)


class TestIntensity:
    """Broadband intensity at the observer frequency."""

    def test_accumulates_with_transmission(self, metric, moving_hit):
        emitter = Uniform(metric=metric)
        photon = Photon()
        data = Properties(intensity=np.zeros(1))
        data.init()

        emitter.process_hit_quantities(photon, moving_hit, data)
        # 3 * 1 * 2^3
        assert data.get(Quantity.INTENSITY) == pytest.approx(24.0)
        assert photon.get_transmission() == pytest.approx(0.5)

        emitter.process_hit_quantities(photon, moving_hit, data)
        # + 3 * 0.5 * 2^3
        assert data.get(Quantity.INTENSITY) == pytest.approx(36.0)
        assert photon.get_transmission() == pytest.approx(0.25)

    def test_optically_thick_default(self, metric, moving_hit):
        emitter = Emitter(metric=metric)
        photon = Photon()
        data = Properties(intensity=np.zeros(1))
        data.init()
        emitter.process_hit_quantities(photon, moving_hit, data)
        assert data.get(Quantity.INTENSITY) == pytest.approx(8.0)
        assert photon.get_transmission() == 0.0

    def test_optically_thin_default(self, metric, moving_hit):
        emitter = Emitter(metric=metric, optically_thin=True)
        photon = Photon()
        data = Properties(intensity=np.zeros(1))
        data.init()
        emitter.process_hit_quantities(photon, moving_hit, data)
        # dsem * 2^3
        assert data.get(Quantity.INTENSITY) == pytest.approx(1.6)
        assert photon.get_transmission() == 1.0

    def test_no_redshift(self, moving_hit):
        emitter = Uniform(redshift=False)
        photon = Photon()
        data = Properties(intensity=np.zeros(1), redshift=np.zeros(1),
                          time=np.zeros(1))
        data.init()
        emitter.process_hit_quantities(photon, moving_hit, data)
        assert data.get(Quantity.REDSHIFT) == 1.0
        assert data.get(Quantity.INTENSITY) == pytest.approx(3.0)
        assert data.get(Quantity.EMISSION_TIME) == PHOTON_STATE[0]

    def test_converter(self, metric, moving_hit):
        emitter = Uniform(metric=metric)
        data = Properties(intensity=np.zeros(1))
        data.set_converter(Quantity.INTENSITY, lambda x: 2.0 * x)
        data.init()
        emitter.process_hit_quantities(Photon(), moving_hit, data)
        assert data.get(Quantity.INTENSITY) == pytest.approx(48.0)


class TestScalarSlots:
    """Redshift, emission time and impact coordinates."""

    def test_redshift_and_time(self, metric, moving_hit):
        data = Properties(redshift=np.zeros(1), time=np.zeros(1))
        data.init()
        Uniform(metric=metric).process_hit_quantities(Photon(), moving_hit, data)
        assert data.get(Quantity.REDSHIFT) == pytest.approx(2.0)
        assert data.get(Quantity.EMISSION_TIME) == 5.0

    def test_redshift_reflects_last_hit(self, metric, moving_hit, static_hit):
        emitter = Emitter(metric=metric, optically_thin=True)
        data = Properties(redshift=np.zeros(1))
        data.init()
        photon = Photon()
        emitter.process_hit_quantities(photon, moving_hit, data)
        emitter.process_hit_quantities(photon, static_hit, data)
        assert data.get(Quantity.REDSHIFT) == pytest.approx(1.0)

    def test_impact_coords_first_hit_only(self, metric, moving_hit, static_hit):
        buffer = np.zeros(16)
        data = Properties(impactcoords=buffer)
        data.init()
        assert np.all(buffer == DBL_MAX)

        emitter = Uniform(metric=metric)
        photon = Photon()
        emitter.process_hit_quantities(photon, moving_hit, data)
        np.testing.assert_array_equal(buffer[:8], MOVING_OBJECT)
        np.testing.assert_array_equal(buffer[8:], PHOTON_STATE)

        emitter.process_hit_quantities(photon, static_hit, data)
        np.testing.assert_array_equal(buffer[:8], MOVING_OBJECT)

    def test_impact_coords_with_parallel_transport(self, metric, polarized_hit):
        data = Properties(impactcoords=np.zeros(16))
        data.init()
        with pytest.raises(IncompatibleOptionsError):
            Uniform(metric=metric).process_hit_quantities(
                Photon(parallel_transport=True), polarized_hit, data)

    def test_missing_metric(self, moving_hit):
        data = Properties(intensity=np.zeros(1))
        data.init()
        with pytest.raises(MissingMetricError):
            Uniform().process_hit_quantities(Photon(), moving_hit, data)


class TestNoData:
    """Hits without output slots."""

    def test_none_is_noop(self, metric, moving_hit):
        photon = Photon()
        Uniform(metric=metric).process_hit_quantities(photon, moving_hit, None)
        assert photon.get_transmission() == 1.0

    def test_empty_properties_still_transmit(self, metric, moving_hit):
        photon = Photon()
        process_hit_quantities(Uniform(metric=metric), photon, moving_hit, Properties())
        assert photon.get_transmission() == pytest.approx(0.5)


class TestBinSpectrum:
    """Emission integrated over each channel, weighted by ggred^4."""

    def test_constant_emission(self, metric, moving_hit):
        photon = Photon(spectrometer=two_channels())
        data = Properties(binspectrum=np.zeros(2))
        data.init(2)
        Uniform(metric=metric).process_hit_quantities(photon, moving_hit, data)
        # Emitted band widths are 0.5 Hz: 3 * 0.5 * 2^4 per channel
        assert data.get(Quantity.BINSPECTRUM, 0) == pytest.approx(24.0)
        assert data.get(Quantity.BINSPECTRUM, 1) == pytest.approx(24.0)
        np.testing.assert_allclose(photon.transmission, [0.5, 0.5])
        assert photon.get_transmission() == pytest.approx(0.5)

    def test_optically_thick_channels(self, metric, moving_hit):
        photon = Photon(spectrometer=two_channels())
        data = Properties(binspectrum=np.zeros(2))
        data.init(2)
        Emitter(metric=metric).process_hit_quantities(photon, moving_hit, data)
        np.testing.assert_array_equal(photon.transmission, [0.0, 0.0])

    def test_optically_thin_channels(self, metric, moving_hit):
        photon = Photon(spectrometer=two_channels())
        data = Properties(binspectrum=np.zeros(2))
        data.init(2)
        Emitter(metric=metric, optically_thin=True).process_hit_quantities(
            photon, moving_hit, data)
        np.testing.assert_array_equal(photon.transmission, [1.0, 1.0])

    def test_channel_transmission_applied_once(self, metric, moving_hit):
        photon = Photon(spectrometer=two_channels())
        data = Properties(binspectrum=np.zeros(2), spectrum=np.zeros(2))
        data.init(2)
        Uniform(metric=metric).process_hit_quantities(photon, moving_hit, data)
        np.testing.assert_allclose(photon.transmission, [0.5, 0.5])
        assert data.get(Quantity.BINSPECTRUM, 1) == pytest.approx(24.0)
        assert data.get(Quantity.SPECTRUM, 1) == pytest.approx(24.0)

    def test_stokes_alone_skip_binned_update(self, metric, moving_hit):
        photon = Photon(spectrometer=two_channels())
        stokes_q = np.zeros(2)
        data = Properties(binspectrum=np.zeros(2), stokes_q=stokes_q)
        data.init(2)
        Uniform(metric=metric).process_hit_quantities(photon, moving_hit, data)
        np.testing.assert_allclose(photon.transmission, [0.5, 0.5])
        assert data.get(Quantity.BINSPECTRUM, 0) == pytest.approx(24.0)
        np.testing.assert_array_equal(stokes_q, [0.0, 0.0])

    def test_transported_stokes_skip_binned_update(self, metric, polarized_hit):
        photon = Photon(spectrometer=two_channels(), parallel_transport=True)
        stokes_u = np.zeros(2)
        data = Properties(binspectrum=np.zeros(2), stokes_u=stokes_u)
        data.init(2)
        Polarized(metric=metric).process_hit_quantities(photon, polarized_hit, data)
        np.testing.assert_allclose(photon.transmission, [0.5, 0.5])
        # 2 * 0.5 Hz * 2^4
        assert data.get(Quantity.BINSPECTRUM, 1) == pytest.approx(16.0)
        np.testing.assert_array_equal(stokes_u, [0.0, 0.0])

    def test_without_spectrometer(self, metric, moving_hit):
        data = Properties(binspectrum=np.zeros(2))
        data.init(2)
        Uniform(metric=metric).process_hit_quantities(Photon(), moving_hit, data)
        assert data.get(Quantity.BINSPECTRUM, 0) == 0.0


class TestSpectrum:
    """Spectrum and Stokes parameters at the channel midpoints."""

    def test_accumulates_with_channel_transmission(self, metric, moving_hit):
        photon = Photon(spectrometer=two_channels())
        buffer = np.zeros(2)
        data = Properties(spectrum=buffer)
        data.init(2)
        emitter = Uniform(metric=metric)

        emitter.process_hit_quantities(photon, moving_hit, data)
        np.testing.assert_allclose(buffer, [24.0, 24.0])
        np.testing.assert_allclose(photon.transmission, [0.5, 0.5])

        emitter.process_hit_quantities(photon, moving_hit, data)
        np.testing.assert_allclose(buffer, [36.0, 36.0])
        np.testing.assert_allclose(photon.transmission, [0.25, 0.25])

    def test_emitted_frequencies(self, metric, moving_hit):
        photon = Photon(spectrometer=two_channels())
        buffer = np.zeros(2)
        data = Properties(spectrum=buffer)
        data.init(2)
        Linear(metric=metric).process_hit_quantities(photon, moving_hit, data)
        # Midpoints 1.5 and 2.5 Hz are emitted at 0.75 and 1.25 Hz
        np.testing.assert_allclose(buffer, [6.0, 10.0])

    def test_channel_stride(self, metric, moving_hit):
        photon = Photon(spectrometer=two_channels())
        image = np.zeros((2, 3))
        data = Properties(spectrum=image, offset=3)
        data += 1
        data.init(2)
        Uniform(metric=metric).process_hit_quantities(photon, moving_hit, data)
        np.testing.assert_allclose(image, [[0.0, 24.0, 0.0], [0.0, 24.0, 0.0]])

    def test_polarized_matches_unpolarized(self, metric, moving_hit, polarized_hit):
        emitter = Uniform(metric=metric)

        photon = Photon(spectrometer=two_channels())
        unpolarized = np.zeros(2)
        data = Properties(spectrum=unpolarized)
        data.init(2)
        emitter.process_hit_quantities(photon, moving_hit, data)

        transported = Photon(spectrometer=two_channels(), parallel_transport=True)
        polarized = np.zeros(2)
        data = Properties(spectrum=polarized)
        data.init(2)
        emitter.process_hit_quantities(transported, polarized_hit, data)

        np.testing.assert_allclose(polarized, unpolarized)
        np.testing.assert_allclose(transported.transmission, photon.transmission)

    def test_stokes_parameters(self, metric, polarized_hit):
        photon = Photon(spectrometer=two_channels(), parallel_transport=True)
        buffers = {name: np.zeros(2) for name in ("spectrum", "stokes_q", "stokes_u")}
        data = Properties(**buffers)
        data.init(2)
        emitter = Polarized(metric=metric)

        emitter.process_hit_quantities(photon, polarized_hit, data)
        np.testing.assert_allclose(buffers["spectrum"], [16.0, 16.0])
        np.testing.assert_allclose(buffers["stokes_q"], [4.0, 4.0])
        np.testing.assert_array_equal(buffers["stokes_u"], [0.0, 0.0])
        np.testing.assert_allclose(photon.transmission, [0.5, 0.5])

        emitter.process_hit_quantities(photon, polarized_hit, data)
        np.testing.assert_allclose(buffers["stokes_q"], [6.0, 6.0])

    def test_stokes_use_spectrum_converter(self, metric, polarized_hit):
        photon = Photon(spectrometer=two_channels(), parallel_transport=True)
        stokes_q = np.zeros(2)
        data = Properties(stokes_q=stokes_q)
        data.set_converter(Quantity.SPECTRUM, lambda x: 10.0 * x)
        data.init(2)
        Polarized(metric=metric).process_hit_quantities(photon, polarized_hit, data)
        np.testing.assert_allclose(stokes_q, [40.0, 40.0])
