# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

import unittest

import numpy as np
import pandas as pd
import pytest

from palmsim import params, sampling
from palmsim.sim import fluo_image


class TestGauss(unittest.TestCase):
    def setUp(self):
        self.shape = (50, 30)
        self.coords = np.array([[15, 10], [30, 28]])
        self.amps = np.array([1, 2])
        self.sigmas = np.array([[3, 1], [1, 2]])

    def _expected(self):
        y, x = np.indices(self.shape[::-1])
        ret = np.zeros(self.shape[::-1])
        for (xc, yc), a, (sx, sy) in zip(self.coords, self.amps, self.sigmas):
            ret += a * np.exp(-(x - xc)**2 / (2 * sx**2) -
                              (y - yc)**2 / (2 * sy**2))
        return ret

    def test_gauss_psf(self):
        """sim.gauss_psf"""
        res = fluo_image.gauss_psf(self.shape, self.coords, self.amps,
                                   self.sigmas, 10)
        np.testing.assert_allclose(res, self._expected(), atol=1e-7)

    def test_simulate_gauss(self):
        """sim.simulate_gauss"""
        res = fluo_image.simulate_gauss(self.shape, self.coords, self.amps,
                                        self.sigmas, cutoff=10)
        np.testing.assert_allclose(res, self._expected(), atol=1e-7)

    def test_simulate_gauss_scalar(self):
        """sim.simulate_gauss: scalar amplitude and sigma"""
        self.amps = np.array([3, 3])
        self.sigmas = np.full((2, 2), 1.5)
        res = fluo_image.simulate_gauss(self.shape, self.coords, 3, 1.5,
                                        cutoff=10)
        np.testing.assert_allclose(res, self._expected(), atol=1e-7)

    def test_simulate_gauss_cutoff(self):
        """sim.simulate_gauss: Gaussians are limited to a box"""
        res = fluo_image.simulate_gauss((20, 20), [[10, 10]], 1., 1.,
                                        cutoff=2)
        assert res[10, 10] == pytest.approx(1.)
        assert res[10, 12] > 0
        assert res[10, 13] == 0
        assert res[7, 10] == 0


class TestCamera:
    @pytest.fixture
    def sim_params(self):
        return params.SimulationParameters(diff_1=0.1, image_size=24,
                                           n_frames=5)

    def test_psf_sigma(self, sim_params):
        """sim.fluo_image.psf_sigma"""
        assert fluo_image.psf_sigma(sim_params) == pytest.approx(
            0.25 / 0.16 / np.sqrt(2))

    def test_background(self, sim_params):
        """sim.simulate_frame: no emitters"""
        p = sim_params._replace(readout_noise=0., background=0.)
        img = fluo_image.simulate_frame(np.empty((0, 2)), p,
                                        sampling.Sampler(0))
        assert img.dtype == np.uint16
        assert img.shape == (24, 24)
        np.testing.assert_array_equal(img, 100)

    def test_emitter(self, sim_params):
        """sim.simulate_frame: single emitter"""
        p = sim_params._replace(readout_noise=0., background=0.,
                                gain_noise=0., mean_photons=1e5)
        img = fluo_image.simulate_frame([[10., 15.]], p, sampling.Sampler(1))
        sig = img.astype(float) - p.offset
        assert np.unravel_index(np.argmax(sig), sig.shape) == (15, 10)
        assert sig[0, 0] == 0
        # no signal outside of the stamp
        assert sig[:, :10 - p.gauss_stamp_size].sum() == 0
        assert sig[:, 10 + p.gauss_stamp_size + 1:].sum() == 0

    def test_outside(self, sim_params):
        """sim.simulate_frame: emitters outside of the image are ignored"""
        p = sim_params._replace(readout_noise=0., background=0.)
        img = fluo_image.simulate_frame([[-3., 5.], [5., 24.], [0., 3.]], p,
                                        sampling.Sampler(2))
        np.testing.assert_array_equal(img, 100)

    def test_movie(self, sim_params):
        """sim.simulate_movie"""
        det = pd.DataFrame({"frame": [0, 0, 2, 7],
                            "x": [1., 2., 1.5, 1.],
                            "y": [1., 2., 1.5, 1.],
                            "step": [0., 0., 0., 0.]})
        p = sim_params._replace(readout_noise=0., background=0.)
        frames = list(fluo_image.simulate_movie(det, p, sampling.Sampler(3)))
        assert len(frames) == 5
        for f in frames:
            assert f.shape == (24, 24)
            assert f.dtype == np.uint16
        assert frames[0].max() > 100
        np.testing.assert_array_equal(frames[1], 100)
        assert frames[2].max() > 100
        np.testing.assert_array_equal(frames[4], 100)

        frames = list(fluo_image.simulate_movie(det, p, sampling.Sampler(3),
                                                n_frames=2))
        assert len(frames) == 2
