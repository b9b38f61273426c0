# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

import numpy as np
import pytest

from palmsim import sampling
from palmsim.sim import sm_tracks


class TestDiffusionPath:
    def test_shape(self):
        """sim.sm_tracks.diffusion_path: shape and first row"""
        s = sampling.Sampler(1)
        p = sm_tracks.diffusion_path(20, 0.5, 0.02, (3., 4.), 10, s)
        assert p.shape == (20, len(sm_tracks.path_columns))
        np.testing.assert_array_equal(p[:, 0], np.arange(10, 30))
        np.testing.assert_allclose(p[0], [10, 3., 4., 0.])

    def test_steps(self):
        """sim.sm_tracks.diffusion_path: step column matches positions"""
        s = sampling.Sampler(2)
        p = sm_tracks.diffusion_path(50, 0.5, 0.02, (0., 0.), 0, s)
        dist = np.linalg.norm(np.diff(p[:, 1:3], axis=0), axis=1)
        np.testing.assert_allclose(np.abs(p[1:, 3]), dist)
        assert p[0, 3] == 0

    def test_step_sign(self):
        """sim.sm_tracks.diffusion_path: step radii are signed"""
        s = sampling.Sampler(3)
        d = 0.2
        lagt = 0.01
        p = sm_tracks.diffusion_path(20001, d, lagt, (0., 0.), 0, s)
        r = p[1:, 3]
        assert np.any(r < 0)
        assert np.any(r > 0)
        assert np.var(r) == pytest.approx(4 * d * lagt, rel=0.05)
        assert np.mean(r) == pytest.approx(0, abs=0.01)

    def test_msd(self):
        """sim.sm_tracks.diffusion_path: mean square step is 4 D t"""
        s = sampling.Sampler(3)
        d = 0.2
        lagt = 0.01
        p = sm_tracks.diffusion_path(20001, d, lagt, (0., 0.), 0, s)
        assert np.mean(p[1:, 3]**2) == pytest.approx(4 * d * lagt, rel=0.05)

    def test_immobile(self):
        """sim.sm_tracks.diffusion_path: D = 0"""
        p = sm_tracks.diffusion_path(5, 0., 0.02, (1., 2.), 0,
                                     sampling.Sampler(0))
        np.testing.assert_allclose(p[:, 1:3], [[1., 2.]] * 5)
        np.testing.assert_allclose(p[:, 3], 0.)

    @pytest.mark.parametrize("lifetime", [0, 1])
    def test_short(self, lifetime):
        """sim.sm_tracks.diffusion_path: lifetime of 0 and 1"""
        p = sm_tracks.diffusion_path(lifetime, 0.1, 0.02, (1., 2.), 5,
                                     sampling.Sampler(0))
        assert p.shape == (lifetime, 4)
        if lifetime:
            np.testing.assert_allclose(p[0], [5, 1., 2., 0.])

    def test_seed(self):
        """sim.sm_tracks.diffusion_path: reproducibility"""
        p1 = sm_tracks.diffusion_path(30, 0.1, 0.02, (1., 2.), 0,
                                      sampling.Sampler(5))
        p2 = sm_tracks.diffusion_path(30, 0.1, 0.02, (1., 2.), 0,
                                      sampling.Sampler(5))
        np.testing.assert_array_equal(p1, p2)
