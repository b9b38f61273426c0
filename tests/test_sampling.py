# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

import numpy as np
import pytest

from palmsim import sampling
from palmsim.exceptions import DistributionDomainError


def test_round_frames():
    """sampling.round_frames"""
    assert sampling.round_frames(2.5) == 3
    assert sampling.round_frames(3.5) == 4
    assert sampling.round_frames(2.4999) == 2
    assert sampling.round_frames(0.5) == 1
    assert sampling.round_frames(-2.5) == -3
    assert isinstance(sampling.round_frames(1.2), int)
    np.testing.assert_array_equal(sampling.round_frames([0.4, 0.5, 1.5, 7.]),
                                  [0, 1, 2, 7])


class TestSampler:
    @pytest.fixture
    def sampler(self):
        return sampling.Sampler(np.random.RandomState(123))

    def test_seed(self):
        """sampling.Sampler: same seed yields same numbers"""
        s1 = sampling.Sampler(10)
        s2 = sampling.Sampler(10)
        np.testing.assert_array_equal(s1.uniform(0, 1, 20),
                                      s2.uniform(0, 1, 20))
        assert s1.binomial(100, 0.3) == s2.binomial(100, 0.3)

    def test_random_state(self):
        """sampling.Sampler: pass RandomState instance"""
        rs = np.random.RandomState(1)
        s = sampling.Sampler(rs)
        assert s.random_state is rs

    def test_binomial(self, sampler):
        """sampling.Sampler.binomial"""
        assert sampler.binomial(10, 0.) == 0
        assert sampler.binomial(10, 1.) == 10
        assert sampler.binomial(0, 0.5) == 0
        n = sampler.binomial(1, 0.5, 10000)
        assert set(np.unique(n)) <= {0, 1}
        assert n.mean() == pytest.approx(0.5, abs=0.03)

    @pytest.mark.parametrize("n, p", [(10, 1.5), (10, -0.1), (-1, 0.5),
                                      (2.5, 0.5), (10, np.nan),
                                      (np.inf, 0.5)])
    def test_binomial_domain(self, sampler, n, p):
        """sampling.Sampler.binomial: invalid parameters"""
        with pytest.raises(DistributionDomainError):
            sampler.binomial(n, p)

    def test_uniform(self, sampler):
        """sampling.Sampler.uniform"""
        u = sampler.uniform(2., 5., 1000)
        assert np.all(u >= 2.)
        assert np.all(u < 5.)
        with pytest.raises(DistributionDomainError):
            sampler.uniform(5., 2.)
        with pytest.raises(DistributionDomainError):
            sampler.uniform(0., np.inf)

    def test_exponential(self, sampler):
        """sampling.Sampler.exponential"""
        assert sampler.exponential(0.) == 0.
        e = sampler.exponential(3., 20000)
        assert e.mean() == pytest.approx(3., rel=0.05)
        with pytest.raises(DistributionDomainError):
            sampler.exponential(-1.)
        with pytest.raises(DistributionDomainError):
            sampler.exponential(np.nan)

    def test_normal(self, sampler):
        """sampling.Sampler.normal: variance of diffusion steps"""
        d = 0.5
        lagt = 0.02
        r = sampler.normal(0, np.sqrt(4 * d * lagt), 20000)
        assert np.var(r) == pytest.approx(4 * d * lagt, rel=0.05)
        assert sampler.normal(3., 0.) == 3.
        with pytest.raises(DistributionDomainError):
            sampler.normal(0, -1.)

    def test_poisson(self, sampler):
        """sampling.Sampler.poisson"""
        p = sampler.poisson(np.full((10, 10), 4.))
        assert p.shape == (10, 10)
        np.testing.assert_array_equal(sampler.poisson(np.zeros(5)),
                                      np.zeros(5))
        with pytest.raises(DistributionDomainError):
            sampler.poisson(-2.)

    def test_frame_duration(self, sampler):
        """sampling.Sampler.frame_duration"""
        d = [sampler.frame_duration(5.) for _ in range(5000)]
        assert all(isinstance(x, int) for x in d)
        assert min(d) >= 0
        assert np.mean(d) == pytest.approx(5., rel=0.1)
        # mean is rounded, 0.4 -> 0
        assert sampler.frame_duration(0.4) == 0
        with pytest.raises(DistributionDomainError):
            sampler.frame_duration(np.inf)
        with pytest.raises(DistributionDomainError):
            sampler.frame_duration(-3.)
