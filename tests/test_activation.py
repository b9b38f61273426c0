# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

import numpy as np
import pytest

from palmsim import params, sampling
from palmsim.sim import activation


@pytest.fixture
def sampler():
    return sampling.Sampler(np.random.RandomState(0))


def test_activation_probability():
    """sim.activation.activation_probability"""
    assert activation.activation_probability(1., 100) == pytest.approx(0.01)
    assert activation.activation_probability(5., 5) == 1.
    assert activation.activation_probability(5., 2) == 1.


class TestActivate:
    def test_pool_conservation(self, sampler):
        """sim.activation.activate: pool is never negative"""
        p = params.SimulationParameters(diff_1=0.1, n_emitters=50,
                                        mean_activation=3.)
        remaining = p.n_emitters
        total = 0
        for f in range(200):
            em, new_remaining = activation.activate(f, remaining, p, sampler)
            assert new_remaining >= 0
            assert new_remaining == remaining - len(em)
            total += len(em)
            remaining = new_remaining
        assert total + remaining == p.n_emitters

    def test_empty_pool(self, sampler):
        """sim.activation.activate: empty pool"""
        p = params.SimulationParameters(diff_1=0.1)
        assert activation.activate(3, 0, p, sampler) == ([], 0)

    def test_single_emitter(self, sampler):
        """sim.activation.activate: pool of one, mean of one"""
        p = params.SimulationParameters(diff_1=0.1, n_emitters=1,
                                        mean_activation=1.)
        em, remaining = activation.activate(7, 1, p, sampler)
        assert remaining == 0
        assert len(em) == 1
        assert em[0].frame == 7

    def test_small_pool(self, sampler):
        """sim.activation.activate: pool smaller than mean activation"""
        p = params.SimulationParameters(diff_1=0.1, n_emitters=100,
                                        mean_activation=10.)
        em, remaining = activation.activate(2, 4, p, sampler)
        assert remaining == 0
        assert len(em) == 4

    def test_emitter_properties(self, sampler):
        """sim.activation.activate: positions, lifetimes, populations"""
        p = params.SimulationParameters(diff_1=0.3, diff_2=0.01,
                                        population_ratio=0.25,
                                        n_emitters=4000,
                                        mean_activation=4000.,
                                        image_size=64)
        em, remaining = activation.activate(0, p.n_emitters, p, sampler)
        assert remaining == 0
        assert len(em) == 4000

        x = np.array([e.x for e in em])
        y = np.array([e.y for e in em])
        assert np.all((x >= 0) & (x < 64))
        assert np.all((y >= 0) & (y < 64))

        lt = np.array([e.lifetime for e in em])
        assert np.all(lt >= 0)
        assert lt.mean() == pytest.approx(p.in_frames(p.mean_bleach_time),
                                          rel=0.1)

        pop = np.array([e.population for e in em])
        assert set(np.unique(pop)) == {1, 2}
        assert np.mean(pop == 1) == pytest.approx(0.25, abs=0.03)
        d = np.array([e.d for e in em])
        np.testing.assert_array_equal(d[pop == 1], 0.3)
        np.testing.assert_array_equal(d[pop == 2], 0.01)

    def test_single_population(self, sampler):
        """sim.activation.activate: population_ratio of 1"""
        p = params.SimulationParameters(diff_1=0.3, n_emitters=100,
                                        mean_activation=100.)
        em, _ = activation.activate(0, p.n_emitters, p, sampler)
        assert all(e.population == 1 for e in em)
        assert all(e.d == 0.3 for e in em)
