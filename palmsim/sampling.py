# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Random variates with checked parameter domains
==============================================

All random numbers of the simulation are drawn through a :py:class:`Sampler`
instance. It wraps a :py:class:`numpy.random.RandomState` so that a
simulation can be reproduced by passing a seed, and it refuses to draw from a
distribution whose parameters are outside of the valid domain instead of
silently returning NaNs or clipped values.

Examples
--------
>>> s = Sampler(42)  # seeded, hence reproducible
>>> n = s.binomial(100, 0.02)
>>> t = s.frame_duration(12.4)  # exponential draw with mean 12, rounded
>>> s.exponential(-1.)
Traceback (most recent call last):
...
palmsim.exceptions.DistributionDomainError: exponential: `mean` must not be negative, got -1.0


Programming reference
---------------------

.. autoclass:: Sampler
    :members:
.. autofunction:: round_frames
"""
import math
import numbers

import numpy as np

from .exceptions import DistributionDomainError


def round_frames(x):
    """Round half away from zero

    Durations (lifetimes, on and off times) are expressed in whole frames.
    Unlike :py:func:`round` and :py:func:`numpy.round`, which round half to
    even, this rounds ``2.5`` to ``3``.

    Parameters
    ----------
    x : float or array-like
        Value(s) to round

    Returns
    -------
    int or numpy.ndarray
        Rounded value(s). Scalars are returned as int.
    """
    r = np.sign(x) * np.floor(np.abs(x) + 0.5)
    if np.ndim(r) == 0:
        return int(r)
    return r.astype(int)


def _check_finite(dist, **params):
    for name, value in params.items():
        if not np.all(np.isfinite(value)):
            raise DistributionDomainError(
                dist, f"`{name}` has to be finite, got {value}")


def _check_non_negative(dist, **params):
    for name, value in params.items():
        if np.any(np.asarray(value) < 0):
            raise DistributionDomainError(
                dist, f"`{name}` must not be negative, got {value}")


class Sampler:
    """Draw random variates from a reproducible random source

    Each method checks its parameters and raises
    :py:class:`DistributionDomainError` if they are not finite or outside
    of the distribution's domain.
    """
    def __init__(self, random_state=None):
        """Parameters
        ----------
        random_state : numpy.random.RandomState or int or None, optional
            Source of random numbers. If an int is given, it is used as a seed
            for a new :py:class:`numpy.random.RandomState`. If `None`, a new,
            randomly seeded instance is created. Defaults to `None`.
        """
        if random_state is None or isinstance(random_state, numbers.Integral):
            random_state = np.random.RandomState(random_state)
        self.random_state = random_state

    def binomial(self, n, p, size=None):
        """Number of successes in `n` trials with success probability `p`

        Parameters
        ----------
        n : int
            Number of trials, >= 0
        p : float
            Success probability, 0 <= p <= 1
        size : int or tuple of int or None, optional
            Output shape. If `None`, return a scalar.

        Returns
        -------
        int or numpy.ndarray
        """
        _check_finite("binomial", n=n, p=p)
        _check_non_negative("binomial", n=n, p=p)
        if np.any(np.asarray(p) > 1):
            raise DistributionDomainError(
                "binomial", f"`p` must not be greater than 1, got {p}")
        if np.any(np.asarray(n) % 1 != 0):
            raise DistributionDomainError(
                "binomial", f"`n` has to be an integer, got {n}")
        return self.random_state.binomial(n, p, size)

    def uniform(self, lo, hi, size=None):
        """Uniformly distributed numbers in the half-open interval [lo, hi)"""
        _check_finite("uniform", lo=lo, hi=hi)
        if np.any(np.asarray(lo) > np.asarray(hi)):
            raise DistributionDomainError(
                "uniform", f"`lo` ({lo}) must not be greater than `hi` ({hi})")
        return self.random_state.uniform(lo, hi, size)

    def exponential(self, mean, size=None):
        """Exponentially distributed numbers

        Parameters
        ----------
        mean : float
            Mean (i.e., the inverse rate), >= 0. A mean of 0 yields 0.
        size : int or tuple of int or None, optional
            Output shape. If `None`, return a scalar.

        Returns
        -------
        float or numpy.ndarray
        """
        _check_finite("exponential", mean=mean)
        _check_non_negative("exponential", mean=mean)
        return self.random_state.exponential(mean, size)

    def normal(self, mean, std, size=None):
        """Normally distributed numbers

        Parameters
        ----------
        mean : float or array-like
            Mean
        std : float or array-like
            Standard deviation, >= 0. A standard deviation of 0 yields `mean`.
        size : int or tuple of int or None, optional
            Output shape. If `None`, the shape is given by broadcasting
            `mean` and `std`.

        Returns
        -------
        float or numpy.ndarray
        """
        _check_finite("normal", mean=mean, std=std)
        _check_non_negative("normal", std=std)
        return self.random_state.normal(mean, std, size)

    def poisson(self, lam, size=None):
        """Poisson distributed numbers

        Parameters
        ----------
        lam : float or array-like
            Expectation value(s), >= 0
        size : int or tuple of int or None, optional
            Output shape. If `None`, the shape is given by `lam`.

        Returns
        -------
        int or numpy.ndarray
        """
        _check_finite("poisson", lam=lam)
        _check_non_negative("poisson", lam=lam)
        return self.random_state.poisson(lam, size)

    def frame_duration(self, mean):
        """Draw an exponentially distributed duration in whole frames

        Both the mean and the drawn value are rounded to integers
        (see :py:func:`round_frames`), which makes durations frame-granular.

        Parameters
        ----------
        mean : float
            Mean duration in frames

        Returns
        -------
        int
            Duration in frames
        """
        if not math.isfinite(mean):
            raise DistributionDomainError(
                "exponential", f"`mean` has to be finite, got {mean}")
        return round_frames(self.exponential(round_frames(mean)))
