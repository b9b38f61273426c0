# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Simulate single molecule tracks"""
import numpy as np

from ..sampling import Sampler


path_columns = ["frame", "x", "y", "step"]
"""Columns of the arrays returned by :py:func:`diffusion_path`"""


def diffusion_path(lifetime, d, lagt, initial, frame=0, sampler=None):
    """Simulate the path of an emitter undergoing Brownian motion

    In each step, the particle travels a distance `r` drawn from a normal
    distribution with standard deviation :math:`\\sqrt{4 D t_\\text{lag}}`
    in a direction `theta` drawn uniformly from :math:`[0, 2\\pi)`.

    Parameters
    ----------
    lifetime : int
        Number of positions to simulate
    d : float
        Diffusion coefficient
    lagt : float
        Time between two positions
    initial : array-like, shape(2)
        Initial position
    frame : int, optional
        Frame number of the initial position. Defaults to 0.
    sampler : palmsim.sampling.Sampler or None, optional
        Source of random numbers. If `None`, create a new one.

    Returns
    -------
    numpy.ndarray, shape(lifetime, 4)
        One row per position. Columns are frame number, x and y coordinates,
        and the radius `r` of the step leading to the position (0 for the first
        row), c.f. :py:data:`path_columns`. `r` is signed, the step length is
        its absolute value.
    """
    if sampler is None:
        sampler = Sampler()

    ret = np.empty((lifetime, 4))
    if lifetime < 1:
        return ret

    n_steps = lifetime - 1
    r = sampler.normal(0, np.sqrt(4 * d * lagt), n_steps)
    theta = sampler.uniform(0, 2 * np.pi, n_steps)

    ret[:, 0] = np.arange(frame, frame + lifetime)
    ret[0, 1:3] = initial
    ret[1:, 1] = r * np.cos(theta)
    ret[1:, 2] = r * np.sin(theta)
    ret[:, 1:3] = np.cumsum(ret[:, 1:3], axis=0)
    ret[0, 3] = 0
    ret[1:, 3] = r
    return ret

