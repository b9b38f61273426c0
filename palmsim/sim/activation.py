# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Photo-activation of emitters from a finite pool"""
from typing import List, NamedTuple, Tuple

from ..params import SimulationParameters
from ..sampling import Sampler


class Emitter(NamedTuple):
    """A photo-activated emitter"""
    frame: int
    """Frame of activation"""
    x: float
    """x coordinate (px) at activation"""
    y: float
    """y coordinate (px) at activation"""
    population: int
    """Population label, 1 or 2"""
    lifetime: int
    """Number of frames until photobleaching"""
    d: float
    """Diffusion coefficient of the emitter's population"""


def activation_probability(mean_activation: float, remaining: int) -> float:
    """Probability for each remaining emitter to be activated in a frame

    Parameters
    ----------
    mean_activation
        Mean number of emitters activated per frame
    remaining
        Number of emitters left in the pool

    Returns
    -------
    ``mean_activation / remaining``, capped at 1. Once the pool holds no
    more than `mean_activation` emitters, all of them get activated in the
    next frame. Without the cap, the binomial draw would be undefined and
    the pool would never be emptied.
    """
    return min(mean_activation / remaining, 1.)


def activate(frame: int, remaining: int, params: SimulationParameters,
             sampler: Sampler) -> Tuple[List[Emitter], int]:
    """Activate emitters for one frame

    The number of newly activated emitters is drawn from a binomial
    distribution with the number of remaining emitters as number of trials.
    Each new emitter gets a random position within the image, a population
    label (1 with probability ``params.population_ratio``, 2 otherwise) and
    an exponentially distributed lifetime (see
    :py:meth:`Sampler.frame_duration`).

    Parameters
    ----------
    frame
        Current frame number
    remaining
        Number of emitters left in the pool
    params
        Simulation parameters
    sampler
        Source of random numbers

    Returns
    -------
    New emitters and updated number of emitters left in the pool
    """
    if remaining <= 0:
        return [], 0

    n = int(sampler.binomial(
        remaining, activation_probability(params.mean_activation, remaining)))

    bleach_frames = params.in_frames(params.mean_bleach_time)
    emitters = []
    for _ in range(n):
        x = sampler.uniform(0, params.image_size)
        y = sampler.uniform(0, params.image_size)
        lifetime = sampler.frame_duration(bleach_frames)
        if sampler.binomial(1, params.population_ratio) == 1:
            pop, d = 1, params.diff_1
        else:
            pop, d = 2, params.diff_2
        emitters.append(Emitter(frame, x, y, pop, lifetime, d))

    return emitters, remaining - n
