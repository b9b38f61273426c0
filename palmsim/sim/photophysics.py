# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Blinking of fluorophores

An emitter alternates between an emitting (on) and a dark (off) state. On
times are exponentially distributed. For off times, there are two dark states
which are chosen with equal probability: a short-lived one (blinking) and a
long-lived one.
"""
import numpy as np

from ..sampling import Sampler


def emission_state(lifetime, t_on, t_off_1, t_off_2, sampler=None):
    """Simulate when an emitter is in its emitting state

    The emitter starts in the emitting state. Durations of the emitting and
    dark periods are drawn using :py:meth:`Sampler.frame_duration`. An
    emitting period starting at frame `t` lasting `ton` frames covers frames
    `t` to `t + ton` (inclusive). The next period starts at `t + ton + 1`.
    No new period is started in the last frame of `lifetime`, thus an emitter
    with a lifetime of a single frame is never detected.

    Parameters
    ----------
    lifetime : int
        Number of frames until photobleaching
    t_on : float
        Mean duration of emitting periods (frames)
    t_off_1, t_off_2 : float
        Mean durations of the two kinds of dark periods (frames)
    sampler : palmsim.sampling.Sampler or None, optional
        Source of random numbers. If `None`, create a new one.

    Returns
    -------
    numpy.ndarray, shape(lifetime), dtype(bool)
        `True` for each frame where the emitter is in the emitting state
    """
    if sampler is None:
        sampler = Sampler()

    state = np.zeros(lifetime, dtype=bool)
    t = 0
    emitting = True
    while t < lifetime - 1:
        if emitting:
            ton = sampler.frame_duration(t_on)
            state[t:min(t + ton, lifetime - 1) + 1] = True
            t += ton + 1
        else:
            if sampler.binomial(1, 0.5) < 0.5:
                toff = sampler.frame_duration(t_off_1)
            else:
                toff = sampler.frame_duration(t_off_2)
            t += toff + 1
        emitting = not emitting
    return state


def emitted_step_lengths(path, state):
    """Get lengths of steps between consecutive detections

    Parameters
    ----------
    path : numpy.ndarray, shape(n, 4)
        Path as returned by :py:func:`sm_tracks.diffusion_path`
    state : numpy.ndarray, shape(n), dtype(bool)
        Emission state as returned by :py:func:`emission_state`

    Returns
    -------
    numpy.ndarray
        Signed step radii (see :py:func:`sm_tracks.diffusion_path`) of all
        positions where the emitter was detected in both the current and the
        previous frame.
    """
    state = np.asarray(state, dtype=bool)
    return path[1:, 3][state[1:] & state[:-1]]
