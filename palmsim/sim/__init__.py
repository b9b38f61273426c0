# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Simulation of sptPALM data
==========================

A pool of photo-activatable emitters is activated over time. Each activated
emitter diffuses until it photobleaches, switching between an emitting and
dark states in the meantime. The positions where it was emitting are the
detections, which are split into trajectories in the same way a tracking
algorithm would link them.


Examples
~~~~~~~~

Simulate 2000 frames of a two-population experiment, 30 % of the emitters
diffusing with 0.5 μm²/s and 70 % with 0.05 μm²/s:

>>> params = SimulationParameters(diff_1=0.5, diff_2=0.05,
...                               population_ratio=0.3, n_frames=2000)
>>> res = simulate(params, random_state=0)
>>> res.tracks().head()

Render a movie from the detections:

>>> frames = list(simulate_movie(res.detections, params))


Fluorescence microscopy images
------------------------------

Each fluorophore appears in the microscope as a diffraction limited spot. The
whole image is made up by the superposition of such spots. The
:py:func:`simulate_gauss` function provides functions to simulate images like
that; :py:func:`simulate_frame` adds camera offset and noise.


Programming reference
---------------------

.. autoclass:: Simulation
    :members:
.. autoclass:: SimulationResult
    :members:
.. autofunction:: simulate
.. autofunction:: report_parameters
.. autoclass:: Emitter
.. autofunction:: activate
.. autofunction:: diffusion_path
.. autofunction:: emission_state
.. autofunction:: emitted_step_lengths
.. autofunction:: split_trajectory
.. autofunction:: segment
.. autofunction:: simulate_movie
.. autofunction:: simulate_frame
.. autofunction:: simulate_gauss
.. autofunction:: gauss_psf
"""
from .activation import Emitter, activate  # noqa: F401
from .driver import (Simulation, SimulationResult, simulate,  # noqa: F401
                     report_parameters)
from .fluo_image import (simulate_gauss, gauss_psf,  # noqa: F401
                         simulate_frame, simulate_movie)
from .photophysics import emission_state, emitted_step_lengths  # noqa: F401
from .segmentation import split_trajectory, segment  # noqa: F401
from .sm_tracks import diffusion_path  # noqa: F401
