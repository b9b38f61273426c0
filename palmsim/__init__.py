# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Simulation of single particle tracking PALM experiments

Subpackages and modules
-----------------------

- :py:mod:`palmsim.params`: simulation parameters, loading and saving them
- :py:mod:`palmsim.sim`: photo-activation, diffusion, blinking, trajectory
  segmentation, and rendering of camera images
- :py:mod:`palmsim.analysis`: mean square displacement analysis of the
  simulated trajectories
- :py:mod:`palmsim.io`: saving movies, detections and trajectories
- :py:mod:`palmsim.plot`: plotting of simulation results
- :py:mod:`palmsim.sampling`: random variates with checked domains
- :py:mod:`palmsim.config`: global settings and default column names

Run ``python -m palmsim --help`` for the command line interface.
"""
import lazy_loader

from . import config, exceptions, sampling  # noqa: F401
from . import io, params, sim, analysis  # noqa: F401
from .params import (SimulationParameters, load_parameters,  # noqa: F401
                     save_parameters)
from .sim import simulate  # noqa: F401


__version__ = "1.0.0"

# matplotlib is slow to import
__getattr__, __dir__, __all__ = lazy_loader.attach(
    __name__,
    submodules=["plot"],
)
