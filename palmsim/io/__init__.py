# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

r"""Data input/output
=================

:py:mod:`palmsim.io` provides ways to save simulation results.

- Simulated movies can be saved as a series of multi-page TIFF files with
  help of :py:func:`save_movie`. Frames are appended one by one; writing is
  retried if the file is temporarily not accessible.
  :py:func:`save_as_tiff` writes an image sequence to a single file.
- Detections and trajectories can be written to HDF5 and trc files by
  :py:func:`save` and read back by :py:func:`load`.
- Simulation parameters are stored as YAML. The :py:mod:`palmsim.io.yaml`
  submodule extends PyYAML to support :py:mod:`palmsim` types.


Examples
--------

Save a simulated movie in files of 1000 frames each:

>>> save_movie("Simulated_Movies", sim.simulate_movie(res.detections, params))

Save trajectories:

>>> save("tracks.h5", res.tracks())
>>> load("tracks.h5")


Programming reference
---------------------

.. autofunction:: save_movie
.. autofunction:: append_frame
.. autofunction:: save_as_tiff
.. autofunction:: save
.. autofunction:: load
.. autofunction:: save_trc
.. autofunction:: load_trc
.. autofunction:: reset_dir
"""
from .fs import reset_dir  # noqa: F401
from .sm import load, load_trc, save, save_trc  # noqa: F401
from .tiff import append_frame, save_as_tiff, save_movie  # noqa: F401
