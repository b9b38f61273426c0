# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Simulate a sptPALM experiment frame by frame"""
import logging
from typing import List, NamedTuple, Optional, TextIO

import numpy as np
import pandas as pd

from .. import config
from ..params import SimulationParameters
from ..sampling import Sampler
from . import activation, photophysics, segmentation, sm_tracks


_logger = logging.getLogger(__name__)


class SimulationResult(NamedTuple):
    """Result of :py:meth:`Simulation.run`"""
    detections: pd.DataFrame
    """All detections of all emitters, sorted by frame number. Columns are
    "frame", "x", "y" (µm), and "step"."""
    trajectories: List[pd.DataFrame]
    """Trajectories, i.e., detections split according to
    :py:func:`segmentation.segment`. Columns are the same as for
    :py:attr:`detections`."""
    lifetimes: np.ndarray
    """Number of frames until photobleaching, one entry per emitter"""
    step_lengths: np.ndarray
    """Signed radii of steps between detections in consecutive frames (µm)"""
    trajectory_lengths: np.ndarray
    """Number of detections, one entry per trajectory"""
    emitters: pd.DataFrame
    """All activated emitters. Columns are the fields of
    :py:class:`activation.Emitter`."""
    n_activated: int
    """Number of emitters activated during the simulation"""

    @config.set_columns
    def tracks(self, columns={}) -> pd.DataFrame:
        """Concatenate trajectories

        Parameters
        ----------
        columns
            Override default column names as defined in
            :py:attr:`config.columns`. Relevant name is `particle`.

        Returns
        -------
        Single DataFrame with an additional column holding the index of the
        trajectory in :py:attr:`trajectories`.
        """
        if not self.trajectories:
            cols = sm_tracks.path_columns + [columns["particle"]]
            return pd.DataFrame(np.empty((0, len(cols))), columns=cols)
        return pd.concat(
            [t.assign(**{columns["particle"]: i})
             for i, t in enumerate(self.trajectories)],
            ignore_index=True)


class Simulation:
    """Simulate photo-activation, diffusion, and blinking of emitters

    For every frame, emitters are activated from the pool (see
    :py:func:`activation.activate`). For each of them, the path is simulated
    for the whole lifetime (:py:func:`sm_tracks.diffusion_path`, not
    truncated at the end of the experiment), combined with the emission state
    (:py:func:`photophysics.emission_state`), and split into trajectories
    (:py:func:`segmentation.segment`).

    Examples
    --------
    >>> params = SimulationParameters(diff_1=0.1, n_frames=100)
    >>> res = Simulation(params, random_state=1).run()
    >>> res.trajectories[0].head()
    """
    def __init__(self, params: SimulationParameters, random_state=None):
        """Parameters
        ----------
        params
            Simulation parameters. These are validated.
        random_state : Sampler or numpy.random.RandomState or int or None
            Source of random numbers. See :py:class:`Sampler`.
        """
        self.params = params.validate()
        self.sampler = (random_state if isinstance(random_state, Sampler)
                        else Sampler(random_state))
        self.remaining = params.n_emitters
        """Number of emitters that have not been activated yet"""

        self._emitters = []
        self._detections = []
        self._trajectories = []
        self._lifetimes = []
        self._steps = []

        self._t_on = params.in_frames(params.t_on)
        self._t_off_1 = params.in_frames(params.t_off_1)
        self._t_off_2 = params.in_frames(params.t_off_2)

    def step(self, frame: int) -> int:
        """Simulate emitters activated in a frame

        Parameters
        ----------
        frame
            Frame number

        Returns
        -------
        Number of emitters activated
        """
        emitters, self.remaining = activation.activate(
            frame, self.remaining, self.params, self.sampler)
        for e in emitters:
            self._add_emitter(e)
        return len(emitters)

    def _add_emitter(self, e: activation.Emitter):
        p = self.params
        path = sm_tracks.diffusion_path(
            e.lifetime, e.d, p.acquisition_time,
            (e.x * p.pixel_size, e.y * p.pixel_size), e.frame, self.sampler)
        state = photophysics.emission_state(
            e.lifetime, self._t_on, self._t_off_1, self._t_off_2,
            self.sampler)
        det = path[state]

        self._emitters.append(e)
        self._lifetimes.append(e.lifetime)
        self._steps.append(photophysics.emitted_step_lengths(path, state))
        self._detections.append(det)
        self._trajectories.extend(
            segmentation.segment(det, p.max_blink, p.min_traj_length))

    def run(self) -> SimulationResult:
        """Run the simulation for all frames

        Returns
        -------
        Simulation results
        """
        _logger.info("Calculating the trajectories...")
        for f in range(self.params.n_frames):
            self.step(f)
        _logger.info("%i emitters activated, %i trajectories",
                     len(self._emitters), len(self._trajectories))
        return self.result()

    def result(self) -> SimulationResult:
        """Collect results of the frames simulated so far"""
        cols = sm_tracks.path_columns

        if self._detections:
            det = np.concatenate(self._detections)
        else:
            det = np.empty((0, len(cols)))
        det = pd.DataFrame(det, columns=cols)
        det["frame"] = det["frame"].astype(int)
        det = det.sort_values("frame", kind="stable", ignore_index=True)

        trajs = []
        for t in self._trajectories:
            t = pd.DataFrame(t, columns=cols)
            t["frame"] = t["frame"].astype(int)
            trajs.append(t)

        if self._emitters:
            em = pd.DataFrame(self._emitters,
                              columns=activation.Emitter._fields)
        else:
            em = pd.DataFrame(columns=activation.Emitter._fields)

        steps = (np.concatenate(self._steps) if self._steps
                 else np.empty(0))

        return SimulationResult(
            detections=det,
            trajectories=trajs,
            lifetimes=np.array(self._lifetimes, dtype=int),
            step_lengths=steps,
            trajectory_lengths=np.array([len(t) for t in trajs], dtype=int),
            emitters=em,
            n_activated=self.params.n_emitters - self.remaining)


def simulate(params: SimulationParameters,
             random_state=None) -> SimulationResult:
    """Simulate a sptPALM experiment

    Shortcut for ``Simulation(params, random_state).run()``.

    Parameters
    ----------
    params
        Simulation parameters
    random_state : Sampler or numpy.random.RandomState or int or None
        Source of random numbers. See :py:class:`Sampler`.

    Returns
    -------
    Simulation results
    """
    return Simulation(params, random_state).run()


def _write_entry(fh: TextIO, label: str, value, fmt: str):
    fh.write(f"\n {label}\n {value:{fmt}}\n")


def report_parameters(fh: TextIO, params: SimulationParameters,
                      n_activated: Optional[int] = None):
    """Append simulation parameters to a text report

    Parameters
    ----------
    fh
        File handle, e.g. as returned by
        :py:func:`palmsim.analysis.open_report`.
    params
        Simulation parameters
    n_activated
        Number of emitters effectively activated. If `None`, the entry is
        omitted.
    """
    p = params
    fh.write("\n")
    _write_entry(fh, "Diffusion coefficient of population 1 (um²/s)",
                 p.diff_1, "4.5f")
    _write_entry(fh, "Diffusion coefficient of population 2 (um²/s)",
                 p.diff_2, "4.5f")
    _write_entry(fh, "Ratio of population 1 with respect to the overall "
                 "number of proteins available", p.population_ratio, "4.5f")

    fh.write("\n")
    _write_entry(fh, "Image size (px)", p.image_size, "4.2f")
    _write_entry(fh, "Number of frames", p.n_frames, "4.2f")
    _write_entry(fh, "Pixel size (um)", p.pixel_size, "4.3f")
    _write_entry(fh, "Acquisition time (s)", p.acquisition_time, "4.3f")
    _write_entry(fh, "Intensity offset", p.offset, "4.2f")
    _write_entry(fh, "emCCD quantum yield QY", p.qy, "4.2f")
    _write_entry(fh, "emCCD sensitivity (e/AD counts)", p.ccd_sensitivity,
                 "4.2f")
    _write_entry(fh, "emCCD readout noise (e)", p.readout_noise, "4.2f")
    _write_entry(fh, "Limit of resolution (in um)", p.limit_resolution,
                 "4.2f")

    fh.write("\n")
    _write_entry(fh, "Number of proteins available initially in the pool",
                 p.n_emitters, "4.2f")
    if n_activated is not None:
        _write_entry(fh, "Number of proteins effectively activated",
                     n_activated, "4.2f")
    _write_entry(fh, "Average number for the photo-activation probability",
                 p.mean_activation, "4.2f")
    _write_entry(fh, "Average number of emitted photons per molecule",
                 p.mean_photons, "4.2f")
    _write_entry(fh, "Average life time of emitters before photo-bleaching "
                 "(s)", p.mean_bleach_time, "4.2f")
    _write_entry(fh, "Ton (average emission time in frames)",
                 p.in_frames(p.t_on), "4.2f")
    _write_entry(fh, "Toff_1 (average off time in frames - short one)",
                 p.in_frames(p.t_off_1), "4.2f")
    _write_entry(fh, "Toff_2 (average off time in frames - long one)",
                 p.in_frames(p.t_off_2), "4.2f")
