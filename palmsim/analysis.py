# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

r"""Analysis of simulated trajectories
===================================

Mean square displacements (MSDs) are calculated for each trajectory and for
the whole ensemble. The diffusion coefficient :math:`D` and the positional
accuracy :math:`\epsilon` are obtained by fitting

.. math:: msd(t_\text{lag}) = 4 D t_\text{lag} + 4 \epsilon^2

to the first few lag times.

Examples
--------
>>> res = sim.simulate(params)
>>> ana = analyze_trajectories(res.trajectories, params.acquisition_time,
...                            params.max_blink, params.min_traj_length)
>>> d = ana.ensemble_fit["D"]
>>> with open_report("Results.txt", ana) as fh:
...     sim.report_parameters(fh, params, res.n_activated)


Programming reference
---------------------

.. autofunction:: analyze_trajectories
.. autoclass:: AnalysisResult
    :members:
.. autofunction:: filter_trajectories
.. autofunction:: square_displacements
.. autofunction:: fit_msd
.. autofunction:: open_report
"""
from concurrent.futures import ThreadPoolExecutor
import functools
import logging
import math
import multiprocessing
from typing import List, NamedTuple, Sequence, TextIO

import numpy as np
import pandas as pd
import scipy.stats

from . import config


_logger = logging.getLogger(__name__)

num_cpus = multiprocessing.cpu_count()


class AnalysisResult(NamedTuple):
    """Result of :py:func:`analyze_trajectories`"""
    msd: pd.DataFrame
    """MSDs of single trajectories. Each row corresponds to a trajectory
    (index is the position in the list passed to
    :py:func:`analyze_trajectories`), each column to a lag time (s)."""
    emsd: pd.DataFrame
    """Ensemble MSD. Columns are "lagt", "msd", "stderr", and "n" (number of
    square displacements)."""
    fit: pd.DataFrame
    """Fit results for single trajectories, columns "D" and "eps"."""
    ensemble_fit: pd.Series
    """Fit result for the ensemble MSD, entries "D" and "eps"."""
    n_trajectories: int
    """Number of trajectories passed to :py:func:`analyze_trajectories`"""
    settings: dict
    """Analysis settings"""


@config.set_columns
def filter_trajectories(trajectories: Sequence[pd.DataFrame],
                        min_traj_length: int, min_frac_points: float,
                        columns={}) -> List[int]:
    """Select trajectories suitable for analysis

    Parameters
    ----------
    trajectories
        Trajectories to select from
    min_traj_length
        Minimum number of detections
    min_frac_points
        Minimum fraction of frames between the first and the last one of a
        trajectory in which the particle was detected

    Returns
    -------
    Indices of trajectories which fulfill the criteria
    """
    ret = []
    for i, t in enumerate(trajectories):
        n = len(t)
        if n < max(min_traj_length, 1):
            continue
        f = t[columns["time"]]
        span = f.max() - f.min() + 1
        if n / span >= min_frac_points:
            ret.append(i)
    return ret


@config.set_columns
def square_displacements(traj: pd.DataFrame, n_lag: int, pixel_size=1.,
                         columns={}) -> List[np.ndarray]:
    """Calculate square displacements of a trajectory

    Frames where the particle was not detected are skipped, i.e., only
    pairs of detections which are exactly a given number of frames apart
    contribute to that lag time.

    Parameters
    ----------
    traj
        Single trajectory
    n_lag
        Number of lag times (in frames) to calculate
    pixel_size
        Multiply coordinates by this factor.

    Returns
    -------
    One array of square displacements for each lag time from 1 to `n_lag`
    """
    fnos = traj[columns["time"]].astype(int).to_numpy()
    pos = traj[columns["coords"]].to_numpy() * pixel_size
    # fill gaps with NaNs
    full = np.full((fnos.max() - fnos.min() + 1, pos.shape[1]), np.nan)
    full[fnos - fnos.min()] = pos

    ret = []
    for i in range(1, n_lag + 1):
        if i >= len(full):
            ret.append(np.empty(0))
            continue
        sd = np.sum((full[i:] - full[:-i])**2, axis=1)
        ret.append(sd[np.isfinite(sd)])
    return ret


def fit_msd(lagt: np.ndarray, msd: np.ndarray, n_fit: int) -> pd.Series:
    r"""Fit Brownian motion model to MSD data

    Fit :math:`msd(t_\text{lag}) = 4 D t_\text{lag} + 4 \epsilon^2` to the
    first `n_fit` finite data points. A negative :math:`\epsilon` signals a
    negative offset.

    Parameters
    ----------
    lagt
        Lag times
    msd
        MSDs corresponding to `lagt`
    n_fit
        Number of data points to use

    Returns
    -------
    Entries "D" and "eps". NaN if fewer than two data points are available.
    """
    fin = np.isfinite(msd)
    lagt = np.asarray(lagt)[fin][:n_fit]
    msd = np.asarray(msd)[fin][:n_fit]
    if len(msd) < 2:
        return pd.Series({"D": np.nan, "eps": np.nan})
    r = scipy.stats.linregress(lagt, msd)
    eps = math.copysign(math.sqrt(abs(r.intercept) / 4), r.intercept)
    return pd.Series({"D": r.slope / 4, "eps": eps})


def _msd_from_sds(sds: List[np.ndarray], min_n_msd: int) -> np.ndarray:
    return np.array([np.mean(s) if len(s) >= max(min_n_msd, 1) else np.nan
                     for s in sds])


@config.use_defaults
@config.set_columns
def analyze_trajectories(trajectories: Sequence[pd.DataFrame],
                         frame_time: float, max_blink: int,
                         min_traj_length: int, min_frac_points=None,
                         max_display_time=None, n_fit=None, min_n_msd=None,
                         pixel_size=1., parallel=None,
                         columns={}) -> AnalysisResult:
    """Calculate MSDs and diffusion coefficients of trajectories

    Parameters
    ----------
    trajectories
        Trajectories, one DataFrame each
    frame_time
        Time between two frames (s)
    max_blink
        Maximum number of consecutive frames without detection used for
        creating the trajectories. Stored in the settings of the result.
    min_traj_length
        Minimum number of detections per trajectory
    min_frac_points
        Minimum fraction of frames in which a particle has to be detected
        between its first and last detection. If `None`, use
        ``config.rc["min_frac_points"]``.
    max_display_time
        Maximum lag time (s) to calculate MSDs for. If `None`, use
        ``config.rc["max_display_time"]``.
    n_fit
        Number of lag times to use for fitting. If `None`, use
        ``config.rc["n_fit"]``.
    min_n_msd
        Minimum number of square displacements required for calculating the
        MSD at a given lag time. If `None`, use ``config.rc["min_n_msd"]``.
    pixel_size
        Multiply coordinates by this factor. Defaults to 1 (coordinates are
        already in µm).
    parallel
        Whether to calculate square displacements in multiple threads. If
        `None`, use ``config.rc["parallel"]``.

    Returns
    -------
    MSDs and fit results

    Other parameters
    ----------------
    columns : dict, optional
        Override default column names as defined in :py:attr:`config.columns`.
        Relevant names are `coords` and `time`.
    """
    n_lag = max(int(round(max_display_time / frame_time)), 1)
    lagt = np.arange(1, n_lag + 1) * frame_time

    idx = filter_trajectories(trajectories, min_traj_length, min_frac_points,
                              columns=columns)
    _logger.info("Analyzing %i of %i trajectories", len(idx),
                 len(trajectories))

    func = functools.partial(square_displacements, n_lag=n_lag,
                             pixel_size=pixel_size, columns=columns)
    selected = [trajectories[i] for i in idx]
    if parallel and len(selected) > 1:
        with ThreadPoolExecutor(max_workers=num_cpus) as ex:
            all_sds = list(ex.map(func, selected))
    else:
        all_sds = [func(t) for t in selected]

    msd = pd.DataFrame([_msd_from_sds(s, min_n_msd) for s in all_sds],
                       index=pd.Index(idx, name="particle"),
                       columns=pd.Index(lagt, name="lagt"), dtype=float)

    e_sds = [np.concatenate([s[i] for s in all_sds]) if all_sds
             else np.empty(0) for i in range(n_lag)]
    e_n = np.array([len(s) for s in e_sds])
    e_msd = _msd_from_sds(e_sds, min_n_msd)
    e_err = np.array([np.std(s, ddof=1) / np.sqrt(len(s))
                      if len(s) > 1 else np.nan for s in e_sds])
    e_err[~np.isfinite(e_msd)] = np.nan
    emsd = pd.DataFrame({"lagt": lagt, "msd": e_msd, "stderr": e_err,
                         "n": e_n})

    if len(msd):
        fit = pd.DataFrame([fit_msd(lagt, m, n_fit) for m in msd.to_numpy()],
                           index=msd.index)
    else:
        fit = pd.DataFrame(columns=["D", "eps"], index=msd.index,
                           dtype=float)
    ensemble_fit = fit_msd(lagt, e_msd, n_fit)

    settings = dict(frame_time=frame_time, max_blink=max_blink,
                    min_traj_length=min_traj_length,
                    min_frac_points=min_frac_points,
                    max_display_time=max_display_time, n_fit=n_fit,
                    min_n_msd=min_n_msd, pixel_size=pixel_size)
    return AnalysisResult(msd, emsd, fit, ensemble_fit, len(trajectories),
                          settings)


def open_report(filename, result: AnalysisResult) -> TextIO:
    """Write analysis results to a text report

    Parameters
    ----------
    filename : str or pathlib.Path
        Name of the report file
    result
        Analysis results

    Returns
    -------
    Open file handle. Further data can be appended; the caller is
    responsible for closing it.
    """
    s = result.settings
    fh = open(filename, "w", encoding="utf-8")
    fh.write(" Analysis of simulated trajectories\n")
    fh.write(f"\n Number of trajectories\n {result.n_trajectories}\n")
    fh.write(f"\n Number of trajectories analyzed\n {len(result.msd)}\n")
    fh.write(f"\n Frame time (ms)\n {1000 * s['frame_time']:4.2f}\n")
    fh.write(f"\n Maximum number of blinking frames\n {s['max_blink']}\n")
    fh.write(f"\n Minimum trajectory length (frames)\n "
             f"{s['min_traj_length']}\n")
    fh.write(f"\n Minimum fraction of detections per trajectory\n "
             f"{s['min_frac_points']:4.2f}\n")
    fh.write(f"\n Number of points used for fitting the MSD\n {s['n_fit']}\n")

    fh.write("\n Ensemble MSD\n lag time (s)   MSD (um²)   stderr (um²)   n\n")
    for row in result.emsd.itertuples(index=False):
        fh.write(f" {row.lagt:10.4f} {row.msd:11.5f} {row.stderr:13.5f} "
                 f"{row.n:5d}\n")

    fh.write("\n Diffusion coefficient from the ensemble MSD (um²/s)\n "
             f"{result.ensemble_fit['D']:4.5f}\n")
    fh.write("\n Positional accuracy from the ensemble MSD (um)\n "
             f"{result.ensemble_fit['eps']:4.5f}\n")
    d = result.fit["D"].dropna()
    if len(d):
        fh.write("\n Mean diffusion coefficient of single trajectories "
                 f"(um²/s)\n {d.mean():4.5f}\n")
        fh.write("\n Median diffusion coefficient of single trajectories "
                 f"(um²/s)\n {d.median():4.5f}\n")
    return fh
