# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Plotting utilities
==================

The :py:mod:`palmsim.plot` module contains functions to visualize simulation
results:

- :py:func:`plot_trajectories` draws all trajectories, colored according to
  when they were recorded.
- :py:func:`plot_lifetimes` shows the distribution of photobleaching times.
- :py:func:`plot_step_ecdf` shows the empirical cumulative distribution of
  single step lengths.
- :py:func:`plot_msd` plots the ensemble MSD together with the fitted model.


Programming reference
---------------------

.. autofunction:: plot_trajectories
.. autofunction:: plot_lifetimes
.. autofunction:: plot_step_ecdf
.. autofunction:: plot_msd
"""
from typing import Optional, Sequence

import matplotlib as mpl
import matplotlib.collections
import matplotlib.patches
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from . import config


@config.set_columns
def plot_trajectories(trajectories: Sequence[pd.DataFrame], image_size: int,
                      pixel_size: float = 1., ax: Optional[mpl.axes.Axes] = None,
                      cmap="jet", columns={}) -> mpl.collections.LineCollection:
    """Draw trajectories color-coded by their temporal order

    Parameters
    ----------
    trajectories
        Trajectories in the order they were recorded. Coordinates in µm.
    image_size
        Width and height of the image (px). A frame is drawn around the
        image area.
    pixel_size
        Divide coordinates by this to get pixel coordinates.
    ax
        Axes to use for plotting. If `None`, use :py:func:`pyplot.gca`.
    cmap
        Name of colormap or `Colormap` instance. The first trajectory gets
        the lowest, the last one the highest color.

    Returns
    -------
    Collection of the trajectory lines

    Other parameters
    ----------------
    columns : dict, optional
        Override default column names as defined in :py:attr:`config.columns`.
        Relevant name is `coords`.
    """
    if ax is None:
        ax = plt.gca()
    if isinstance(cmap, str):
        cmap = plt.get_cmap(cmap)

    lines = [t[columns["coords"]].to_numpy() / pixel_size
             for t in trajectories]
    colors = cmap(np.linspace(0, 1, len(lines)))
    lc = mpl.collections.LineCollection(lines, colors=colors, linewidths=1)
    ax.add_collection(lc)

    ax.add_patch(mpl.patches.Rectangle((0, 0), image_size, image_size,
                                       fill=False, edgecolor="k"))
    ax.set_xlim(0, image_size)
    ax.set_ylim(0, image_size)
    ax.set_aspect("equal")
    ax.axis("off")
    return lc


def plot_lifetimes(lifetimes: np.ndarray, n_bins: int = 50,
                   ax: Optional[mpl.axes.Axes] = None):
    """Plot the distribution of photobleaching times

    Parameters
    ----------
    lifetimes
        Photobleaching times (frames)
    n_bins
        Number of histogram bins
    ax
        Axes to use for plotting. If `None`, use :py:func:`pyplot.gca`.

    Returns
    -------
    Bin centers and relative frequencies
    """
    if ax is None:
        ax = plt.gca()

    counts, edges = np.histogram(lifetimes, bins=n_bins)
    freq = counts / max(counts.sum(), 1)
    centers = (edges[:-1] + edges[1:]) / 2
    ax.plot(centers, freq, "-ob")
    ax.set_box_aspect(1)
    ax.set_xlabel("Photobleaching time (frames)")
    ax.set_ylabel("Frequency")
    ax.set_title("Distribution of photobleaching times")
    return centers, freq


def plot_step_ecdf(step_lengths: np.ndarray,
                   ax: Optional[mpl.axes.Axes] = None):
    """Plot the empirical cumulative distribution of step lengths

    Parameters
    ----------
    step_lengths
        Signed step radii as stored in the "step" column (µm)
    ax
        Axes to use for plotting. If `None`, use :py:func:`pyplot.gca`.

    Returns
    -------
    Sorted step lengths and corresponding values of the ECDF
    """
    if ax is None:
        ax = plt.gca()

    x = np.sort(np.asarray(step_lengths))
    f = np.arange(1, len(x) + 1) / max(len(x), 1)
    ax.step(x, f, "-r", where="post", linewidth=1)
    if len(x):
        ax.set_xlim(x[0], x[-1])
    ax.set_ylim(0, 1)
    ax.set_box_aspect(1)
    ax.set_xlabel("Step length (µm)")
    ax.set_ylabel("Cumulative distribution")
    ax.set_title("Cumulative distribution of the step length")
    return x, f


def plot_msd(result, ax: Optional[mpl.axes.Axes] = None,
             show_legend: bool = True) -> mpl.axes.Axes:
    """Plot the ensemble MSD with the fitted Brownian motion model

    Parameters
    ----------
    result : palmsim.analysis.AnalysisResult
        Analysis result
    ax
        Axes to use for plotting. If `None`, use :py:func:`pyplot.gca`.
    show_legend
        Whether to add a legend to the plot.

    Returns
    -------
    Axes used for plotting
    """
    if ax is None:
        ax = plt.gca()

    e = result.emsd
    ax.errorbar(e["lagt"], e["msd"], yerr=e["stderr"], fmt="o",
                label="ensemble")
    d = result.ensemble_fit["D"]
    eps = result.ensemble_fit["eps"]
    if np.isfinite(d):
        t = np.linspace(0, e["lagt"].max(), 100)
        ax.plot(t, 4 * d * t + 4 * np.sign(eps) * eps**2,
                label=f"D = {d:.3g} µm²/s")
    ax.set_xlabel("lag time [s]")
    ax.set_ylabel("MSD [µm²]")
    if show_legend:
        ax.legend(loc=0)
    return ax
