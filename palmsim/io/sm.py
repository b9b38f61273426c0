# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Save and load simulated detections and trajectories

Supported formats are HDF5 (via :py:meth:`pandas.DataFrame.to_hdf`, which
requires PyTables) and trc, a whitespace-separated text format used by
MATLAB tracking tools.
"""
import logging
from pathlib import Path

import numpy as np
import pandas as pd


adjust_index = ["frame", "particle"]
"""Since MATLAB's indices start at 1 and python's start at 0, frame numbers
and particle numbers are off by one in trc files.
"""

trc_columns = ["particle", "frame", "x", "y", "step"]
"""Columns of trc files as written by :py:func:`save_trc`"""

_logger = logging.getLogger(__name__)


def _infer_format(p: Path, fmt: str) -> str:
    if fmt != "auto":
        return fmt
    if p.suffix == ".h5":
        return "hdf5"
    if p.suffix == ".trc":
        return "trc"
    raise ValueError("Could not determine format from file name " + str(p))


def save(filename, data, typ="auto", fmt="auto"):
    """Save detections or tracking data

    Parameters
    ----------
    filename : str or pathlib.Path
        Name of the file to write to
    data : pandas.DataFrame
        Data to save
    typ : {"auto", "detections", "tracks"}
        HDF5 key to use. If "auto", consider `data` tracking data if a
        "particle" column is present, otherwise treat as detections. Ignored
        for trc files.
    fmt : {"auto", "hdf5", "trc"}
        Output format. If "auto", infer the format from `filename`. Otherwise,
        write the given format.
    """
    p = Path(filename)

    if typ not in ("tracks", "detections", "auto"):
        raise ValueError("Unknown type: " + typ)
    if typ == "auto":
        typ = "tracks" if "particle" in data else "detections"

    fmt = _infer_format(p, fmt)
    if fmt == "hdf5":
        data.to_hdf(p, key=typ)
        return
    if fmt == "trc":
        save_trc(p, data)
        return
    raise ValueError('Unknown format "{}"'.format(fmt))


def load(filename, typ="auto", fmt="auto"):
    """Load detections or tracking data

    Parameters
    ----------
    filename : str or pathlib.Path
        Name of the file
    typ : {"auto", "detections", "tracks"}
        HDF5 key to load. If "auto", try "tracks" first, then "detections".
        Ignored for trc files.
    fmt : {"auto", "hdf5", "trc"}
        Input format. If "auto", infer the format from `filename`.

    Returns
    -------
    pandas.DataFrame
        Loaded data
    """
    p = Path(filename)
    fmt = _infer_format(p, fmt)
    if fmt == "trc":
        return load_trc(p)
    if fmt != "hdf5":
        raise ValueError('Unknown format "{}"'.format(fmt))
    if typ != "auto":
        return pd.read_hdf(p, typ)
    try:
        return pd.read_hdf(p, "tracks")
    except KeyError:
        _logger.info(f"{p}: No tracks found, loading detections")
        return pd.read_hdf(p, "detections")


def save_trc(filename, data):
    """Save tracking data in trc format

    Parameters
    ----------
    filename : str or pathlib.Path
        Name of the file to write to
    data : pandas.DataFrame
        Data to save. If there is no "particle" column, each row is
        considered a separate particle.
    """
    df = data.copy()

    if "particle" not in df.columns:
        df["particle"] = np.arange(len(df))
    if "step" not in df.columns:
        df["step"] = 0.

    for c in adjust_index:
        df[c] += 1

    df.to_csv(filename, sep=" ", header=False, index=False,
              columns=trc_columns)


def load_trc(filename):
    """Load tracking data from trc file

    Parameters
    ----------
    filename : str or pathlib.Path
        Name of the file

    Returns
    -------
    pandas.DataFrame
        Tracking data
    """
    df = pd.read_csv(filename, sep=r"\s+", header=None, names=trc_columns)
    for c in adjust_index:
        df[c] -= 1
    return df[["frame", "x", "y", "step", "particle"]]
