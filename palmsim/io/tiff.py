# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""High level TIFF I/O"""
import collections.abc
import itertools
import logging
from pathlib import Path
import time
from typing import Callable, Iterable, List, Mapping, Optional, Union

import numpy as np
import tifffile

from .. import config
from . import yaml


_logger = logging.getLogger(__name__)


def save_as_tiff(
    filename: Union[str, Path],
    frames: Iterable[np.ndarray],
    metadata: Union[None, Iterable[Mapping], Mapping] = None,
    contiguous: bool = True,
):
    """Write a sequence of images to a TIFF stack

    Parameters
    ----------
    filename
        Name of the output file
    frames
        Frames to be written to TIFF file.
    metadata:
        Metadata to be written. If a single dict, save with the first frame.
        If an iterable, save each entry with the corresponding frame.
        Metadata is serialized to YAML and saved as the ImageDescription tag.
    contiguous
        Whether to write to the TIFF file contiguously or not. Setting to
        `False` allows for per-image metadata.
    """
    if metadata is None:
        metadata = []
    elif isinstance(metadata, collections.abc.Mapping):
        metadata = [metadata]

    with tifffile.TiffWriter(filename) as tw:
        for f, md in zip(frames, itertools.chain(metadata, itertools.repeat({}))):
            tw.write(f, software="palmsim", description=_description(md),
                     contiguous=contiguous)


def _description(md: Mapping) -> Optional[str]:
    if not md:
        return None
    return yaml.safe_dump(dict(md))


def _append_frame(filename: Path, frame: np.ndarray, first: bool):
    with tifffile.TiffWriter(filename, append=not first) as tw:
        tw.write(frame, software="palmsim", contiguous=True)


@config.use_defaults
def append_frame(filename: Union[str, Path], frame: np.ndarray,
                 first: bool = False, retry_delay: Optional[float] = None):
    """Append a single frame to a TIFF file

    Writing is retried until it succeeds. This allows for the file to be
    accessed by other processes (e.g., a viewer) concurrently.

    Parameters
    ----------
    filename
        Name of the file
    frame
        Image data
    first
        If `True`, overwrite the file instead of appending.
    retry_delay
        Seconds to wait before retrying after a failed write. If `None`,
        use ``config.rc["retry_delay"]``.
    """
    filename = Path(filename)
    while True:
        try:
            _append_frame(filename, frame, first)
        except OSError as e:
            _logger.warning("%s: Failed to write frame (%s), retrying",
                            filename, e)
            time.sleep(retry_delay)
        else:
            return


@config.use_defaults
def save_movie(directory: Union[str, Path], frames: Iterable[np.ndarray],
               frames_per_file: Optional[int] = None,
               preview: Optional[Callable[[int, np.ndarray], None]] = None,
               prefix: str = "AC") -> List[Path]:
    """Write a movie to a series of TIFF files

    Files are named ``<prefix>0.tif``, ``<prefix>1.tif``, … and hold
    `frames_per_file` frames each (the last one possibly fewer).

    Parameters
    ----------
    directory
        Where to write files to. Needs to exist.
    frames
        Frames to write
    frames_per_file
        Maximum number of frames per file. If `None`, use
        ``config.rc["frames_per_file"]``.
    preview
        If given, this is called after each frame was written. Arguments are
        the frame number and the image data.
    prefix
        File name prefix

    Returns
    -------
    Names of the files written
    """
    directory = Path(directory)
    files = []
    for n, img in enumerate(frames):
        file_no, n_in_file = divmod(n, frames_per_file)
        if n_in_file == 0:
            files.append(directory / f"{prefix}{file_no}.tif")
            _logger.info("Writing %s", files[-1])
        append_frame(files[-1], img, first=(n_in_file == 0))
        if preview is not None:
            preview(n, img)
    return files
