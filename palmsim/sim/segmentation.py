# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Split detections of an emitter into trajectories

Due to blinking, an emitter is not detected in every frame. A tracking
algorithm can bridge short gaps of at most `max_blink` frames; longer gaps
end a trajectory. Trajectories shorter than `min_length` detections are
discarded.

The gap between the second to last and the last detection never ends a
trajectory: the last detection is appended to the current trajectory
regardless of how many frames it is missing.
"""
from typing import List, Sequence, Tuple

import numpy as np


def split_trajectory(frames: Sequence[int], max_blink: int,
                     min_length: int) -> List[Tuple[int, int]]:
    """Find trajectories in a sequence of detections

    Parameters
    ----------
    frames
        Frame numbers of the detections of a single emitter in increasing
        order
    max_blink
        Maximum number of consecutive frames without detection within a
        trajectory
    min_length
        Minimum number of detections per trajectory

    Returns
    -------
    Start and end indices (exclusive) into `frames`, one pair per
    trajectory. Indices refer to detections, not frame numbers.
    """
    n = len(frames)
    ret = []
    first = 0
    n_points = 1
    for i in range(1, n):
        gap = frames[i] - frames[i-1] > max_blink + 1
        if gap and i < n - 1:
            if n_points >= min_length:
                ret.append((first, i))
            first = i
            n_points = 1
        elif i == n - 1 and n_points + 1 >= min_length:
            ret.append((first, n))
        else:
            n_points += 1
    return ret


def segment(detections: np.ndarray, max_blink: int,
            min_length: int) -> List[np.ndarray]:
    """Split detections of an emitter into trajectories

    Parameters
    ----------
    detections
        One row per detection, frame number in the first column, sorted by
        frame number.
    max_blink
        Maximum number of consecutive frames without detection within a
        trajectory
    min_length
        Minimum number of detections per trajectory

    Returns
    -------
    Trajectories, each one a slice of `detections`
    """
    detections = np.asarray(detections)
    if not len(detections):
        return []
    return [detections[s:e]
            for s, e in split_trajectory(detections[:, 0], max_blink,
                                         min_length)]
