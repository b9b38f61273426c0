# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Some functions related to files and the file system"""
import logging
from pathlib import Path
import shutil
from typing import Union


_logger = logging.getLogger(__name__)


def reset_dir(path: Union[str, Path]) -> Path:
    """Create an empty directory, removing any previous one

    Parameters
    ----------
    path
        Directory path. :py:meth:`pathlib.Path.expanduser` is called on this.

    Returns
    -------
    Path to the directory
    """
    path = Path(path).expanduser()
    if path.exists():
        _logger.info("Removing previous contents of %s", path)
        shutil.rmtree(path)
    path.mkdir(parents=True)
    return path
