# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Mechanism for getting and setting default function parameters
=============================================================

Simulated emitters, detections and trajectories are handed around as
:py:class:`pandas.DataFrame` objects with x coordinates in the "x" column,
y coordinates in the "y" column, frame numbers in the "frame" column and so
on. The :py:func:`set_columns` decorator allows for functions to take the
column names from the `columns` argument, which defaults to
:py:attr:`columns`.

Settings that are not physical simulation parameters (such as how many lag
times to use for fitting MSDs or how many frames to put into one movie file)
are read from :py:attr:`rc` by functions decorated with
:py:func:`use_defaults` whenever the corresponding argument is `None`.


Examples
--------

Define a function that will take the DataFrame column names from the
`column` argument:

>>> @set_columns
... def get_steps(data, columns={}):
...     return data[columns["step"]]

Thanks to :py:func:`set_columns`, the `columns` dict will have sensible
default values (which can be changed globally by the user by setting the
corresponding items in :py:attr:`columns`). Additionally, any user of the
`get_steps` function can override the column names when calling the function.


Programming reference
---------------------

.. autofunction:: set_columns
.. autofunction:: use_defaults
.. autodata:: columns
.. autodata:: rc
"""
import inspect
import functools


rc = dict(
    min_frac_points=0.75,
    max_display_time=0.5,
    n_fit=4,
    min_n_msd=3,
    parallel=False,
    frames_per_file=1000,
    retry_delay=0.1,
)
"""Global config dictionary"""


columns = dict(
    coords=["x", "y"],
    time="frame",
    particle="particle",
    step="step",
    population="population",
    lifetime="lifetime",
    diffusion="d")
"""Default column names in :py:class:`pandas.DataFrame`"""


def use_defaults(func):
    """Decorator to apply default values to functions

    If any function argument whose name is a key in :py:attr:`rc` is `None`,
    set its value to what is specified in :py:attr:`rc`.

    Parameters
    ----------
    func : function
        Function to be decorated

    Returns
    -------
    function
        Modified function

    Examples
    --------
    >>> @use_defaults
    ... def f(n_fit=None):
    ...     return n_fit
    >>> f()
    4
    >>> f(2)
    2
    >>> config.rc["n_fit"] = 3
    >>> f()
    3
    """
    sig = inspect.signature(func)

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        ba = sig.bind(*args, **kwargs)
        ba.apply_defaults()
        for name, value in ba.arguments.items():
            if value is None and name in rc:
                ba.arguments[name] = rc[name]
        return func(*ba.args, **ba.kwargs)

    wrapper.__signature__ = sig
    return wrapper


def set_columns(func):
    """Decorator to set default column names for DataFrames

    Use this on functions that accept a dict as the `columns` argument.
    Values from :py:attr:`columns` will be added for any key not present in
    the dict argument.

    Parameters
    ----------
    func : function
        Function to be decorated

    Returns
    -------
    function
        Modified function

    Examples
    --------
    >>> @set_columns
    ... def get_steps(data, columns={}):
    ...     return data[columns["step"]]
    >>> get_steps(df, columns={"step": "r"})
    """
    sig = inspect.signature(func)

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        ba = sig.bind(*args, **kwargs)
        ba.apply_defaults()

        cols = columns.copy()
        cols.update(ba.arguments["columns"])
        ba.arguments["columns"] = cols

        return func(*ba.args, **ba.kwargs)

    wrapper.__signature__ = sig
    return wrapper
