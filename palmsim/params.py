# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Simulation parameters
=====================

:py:class:`SimulationParameters` holds everything needed to simulate a
sptPALM experiment: the acquisition settings, the size of the pool of
photo-activatable emitters, their photophysics (on and off times,
photobleaching), the diffusion coefficients of up to two populations, the
criteria for splitting detections into trajectories and the camera settings
used for rendering the movie.

Parameters can be stored in YAML files:

>>> params = SimulationParameters(diff_1=0.1, n_frames=500)
>>> save_parameters("params.yaml", params)
>>> load_parameters("params.yaml") == params
True

Diffusion coefficients, the population ratio and the number of frames may
also be given as strings, e.g. as typed into a GUI or passed on the command
line, using :py:meth:`SimulationParameters.from_ui`.


Programming reference
---------------------

.. autoclass:: SimulationParameters
    :members:
.. autofunction:: load_parameters
.. autofunction:: save_parameters
"""
import math
from pathlib import Path
from typing import Mapping, NamedTuple, Optional, Union

from .exceptions import ConfigurationError
from .io import yaml


_positive = ("pixel_size", "acquisition_time", "mean_activation",
             "mean_bleach_time", "mean_photons", "t_on", "t_off_1", "t_off_2",
             "image_size", "ccd_sensitivity", "limit_resolution")
_non_negative = ("diff_2", "offset", "qy", "readout_noise", "background",
                 "gain_noise")
_counts = ("n_emitters", "max_blink", "min_traj_length", "n_frames",
           "gauss_stamp_size", "image_size")


def _parse_number(s) -> float:
    """Convert user input to float, NaN if that is not possible"""
    if s is None:
        return math.nan
    try:
        return float(s)
    except (TypeError, ValueError):
        return math.nan


@yaml.register_yaml_class
class SimulationParameters(NamedTuple):
    """Immutable set of simulation parameters

    Times are given in seconds, lengths in µm, diffusion coefficients in
    µm²/s unless noted otherwise.
    """
    pixel_size: float = 0.16
    """Pixel size (µm/px)"""
    acquisition_time: float = 0.02
    """Time per frame (s)"""
    n_emitters: int = 1000
    """Number of emitters in the pool that can be activated"""
    mean_activation: float = 1.
    """Mean number of emitters activated per frame"""
    mean_bleach_time: float = 0.5
    """Mean time until photobleaching"""
    mean_photons: float = 500.
    """Mean number of photons per emitter and frame"""
    t_on: float = 0.1
    """Mean duration of emission periods"""
    t_off_1: float = 0.02
    """Mean duration of short dark periods (blinking)"""
    t_off_2: float = 0.5
    """Mean duration of long dark periods (dark state)"""
    max_blink: int = 2
    """Maximum number of consecutive frames an emitter may be missing from
    a trajectory"""
    min_traj_length: int = 5
    """Minimum number of detections per trajectory"""
    image_size: int = 128
    """Image width and height (px)"""
    diff_1: Optional[float] = None
    """Diffusion coefficient of population 1"""
    diff_2: float = 0.
    """Diffusion coefficient of population 2"""
    population_ratio: float = 1.
    """Probability of an emitter to belong to population 1"""
    n_frames: int = 1000
    """Number of frames to simulate"""
    offset: float = 100.
    """Camera intensity offset (counts)"""
    qy: float = 0.9
    """Camera quantum yield"""
    ccd_sensitivity: float = 12.
    """Camera sensitivity (electrons per count)"""
    readout_noise: float = 5.
    """Camera readout noise (electrons)"""
    gauss_stamp_size: int = 5
    """Half size of the box the PSF is computed in (px)"""
    limit_resolution: float = 0.25
    """Width of the PSF"""
    background: float = 10.
    """Mean background (counts)"""
    gain_noise: float = 0.1
    """Relative standard deviation of the camera amplification"""

    yaml_tag = "!SimulationParameters"

    @classmethod
    def to_yaml(cls, dumper, data):
        return dumper.represent_mapping(cls.yaml_tag, data._asdict())

    @classmethod
    def from_yaml(cls, loader, node):
        return cls.from_dict(loader.construct_mapping(node, deep=True))

    @classmethod
    def from_dict(cls, d: Mapping) -> "SimulationParameters":
        """Create instance from a mapping

        Parameters
        ----------
        d
            Maps parameter names to values. Missing parameters are set to
            their defaults.

        Returns
        -------
        New instance

        Raises
        ------
        ConfigurationError
            `d` contains unknown parameter names.
        """
        unknown = set(d) - set(cls._fields)
        if unknown:
            raise ConfigurationError(
                "Unknown simulation parameter(s): " +
                ", ".join(sorted(unknown)), sorted(unknown)[0])
        return cls(**d)

    @classmethod
    def from_ui(cls, settings: Union["SimulationParameters", Mapping, None],
                diff_1, diff_2=None, fraction=None, n_frames=None
                ) -> "SimulationParameters":
        """Combine settings with user input

        Parameters
        ----------
        settings
            Base parameters. May be a :py:class:`SimulationParameters`
            instance, a mapping or `None` (use defaults).
        diff_1
            Diffusion coefficient of population 1. Required.
        diff_2
            Diffusion coefficient of population 2. If it cannot be converted
            to a number (e.g., empty string or `None`), only a single
            population is simulated.
        fraction
            Percentage of population 1. Ignored if `diff_2` is not a number.
        n_frames
            Number of frames. If `None`, keep the value from `settings`.

        Returns
        -------
        Validated parameters

        Raises
        ------
        ConfigurationError
            `diff_1` is not a number, or any other parameter is invalid.
        """
        if settings is None:
            settings = cls()
        elif not isinstance(settings, cls):
            settings = cls.from_dict(settings)

        d1 = _parse_number(diff_1)
        if math.isnan(d1):
            raise ConfigurationError(
                "You need to indicate a non-zero value for the coefficient "
                "of diffusion #1", "diff_1")
        d2 = _parse_number(diff_2)
        if math.isnan(d2):
            d2 = 0.
            ratio = 1.
        else:
            ratio = _parse_number(fraction) / 100
            if math.isnan(ratio):
                raise ConfigurationError(
                    "You need to indicate the percentage of population #1 "
                    "if a second coefficient of diffusion is given",
                    "population_ratio")
        repl = dict(diff_1=d1, diff_2=d2, population_ratio=ratio)
        if n_frames is not None:
            nf = _parse_number(n_frames)
            if not math.isfinite(nf) or nf != int(nf):
                raise ConfigurationError(
                    f"Number of frames has to be an integer, got {n_frames}",
                    "n_frames")
            repl["n_frames"] = int(nf)
        return settings._replace(**repl).validate()

    def validate(self) -> "SimulationParameters":
        """Check parameter values

        Returns
        -------
        `self`, to allow for chaining

        Raises
        ------
        ConfigurationError
            Some parameter value is invalid.
        """
        if self.diff_1 is None or not math.isfinite(self.diff_1) or \
                self.diff_1 <= 0:
            raise ConfigurationError(
                "You need to indicate a non-zero value for the coefficient "
                "of diffusion #1", "diff_1")
        for name in _positive + _non_negative:
            v = getattr(self, name)
            if not math.isfinite(v):
                raise ConfigurationError(f"`{name}` has to be finite", name)
        for name in _positive:
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"`{name}` has to be positive", name)
        for name in _non_negative:
            if getattr(self, name) < 0:
                raise ConfigurationError(f"`{name}` must not be negative",
                                         name)
        for name in _counts:
            v = getattr(self, name)
            if not math.isfinite(v) or v < 0 or v != int(v):
                raise ConfigurationError(
                    f"`{name}` has to be a non-negative integer", name)
        if not 0 <= self.population_ratio <= 1:
            raise ConfigurationError(
                "`population_ratio` has to be between 0 and 1",
                "population_ratio")
        if self.qy > 1:
            raise ConfigurationError("`qy` must not be greater than 1", "qy")
        return self

    def in_frames(self, t: float) -> float:
        """Convert a time to number of frames"""
        return t / self.acquisition_time


def load_parameters(filename: Union[str, Path]) -> SimulationParameters:
    """Read simulation parameters from a YAML file

    The file may either contain a ``!SimulationParameters`` document or a
    plain mapping of parameter names to values.

    Parameters
    ----------
    filename
        Name of the YAML file

    Returns
    -------
    Parameters read from file. They are not validated, as `diff_1` is
    typically set later using :py:meth:`SimulationParameters.from_ui`.
    """
    with Path(filename).open() as f:
        data = yaml.safe_load(f)
    if data is None:
        return SimulationParameters()
    if isinstance(data, SimulationParameters):
        return data
    if isinstance(data, Mapping):
        return SimulationParameters.from_dict(data)
    raise ConfigurationError(f"{filename}: Not a valid parameter file")


def save_parameters(filename: Union[str, Path], params: SimulationParameters):
    """Write simulation parameters to a YAML file

    Parameters
    ----------
    filename
        Name of the YAML file
    params
        Parameters to save
    """
    with Path(filename).open("w") as f:
        yaml.safe_dump(params, f)
