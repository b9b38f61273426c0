# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Support for loading and saving :py:mod:`palmsim` data types from/to YAML

:py:class:`SafeDumper` and :py:class:`SafeLoader` are subclasses of PyYAML's
safe dumper and loader with representers/constructors for numpy scalars and
for classes registered via :py:func:`register_yaml_class`, such as
:py:class:`palmsim.params.SimulationParameters`.

They can be used by passing them as the `Dumper`/`Loader` parameters
to :py:func:`yaml.dump`/:py:func:`yaml.load`, or via the
:py:func:`safe_dump` and :py:func:`safe_load` wrappers.
"""
import collections

import yaml
import numpy as np


class SafeDumper(yaml.SafeDumper):
    """A :py:class:`yaml.SafeDumper` with support for :py:mod:`palmsim` types
    """
    pass


class SafeLoader(yaml.SafeLoader):
    """A :py:class:`yaml.SafeLoader` with support for :py:mod:`palmsim` types
    """
    pass


# dict-like
def dict_representer(dumper, data):
    return dumper.represent_mapping(yaml.resolver.Resolver.DEFAULT_MAPPING_TAG,
                                    ((k, v) for k, v in data.items()))


# Load mappings as dicts, which preserve the order since Python >=3.7
def dict_constructor(loader, data):
    return dict(loader.construct_pairs(data))


# Use dict_representer on dicts since that preserves the order
SafeDumper.add_representer(dict, dict_representer)
SafeDumper.add_representer(collections.OrderedDict, dict_representer)

# Represent numpy scalars as standard types
for t in (np.float16, np.float32, np.float64):
    SafeDumper.add_representer(
        t, lambda dumper, data: dumper.represent_float(float(data)))
for t in (np.int8, np.int16, np.int32, np.int64, np.uint8, np.uint16,
          np.uint32, np.uint64):
    SafeDumper.add_representer(
        t, lambda dumper, data: dumper.represent_int(int(data)))
SafeDumper.add_representer(
    np.bool_, lambda dumper, data: dumper.represent_bool(bool(data)))

SafeLoader.add_constructor(yaml.resolver.Resolver.DEFAULT_MAPPING_TAG,
                           dict_constructor)


def safe_dump(data, stream=None, **kwds):
    """Wrap PyYAML's :py:func:`yaml.dump` using :py:class:`SafeDumper`"""
    return yaml.dump(data, stream, SafeDumper, **kwds)


def safe_load(stream):
    """Wrap PyYAML's :py:func:`yaml.load` using :py:class:`SafeLoader`"""
    return yaml.load(stream, SafeLoader)


def register_yaml_class(cls):
    """Add support for representing and loading a class

    A representer is added to :py:class:`SafeDumper` and a constructor
    to :py:class:`SafeLoader`.

    The class needs to have a `yaml_tag` attribute as well as `to_yaml` and
    `from_yaml` class methods, which are used for representing and
    constructing class instances (see PyYAML's
    :py:func:`yaml.Dumper.add_representer` and
    :py:func:`yaml.Loader.add_constructor` for details).

    Parameters
    ----------
    cls : type
        Class to add support for

    Returns
    -------
    type
        `cls`, so that this can be used as a class decorator

    Raises
    ------
    TypeError
        `cls` lacks `to_yaml` or `from_yaml`.
    """
    rep = getattr(cls, "to_yaml", None)
    cons = getattr(cls, "from_yaml", None)
    if not (callable(rep) and callable(cons)):
        raise TypeError(f"{cls.__name__} needs `to_yaml` and `from_yaml` "
                        "class methods.")
    SafeDumper.add_representer(cls, rep)
    SafeLoader.add_constructor(cls.yaml_tag, cons)
    return cls
