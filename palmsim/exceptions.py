# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Collection of exception classes"""


class ConfigurationError(ValueError):
    """Simulation parameters are missing or invalid

    Raised before any computation takes place. The message is meant to be
    shown to the user as is.

    Attributes
    ----------
    parameter
        Name of the offending parameter, if known
    """
    def __init__(self, text, parameter=None):
        """Parameters
        ----------
        text : str
            What to display when converting the exception to a str
        parameter : str or None, optional
            Set the :py:attr:`parameter` attribute.
        """
        super().__init__(text)
        self.parameter = parameter


class DistributionDomainError(ValueError):
    """A random distribution was asked for a sample outside of its domain

    Attributes
    ----------
    distribution
        Name of the distribution
    """
    def __init__(self, distribution, text):
        """Parameters
        ----------
        distribution : str
            Set the :py:attr:`distribution` attribute.
        text : str
            Description of the domain violation
        """
        super().__init__(f"{distribution}: {text}")
        self.distribution = distribution
