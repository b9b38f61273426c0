# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Simulation of fluorescence microscopy images"""
import numpy as np

from .. import config
from ..sampling import Sampler


def simulate_gauss(shape, centers, amplitudes, sigmas, cutoff=5.):
    """Simulate an image from multiple Gaussian PSFs

    Given a list of coordinates, amplitudes and sigmas, simulate a fluorescent
    image. This is a frontend to the lower level function
    :py:func:`gauss_psf`.

    Parameters
    ----------
    shape : tuple of int, len=2
        Shape of the output image. First entry is the width, second is the
        height.
    centers : numpy.ndarray, shape=(n, 2)
        Coordinates of the PSF centers
    amplitudes : array_like
        Amplitudes of the PSFs. Either a scalar that is used for all Gaussians
        or an 1D array specifying the amplitude for each Gaussian.
    sigmas : array_like
        If it is one number, this will be used as sigma for all Gaussians. An
        array of two numbers will be interpreted as sigmas in x and y
        directions for all Gaussians. A one-dimensional array of length n
        can be used to specify sigma for each Gaussian, and a 2D array of shape
        (n, 2) gives sigmas in x and y directions for each Gaussian.
    cutoff : float, optional
        Each Gaussian is only calculated in a box `cutoff` times sigma pixels
        around the center. Defaults to 5.

    Returns
    -------
    numpy.ndarray
        Simulated image.
    """
    centers = np.asarray(centers, dtype=float).reshape((-1, 2))
    amplitudes = np.broadcast_to(amplitudes, len(centers))

    sigmas = np.asarray(sigmas, dtype=float)
    if sigmas.ndim == 1 and sigmas.size != 2:
        sigmas = np.broadcast_to(sigmas[:, np.newaxis], centers.shape)
    else:
        sigmas = np.broadcast_to(sigmas, centers.shape)

    return gauss_psf(shape, centers, amplitudes, sigmas, cutoff)


def gauss_psf(shape, centers, amplitudes, sigmas, cutoff):
    """Simulate an image from multiple Gaussian PSFs

    For each emitter, the Gaussian is calculated only in a box of
    ``2 * round(cutoff * sigma) + 1`` pixels width around the rounded center
    coordinates.

    Parameters
    ----------
    shape : tuple of int, len=2
        Shape of the output image. First entry is the width, second is the
        height.
    centers : numpy.ndarray, shape=(n, 2)
        Coordinates of the PSF centers
    amplitudes : list of float, len=n
        Amplitudes of the Gaussians
    sigmas : numpy.ndarray, shape(n, 2)
        x and y sigmas of the Gaussians
    cutoff : float
        Each Gaussian is only calculated in a box `cutoff` times sigma pixels
        around the center.

    Returns
    -------
    numpy.ndarray
        Simulated image.
    """
    x_size, y_size = shape
    roi_sizes = np.round(cutoff*sigmas).astype(int)

    result = np.zeros(shape[::-1])
    for (xc, yc), ampl, (sx, sy), (rx, ry) in zip(centers, amplitudes, sigmas,
                                                  roi_sizes):
        xc_int = int(round(xc))
        yc_int = int(round(yc))
        x_roi = np.arange(max(xc_int - rx, 0),
                          min(xc_int + rx + 1, x_size))
        x_roi = np.reshape(x_roi, (1, -1))
        y_roi = np.arange(max(yc_int - ry, 0),
                          min(yc_int + ry + 1, y_size))
        y_roi = np.reshape(y_roi, (-1, 1))
        arg = -((x_roi - xc)**2/(2*sx**2) + (y_roi - yc)**2/(2*sy**2))
        result[y_roi, x_roi] += ampl*np.exp(arg)

    return result


def psf_sigma(params):
    """Standard deviation of the Gaussian PSF in pixels

    The PSF is :math:`A \\exp(-r^2 / s^2)` with
    :math:`s = \\text{limit\\_resolution} / \\text{pixel\\_size}`,
    i.e., :math:`\\sigma = s / \\sqrt{2}`.
    """
    return params.limit_resolution / params.pixel_size / np.sqrt(2)


def simulate_frame(centers, params, sampler=None):
    """Simulate a camera image of emitters

    The image is made up of

    - the camera offset plus Poissonian background,
    - for each emitter strictly inside of the image, a Gaussian PSF (see
      :py:func:`psf_sigma`) with amplitude ``mean_photons * qy /
      ccd_sensitivity`` in a box of ``2 * gauss_stamp_size + 1`` pixels,
      subject to shot noise (Poissonian) and amplification noise
      (multiplicative, normally distributed with mean 1 and standard
      deviation `gain_noise`),
    - and Gaussian readout noise.

    Parameters
    ----------
    centers : array-like, shape(n, 2)
        Emitter coordinates in pixels
    params : palmsim.params.SimulationParameters
        Simulation parameters
    sampler : palmsim.sampling.Sampler or None, optional
        Source of random numbers. If `None`, create a new one.

    Returns
    -------
    numpy.ndarray, dtype(uint16)
        Simulated image
    """
    if sampler is None:
        sampler = Sampler()

    shape = (params.image_size, params.image_size)
    centers = np.asarray(centers, dtype=float).reshape((-1, 2))
    inside = np.all((centers > 0) & (centers < params.image_size), axis=1)
    centers = centers[inside]

    sigma = psf_sigma(params)
    psf = simulate_gauss(shape, centers,
                         params.mean_photons * params.qy /
                         params.ccd_sensitivity,
                         sigma, cutoff=params.gauss_stamp_size / sigma)
    signal = (sampler.poisson(psf) *
              sampler.normal(1, params.gain_noise, psf.shape))

    img = (params.offset + sampler.poisson(params.background, psf.shape) +
           signal)
    if params.readout_noise > 0:
        img += sampler.normal(
            0, params.readout_noise / params.ccd_sensitivity, psf.shape)
    return np.clip(np.round(img), 0, np.iinfo(np.uint16).max).astype(
        np.uint16)


@config.set_columns
def simulate_movie(detections, params, sampler=None, n_frames=None,
                   columns={}):
    """Simulate camera images from detections

    Parameters
    ----------
    detections : pandas.DataFrame
        Emitter coordinates (µm) and frame numbers
    params : palmsim.params.SimulationParameters
        Simulation parameters
    sampler : palmsim.sampling.Sampler or None, optional
        Source of random numbers. If `None`, create a new one.
    n_frames : int or None, optional
        Number of frames to simulate. If `None`, use ``params.n_frames``.

    Yields
    ------
    numpy.ndarray, dtype(uint16)
        One simulated image per frame. Detections in frames not less than
        `n_frames` are ignored.

    Other parameters
    ----------------
    columns : dict, optional
        Override default column names as defined in :py:attr:`config.columns`.
        Relevant names are `coords` and `time`.
    """
    if sampler is None:
        sampler = Sampler()
    if n_frames is None:
        n_frames = params.n_frames

    frames = detections[columns["time"]].to_numpy()
    coords = detections[columns["coords"]].to_numpy() / params.pixel_size
    order = np.argsort(frames, kind="stable")
    frames = frames[order]
    coords = coords[order]

    bounds = np.searchsorted(frames, np.arange(n_frames + 1))
    for f in range(n_frames):
        yield simulate_frame(coords[bounds[f]:bounds[f+1]], params, sampler)
