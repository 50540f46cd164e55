"""
Subsampling of an exposure stack into a small set of device codes.

The output of every strategy is a `uint8` array of shape
(channels, nSamples, nExposures): for each channel, the code observed for
sample i in exposure j.
"""
import numpy as np
from scipy.stats import qmc

from . import hyperparameters
from .exceptions import (InsufficientDataError, DimensionMismatchError,
                         InvalidParameterError)


SUPPORTED_SAMPLINGS = [
    'grossberg',
    'spatial',
]


def quantize(values):
    """Converts normalized values to 8-bit device codes."""
    return np.clip(np.floor(np.asarray(values)*255. + 0.5), 0, 255).astype('uint8')


def as_stack(stack):
    """Returns the stack as a list of (H, W, C) arrays after checking that it
    is non-empty and that all the images share the same shape."""
    if stack is None or len(stack) < 1:
        raise InsufficientDataError("The exposure stack is empty.")

    images = [np.atleast_3d(np.asarray(im)) for im in stack]
    for i, im in enumerate(images[1:], start=1):
        if im.shape != images[0].shape:
            raise DimensionMismatchError(
                "Image {} has shape {}, expected {}.".format(i, im.shape, images[0].shape))
    return images


def cumulative_histogram(image, channel, nBins=256):
    """Normalized cumulative histogram of the device codes of one channel.
    The last bin is always 1."""
    data = np.atleast_3d(image)[:, :, channel]
    codes = quantize(data).ravel().astype('int64')
    if nBins != 256:
        codes = codes * nBins // 256
    hist = np.bincount(codes, minlength=nBins).astype('float64')
    return np.cumsum(hist) / hist.sum()


def subsample_grossberg(stack, nSamples=256):
    """Creates a low resolution version of the stack using Grossberg and
    Nayar sampling.

    Samples are picked by rank in the cumulative histogram rather than by
    position, so the exposures do not need to be registered.

    :param stack: sequence of images at different exposures.
    :param nSamples: number of samples per channel.
    :returns: uint8 array (channels, nSamples, nExposures).
    """
    images = as_stack(stack)
    if nSamples < 1:
        nSamples = hyperparameters.n_samples

    channels = images[0].shape[2]
    u = np.arange(nSamples, dtype='float64') / nSamples

    samples = np.empty((channels, nSamples, len(images)), dtype='uint8')
    for k in range(channels):
        for j, im in enumerate(images):
            cdf = cumulative_histogram(im, k)
            # first bin whose cumulative value is strictly greater than u
            offset = np.searchsorted(cdf[:255], u, side='right')
            samples[k, :, j] = np.clip(offset, 0, 255)

    return samples


def poisson_disk_points(width, height, nSamples, seed=None):
    """Blue-noise pixel locations (x, y) over a width x height domain.

    The points are drawn in pixel units, so the minimum spacing is the same
    along both axes. The radius is chosen so that roughly `nSamples` points
    fit in the domain; points falling on the same pixel are merged, hence
    fewer points may be returned."""
    radius = 0.5 * np.sqrt(width * height / nSamples)
    engine = qmc.PoissonDisk(d=2, radius=radius, seed=seed,
                             l_bounds=[0, 0], u_bounds=[width, height])
    pts = engine.random(nSamples)

    x = np.clip(pts[:, 0].astype('int64'), 0, width - 1)
    y = np.clip(pts[:, 1].astype('int64'), 0, height - 1)

    _, idx = np.unique(y * width + x, return_index=True)
    idx.sort()
    return x[idx], y[idx]


def subsample_spatial(stack, nSamples=256, seed=None, verbose=False):
    """Creates a low resolution version of a registered stack by reading the
    same pixel locations in every exposure.

    :returns: (samples, nSamples) where nSamples is the number of locations
              actually generated.
    """
    images = as_stack(stack)
    if nSamples < 1:
        nSamples = hyperparameters.n_samples

    height, width, channels = images[0].shape
    x, y = poisson_disk_points(width, height, nSamples, seed=seed)

    if verbose:
        print("Spatial subsampling: {} samples (requested {})".format(len(x), nSamples))

    # (nExposures, nSamples, channels) -> (channels, nSamples, nExposures)
    values = np.stack([im[y, x, :] for im in images])
    samples = quantize(values).transpose(2, 1, 0)

    return np.ascontiguousarray(samples), len(x)


def subsample(stack, nSamples=256, method='grossberg', seed=None, verbose=False):
    """Dispatches to the requested subsampling strategy.

    :returns: (samples, nSamples)
    """
    if method == 'grossberg':
        samples = subsample_grossberg(stack, nSamples)
        return samples, samples.shape[1]
    elif method == 'spatial':
        return subsample_spatial(stack, nSamples, seed=seed, verbose=verbose)
    raise InvalidParameterError("Unknown sampling method: {}".format(method))
