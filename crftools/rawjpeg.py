"""
Inverse response from a single RAW/JPEG couple of the same scene.

The RAW image is assumed to be linear. For every JPEG code, the median of the
RAW codes observed at the same pixels gives the inverse response.
"""
import numpy as np
from scipy.ndimage import uniform_filter1d

from . import hyperparameters
from .exceptions import DimensionMismatchError
from .sampling import quantize


def joint_histogram(raw, jpg):
    """Counts the co-occurrences of (RAW code, JPEG code) for every channel.

    :returns: uint64 array of shape (channels, 256, 256) indexed by
              [channel, raw code, jpeg code].
    """
    raw = np.atleast_3d(np.asarray(raw))
    jpg = np.atleast_3d(np.asarray(jpg))
    if raw.shape != jpg.shape:
        raise DimensionMismatchError(
            "RAW image {} and JPEG image {} differ.".format(raw.shape, jpg.shape))

    channels = raw.shape[2]
    raw_codes = quantize(raw).reshape(-1, channels).astype('int64')
    jpg_codes = quantize(jpg).reshape(-1, channels).astype('int64')

    hist = np.empty((channels, 256, 256), dtype='uint64')
    for k in range(channels):
        addr = raw_codes[:, k]*256 + jpg_codes[:, k]
        hist[k] = np.bincount(addr, minlength=256*256).reshape(256, 256)
    return hist


def median_curve(hist):
    """For every JPEG code, the median of the distinct RAW codes observed
    with it, in [0, 1]. Codes never observed are NaN."""
    channels = hist.shape[0]
    ret = np.full((channels, 256), np.nan)
    for k in range(channels):
        for j in range(256):
            coords = np.flatnonzero(hist[k, :, j])
            if coords.size > 0:
                ret[k, j] = coords[coords.size >> 1] / 255.
    return ret


def fill_missing(curve):
    """Linearly interpolates the NaN entries of a 256-entry curve from the
    observed ones. A curve without any observation is returned as is."""
    valid = np.isfinite(curve)
    if valid.all() or not valid.any():
        return curve
    x = np.arange(curve.size)
    out = curve.copy()
    out[~valid] = np.interp(x[~valid], x[valid], curve[valid])
    return out


def raw_jpeg_icrf(raw, jpg, filteringSize=None, fill=True):
    """Computes the inverse response of each channel from a RAW/JPEG couple.

    :param raw: linear RAW image, values in [0, 1].
    :param jpg: JPEG image of the same scene, values in [0, 1].
    :param filteringSize: width of the moving average applied to each curve.
                          0 disables the smoothing.
    :param fill: interpolate the JPEG codes that were never observed.
    :returns: array (channels, 256).
    """
    if filteringSize is None:
        filteringSize = hyperparameters.filtering_size

    icrf = median_curve(joint_histogram(raw, jpg))

    for k in range(icrf.shape[0]):
        if fill:
            icrf[k] = fill_missing(icrf[k])
        if filteringSize > 0:
            icrf[k] = uniform_filter1d(icrf[k], filteringSize, mode='nearest')

    return icrf
