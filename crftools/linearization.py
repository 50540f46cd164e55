import warnings

import numpy as np

from . import hyperparameters
from .exceptions import ChannelCountMismatchError, InvalidParameterError


SUPPORTED_LINEARIZATIONS = [
    'identity',
    'gamma',
    'lut',
]


def _lut_remove(x, icrf):
    index = np.clip(np.floor(x*255. + 0.5), 0, 255).astype('int64')
    return np.asarray(icrf)[index]


def _lut_apply(x, icrf):
    # icrf is assumed sorted in ascending order
    offset = np.searchsorted(np.asarray(icrf)[:255], x, side='left')
    return np.clip(offset, 0, 255) / 255.


_REMOVE = {
    'identity': lambda x, icrf: x,
    'gamma': lambda x, icrf: np.power(x, hyperparameters.gamma),
    'lut': _lut_remove,
}

_APPLY = {
    'identity': lambda x, icrf: x,
    'gamma': lambda x, icrf: np.power(x, 1. / hyperparameters.gamma),
    'lut': _lut_apply,
}

assert sorted(_REMOVE) == sorted(_APPLY) == sorted(SUPPORTED_LINEARIZATIONS), (
    "Every linearization needs a forward and an inverse mapping")


def _check_type(type_):
    if type_ not in SUPPORTED_LINEARIZATIONS:
        raise InvalidParameterError("Unknown linearization: {}".format(type_))


def remove_crf(x, type_='lut', icrf=None):
    """Brings device values x in [0, 1] to the linear domain.

    :param icrf: 256-entry inverse response, required for 'lut'.
    """
    _check_type(type_)
    return _REMOVE[type_](np.asarray(x, dtype='float64'), icrf)


def apply_crf(x, type_='lut', icrf=None):
    """Brings linear values x back to the device domain, in [0, 1]."""
    _check_type(type_)
    return _APPLY[type_](np.asarray(x, dtype='float64'), icrf)


def _transform(img, type_, icrf, func, strict, what):
    _check_type(type_)

    if img is None or not isinstance(img, np.ndarray) or img.size == 0:
        warnings.warn("Image cannot be {}: no data.".format(what))
        return False
    if not np.issubdtype(img.dtype, np.floating):
        warnings.warn("Image cannot be {}: dtype {} is not floating point.".format(what, img.dtype))
        return False
    if img.ndim not in (2, 3):
        warnings.warn("Image cannot be {}: expected (H, W) or (H, W, C), got {}.".format(
            what, img.shape))
        return False
    if not img.flags.writeable:
        warnings.warn("Image cannot be {}: the array is read-only.".format(what))
        return False

    data = img if img.ndim == 3 else img[:, :, np.newaxis]
    channels = data.shape[2]

    if type_ == 'lut' and (icrf is None or len(icrf) != channels):
        msg = "Image cannot be {}: {} response channel(s) for {} image channel(s).".format(
            what, 0 if icrf is None else len(icrf), channels)
        if strict:
            raise ChannelCountMismatchError(msg)
        warnings.warn(msg)
        return False

    for j in range(channels):
        data[:, :, j] = func(data[:, :, j], type_, icrf[j] if type_ == 'lut' else None)

    return True


def linearize(img, type_='lut', icrf=None, strict=False):
    """Removes the response from a float image, in place.

    :param img: float array (H, W) or (H, W, C), values in [0, 1].
    :param type_: one of `SUPPORTED_LINEARIZATIONS`.
    :param icrf: one 256-entry inverse response per channel ('lut' only).
    :param strict: raise instead of skipping when the channel count of `icrf`
                   does not match the image.
    :returns: True if the image was modified.
    """
    return _transform(img, type_, icrf, remove_crf, strict, "linearized")


def apply_response(img, type_='lut', icrf=None, strict=False):
    """Applies the response to a linear float image, in place. See
    `linearize` for the parameters."""
    return _transform(img, type_, icrf, apply_crf, strict, "encoded")
