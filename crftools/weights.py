import numpy as np

from .exceptions import InvalidParameterError


SUPPORTED_WEIGHTS = [
    'uniform',
    'hat',
    'gaussian',
    'robertson',
    'deb97',
    'deb97p01',
]


def _uniform(x):
    return np.ones_like(x)


def _hat(x):
    val = (2.*x - 1.)**2
    return 1. - val**4


def _gaussian(x, sigma=0.5, mu=0.5):
    return np.exp(-4.*(x - mu)**2 / (2.*sigma**2))


def _robertson(x, sigma=0.5, mu=0.5):
    """Gaussian shifted and rescaled so that both tails reach exactly 0."""
    shift = np.exp(-4.*mu**2 / (2.*sigma**2))
    y = (_gaussian(x, sigma, mu) - shift) / (1. - shift)
    return np.clip(y, 0., 1.)


def _triangular(x, z_min, z_max):
    """This is a direct implementation of eq. 4 of Debevec and Malik 1997,
    for values in [0, 1]."""
    tr = 0.5*(z_min + z_max)
    w = np.where(x <= tr, x - z_min, z_max - x)
    # Below z_min (or above z_max) the padded variant goes negative. Only the
    # magnitude matters in the least-squares rows.
    return np.abs(w)


_WEIGHT_FUNCTIONS = {
    'uniform': _uniform,
    'hat': _hat,
    'gaussian': _gaussian,
    'robertson': _robertson,
    'deb97': lambda x: _triangular(x, 0., 1.),
    'deb97p01': lambda x: _triangular(x, 0.01, 0.99),
}

assert sorted(_WEIGHT_FUNCTIONS) == sorted(SUPPORTED_WEIGHTS), (
    "Every supported weight needs a weight function")


def weight_function(x, type_):
    """Computes the weight of normalized pixel values.

    :param x: value(s) in [0, 1].
    :param type_: one of `SUPPORTED_WEIGHTS`.
    :returns: the weight(s), same shape as `x`.
    """
    if type_ not in _WEIGHT_FUNCTIONS:
        raise InvalidParameterError("Unknown weight type: {}".format(type_))
    return _WEIGHT_FUNCTIONS[type_](np.asarray(x, dtype='float64'))


def weights(type_='deb97', n=256):
    """Outputs the weight of every device code 0..n-1."""
    z = np.arange(n, dtype='float64') / (n - 1)
    return weight_function(z, type_)
