import numpy as np
import pytest

from . import weights, weight_function, SUPPORTED_WEIGHTS, InvalidParameterError


def test_hat():
    assert np.isclose(weight_function(0., 'hat'), 0.)
    assert np.isclose(weight_function(1., 'hat'), 0.)
    assert weight_function(0.5, 'hat') == 1.
    x = np.linspace(0, 1, 101)
    assert np.allclose(weight_function(x, 'hat'), weight_function(1 - x, 'hat'))


def test_tables():
    for type_ in SUPPORTED_WEIGHTS:
        w = weights(type_)
        assert w.shape == (256,)
        assert np.all(w >= 0) and np.all(w <= 1)
        # All the variants are symmetric around mid-code
        assert np.allclose(w, w[::-1])


def test_uniform():
    assert np.all(weights('uniform') == 1)


def test_gaussian_tails():
    w = weights('gaussian')
    assert np.isclose(w[0], np.exp(-2.))
    assert np.isclose(weight_function(0.5, 'gaussian'), 1.)
    r = weights('robertson')
    assert r[0] == 0. and r[-1] == 0.
    assert np.isclose(weight_function(0.5, 'robertson'), 1.)


def test_triangular():
    w = weights('deb97')
    assert w[0] == 0. and w[-1] == 0.
    assert np.isclose(w.max(), 127/255.)
    # The padded range keeps a small weight at the extremes
    p = weights('deb97p01')
    assert np.isclose(p[0], 0.01) and np.isclose(p[-1], 0.01)
    assert np.all(p[1:-1] <= w[1:-1] + 0.01)


def test_unknown():
    with pytest.raises(InvalidParameterError):
        weights('cosine')
