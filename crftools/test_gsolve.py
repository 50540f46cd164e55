import numpy as np
import pytest

from . import gsolve, weights, UnsupportedBackendError
from .gsolve import build_system, get_solver, SVDSolver, LSQRSolver
from .sampling import subsample_grossberg


def _linear_samples():
    """Samples of a camera whose log inverse response is g(z) = (z - 128)/50."""
    B = np.array([0., 0.4, 0.8])
    codes = np.arange(20, 200, 5)
    Z = codes[:, np.newaxis] + np.array([0, 20, 40])[np.newaxis, :]
    lE = (codes - 128) / 50.
    return Z, B, lE


def test_build_system():
    Z, B, _ = _linear_samples()
    w = weights('deb97')
    A, b = build_system(Z, B, 10., w)
    nSamples, nExposures = Z.shape

    assert A.shape == (nSamples*nExposures + 1 + 254, 256 + nSamples)
    assert b.shape == (A.shape[0],)

    A = A.toarray()
    # Two coefficients per data row
    data = A[:nSamples*nExposures]
    assert np.all(np.count_nonzero(data, axis=1) == 2)
    assert data[0, Z[0, 0]] == w[Z[0, 0]]
    assert data[0, 256] == -w[Z[0, 0]]
    assert b[1] == w[Z[0, 1]]*B[1]

    # Gauge row
    gauge = A[nSamples*nExposures]
    assert gauge[128] == 1. and np.count_nonzero(gauge) == 1
    assert b[nSamples*nExposures] == 0.

    # Smoothness rows
    smooth = A[nSamples*nExposures + 1:]
    assert np.allclose(smooth[0, :3], 10.*w[1]*np.array([1, -2, 1]))
    assert np.allclose(smooth[-1, 253:256], 10.*w[254]*np.array([1, -2, 1]))
    assert np.all(b[nSamples*nExposures + 1:] == 0)


def test_gsolve_linear_camera():
    Z, B, lE_true = _linear_samples()
    for type_ in ('uniform', 'deb97', 'hat'):
        g, lE = gsolve(Z, B, 20., weights(type_))
        assert g.shape == (256,)
        assert lE.shape == (Z.shape[0],)
        assert np.allclose(g, (np.arange(256) - 128) / 50., atol=1e-6)
        assert np.allclose(lE, lE_true, atol=1e-6)


def test_injected_solver():
    class CountingSolver:
        calls = 0

        def solve(self, A, b):
            CountingSolver.calls += 1
            return np.linalg.lstsq(A.toarray(), b, rcond=None)[0]

    Z, B, _ = _linear_samples()
    g, _ = gsolve(Z, B, 20., weights('uniform'), solver=CountingSolver())
    assert CountingSolver.calls == 1
    assert np.isclose(g[128], 0., atol=1e-6)


def test_lsqr_solver():
    Z, B, _ = _linear_samples()
    g, lE = gsolve(Z, B, 20., weights('uniform'), solver='lsqr')
    assert g.shape == (256,) and lE.shape == (Z.shape[0],)
    assert np.all(np.isfinite(g))


def test_lsqr_matches_svd():
    rng = np.random.default_rng(0)
    E = rng.uniform(0.01, 1., (64, 64, 1))
    exposures = [1., 2., 4.]
    stack = [(E*t/4.)**(1/2.2) for t in exposures]
    Z = subsample_grossberg(stack, 256)[0]
    B = np.log(exposures)
    w = weights('deb97')

    g_svd, _ = gsolve(Z, B, 20., w, solver='svd')
    g_lsqr, _ = gsolve(Z, B, 20., w, solver='lsqr')
    assert np.allclose(g_lsqr[30:221], g_svd[30:221], atol=1e-4)


def test_get_solver():
    assert isinstance(get_solver('svd'), SVDSolver)
    assert isinstance(get_solver('lsqr'), LSQRSolver)
    solver = SVDSolver()
    assert get_solver(solver) is solver


def test_unsupported_backend():
    Z, B, _ = _linear_samples()
    w = weights('uniform')
    with pytest.raises(UnsupportedBackendError):
        gsolve(Z, B, 20., w, solver=None)
    with pytest.raises(UnsupportedBackendError):
        gsolve(Z, B, 20., w, solver='eigen')
    with pytest.raises(UnsupportedBackendError):
        gsolve(Z, B, 20., w, solver=object())

    class Missing:
        def solve(self, A, b):
            return None

    with pytest.raises(UnsupportedBackendError):
        gsolve(Z, B, 20., w, solver=Missing())
