# Adapted from Debevec1997 "Recovering High Dynamic Range Radiance Maps
#                           from Photographs"
#
# gsolve.py - Solve for imaging system response function
#
# Given a set of pixel values observed for several pixels in several
# images with different exposure times, this function returns the
# imaging system's response function g as well as the log film irradiance
# values for the observed pixels.
#
# Assumes:
#
# Zmin = 0
# Zmax = 255
#
# Arguments:
#
# Z(i,j) is the pixel values of pixel location number i in image j
# B(j) is the log delta t, or log shutter speed, for image j
# l is lamdba, the constant that determines the amount of smoothness
# w(z) is the weighting function value for pixel value z
#
# Returns:
#
# g(z) is the log exposure corresponding to pixel value z
# lE(i) is the log film irradiance at pixel location i
#

import numpy as np
from scipy.sparse import coo_matrix
from scipy.sparse.linalg import lsqr as sparse_lsqr

from . import hyperparameters
from .exceptions import UnsupportedBackendError


class SVDSolver:
    """Dense least squares through a singular value decomposition."""
    name = 'svd'

    def solve(self, A, b):
        return np.linalg.lstsq(A.toarray(), b, rcond=None)[0]


class LSQRSolver:
    """Sparse iterative least squares. Slower to converge than `SVDSolver`
    near saturated codes, but never densifies the system.

    The smoothness rows make the system badly conditioned: scipy's default
    limit of 2 x columns iterations stops far from the solution. Without an
    explicit `iter_lim`, 40 x columns (at least 10000) iterations are allowed.
    """
    name = 'lsqr'

    def __init__(self, atol=1e-10, btol=1e-10, iter_lim=None):
        self.atol = atol
        self.btol = btol
        self.iter_lim = iter_lim

    def solve(self, A, b):
        iter_lim = self.iter_lim
        if iter_lim is None:
            iter_lim = max(10000, 40*A.shape[1])
        return sparse_lsqr(A.tocsr(), b, atol=self.atol, btol=self.btol,
                           iter_lim=iter_lim)[0]


SOLVERS = {
    'svd': SVDSolver,
    'lsqr': LSQRSolver,
}


def get_solver(solver):
    """Returns a solver instance from its name, or `solver` itself if it
    already provides a `solve(A, b)` method."""
    if solver is None:
        raise UnsupportedBackendError("No least-squares solver available.")
    if isinstance(solver, str):
        if solver not in SOLVERS:
            raise UnsupportedBackendError("Unknown solver: {}. Available: {}".format(
                solver, ", ".join(SOLVERS)))
        return SOLVERS[solver]()
    if not callable(getattr(solver, 'solve', None)):
        raise UnsupportedBackendError("{!r} has no solve(A, b) method.".format(solver))
    return solver


def build_system(Z, B, l, w, gauge=None):
    """Assembles the sparse system A x = b of Debevec and Malik.

    The unknowns are the 256 values of g followed by one log irradiance per
    sample.

    :returns: (A, b), A as a `scipy.sparse.csr_matrix`.
    """
    Z = np.asarray(Z, dtype='int64')
    B = np.asarray(B, dtype='float64')
    w = np.asarray(w, dtype='float64')
    gauge = hyperparameters.gauge_code if gauge is None else gauge

    n = 256
    nSamples, nExposures = Z.shape
    nData = nSamples*nExposures
    shape = (nData + 1 + (n - 2), n + nSamples)

    # Include the data-fitting equations
    k = np.arange(nData)
    z = Z.ravel()
    i = np.repeat(np.arange(nSamples), nExposures)
    wij = w[z]
    rows = [k, k]
    cols = [z, n + i]
    data = [wij, -wij]
    b = np.zeros(shape[0], dtype='float64')
    b[:nData] = wij * np.tile(B, nSamples)

    # Fix the curve by setting its middle value to 0
    rows.append([nData])
    cols.append([gauge])
    data.append([1.])

    # Include the smoothness equations
    c = np.arange(n - 2)
    k = nData + 1 + c
    wl = l*w[c + 1]
    rows.extend([k, k, k])
    cols.extend([c, c + 1, c + 2])
    data.extend([wl, -2*wl, wl])

    A = coo_matrix((np.concatenate(data), (np.concatenate(rows), np.concatenate(cols))),
                   shape=shape)
    return A.tocsr(), b


def gsolve(Z, B, l, w, solver='svd'):
    """Solves for the log inverse response g and the log irradiances lE.

    :param Z: (nSamples, nExposures) device codes of one channel.
    :param B: log exposure time of each exposure.
    :param l: smoothness strength (lambda).
    :param w: 256-entry weight table.
    :param solver: solver name or object with a `solve(A, b)` method.
    """
    solver = get_solver(solver)
    A, b = build_system(Z, B, l, w)

    x = solver.solve(A, b)
    if x is None:
        raise UnsupportedBackendError("Solver {!r} returned no solution.".format(solver))

    x = np.asarray(x, dtype='float64').ravel()
    g = x[:256]
    lE = x[256:]

    return g, lE
