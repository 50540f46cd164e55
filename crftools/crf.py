import numpy as np
from scipy.optimize import isotonic_regression
from tqdm import tqdm

from . import hyperparameters
from .exceptions import InsufficientDataError, InvalidParameterError
from .gsolve import get_solver, gsolve
from .linearization import linearize, apply_response
from .rawjpeg import raw_jpeg_icrf
from .sampling import as_stack, subsample
from .weights import weights


class CameraResponseFunction:
    def __init__(self, icrf, weight_type='uniform'):
        """
        Creates a CameraResponseFunction from inverse response curves.

        :param icrf: one 256-entry inverse response (code -> relative
                     irradiance) per channel, as an array (channels, 256) or a
                     list of curves. The curves are copied and made read-only.
        :param weight_type: weighting used during the estimation (informative).
        """
        icrf = np.array(icrf, dtype='float64')
        if icrf.ndim == 1:
            icrf = icrf[np.newaxis, :]
        assert icrf.ndim == 2 and icrf.shape[1] == 256, (
            "Expected one 256-entry curve per channel, got {}".format(icrf.shape))

        icrf.setflags(write=False)
        self.icrf = icrf
        self.weight_type = weight_type

    @classmethod
    def debevecMalik(cls, stack, exposure_times, weight_type=None, nSamples=None,
                     lambda_=None, sampling=None, solver=None, monotonic=None,
                     seed=None, verbose=False):
        """Computes the response of a camera from a stack of exposures
        following Debevec and Malik 1997.

        :param stack: images of the same static scene, values in [0, 1].
        :param exposure_times: exposure time of each image, in seconds.
        :param weight_type: see `crftools.weights.SUPPORTED_WEIGHTS`.
        :param nSamples: number of samples per channel. Values below 1 are
                         replaced by the default.
        :param lambda_: smoothness strength.
        :param sampling: 'grossberg' or 'spatial' (registered stacks only).
        :param solver: solver name or object with a `solve(A, b)` method.
        :param monotonic: project each curve onto non-decreasing curves.
        :param seed: seed of the spatial sampler.
        """
        weight_type = hyperparameters.weight_type if weight_type is None else weight_type
        nSamples = hyperparameters.n_samples if nSamples is None else nSamples
        lambda_ = hyperparameters.smoothness if lambda_ is None else lambda_
        sampling = hyperparameters.sampling if sampling is None else sampling
        solver = hyperparameters.solver if solver is None else solver
        monotonic = hyperparameters.enforce_monotonic if monotonic is None else monotonic

        images = as_stack(stack)
        if len(images) < 2:
            raise InsufficientDataError(
                "At least two exposures are needed, got {}.".format(len(images)))

        exposure_times = np.asarray(exposure_times, dtype='float64').ravel()
        if exposure_times.size != len(images):
            raise InvalidParameterError("Got {} exposure times for {} images.".format(
                exposure_times.size, len(images)))
        if np.any(exposure_times <= 0) or not np.all(np.isfinite(exposure_times)):
            raise InvalidParameterError("Exposure times must be positive.")

        if nSamples < 1:
            nSamples = hyperparameters.n_samples

        # Fail before doing any work if the backend or the weights are invalid
        solver = get_solver(solver)
        w = weights(weight_type)

        samples, nSamples = subsample(images, nSamples, sampling, seed=seed, verbose=verbose)
        log_exposure = np.log(exposure_times)

        if verbose:
            print("nSamples: {}, matrix size: ({}, {})".format(
                nSamples, nSamples*len(images) + 255, 256 + nSamples))

        icrf = []
        for k in tqdm(range(samples.shape[0]), desc="Solving", disable=not verbose):
            g, _ = gsolve(samples[k], log_exposure, lambda_, w, solver=solver)
            curve = np.exp(g)
            if monotonic:
                curve = isotonic_regression(curve).x
            max_val = curve.max()
            if max_val > 0:
                curve = curve / max_val
            icrf.append(curve)

        return cls(icrf, weight_type=weight_type)

    @classmethod
    def fromRawJpeg(cls, raw, jpg, filteringSize=None):
        """Computes the response by exploiting a RAW/JPEG couple of the same
        scene. See `crftools.rawjpeg.raw_jpeg_icrf`."""
        return cls(raw_jpeg_icrf(raw, jpg, filteringSize), weight_type='uniform')

    @property
    def channels(self):
        return self.icrf.shape[0]

    def isMonotonic(self):
        """Returns, for each channel, whether the curve is non-decreasing.
        The 'lut' inverse mapping is only exact for such curves."""
        return np.all(np.diff(self.icrf, axis=1) >= 0, axis=1)

    def linearize(self, img, type_='lut', strict=False):
        """Removes the response from `img` in place. Returns True on success."""
        return linearize(img, type_, self.icrf, strict=strict)

    def applyCRF(self, img, type_='lut', strict=False):
        """Applies the response to the linear image `img` in place."""
        return apply_response(img, type_, self.icrf, strict=strict)

    def __repr__(self):
        return "CameraResponseFunction(channels={}, weight_type={!r})".format(
            self.channels, self.weight_type)


def estimate(stack, exposure_times, weight_type=None, nSamples=None, lambda_=None, **kwargs):
    """Debevec and Malik estimation, see `CameraResponseFunction.debevecMalik`."""
    return CameraResponseFunction.debevecMalik(stack, exposure_times, weight_type,
                                               nSamples, lambda_, **kwargs)


def estimate_from_raw_jpeg(raw, jpg, filteringSize=None):
    return CameraResponseFunction.fromRawJpeg(raw, jpg, filteringSize)
