import numpy as np
import pytest

from . import CameraResponseFunction, DimensionMismatchError
from .rawjpeg import joint_histogram, median_curve, fill_missing, raw_jpeg_icrf


def _pair(c=3):
    """Every JPEG code j is observed with a single RAW code i = j // 2."""
    jpg_codes = np.tile(np.arange(256), (4, 1))
    raw_codes = jpg_codes // 2
    jpg = np.repeat((jpg_codes / 255.)[:, :, np.newaxis], c, axis=2)
    raw = np.repeat((raw_codes / 255.)[:, :, np.newaxis], c, axis=2)
    return raw, jpg, raw_codes[0]


def test_joint_histogram():
    raw, jpg, raw_codes = _pair()
    hist = joint_histogram(raw, jpg)
    assert hist.shape == (3, 256, 256)
    assert hist.sum() == raw.size
    assert hist[1, raw_codes[10], 10] == 4


def test_single_code_per_column():
    raw, jpg, raw_codes = _pair()
    icrf = raw_jpeg_icrf(raw, jpg, filteringSize=0)
    for k in range(3):
        for j in range(256):
            assert icrf[k, j] == raw_codes[j] / 255.


def test_median():
    hist = np.zeros((1, 256, 256))
    hist[0, [10, 20, 30], 5] = [100, 1, 1]
    hist[0, [10, 20], 6] = 1
    ret = median_curve(hist)
    # Median of the distinct RAW codes, regardless of their counts
    assert ret[0, 5] == 20 / 255.
    assert ret[0, 6] == 20 / 255.
    assert np.isnan(ret[0, 7])


def test_missing_columns():
    curve = np.full(256, np.nan)
    curve[0] = 0.
    curve[255] = 1.
    filled = fill_missing(curve)
    assert np.allclose(filled, np.linspace(0, 1, 256))
    assert np.all(np.isnan(fill_missing(np.full(256, np.nan))))


def test_smoothing():
    raw, jpg, _ = _pair(1)
    rough = raw_jpeg_icrf(raw, jpg, filteringSize=0)[0]
    smooth = raw_jpeg_icrf(raw, jpg, filteringSize=11)[0]
    assert smooth.shape == (256,)
    # A moving average leaves a linear ramp unchanged away from the borders
    assert np.allclose(smooth[20:-20], rough[20:-20], atol=1/255.)
    assert np.abs(np.diff(smooth)).max() <= np.abs(np.diff(rough)).max()


def test_from_raw_jpeg():
    raw, jpg, _ = _pair()
    crf = CameraResponseFunction.fromRawJpeg(raw, jpg, filteringSize=0)
    assert crf.channels == 3
    assert np.all(crf.isMonotonic())


def test_mismatch():
    with pytest.raises(DimensionMismatchError):
        joint_histogram(np.zeros((4, 4, 3)), np.zeros((4, 4, 1)))
