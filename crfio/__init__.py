import os
import subprocess

import numpy as np
import imageio.v2 as imageio
import tifffile as tiff

from crftools import CameraResponseFunction, DimensionMismatchError, InvalidParameterError

__version__ = "0.1.0"


def imwrite(data, filename):
    """Writes an image in [0, 1] as an 8-bit file."""
    imageio.imwrite(filename, np.clip(255.*np.asarray(data), 0, 255).astype('uint8'))


def imread(filename, format_="float32"):
    """Reads an image. Supports cr2, nef, raw, tiff, jpg, png and everything
    imageio supports.

    :filename: file path.
    :format_: format in which to return the value. If set to "native", the
              native format of the file will be given (e.g. uint8 for jpg).
              Otherwise integer data is normalized to [0, 1].
    """
    _, ext = os.path.splitext(filename.lower())

    if ext in ['.cr2', '.nef', '.raw', '.dng']:
        im = _raw_read(filename)
    elif ext in ['.tiff', '.tif']:
        im = tiff.imread(filename)
    else:
        im = imageio.imread(filename)

    if format_ == "native":
        return im
    elif np.issubdtype(im.dtype, np.integer) and 'int' not in format_:
        return im.astype(format_) / np.iinfo(im.dtype).max
    else:
        return im.astype(format_)


def _raw_read(filename):
    """Calls the dcraw program to unmosaic the raw image into a linear 16-bit
    tiff, then reads it."""
    fn, _ = os.path.splitext(filename)
    target_file = "{}.tiff".format(fn)
    if not os.path.exists(target_file):
        ret = subprocess.call(['dcraw', '-v', '-T', '-4', '-t', '0', '-j', filename])
        if ret != 0:
            raise Exception('Could not execute dcraw. Make sure the executable'
                            ' is available.')
    return tiff.imread(target_file)


def read_stack(filenames, exposure_times):
    """Reads an exposure stack.

    :returns: (images, exposure_times) with images in [0, 1].
    """
    if len(filenames) != len(exposure_times):
        raise InvalidParameterError("Got {} exposure times for {} images.".format(
            len(exposure_times), len(filenames)))

    stack = [imread(fn) for fn in filenames]
    for fn, im in zip(filenames[1:], stack[1:]):
        if im.shape != stack[0].shape:
            raise DimensionMismatchError("{} has shape {}, expected {}.".format(
                fn, im.shape, stack[0].shape))

    return stack, [float(t) for t in exposure_times]


def save_crf(filename, crf):
    """Saves a CameraResponseFunction to a .npz file."""
    np.savez(filename, icrf=crf.icrf, weight_type=crf.weight_type)


def load_crf(filename):
    with np.load(filename) as data:
        return CameraResponseFunction(data['icrf'], weight_type=str(data['weight_type']))


__all__ = ['imwrite', 'imread', 'read_stack', 'save_crf', 'load_crf']
