__version__ = "0.1.0"

from .exceptions import (CRFError, InsufficientDataError, DimensionMismatchError,
                         UnsupportedBackendError, ChannelCountMismatchError,
                         InvalidParameterError)
from .weights import SUPPORTED_WEIGHTS, weight_function, weights
from .sampling import (SUPPORTED_SAMPLINGS, subsample, subsample_grossberg,
                       subsample_spatial)
from .gsolve import SVDSolver, LSQRSolver, gsolve
from .linearization import (SUPPORTED_LINEARIZATIONS, remove_crf, apply_crf,
                            linearize, apply_response)
from .crf import CameraResponseFunction, estimate, estimate_from_raw_jpeg
