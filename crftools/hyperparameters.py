## Sampling
sampling = 'grossberg'     # 'grossberg' or 'spatial'
n_samples = 256            # used when a non-positive count is requested

## Weighting
weight_type = 'deb97'

## Solver
solver = 'svd'
smoothness = 20.           # lambda
gauge_code = 128
enforce_monotonic = True

## RAW/JPEG
filtering_size = 11        # moving average width, 0 disables

## Analytic response
gamma = 2.2
