import argparse

import numpy as np

from crftools import CameraResponseFunction, SUPPORTED_WEIGHTS, SUPPORTED_SAMPLINGS
from crftools import hyperparameters
from crftools.gsolve import SOLVERS
from crfio import imread, read_stack, save_crf


parser = argparse.ArgumentParser(description='Estimate the response of a camera.')
parser.add_argument('--images', nargs='+', help='exposure stack of a static scene')
parser.add_argument('--exposures', nargs='+', type=float, help='exposure time of each image (s)')
parser.add_argument('--raw', help='RAW image (alternative to --images)')
parser.add_argument('--jpeg', help='JPEG image matching --raw')
parser.add_argument('--weight', default=hyperparameters.weight_type, choices=SUPPORTED_WEIGHTS)
parser.add_argument('--samples', type=int, default=hyperparameters.n_samples)
parser.add_argument('--smoothness', type=float, default=hyperparameters.smoothness, help='lambda')
parser.add_argument('--sampling', default=hyperparameters.sampling, choices=SUPPORTED_SAMPLINGS)
parser.add_argument('--solver', default=hyperparameters.solver, choices=list(SOLVERS))
parser.add_argument('--filter-size', type=int, default=hyperparameters.filtering_size,
                    help='moving average width for --raw/--jpeg, 0 disables')
parser.add_argument('--output', default='crf.npz')
parser.add_argument('--verbose', action='store_true')


def main(args):
    if args.raw or args.jpeg:
        if not (args.raw and args.jpeg):
            parser.error('--raw and --jpeg go together')
        crf = CameraResponseFunction.fromRawJpeg(imread(args.raw), imread(args.jpeg),
                                                 filteringSize=args.filter_size)
    else:
        if not args.images or not args.exposures:
            parser.error('--images and --exposures are required')
        stack, exposures = read_stack(args.images, args.exposures)
        crf = CameraResponseFunction.debevecMalik(stack, exposures,
                                                  weight_type=args.weight,
                                                  nSamples=args.samples,
                                                  lambda_=args.smoothness,
                                                  sampling=args.sampling,
                                                  solver=args.solver,
                                                  verbose=args.verbose)

    print(crf)
    for k, curve in enumerate(crf.icrf):
        print('channel {}: icrf[0]={:.4f} icrf[128]={:.4f} icrf[255]={:.4f}'.format(
            k, curve[0], curve[128], curve[255]))
    if not np.all(crf.isMonotonic()):
        print('Warning: the response is not monotonic, inverse lookups will be approximate.')

    save_crf(args.output, crf)
    print('file_name:', args.output)


if __name__ == '__main__':
    main(parser.parse_args())
