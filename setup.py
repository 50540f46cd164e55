from setuptools import setup


setup(
    name='crflibs',
    description=('Tools to estimate, store and apply the response function of a camera '
                 'from exposure stacks or RAW/JPEG pairs.'),
    version='0.1.0',
    packages=['crftools', 'crfio'],
    py_modules=['estimate_crf'],
    include_package_data=True,
    install_requires=['imageio>=2.9', 'tqdm', 'numpy', 'scipy>=1.13', 'tifffile'],
    extras_require={'test': ['pytest']},
)
