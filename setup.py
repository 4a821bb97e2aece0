"""
Setup script for kmeans-image-compressor package
"""

# Always prefer setuptools over distutils
from setuptools import setup, find_packages
# To use a consistent encoding
from codecs import open
from os import path

here = path.abspath(path.dirname(__file__))

# Get the long description from the relevant file
with open(path.join(here, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()
    long_description_content_type = 'text/markdown'

# Get the code version
version = {}
with open(path.join(here, "image_compressor/version.py")) as fp:
    exec(fp.read(), version)
__version__ = version['__version__']
# now we have a `__version__` variable

setup(
    name='kmeans-image-compressor',
    version=__version__,
    description='Lossy image compression by K-means palette reduction',
    long_description=long_description,
    long_description_content_type=long_description_content_type,
    license='MIT',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Topic :: Multimedia :: Graphics',
        'Topic :: Scientific/Engineering :: Information Analysis',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
    keywords='kmeans clustering color-quantization image-compression',
    packages=find_packages(include=['kmeans*', 'image_compressor*']),
    python_requires='>=3.8',
    install_requires=[
        'numpy>=1.17',
        'Pillow>=8.0',
    ],
    extras_require={
        'test': [
            'pytest',
            'scikit-learn>=1.1',  # reference Lloyd's implementation for cross-checks
        ],
    },
    entry_points={
        'console_scripts': [
            'kmeans-compress=image_compressor.cli:main',
        ],
    },
)
