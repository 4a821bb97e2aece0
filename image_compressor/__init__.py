"""
Image Compressor
================

Lossy image compression by palette reduction: every pixel is replaced by
the nearest of ``k`` representative colors found with K-means.

Example:
--------
    >>> from image_compressor import compress_image
    >>> palette = compress_image('photo.png', 'photo_16.png', 16, 10, random_state=0)
"""

from .version import __version__
from .compressor import compress_image
from .errors import ImageError, ImageLoadFailure, ImageWriteFailure
from .image_io import load_image, save_image
from .pixels import from_vectors, to_vectors

__all__ = [
    'compress_image',
    'load_image',
    'save_image',
    'to_vectors',
    'from_vectors',
    'ImageError',
    'ImageLoadFailure',
    'ImageWriteFailure',
    '__version__',
]
