"""Image codec failures reported at the file boundary."""


class ImageError(OSError):
    """Base class for image read/write failures."""


class ImageLoadFailure(ImageError):
    """The input image could not be opened or decoded."""


class ImageWriteFailure(ImageError):
    """The output image could not be encoded or written."""
