"""
Conversion between packed, channel-interleaved 8-bit pixel buffers and
feature vectors (one row per pixel).
"""

from typing import Union

import numpy as np

from kmeans.exceptions import AllocationFailure, DimensionMismatch, InvalidConfiguration, ValueOutOfRange

Buffer = Union[bytes, bytearray, memoryview, np.ndarray]


def _check_geometry(width: int, height: int, channels: int) -> int:
    if width <= 0 or height <= 0:
        raise InvalidConfiguration(f"Image dimensions must be positive, got {width}x{height}")
    if channels <= 0:
        raise InvalidConfiguration(f"Channel count must be positive, got {channels}")
    return width * height


def to_vectors(buffer: Buffer, width: int, height: int, channels: int) -> np.ndarray:
    """
    Convert a packed pixel buffer to feature vectors.

    Args:
        buffer: width * height * channels bytes, channels interleaved per pixel
        width: Image width in pixels
        height: Image height in pixels
        channels: Channels per pixel

    Returns:
        float64 array of shape (width * height, channels) with values in [0, 255]
    """
    num_pixels = _check_geometry(width, height, channels)

    if isinstance(buffer, np.ndarray):
        if buffer.dtype != np.uint8:
            if buffer.dtype.kind not in "iuf" or np.any(~np.isfinite(buffer)) \
                    or np.any(buffer < 0) or np.any(buffer > 255) or np.any(buffer != np.floor(buffer)):
                raise ValueOutOfRange("Pixel values must be whole numbers within [0, 255]")
        data = buffer.astype(np.uint8, copy=False).ravel()
    else:
        data = np.frombuffer(buffer, dtype=np.uint8)

    if data.size != num_pixels * channels:
        raise DimensionMismatch(
            f"Buffer holds {data.size} values, expected {width}x{height}x{channels} = {num_pixels * channels}"
        )

    try:
        return data.reshape(num_pixels, channels).astype(np.float64)
    except MemoryError as e:
        raise AllocationFailure(f"Failed to allocate memory for image data ({num_pixels} pixels)") from e


def from_vectors(vectors: np.ndarray, width: int, height: int, channels: int) -> bytes:
    """
    Convert feature vectors back to a packed pixel buffer.

    Components are truncated toward zero, not rounded: 127.9 becomes 127.

    Args:
        vectors: Array of shape (width * height, channels), values in [0, 256)
        width: Image width in pixels
        height: Image height in pixels
        channels: Channels per pixel

    Returns:
        Packed buffer of width * height * channels bytes
    """
    num_pixels = _check_geometry(width, height, channels)
    vectors = np.asarray(vectors, dtype=np.float64)

    if vectors.shape != (num_pixels, channels):
        raise DimensionMismatch(
            f"Expected vectors of shape ({num_pixels}, {channels}), got {vectors.shape}"
        )
    if np.any(~np.isfinite(vectors)) or np.any(vectors < 0) or np.any(vectors >= 256):
        raise ValueOutOfRange("Vector components must lie within [0, 256)")

    try:
        return vectors.astype(np.uint8).tobytes()
    except MemoryError as e:
        raise AllocationFailure(f"Failed to allocate memory for image buffer ({num_pixels} pixels)") from e
