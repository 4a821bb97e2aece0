"""
Image file boundary: decode to and encode from packed 8-bit buffers using Pillow.
"""

from pathlib import Path
from typing import Tuple, Union

from PIL import Image

from kmeans.exceptions import InvalidConfiguration
from .errors import ImageLoadFailure, ImageWriteFailure

PathLike = Union[str, Path]

# Pillow mode for each supported channel count
CHANNEL_MODES = {1: 'L', 2: 'LA', 3: 'RGB', 4: 'RGBA'}
MODE_CHANNELS = {mode: channels for channels, mode in CHANNEL_MODES.items()}


def _normalize_mode(img: Image.Image) -> Image.Image:
    """Convert any decoded image to L, LA, RGB or RGBA."""
    if img.mode in MODE_CHANNELS:
        return img
    if img.mode == '1':
        return img.convert('L')
    has_alpha = 'A' in img.getbands() or 'transparency' in img.info
    return img.convert('RGBA' if has_alpha else 'RGB')


def load_image(path: PathLike) -> Tuple[bytes, int, int, int]:
    """
    Decode an image file.

    Args:
        path: Input image path

    Returns:
        (buffer, width, height, channels), buffer channel-interleaved row by row
    """
    try:
        with Image.open(path) as img:
            img.load()
            img = _normalize_mode(img)
            width, height = img.size
            return img.tobytes(), width, height, MODE_CHANNELS[img.mode]
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise ImageLoadFailure(f"Failed to load image {path}: {e}") from e


def save_image(path: PathLike, buffer: bytes, width: int, height: int, channels: int) -> None:
    """
    Encode a packed buffer to ``path``; the format follows the file extension.
    """
    mode = CHANNEL_MODES.get(channels)
    if mode is None:
        raise InvalidConfiguration(f"Cannot write an image with {channels} channels")

    try:
        img = Image.frombytes(mode, (width, height), bytes(buffer))
        img.save(path)
    except (OSError, ValueError, KeyError) as e:
        raise ImageWriteFailure(f"Failed to write image {path}: {e}") from e
