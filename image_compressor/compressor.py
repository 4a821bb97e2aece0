"""
Palette compression pipeline: image -> feature vectors -> K-means -> recolored image.
"""

from typing import Optional

import numpy as np

from kmeans import KMeans
from .image_io import PathLike, load_image, save_image
from .pixels import from_vectors, to_vectors

MAX_CHANNEL_VALUE = 255.0


def compress_image(
    input_image: PathLike,
    output_image: PathLike,
    num_clusters: int,
    num_iterations: int,
    random_state: Optional[int] = None,
    verbose: bool = False
) -> np.ndarray:
    """
    Reduce the colors of ``input_image`` to ``num_clusters`` and write the result.

    Args:
        input_image: Path of the image to compress
        output_image: Path to write; format follows the extension
        num_clusters: Number of colors in the output palette
        num_iterations: Number of K-means rounds
        random_state: Seed for centroid initialization
        verbose: Whether to print progress information

    Returns:
        The trained palette, shape (num_clusters, channels)
    """
    buffer, width, height, channels = load_image(input_image)
    if verbose:
        print(f"Loaded {input_image}: {width}x{height}, {channels} channels")

    pixels = to_vectors(buffer, width, height, channels)

    with KMeans(
        n_clusters=num_clusters,
        n_features=channels,
        max_value=MAX_CHANNEL_VALUE,
        random_state=random_state,
        verbose=verbose
    ) as model:
        model.fit(pixels, num_iterations)
        compressed = from_vectors(model.quantize(pixels), width, height, channels)
        palette = model.centroids

    save_image(output_image, compressed, width, height, channels)
    return palette
