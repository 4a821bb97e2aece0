"""
Numeric helpers shared by the classifier and the trainer.
"""

from typing import Tuple

import numpy as np

from .exceptions import AllocationFailure

# Rows classified per block; keeps the (rows, k, dim) difference tensor small.
DEFAULT_CHUNK_SIZE = 65536


def squared_distances(X: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Squared Euclidean distance from every row of X to every centroid.

    Differences are taken explicitly rather than through the
    ``|x|^2 - 2x.c + |c|^2`` expansion, so equal distances stay exactly
    equal and ties are decided by index alone.

    Args:
        X: Points of shape (n_samples, n_features)
        centroids: Centroids of shape (n_clusters, n_features)

    Returns:
        Array of shape (n_samples, n_clusters)
    """
    diff = X[:, np.newaxis, :] - centroids[np.newaxis, :, :]
    return np.einsum('ijk,ijk->ij', diff, diff)


def assign_labels(
    X: np.ndarray,
    centroids: np.ndarray,
    chunk_size: int = DEFAULT_CHUNK_SIZE
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Nearest centroid for each row of X, lowest index winning ties.

    Returns:
        (labels, min_distances), both of length n_samples
    """
    n_samples = X.shape[0]
    try:
        labels = np.empty(n_samples, dtype=np.intp)
        min_distances = np.empty(n_samples, dtype=np.float64)
        for start in range(0, n_samples, chunk_size):
            stop = min(start + chunk_size, n_samples)
            distances = squared_distances(X[start:stop], centroids)
            # argmin returns the first minimum
            labels[start:stop] = np.argmin(distances, axis=1)
            min_distances[start:stop] = distances[np.arange(stop - start), labels[start:stop]]
    except MemoryError as e:
        raise AllocationFailure(f"Failed to allocate assignment buffers for {n_samples} points") from e
    return labels, min_distances


def accumulate(X: np.ndarray, labels: np.ndarray, n_clusters: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Per-cluster coordinate sums and point counts.

    Returns:
        (sums of shape (n_clusters, n_features), counts of shape (n_clusters,))
    """
    n_features = X.shape[1]
    try:
        counts = np.bincount(labels, minlength=n_clusters)
        sums = np.zeros((n_clusters, n_features), dtype=np.float64)
        for d in range(n_features):
            sums[:, d] = np.bincount(labels, weights=X[:, d], minlength=n_clusters)
    except MemoryError as e:
        raise AllocationFailure(f"Failed to allocate accumulators for {n_clusters} clusters") from e
    return sums, counts
