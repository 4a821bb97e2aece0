"""
K-means clustering (Lloyd's algorithm) over bounded feature vectors.
Used to reduce an image palette to a fixed set of representative colors.
"""

import numpy as np
from typing import Optional, Union

from .exceptions import (
    AllocationFailure,
    DimensionMismatch,
    IndexOutOfRange,
    InvalidConfiguration,
    ModelReleased,
    ValueOutOfRange,
)
from .utils import DEFAULT_CHUNK_SIZE, accumulate, assign_labels


class KMeans:
    """
    K-means model owning ``n_clusters`` centroids of ``n_features`` values,
    every value kept inside ``[0, max_value]``.

    Features:
    - Uniform random or explicit centroid initialization, seedable
    - Fixed number of training rounds (no early stopping)
    - Empty clusters keep their previous centroid
    - Deterministic nearest-centroid classification (lowest index on ties)
    - Chunked assignment for large datasets

    The model can be used as a context manager; its storage is released
    on exit.
    """

    def __init__(
        self,
        n_clusters: int,
        n_features: int,
        max_value: float = 255.0,
        init: Union[str, np.ndarray] = 'random',
        random_state: Optional[int] = None,
        verbose: bool = False,
        chunk_size: int = DEFAULT_CHUNK_SIZE
    ):
        """
        Create a model with initialized centroids.

        Args:
            n_clusters: Number of clusters (k >= 1)
            n_features: Dimensionality of every vector (dim >= 1)
            max_value: Upper bound of every vector component
            init: 'random' for uniform values in [0, max_value], or an
                array of shape (n_clusters, n_features) with the initial centroids
            random_state: Random seed for reproducibility
            verbose: Whether to print progress information
            chunk_size: Rows classified at once during assignment
        """
        if not isinstance(n_clusters, (int, np.integer)) or n_clusters <= 0:
            raise InvalidConfiguration(f"Number of clusters must be positive, got {n_clusters}")
        if not isinstance(n_features, (int, np.integer)) or n_features <= 0:
            raise InvalidConfiguration(f"Dimensionality must be positive, got {n_features}")
        if not np.isfinite(max_value) or max_value < 0:
            raise InvalidConfiguration(f"max_value must be finite and non-negative, got {max_value}")
        if chunk_size <= 0:
            raise InvalidConfiguration(f"chunk_size must be positive, got {chunk_size}")

        self.n_clusters = int(n_clusters)
        self.n_features = int(n_features)
        self.max_value = float(max_value)
        self.init = init
        self.random_state = random_state
        self.verbose = verbose
        self.chunk_size = chunk_size

        # Results
        self.inertia_: Optional[float] = None
        self.n_iter_ = 0

        self._centroids: Optional[np.ndarray] = self._init_centroids()

    def _init_centroids(self) -> np.ndarray:
        """Initialize centroids from ``init``."""
        shape = (self.n_clusters, self.n_features)

        if isinstance(self.init, str):
            if self.init != 'random':
                raise InvalidConfiguration(f"Unknown initialization method: {self.init}")
            rng = np.random.default_rng(self.random_state)
            try:
                return rng.uniform(0.0, self.max_value, size=shape)
            except (MemoryError, ValueError) as e:
                # numpy reports sizes beyond the address space as ValueError
                raise AllocationFailure(
                    f"Failed to allocate {self.n_clusters} centroids of dimension {self.n_features}"
                ) from e

        centroids = np.array(self.init, dtype=np.float64)
        if centroids.shape != shape:
            raise InvalidConfiguration(
                f"Initial centroids must have shape {shape}, got {centroids.shape}"
            )
        if np.any(~np.isfinite(centroids)) or np.any(centroids < 0) or np.any(centroids > self.max_value):
            raise InvalidConfiguration(f"Initial centroids must lie within [0, {self.max_value}]")
        return centroids

    def __enter__(self) -> 'KMeans':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.release()

    def _require_centroids(self) -> np.ndarray:
        if self._centroids is None:
            raise ModelReleased("Model has been released")
        return self._centroids

    def _check_dataset(self, X) -> np.ndarray:
        X = np.asarray(X, dtype=np.float64)
        if X.ndim == 1 and X.size == 0:
            X = X.reshape(0, self.n_features)
        if X.ndim != 2 or X.shape[1] != self.n_features:
            raise DimensionMismatch(
                f"Expected data of shape (n_samples, {self.n_features}), got {X.shape}"
            )
        return X

    @property
    def released(self) -> bool:
        return self._centroids is None

    @property
    def centroids(self) -> np.ndarray:
        """Copy of all centroids, shape (n_clusters, n_features)."""
        return self._require_centroids().copy()

    def centroid(self, i: int) -> np.ndarray:
        """
        Get the centroid at index ``i``.

        Args:
            i: Centroid index in [0, n_clusters)

        Returns:
            Copy of the centroid vector
        """
        centroids = self._require_centroids()
        if not isinstance(i, (int, np.integer)) or not 0 <= i < self.n_clusters:
            raise IndexOutOfRange(f"Centroid index {i} outside [0, {self.n_clusters})")
        return centroids[i].copy()

    def release(self) -> None:
        """Release centroid storage. The model is unusable afterwards."""
        self._centroids = None

    def predict(self, point) -> int:
        """
        Index of the centroid closest to ``point`` (squared Euclidean distance).
        Exact ties go to the lowest index.

        Args:
            point: Vector of length n_features

        Returns:
            Centroid index
        """
        centroids = self._require_centroids()
        point = np.asarray(point, dtype=np.float64)
        if point.ndim != 1 or point.shape[0] != self.n_features:
            raise DimensionMismatch(
                f"Expected a point of length {self.n_features}, got shape {point.shape}"
            )
        labels, _ = assign_labels(point[np.newaxis, :], centroids)
        return int(labels[0])

    def assign(self, X) -> np.ndarray:
        """
        Predict the centroid index of every row of X.

        Args:
            X: Input data of shape (n_samples, n_features)

        Returns:
            Cluster labels
        """
        centroids = self._require_centroids()
        X = self._check_dataset(X)
        labels, _ = assign_labels(X, centroids, self.chunk_size)
        return labels

    def quantize(self, X) -> np.ndarray:
        """
        Replace every row of X by its nearest centroid.

        Args:
            X: Input data of shape (n_samples, n_features)

        Returns:
            Array of shape (n_samples, n_features) holding centroid values
        """
        labels = self.assign(X)
        try:
            return self._centroids[labels]
        except MemoryError as e:
            raise AllocationFailure(f"Failed to allocate {len(labels)} quantized vectors") from e

    def fit(self, X, n_iterations: int) -> 'KMeans':
        """
        Run exactly ``n_iterations`` rounds of Lloyd's algorithm.

        Each round assigns every point to its nearest current centroid,
        then moves every non-empty cluster's centroid to the mean of its
        points. Empty clusters keep their centroid.

        Args:
            X: Input data of shape (n_samples, n_features)
            n_iterations: Number of rounds

        Returns:
            self
        """
        centroids = self._require_centroids()
        if not isinstance(n_iterations, (int, np.integer)) or n_iterations < 0:
            raise InvalidConfiguration(f"Number of iterations must be non-negative, got {n_iterations}")
        X = self._check_dataset(X)
        if np.any(~np.isfinite(X)) or np.any(X < 0) or np.any(X > self.max_value):
            raise ValueOutOfRange(f"Training data must be finite and lie within [0, {self.max_value}]")

        if self.verbose:
            print(f"Fitting K-means with {self.n_clusters} clusters on {X.shape[0]} samples...")

        for iteration in range(n_iterations):
            # Assignment completes over all points before any centroid moves
            labels, min_distances = assign_labels(X, centroids, self.chunk_size)
            self.inertia_ = float(min_distances.sum())

            sums, counts = accumulate(X, labels, self.n_clusters)
            non_empty = counts > 0
            centroids[non_empty] = sums[non_empty] / counts[non_empty, np.newaxis]
            # A float mean may land an ulp outside the bound
            np.clip(centroids, 0.0, self.max_value, out=centroids)

            self.n_iter_ = iteration + 1

            if self.verbose and (iteration + 1) % 10 == 0:
                print(f"Iteration {iteration + 1}, Inertia: {self.inertia_:.2f}")

        if self.verbose and self.inertia_ is not None:
            print(f"Final inertia: {self.inertia_:.2f}")

        return self

    def fit_predict(self, X, n_iterations: int) -> np.ndarray:
        """
        Fit the model and predict cluster labels.

        Args:
            X: Input data of shape (n_samples, n_features)
            n_iterations: Number of rounds

        Returns:
            Cluster labels
        """
        return self.fit(X, n_iterations).assign(X)

    def get_cluster_info(self, X) -> dict:
        """Get information about how X is spread over the clusters."""
        centroids = self._require_centroids()
        X = self._check_dataset(X)
        labels, min_distances = assign_labels(X, centroids, self.chunk_size)
        cluster_sizes = np.bincount(labels, minlength=self.n_clusters)

        return {
            'n_clusters': self.n_clusters,
            'inertia': float(min_distances.sum()),
            'n_iterations': self.n_iter_,
            'cluster_sizes': dict(enumerate(cluster_sizes.tolist())),
            'empty_clusters': int(np.sum(cluster_sizes == 0)),
            'avg_cluster_size': float(np.mean(cluster_sizes)),
            'min_cluster_size': int(np.min(cluster_sizes)),
            'max_cluster_size': int(np.max(cluster_sizes))
        }
