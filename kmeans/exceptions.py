"""
Errors raised by the K-means engine.

Each error also derives from the closest builtin so callers that only
know about ``ValueError``/``IndexError``/``MemoryError`` still catch them.
"""


class KMeansError(Exception):
    """Base class for all K-means errors."""


class InvalidConfiguration(KMeansError, ValueError):
    """Non-positive cluster count or dimensionality, or another bad parameter."""


class DimensionMismatch(KMeansError, ValueError):
    """A point or dataset does not match the model's dimensionality."""


class IndexOutOfRange(KMeansError, IndexError):
    """A centroid lookup used an index outside ``[0, n_clusters)``."""


class AllocationFailure(KMeansError, MemoryError):
    """Storage for vectors, centroids or accumulators could not be allocated."""


class ModelReleased(KMeansError, RuntimeError):
    """The model was used after ``release()``."""


class ValueOutOfRange(KMeansError, ValueError):
    """A vector component is not finite or lies outside ``[0, max_value]``."""
