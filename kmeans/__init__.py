"""
K-means clustering for bounded feature vectors (e.g. pixel colors).
"""

from .kmeans import KMeans
from .exceptions import (
    KMeansError,
    InvalidConfiguration,
    DimensionMismatch,
    IndexOutOfRange,
    AllocationFailure,
    ModelReleased,
    ValueOutOfRange,
)

__version__ = "1.0.0"
__all__ = [
    "KMeans",
    "KMeansError",
    "InvalidConfiguration",
    "DimensionMismatch",
    "IndexOutOfRange",
    "AllocationFailure",
    "ModelReleased",
    "ValueOutOfRange",
]
