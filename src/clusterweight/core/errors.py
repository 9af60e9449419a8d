"""
Error taxonomy.

Every error aborts the current batch before any record weight is written.
Nothing here is retried: these are either caller mistakes (bad configuration,
mismatched schema) or failures reported by the clustering step.
"""

from __future__ import annotations


class ClusterWeightError(Exception):
    """Base class for all errors raised by clusterweight."""


class ConfigurationError(ClusterWeightError, ValueError):
    """An enumerated setting or option string has an unsupported value."""


class UnknownStrategy(ConfigurationError):
    """The closest-centroid impact is not one of the known policies."""


class UnknownModifier(ConfigurationError):
    """The shaping function is not one of the known modifiers."""


class DatasetError(ClusterWeightError, ValueError):
    """The dataset cannot be turned into numeric feature vectors."""


class DimensionMismatch(DatasetError):
    """Two vectors that must be aligned have different lengths."""


class InvalidFeatureValue(DatasetError):
    """A feature column holds a missing or non-numeric value."""


class ClusteringFailure(ClusterWeightError, RuntimeError):
    """The clustering step failed or returned no usable centroids."""


class NonFiniteWeight(ClusterWeightError, ArithmeticError):
    """A final weight would be NaN or infinite."""

    def __init__(self, index: int, value: float):
        super().__init__(f"Relevance for record {index} is not finite ({value!r}).")
        self.index = index
        self.value = value
