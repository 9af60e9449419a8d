"""Clustering-based per-record relevance weights for labeled tabular datasets."""

__version__ = "0.1.0"
