"""Deterministic dataset partitioning.

This module splits record collections into reproducible train,
validation, test, and cross-validation subsets.
"""
