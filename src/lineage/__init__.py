"""Lineage references and provenance edges.

This module converts dataset and version identities into artifact
references and directed edges for external lineage trackers.
"""
