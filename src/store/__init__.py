"""Storage, hashing, and versioning layer.

This module hashes record collections and persists immutable,
content-addressed dataset versions with append-only history.
"""
