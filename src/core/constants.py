"""Core constants used across Strata modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".strata")
DATASETS_DIR_NAME = "datasets"
VERSIONS_DIR_NAME = "versions"
CATALOG_FILE_NAME = "versions.json"
MANIFEST_FILE_NAME = "manifest.json"
RECORDS_FILE_NAME = "records.jsonl"
TEMP_DIR_PREFIX = ".tmp-"
HASH_ALGORITHM = "sha256"
CANONICAL_FORMAT_VERSION = 1
CANONICAL_HEADER = f"strata-canonical-v{CANONICAL_FORMAT_VERSION}\n"
DEFAULT_SPLIT_RATIO = 0.8
DEFAULT_THREE_WAY_RATIOS = (0.7, 0.15, 0.15)
DEFAULT_FOLD_COUNT = 5
DEFAULT_LABEL_KEY = "label"
RATIO_SUM_TOLERANCE = 1e-9
DEFAULT_URI_SCHEME = "strata"
DATASET_ARTIFACT_TYPE = "dataset"
DEFAULT_EDGE_NODE_TYPE = "artifact"
DEFAULT_RELATIONSHIP = "derived_from"
