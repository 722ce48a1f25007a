"""Strata CLI entry points.
This module exposes version inspection commands over the local store.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
import json
from pathlib import Path
import sys
from typing import Any, Sequence

from core.config import StrataConfig
from core.errors import StrataError
from store.dataset_sdk import StrataClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="strata", description="Strata dataset version CLI")
    parser.add_argument("--data-root", help="Override STRATA_DATA_ROOT for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_versions_command(subparsers)
    _add_show_command(subparsers)
    _add_diff_command(subparsers)
    _add_tag_command(subparsers)
    _add_lineage_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Strata CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args.data_root)
        if args.command == "versions":
            return _run_versions_command(client, args)
        if args.command == "show":
            return _run_show_command(client, args)
        if args.command == "diff":
            return _run_diff_command(client, args)
        if args.command == "tag":
            return _run_tag_command(client, args)
        if args.command == "lineage":
            return _run_lineage_command(client, args)
    except StrataError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(data_root: str | None) -> StrataClient:
    """Build SDK client with optional data-root override.

    Args:
        data_root: Optional override path.

    Returns:
        Configured SDK client.
    """
    config = StrataConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    return StrataClient(config)


def _run_versions_command(client: StrataClient, args: argparse.Namespace) -> int:
    """Print one line per version, newest first."""
    for record in client.dataset(args.dataset).history():
        print(
            f"{record.version}\t"
            f"{record.size}\t"
            f"{record.created_at.isoformat()}\t"
            f"{record.content_hash}\t"
            f"{','.join(record.tags) or '-'}"
        )
    return 0


def _run_show_command(client: StrataClient, args: argparse.Namespace) -> int:
    """Print one version record as JSON."""
    record = client.dataset(args.dataset).info(args.version)
    print(json.dumps(record.to_dict(), indent=2))
    return 0


def _run_diff_command(client: StrataClient, args: argparse.Namespace) -> int:
    """Print the comparison of two versions."""
    version_diff = client.dataset(args.dataset).diff(args.version_a, args.version_b)
    changes = version_diff.metadata_changes
    print(f"hash_changed={str(version_diff.hash_changed).lower()}")
    print(f"size_delta={version_diff.size_delta}")
    print(f"time_delta_seconds={version_diff.time_delta_seconds:.6f}")
    print(f"metadata_added={','.join(changes.added) or '-'}")
    print(f"metadata_removed={','.join(changes.removed) or '-'}")
    print(f"metadata_changed={','.join(changes.changed) or '-'}")
    return 0


def _run_tag_command(client: StrataClient, args: argparse.Namespace) -> int:
    """Append a tag and print the resulting tag list."""
    record = client.dataset(args.dataset).tag(args.version, args.tag)
    print(",".join(record.tags))
    return 0


def _run_lineage_command(client: StrataClient, args: argparse.Namespace) -> int:
    """Print the artifact reference for one version as JSON."""
    ref = client.dataset(args.dataset).artifact_ref(args.version)
    print(json.dumps(ref.to_dict(), indent=2, sort_keys=True))
    return 0


def _add_versions_command(subparsers: Any) -> None:
    """Register versions subcommand."""
    parser = subparsers.add_parser("versions", help="List dataset versions, newest first")
    parser.add_argument("--dataset", required=True, help="Dataset name")


def _add_show_command(subparsers: Any) -> None:
    """Register show subcommand."""
    parser = subparsers.add_parser("show", help="Show one version record")
    parser.add_argument("--dataset", required=True, help="Dataset name")
    parser.add_argument("--version", required=True, help="Version label")


def _add_diff_command(subparsers: Any) -> None:
    """Register diff subcommand."""
    parser = subparsers.add_parser("diff", help="Compare two versions")
    parser.add_argument("--dataset", required=True, help="Dataset name")
    parser.add_argument("version_a", help="Baseline version label")
    parser.add_argument("version_b", help="Compared version label")


def _add_tag_command(subparsers: Any) -> None:
    """Register tag subcommand."""
    parser = subparsers.add_parser("tag", help="Append a tag to a version")
    parser.add_argument("--dataset", required=True, help="Dataset name")
    parser.add_argument("--version", required=True, help="Version label")
    parser.add_argument("tag", help="Tag label")


def _add_lineage_command(subparsers: Any) -> None:
    """Register lineage subcommand."""
    parser = subparsers.add_parser("lineage", help="Print the artifact reference of a version")
    parser.add_argument("--dataset", required=True, help="Dataset name")
    parser.add_argument("--version", required=True, help="Version label")
