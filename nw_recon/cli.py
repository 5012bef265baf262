# Copyright 2025 nw-recon contributors
# SPDX-License-Identifier: Apache-2.0
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# This file was created or modified with the assistance of an AI (Large Language Model).
# Review required for correctness, security, and licensing.
"""CLI entrypoint."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from nw_recon.bandwidth import TIER_10G, TIER_50G, TIER_100G, TIER_200G, TIER_UNKNOWN
from nw_recon.filters import calculate_filter_stats, filter_links
from nw_recon.loaders import load_json_document
from nw_recon.mermaid import write_mermaid_diagram
from nw_recon.models import (
    DATA_COMPLETE,
    DATA_MISSING_BOTH,
    DATA_MISSING_ISIS,
    DATA_MISSING_TELEMETRY,
    HEALTH_DRIFT_HIGH,
    HEALTH_HEALTHY,
    HEALTH_MISSING_ISIS,
    HEALTH_MISSING_TELEMETRY,
    PathResult,
    WeightingStrategy,
)
from nw_recon.output import (
    write_links_csv,
    write_links_json,
    write_locations_json,
    write_path_json,
    write_summary,
    write_summary_json,
)
from nw_recon.path import compute_path
from nw_recon.reconcile import process_topology

_LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build argument parser."""

    parser = argparse.ArgumentParser(description="nw-recon")
    parser.add_argument("--snapshot", required=True, help="path to serviceability/telemetry snapshot JSON")
    parser.add_argument("--isis", required=True, help="path to IS-IS database JSON")
    parser.add_argument("--out-dir", required=True, help="output directory")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["INFO", "DEBUG", "WARN"],
        help="log level",
    )
    parser.add_argument(
        "--output-format",
        default="csv",
        choices=["csv", "json", "both"],
        help="output format (default: csv)",
    )
    parser.add_argument("--source", help="source device code for a path query")
    parser.add_argument("--destination", help="destination device code for a path query")
    parser.add_argument(
        "--strategy",
        default=WeightingStrategy.LATENCY.value,
        choices=[strategy.value for strategy in WeightingStrategy],
        help="path weighting strategy (default: latency)",
    )
    parser.add_argument(
        "--filter-health",
        nargs="+",
        choices=[HEALTH_HEALTHY, HEALTH_DRIFT_HIGH, HEALTH_MISSING_TELEMETRY, HEALTH_MISSING_ISIS],
        help="only report links with these health statuses",
    )
    parser.add_argument(
        "--filter-data-status",
        nargs="+",
        choices=[DATA_COMPLETE, DATA_MISSING_ISIS, DATA_MISSING_TELEMETRY, DATA_MISSING_BOTH],
        help="only report links with these data completeness statuses",
    )
    parser.add_argument(
        "--filter-bandwidth",
        nargs="+",
        type=int,
        choices=[TIER_UNKNOWN, TIER_10G, TIER_50G, TIER_100G, TIER_200G],
        help="only report links in these bandwidth tiers (Gbps tier floor, 0 = unknown)",
    )
    parser.add_argument(
        "--filter-drift",
        nargs=2,
        type=float,
        metavar=("MIN", "MAX"),
        help="only report links whose drift percentage lies in [MIN, MAX]",
    )
    parser.add_argument("--search", default="", help="only report links matching this text")
    parser.add_argument(
        "--mermaid",
        action="store_true",
        help="write a Mermaid diagram of the reported links",
    )
    return parser


def configure_logging(level: str) -> None:
    """Configure logging."""

    logging.basicConfig(level=getattr(logging, level), format="%(levelname)s %(message)s")


def main(argv: Sequence[str] | None = None) -> int:
    """Run nw-recon."""

    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if bool(args.source) != bool(args.destination):
        _LOGGER.error("--source and --destination must be given together")
        return 3

    try:
        snapshot = load_json_document(args.snapshot)
        isis = load_json_document(args.isis)
        report = process_topology(snapshot, isis)
    except (OSError, ValueError) as exc:
        _LOGGER.error("Invalid input: %s", exc)
        return 3

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    # Path queries always run over the full link set; filters only shape the report
    path_result: PathResult | None = None
    if args.source:
        path_result = compute_path(report.links, args.source, args.destination, args.strategy)
        if path_result.error:
            _LOGGER.warning("%s", path_result.error)

    links = filter_links(
        report.links,
        bandwidth_tiers=args.filter_bandwidth,
        health_statuses=args.filter_health,
        drift_range=tuple(args.filter_drift) if args.filter_drift else None,
        data_statuses=args.filter_data_status,
        search_query=args.search,
    )
    if len(links) != len(report.links):
        stats = calculate_filter_stats(report.links, links)
        _LOGGER.info(
            "Reporting %s of %s links after filtering (%.1f%% visible)",
            stats["visible_links"],
            stats["total_links"],
            stats["percentage_visible"],
        )

    if args.output_format in ("csv", "both"):
        write_links_csv(out_dir / "links.csv", links)
        write_summary(out_dir / "summary.txt", report.summary, report.bandwidth_stats, path_result)

    if args.output_format in ("json", "both"):
        write_links_json(out_dir / "links.json", links)
        write_locations_json(out_dir / "locations.json", report.locations)
        write_summary_json(out_dir / "summary.json", report.summary, report.bandwidth_stats)
        if path_result is not None:
            write_path_json(out_dir / "path.json", path_result)

    if args.mermaid:
        write_mermaid_diagram(
            out_dir / "topology.mmd",
            links,
            path_result.path if path_result else None,
        )

    if path_result is not None and path_result.path is None:
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
