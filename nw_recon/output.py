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
"""Output rendering for reconciliation reports and paths."""

from __future__ import annotations

import csv
import json
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, Sequence

from nw_recon.bandwidth import tier_label
from nw_recon.models import (
    BandwidthStats,
    GraphEdge,
    GraphNode,
    HealthSummary,
    LocationSummary,
    NetworkPath,
    PathResult,
    ReconciledLink,
)

LINK_COLUMNS = tuple(field.name for field in fields(ReconciledLink))


def link_to_dict(link: ReconciledLink) -> dict[str, Any]:
    """Convert a reconciled link to a JSON-ready dict."""

    return asdict(link)


def path_to_dict(path: NetworkPath) -> dict[str, Any]:
    """Convert a network path to a JSON-ready dict."""

    return {
        "source": _node_to_dict(path.source),
        "destination": _node_to_dict(path.destination),
        "hops": [_node_to_dict(node) for node in path.hops],
        "links": [_edge_to_dict(edge) for edge in path.links],
        "total_latency_us": path.total_latency_us,
        "total_hops": path.total_hops,
        "min_bandwidth_gbps": path.min_bandwidth_gbps,
        "path_reliability": path.path_reliability,
        "algorithm": path.algorithm,
    }


def summary_to_dict(summary: HealthSummary, bandwidth_stats: BandwidthStats | None = None) -> dict[str, Any]:
    """Convert the health summary (and optional bandwidth stats) to a dict."""

    data: dict[str, Any] = asdict(summary)
    if bandwidth_stats is not None:
        data["bandwidth_stats"] = {
            "total_capacity_gbps": bandwidth_stats.total_capacity_gbps,
            "average_bandwidth_gbps": bandwidth_stats.average_bandwidth_gbps,
            "distribution": {str(tier): count for tier, count in bandwidth_stats.distribution.items()},
        }
    return data


def write_links_csv(path: str | Path, links: Sequence[ReconciledLink]) -> None:
    """Write reconciled links CSV."""

    with Path(path).open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerow(LINK_COLUMNS)
        for link in _sorted_links(links):
            row = link_to_dict(link)
            writer.writerow(["" if row[name] is None else row[name] for name in LINK_COLUMNS])


def write_links_json(path: str | Path, links: Sequence[ReconciledLink]) -> None:
    """Write reconciled links JSON."""

    _write_json(path, [link_to_dict(link) for link in _sorted_links(links)])


def write_locations_json(path: str | Path, locations: Sequence[LocationSummary]) -> None:
    """Write locations JSON."""

    data = [
        {**asdict(location), "devices": list(location.devices)}
        for location in sorted(locations, key=lambda item: item.location_pk)
    ]
    _write_json(path, data)


def write_summary(
    path: str | Path,
    summary: HealthSummary,
    bandwidth_stats: BandwidthStats | None = None,
    path_result: PathResult | None = None,
) -> None:
    """Write summary report."""

    with Path(path).open("w", encoding="utf-8") as handle:
        handle.write(f"total_links: {summary.total_links}\n")
        handle.write(f"healthy: {summary.healthy}\n")
        handle.write(f"drift_high: {summary.drift_high}\n")
        handle.write(f"missing_telemetry: {summary.missing_telemetry}\n")
        handle.write(f"missing_isis: {summary.missing_isis}\n")
        if bandwidth_stats is not None:
            handle.write(f"total_capacity_gbps: {bandwidth_stats.total_capacity_gbps:g}\n")
            handle.write(f"average_bandwidth_gbps: {bandwidth_stats.average_bandwidth_gbps:.2f}\n")
            for tier, count in bandwidth_stats.distribution.items():
                handle.write(f"bandwidth_tier {tier_label(tier)}: {count}\n")
        if path_result is not None:
            if path_result.path is not None:
                hops = " -> ".join(node.id for node in path_result.path.hops)
                handle.write(f"path: {hops}\n")
                handle.write(f"path_latency_us: {path_result.path.total_latency_us:.1f}\n")
            else:
                handle.write(f"path_error: {path_result.error}\n")


def write_summary_json(
    path: str | Path,
    summary: HealthSummary,
    bandwidth_stats: BandwidthStats | None = None,
) -> None:
    """Write summary report JSON."""

    _write_json(path, summary_to_dict(summary, bandwidth_stats))


def write_path_json(path: str | Path, result: PathResult) -> None:
    """Write a path query result JSON."""

    data = {
        "path": path_to_dict(result.path) if result.path is not None else None,
        "error": result.error,
    }
    _write_json(path, data)


def _node_to_dict(node: GraphNode) -> dict[str, Any]:
    return {
        "id": node.id,
        "name": node.name,
        "latitude": node.latitude,
        "longitude": node.longitude,
        "metadata": dict(node.metadata),
    }


def _edge_to_dict(edge: GraphEdge) -> dict[str, Any]:
    return asdict(edge)


def _sorted_links(links: Sequence[ReconciledLink]) -> list[ReconciledLink]:
    return sorted(links, key=lambda item: item.link_pk)


def _write_json(path: str | Path, data: Any) -> None:
    with Path(path).open("w", encoding="utf-8") as handle:
        json.dump(data, handle, indent=2, ensure_ascii=False)
        handle.write("\n")
