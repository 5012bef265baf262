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
"""Data models for nw-recon."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Sequence

HEALTH_HEALTHY = "HEALTHY"
HEALTH_DRIFT_HIGH = "DRIFT_HIGH"
HEALTH_MISSING_TELEMETRY = "MISSING_TELEMETRY"
HEALTH_MISSING_ISIS = "MISSING_ISIS"

DATA_COMPLETE = "COMPLETE"
DATA_MISSING_ISIS = "MISSING_ISIS"
DATA_MISSING_TELEMETRY = "MISSING_TELEMETRY"
DATA_MISSING_BOTH = "MISSING_BOTH"


class WeightingStrategy(str, Enum):
    """Rule for turning a reconciled link into a scalar edge cost."""

    LATENCY = "latency"
    HOPS = "hops"
    BANDWIDTH = "bandwidth"
    ISIS_METRIC = "isis-metric"
    COMBINED = "combined"


@dataclass(frozen=True)
class ServiceabilityLink:
    """Design-time link contract from the serviceability snapshot."""

    link_pk: str
    code: str | None
    side_a_device_pk: str | None
    side_z_device_pk: str | None
    side_a_iface_name: str
    side_z_iface_name: str
    delay_ns: float
    bandwidth: str | float | None
    tunnel_net: str | None


@dataclass(frozen=True)
class Device:
    """Serviceability device record."""

    device_pk: str
    code: str
    location_pk: str | None


@dataclass(frozen=True)
class Site:
    """Serviceability location record."""

    location_pk: str
    code: str
    name: str
    lat: float | None
    lon: float | None
    country: str = ""


@dataclass(frozen=True)
class ServiceabilitySnapshot:
    """Links, devices and locations keyed by primary key, in document order."""

    links: Mapping[str, ServiceabilityLink]
    devices: Mapping[str, Device]
    locations: Mapping[str, Site]


@dataclass(frozen=True)
class IsisAdjacency:
    """Neighbor entry reported by an IS-IS LSP."""

    address: str
    metric: int
    system_id: str
    hostname: str


@dataclass(frozen=True)
class ReconciledLink:
    """Merged serviceability, telemetry and IS-IS view of one link."""

    link_pk: str
    link_code: str
    device_a_code: str
    device_z_code: str
    device_a_lat: float | None
    device_a_lon: float | None
    device_a_location_name: str
    device_a_location_code: str
    device_a_country: str
    device_z_lat: float | None
    device_z_lon: float | None
    device_z_location_name: str
    device_z_location_code: str
    device_z_country: str
    side_a_iface_name: str
    side_z_iface_name: str
    expected_delay_ns: float
    expected_delay_us: float
    bandwidth_bps: float | None
    bandwidth_gbps: float | None
    bandwidth_label: str
    bandwidth_tier: int
    measured_p50_us: float | None
    measured_p90_us: float | None
    measured_p95_us: float | None
    measured_p99_us: float | None
    telemetry_sample_count: int
    isis_metric: int | None
    isis_neighbor: str | None
    tunnel_net: str | None
    drift_pct: float | None
    health_status: str
    data_status: str
    has_telemetry: bool
    has_isis: bool
    has_serviceability: bool = True


@dataclass(frozen=True)
class LocationSummary:
    """Location with the device codes placed there."""

    location_pk: str
    code: str
    name: str
    lat: float | None
    lon: float | None
    country: str
    device_count: int
    devices: tuple[str, ...]


@dataclass(frozen=True)
class HealthSummary:
    """Counts of links per health status."""

    total_links: int
    healthy: int
    drift_high: int
    missing_telemetry: int
    missing_isis: int


@dataclass(frozen=True)
class BandwidthStats:
    """Aggregate capacity statistics over links with a known bandwidth."""

    total_capacity_gbps: float
    average_bandwidth_gbps: float
    distribution: Mapping[int, int]


@dataclass(frozen=True)
class TopologyReport:
    """Result of one reconciliation run."""

    links: Sequence[ReconciledLink]
    locations: Sequence[LocationSummary]
    summary: HealthSummary
    bandwidth_stats: BandwidthStats


@dataclass(frozen=True)
class GraphNode:
    """Device node keyed by its device code."""

    id: str
    name: str
    latitude: float | None
    longitude: float | None
    metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class GraphEdge:
    """Weighted link between two node ids."""

    id: str
    source: str
    target: str
    weight: float
    latency_us: float
    bandwidth_gbps: float | None
    health_status: str
    bidirectional: bool = True


@dataclass(frozen=True)
class TopologyGraph:
    """Nodes, edges and a symmetric adjacency index, all keyed by string id."""

    nodes: Mapping[str, GraphNode]
    edges: Mapping[str, GraphEdge]
    adjacency: Mapping[str, Sequence[str]]
    pair_index: Mapping[tuple[str, str], str] = field(default_factory=dict)


@dataclass(frozen=True)
class NetworkPath:
    """Computed route with aggregate metrics."""

    source: GraphNode
    destination: GraphNode
    hops: Sequence[GraphNode]
    links: Sequence[GraphEdge]
    total_latency_us: float
    total_hops: int
    min_bandwidth_gbps: float | None
    path_reliability: float
    algorithm: str = "dijkstra"


@dataclass(frozen=True)
class PathResult:
    """Outcome of a path query; exactly one of path/error is set."""

    path: NetworkPath | None
    error: str | None
    compute_time_ms: float = 0.0
