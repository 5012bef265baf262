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
"""Weighted graph construction from reconciled links."""

from __future__ import annotations

import logging
import math
from typing import Iterable

from nw_recon.models import (
    GraphEdge,
    GraphNode,
    ReconciledLink,
    TopologyGraph,
    WeightingStrategy,
)

_LOGGER = logging.getLogger(__name__)

MAX_EXPECTED_DELAY_US = 1_000_000
LATENCY_PENALTY_US = 1_000_000
DEFAULT_BANDWIDTH_GBPS = 10.0
DEFAULT_ISIS_METRIC = 10_000
COMBINED_LATENCY_SHARE = 0.7
COMBINED_BANDWIDTH_SHARE = 0.3
COMBINED_BANDWIDTH_SCALE = 1_000_000


def build_topology_graph(
    links: Iterable[ReconciledLink],
    strategy: WeightingStrategy | str = WeightingStrategy.LATENCY,
) -> TopologyGraph:
    """Build a weighted, bidirectional graph from reconciled links.

    Args:
        links: Reconciled links; unusable ones are left out of the graph
        strategy: Weighting strategy or its string value

    Returns:
        Graph keyed by device code (nodes) and link key (edges)
    """

    strategy = WeightingStrategy(strategy)
    nodes: dict[str, GraphNode] = {}
    edges: dict[str, GraphEdge] = {}
    adjacency: dict[str, list[str]] = {}
    pair_index: dict[tuple[str, str], str] = {}

    admitted = 0
    skipped = 0
    for link in links:
        if not is_routable(link):
            skipped += 1
            continue
        admitted += 1
        node_a = link.device_a_code
        node_z = link.device_z_code
        if node_a not in nodes:
            nodes[node_a] = GraphNode(
                id=node_a,
                name=node_a,
                latitude=link.device_a_lat,
                longitude=link.device_a_lon,
                metadata={
                    "location_name": link.device_a_location_name,
                    "location_code": link.device_a_location_code,
                    "country": link.device_a_country,
                },
            )
        if node_z not in nodes:
            nodes[node_z] = GraphNode(
                id=node_z,
                name=node_z,
                latitude=link.device_z_lat,
                longitude=link.device_z_lon,
                metadata={
                    "location_name": link.device_z_location_name,
                    "location_code": link.device_z_location_code,
                    "country": link.device_z_country,
                },
            )

        edge = GraphEdge(
            id=link.link_pk,
            source=node_a,
            target=node_z,
            weight=calculate_edge_weight(link, strategy),
            latency_us=_edge_latency(link),
            bandwidth_gbps=link.bandwidth_gbps,
            health_status=link.health_status,
            bidirectional=True,
        )
        edges[edge.id] = edge
        pair_index.setdefault(_pair_key(node_a, node_z), edge.id)
        _add_neighbor(adjacency, node_a, node_z)
        _add_neighbor(adjacency, node_z, node_a)

    _LOGGER.debug(
        "Built %s graph: %s nodes, %s edges (%s links excluded)",
        strategy.value,
        len(nodes),
        admitted,
        skipped,
    )
    return TopologyGraph(nodes=nodes, edges=edges, adjacency=adjacency, pair_index=pair_index)


def is_routable(link: ReconciledLink) -> bool:
    """Check whether a link may carry paths.

    Links without IS-IS correlation, with a zero p95 or with an expected
    delay of one second or more stay out of the graph.
    """

    if not link.has_isis:
        return False
    if link.measured_p95_us == 0:
        return False
    return link.expected_delay_us < MAX_EXPECTED_DELAY_US


def calculate_edge_weight(link: ReconciledLink, strategy: WeightingStrategy) -> float:
    """Compute the edge cost of a link under a weighting strategy."""

    if strategy is WeightingStrategy.LATENCY:
        return _latency_component(link)
    if strategy is WeightingStrategy.HOPS:
        return 1
    if strategy is WeightingStrategy.BANDWIDTH:
        return _inverse_bandwidth(link.bandwidth_gbps)
    if strategy is WeightingStrategy.ISIS_METRIC:
        return link.isis_metric if link.isis_metric is not None else DEFAULT_ISIS_METRIC
    if strategy is WeightingStrategy.COMBINED:
        # bandwidth cost rescaled to the microsecond range of the latency term
        return (
            COMBINED_LATENCY_SHARE * _latency_component(link)
            + COMBINED_BANDWIDTH_SHARE
            * _inverse_bandwidth(link.bandwidth_gbps)
            * COMBINED_BANDWIDTH_SCALE
        )
    raise ValueError(f"Unknown weighting strategy: {strategy}")


def find_edge(graph: TopologyGraph, source_id: str, target_id: str) -> GraphEdge | None:
    """Find the edge joining two nodes in either direction."""

    if graph.pair_index:
        edge_id = graph.pair_index.get(_pair_key(source_id, target_id))
        return graph.edges.get(edge_id) if edge_id is not None else None
    for edge in graph.edges.values():
        if edge.source == source_id and edge.target == target_id:
            return edge
        if edge.bidirectional and edge.source == target_id and edge.target == source_id:
            return edge
    return None


def neighbors(graph: TopologyGraph, node_id: str) -> list[str]:
    """Return neighbor ids of a node."""

    return list(graph.adjacency.get(node_id, ()))


def has_node(graph: TopologyGraph, node_id: str) -> bool:
    return node_id in graph.nodes


def get_node(graph: TopologyGraph, node_id: str) -> GraphNode | None:
    return graph.nodes.get(node_id)


def _latency_component(link: ReconciledLink) -> float:
    if link.measured_p95_us is not None:
        return link.measured_p95_us
    if link.expected_delay_us is not None:
        return link.expected_delay_us
    return LATENCY_PENALTY_US


def _edge_latency(link: ReconciledLink) -> float:
    if link.measured_p95_us is not None:
        return link.measured_p95_us
    return link.expected_delay_us


def _inverse_bandwidth(gbps: float | None) -> float:
    if gbps is None:
        gbps = DEFAULT_BANDWIDTH_GBPS
    if gbps == 0:
        return math.inf
    return 1 / gbps


def _add_neighbor(adjacency: dict[str, list[str]], node_id: str, neighbor_id: str) -> None:
    neighbor_ids = adjacency.setdefault(node_id, [])
    if neighbor_id not in neighbor_ids:
        neighbor_ids.append(neighbor_id)


def _pair_key(node_a: str, node_b: str) -> tuple[str, str]:
    """Canonicalize an undirected node pair."""

    if node_a <= node_b:
        return node_a, node_b
    return node_b, node_a
