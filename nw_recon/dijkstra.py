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
"""Dijkstra shortest path over a topology graph."""

from __future__ import annotations

import math
from typing import Mapping

from nw_recon.graph import find_edge
from nw_recon.models import HEALTH_HEALTHY, GraphEdge, NetworkPath, TopologyGraph
from nw_recon.priority_queue import PriorityQueue


def dijkstra_shortest_path(
    graph: TopologyGraph,
    source_id: str,
    destination_id: str,
) -> NetworkPath | None:
    """Compute the lowest-weight path between two nodes.

    Returns None when either node is missing from the graph or the
    destination is unreachable.
    """

    if source_id not in graph.nodes or destination_id not in graph.nodes:
        return None

    if source_id == destination_id:
        node = graph.nodes[source_id]
        return NetworkPath(
            source=node,
            destination=node,
            hops=(node,),
            links=(),
            total_latency_us=0.0,
            total_hops=0,
            min_bandwidth_gbps=None,
            path_reliability=1.0,
        )

    distances = {node_id: math.inf for node_id in graph.nodes}
    distances[source_id] = 0.0
    previous: dict[str, str | None] = {node_id: None for node_id in graph.nodes}
    visited: set[str] = set()

    queue: PriorityQueue[str] = PriorityQueue()
    queue.enqueue(source_id, 0.0)

    while not queue.is_empty():
        item = queue.dequeue()
        if item is None:
            break
        current_id = item.value
        if current_id in visited:
            continue
        visited.add(current_id)
        if current_id == destination_id:
            break

        current_distance = distances[current_id]
        for neighbor_id in graph.adjacency.get(current_id, ()):
            if neighbor_id in visited:
                continue
            edge = find_edge(graph, current_id, neighbor_id)
            if edge is None:
                continue
            candidate = current_distance + edge.weight
            if candidate < distances.get(neighbor_id, math.inf):
                distances[neighbor_id] = candidate
                previous[neighbor_id] = current_id
                queue.enqueue(neighbor_id, candidate)

    return reconstruct_path(graph, source_id, destination_id, previous, distances)


def reconstruct_path(
    graph: TopologyGraph,
    source_id: str,
    destination_id: str,
    previous: Mapping[str, str | None],
    distances: Mapping[str, float],
) -> NetworkPath | None:
    """Rebuild the hop sequence from predecessors and aggregate path metrics.

    Latency is the sum of edge latencies rather than weights. Bandwidth is the
    bottleneck over edges reporting one. Reliability is the share of HEALTHY
    edges.
    """

    if distances.get(destination_id, math.inf) == math.inf:
        return None

    path_ids: list[str] = []
    current: str | None = destination_id
    seen: set[str] = set()
    while current is not None and current not in seen:
        seen.add(current)
        path_ids.append(current)
        if current == source_id:
            break
        current = previous.get(current)
    path_ids.reverse()

    if not path_ids or path_ids[0] != source_id:
        return None

    links: list[GraphEdge] = []
    total_latency_us = 0.0
    min_bandwidth_gbps: float | None = None
    healthy = 0
    for left, right in zip(path_ids, path_ids[1:]):
        edge = find_edge(graph, left, right)
        if edge is None:
            continue
        links.append(edge)
        total_latency_us += edge.latency_us
        if edge.bandwidth_gbps is not None:
            if min_bandwidth_gbps is None or edge.bandwidth_gbps < min_bandwidth_gbps:
                min_bandwidth_gbps = edge.bandwidth_gbps
        if edge.health_status == HEALTH_HEALTHY:
            healthy += 1

    return NetworkPath(
        source=graph.nodes[source_id],
        destination=graph.nodes[destination_id],
        hops=tuple(graph.nodes[node_id] for node_id in path_ids),
        links=tuple(links),
        total_latency_us=total_latency_us,
        total_hops=len(links),
        min_bandwidth_gbps=min_bandwidth_gbps,
        path_reliability=healthy / len(links) if links else 1.0,
    )
