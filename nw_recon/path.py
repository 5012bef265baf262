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
"""Path query entrypoint."""

from __future__ import annotations

import logging
import time
from typing import Sequence

from nw_recon.dijkstra import dijkstra_shortest_path
from nw_recon.graph import build_topology_graph
from nw_recon.models import PathResult, ReconciledLink, WeightingStrategy

_LOGGER = logging.getLogger(__name__)


def compute_path(
    links: Sequence[ReconciledLink],
    source_id: str | None,
    destination_id: str | None,
    strategy: WeightingStrategy | str | None = WeightingStrategy.LATENCY,
) -> PathResult:
    """Build the graph for a strategy and compute the shortest path.

    Validation failures and unreachable destinations are reported through
    PathResult.error; nothing is raised.
    """

    started = time.perf_counter()

    def _failure(message: str) -> PathResult:
        _LOGGER.info("Path query failed: %s", message)
        return PathResult(path=None, error=message, compute_time_ms=_elapsed_ms(started))

    if not links:
        return _failure("No topology data available")
    if not source_id:
        return _failure("Source device not specified")
    if not destination_id:
        return _failure("Destination device not specified")
    try:
        weighting = WeightingStrategy(strategy or WeightingStrategy.LATENCY)
    except ValueError:
        return _failure(f"Unknown weighting strategy: {strategy}")

    graph = build_topology_graph(links, weighting)
    if source_id not in graph.nodes:
        return _failure(f'Source device "{source_id}" not found in topology')
    if destination_id not in graph.nodes:
        return _failure(f'Destination device "{destination_id}" not found in topology')

    path = dijkstra_shortest_path(graph, source_id, destination_id)
    if path is None:
        return _failure(f'No path exists between "{source_id}" and "{destination_id}"')

    _LOGGER.info(
        "Path %s -> %s (%s): %s hops, %.1f us",
        source_id,
        destination_id,
        weighting.value,
        path.total_hops,
        path.total_latency_us,
    )
    return PathResult(path=path, error=None, compute_time_ms=_elapsed_ms(started))


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
