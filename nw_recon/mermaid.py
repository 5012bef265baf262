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
"""Mermaid diagram generation for reconciled topology visualization."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Sequence

from nw_recon.models import (
    HEALTH_DRIFT_HIGH,
    HEALTH_HEALTHY,
    HEALTH_MISSING_ISIS,
    HEALTH_MISSING_TELEMETRY,
    NetworkPath,
    ReconciledLink,
)

_LOGGER = logging.getLogger(__name__)

HEALTH_COLORS = {
    HEALTH_HEALTHY: "#22c55e",
    HEALTH_DRIFT_HIGH: "#ef4444",
    HEALTH_MISSING_TELEMETRY: "#a1a1aa",
    HEALTH_MISSING_ISIS: "#a1a1aa",
}
PATH_NODE_FILL = "#bfdbfe"
_UNSAFE_ID_CHARS = re.compile(r"[^0-9A-Za-z_]")


def generate_mermaid_diagram(
    links: Sequence[ReconciledLink],
    path: NetworkPath | None = None,
    max_nodes: int = 50,
) -> str:
    """Generate a Mermaid graph of reconciled links.

    Args:
        links: Reconciled links to visualize
        path: Optional computed path whose hops are highlighted
        max_nodes: Maximum number of devices to include (default: 50)

    Returns:
        Mermaid diagram as a string
    """

    devices: set[str] = set()
    for link in links:
        devices.add(link.device_a_code)
        devices.add(link.device_z_code)

    if len(devices) > max_nodes:
        _LOGGER.warning(
            "Too many devices (%d) for Mermaid diagram (max: %d). "
            "Truncating to first %d devices alphabetically. "
            "Consider using filtering options to select specific links.",
            len(devices),
            max_nodes,
            max_nodes,
        )
        devices = set(sorted(devices)[:max_nodes])

    node_ids = _node_ids(devices)
    lines = ["graph LR"]
    link_styles: list[str] = []
    for link in sorted(links, key=lambda item: item.link_pk):
        if link.device_a_code not in devices or link.device_z_code not in devices:
            continue
        node_a = node_ids[link.device_a_code]
        node_z = node_ids[link.device_z_code]
        lines.append(
            f'    {node_a}["{_label(link.device_a_code)}"] ---|{_edge_label(link)}| '
            f'{node_z}["{_label(link.device_z_code)}"]'
        )
        color = HEALTH_COLORS.get(link.health_status, HEALTH_COLORS[HEALTH_MISSING_ISIS])
        link_styles.append(f"    linkStyle {len(link_styles)} stroke:{color}")

    if link_styles:
        lines.append("")
        lines.append("    %% Styling")
        lines.extend(link_styles)

    if path is not None:
        for node in path.hops:
            if node.id in devices:
                lines.append(f"    style {node_ids[node.id]} fill:{PATH_NODE_FILL}")

    return "\n".join(lines)


def write_mermaid_diagram(
    path: str | Path,
    links: Sequence[ReconciledLink],
    network_path: NetworkPath | None = None,
    max_nodes: int = 50,
) -> None:
    """Write Mermaid diagram to a file."""

    diagram = generate_mermaid_diagram(links, network_path, max_nodes)

    with Path(path).open("w", encoding="utf-8") as handle:
        handle.write(diagram)
        handle.write("\n")

    _LOGGER.info("Mermaid diagram written to %s", path)


def _edge_label(link: ReconciledLink) -> str:
    if link.drift_pct is None:
        return link.health_status
    return f"{link.health_status} {link.drift_pct:.1f}%"


def _sanitize_id(device_name: str) -> str:
    """Sanitize device name for use as Mermaid node ID."""
    return _UNSAFE_ID_CHARS.sub("_", device_name)


def _node_ids(devices: set[str]) -> dict[str, str]:
    """Assign each device a unique node ID; clashing sanitized names get a numeric suffix."""

    ids: dict[str, str] = {}
    used: set[str] = set()
    for device in sorted(devices):
        base = _sanitize_id(device)
        node_id = base
        suffix = 2
        while node_id in used:
            node_id = f"{base}_{suffix}"
            suffix += 1
        used.add(node_id)
        ids[device] = node_id
    return ids


def _label(text: str) -> str:
    return text.replace('"', "#quot;")
