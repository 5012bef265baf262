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
"""Bandwidth parsing, tiering and capacity statistics."""

from __future__ import annotations

import re
from typing import Iterable

from nw_recon.models import BandwidthStats, ReconciledLink

TIER_UNKNOWN = 0
TIER_10G = 10
TIER_50G = 50
TIER_100G = 100
TIER_200G = 200

_TIER_LABELS = {
    TIER_UNKNOWN: "Unknown",
    TIER_10G: "< 50 Gbps",
    TIER_50G: "50-100 Gbps",
    TIER_100G: "100-200 Gbps",
    TIER_200G: "200+ Gbps",
}

_GBPS_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*g(?:bps|e)?", re.IGNORECASE)
_MBPS_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*m(?:bps)?", re.IGNORECASE)


def parse_bandwidth_to_gbps(raw: str | float | int | None) -> float | None:
    """Parse a bandwidth value to Gbps.

    Numbers are bits per second. Strings such as "100G", "100GE",
    "100 Gbps", "1000M" or "1000 Mbps" are accepted. Anything else yields None.
    """

    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return raw / 1_000_000_000

    text = str(raw).strip().lower()
    if not text:
        return None
    match = _GBPS_PATTERN.search(text)
    if match:
        return float(match.group(1))
    match = _MBPS_PATTERN.search(text)
    if match:
        return float(match.group(1)) / 1000
    return None


def format_bandwidth(gbps: float | None) -> str:
    """Format Gbps for display, switching to Mbps below 1 Gbps."""

    if gbps is None:
        return "Unknown"
    if gbps >= 1:
        return f"{gbps:g} Gbps"
    return f"{gbps * 1000:g} Mbps"


def get_bandwidth_tier(gbps: float | None) -> int:
    """Map Gbps to a grouping tier (0, 10, 50, 100 or 200)."""

    if gbps is None:
        return TIER_UNKNOWN
    if gbps < 50:
        return TIER_10G
    if gbps < 100:
        return TIER_50G
    if gbps < 200:
        return TIER_100G
    return TIER_200G


def tier_label(tier: int) -> str:
    """Human-readable label for a bandwidth tier."""

    return _TIER_LABELS.get(tier, _TIER_LABELS[TIER_UNKNOWN])


def calculate_bandwidth_stats(links: Iterable[ReconciledLink]) -> BandwidthStats:
    """Compute total and average capacity plus the per-tier distribution."""

    distribution: dict[int, int] = {}
    total = 0.0
    counted = 0
    for link in links:
        if link.bandwidth_gbps is None:
            continue
        total += link.bandwidth_gbps
        counted += 1
        tier = get_bandwidth_tier(link.bandwidth_gbps)
        distribution[tier] = distribution.get(tier, 0) + 1

    return BandwidthStats(
        total_capacity_gbps=total,
        average_bandwidth_gbps=total / counted if counted else 0.0,
        distribution=dict(sorted(distribution.items())),
    )
