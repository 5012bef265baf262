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
"""Filtering utilities for reconciled links."""

from __future__ import annotations

from typing import Collection, Sequence

from nw_recon.bandwidth import get_bandwidth_tier
from nw_recon.models import ReconciledLink

DEFAULT_DRIFT_RANGE = (0.0, 100.0)


def filter_links(
    links: Sequence[ReconciledLink],
    bandwidth_tiers: Collection[int] | None = None,
    health_statuses: Collection[str] | None = None,
    drift_range: tuple[float, float] | None = None,
    data_statuses: Collection[str] | None = None,
    search_query: str = "",
) -> list[ReconciledLink]:
    """Filter reconciled links; every active criterion must match.

    Args:
        links: Links to filter
        bandwidth_tiers: Bandwidth tiers to include (empty = all)
        health_statuses: Health statuses to include (empty = all)
        drift_range: Inclusive (min, max) drift percentage; only applied to
            links with drift data and only when it differs from (0, 100)
        data_statuses: Data completeness statuses to include (empty = all)
        search_query: Case-insensitive text matched against the link code,
            device codes and location names

    Returns:
        Filtered list of links
    """

    query = search_query.strip().lower()
    drift_active = drift_range is not None and tuple(drift_range) != DEFAULT_DRIFT_RANGE

    filtered: list[ReconciledLink] = []
    for link in links:
        if bandwidth_tiers and get_bandwidth_tier(link.bandwidth_gbps) not in bandwidth_tiers:
            continue

        if health_statuses and link.health_status not in health_statuses:
            continue

        if drift_active and link.drift_pct is not None:
            low, high = drift_range  # type: ignore[misc]
            if link.drift_pct < low or link.drift_pct > high:
                continue

        if data_statuses and link.data_status not in data_statuses:
            continue

        if query and not _matches_query(link, query):
            continue

        filtered.append(link)

    return filtered


def calculate_filter_stats(
    all_links: Sequence[ReconciledLink],
    filtered_links: Sequence[ReconciledLink],
) -> dict[str, float]:
    """Summarize how many links a filter kept."""

    total = len(all_links)
    visible = len(filtered_links)
    return {
        "visible_links": visible,
        "total_links": total,
        "hidden_links": total - visible,
        "percentage_visible": visible / total * 100 if total else 0.0,
    }


def _matches_query(link: ReconciledLink, query: str) -> bool:
    fields = (
        link.link_code,
        link.device_a_code,
        link.device_z_code,
        link.device_a_location_name,
        link.device_z_location_name,
    )
    return any(query in field.lower() for field in fields)
