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
"""Tests for filtering utilities."""

from nw_recon.filters import calculate_filter_stats, filter_links


def _links(make_link) -> list:
    return [
        make_link(link_pk="l1", device_a_code="nyc-1", device_z_code="lax-1", drift_pct=2.0),
        make_link(
            link_pk="l2",
            device_a_code="nyc-2",
            device_z_code="fra-1",
            health_status="DRIFT_HIGH",
            drift_pct=45.0,
            bandwidth_gbps=100.0,
        ),
        make_link(
            link_pk="l3",
            device_a_code="ams-1",
            device_z_code="fra-1",
            health_status="MISSING_TELEMETRY",
            data_status="MISSING_TELEMETRY",
            drift_pct=None,
            device_a_location_name="Amsterdam",
        ),
    ]


def test_filter_links_without_criteria_returns_all(make_link) -> None:
    links = _links(make_link)

    assert filter_links(links) == links


def test_filter_links_by_health_status(make_link) -> None:
    filtered = filter_links(_links(make_link), health_statuses={"DRIFT_HIGH"})

    assert [link.link_pk for link in filtered] == ["l2"]


def test_filter_links_by_bandwidth_tier(make_link) -> None:
    filtered = filter_links(_links(make_link), bandwidth_tiers={100})

    assert [link.link_pk for link in filtered] == ["l2"]


def test_filter_links_drift_range_skips_links_without_drift(make_link) -> None:
    filtered = filter_links(_links(make_link), drift_range=(0.0, 10.0))

    assert [link.link_pk for link in filtered] == ["l1", "l3"]


def test_filter_links_default_drift_range_is_inactive(make_link) -> None:
    filtered = filter_links(_links(make_link), drift_range=(0.0, 100.0))

    assert len(filtered) == 3


def test_filter_links_by_data_status(make_link) -> None:
    filtered = filter_links(_links(make_link), data_statuses=["MISSING_TELEMETRY"])

    assert [link.link_pk for link in filtered] == ["l3"]


def test_filter_links_search_is_case_insensitive(make_link) -> None:
    assert [link.link_pk for link in filter_links(_links(make_link), search_query="FRA")] == [
        "l2",
        "l3",
    ]
    assert [
        link.link_pk for link in filter_links(_links(make_link), search_query="amsterdam")
    ] == ["l3"]


def test_filter_links_combines_criteria(make_link) -> None:
    filtered = filter_links(
        _links(make_link),
        health_statuses={"HEALTHY", "DRIFT_HIGH"},
        search_query="nyc",
        bandwidth_tiers={10},
    )

    assert [link.link_pk for link in filtered] == ["l1"]


def test_calculate_filter_stats(make_link) -> None:
    links = _links(make_link)

    stats = calculate_filter_stats(links, links[:1])

    assert stats["visible_links"] == 1
    assert stats["hidden_links"] == 2
    assert round(stats["percentage_visible"], 2) == 33.33
    assert calculate_filter_stats([], [])["percentage_visible"] == 0.0
