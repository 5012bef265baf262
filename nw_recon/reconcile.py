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
"""Serviceability vs telemetry vs IS-IS reconciliation."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from nw_recon.bandwidth import (
    calculate_bandwidth_stats,
    format_bandwidth,
    get_bandwidth_tier,
    parse_bandwidth_to_gbps,
)
from nw_recon.loaders import parse_serviceability, parse_telemetry, validate_isis_document
from nw_recon.models import (
    DATA_COMPLETE,
    DATA_MISSING_BOTH,
    DATA_MISSING_ISIS,
    DATA_MISSING_TELEMETRY,
    HEALTH_DRIFT_HIGH,
    HEALTH_HEALTHY,
    HEALTH_MISSING_ISIS,
    HEALTH_MISSING_TELEMETRY,
    HealthSummary,
    LocationSummary,
    ReconciledLink,
    ServiceabilityLink,
    ServiceabilitySnapshot,
    Site,
    TopologyReport,
)
from nw_recon.stats import latency_percentiles
from nw_recon.subnet import build_adjacency_index, correlate

_LOGGER = logging.getLogger(__name__)

DRIFT_THRESHOLD_PCT = 10.0


def process_topology(
    snapshot_document: Mapping[str, Any],
    isis_document: Mapping[str, Any],
) -> TopologyReport:
    """Run a full reconciliation over raw snapshot and IS-IS documents.

    Structural problems in either document raise a single ValueError; no
    partial report is returned.
    """

    serviceability = parse_serviceability(snapshot_document)
    telemetry = parse_telemetry(snapshot_document)
    validate_isis_document(isis_document)

    links = reconcile(serviceability, telemetry, isis_document)
    summary = summarize(links)
    _LOGGER.info(
        "Reconciled %s links: healthy=%s drift_high=%s missing_telemetry=%s missing_isis=%s",
        summary.total_links,
        summary.healthy,
        summary.drift_high,
        summary.missing_telemetry,
        summary.missing_isis,
    )
    return TopologyReport(
        links=links,
        locations=build_locations(serviceability),
        summary=summary,
        bandwidth_stats=calculate_bandwidth_stats(links),
    )


def reconcile(
    serviceability: ServiceabilitySnapshot,
    telemetry_by_link: Mapping[str, Sequence[float]],
    isis_document: Mapping[str, Any] | None,
) -> list[ReconciledLink]:
    """Merge each serviceability link with its telemetry and IS-IS adjacency.

    Links whose endpoints cannot be resolved to a device location are
    skipped with a warning; missing telemetry or IS-IS data is reflected in
    the record's status instead.
    """

    adjacency_index = build_adjacency_index(isis_document)
    sites_by_device = _sites_by_device_code(serviceability)

    results: list[ReconciledLink] = []
    for link in serviceability.links.values():
        endpoints = _resolve_endpoints(link, serviceability)
        if endpoints is None:
            continue
        code_a, code_z = endpoints
        site_a = sites_by_device.get(code_a)
        site_z = sites_by_device.get(code_z)
        if site_a is None or site_z is None:
            _LOGGER.warning("Skipping link %s: missing device location", link.link_pk)
            continue
        results.append(
            _reconcile_link(
                link,
                code_a,
                code_z,
                site_a,
                site_z,
                telemetry_by_link.get(link.link_pk) or (),
                adjacency_index,
            )
        )
    return results


def classify_data_completeness(has_telemetry: bool, has_isis: bool) -> str:
    """Classify which data sources back a link; serviceability is always present."""

    if has_telemetry and has_isis:
        return DATA_COMPLETE
    if has_telemetry:
        return DATA_MISSING_ISIS
    if has_isis:
        return DATA_MISSING_TELEMETRY
    return DATA_MISSING_BOTH


def classify_health(has_telemetry: bool, has_isis: bool, drift_pct: float | None) -> str:
    """Classify link health; missing telemetry takes precedence over missing IS-IS."""

    if not has_telemetry:
        return HEALTH_MISSING_TELEMETRY
    if not has_isis:
        return HEALTH_MISSING_ISIS
    if drift_pct is not None and drift_pct >= DRIFT_THRESHOLD_PCT:
        return HEALTH_DRIFT_HIGH
    return HEALTH_HEALTHY


def summarize(links: Iterable[ReconciledLink]) -> HealthSummary:
    """Count links per health status."""

    counts = {
        HEALTH_HEALTHY: 0,
        HEALTH_DRIFT_HIGH: 0,
        HEALTH_MISSING_TELEMETRY: 0,
        HEALTH_MISSING_ISIS: 0,
    }
    total = 0
    for link in links:
        total += 1
        counts[link.health_status] += 1
    return HealthSummary(
        total_links=total,
        healthy=counts[HEALTH_HEALTHY],
        drift_high=counts[HEALTH_DRIFT_HIGH],
        missing_telemetry=counts[HEALTH_MISSING_TELEMETRY],
        missing_isis=counts[HEALTH_MISSING_ISIS],
    )


def build_locations(serviceability: ServiceabilitySnapshot) -> list[LocationSummary]:
    """List every location with the device codes placed there."""

    devices_by_location: dict[str, set[str]] = {}
    for device in serviceability.devices.values():
        if device.location_pk and device.code:
            devices_by_location.setdefault(device.location_pk, set()).add(device.code)

    locations: list[LocationSummary] = []
    for site in serviceability.locations.values():
        devices = tuple(sorted(devices_by_location.get(site.location_pk, ())))
        locations.append(
            LocationSummary(
                location_pk=site.location_pk,
                code=site.code,
                name=site.name,
                lat=site.lat,
                lon=site.lon,
                country=site.country,
                device_count=len(devices),
                devices=devices,
            )
        )
    return locations


def _reconcile_link(
    link: ServiceabilityLink,
    code_a: str,
    code_z: str,
    site_a: Site,
    site_z: Site,
    samples: Sequence[float],
    adjacency_index: Mapping[str, Any],
) -> ReconciledLink:
    """Build the reconciled record for a single resolved link."""

    has_telemetry = len(samples) > 0
    p50 = p90 = p95 = p99 = None
    if has_telemetry:
        p50, p90, p95, p99 = latency_percentiles(samples)

    adjacency = correlate(link.tunnel_net, adjacency_index)
    has_isis = adjacency is not None

    expected_delay_us = link.delay_ns / 1000
    drift_pct = None
    if p50 is not None and expected_delay_us > 0:
        drift_pct = abs(p50 - expected_delay_us) / expected_delay_us * 100

    bandwidth_gbps = parse_bandwidth_to_gbps(link.bandwidth)
    if isinstance(link.bandwidth, (int, float)):
        bandwidth_bps = link.bandwidth
    else:
        bandwidth_bps = bandwidth_gbps * 1_000_000_000 if bandwidth_gbps is not None else None

    return ReconciledLink(
        link_pk=link.link_pk,
        link_code=f"{code_a}:{code_z}",
        device_a_code=code_a,
        device_z_code=code_z,
        device_a_lat=site_a.lat,
        device_a_lon=site_a.lon,
        device_a_location_name=site_a.name,
        device_a_location_code=site_a.code,
        device_a_country=site_a.country,
        device_z_lat=site_z.lat,
        device_z_lon=site_z.lon,
        device_z_location_name=site_z.name,
        device_z_location_code=site_z.code,
        device_z_country=site_z.country,
        side_a_iface_name=link.side_a_iface_name,
        side_z_iface_name=link.side_z_iface_name,
        expected_delay_ns=link.delay_ns,
        expected_delay_us=expected_delay_us,
        bandwidth_bps=bandwidth_bps,
        bandwidth_gbps=bandwidth_gbps,
        bandwidth_label=format_bandwidth(bandwidth_gbps),
        bandwidth_tier=get_bandwidth_tier(bandwidth_gbps),
        measured_p50_us=p50,
        measured_p90_us=p90,
        measured_p95_us=p95,
        measured_p99_us=p99,
        telemetry_sample_count=len(samples),
        isis_metric=adjacency.metric if adjacency else None,
        isis_neighbor=adjacency.system_id if adjacency else None,
        tunnel_net=link.tunnel_net,
        drift_pct=drift_pct,
        health_status=classify_health(has_telemetry, has_isis, drift_pct),
        data_status=classify_data_completeness(has_telemetry, has_isis),
        has_telemetry=has_telemetry,
        has_isis=has_isis,
    )


def _resolve_endpoints(
    link: ServiceabilityLink,
    serviceability: ServiceabilitySnapshot,
) -> tuple[str, str] | None:
    """Resolve device codes from the "A:Z" link code, falling back to device keys."""

    if link.code:
        parts = link.code.split(":")
        if len(parts) >= 2 and parts[0] and parts[1]:
            return parts[0], parts[1]
        _LOGGER.warning("Skipping link %s: invalid link code format: %s", link.link_pk, link.code)
        return None

    device_a = serviceability.devices.get(link.side_a_device_pk or "")
    device_z = serviceability.devices.get(link.side_z_device_pk or "")
    if device_a and device_z and device_a.code and device_z.code:
        return device_a.code, device_z.code
    _LOGGER.warning("Skipping link %s: missing link code", link.link_pk)
    return None


def _sites_by_device_code(serviceability: ServiceabilitySnapshot) -> dict[str, Site]:
    """Map device codes to the location they are placed at."""

    sites: dict[str, Site] = {}
    for device in serviceability.devices.values():
        site = serviceability.locations.get(device.location_pk or "")
        if site is not None and device.code:
            sites[device.code] = site
    return sites
