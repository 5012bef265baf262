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
"""Tests for three-way reconciliation."""

from __future__ import annotations

from typing import Any

import pytest

from nw_recon.models import (
    DATA_COMPLETE,
    DATA_MISSING_BOTH,
    DATA_MISSING_ISIS,
    DATA_MISSING_TELEMETRY,
    HEALTH_DRIFT_HIGH,
    HEALTH_HEALTHY,
    HEALTH_MISSING_ISIS,
    HEALTH_MISSING_TELEMETRY,
)
from nw_recon.reconcile import (
    classify_data_completeness,
    classify_health,
    process_topology,
)


def _snapshot(samples: list[float] | None = None, **link_overrides: Any) -> dict[str, Any]:
    link = {
        "code": "device-a:device-b",
        "delay_ns": 10_000_000,
        "bandwidth": 10_000_000_000,
        "tunnel_net": "172.16.0.0/31",
        "side_a_iface_name": "eth0",
        "side_z_iface_name": "eth1",
        "side_a_pk": "dev-a",
        "side_z_pk": "dev-b",
    }
    link.update(link_overrides)
    telemetry = []
    if samples is not None:
        telemetry.append({"link_pk": "link-1", "samples": samples})
    return {
        "fetch_data": {
            "dz_serviceability": {
                "links": {"link-1": link},
                "devices": {
                    "dev-a": {"code": "device-a", "location_pk": "loc-1"},
                    "dev-b": {"code": "device-b", "location_pk": "loc-2"},
                },
                "locations": {
                    "loc-1": {
                        "code": "NYC",
                        "name": "New York",
                        "lat": 40.7128,
                        "lng": -74.006,
                        "country": "US",
                    },
                    "loc-2": {
                        "code": "LAX",
                        "name": "Los Angeles",
                        "lat": 34.0522,
                        "lng": -118.2437,
                        "country": "US",
                    },
                },
            },
            "dz_telemetry": {"device_latency_samples": telemetry},
        }
    }


def _isis(address: str = "172.16.0.0", metric: int = 10000) -> dict[str, Any]:
    return {
        "vrfs": {
            "default": {
                "isisInstances": {
                    "1": {
                        "level": {
                            "2": {
                                "lsps": {
                                    "lsp-1": {
                                        "hostname": {"name": "device-a"},
                                        "neighbors": [
                                            {
                                                "systemId": "device-b",
                                                "metric": metric,
                                                "adjInterfaceAddresses": [
                                                    {"adjInterfaceAddress": address}
                                                ],
                                            }
                                        ],
                                    }
                                }
                            }
                        }
                    }
                }
            }
        }
    }


def test_process_topology_healthy_link() -> None:
    report = process_topology(_snapshot([10000, 10100, 9900, 10050]), _isis())

    assert len(report.links) == 1
    link = report.links[0]
    assert link.link_code == "device-a:device-b"
    assert link.device_a_code == "device-a"
    assert link.device_z_code == "device-b"
    assert link.expected_delay_us == 10000
    assert link.measured_p50_us == pytest.approx(10025.0)
    assert link.isis_metric == 10000
    assert link.isis_neighbor == "device-b"
    assert link.drift_pct is not None and link.drift_pct < 10
    assert link.health_status == HEALTH_HEALTHY
    assert link.data_status == DATA_COMPLETE
    assert link.has_serviceability is True
    assert link.bandwidth_gbps == 10
    assert link.bandwidth_label == "10 Gbps"
    assert link.device_a_location_name == "New York"

    assert report.summary.total_links == 1
    assert report.summary.healthy == 1
    assert report.summary.drift_high == 0


def test_process_topology_detects_drift() -> None:
    report = process_topology(_snapshot([20000, 20100, 19900, 20050]), _isis())

    link = report.links[0]
    assert link.health_status == HEALTH_DRIFT_HIGH
    assert link.drift_pct is not None and link.drift_pct > 90
    assert report.summary.drift_high == 1


def test_process_topology_missing_telemetry() -> None:
    report = process_topology(_snapshot(None), _isis())

    link = report.links[0]
    assert link.health_status == HEALTH_MISSING_TELEMETRY
    assert link.data_status == DATA_MISSING_TELEMETRY
    assert link.measured_p50_us is None
    assert link.measured_p99_us is None
    assert link.drift_pct is None
    assert link.has_telemetry is False
    assert link.isis_metric == 10000


def test_process_topology_empty_samples_are_missing_telemetry() -> None:
    report = process_topology(_snapshot([]), _isis())

    assert report.links[0].health_status == HEALTH_MISSING_TELEMETRY
    assert report.links[0].telemetry_sample_count == 0


def test_process_topology_missing_isis() -> None:
    report = process_topology(_snapshot([10000, 10000]), _isis(address="10.9.9.9"))

    link = report.links[0]
    assert link.health_status == HEALTH_MISSING_ISIS
    assert link.data_status == DATA_MISSING_ISIS
    assert link.isis_metric is None
    assert link.has_isis is False
    assert report.summary.missing_isis == 1


def test_process_topology_missing_both_prefers_telemetry_status() -> None:
    report = process_topology(_snapshot(None), {})

    link = report.links[0]
    assert link.health_status == HEALTH_MISSING_TELEMETRY
    assert link.data_status == DATA_MISSING_BOTH


def test_process_topology_matches_upper_tunnel_host() -> None:
    report = process_topology(
        _snapshot([10000], tunnel_net="172.16.0.100/31"),
        _isis(address="172.16.0.101", metric=7),
    )

    assert report.links[0].isis_metric == 7


def test_process_topology_skips_unresolvable_links() -> None:
    snapshot = _snapshot([10000], code="device-a:device-x")

    report = process_topology(snapshot, _isis())

    assert report.links == []
    assert report.summary.total_links == 0


def test_process_topology_skips_malformed_link_code() -> None:
    report = process_topology(_snapshot([10000], code="device-a"), _isis())

    assert report.links == []


def test_process_topology_resolves_devices_without_link_code() -> None:
    report = process_topology(_snapshot([10000], code=None), _isis())

    assert report.links[0].link_code == "device-a:device-b"


def test_process_topology_builds_locations() -> None:
    report = process_topology(_snapshot([10000]), _isis())

    nyc = next(location for location in report.locations if location.code == "NYC")
    assert nyc.device_count == 1
    assert nyc.devices == ("device-a",)


def test_process_topology_parses_textual_bandwidth() -> None:
    report = process_topology(_snapshot([10000], bandwidth="100G"), _isis())

    link = report.links[0]
    assert link.bandwidth_gbps == 100
    assert link.bandwidth_bps == 100_000_000_000
    assert link.bandwidth_label == "100 Gbps"
    assert link.bandwidth_tier == 100


def test_process_topology_unparseable_bandwidth_is_unknown() -> None:
    report = process_topology(_snapshot([10000], bandwidth="fast"), _isis())

    link = report.links[0]
    assert link.bandwidth_bps is None
    assert link.bandwidth_gbps is None
    assert link.bandwidth_label == "Unknown"


def test_process_topology_keeps_location_without_coordinates() -> None:
    snapshot = _snapshot([10000])
    del snapshot["fetch_data"]["dz_serviceability"]["locations"]["loc-2"]["lat"]

    report = process_topology(snapshot, _isis())

    assert len(report.links) == 1
    assert report.links[0].device_z_lat is None
    assert report.links[0].device_z_location_code == "LAX"
    lax = next(location for location in report.locations if location.code == "LAX")
    assert lax.lat is None
    assert lax.devices == ("device-b",)


def test_process_topology_rejects_malformed_documents() -> None:
    with pytest.raises(ValueError, match="must be an object"):
        process_topology({"fetch_data": {"dz_serviceability": {"links": []}}}, _isis())
    with pytest.raises(ValueError, match="isis document"):
        process_topology(_snapshot([10000]), [])  # type: ignore[arg-type]


def test_process_topology_is_idempotent() -> None:
    snapshot = _snapshot([10000, 10100, 9900, 10050])

    first = process_topology(snapshot, _isis())
    second = process_topology(snapshot, _isis())

    assert first == second


def test_classify_data_completeness_truth_table() -> None:
    assert classify_data_completeness(True, True) == DATA_COMPLETE
    assert classify_data_completeness(True, False) == DATA_MISSING_ISIS
    assert classify_data_completeness(False, True) == DATA_MISSING_TELEMETRY
    assert classify_data_completeness(False, False) == DATA_MISSING_BOTH


def test_classify_health_threshold_is_inclusive() -> None:
    assert classify_health(True, True, 10.0) == HEALTH_DRIFT_HIGH
    assert classify_health(True, True, 9.99) == HEALTH_HEALTHY
    assert classify_health(True, True, None) == HEALTH_HEALTHY
