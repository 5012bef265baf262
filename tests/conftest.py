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
"""Shared fixtures."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from nw_recon.models import ReconciledLink


def _make_link(**overrides: Any) -> ReconciledLink:
    values: dict[str, Any] = {
        "link_pk": "link-1",
        "link_code": "A:B",
        "device_a_code": "A",
        "device_z_code": "B",
        "device_a_lat": 40.7,
        "device_a_lon": -74.0,
        "device_a_location_name": "New York",
        "device_a_location_code": "NYC",
        "device_a_country": "US",
        "device_z_lat": 34.0,
        "device_z_lon": -118.2,
        "device_z_location_name": "Los Angeles",
        "device_z_location_code": "LAX",
        "device_z_country": "US",
        "side_a_iface_name": "Ethernet1",
        "side_z_iface_name": "Ethernet2",
        "expected_delay_ns": 1_000_000,
        "expected_delay_us": 1000.0,
        "bandwidth_bps": 10_000_000_000,
        "bandwidth_gbps": 10.0,
        "bandwidth_label": "10 Gbps",
        "bandwidth_tier": 10,
        "measured_p50_us": 1000.0,
        "measured_p90_us": 1000.0,
        "measured_p95_us": 1000.0,
        "measured_p99_us": 1000.0,
        "telemetry_sample_count": 10,
        "isis_metric": 100,
        "isis_neighbor": "0000.0000.0002",
        "tunnel_net": "172.16.0.0/31",
        "drift_pct": 0.0,
        "health_status": "HEALTHY",
        "data_status": "COMPLETE",
        "has_telemetry": True,
        "has_isis": True,
    }
    if "device_a_code" in overrides or "device_z_code" in overrides:
        code_a = overrides.get("device_a_code", values["device_a_code"])
        code_z = overrides.get("device_z_code", values["device_z_code"])
        values["link_code"] = f"{code_a}:{code_z}"
    values.update(overrides)
    return ReconciledLink(**values)


@pytest.fixture
def make_link() -> Callable[..., ReconciledLink]:
    """Factory for reconciled links with sensible defaults."""

    return _make_link
