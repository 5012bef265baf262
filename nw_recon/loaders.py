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
"""Snapshot and IS-IS document loading."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from nw_recon.models import Device, ServiceabilityLink, ServiceabilitySnapshot, Site

_LOGGER = logging.getLogger(__name__)

_SERVICEABILITY_PATH = ("fetch_data", "dz_serviceability")
_TELEMETRY_PATH = ("fetch_data", "dz_telemetry", "device_latency_samples")


def load_json_document(path: str | Path) -> dict[str, Any]:
    """Load a JSON document whose top level is an object."""

    with Path(path).open(encoding="utf-8") as handle:
        try:
            document = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return document


def parse_serviceability(document: Mapping[str, Any]) -> ServiceabilitySnapshot:
    """Extract links, devices and locations from a snapshot document."""

    _validate_document(document, "snapshot")
    section = _section(document, _SERVICEABILITY_PATH, dict)

    links: dict[str, ServiceabilityLink] = {}
    for link_pk, raw in _section(section, ("links",), dict).items():
        record = _record(raw, f"link {link_pk}")
        links[link_pk] = ServiceabilityLink(
            link_pk=link_pk,
            code=_optional_str(record.get("code")),
            side_a_device_pk=_optional_str(record.get("side_a_pk") or record.get("side_a_device_pk")),
            side_z_device_pk=_optional_str(record.get("side_z_pk") or record.get("side_z_device_pk")),
            side_a_iface_name=str(record.get("side_a_iface_name") or ""),
            side_z_iface_name=str(
                record.get("side_z_iface_name") or record.get("side_b_iface_name") or ""
            ),
            delay_ns=_require_number(record, "delay_ns", f"link {link_pk}"),
            bandwidth=_bandwidth_value(record.get("bandwidth"), link_pk),
            tunnel_net=_optional_str(record.get("tunnel_net")),
        )

    devices: dict[str, Device] = {}
    for device_pk, raw in _section(section, ("devices",), dict).items():
        record = _record(raw, f"device {device_pk}")
        devices[device_pk] = Device(
            device_pk=device_pk,
            code=str(record.get("code") or ""),
            location_pk=_optional_str(record.get("location_pk")),
        )

    locations: dict[str, Site] = {}
    for location_pk, raw in _section(section, ("locations",), dict).items():
        record = _record(raw, f"location {location_pk}")
        lat = _optional_number(record.get("lat"), f"location {location_pk} lat")
        lon = _optional_number(record.get("lng"), f"location {location_pk} lng")
        locations[location_pk] = Site(
            location_pk=location_pk,
            code=str(record.get("code") or location_pk),
            name=str(record.get("name") or "Unknown"),
            lat=lat,
            lon=lon,
            country=str(record.get("country") or ""),
        )

    return ServiceabilitySnapshot(links=links, devices=devices, locations=locations)


def parse_telemetry(document: Mapping[str, Any]) -> dict[str, list[float]]:
    """Extract RTT samples keyed by link primary key.

    Entries without a link key or without a sample list are ignored. A later
    entry for the same link replaces an earlier one.
    """

    _validate_document(document, "snapshot")
    samples_by_link: dict[str, list[float]] = {}
    for entry in _section(document, _TELEMETRY_PATH, list):
        if not isinstance(entry, Mapping):
            continue
        link_pk = entry.get("link_pk")
        samples = entry.get("samples")
        if not link_pk or not isinstance(samples, list):
            continue
        samples_by_link[str(link_pk)] = [
            _sample_value(value, str(link_pk)) for value in samples
        ]
    return samples_by_link


def validate_isis_document(document: Any) -> Mapping[str, Any]:
    """Ensure the IS-IS database has the expected top-level shape."""

    _validate_document(document, "isis")
    vrfs = document.get("vrfs")
    if vrfs is not None and not isinstance(vrfs, dict):
        raise ValueError("isis document field vrfs must be an object")
    return document


def _validate_document(document: Any, name: str) -> None:
    """Ensure a document is a JSON object."""

    if not isinstance(document, Mapping):
        raise ValueError(f"{name} document must be a JSON object")


def _section(document: Mapping[str, Any], path: tuple[str, ...], kind: type) -> Any:
    """Walk a nested path; missing parts yield an empty section, wrong types raise."""

    current: Any = document
    for depth, key in enumerate(path):
        expected = kind if depth == len(path) - 1 else dict
        value = current.get(key)
        if value is None:
            return kind()
        if not isinstance(value, expected):
            dotted = ".".join(path[: depth + 1])
            raise ValueError(f"section {dotted} must be {_kind_name(expected)}")
        current = value
    return current


def _record(raw: Any, label: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise ValueError(f"{label} must be an object")
    return raw


def _require_number(record: Mapping[str, Any], key: str, label: str) -> float:
    """Ensure a required numeric field is present."""

    value = _optional_number(record.get(key), f"{label} {key}")
    if value is None:
        raise ValueError(f"{label} is missing required field: {key}")
    return value


def _optional_number(value: Any, label: str) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{label} must be a number, got {value!r}")
    return value


def _bandwidth_value(value: Any, link_pk: str) -> str | float | None:
    """Keep numeric (bps) and textual ("100G") bandwidths; anything else is unknown."""

    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        if value is not None:
            _LOGGER.warning("Ignoring bandwidth of link %s: %r", link_pk, value)
        return None
    return value


def _sample_value(value: Any, link_pk: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"telemetry for link {link_pk} has non-numeric sample {value!r}")
    return value


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _kind_name(kind: type) -> str:
    return "an array" if kind is list else "an object"
