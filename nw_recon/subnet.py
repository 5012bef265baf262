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
"""Correlation of /31 tunnel networks with IS-IS adjacencies."""

from __future__ import annotations

import ipaddress
import logging
import math
from typing import Any, Mapping

from nw_recon.models import IsisAdjacency

_LOGGER = logging.getLogger(__name__)

_TUNNEL_PREFIX_LEN = 31


def tunnel_hosts(tunnel_net: str | None) -> list[str]:
    """Return both host addresses of a /31 tunnel network.

    The lowest bit of the given address is cleared, so "10.0.0.5/31" and
    "10.0.0.4/31" both yield ["10.0.0.4", "10.0.0.5"]. Anything other than a
    valid IPv4 /31 yields an empty list.
    """

    if not tunnel_net:
        return []
    address, _, mask = tunnel_net.strip().partition("/")
    if mask != str(_TUNNEL_PREFIX_LEN):
        return []
    try:
        base = ipaddress.IPv4Address(address)
    except ValueError:
        return []
    first = ipaddress.IPv4Address(int(base) & ~1)
    return [str(first), str(first + 1)]


def build_adjacency_index(isis_document: Mapping[str, Any] | None) -> dict[str, list[IsisAdjacency]]:
    """Index IS-IS neighbor entries by adjacency interface address.

    Walks every instance, level and LSP under the default VRF in document
    order. Neighbors without a numeric metric or without an address are skipped,
    as are neighbor and address lists of the wrong type.
    """

    index: dict[str, list[IsisAdjacency]] = {}
    if not isinstance(isis_document, Mapping):
        return index

    vrf = _mapping(_mapping(isis_document.get("vrfs")).get("default"))
    for instance in _mapping(vrf.get("isisInstances")).values():
        for level in _mapping(_mapping(instance).get("level")).values():
            for lsp in _mapping(_mapping(level).get("lsps")).values():
                lsp = _mapping(lsp)
                hostname = _hostname(lsp.get("hostname"))
                for neighbor in _sequence(lsp.get("neighbors")):
                    _index_neighbor(index, _mapping(neighbor), hostname)
    return index


def correlate(
    tunnel_net: str | None,
    index: Mapping[str, list[IsisAdjacency]],
) -> IsisAdjacency | None:
    """Return the first adjacency whose address is a host of the tunnel network."""

    for host in tunnel_hosts(tunnel_net):
        adjacencies = index.get(host)
        if adjacencies:
            return adjacencies[0]
    _LOGGER.debug("No IS-IS adjacency for tunnel_net %s", tunnel_net)
    return None


def _index_neighbor(
    index: dict[str, list[IsisAdjacency]],
    neighbor: Mapping[str, Any],
    hostname: str,
) -> None:
    """Add one neighbor entry to the address index."""

    metric = neighbor.get("metric")
    if isinstance(metric, bool) or not isinstance(metric, (int, float)):
        return
    if not math.isfinite(metric):
        return
    system_id = str(neighbor.get("systemId") or "")
    for entry in _sequence(neighbor.get("adjInterfaceAddresses")):
        if isinstance(entry, Mapping):
            address = entry.get("adjInterfaceAddress")
        else:
            address = entry
        if not address:
            continue
        index.setdefault(str(address), []).append(
            IsisAdjacency(
                address=str(address),
                metric=int(metric),
                system_id=system_id,
                hostname=hostname,
            )
        )


def _hostname(raw: Any) -> str:
    """Hostnames are reported either as a string or as {"name": ...}."""

    if isinstance(raw, Mapping):
        return str(raw.get("name") or "")
    return str(raw or "")


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _sequence(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []
