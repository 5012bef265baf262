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
"""Latency percentile statistics."""

from __future__ import annotations

import math
from typing import Sequence


def percentile(samples: Sequence[float], p: float) -> float:
    """Return the p-th percentile using linear interpolation between order statistics.

    Args:
        samples: Non-empty collection of numeric samples
        p: Percentile in the range [0, 100]

    Returns:
        Interpolated percentile value
    """

    if not samples:
        raise ValueError("percentile requires at least one sample")
    if p < 0 or p > 100:
        raise ValueError(f"percentile out of range: {p}")

    ordered = sorted(samples)
    rank = (p / 100) * (len(ordered) - 1)
    lower = math.floor(rank)
    upper = math.ceil(rank)
    weight = rank - lower
    return float(ordered[lower] * (1 - weight) + ordered[upper] * weight)


def median(samples: Sequence[float]) -> float:
    """Return the median of the samples."""

    return percentile(samples, 50)


def latency_percentiles(samples: Sequence[float]) -> tuple[float, float, float, float]:
    """Return (p50, p90, p95, p99) for a non-empty sample set."""

    return (
        median(samples),
        percentile(samples, 90),
        percentile(samples, 95),
        percentile(samples, 99),
    )
