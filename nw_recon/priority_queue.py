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
"""Min-priority queue backed by a binary heap."""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PriorityQueueItem(Generic[T]):
    """Value paired with its priority."""

    value: T
    priority: float


class PriorityQueue(Generic[T]):
    """Binary min-heap; lower priorities are dequeued first.

    Equal priorities come out in insertion order.
    """

    def __init__(self) -> None:
        self._heap: list[tuple[float, int, T]] = []
        self._counter = itertools.count()

    def enqueue(self, value: T, priority: float) -> None:
        """Add a value with the given priority."""

        heapq.heappush(self._heap, (priority, next(self._counter), value))

    def dequeue(self) -> PriorityQueueItem[T] | None:
        """Remove and return the lowest-priority item, or None when empty."""

        if not self._heap:
            return None
        priority, _, value = heapq.heappop(self._heap)
        return PriorityQueueItem(value=value, priority=priority)

    def peek(self) -> PriorityQueueItem[T] | None:
        """Return the lowest-priority item without removing it."""

        if not self._heap:
            return None
        priority, _, value = self._heap[0]
        return PriorityQueueItem(value=value, priority=priority)

    def is_empty(self) -> bool:
        return not self._heap

    def size(self) -> int:
        return len(self._heap)

    def __len__(self) -> int:
        return len(self._heap)
