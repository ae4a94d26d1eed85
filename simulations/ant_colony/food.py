"""Fixed-capacity food store with per-item claim state."""

from __future__ import annotations

from enum import IntEnum
from threading import Lock
from typing import Sequence

import numpy as np

# Collected items are parked here for renderers; logic only looks at state.
COLLECTED_SENTINEL = (-100_000.0, -100_000.0)


class FoodState(IntEnum):
    AVAILABLE = 0
    TARGETED = 1
    COLLECTED = 2


class FoodStore:
    """Food items stored as parallel arrays indexed by food id.

    Items are appended by ``add_food`` until ``capacity`` is reached and are
    never removed. State only moves forward: AVAILABLE, TARGETED, COLLECTED.
    Claiming an item is a compare-and-set guarded by a lock, so concurrent
    scans can never hand the same item to two agents.
    """

    def __init__(self, capacity: int, rng: np.random.Generator) -> None:
        if capacity < 0:
            raise ValueError(f"Food capacity must not be negative, got {capacity}.")
        self.capacity = int(capacity)
        self.rng = rng
        self.generated = 0
        self._positions = np.zeros((self.capacity, 2), dtype=np.float64)
        self._states = np.full(self.capacity, FoodState.AVAILABLE, dtype=np.int8)
        self._claim_lock = Lock()

    def __len__(self) -> int:
        return self.generated

    @property
    def positions(self) -> np.ndarray:
        view = self._positions[: self.generated].view()
        view.flags.writeable = False
        return view

    @property
    def states(self) -> np.ndarray:
        view = self._states[: self.generated].view()
        view.flags.writeable = False
        return view

    def position(self, food_id: int) -> np.ndarray:
        self._check_id(food_id)
        return self._positions[food_id].copy()

    def state(self, food_id: int) -> FoodState:
        self._check_id(food_id)
        return FoodState(int(self._states[food_id]))

    def add_food(self, rect_min: Sequence[float], rect_max: Sequence[float], count: int) -> range:
        """Scatter ``count`` items uniformly inside the rectangle.

        Returns the range of new food ids. The rectangle is not checked
        against the field bounds.
        """
        count = int(count)
        if count < 0:
            raise ValueError(f"Food count must not be negative, got {count}.")
        if self.generated + count > self.capacity:
            raise ValueError(
                f"Adding {count} food items exceeds capacity {self.capacity} ({self.generated} already placed)."
            )
        start = self.generated
        stop = start + count
        self._positions[start:stop, 0] = self.rng.uniform(float(rect_min[0]), float(rect_max[0]), size=count)
        self._positions[start:stop, 1] = self.rng.uniform(float(rect_min[1]), float(rect_max[1]), size=count)
        self._states[start:stop] = FoodState.AVAILABLE
        self.generated = stop
        return range(start, stop)

    def place(self, position: Sequence[float]) -> int:
        """Append a single AVAILABLE item at an exact position."""
        if self.generated >= self.capacity:
            raise ValueError(f"Food store is full ({self.capacity} items).")
        food_id = self.generated
        self._positions[food_id] = (float(position[0]), float(position[1]))
        self._states[food_id] = FoodState.AVAILABLE
        self.generated += 1
        return food_id

    def try_claim(self, food_id: int) -> bool:
        """Atomically move an item from AVAILABLE to TARGETED."""
        self._check_id(food_id)
        with self._claim_lock:
            if self._states[food_id] != FoodState.AVAILABLE:
                return False
            self._states[food_id] = FoodState.TARGETED
            return True

    def claim_first_within(self, position: Sequence[float], radius: float) -> int | None:
        """Claim the first AVAILABLE item (in store order) within ``radius``.

        A linear scan over every item; candidates lost to a concurrent claim
        are skipped and the scan continues in order.
        """
        if self.generated == 0:
            return None
        offsets = self._positions[: self.generated] - np.asarray(position, dtype=np.float64)
        in_range = np.einsum("ij,ij->i", offsets, offsets) < float(radius) ** 2
        candidates = np.flatnonzero(in_range & (self._states[: self.generated] == FoodState.AVAILABLE))
        for food_id in candidates:
            if self.try_claim(int(food_id)):
                return int(food_id)
        return None

    def collect(self, food_id: int) -> None:
        """Mark a claimed item COLLECTED and park it at the sentinel position."""
        self._check_id(food_id)
        with self._claim_lock:
            if self._states[food_id] == FoodState.COLLECTED:
                raise ValueError(f"Food item {food_id} was already collected.")
            self._states[food_id] = FoodState.COLLECTED
            self._positions[food_id] = COLLECTED_SENTINEL

    def count(self, state: FoodState) -> int:
        return int(np.count_nonzero(self._states[: self.generated] == state))

    def _check_id(self, food_id: int) -> None:
        if not 0 <= food_id < self.generated:
            raise IndexError(f"Unknown food id {food_id} (store holds {self.generated}).")
