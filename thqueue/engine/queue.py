from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import Callable, Generic, Optional, Protocol, TypeVar
import logging
import sys
import threading

T = TypeVar("T")

MAX_CAPACITY = sys.maxsize

logger = logging.getLogger(__name__)


class Container(Protocol[T]):
    """Storage a BoundedQueue sits on: push at tail, peek/pop at head, count."""

    def append(self, item: T) -> None: ...

    def popleft(self) -> T: ...

    def __getitem__(self, index: int) -> T: ...

    def __len__(self) -> int: ...


@dataclass
class Slot(Generic[T]):
    """Output holder filled by get_into() / try_get()."""
    value: Optional[T] = None
    filled: bool = False

    def put(self, item: T) -> None:
        self.value = item
        self.filled = True


class BoundedQueue(Generic[T]):
    """
    Thread-safe FIFO with a capacity bound.

    put()/get() block while the queue is full/empty; try_put()/try_get()
    return False instead. One lock guards the container and the capacity,
    with two conditions on it: not_empty (consumers park here) and
    not_full (producers park here).

    Only one waiter is woken per transition: put() signals not_empty when
    the queue goes from empty to non-empty, get() signals not_full when it
    goes from full to one-below-full. A woken waiter that finds room (or
    items) left over after its own operation passes the signal on to the
    next waiter, so back-to-back transitions are not lost.

    Changing the capacity wakes nobody. Producers parked under the old
    capacity are released by the next removal that leaves the queue one
    below the capacity in force at that time.
    """
    def __init__(
        self,
        capacity: int = MAX_CAPACITY,
        *,
        name: str = "queue",
        container: Callable[[], Container[T]] = deque,
    ):
        self.name = name
        self._items: Container[T] = container()
        self._capacity = max(int(capacity), 1)
        self._lock = threading.Lock()
        self._not_empty = threading.Condition(self._lock)
        self._not_full = threading.Condition(self._lock)

    # -- introspection (snapshots only) --

    def empty(self) -> bool:
        with self._lock:
            return len(self._items) == 0

    def qsize(self) -> int:
        with self._lock:
            return len(self._items)

    def __len__(self) -> int:
        return self.qsize()

    @property
    def capacity(self) -> int:
        with self._lock:
            return self._capacity

    @capacity.setter
    def capacity(self, value: int) -> None:
        with self._lock:
            logger.debug("%s: capacity %d -> %d (size %d)", self.name, self._capacity, value, len(self._items))
            self._capacity = value

    def set_capacity(self, value: int) -> None:
        self.capacity = value

    def snapshot(self) -> tuple[int, int]:
        """(size, capacity) read under one lock acquisition."""
        with self._lock:
            return len(self._items), self._capacity

    # -- insertion --

    def put(self, item: T) -> None:
        with self._lock:
            waited = False
            while len(self._items) >= self._capacity:
                waited = True
                self._not_full.wait()
            self._insert(item)
            if waited and len(self._items) < self._capacity:
                self._not_full.notify()

    def try_put(self, item: T) -> bool:
        with self._lock:
            if len(self._items) >= self._capacity:
                return False
            self._insert(item)
            return True

    # -- removal --

    def get(self) -> T:
        with self._lock:
            waited = False
            while len(self._items) == 0:
                waited = True
                self._not_empty.wait()
            item = self._remove()
            if waited and len(self._items) > 0:
                self._not_empty.notify()
            return item

    def get_into(self, slot: Slot[T]) -> None:
        slot.put(self.get())

    def try_get(self, slot: Slot[T]) -> bool:
        with self._lock:
            if len(self._items) == 0:
                return False
            slot.put(self._remove())
            return True

    # -- helpers; caller holds self._lock --

    def _insert(self, item: T) -> None:
        was_empty = len(self._items) == 0
        self._items.append(item)
        if was_empty:
            self._not_empty.notify()

    def _remove(self) -> T:
        item = self._items.popleft()
        if len(self._items) == self._capacity - 1:
            self._not_full.notify()
        return item

    def __repr__(self) -> str:
        with self._lock:
            cap = "unbounded" if self._capacity == MAX_CAPACITY else self._capacity
            return f"BoundedQueue(name={self.name!r}, size={len(self._items)}, capacity={cap})"
