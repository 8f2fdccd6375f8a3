from collections import deque
from typing import Any

from hypothesis import given
from hypothesis import strategies as st
from hypothesis.stateful import (
    RuleBasedStateMachine,
    initialize,
    invariant,
    precondition,
    rule,
)

from thqueue.engine.queue import BoundedQueue, Slot


@st.composite
def capacity_and_items(draw: Any) -> tuple[int, list[str]]:
    """Return (capacity, items) with no more items than the capacity."""
    capacity: int = draw(st.integers(min_value=1, max_value=64))
    items: list[str] = draw(st.lists(st.text(max_size=8), max_size=capacity))
    return capacity, items


@given(data=capacity_and_items())
def test_fifo_order(data: tuple[int, list[str]]) -> None:
    """Items come out in the order a single thread put them in."""
    capacity, items = data
    queue: BoundedQueue[str] = BoundedQueue(capacity)

    for item in items:
        assert queue.try_put(item)
    dequeued: list[str] = []
    slot: Slot[str] = Slot()
    while queue.try_get(slot):
        dequeued.append(slot.value)

    assert dequeued == items


@given(capacity=st.integers(min_value=1, max_value=64))
def test_try_put_full(capacity: int) -> None:
    """try_put on a full queue returns False and leaves the size alone."""
    queue: BoundedQueue[int] = BoundedQueue(capacity)
    for i in range(capacity):
        queue.put(i)

    assert queue.try_put(-1) is False
    assert queue.qsize() == capacity
    assert queue.get() == 0


def test_try_get_empty_leaves_slot_untouched() -> None:
    """try_get on an empty queue returns False without writing the slot."""
    queue: BoundedQueue[str] = BoundedQueue(4)
    slot: Slot[str] = Slot(value='previous')

    assert queue.try_get(slot) is False
    assert slot.value == 'previous'
    assert slot.filled is False
    assert queue.qsize() == 0


def test_capacity_two_sequence() -> None:
    """put/put/try_put/get/try_put/get/get on a capacity 2 queue."""
    queue: BoundedQueue[str] = BoundedQueue(2)

    queue.put('a')
    queue.put('b')
    assert queue.try_put('c') is False
    assert queue.get() == 'a'
    assert queue.try_put('c') is True
    assert queue.get() == 'b'
    assert queue.get() == 'c'
    assert queue.empty()


def test_unbounded_queue_accepts_many_items() -> None:
    """The default queue never rejects a put."""
    queue: BoundedQueue[int] = BoundedQueue()

    assert all(queue.try_put(i) for i in range(1000))
    assert queue.qsize() == 1000


def test_get_into_fills_slot() -> None:
    """get_into delivers the head item through the slot."""
    queue: BoundedQueue[str] = BoundedQueue(3)
    queue.put('first')
    queue.put('second')
    slot: Slot[str] = Slot()

    queue.get_into(slot)

    assert slot.filled
    assert slot.value == 'first'
    assert queue.qsize() == 1


def test_removed_item_is_not_retained() -> None:
    """After removal the queue holds no reference to the item."""
    queue: BoundedQueue[list] = BoundedQueue(2)
    item: list = []
    queue.put(item)

    assert queue.get() is item
    assert all(stored is not item for stored in queue._items)


def test_lowering_capacity_does_not_evict() -> None:
    """Shrinking below the current size keeps every item."""
    queue: BoundedQueue[int] = BoundedQueue(5)
    for i in range(3):
        queue.put(i)

    queue.capacity = 1

    assert queue.qsize() == 3
    assert queue.try_put(3) is False
    assert queue.get() == 0
    assert queue.try_put(3) is False
    assert queue.get() == 1
    assert queue.try_put(3) is False
    assert queue.get() == 2
    assert queue.try_put(3) is True


def test_snapshot_pairs_size_with_capacity() -> None:
    """snapshot() returns the size and the capacity from the same moment."""
    queue: BoundedQueue[int] = BoundedQueue(4)
    queue.put(1)
    queue.put(2)
    queue.capacity = 1

    assert queue.snapshot() == (2, 1)


def test_set_capacity_does_not_clamp() -> None:
    """Unlike the constructor, the setter stores the value as given."""
    queue: BoundedQueue[int] = BoundedQueue(4)

    queue.set_capacity(0)

    assert queue.capacity == 0
    assert queue.try_put(1) is False


class ListBackedContainer:
    """Minimal container: tail insert, head peek/pop, count."""

    def __init__(self) -> None:
        self.data: list = []
        self.appends = 0

    def append(self, item) -> None:
        self.appends += 1
        self.data.append(item)

    def popleft(self):
        return self.data.pop(0)

    def __getitem__(self, index: int):
        return self.data[index]

    def __len__(self) -> int:
        return len(self.data)


def test_custom_container_strategy() -> None:
    """The queue runs on any container with the tail/head interface."""
    backing = ListBackedContainer()
    queue: BoundedQueue[str] = BoundedQueue(2, container=lambda: backing)

    queue.put('x')
    queue.put('y')

    assert queue.try_put('z') is False
    assert backing.appends == 2
    assert queue.get() == 'x'
    assert backing.data == ['y']


def test_default_container_is_deque() -> None:
    assert isinstance(BoundedQueue(2)._items, deque)


class QueueStateMachine(RuleBasedStateMachine):
    """Non-blocking operations checked against a list model."""

    capacity: int
    queue: BoundedQueue[int]
    model: list[int]

    @initialize(capacity=st.integers(min_value=1, max_value=16))
    def init_queue(self, capacity: int) -> None:
        self.capacity = capacity
        self.queue = BoundedQueue(capacity)
        self.model = []

    @rule(item=st.integers())
    def try_put(self, item: int) -> None:
        """try_put succeeds exactly when the model is below capacity."""
        accepted = self.queue.try_put(item)
        assert accepted == (len(self.model) < self.capacity)
        if accepted:
            self.model.append(item)

    @rule()
    @precondition(lambda self: len(self.model) < self.capacity)
    def put(self) -> None:
        """Blocking put never waits while there is room."""
        self.queue.put(len(self.model))
        self.model.append(len(self.model))

    @rule()
    def try_get(self) -> None:
        """try_get returns the model head, or False when empty."""
        slot: Slot[int] = Slot()
        got = self.queue.try_get(slot)
        assert got == bool(self.model)
        if got:
            assert slot.value == self.model.pop(0)

    @rule()
    @precondition(lambda self: len(self.model) > 0)
    def get(self) -> None:
        assert self.queue.get() == self.model.pop(0)

    @rule(capacity=st.integers(min_value=1, max_value=16))
    def set_capacity(self, capacity: int) -> None:
        self.queue.capacity = capacity
        self.capacity = capacity

    @invariant()
    def check_length(self) -> None:
        assert self.queue.qsize() == len(self.model)

    @invariant()
    def check_capacity(self) -> None:
        assert self.queue.capacity == self.capacity

    @invariant()
    def check_empty_behavior(self) -> None:
        assert self.queue.empty() == (len(self.model) == 0)


TestQueueStateMachine = QueueStateMachine.TestCase
