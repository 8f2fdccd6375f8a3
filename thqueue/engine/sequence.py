from __future__ import annotations
from dataclasses import dataclass, field
import itertools
import threading

@dataclass
class SequenceCounter:
    """Process-wide item numbering shared by every producer of one run."""
    start: int = 0
    _counter: "itertools.count[int]" = field(init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __post_init__(self) -> None:
        self._counter = itertools.count(self.start)

    def next(self) -> int:
        with self._lock:
            return next(self._counter)

def new_item(seq: SequenceCounter, *, source: str | None = None) -> str:
    source = source or threading.current_thread().name
    return f"seq = {seq.next()} from {source}"

def parse_item(item: str) -> tuple[int, str]:
    """Inverse of new_item(): returns (sequence number, source)."""
    head, sep, source = item.partition(" from ")
    if not sep or not head.startswith("seq = "):
        raise ValueError(f"Not a tagged item: {item!r}")
    return int(head[len("seq = "):]), source
