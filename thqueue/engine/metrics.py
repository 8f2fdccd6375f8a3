from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List
import threading
import time

@dataclass
class Metrics:
    counters: Dict[str, int] = field(default_factory=dict)
    queue_depth_samples: List[dict] = field(default_factory=list)
    started_ts: float = field(default_factory=time.time)
    finished_ts: float | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def inc(self, key: str, n: int = 1) -> None:
        with self._lock:
            self.counters[key] = self.counters.get(key, 0) + n

    def total(self, suffix: str) -> int:
        """Sum of every counter whose key ends with `suffix` (e.g. ".put_ok")."""
        with self._lock:
            return sum(v for k, v in self.counters.items() if k.endswith(suffix))

    def sample_queue_depth(self, name: str, size: int, capacity: int) -> None:
        with self._lock:
            self.queue_depth_samples.append({"queue": name, "size": size, "capacity": capacity, "_ts": time.time()})

    def finalize(self) -> None:
        self.finished_ts = time.time()

    def summary(self) -> dict:
        dur = (self.finished_ts or time.time()) - self.started_ts
        produced = self.total(".put_ok")
        consumed = self.total(".get_ok")
        with self._lock:
            counters = dict(self.counters)
            samples = list(self.queue_depth_samples)
        return {
            "duration_s": dur,
            "counters": counters,
            "produced": produced,
            "consumed": consumed,
            "rejected_full": sum(v for k, v in counters.items() if k.endswith(".put_full")),
            "throughput_per_s": (consumed / dur if dur > 0 else None),
            "queue_depth_samples": samples,
        }
