from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Dict
import json
import os

@dataclass
class QueueState:
    name: str
    capacity: int
    size: int

@dataclass
class RunArtifact:
    """What one harness run leaves behind: queue state, hand-off totals, raw metrics."""
    run_id: str
    name: str
    created_ts: float
    producers: int
    queue: QueueState
    produced: int
    consumed: int
    rejected_full: int
    metrics: Dict[str, Any] = field(default_factory=dict)
    config_snapshot: Dict[str, Any] = field(default_factory=dict)

    @property
    def balanced(self) -> bool:
        """True when every accepted item was consumed and the queue ended empty."""
        return self.produced == self.consumed and self.queue.size == 0

    @classmethod
    def from_metrics(cls, *, run_id: str, name: str, created_ts: float, producers: int,
                     queue: QueueState, metrics: Dict[str, Any],
                     config_snapshot: Dict[str, Any] | None = None) -> "RunArtifact":
        return cls(
            run_id=run_id,
            name=name,
            created_ts=created_ts,
            producers=producers,
            queue=queue,
            produced=metrics["produced"],
            consumed=metrics["consumed"],
            rejected_full=metrics["rejected_full"],
            metrics=metrics,
            config_snapshot=config_snapshot or {},
        )

    def save(self, path: str) -> None:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(asdict(self), f, indent=2)

    @classmethod
    def load(cls, path: str) -> "RunArtifact":
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        data["queue"] = QueueState(**data["queue"])
        return cls(**data)
