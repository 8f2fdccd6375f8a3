from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TextIO
import logging
import sys
import threading
import time
import uuid

from .artifact import QueueState, RunArtifact
from .metrics import Metrics
from .queue import BoundedQueue
from .sequence import SequenceCounter
from thqueue.workers.consumer import Consumer
from thqueue.workers.producer import Producer

logger = logging.getLogger(__name__)

PROMPT = "Enter (for info or ^D for exit)"

@dataclass
class RunContext:
    """Everything the workers of one run share. Handed to each thread at spawn time."""
    queue: BoundedQueue[str]
    stop: threading.Event = field(default_factory=threading.Event)
    producers_stopped: threading.Event = field(default_factory=threading.Event)
    metrics: Metrics = field(default_factory=Metrics)
    seq: SequenceCounter = field(default_factory=SequenceCounter)
    out: TextIO = field(default_factory=lambda: sys.stdout)

@dataclass
class Harness:
    name: str
    context: RunContext
    producers: List[Producer]
    consumer: Consumer
    config_snapshot: Dict[str, Any] = field(default_factory=dict)
    run_id: str = field(default_factory=lambda: time.strftime("%Y%m%d_%H%M%S") + "_" + uuid.uuid4().hex[:8])
    _consumer_thread: Optional[threading.Thread] = field(default=None, init=False, repr=False)
    _producer_threads: List[threading.Thread] = field(default_factory=list, init=False, repr=False)

    def start(self) -> None:
        if self._consumer_thread is not None:
            raise RuntimeError(f"Harness {self.name} already started")
        ctx = self.context
        print(f"test 1 consumer and {len(self.producers)} producers", file=ctx.out, flush=True)

        # Consumer first so it is already polling when items arrive.
        self._consumer_thread = threading.Thread(target=self.consumer.run, args=(ctx,), name=self.consumer.name)
        self._consumer_thread.start()
        for p in self.producers:
            t = threading.Thread(target=p.run, args=(ctx,), name=p.name)
            t.start()
            self._producer_threads.append(t)
        logger.info("Harness %s started: %d producers, queue %r", self.name, len(self.producers), ctx.queue)

    def stop(self) -> None:
        """Signal the stop flag and join every thread. Safe to call twice."""
        ctx = self.context
        ctx.stop.set()
        for t in self._producer_threads:
            t.join()
        # the consumer drains whatever the producers left before exiting
        ctx.producers_stopped.set()
        if self._consumer_thread is not None:
            self._consumer_thread.join()
        ctx.metrics.finalize()
        logger.info("Harness %s stopped", self.name)

    def info(self) -> dict:
        ctx = self.context
        size, capacity = ctx.queue.snapshot()
        ctx.metrics.sample_queue_depth(ctx.queue.name, size, capacity)
        return {
            "size": size,
            "capacity": capacity,
            "produced": ctx.metrics.total(".put_ok"),
            "consumed": ctx.metrics.total(".get_ok"),
        }

    def print_info(self) -> None:
        i = self.info()
        print(
            f"queue {self.context.queue.name}: {i['size']}/{i['capacity']} "
            f"produced={i['produced']} consumed={i['consumed']}",
            file=self.context.out,
            flush=True,
        )

    def run_interactive(self, stdin: TextIO | None = None) -> RunArtifact:
        """Run until end-of-input; every line read prints an info snapshot."""
        stdin = stdin or sys.stdin
        out = self.context.out
        self.start()
        try:
            while True:
                print(PROMPT, file=out, flush=True)
                line = stdin.readline()
                if not line:
                    break
                self.print_info()
        finally:
            print("Wait all threads", file=out, flush=True)
            self.stop()
        return self.artifact()

    def run_for(self, duration_s: float) -> RunArtifact:
        self.start()
        try:
            self.context.stop.wait(duration_s)
        finally:
            self.stop()
        return self.artifact()

    def artifact(self) -> RunArtifact:
        q = self.context.queue
        size, capacity = q.snapshot()
        return RunArtifact.from_metrics(
            run_id=self.run_id,
            name=self.name,
            created_ts=time.time(),
            producers=len(self.producers),
            queue=QueueState(name=q.name, capacity=capacity, size=size),
            metrics=self.context.metrics.summary(),
            config_snapshot=self.config_snapshot,
        )
