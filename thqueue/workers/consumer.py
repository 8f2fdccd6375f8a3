from __future__ import annotations
from typing import TYPE_CHECKING, Callable, Optional
import logging
import time

from thqueue.engine.queue import Slot

if TYPE_CHECKING:
    from thqueue.engine.harness import RunContext

logger = logging.getLogger(__name__)

class Consumer:
    """
    Drains the queue with try_get(), sleeping briefly whenever it is empty.

    Exits once every producer has stopped and a try_get() comes back
    empty, so nothing produced during the run is left behind.
    """
    def __init__(
        self,
        name: str,
        *,
        idle_sleep_s: float = 0.001,
        echo: bool = True,
        on_item: Optional[Callable[[str], None]] = None,
    ):
        self.name = name
        self.idle_sleep_s = idle_sleep_s
        self.echo = echo
        self.on_item = on_item

    def run(self, ctx: RunContext) -> None:
        logger.info("%s started", self.name)
        slot: Slot[str] = Slot()
        while True:
            if ctx.queue.try_get(slot):
                ctx.metrics.inc(f"{self.name}.get_ok")
                if self.echo:
                    print(f"Consumer get data : {slot.value}", file=ctx.out, flush=True)
                if self.on_item is not None:
                    self.on_item(slot.value)
                continue
            if ctx.producers_stopped.is_set():
                break
            ctx.metrics.inc(f"{self.name}.get_empty")
            time.sleep(self.idle_sleep_s)
        logger.info("%s stopped", self.name)
