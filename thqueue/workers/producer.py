from __future__ import annotations
from typing import TYPE_CHECKING
import logging
import time

from thqueue.engine.sequence import new_item

if TYPE_CHECKING:
    from thqueue.engine.harness import RunContext

logger = logging.getLogger(__name__)

class Producer:
    """Offers sequence-tagged strings with try_put() until the run is stopped."""
    def __init__(self, name: str, *, sleep_s: float = 0.0):
        self.name = name
        self.sleep_s = sleep_s

    def run(self, ctx: RunContext) -> None:
        logger.info("%s started", self.name)
        while not ctx.stop.is_set():
            item = new_item(ctx.seq, source=self.name)
            if ctx.queue.try_put(item):
                ctx.metrics.inc(f"{self.name}.put_ok")
            else:
                ctx.metrics.inc(f"{self.name}.put_full")
            # sleep(0) still yields to the other threads
            time.sleep(self.sleep_s)
        logger.info("%s stopped", self.name)
