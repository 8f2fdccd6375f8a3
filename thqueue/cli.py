from __future__ import annotations
import argparse
import logging
import os
import sys
from typing import List, Optional, TextIO
import yaml

from thqueue.config import SAMPLE_CONFIG, RunConfig, config_from_dict, load_config, normalize_producer_count
from thqueue.engine.artifact import RunArtifact
from thqueue.engine.harness import Harness, RunContext
from thqueue.engine.queue import BoundedQueue
from thqueue.workers.consumer import Consumer
from thqueue.workers.producer import Producer

def build_harness(cfg: RunConfig, *, out: TextIO | None = None) -> Harness:
    q: BoundedQueue[str] = BoundedQueue(cfg.capacity, name=cfg.name)
    ctx = RunContext(queue=q, out=out or sys.stdout)
    producers = [
        Producer(f"producer-{i + 1}", sleep_s=cfg.producers.sleep_s)
        for i in range(cfg.producers.count)
    ]
    consumer = Consumer("consumer", idle_sleep_s=cfg.consumer.idle_sleep_s, echo=cfg.consumer.echo)
    return Harness(name=cfg.name, context=ctx, producers=producers, consumer=consumer, config_snapshot=cfg.to_dict())

def resolve_config(args: argparse.Namespace) -> RunConfig:
    cfg = load_config(args.config) if args.config else config_from_dict(None)
    if args.producers is not None:
        cfg.producers.count = normalize_producer_count(args.producers)
    if args.capacity is not None:
        cfg.capacity = args.capacity
    if args.quiet:
        cfg.consumer.echo = False
    return cfg

def cmd_init(directory: str = "examples") -> None:
    os.makedirs(directory, exist_ok=True)
    out = os.path.join(directory, "demo.yaml")
    if not os.path.exists(out):
        with open(out, "w", encoding="utf-8") as f:
            f.write(SAMPLE_CONFIG)
    print(f"Wrote {out}")

def cmd_run(cfg: RunConfig, *, duration: float | None = None, save_dir: str | None = None) -> RunArtifact:
    harness = build_harness(cfg)
    if duration is not None:
        artifact = harness.run_for(duration)
    else:
        artifact = harness.run_interactive(sys.stdin)

    if save_dir:
        out_path = os.path.join(save_dir, f"{artifact.run_id}.json")
        artifact.save(out_path)
        print(f"Run saved: {out_path}")
    print(
        f"Summary: produced={artifact.produced} consumed={artifact.consumed} "
        f"rejected_full={artifact.rejected_full} duration={artifact.metrics['duration_s']:.3f}s"
    )
    return artifact

def cmd_report(run_path: str) -> None:
    artifact = RunArtifact.load(run_path)
    m = artifact.metrics
    print(f"Run:      {artifact.name}")
    print(f"Run ID:   {artifact.run_id}")
    print(f"Duration: {m.get('duration_s'):.3f}s")
    print(f"Queue:    {artifact.queue.name} {artifact.queue.size}/{artifact.queue.capacity} at exit")
    print(f"Workers:  1 consumer, {artifact.producers} producers")
    print(f"Produced: {artifact.produced}")
    print(f"Consumed: {artifact.consumed}")
    print(f"Rejected: {artifact.rejected_full} (queue full)")
    print("Counters:")
    for k, v in sorted(m.get("counters", {}).items()):
        print(f"  {k}: {v}")
    samples = m.get("queue_depth_samples", [])
    if samples:
        print("Queue depth samples:")
        for s in samples:
            print(f"  {s['queue']}: {s['size']}/{s['capacity']}")

def make_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="thqueue")
    ap.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = ap.add_subparsers(dest="cmd", required=True)

    initp = sub.add_parser("init", help="write a sample YAML config")
    initp.add_argument("--dir", default="examples")

    runp = sub.add_parser("run", help="run 1 consumer and N producers on a shared queue")
    runp.add_argument("producers", nargs="?", type=int, default=None, help="number of producer threads (default 5)")
    runp.add_argument("--config", help="YAML run config path")
    runp.add_argument("--capacity", type=int, default=None, help="queue capacity (default 1000)")
    runp.add_argument("--duration", type=float, default=None, help="run for SECONDS instead of reading stdin")
    runp.add_argument("--save", metavar="DIR", default=None, help="write the run artifact as JSON into DIR")
    runp.add_argument("--quiet", action="store_true", help="do not echo consumed items")

    rep = sub.add_parser("report")
    rep.add_argument("runfile", help="Path to a run json artifact")
    return ap

def main(argv: Optional[List[str]] = None) -> None:
    ap = make_parser()
    args = ap.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)-8s %(threadName)-12s %(name)s: %(message)s",
    )

    if args.cmd == "init":
        cmd_init(args.dir)
    elif args.cmd == "run":
        try:
            cfg = resolve_config(args)
        except (OSError, ValueError, yaml.YAMLError) as e:
            ap.error(str(e))
        cmd_run(cfg, duration=args.duration, save_dir=args.save)
    elif args.cmd == "report":
        cmd_report(args.runfile)

if __name__ == "__main__":
    main()
