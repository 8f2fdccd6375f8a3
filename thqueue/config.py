from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Dict
import yaml

DEFAULT_CAPACITY = 1000
DEFAULT_PRODUCERS = 5

SAMPLE_CONFIG = """name: demo
queue:
  capacity: 1000
producers:
  count: 5
  sleep_s: 0.0
consumer:
  idle_sleep_s: 0.001
  echo: true
"""

_SECTIONS = {"name", "queue", "producers", "consumer"}


@dataclass
class ProducerConfig:
    count: int = DEFAULT_PRODUCERS
    sleep_s: float = 0.0


@dataclass
class ConsumerConfig:
    idle_sleep_s: float = 0.001
    echo: bool = True


@dataclass
class RunConfig:
    name: str = "demo"
    capacity: int = DEFAULT_CAPACITY
    producers: ProducerConfig = field(default_factory=ProducerConfig)
    consumer: ConsumerConfig = field(default_factory=ConsumerConfig)

    def to_dict(self) -> dict:
        d = asdict(self)
        return {
            "name": d["name"],
            "queue": {"capacity": d["capacity"]},
            "producers": d["producers"],
            "consumer": d["consumer"],
        }


def normalize_producer_count(n: int) -> int:
    """Negative counts are taken by magnitude."""
    return -n if n < 0 else n


def _int(section: str, key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        try:
            return int(str(value), 10)
        except ValueError:
            raise ValueError(f"{section}.{key} must be an integer, got {value!r}") from None
    return value


def _seconds(section: str, key: str, value: Any) -> float:
    try:
        out = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{section}.{key} must be a number of seconds, got {value!r}") from None
    if out < 0:
        raise ValueError(f"{section}.{key} must not be negative, got {value!r}")
    return out


def _bool(section: str, key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{section}.{key} must be true or false, got {value!r}")
    return value


def config_from_dict(cfg: Dict[str, Any] | None) -> RunConfig:
    cfg = cfg or {}
    if not isinstance(cfg, dict):
        raise ValueError("Config must be a mapping")
    unknown = set(cfg) - _SECTIONS
    if unknown:
        raise ValueError(f"Unknown config section(s): {', '.join(sorted(unknown))}")

    q_cfg = cfg.get("queue", {}) or {}
    p_cfg = cfg.get("producers", {}) or {}
    c_cfg = cfg.get("consumer", {}) or {}

    return RunConfig(
        name=str(cfg.get("name", "demo")),
        capacity=_int("queue", "capacity", q_cfg.get("capacity", DEFAULT_CAPACITY)),
        producers=ProducerConfig(
            count=normalize_producer_count(_int("producers", "count", p_cfg.get("count", DEFAULT_PRODUCERS))),
            sleep_s=_seconds("producers", "sleep_s", p_cfg.get("sleep_s", 0.0)),
        ),
        consumer=ConsumerConfig(
            idle_sleep_s=_seconds("consumer", "idle_sleep_s", c_cfg.get("idle_sleep_s", 0.001)),
            echo=_bool("consumer", "echo", c_cfg.get("echo", True)),
        ),
    )


def load_config(path: str) -> RunConfig:
    with open(path, "r", encoding="utf-8") as f:
        return config_from_dict(yaml.safe_load(f))
