# -*- coding: utf-8 -*-
import json
import multiprocessing
from typing import Any, Dict, Optional

SEED_BYTES = 32
ADDRESS_MARKER = "0x"
ADDRESS_LENGTH = 42  # "0x" + 40 hex chars

DEFAULT_LIMIT = 100
DEFAULT_OUTPUT_FILE = "results.txt"
DEFAULT_STATUS_INTERVAL = 60
DEFAULT_ADJACENT_LENGTH = 5
DEFAULT_START_METHOD = "spawn"
START_METHODS = ("spawn", "fork", "forkserver")

MUTATION_ALPHABET = "abcdef0123456789"
DEFAULT_PREFIXES = (
    "0xaaaa", "0xbbbb", "0xcccc", "0xdddd", "0xeeee",
    "0x0000", "0x1111", "0x2222", "0x3333", "0x4444",
    "0x5555", "0x6666", "0x7777", "0x8888", "0x9999",
    "0xace",
)
DEFAULT_SUFFIXES = ("",)

MODES = ("prefix-suffix", "mutation", "adjacent")


def default_workers() -> int:
    try:
        return max(multiprocessing.cpu_count(), 1)
    except NotImplementedError:
        return 1


class SearchSetting:
    """Immutable parameters of one search run."""

    def __init__(
        self,
        spec,
        limit: int = DEFAULT_LIMIT,
        workers: Optional[int] = None,
        output_file: str = DEFAULT_OUTPUT_FILE,
        status_interval: float = DEFAULT_STATUS_INTERVAL,
        queue_capacity: Optional[int] = None,
        start_method: str = DEFAULT_START_METHOD,
    ):
        workers = default_workers() if workers is None else int(workers)
        if workers < 1:
            raise ValueError("workers must be at least 1")
        if int(limit) < 1:
            raise ValueError("limit must be at least 1")
        if float(status_interval) < 0:
            raise ValueError("status interval must not be negative")
        # bounded result queue: one slot per worker unless configured
        queue_capacity = workers if queue_capacity is None else int(queue_capacity)
        if queue_capacity < 1:
            raise ValueError("queue capacity must be at least 1")
        if start_method not in START_METHODS:
            raise ValueError("start method must be one of {}".format(", ".join(START_METHODS)))
        self.spec = spec
        self.limit = int(limit)
        self.workers = workers
        self.output_file = output_file
        self.status_interval = float(status_interval)
        self.queue_capacity = queue_capacity
        self.start_method = start_method

    def __repr__(self):
        return "SearchSetting(spec={!r}, limit={}, workers={}, output_file={!r})".format(
            self.spec, self.limit, self.workers, self.output_file
        )


def _pick(group: Dict[str, Any], cfg: Dict[str, Any], keys, default):
    for key in keys:
        if key in group:
            return group[key]
    for key in keys:
        if key in cfg:
            return cfg[key]
    return default


def _patterns(value) -> tuple:
    # a single pattern may be given as a plain string
    if isinstance(value, str):
        return (value,)
    return tuple(value or ())


def load_config_file(path: str, defaults: Dict[str, Any]) -> Dict[str, Any]:
    """Read a JSON config file and merge it over ``defaults``.

    Keys may be nested in ``search``/``performance``/``output`` groups or given
    flat, in camelCase or snake_case. Keys missing from the file keep their
    value from ``defaults``.
    """
    with open(path, "r", encoding="utf-8") as f:
        cfg = json.load(f)
    if not isinstance(cfg, dict):
        raise ValueError("Config root must be a JSON object")

    search_cfg = cfg.get("search", {}) if isinstance(cfg.get("search", {}), dict) else {}
    perf_cfg = cfg.get("performance", {}) if isinstance(cfg.get("performance", {}), dict) else {}
    out_cfg = cfg.get("output", {}) if isinstance(cfg.get("output", {}), dict) else {}

    merged = dict(defaults)
    merged["mode"] = _pick(search_cfg, cfg, ("mode",), defaults.get("mode"))
    merged["starts_with"] = _patterns(_pick(search_cfg, cfg, ("startsWith", "starts_with", "prefixes"), defaults.get("starts_with", ())))
    merged["ends_with"] = _patterns(_pick(search_cfg, cfg, ("endsWith", "ends_with", "suffixes"), defaults.get("ends_with", ())))
    merged["repeat_prefix"] = _pick(search_cfg, cfg, ("repeatPrefix", "repeat_prefix"), defaults.get("repeat_prefix"))
    merged["repeat_suffix"] = _pick(search_cfg, cfg, ("repeatSuffix", "repeat_suffix"), defaults.get("repeat_suffix"))
    merged["alphabet"] = _pick(search_cfg, cfg, ("alphabet",), defaults.get("alphabet"))
    merged["adjacent_length"] = _pick(search_cfg, cfg, ("adjacentLength", "adjacent_length"), defaults.get("adjacent_length"))
    merged["count"] = _pick(search_cfg, cfg, ("count", "limit"), defaults.get("count"))

    merged["workers"] = _pick(perf_cfg, cfg, ("workers", "workerCount", "worker_count"), defaults.get("workers"))
    merged["queue_capacity"] = _pick(perf_cfg, cfg, ("queueCapacity", "queue_capacity"), defaults.get("queue_capacity"))
    merged["start_method"] = _pick(perf_cfg, cfg, ("startMethod", "start_method"), defaults.get("start_method"))

    merged["output"] = _pick(out_cfg, cfg, ("file", "outputFile", "output_file"), defaults.get("output"))
    merged["status_interval"] = _pick(out_cfg, cfg, ("statusInterval", "status_interval"), defaults.get("status_interval"))
    return merged
