from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .errors import SchedulerError, WorkloadFormatError
from .models import Algorithm, Config, Process

logger = logging.getLogger(__name__)

PALETTE = ["#ef4444", "#f97316", "#eab308", "#22c55e", "#06b6d4", "#3b82f6", "#8b5cf6", "#d946ef"]

# Accepted column / key spellings, first one is the canonical name.
_FIELD_ALIASES = {
    "pid": ("pid", "id"),
    "arrival_time": ("arrival_time", "arrival"),
    "burst_time": ("burst_time", "burst"),
    "priority": ("priority",),
    "color": ("color",),
}


def next_pid(processes: Sequence[Process]) -> int:
    """
    Id for a newly added process: one past the largest id, or 1 if empty.
    """
    return max((p.pid for p in processes), default=0) + 1


def default_color(pid: int) -> str:
    return PALETTE[pid % len(PALETTE)]


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.
    """
    processes, _ = load_scenario(path)
    return processes


def load_scenario(path: str | Path) -> Tuple[List[Process], Optional[Config]]:
    """
    Load processes and, for JSON scenarios that carry one, the config.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes, config = _load_json(path)
    elif suffix == ".csv":
        processes, config = _load_csv(path), None
    else:
        raise WorkloadFormatError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    logger.info("Loaded %d processes from %s", len(processes), path)
    return processes, config


def save_scenario(path: str | Path, processes: Sequence[Process], config: Optional[Config] = None) -> Path:
    """
    Write processes (and config, if given) as a JSON scenario file.
    """
    path = Path(path)
    data: Dict[str, Any] = {
        "processes": [
            {
                "pid": p.pid,
                "arrival_time": p.arrival_time,
                "burst_time": p.burst_time,
                "priority": p.priority,
                "color": p.color,
            }
            for p in processes
        ]
    }
    if config is not None:
        data["config"] = config_to_mapping(config)

    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")

    logger.info("Saved %d processes to %s", len(processes), path)
    return path


def config_to_mapping(config: Config) -> Dict[str, Any]:
    return {
        "algorithm": Algorithm.parse(config.algorithm).value,
        "quantum": config.quantum,
        "context_switch_cost": config.context_switch_cost,
    }


def config_from_mapping(mapping: Mapping[str, Any]) -> Config:
    if not isinstance(mapping, Mapping):
        raise WorkloadFormatError("Scenario 'config' must be an object")
    if "algorithm" not in mapping:
        raise WorkloadFormatError("Scenario config is missing 'algorithm'")

    try:
        algorithm = Algorithm.parse(mapping["algorithm"])
        quantum = int(mapping.get("quantum", 2))
        switch = int(mapping.get("context_switch_cost", mapping.get("contextSwitch", 0)))
    except SchedulerError:
        raise
    except (TypeError, ValueError) as exc:
        raise WorkloadFormatError(f"Invalid config entry: {mapping!r}") from exc

    return Config(algorithm=algorithm, quantum=quantum, context_switch_cost=switch)


def _load_json(path: Path) -> Tuple[List[Process], Optional[Config]]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise WorkloadFormatError(f"{path}: invalid JSON ({exc})") from exc

    config: Optional[Config] = None
    if isinstance(raw, dict):
        if "config" in raw:
            config = config_from_mapping(raw["config"])
        raw = raw.get("processes")

    if not isinstance(raw, list):
        raise WorkloadFormatError("JSON workload must be a list of process objects")

    processes = [_process_from_mapping(entry) for entry in raw]
    return processes, config


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            processes.append(_process_from_mapping(row))
    return processes


def _lookup(mapping: Mapping[str, Any], field: str) -> Any:
    for key in _FIELD_ALIASES[field]:
        value = mapping.get(key)
        if value not in (None, ""):
            return value
    return None


def _process_from_mapping(mapping) -> Process:
    if not isinstance(mapping, Mapping):
        raise WorkloadFormatError(f"Invalid process entry: {mapping!r}")

    try:
        pid = int(_lookup(mapping, "pid"))
        arrival_time = int(_lookup(mapping, "arrival_time"))
        burst_time = int(_lookup(mapping, "burst_time"))
    except (TypeError, ValueError) as exc:
        raise WorkloadFormatError(f"Invalid process entry: {mapping!r}") from exc

    priority_val = _lookup(mapping, "priority")
    try:
        priority = int(priority_val) if priority_val is not None else 0
    except (TypeError, ValueError) as exc:
        raise WorkloadFormatError(f"Invalid priority in entry: {mapping!r}") from exc

    color = _lookup(mapping, "color")

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
        color=str(color) if color is not None else default_color(pid),
    )
