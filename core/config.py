from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Tuple

import yaml  # from pyyaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "HOSTDELTA_"

@dataclass(frozen=True)
class AgentConfig:
    """
    Agent settings.

    disks empty means: sample every device that backs a listed filesystem.
    """

    root: str = "/"
    poll_interval_sec: float = 60.0
    output_path: str = "./events.ndjson"
    log_level: str = "INFO"
    disks: Tuple[str, ...] = ()

def _positive_float(value: Any, name: str, default: float) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        logger.warning("Invalid %s value: %r", name, value)
        return default
    if parsed <= 0:
        logger.warning("Invalid %s value: %r", name, value)
        return default
    return parsed

def _split_disks(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        value = value.split(",")
    return tuple(d.strip() for d in value or () if d and d.strip())

def load_config(path: str = "config.yml") -> AgentConfig:
    """
    Load configuration from YAML file and override with environment variables.

    Environment variables override YAML values:
    - HOSTDELTA_ROOT: Filesystem root to read /proc and /sys from (e.g. /host)
    - HOSTDELTA_POLL_INTERVAL: Polling interval in seconds (e.g. 60)
    - HOSTDELTA_OUTPUT_PATH: Output file path (e.g. /var/log/hostdelta/events.ndjson)
    - HOSTDELTA_LOG_LEVEL: Logging level name (e.g. DEBUG)
    - HOSTDELTA_DISKS: Comma-separated disks to sample (e.g. sda,nvme0n1)

    Args:
        path: Path to the YAML configuration file

    Returns:
        AgentConfig merged from defaults, file and environment variables
    """
    # load configuration from yaml
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw: Dict[str, Any] = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        raw = {}

    defaults = AgentConfig()
    output = raw.get("output") or {}
    config: Dict[str, Any] = {
        "root": raw.get("root", defaults.root),
        "poll_interval_sec": raw.get("poll_interval_sec", defaults.poll_interval_sec),
        "output_path": output.get("path", defaults.output_path),
        "log_level": raw.get("log_level", defaults.log_level),
        "disks": raw.get("disks", defaults.disks),
    }

    # check for environment variables
    env = os.environ
    if ENV_PREFIX + "ROOT" in env:
        config["root"] = env[ENV_PREFIX + "ROOT"]
    if ENV_PREFIX + "POLL_INTERVAL" in env:
        config["poll_interval_sec"] = env[ENV_PREFIX + "POLL_INTERVAL"]
    if ENV_PREFIX + "OUTPUT_PATH" in env:
        config["output_path"] = env[ENV_PREFIX + "OUTPUT_PATH"]
    if ENV_PREFIX + "LOG_LEVEL" in env:
        config["log_level"] = env[ENV_PREFIX + "LOG_LEVEL"]
    if ENV_PREFIX + "DISKS" in env:
        config["disks"] = env[ENV_PREFIX + "DISKS"]

    return AgentConfig(
        root=str(config["root"]),
        poll_interval_sec=_positive_float(config["poll_interval_sec"], "poll interval", defaults.poll_interval_sec),
        output_path=str(config["output_path"]),
        log_level=str(config["log_level"]).strip().upper() or defaults.log_level,
        disks=_split_disks(config["disks"]),
    )
