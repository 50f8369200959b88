from __future__ import annotations
import os
import json
import copy
import logging

CONFIG_FILE = "config.json"

# Bounds for the 3-axis arm: coordinates, then duration/time to target in ms
DEFAULT_CONFIG = {
    "point_dim": 3,
    "min": {"point": [-1.0, 40.0, -36.0], "duration": 3, "timeToTarget": 1},
    "max": {"point": [4.0, 230.0, 75.0], "duration": 3000, "timeToTarget": 10000},
    "seed": {"point": [2.5, 53.0, 19.7], "duration": 100, "timeToTarget": 300},
    "last_file": "",
}


def load_config(path: str = CONFIG_FILE) -> dict:
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    if os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded = json.load(f)
        except (OSError, ValueError) as e:
            logging.warning(f"Ignoring config {path}: {e}")
            return cfg
        if isinstance(loaded, dict):
            cfg.update(loaded)
        else:
            logging.warning(f"Ignoring config {path}: not a JSON object")
    return cfg


def save_config(cfg: dict, path: str = CONFIG_FILE):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(cfg, f, indent=2)
