"""
Training and utility helpers.

This module centralizes common functionality used across the project:

- loading the global training configuration (config/train.yaml)
- ensuring directories exist before writing files
- setting random seeds for reproducibility
- the explicit training context handed to components that need a seed
- constructing loggers that respect config/logging settings

The training pipeline and the command-line scripts rely on these utilities.
"""

from __future__ import annotations

import logging
import os
import random
from dataclasses import dataclass
from typing import Any, Dict, Optional

import numpy as np
import yaml


DEFAULT_TRAIN_CONFIG_PATH = "config/train.yaml"


# ---------------------------------------------------------------------------
# Config loading
# ---------------------------------------------------------------------------


def load_train_config(
    config_path: str = DEFAULT_TRAIN_CONFIG_PATH,
) -> Dict[str, Any]:
    """
    Load and return the global training configuration dictionary.

    Parameters
    ----------
    config_path : str
        Path to the train YAML configuration file.

    Returns
    -------
    Dict[str, Any]
        Parsed configuration with sections such as "general", "paths",
        "logging" and "save".

    Raises
    ------
    FileNotFoundError
        If the YAML file does not exist.
    ValueError
        If the YAML file is empty or cannot be parsed.
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Train config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)

    if cfg is None:
        raise ValueError(f"Train config file is empty or invalid: {config_path}")

    # We keep this permissive: downstream code will access the keys it needs.
    return cfg


# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------


def ensure_dir_exists(path: str) -> None:
    """
    Ensure that a directory exists (create it if necessary).

    Parameters
    ----------
    path : str
        Directory path.
    """
    if path and not os.path.exists(path):
        os.makedirs(path, exist_ok=True)


# ---------------------------------------------------------------------------
# Reproducibility utilities
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TrainingContext:
    """
    Settings shared by every component of one training run.

    The context is created once per run and passed explicitly to the
    builders that need reproducibility (currently the classifier).
    """

    seed: int = 1
    deterministic: bool = True

    @classmethod
    def from_config(cls, train_cfg: Dict[str, Any]) -> "TrainingContext":
        general_cfg = train_cfg.get("general", {}) or {}
        return cls(
            seed=int(general_cfg.get("random_state", 1)),
            deterministic=bool(general_cfg.get("deterministic", True)),
        )


def seed_everything(seed: int = 1) -> None:
    """
    Seed the Python and NumPy RNGs for reproducible experiments.

    Parameters
    ----------
    seed : int
        Global random seed.
    """
    random.seed(seed)
    np.random.seed(seed)


# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------


def _parse_log_level(level_str: str) -> int:
    """
    Convert a string log level into a logging module constant.

    Parameters
    ----------
    level_str : str
        One of: "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL" (case-insensitive).

    Returns
    -------
    int
        Corresponding logging level.
    """
    level_str = (level_str or "INFO").upper()
    return {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }.get(level_str, logging.INFO)


def get_logger(
    name: str,
    config: Dict[str, Any],
    log_file_suffix: Optional[str] = None,
) -> logging.Logger:
    """
    Construct and return a logger that respects the logging section of
    the global training config.

    Parameters
    ----------
    name : str
        Logger name.
    config : Dict[str, Any]
        Global training configuration.
    log_file_suffix : Optional[str]
        Optional suffix appended to the log file name (e.g., "tagger").

    Returns
    -------
    logging.Logger
        Configured logger instance.
    """
    logger = logging.getLogger(name)

    # If the logger already has handlers, assume it's already configured.
    if logger.handlers:
        return logger

    logging_cfg = config.get("logging", {}) or {}
    paths_cfg = config.get("paths", {}) or {}

    level = _parse_log_level(logging_cfg.get("level", "INFO"))
    logger.setLevel(level)

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Optional file handler
    if bool(logging_cfg.get("to_file", True)):
        logs_dir = paths_cfg.get("logs_dir", "experiments/logs")
        ensure_dir_exists(logs_dir)

        file_prefix = logging_cfg.get("file_prefix", "training_log")
        if log_file_suffix:
            filename = f"{file_prefix}_{log_file_suffix}.log"
        else:
            filename = f"{file_prefix}.log"

        file_handler = logging.FileHandler(
            os.path.join(logs_dir, filename), encoding="utf-8"
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
