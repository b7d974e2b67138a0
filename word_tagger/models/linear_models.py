"""
Linear model builders for word tagging.

The tagger is a one-vs-all ensemble of averaged perceptrons: one binary
perceptron per tag, with the tag of the highest decision score predicted.

Hyperparameters are read from config/model.yaml so they can be changed
without modifying code. The random seed is taken from the explicit
TrainingContext of the run. The training pipeline (fit/predict, metrics,
persistence) is implemented in word_tagger/training/train_tagger.py.
"""

from __future__ import annotations

import os
from typing import Dict, Any

import yaml
from sklearn.linear_model import SGDClassifier
from sklearn.multiclass import OneVsRestClassifier

from word_tagger.utils.training_utils import TrainingContext


DEFAULT_MODEL_CONFIG_PATH = "config/model.yaml"


# ---------------------------------------------------------------------------
# Config loading
# ---------------------------------------------------------------------------


def load_model_config(config_path: str = DEFAULT_MODEL_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load and return the model configuration dictionary.

    Parameters
    ----------
    config_path : str
        Path to the model YAML configuration file.

    Returns
    -------
    Dict[str, Any]
        Parsed configuration with "features" and "classifier" sections.

    Raises
    ------
    FileNotFoundError
        If the YAML file does not exist.
    ValueError
        If the YAML file is empty or cannot be parsed.
    KeyError
        If required sections are missing.
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Model config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)

    if cfg is None:
        raise ValueError(f"Model config file is empty or invalid: {config_path}")

    for section in ("features", "classifier"):
        if section not in cfg:
            raise KeyError(f'Missing "{section}" section in model config: {config_path}')

    return cfg


# ---------------------------------------------------------------------------
# Model builders
# ---------------------------------------------------------------------------


def build_averaged_perceptron(cfg: Dict[str, Any], context: TrainingContext) -> SGDClassifier:
    mcfg = (cfg["classifier"] or {}).get("averaged_perceptron", {}) or {}
    return SGDClassifier(
        loss="perceptron",
        penalty=None,
        learning_rate="constant",
        eta0=float(mcfg.get("learning_rate", 1.0)),
        max_iter=int(mcfg.get("number_of_iterations", 10)),
        tol=None,
        shuffle=bool(mcfg.get("shuffle", True)),
        average=True,
        random_state=context.seed,
    )


def build_one_vs_all_perceptron(
    cfg: Dict[str, Any],
    context: TrainingContext,
) -> OneVsRestClassifier:
    """
    Build the one-vs-all averaged perceptron ensemble.

    Parameters
    ----------
    cfg : Dict[str, Any]
        Parsed model configuration.
    context : TrainingContext
        Run settings; its seed drives the perceptrons' shuffling. A
        deterministic run trains the per-tag perceptrons in a single job.

    Returns
    -------
    OneVsRestClassifier
        Unfitted multiclass classifier.
    """
    n_jobs = (cfg["classifier"] or {}).get("n_jobs")
    if context.deterministic:
        n_jobs = None
    return OneVsRestClassifier(
        build_averaged_perceptron(cfg, context),
        n_jobs=int(n_jobs) if n_jobs is not None else None,
    )
