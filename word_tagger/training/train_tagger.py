"""
Training and evaluation pipeline for the word tagger.

This module trains the tagger end to end by:

- loading the training and test files (or splitting the training file)
- building the feature pipeline (string statistics, context n-grams,
  hashed word one-hot, optional word embeddings, sentence n-grams)
- appending the one-vs-all averaged perceptron classifier
- fitting on the training rows
- evaluating on the test rows (micro/macro accuracy, top-k accuracy,
  per-tag precision and recall, confusion matrix)
- saving the metrics to JSON under experiments/results/
- saving the fitted pipeline under experiments/models/

This module is designed to be callable both as a library function and
as a standalone script (via `python -m word_tagger.training.train_tagger`).
"""

from __future__ import annotations

import json
import os
from typing import Dict, Any, Tuple

import pandas as pd
from sklearn.pipeline import Pipeline

from word_tagger.data.datasets import (
    DEFAULT_DATA_CONFIG_PATH,
    LABEL_COLUMN,
    load_train_test,
)
from word_tagger.evaluation.metrics import (
    compute_multiclass_metrics,
    format_metrics_report,
)
from word_tagger.features.pipeline import build_tagger_pipeline
from word_tagger.features.preprocessing import get_normalization_options
from word_tagger.models.linear_models import (
    DEFAULT_MODEL_CONFIG_PATH,
    build_one_vs_all_perceptron,
    load_model_config,
)
from word_tagger.models.tagger_model import (
    DEFAULT_MODEL_FILENAME,
    decision_scores,
    save_tagger,
)
from word_tagger.utils.training_utils import (
    DEFAULT_TRAIN_CONFIG_PATH,
    TrainingContext,
    ensure_dir_exists,
    get_logger,
    load_train_config,
    seed_everything,
)


# ---------------------------------------------------------------------------
# Core helpers
# ---------------------------------------------------------------------------


def train_tagger(
    train_df: pd.DataFrame,
    model_cfg: Dict[str, Any],
    context: TrainingContext,
    data_config_path: str = DEFAULT_DATA_CONFIG_PATH,
) -> Pipeline:
    """
    Build and fit the full tagger pipeline.

    Parameters
    ----------
    train_df : pd.DataFrame
        Training rows with columns ["Label", "WordNum", "Word", "Context"].
    model_cfg : Dict[str, Any]
        Parsed config/model.yaml.
    context : TrainingContext
        Run settings (seed).
    data_config_path : str
        Path to config/data.yaml (word normalization flags).

    Returns
    -------
    Pipeline
        Fitted pipeline.
    """
    classifier = build_one_vs_all_perceptron(model_cfg, context)
    pipeline = build_tagger_pipeline(
        model_cfg,
        classifier,
        normalization=get_normalization_options(data_config_path),
    )
    pipeline.fit(train_df, train_df[LABEL_COLUMN].astype(str).values)
    return pipeline


def evaluate_tagger(model: Pipeline, test_df: pd.DataFrame) -> Dict[str, Any]:
    """
    Evaluate a fitted tagger on labelled rows.

    Returns
    -------
    Dict[str, Any]
        Output of `compute_multiclass_metrics`.
    """
    y_true = test_df[LABEL_COLUMN].astype(str).values
    y_pred = model.predict(test_df)
    return compute_multiclass_metrics(
        y_true=y_true,
        y_pred=y_pred,
        class_names=list(model.classes_),
        scores=decision_scores(model, test_df),
    )


# ---------------------------------------------------------------------------
# Training + evaluation
# ---------------------------------------------------------------------------


def train_and_evaluate_tagger(
    data_config_path: str = DEFAULT_DATA_CONFIG_PATH,
    model_config_path: str = DEFAULT_MODEL_CONFIG_PATH,
    train_config_path: str = DEFAULT_TRAIN_CONFIG_PATH,
) -> Tuple[Pipeline, Dict[str, Any]]:
    """
    End-to-end pipeline to train, evaluate and save the word tagger.

    Parameters
    ----------
    data_config_path : str
        Path to config/data.yaml.
    model_config_path : str
        Path to config/model.yaml.
    train_config_path : str
        Path to config/train.yaml.

    Returns
    -------
    Tuple[Pipeline, Dict[str, Any]]
        The fitted pipeline and its test-set metrics.
    """
    train_cfg = load_train_config(train_config_path)
    model_cfg = load_model_config(model_config_path)

    context = TrainingContext.from_config(train_cfg)
    seed_everything(seed=context.seed)

    logger = get_logger(
        name="train_tagger",
        config=train_cfg,
        log_file_suffix="tagger",
    )

    train_df, test_df = load_train_test(config_path=data_config_path)
    logger.info("Train size: %d, Test size: %d", len(train_df), len(test_df))
    logger.info("Tags in training data: %s", sorted(train_df[LABEL_COLUMN].unique()))

    logger.info("=============== Training model ===============")
    model = train_tagger(
        train_df,
        model_cfg,
        context,
        data_config_path=data_config_path,
    )
    logger.info("=============== End of training process ===============")

    logger.info("===== Evaluating model's accuracy with test data =====")
    metrics = evaluate_tagger(model, test_df)
    logger.info("\n%s", format_metrics_report(metrics))

    paths_cfg = train_cfg.get("paths", {}) or {}
    results_dir = paths_cfg.get("results_dir", "experiments/results")
    models_dir = paths_cfg.get("models_dir", "experiments/models")
    ensure_dir_exists(results_dir)

    metrics_json_path = os.path.join(results_dir, "metrics_tagger.json")
    with open(metrics_json_path, "w", encoding="utf-8") as f:
        json.dump(metrics, f, indent=2)
    logger.info("Saved metrics JSON to %s", metrics_json_path)

    save_cfg = train_cfg.get("save", {}) or {}
    if bool(save_cfg.get("save_model", True)):
        model_path = os.path.join(
            models_dir, save_cfg.get("model_filename", DEFAULT_MODEL_FILENAME)
        )
        overwrite = bool(save_cfg.get("overwrite_existing", False))
        if save_tagger(model, model_path, overwrite=overwrite):
            logger.info("The model is saved to %s", model_path)
        else:
            logger.info(
                "Model file already exists and overwrite_existing is False: %s",
                model_path,
            )

    return model, metrics


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """
    Main entry point when running this module as a script.
    """
    _ = train_and_evaluate_tagger()


if __name__ == "__main__":
    main()
