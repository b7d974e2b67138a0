"""
Train and evaluate the word tagger.

This script is a convenience wrapper around
`word_tagger.training.train_tagger.train_and_evaluate_tagger`, which:

- loads the configured training and test files
- builds the feature pipeline and the one-vs-all perceptron
- trains on the training rows and evaluates on the test rows
- writes metrics under experiments/results/
- saves the fitted model under experiments/models/

Usage (from project root):

    python -m scripts.run_training
    # or
    python scripts/run_training.py --data-config config/data.yaml
"""

from __future__ import annotations

import argparse

from word_tagger.training.train_tagger import train_and_evaluate_tagger
from word_tagger.utils.training_utils import load_train_config, get_logger


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Train and evaluate the word tagger."
    )
    parser.add_argument(
        "--data-config",
        type=str,
        default="config/data.yaml",
        help="Path to data config YAML (default: config/data.yaml).",
    )
    parser.add_argument(
        "--model-config",
        type=str,
        default="config/model.yaml",
        help="Path to model config YAML (default: config/model.yaml).",
    )
    parser.add_argument(
        "--train-config",
        type=str,
        default="config/train.yaml",
        help="Path to global train config YAML (default: config/train.yaml).",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    train_cfg = load_train_config(args.train_config)
    logger = get_logger(
        name="run_training",
        config=train_cfg,
        log_file_suffix="run_training",
    )

    logger.info("=" * 80)
    logger.info("Starting word tagger training.")
    logger.info(
        "Configs: data=%s, model=%s, train=%s",
        args.data_config,
        args.model_config,
        args.train_config,
    )

    _, metrics = train_and_evaluate_tagger(
        data_config_path=args.data_config,
        model_config_path=args.model_config,
        train_config_path=args.train_config,
    )

    logger.info(
        "Completed training. Micro accuracy: %.4f, macro accuracy: %.4f",
        metrics["micro_accuracy"],
        metrics["macro_accuracy"],
    )


if __name__ == "__main__":
    main()
