"""
Tag the words of a tab-separated file with a trained model.

The input file has the same layout as the training data (Label, WordNum,
Word, Context); the Label column may hold anything. Predictions are
written as a tab-separated file with the input columns followed by
PredictedLabel and one Score_<tag> column per tag.

Usage (from project root):

    python scripts/predict_tags.py data/test.tsv predictions.tsv \
        --model experiments/models/tagger_model.joblib
"""

from __future__ import annotations

import argparse
import os

import pandas as pd

from word_tagger.data.datasets import load_tagging_dataset
from word_tagger.models.tagger_model import DEFAULT_MODEL_FILENAME, load_tagger, predict_tags
from word_tagger.utils.training_utils import load_train_config, get_logger


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Predict tags with a trained model.")
    parser.add_argument("input", type=str, help="Tab-separated file to tag.")
    parser.add_argument("output", type=str, help="Where to write the predictions.")
    parser.add_argument(
        "--model",
        type=str,
        default=os.path.join("experiments", "models", DEFAULT_MODEL_FILENAME),
        help="Path to a saved tagger model.",
    )
    parser.add_argument(
        "--data-config",
        type=str,
        default="config/data.yaml",
        help="Path to data config YAML (default: config/data.yaml).",
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

    logger = get_logger(
        name="predict_tags",
        config=load_train_config(args.train_config),
        log_file_suffix="predict",
    )

    model = load_tagger(args.model)
    df = load_tagging_dataset(args.input, config_path=args.data_config)
    logger.info("Loaded %d rows from %s", len(df), args.input)

    predictions = predict_tags(model, df)
    result = pd.concat([df, predictions], axis=1)
    result.to_csv(args.output, sep="\t", index=False)
    logger.info("Wrote predictions to %s", args.output)


if __name__ == "__main__":
    main()
