"""
Smoke tests for the tagger training pipeline.

We write a tiny tab-separated dataset and matching configs to a temporary
directory, then verify that:

- training runs end-to-end and returns a fitted model plus metrics
- metrics JSON and the model file are written
- a reloaded model predicts the same tags as the in-memory one

These are *smoke tests*, not accuracy checks beyond a loose floor on the
training data itself.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
import yaml

from word_tagger.data.datasets import read_tagging_file
from word_tagger.models.linear_models import load_model_config
from word_tagger.models.tagger_model import load_tagger, predict_tags
from word_tagger.training.train_tagger import train_and_evaluate_tagger
from word_tagger.utils.training_utils import TrainingContext, load_train_config


REPO_ROOT = Path(__file__).resolve().parents[1]

SENTENCES = [
    ("the quick fox runs", ["DET", "ADJ", "NOUN", "VERB"]),
    ("a lazy dog sleeps", ["DET", "ADJ", "NOUN", "VERB"]),
    ("the small cat jumps", ["DET", "ADJ", "NOUN", "VERB"]),
    ("a big bird flies", ["DET", "ADJ", "NOUN", "VERB"]),
    ("the red car stops", ["DET", "ADJ", "NOUN", "VERB"]),
    ("a tall man walks", ["DET", "ADJ", "NOUN", "VERB"]),
    ("dogs bark", ["NOUN", "VERB"]),
    ("birds sing loudly", ["NOUN", "VERB", "ADV"]),
    ("cats sleep quietly", ["NOUN", "VERB", "ADV"]),
]


def _write_tsv(path: Path) -> str:
    lines = ["Label\tWordNum\tWord\tContext"]
    for sentence, tags in SENTENCES:
        for index, (word, tag) in enumerate(zip(sentence.split(" "), tags)):
            lines.append(f"{tag}\t{index}\t{word}\t{sentence}")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return str(path)


@pytest.fixture
def configs(tmp_path):
    data_path = _write_tsv(tmp_path / "train.tsv")

    data_cfg = {
        "dataset": {
            "train_path": data_path,
            "test_path": data_path,
            "separator": "\t",
            "has_header": True,
        },
        "split": {"test_size": 0.2, "stratify": True, "random_state": 1},
        "preprocessing": {"lowercase": True, "remove_diacritics": True},
    }
    model_cfg = {
        "features": {
            "word_hash_bits": 10,
            "text_ngrams": {"word_ngram_range": [1, 2], "char_ngram_range": [3, 3]},
            "embedding": {"path": None},
            "scaling": True,
        },
        "classifier": {"averaged_perceptron": {"number_of_iterations": 10}},
    }
    train_cfg = {
        "general": {"random_state": 1},
        "paths": {
            "models_dir": str(tmp_path / "models"),
            "results_dir": str(tmp_path / "results"),
            "logs_dir": str(tmp_path / "logs"),
        },
        "logging": {"level": "WARNING", "to_file": False},
        "save": {"save_model": True, "overwrite_existing": True},
    }

    paths = {}
    for name, cfg in (("data", data_cfg), ("model", model_cfg), ("train", train_cfg)):
        path = tmp_path / f"{name}.yaml"
        path.write_text(yaml.safe_dump(cfg), encoding="utf-8")
        paths[name] = str(path)
    paths["tmp"] = tmp_path
    return paths


def test_train_tagger_smoke(configs):
    model, metrics = train_and_evaluate_tagger(
        data_config_path=configs["data"],
        model_config_path=configs["model"],
        train_config_path=configs["train"],
    )

    assert set(model.classes_) == {"ADJ", "ADV", "DET", "NOUN", "VERB"}
    assert 0.0 <= metrics["macro_accuracy"] <= 1.0
    # Evaluated on its own training data.
    assert metrics["micro_accuracy"] >= 0.5
    assert len(metrics["top_k_accuracy"]) == 5
    assert metrics["top_k_accuracy"][-1] == pytest.approx(1.0)

    tmp_path = configs["tmp"]
    with open(tmp_path / "results" / "metrics_tagger.json", "r", encoding="utf-8") as f:
        saved = json.load(f)
    assert saved["micro_accuracy"] == pytest.approx(metrics["micro_accuracy"])

    model_path = tmp_path / "models" / "tagger_model.joblib"
    assert os.path.exists(model_path)

    df = read_tagging_file(str(tmp_path / "train.tsv"))
    restored = load_tagger(str(model_path))
    assert list(predict_tags(restored, df)["PredictedLabel"]) == list(model.predict(df))


def test_training_is_deterministic(configs):
    first, _ = train_and_evaluate_tagger(
        data_config_path=configs["data"],
        model_config_path=configs["model"],
        train_config_path=configs["train"],
    )
    second, _ = train_and_evaluate_tagger(
        data_config_path=configs["data"],
        model_config_path=configs["model"],
        train_config_path=configs["train"],
    )

    df = read_tagging_file(str(configs["tmp"] / "train.tsv"))
    assert list(first.predict(df)) == list(second.predict(df))


def test_repo_configs_load():
    model_cfg = load_model_config(str(REPO_ROOT / "config" / "model.yaml"))
    train_cfg = load_train_config(str(REPO_ROOT / "config" / "train.yaml"))

    assert model_cfg["classifier"]["averaged_perceptron"]["number_of_iterations"] == 10
    assert TrainingContext.from_config(train_cfg) == TrainingContext(seed=1, deterministic=True)


def test_load_tagger_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_tagger(str(tmp_path / "missing.joblib"))
