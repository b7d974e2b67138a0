"""
Tests for data loading utilities.

These tests validate that:

- the data configuration can be loaded and contains the core sections
- tagging files are read by column position with literal words preserved
- malformed files fail with informative errors
- without a test file, the training file is split
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
import yaml

from word_tagger.data.datasets import (
    COLUMNS,
    load_data_config,
    load_train_test,
    read_tagging_file,
)


REPO_ROOT = Path(__file__).resolve().parents[1]


def _write(path: Path, text: str) -> str:
    path.write_text(text, encoding="utf-8")
    return str(path)


def _write_data_config(tmp_path: Path, train_path: str, test_path=None) -> str:
    cfg = {
        "dataset": {
            "train_path": train_path,
            "test_path": test_path,
            "separator": "\t",
            "has_header": True,
        },
        "split": {"test_size": 0.25, "stratify": True, "random_state": 1},
        "preprocessing": {"lowercase": True},
    }
    path = tmp_path / "data.yaml"
    path.write_text(yaml.safe_dump(cfg), encoding="utf-8")
    return str(path)


def test_load_data_config_has_required_keys():
    cfg = load_data_config(str(REPO_ROOT / "config" / "data.yaml"))

    assert "dataset" in cfg
    assert "split" in cfg
    assert "preprocessing" in cfg
    assert "train_path" in cfg["dataset"]


def test_load_data_config_missing_section(tmp_path):
    path = _write(tmp_path / "bad.yaml", "dataset: {}\n")
    with pytest.raises(KeyError):
        load_data_config(path)


def test_load_data_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_data_config(str(tmp_path / "nope.yaml"))


def test_read_tagging_file_columns_and_types(tmp_path):
    path = _write(
        tmp_path / "train.tsv",
        "Tag\tIndex\tToken\tSentence\n"
        "NOUN\t1\tNA\tthe NA rule\n"
        "PUNCT\t3\t.\tsay it now .\n"
        "DET\t0\tthe\tthe dog\n",
    )

    df = read_tagging_file(path)

    assert list(df.columns) == COLUMNS
    assert df["WordNum"].dtype == np.float32
    assert df.loc[0, "Word"] == "NA"
    assert df.loc[0, "Label"] == "NOUN"
    assert df.loc[2, "Context"] == "the dog"


def test_read_tagging_file_rejects_non_numeric_index(tmp_path):
    path = _write(
        tmp_path / "train.tsv",
        "Label\tWordNum\tWord\tContext\nDET\tzero\tthe\tthe dog\n",
    )
    with pytest.raises(ValueError, match="Non-numeric"):
        read_tagging_file(path)


def test_read_tagging_file_rejects_missing_columns(tmp_path):
    path = _write(tmp_path / "train.tsv", "Label\tWordNum\nDET\t0\n")
    with pytest.raises(ValueError):
        read_tagging_file(path)


def test_read_tagging_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_tagging_file(str(tmp_path / "missing.tsv"))


def test_load_train_test_splits_when_no_test_file(tmp_path):
    rows = ["Label\tWordNum\tWord\tContext"]
    for i in range(8):
        rows.append(f"DET\t0\tthe\tthe dog{i}")
        rows.append(f"NOUN\t1\tdog{i}\tthe dog{i}")
    train_path = _write(tmp_path / "train.tsv", "\n".join(rows) + "\n")
    config_path = _write_data_config(tmp_path, train_path)

    train_df, test_df = load_train_test(config_path)

    assert len(train_df) + len(test_df) == 16
    assert len(test_df) == 4
    # Stratified: both tags present in the test split.
    assert set(test_df["Label"]) == {"DET", "NOUN"}


def test_load_train_test_uses_test_file(tmp_path):
    header = "Label\tWordNum\tWord\tContext\n"
    train_path = _write(tmp_path / "train.tsv", header + "DET\t0\tthe\tthe dog\n")
    test_path = _write(tmp_path / "test.tsv", header + "NOUN\t1\tcat\ta cat\n")
    config_path = _write_data_config(tmp_path, train_path, test_path)

    train_df, test_df = load_train_test(config_path)

    assert list(train_df["Word"]) == ["the"]
    assert list(test_df["Word"]) == ["cat"]
