"""
Tests for the composed feature pipeline.

We verify that:

- the feature blocks are assembled in their fixed order
- the optional embedding block adds exactly 3 * dim columns
- scaling keeps every feature within [-1, 1]
- the fitted pipeline survives a joblib round trip
- the full tagger pipeline predicts one tag per row
"""

from __future__ import annotations

import joblib
import numpy as np
import pandas as pd
import pytest

from word_tagger.features.context import WordIndexOutOfRangeError
from word_tagger.features.pipeline import (
    FEATURE_BLOCKS,
    build_feature_pipeline,
    build_tagger_pipeline,
    build_word_hasher,
)
from word_tagger.models.linear_models import build_one_vs_all_perceptron
from word_tagger.models.tagger_model import PREDICTED_LABEL_COLUMN, predict_tags
from word_tagger.utils.training_utils import TrainingContext


SENTENCES = [
    "the quick fox runs",
    "a lazy dog sleeps",
    "the small cat jumps",
    "a big bird flies",
]
TAGS = ["DET", "ADJ", "NOUN", "VERB"]


def _frame() -> pd.DataFrame:
    rows = []
    for sentence in SENTENCES:
        for index, word in enumerate(sentence.split(" ")):
            rows.append(
                {
                    "Label": TAGS[index],
                    "WordNum": float(index),
                    "Word": word,
                    "Context": sentence,
                }
            )
    return pd.DataFrame(rows)


def _model_cfg(embedding_path=None) -> dict:
    return {
        "features": {
            "word_hash_bits": 8,
            "text_ngrams": {"word_ngram_range": [1, 2], "char_ngram_range": [3, 3]},
            "embedding": {"path": embedding_path},
            "scaling": True,
        },
        "classifier": {"averaged_perceptron": {"number_of_iterations": 10}},
    }


def _dense(X) -> np.ndarray:
    return X.toarray() if hasattr(X, "toarray") else np.asarray(X)


def test_feature_block_order_without_embedding():
    pipeline = build_feature_pipeline(_model_cfg())

    names = [name for name, _, _ in pipeline.named_steps["features"].transformers]
    assert names == [b for b in FEATURE_BLOCKS if b != "WordEmbedding"]
    assert [name for name, _ in pipeline.steps] == ["normalize", "context", "features", "scale"]


def test_embedding_block_adds_pooled_columns(tmp_path):
    embedding_file = tmp_path / "vectors.txt"
    embedding_file.write_text(
        "2 2\nthe 0.1 0.2\nquick -0.3 0.4\n", encoding="utf-8"
    )
    df = _frame()

    without = _dense(build_feature_pipeline(_model_cfg()).fit_transform(df))
    with_embedding_pipeline = build_feature_pipeline(_model_cfg(str(embedding_file)))
    with_embedding = _dense(with_embedding_pipeline.fit_transform(df))

    names = [name for name, _, _ in with_embedding_pipeline.named_steps["features"].transformers]
    assert names == FEATURE_BLOCKS
    assert with_embedding.shape[1] - without.shape[1] == 6


def test_features_are_scaled():
    X = _dense(build_feature_pipeline(_model_cfg()).fit_transform(_frame()))

    assert X.shape[0] == len(_frame())
    assert np.abs(X).max() <= 1.0 + 1e-9


def test_unscaled_pipeline_has_no_scale_step():
    cfg = _model_cfg()
    cfg["features"]["scaling"] = False
    pipeline = build_feature_pipeline(cfg)
    assert "scale" not in pipeline.named_steps


def test_word_hasher_is_one_hot():
    X = _dense(build_word_hasher(4).transform(["dog", "dog", "cat"]))

    assert X.shape == (3, 16)
    np.testing.assert_array_equal(X.sum(axis=1), [1, 1, 1])
    np.testing.assert_array_equal(X[0], X[1])


def test_fitted_pipeline_pickles(tmp_path):
    df = _frame()
    pipeline = build_feature_pipeline(_model_cfg()).fit(df)

    path = tmp_path / "features.joblib"
    joblib.dump(pipeline, path)
    restored = joblib.load(path)

    np.testing.assert_allclose(
        _dense(restored.transform(df)), _dense(pipeline.transform(df))
    )


def test_invalid_word_index_fails_fast():
    df = _frame()
    df.loc[0, "WordNum"] = 10.0
    with pytest.raises(WordIndexOutOfRangeError):
        build_feature_pipeline(_model_cfg()).fit_transform(df)


def test_tagger_pipeline_predicts_known_tags():
    df = _frame()
    cfg = _model_cfg()
    classifier = build_one_vs_all_perceptron(cfg, TrainingContext(seed=1))
    model = build_tagger_pipeline(cfg, classifier).fit(df, df["Label"].values)

    predictions = predict_tags(model, df.drop(columns=["Label"]))

    assert len(predictions) == len(df)
    assert set(predictions[PREDICTED_LABEL_COLUMN]) <= set(TAGS)
    assert {f"Score_{tag}" for tag in TAGS} <= set(predictions.columns)


def test_deterministic_context_forces_single_job():
    cfg = _model_cfg()
    cfg["classifier"]["n_jobs"] = 2

    assert build_one_vs_all_perceptron(cfg, TrainingContext(seed=1)).n_jobs is None
    relaxed = TrainingContext(seed=1, deterministic=False)
    assert build_one_vs_all_perceptron(cfg, relaxed).n_jobs == 2
