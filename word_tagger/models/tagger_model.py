"""
Persistence and prediction helpers for a fitted tagger pipeline.

The fitted sklearn Pipeline (features + classifier) is stored with joblib.
Prediction takes rows with the same columns as the training data (Label is
optional) and returns the predicted tag plus one score column per tag.
"""

from __future__ import annotations

import os
from typing import Optional

import joblib
import numpy as np
import pandas as pd
from sklearn.pipeline import Pipeline

from word_tagger.utils.training_utils import ensure_dir_exists


DEFAULT_MODEL_FILENAME = "tagger_model.joblib"

PREDICTED_LABEL_COLUMN = "PredictedLabel"


def save_tagger(model: Pipeline, path: str, overwrite: bool = True) -> bool:
    """
    Save a fitted tagger pipeline to disk.

    Parameters
    ----------
    model : Pipeline
        Fitted pipeline.
    path : str
        Destination file.
    overwrite : bool
        Replace an existing file if True.

    Returns
    -------
    bool
        True if the file was written, False if it existed and overwrite
        was disabled.
    """
    if os.path.exists(path) and not overwrite:
        return False
    ensure_dir_exists(os.path.dirname(path))
    joblib.dump(model, path)
    return True


def load_tagger(path: str) -> Pipeline:
    """
    Load a tagger pipeline saved with `save_tagger`.

    Raises
    ------
    FileNotFoundError
        If the model file does not exist.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Tagger model not found at: {path}")
    return joblib.load(path)


def decision_scores(model: Pipeline, df: pd.DataFrame) -> Optional[np.ndarray]:
    """
    Per-class decision scores of shape (n_samples, n_classes), or None if the
    classifier exposes no scores.
    """
    if not hasattr(model, "decision_function"):
        return None
    scores = np.asarray(model.decision_function(df))
    if scores.ndim == 1:
        # Binary problem: a single score for the positive class.
        scores = np.column_stack([-scores, scores])
    return scores


def predict_tags(model: Pipeline, df: pd.DataFrame) -> pd.DataFrame:
    """
    Predict a tag for every row.

    Parameters
    ----------
    model : Pipeline
        Fitted tagger pipeline.
    df : pd.DataFrame
        Rows with at least the WordNum, Word and Context columns.

    Returns
    -------
    pd.DataFrame
        Frame indexed like `df` with a "PredictedLabel" column and a
        "Score_<tag>" column per tag when scores are available.
    """
    out = pd.DataFrame(index=df.index)
    out[PREDICTED_LABEL_COLUMN] = model.predict(df)

    scores = decision_scores(model, df)
    if scores is not None:
        for i, label in enumerate(model.classes_):
            out[f"Score_{label}"] = scores[:, i]
    return out
