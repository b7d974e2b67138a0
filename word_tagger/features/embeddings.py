"""
Pretrained word embedding lookup.

Vectors are read from a whitespace-separated text file in the usual
GloVe / word2vec text layout (one "token v1 v2 ... vD" line per word; a
leading "count dim" header line is skipped). Each input text is split on
whitespace, every token is looked up, and the output is the element-wise
minimum, mean and maximum over the known tokens, concatenated into a
3*D vector. Texts without any known token map to zeros.
"""

from __future__ import annotations

import logging
import os
from typing import Dict, Optional

import numpy as np
from sklearn.base import BaseEstimator, TransformerMixin

from word_tagger.features.string_statistics import column_values, as_text


logger = logging.getLogger(__name__)


def load_word_vectors(
    path: str,
    max_words: Optional[int] = None,
) -> Dict[str, np.ndarray]:
    """
    Load word vectors from a text file.

    Parameters
    ----------
    path : str
        Path to the embedding file.
    max_words : Optional[int]
        Stop after this many vectors (files are usually frequency-sorted).

    Returns
    -------
    Dict[str, np.ndarray]
        Mapping from token to float32 vector.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the file holds no vectors or the dimensions are inconsistent.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Embedding file not found: {path}")

    vectors: Dict[str, np.ndarray] = {}
    dim: Optional[int] = None

    with open(path, "r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            parts = line.rstrip().split(" ")
            if len(parts) < 2:
                continue
            if line_no == 1 and len(parts) == 2 and all(p.isdigit() for p in parts):
                # word2vec header: "<count> <dim>"
                continue

            vec = np.asarray(parts[1:], dtype=np.float32)
            if dim is None:
                dim = vec.shape[0]
            elif vec.shape[0] != dim:
                raise ValueError(
                    f"Inconsistent embedding dimension at {path}:{line_no}: "
                    f"expected {dim}, got {vec.shape[0]}"
                )
            vectors[parts[0]] = vec

            if max_words is not None and len(vectors) >= max_words:
                break

    if not vectors:
        raise ValueError(f"No word vectors found in embedding file: {path}")

    logger.info("Loaded %d word vectors of dimension %d from %s", len(vectors), dim, path)
    return vectors


class WordEmbeddingTransformer(BaseEstimator, TransformerMixin):
    """
    Map a text column to min/mean/max pooled pretrained word vectors.

    The embedding file is read in `fit`; the fitted table is pickled along
    with the rest of the pipeline.
    """

    def __init__(self, embedding_path: str, max_words: Optional[int] = None):
        self.embedding_path = embedding_path
        self.max_words = max_words

    def fit(self, X, y=None):
        self.vectors_ = load_word_vectors(self.embedding_path, max_words=self.max_words)
        self.dim_ = len(next(iter(self.vectors_.values())))
        return self

    def _embed(self, text: str) -> np.ndarray:
        found = [self.vectors_[t] for t in text.split() if t in self.vectors_]
        if not found:
            return np.zeros(3 * self.dim_, dtype=np.float32)
        stacked = np.vstack(found)
        return np.concatenate(
            [stacked.min(axis=0), stacked.mean(axis=0), stacked.max(axis=0)]
        ).astype(np.float32)

    def transform(self, X) -> np.ndarray:
        values = column_values(X)
        out = np.zeros((len(values), 3 * self.dim_), dtype=np.float32)
        for i, value in enumerate(values):
            out[i] = self._embed(as_text(value))
        return out

    def get_feature_names_out(self, input_features=None) -> np.ndarray:
        names = [
            f"{pool}_{i}" for pool in ("min", "mean", "max") for i in range(self.dim_)
        ]
        return np.asarray(names, dtype=object)
