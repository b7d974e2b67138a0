"""
Feature pipeline for word tagging.

This module composes every feature stage into a single scikit-learn
Pipeline that turns the raw rows (Label, WordNum, Word, Context) into one
feature vector:

1. normalize the word             Word -> WordNormalized
2. split the sentence             Context, WordNum -> ContextBefore, ContextAfter
3. featurize each block, in a fixed order:
     ContextNGrams        word 1-2 grams + char 3-grams of the sentence
     ContextBeforeNGrams  same, on the text before the word
     ContextAfterNGrams   same, on the text after the word
     WordOneHot           hashed one-hot encoding of the normalized word
     WordNum              the word index, unchanged
     WordEmbedding        pretrained vectors (only if configured)
     StringStatsOnWord    string statistics of the raw word
4. scale every feature into [-1, 1] by its maximum absolute value

The block order is part of the model: changing it invalidates trained
pipelines. Configuration comes from the "features" section of
config/model.yaml.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from sklearn.compose import ColumnTransformer
from sklearn.feature_extraction.text import HashingVectorizer, TfidfVectorizer
from sklearn.pipeline import FeatureUnion, Pipeline
from sklearn.preprocessing import MaxAbsScaler

from word_tagger.data.datasets import (
    CONTEXT_COLUMN,
    WORD_COLUMN,
    WORD_NUM_COLUMN,
)
from word_tagger.features.context import (
    CONTEXT_AFTER_COLUMN,
    CONTEXT_BEFORE_COLUMN,
    ContextSplitter,
)
from word_tagger.features.embeddings import WordEmbeddingTransformer
from word_tagger.features.preprocessing import TextNormalizer
from word_tagger.features.string_statistics import StringStatisticsFeaturizer


WORD_NORMALIZED_COLUMN = "WordNormalized"

FEATURE_BLOCKS: List[str] = [
    "ContextNGrams",
    "ContextBeforeNGrams",
    "ContextAfterNGrams",
    "WordOneHot",
    "WordNum",
    "WordEmbedding",
    "StringStatsOnWord",
]


def single_token(text: str) -> List[str]:
    """Analyzer treating the whole value as one token (must stay picklable)."""
    return [text]


# ---------------------------------------------------------------------------
# Block builders
# ---------------------------------------------------------------------------


def build_text_featurizer(text_cfg: Optional[Dict[str, Any]] = None) -> FeatureUnion:
    """
    Word n-gram plus character n-gram TF-IDF featurizer for one text column.

    Parameters
    ----------
    text_cfg : Optional[Dict[str, Any]]
        The "text_ngrams" section of the features config.

    Returns
    -------
    FeatureUnion
        Unfitted union of the word and char vectorizers.
    """
    cfg = text_cfg or {}
    word_range = tuple(cfg.get("word_ngram_range", [1, 2]))
    char_range = tuple(cfg.get("char_ngram_range", [3, 3]))

    word_vectorizer = TfidfVectorizer(
        analyzer="word",
        ngram_range=word_range,
        token_pattern=str(cfg.get("word_token_pattern", r"(?u)\S+")),
        lowercase=bool(cfg.get("lowercase", True)),
        strip_accents="unicode" if cfg.get("strip_accents", True) else None,
        min_df=1,
        norm="l2",
    )
    char_vectorizer = TfidfVectorizer(
        analyzer="char",
        ngram_range=char_range,
        lowercase=bool(cfg.get("lowercase", True)),
        strip_accents="unicode" if cfg.get("strip_accents", True) else None,
        min_df=1,
        norm="l2",
    )
    return FeatureUnion(
        [
            ("word", word_vectorizer),
            ("char", char_vectorizer),
        ]
    )


def build_word_hasher(number_of_bits: int = 16) -> HashingVectorizer:
    """Hashed one-hot encoder over the whole (normalized) word."""
    return HashingVectorizer(
        analyzer=single_token,
        n_features=2 ** int(number_of_bits),
        alternate_sign=False,
        binary=True,
        norm=None,
    )


def _feature_blocks(features_cfg: Dict[str, Any]) -> List[Tuple[str, Any, Any]]:
    text_cfg = features_cfg.get("text_ngrams", {}) or {}
    embedding_cfg = features_cfg.get("embedding", {}) or {}
    stats_cfg = features_cfg.get("string_statistics", {}) or {}

    blocks: List[Tuple[str, Any, Any]] = [
        ("ContextNGrams", build_text_featurizer(text_cfg), CONTEXT_COLUMN),
        ("ContextBeforeNGrams", build_text_featurizer(text_cfg), CONTEXT_BEFORE_COLUMN),
        ("ContextAfterNGrams", build_text_featurizer(text_cfg), CONTEXT_AFTER_COLUMN),
        (
            "WordOneHot",
            build_word_hasher(features_cfg.get("word_hash_bits", 16)),
            WORD_NORMALIZED_COLUMN,
        ),
        ("WordNum", "passthrough", [WORD_NUM_COLUMN]),
    ]

    embedding_path = embedding_cfg.get("path")
    if embedding_path:
        blocks.append(
            (
                "WordEmbedding",
                WordEmbeddingTransformer(
                    embedding_path=str(embedding_path),
                    max_words=embedding_cfg.get("max_words"),
                ),
                WORD_NORMALIZED_COLUMN,
            )
        )

    blocks.append(
        (
            "StringStatsOnWord",
            StringStatisticsFeaturizer(
                fix_consonant_predicate=bool(
                    stats_cfg.get("fix_consonant_predicate", False)
                )
            ),
            WORD_COLUMN,
        )
    )
    return blocks


# ---------------------------------------------------------------------------
# Public builders
# ---------------------------------------------------------------------------


def build_feature_pipeline(
    model_cfg: Dict[str, Any],
    normalization: Optional[Dict[str, bool]] = None,
) -> Pipeline:
    """
    Build the unfitted feature pipeline (everything but the classifier).

    Parameters
    ----------
    model_cfg : Dict[str, Any]
        Parsed config/model.yaml.
    normalization : Optional[Dict[str, bool]]
        Word normalization flags, as returned by
        `word_tagger.features.preprocessing.get_normalization_options`.

    Returns
    -------
    Pipeline
        Steps: "normalize", "context", "features" and, when scaling is
        enabled, "scale".
    """
    features_cfg = model_cfg.get("features", {}) or {}

    steps: List[Tuple[str, Any]] = [
        (
            "normalize",
            TextNormalizer(
                input_column=WORD_COLUMN,
                output_column=WORD_NORMALIZED_COLUMN,
                **(normalization or {}),
            ),
        ),
        (
            "context",
            ContextSplitter(text_column=CONTEXT_COLUMN, index_column=WORD_NUM_COLUMN),
        ),
        (
            "features",
            ColumnTransformer(_feature_blocks(features_cfg), remainder="drop"),
        ),
    ]

    if bool(features_cfg.get("scaling", True)):
        steps.append(("scale", MaxAbsScaler()))

    return Pipeline(steps)


def build_tagger_pipeline(
    model_cfg: Dict[str, Any],
    classifier: Any,
    normalization: Optional[Dict[str, bool]] = None,
) -> Pipeline:
    """
    Append a classifier to the feature pipeline.

    Parameters
    ----------
    model_cfg : Dict[str, Any]
        Parsed config/model.yaml.
    classifier : Any
        Unfitted sklearn classifier.
    normalization : Optional[Dict[str, bool]]
        Word normalization flags.

    Returns
    -------
    Pipeline
        Feature steps followed by a "classifier" step.
    """
    features = build_feature_pipeline(model_cfg, normalization=normalization)
    return Pipeline(features.steps + [("classifier", classifier)])
