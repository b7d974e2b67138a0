"""
Feature extraction for word tagging.

This subpackage includes:
- string statistics of a word (string_statistics)
- before/after context of a word in its sentence (context)
- word normalization (preprocessing)
- pretrained word embedding lookup (embeddings)
- composition of every feature block into one pipeline (pipeline).
"""

from word_tagger.features.context import (
    CONTEXT_AFTER_COLUMN,
    CONTEXT_BEFORE_COLUMN,
    ContextPair,
    ContextSplitter,
    InvalidWordIndexError,
    WordIndexOutOfRangeError,
    add_context,
    add_context_row,
    split_context,
)
from word_tagger.features.string_statistics import (
    STATISTICS_COLUMNS,
    StatisticsRecord,
    StringStatisticsFeaturizer,
    add_string_statistics,
    compute_statistics,
    string_statistics_row,
)
