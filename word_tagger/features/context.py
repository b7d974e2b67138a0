"""
Before/after context of a target word within a sentence.

`split_context` splits a sentence on the literal space character and
returns the text before and after the word at a given index. Unlike the
word count in string_statistics, tabs and newlines are NOT separators
here, and repeated spaces produce empty tokens that are preserved.

The word index arrives from the data files as a float (`WordNum`). It must
hold an exact integral value inside the sentence; anything else raises
instead of being clamped.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin

from word_tagger.features.string_statistics import as_text


CONTEXT_BEFORE_COLUMN = "ContextBefore"
CONTEXT_AFTER_COLUMN = "ContextAfter"


class InvalidWordIndexError(ValueError):
    """The word index is not an exact, finite integral number."""


class WordIndexOutOfRangeError(IndexError):
    """The word index does not address a token of the sentence."""


@dataclass(frozen=True)
class ContextPair:
    before: str
    after: str


def coerce_word_index(value: Any) -> int:
    """
    Convert a numeric word index (typically a float) to an int.

    Raises
    ------
    InvalidWordIndexError
        If the value is not numeric, not finite, or has a fractional part.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidWordIndexError(
            f"Word index must be a number, got {type(value).__name__}: {value!r}"
        )
    as_float = float(value)
    if not math.isfinite(as_float) or not as_float.is_integer():
        raise InvalidWordIndexError(
            f"Word index must be an integral value, got {value!r}"
        )
    return int(as_float)


def split_context(sentence: str, word_index: Any) -> ContextPair:
    """
    Split a sentence around the word at `word_index`.

    Parameters
    ----------
    sentence : str
        Space-delimited sentence.
    word_index : int or float
        Zero-based index of the target token.

    Returns
    -------
    ContextPair
        Tokens before the target and tokens after it, each re-joined with a
        single space.

    Raises
    ------
    InvalidWordIndexError
        If `word_index` is not an exact integral number.
    WordIndexOutOfRangeError
        If `word_index` is negative or not smaller than the token count.
    """
    index = coerce_word_index(word_index)
    tokens = as_text(sentence).split(" ")

    if not 0 <= index < len(tokens):
        raise WordIndexOutOfRangeError(
            f"Word index {index} out of range for sentence with "
            f"{len(tokens)} tokens: {sentence!r}"
        )

    return ContextPair(
        before=" ".join(tokens[:index]),
        after=" ".join(tokens[index + 1:]),
    )


def add_context_row(
    row: Mapping[str, Any],
    text_field: str = "text",
    index_field: str = "WordNum",
) -> Dict[str, str]:
    """Map one input record to its `ContextBefore` / `ContextAfter` fields."""
    pair = split_context(row[text_field], row[index_field])
    return {CONTEXT_BEFORE_COLUMN: pair.before, CONTEXT_AFTER_COLUMN: pair.after}


class ContextSplitter(BaseEstimator, TransformerMixin):
    """
    Sklearn transformer adding the before/after context columns to a frame.

    `transform` returns a copy of the input DataFrame with
    `ContextBefore` and `ContextAfter` appended. Errors from individual rows
    are re-raised with the row position attached.
    """

    def __init__(self, text_column: str = "text", index_column: str = "WordNum"):
        self.text_column = text_column
        self.index_column = index_column

    def fit(self, X, y=None):
        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        missing = [c for c in (self.text_column, self.index_column) if c not in X.columns]
        if missing:
            raise KeyError(
                f"Missing required column(s) for context splitting: {missing}. "
                f"Available columns: {list(X.columns)}"
            )

        befores: List[str] = []
        afters: List[str] = []
        texts = X[self.text_column].tolist()
        indices = X[self.index_column].tolist()
        for position, (text, index) in enumerate(zip(texts, indices)):
            try:
                pair = split_context(text, index)
            except InvalidWordIndexError as exc:
                raise InvalidWordIndexError(f"Row {position}: {exc}") from exc
            except WordIndexOutOfRangeError as exc:
                raise WordIndexOutOfRangeError(f"Row {position}: {exc}") from exc
            befores.append(pair.before)
            afters.append(pair.after)

        out = X.copy()
        out[CONTEXT_BEFORE_COLUMN] = befores
        out[CONTEXT_AFTER_COLUMN] = afters
        return out


def add_context(
    df: pd.DataFrame,
    text_column: str = "text",
    index_column: str = "WordNum",
) -> pd.DataFrame:
    """Return a copy of `df` with `ContextBefore` / `ContextAfter` columns."""
    return ContextSplitter(text_column=text_column, index_column=index_column).transform(df)
