"""
Character-level string statistics for a single word or token.

`compute_statistics` derives 19 numeric descriptors from a text value
(length, vowel/consonant/digit counts, casing ratios, longest runs, ...).
The descriptors are consumed downstream under fixed column names, listed
in `STATISTICS_COLUMNS`, which are part of the feature wiring and must not
be renamed.

Two behaviours are kept for compatibility with previously trained models:

- every uppercase ASCII letter is counted as a consonant, vowels included
  (pass ``fix_consonant_predicate=True`` to count uppercase vowels as vowels
  only)
- `wordLengthAverage` is an integer-truncated approximation, not the true
  average word length

All values are rounded to single precision.
"""

from __future__ import annotations

import unicodedata
from dataclasses import astuple, dataclass
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Union

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin


VOWELS = frozenset("aeiouAEIOU")

_SEPARATOR_CATEGORIES = frozenset({"Zs", "Zl", "Zp"})

TextLike = Union[str, Sequence[str]]


@dataclass(frozen=True)
class StatisticsRecord:
    length: float
    vowel_count: float
    consonant_count: float
    number_count: float
    underscore_count: float
    letter_count: float
    word_count: float
    word_length_average: float
    line_count: float
    starts_with_vowel: float
    ends_in_vowel: float
    ends_in_vowel_number: float
    lower_case_count: float
    upper_case_count: float
    upper_case_percent: float
    letter_percent: float
    number_percent: float
    longest_repeating_char: float
    longest_repeating_vowel: float

    def as_array(self) -> np.ndarray:
        """Return the values as a float32 vector in `STATISTICS_COLUMNS` order."""
        return np.asarray(astuple(self), dtype=np.float32)

    def as_dict(self) -> Dict[str, float]:
        """Return the values keyed by their downstream column names."""
        return dict(zip(STATISTICS_COLUMNS, astuple(self)))


# Column names, in the same order as the StatisticsRecord fields.
STATISTICS_COLUMNS: List[str] = [
    "length",
    "vowelCount",
    "consonantCount",
    "numberCount",
    "underscoreCount",
    "letterCount",
    "wordCount",
    "wordLengthAverage",
    "lineCount",
    "startsWithVowel",
    "endsInVowel",
    "endsInVowelNumber",
    "lowerCaseCount",
    "upperCaseCount",
    "upperCasePercent",
    "letterPercent",
    "numberPercent",
    "longestRepeatingChar",
    "longestRepeatingVowel",
]


# ---------------------------------------------------------------------------
# Character predicates
# ---------------------------------------------------------------------------


def is_vowel(ch: str) -> bool:
    return ch in VOWELS


def is_consonant(ch: str, fixed: bool = False) -> bool:
    """
    Return True if `ch` counts as a consonant.

    By default the historical predicate is used: any character in A-Z, or a
    lowercase a-z character that is not a vowel. With ``fixed=True`` vowels
    are excluded in both cases.
    """
    if fixed:
        return ("A" <= ch <= "Z" or "a" <= ch <= "z") and not is_vowel(ch)
    return "A" <= ch <= "Z" or ("a" <= ch <= "z" and not is_vowel(ch))


def is_vowel_or_digit(ch: str) -> bool:
    return is_vowel(ch) or "0" <= ch <= "9"


def _is_letter(ch: str) -> bool:
    return unicodedata.category(ch).startswith("L")


def _is_separator(ch: str) -> bool:
    return unicodedata.category(ch) in _SEPARATOR_CATEGORIES


# ---------------------------------------------------------------------------
# Run scanning
# ---------------------------------------------------------------------------


def longest_run(text: str, predicate=None) -> int:
    """
    Length of the longest run of identical consecutive characters.

    The scan keeps the start `j` of the current window and compares each
    character with `text[j]`. On a mismatch the window restarts at the
    mismatching position without counting it, so with a predicate a lone
    qualifying character only counts when it is the first one of `text`
    ("a" gives 1, "ba" gives 0, "baa" gives 2). Without a predicate the
    result equals the plain run length.

    Parameters
    ----------
    text : str
        Input string.
    predicate : callable, optional
        If given, only runs whose character satisfies the predicate count.

    Returns
    -------
    int
        Longest run length, 0 for an empty string or when no run qualifies.
    """
    best = 0
    j = 0
    for i, ch in enumerate(text):
        if ch == text[j] and (predicate is None or predicate(text[j])):
            best = max(best, i - j + 1)
        else:
            j = i
    return best


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    if isinstance(value, float) and np.isnan(value):
        return ""
    if isinstance(value, Iterable):
        return " ".join(str(v) for v in value)
    return str(value)


def _single(value: float) -> float:
    return float(np.float32(value))


def compute_statistics(
    text: TextLike,
    fix_consonant_predicate: bool = False,
) -> StatisticsRecord:
    """
    Compute the string statistics of one text value.

    Parameters
    ----------
    text : str or sequence of str
        The word (or any text). A sequence of strings is joined with a
        single space first.
    fix_consonant_predicate : bool
        Count uppercase vowels as vowels only. Off by default so that
        features match models trained with the historical behaviour.

    Returns
    -------
    StatisticsRecord
        The 19 statistics, rounded to single precision.
    """
    text = as_text(text)

    length = len(text)
    vowel_count = sum(1 for ch in text if is_vowel(ch))
    consonant_count = sum(
        1 for ch in text if is_consonant(ch, fixed=fix_consonant_predicate)
    )
    number_count = sum(1 for ch in text if ch.isdecimal())
    underscore_count = text.count("_")
    letter_count = sum(1 for ch in text if _is_letter(ch))
    word_count = sum(1 for ch in text if _is_separator(ch)) + 1
    lower_case_count = sum(1 for ch in text if unicodedata.category(ch) == "Ll")
    upper_case_count = sum(1 for ch in text if unicodedata.category(ch) == "Lu")

    first = text[0] if text else ""
    last = text[-1] if text else ""

    return StatisticsRecord(
        length=_single(length),
        vowel_count=_single(vowel_count),
        consonant_count=_single(consonant_count),
        number_count=_single(number_count),
        underscore_count=_single(underscore_count),
        letter_count=_single(letter_count),
        word_count=_single(word_count),
        word_length_average=_single((length - word_count + 1) // word_count),
        line_count=_single(text.count("\n") + 1),
        starts_with_vowel=1.0 if is_vowel(first) else 0.0,
        ends_in_vowel=1.0 if is_vowel(last) else 0.0,
        ends_in_vowel_number=1.0 if last and is_vowel_or_digit(last) else 0.0,
        lower_case_count=_single(lower_case_count),
        upper_case_count=_single(upper_case_count),
        upper_case_percent=_single(
            upper_case_count / letter_count if letter_count else 0.0
        ),
        letter_percent=_single(letter_count / length if length else 0.0),
        number_percent=_single(number_count / length if length else 0.0),
        longest_repeating_char=_single(longest_run(text)),
        longest_repeating_vowel=_single(longest_run(text, is_vowel)),
    )


def string_statistics_row(
    row: Mapping[str, Any],
    text_field: str = "text",
) -> Dict[str, float]:
    """Map one input record to its statistics, keyed by column name."""
    return compute_statistics(row[text_field]).as_dict()


def column_values(X: Any) -> List[Any]:
    """Flatten a Series, single-column frame, or 1-D/2-D array into a list."""
    if isinstance(X, pd.DataFrame):
        if X.shape[1] != 1:
            raise ValueError(
                f"Expected a single text column, got {X.shape[1]} columns: "
                f"{list(X.columns)}"
            )
        return X.iloc[:, 0].tolist()
    if isinstance(X, pd.Series):
        return X.tolist()
    arr = np.asarray(X, dtype=object)
    if arr.ndim == 2:
        if arr.shape[1] != 1:
            raise ValueError(f"Expected a single text column, got shape {arr.shape}")
        arr = arr[:, 0]
    return list(arr)


class StringStatisticsFeaturizer(BaseEstimator, TransformerMixin):
    """
    Sklearn transformer producing the string statistics of a text column.

    Stateless: `fit` does nothing. `transform` returns a dense float32
    matrix of shape (n_samples, 19).
    """

    def __init__(self, fix_consonant_predicate: bool = False):
        self.fix_consonant_predicate = fix_consonant_predicate

    def fit(self, X, y=None):
        return self

    def transform(self, X) -> np.ndarray:
        values = column_values(X)
        out = np.zeros((len(values), len(STATISTICS_COLUMNS)), dtype=np.float32)
        for i, value in enumerate(values):
            out[i] = compute_statistics(
                value, fix_consonant_predicate=self.fix_consonant_predicate
            ).as_array()
        return out

    def get_feature_names_out(self, input_features=None) -> np.ndarray:
        return np.asarray(STATISTICS_COLUMNS, dtype=object)


def add_string_statistics(
    df: pd.DataFrame,
    text_column: str = "text",
    fix_consonant_predicate: bool = False,
) -> pd.DataFrame:
    """
    Return a copy of `df` with the 19 statistic columns appended.

    Parameters
    ----------
    df : pd.DataFrame
        Input frame.
    text_column : str
        Column holding the text to describe.
    fix_consonant_predicate : bool
        See `compute_statistics`.

    Returns
    -------
    pd.DataFrame
        New DataFrame with one extra column per statistic.
    """
    if text_column not in df.columns:
        raise KeyError(
            f"Text column '{text_column}' not found in DataFrame. "
            f"Available columns: {list(df.columns)}"
        )

    featurizer = StringStatisticsFeaturizer(
        fix_consonant_predicate=fix_consonant_predicate
    )
    stats = pd.DataFrame(
        featurizer.transform(df[text_column]),
        columns=STATISTICS_COLUMNS,
        index=df.index,
    )
    return pd.concat([df, stats], axis=1)
