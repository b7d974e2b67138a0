"""
Word normalization utilities.

The word to tag is normalized before it is hashed into a one-hot vector and
looked up in the pretrained embedding table:

- lowercasing
- diacritic removal (e.g. "café" -> "cafe")
- optional punctuation removal
- optional number removal

Punctuation and numbers are kept by default since they carry information
for tagging. Configuration is driven by the 'preprocessing' section of
config/data.yaml, so the normalization can be tweaked without changing
this code. The string statistics are always computed on the raw word.
"""

from __future__ import annotations

import re
import string
import unicodedata
from typing import Any, Dict

import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin

from word_tagger.data.datasets import load_data_config, DEFAULT_DATA_CONFIG_PATH
from word_tagger.features.string_statistics import as_text


# ---------------------------------------------------------------------------
# Basic text cleaning
# ---------------------------------------------------------------------------


def strip_diacritics(text: str) -> str:
    """
    Remove combining marks after canonical decomposition.

    Parameters
    ----------
    text : str
        Input text.

    Returns
    -------
    str
        Text without diacritics, recomposed to NFC.
    """
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return unicodedata.normalize("NFC", stripped)


def normalize_text(
    text: Any,
    lowercase: bool = True,
    remove_diacritics: bool = True,
    remove_punctuation: bool = False,
    remove_numbers: bool = False,
) -> str:
    """
    Apply normalization to a raw word or text string.

    Parameters
    ----------
    text : Any
        Raw input text. Non-string values are converted first.
    lowercase : bool
        Convert text to lowercase if True.
    remove_diacritics : bool
        Strip accents and other combining marks if True.
    remove_punctuation : bool
        Remove ASCII punctuation characters if True.
    remove_numbers : bool
        Remove digits if True.

    Returns
    -------
    str
        Normalized text string.
    """
    text = as_text(text)

    if lowercase:
        text = text.lower()

    if remove_diacritics:
        text = strip_diacritics(text)

    if remove_punctuation:
        text = text.translate(str.maketrans("", "", string.punctuation))

    if remove_numbers:
        text = re.sub(r"\d+", "", text)

    return text


def get_normalization_options(
    config_path: str = DEFAULT_DATA_CONFIG_PATH,
) -> Dict[str, bool]:
    """
    Read the normalization flags from the 'preprocessing' config section.

    Parameters
    ----------
    config_path : str
        Path to the data YAML configuration.

    Returns
    -------
    Dict[str, bool]
        Keyword arguments accepted by `normalize_text` / `TextNormalizer`.
    """
    cfg = load_data_config(config_path)["preprocessing"] or {}
    return {
        "lowercase": bool(cfg.get("lowercase", True)),
        "remove_diacritics": bool(cfg.get("remove_diacritics", True)),
        "remove_punctuation": bool(cfg.get("remove_punctuation", False)),
        "remove_numbers": bool(cfg.get("remove_numbers", False)),
    }


class TextNormalizer(BaseEstimator, TransformerMixin):
    """
    Sklearn transformer writing a normalized copy of a text column.

    `transform` returns a copy of the input DataFrame with `output_column`
    set to the normalized values of `input_column`.
    """

    def __init__(
        self,
        input_column: str = "Word",
        output_column: str = "WordNormalized",
        lowercase: bool = True,
        remove_diacritics: bool = True,
        remove_punctuation: bool = False,
        remove_numbers: bool = False,
    ):
        self.input_column = input_column
        self.output_column = output_column
        self.lowercase = lowercase
        self.remove_diacritics = remove_diacritics
        self.remove_punctuation = remove_punctuation
        self.remove_numbers = remove_numbers

    def fit(self, X, y=None):
        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        if self.input_column not in X.columns:
            raise KeyError(
                f"Column '{self.input_column}' not found in DataFrame. "
                f"Available columns: {list(X.columns)}"
            )
        out = X.copy()
        out[self.output_column] = [
            normalize_text(
                value,
                lowercase=self.lowercase,
                remove_diacritics=self.remove_diacritics,
                remove_punctuation=self.remove_punctuation,
                remove_numbers=self.remove_numbers,
            )
            for value in X[self.input_column].tolist()
        ]
        return out
