"""
Train/test splitting utilities for tagging data.

Used when only a training file is configured: the rows are split into
training and test sets using the "split" section of config/data.yaml.

We rely on scikit-learn's train_test_split and support:
- stratified splitting on the Label column, when every tag has at least
  two rows
- configurable test_size and random_state
"""

from __future__ import annotations

import math
from typing import Tuple, Dict, Any

import pandas as pd
from sklearn.model_selection import train_test_split

from word_tagger.data.datasets import (
    load_data_config,
    DEFAULT_DATA_CONFIG_PATH,
    LABEL_COLUMN,
)


def get_split_config(
    config_path: str = DEFAULT_DATA_CONFIG_PATH,
) -> Dict[str, Any]:
    """
    Retrieve the 'split' section from the data configuration.
    """
    cfg = load_data_config(config_path)
    return cfg["split"] or {}


def train_test_split_df(
    df: pd.DataFrame,
    label_column: str = LABEL_COLUMN,
    config_path: str = DEFAULT_DATA_CONFIG_PATH,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Split a DataFrame into train and test sets according to config/data.yaml.

    Parameters
    ----------
    df : pd.DataFrame
        Input DataFrame containing at least the label_column.
    label_column : str
        Name of the label column to use for stratification.
    config_path : str
        Path to the data YAML configuration.

    Returns
    -------
    Tuple[pd.DataFrame, pd.DataFrame]
        (train_df, test_df)

    Raises
    ------
    KeyError
        If the label_column is missing.
    """
    if label_column not in df.columns:
        raise KeyError(
            f"Label column '{label_column}' not found in DataFrame. "
            f"Available columns: {list(df.columns)}"
        )

    split_cfg = get_split_config(config_path)
    test_size = float(split_cfg.get("test_size", 0.2))
    stratify_enabled = bool(split_cfg.get("stratify", True))
    random_state = int(split_cfg.get("random_state", 1))

    # Stratification needs at least two samples per tag and one test row per tag.
    counts = df[label_column].value_counts()
    n_test = math.ceil(test_size * len(df))
    can_stratify = (
        stratify_enabled
        and len(counts) > 1
        and counts.min() >= 2
        and len(counts) <= min(n_test, len(df) - n_test)
    )
    stratify_labels = df[label_column] if can_stratify else None

    train_df, test_df = train_test_split(
        df,
        test_size=test_size,
        random_state=random_state,
        stratify=stratify_labels,
        shuffle=True,
    )

    train_df = train_df.reset_index(drop=True)
    test_df = test_df.reset_index(drop=True)

    return train_df, test_df
