"""
Dataset loading utilities for word tagging data.

Each row of a tagging file describes one word inside one sentence:

    Label <TAB> WordNum <TAB> Word <TAB> Context

where Label is the tag to predict, WordNum the zero-based index of the word
in the sentence, Word the word itself and Context the full space-delimited
sentence.

This module is responsible for:
- reading the dataset configuration from config/data.yaml
- loading a tab-separated file (with header) into a pandas DataFrame
- normalizing the columns to the standard names above, by position
- keeping literal words such as "NA" or "null" as text
- validating that WordNum is numeric
"""

from __future__ import annotations

import os
from typing import Dict, List, Optional, Tuple, Any

import numpy as np
import pandas as pd
import yaml


DEFAULT_DATA_CONFIG_PATH = "config/data.yaml"

LABEL_COLUMN = "Label"
WORD_NUM_COLUMN = "WordNum"
WORD_COLUMN = "Word"
CONTEXT_COLUMN = "Context"

COLUMNS: List[str] = [LABEL_COLUMN, WORD_NUM_COLUMN, WORD_COLUMN, CONTEXT_COLUMN]


def _load_yaml(path: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file and return it as a dictionary.

    Parameters
    ----------
    path : str
        Path to the YAML file.

    Returns
    -------
    Dict[str, Any]
        Parsed YAML content.

    Raises
    ------
    FileNotFoundError
        If the YAML file does not exist.
    ValueError
        If the YAML file is empty or cannot be parsed.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)

    if cfg is None:
        raise ValueError(f"Config file is empty or invalid: {path}")

    return cfg


def load_data_config(config_path: str = DEFAULT_DATA_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load and return the full data configuration dictionary.

    Parameters
    ----------
    config_path : str, optional
        Path to the data YAML configuration file.

    Returns
    -------
    Dict[str, Any]
        Dictionary containing the "dataset", "split", and "preprocessing" sections.
    """
    cfg = _load_yaml(config_path)

    for section in ("dataset", "split", "preprocessing"):
        if section not in cfg:
            raise KeyError(f'Missing "{section}" section in data config: {config_path}')

    return cfg


def read_tagging_file(
    path: str,
    separator: str = "\t",
    has_header: bool = True,
) -> pd.DataFrame:
    """
    Read a tagging file into a DataFrame with the standard columns.

    Columns are taken by position (Label, WordNum, Word, Context); header
    names in the file are ignored. Extra trailing columns are dropped.

    Parameters
    ----------
    path : str
        Path to the delimited text file.
    separator : str
        Field separator.
    has_header : bool
        Whether the first line is a header row.

    Returns
    -------
    pd.DataFrame
        DataFrame with columns ["Label", "WordNum", "Word", "Context"].

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the file has fewer than four columns or WordNum is not numeric.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Dataset file not found at: {path}")

    df = pd.read_csv(
        path,
        sep=separator,
        header=0 if has_header else None,
        dtype=str,
        keep_default_na=False,
        quotechar='"',
    )

    if df.shape[1] < len(COLUMNS):
        raise ValueError(
            f"Expected at least {len(COLUMNS)} columns in {path}, "
            f"found {df.shape[1]}: {list(df.columns)}"
        )

    df = df.iloc[:, : len(COLUMNS)]
    df.columns = COLUMNS

    word_num = pd.to_numeric(df[WORD_NUM_COLUMN], errors="coerce")
    bad_rows = word_num.isna()
    if bad_rows.any():
        first_bad = int(np.flatnonzero(bad_rows.to_numpy())[0])
        raise ValueError(
            f"Non-numeric {WORD_NUM_COLUMN} value {df[WORD_NUM_COLUMN].iloc[first_bad]!r} "
            f"in {path} (data row {first_bad})"
        )
    df[WORD_NUM_COLUMN] = word_num.astype(np.float32)

    return df.reset_index(drop=True)


def load_tagging_dataset(
    path: str,
    config_path: str = DEFAULT_DATA_CONFIG_PATH,
) -> pd.DataFrame:
    """
    Load one tagging file using the reader options from config/data.yaml.

    Parameters
    ----------
    path : str
        Path to the tagging file.
    config_path : str, optional
        Path to the data YAML configuration file.

    Returns
    -------
    pd.DataFrame
        DataFrame with columns ["Label", "WordNum", "Word", "Context"].
    """
    dataset_cfg = load_data_config(config_path)["dataset"]
    return read_tagging_file(
        path,
        separator=str(dataset_cfg.get("separator", "\t")),
        has_header=bool(dataset_cfg.get("has_header", True)),
    )


def load_train_test(
    config_path: str = DEFAULT_DATA_CONFIG_PATH,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Load the configured training and test files.

    If no test file is configured, the training file is split according to
    the "split" section (see word_tagger.data.split).

    Parameters
    ----------
    config_path : str, optional
        Path to the data YAML configuration file.

    Returns
    -------
    Tuple[pd.DataFrame, pd.DataFrame]
        (train_df, test_df)
    """
    dataset_cfg = load_data_config(config_path)["dataset"]

    train_path = dataset_cfg.get("train_path", "data/train.tsv")
    test_path: Optional[str] = dataset_cfg.get("test_path")

    train_df = load_tagging_dataset(train_path, config_path=config_path)
    if test_path:
        test_df = load_tagging_dataset(test_path, config_path=config_path)
        return train_df, test_df

    # Imported here to avoid a circular import (split reads the data config).
    from word_tagger.data.split import train_test_split_df

    return train_test_split_df(train_df, config_path=config_path)
