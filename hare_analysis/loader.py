#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
loader.py - Read the Bonanza Creek hare capture file into a DataFrame

Contains:
- Column name standardization
- CSV loading with a declared schema (text vs numeric columns)
- Validation of required columns and numeric content
"""
from __future__ import annotations

import os

import pandas as pd

from .config import Config, cfg
from .errors import DataAccessError, ParseError


def standardize_column_names(df: pd.DataFrame, aliases: dict | None = None) -> pd.DataFrame:
    """Lower-case and strip column names, then map known variants to standard names."""
    df = df.copy()
    df.columns = df.columns.str.lower().str.strip()

    aliases = cfg.column_aliases if aliases is None else aliases
    rename_map = {old: new for old, new in aliases.items()
                  if old in df.columns and new not in df.columns}
    if rename_map:
        df = df.rename(columns=rename_map)
        print(f"Column names standardized: {rename_map}")

    # Keep the first of any duplicated name so column access returns a Series
    if df.columns.duplicated().any():
        dupes = df.columns[df.columns.duplicated()].unique()
        print(f"Removing duplicated columns: {list(dupes)}")
        df = df.loc[:, ~df.columns.duplicated()]

    return df


def coerce_numeric(df: pd.DataFrame, columns) -> pd.DataFrame:
    """
    Convert numeric columns to float, keeping empty cells as NaN.

    Raises:
        ParseError: if a non-empty cell holds something that is not a number
    """
    df = df.copy()
    for col in columns:
        if col not in df.columns:
            continue
        raw = df[col]
        converted = pd.to_numeric(raw, errors='coerce')
        blank = raw.isna() | raw.astype(str).str.strip().eq('')
        bad = converted.isna() & ~blank
        if bad.any():
            samples = raw[bad].astype(str).unique()[:5].tolist()
            raise ParseError(
                f"Column '{col}' has {int(bad.sum())} non-numeric value(s), e.g. {samples}"
            )
        df[col] = converted.astype(float)
    return df


def load_hares(path, config: Config = cfg) -> pd.DataFrame:
    """
    Load the hare capture CSV.

    Args:
        path: Path to a comma-delimited file with at least the required columns
        config: Schema settings (required, numeric and text columns)

    Returns:
        DataFrame with standardized column names, text columns as strings and
        numeric columns as floats (NaN where the cell is empty or NA)

    Raises:
        DataAccessError: if the file does not exist or cannot be opened
        ParseError: if the content is not a table with the expected columns
    """
    path = os.fspath(path)
    if not os.path.isfile(path):
        raise DataAccessError(f"Input file not found: {path}")

    print(f"Loading CSV: {path}")
    text_dtypes = {col: 'string' for col in config.text_columns}
    try:
        df = pd.read_csv(path, dtype=text_dtypes, low_memory=False)
    except pd.errors.EmptyDataError as e:
        raise ParseError(f"Input file is empty: {path}") from e
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise ParseError(f"Could not parse {path} as a delimited table: {e}") from e
    except OSError as e:
        raise DataAccessError(f"Could not read {path}: {e}") from e

    print(f"Loaded {len(df)} rows, {len(df.columns)} columns.")

    df = standardize_column_names(df, config.column_aliases)

    missing = [col for col in config.required_columns if col not in df.columns]
    if missing:
        raise ParseError(f"Input file missing required columns: {missing}")

    df = coerce_numeric(df, config.numeric_columns)

    for col in config.numeric_columns:
        n_missing = int(df[col].isna().sum())
        if n_missing:
            print(f"Info: {n_missing} of {len(df)} rows have no '{col}' value.")

    return df
