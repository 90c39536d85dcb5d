#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
metrics.py - Row-level preparation of the hare capture table

Contains all functions that turn the loaded table into analysis-ready form:
- Row filtering by predicate (e.g. juveniles only)
- Per-row derived fields (date parsing, year/month)
- Categorical recoding (sex and site labels)

Every function returns a new DataFrame; the input is never modified.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Hashable, Mapping, Optional

import numpy as np
import pandas as pd

from .config import Config, cfg
from .errors import DerivationError

# Exceptions a derivation function may raise for a bad row
ROW_ERRORS = (DerivationError, ValueError, TypeError, KeyError, AttributeError)


def _keep(result) -> bool:
    """A missing predicate result (pd.NA from a missing text cell) drops the row."""
    if result is pd.NA or result is None:
        return False
    return bool(result)


def filter_rows(df: pd.DataFrame, predicate: Callable[[pd.Series], bool]) -> pd.DataFrame:
    """
    Keep the rows for which `predicate(row)` is true.

    Args:
        df: Input table
        predicate: Function of one row (a Series indexed by column name)

    Returns:
        New DataFrame with the retained rows in their original order
    """
    if df.empty:
        return df.copy()
    mask = df.apply(lambda row: _keep(predicate(row)), axis=1).astype(bool)
    kept = df.loc[mask].copy()
    print(f"Filter kept {len(kept)} of {len(df)} rows.")
    return kept


def derive(df: pd.DataFrame, field_name: str, fn: Callable[[pd.Series], Any],
           strict: bool = False) -> pd.DataFrame:
    """
    Append `field_name`, computed per row by `fn`.

    A row where `fn` fails gets a missing value for the new field. With
    `strict=True` the first failure raises `DerivationError` instead.
    """
    df = df.copy()
    values = []
    failures = 0
    for idx, row in df.iterrows():
        try:
            values.append(fn(row))
        except ROW_ERRORS as e:
            if strict:
                raise DerivationError(f"Could not derive '{field_name}' for row {idx}: {e}") from e
            failures += 1
            values.append(np.nan)

    df[field_name] = pd.Series(values, index=df.index, dtype=object)
    df[field_name] = df[field_name].infer_objects()
    if failures:
        print(f"Warning: '{field_name}' could not be derived for {failures} of {len(df)} rows; set to missing.")
    return df


def _normalize_code(value: Any) -> Optional[str]:
    if value is None or value is pd.NA or (isinstance(value, float) and np.isnan(value)):
        return None
    return str(value).strip().lower()


def recode(df: pd.DataFrame, field_name: str, mapping: Mapping[str, str], default: str,
           target: Optional[str] = None) -> pd.DataFrame:
    """
    Map raw categorical codes to readable labels.

    Codes are compared after stripping whitespace and lower-casing. Codes not
    in `mapping`, and missing codes, get `default`.

    Args:
        df: Input table
        field_name: Column holding the raw codes
        mapping: code -> label
        default: Label for anything not in `mapping`
        target: Column to write; overwrites `field_name` when None
    """
    if field_name not in df.columns:
        raise KeyError(f"Column '{field_name}' not found for recoding")

    df = df.copy()
    lookup = {str(code).strip().lower(): label for code, label in mapping.items()}
    codes = df[field_name].map(_normalize_code)
    df[target or field_name] = codes.map(lambda code: lookup.get(code, default)).astype(object)
    return df


def invert_mapping(mapping: Mapping[Hashable, str]) -> Dict[str, Hashable]:
    """
    Reverse a recode mapping (label -> code).

    Codes that fell back to the default label cannot be recovered.
    """
    inverted: Dict[str, Hashable] = {}
    for code, label in mapping.items():
        if label in inverted:
            raise ValueError(f"Label '{label}' is shared by codes '{inverted[label]}' and '{code}'")
        inverted[label] = code
    return inverted


def add_date_parts(df: pd.DataFrame, field: Optional[str] = None,
                   date_format: Optional[str] = None) -> pd.DataFrame:
    """
    Parse the capture date and add `date_parsed`, `year` and `month` columns.

    Unparseable dates become NaT and their year/month are missing; the
    rows themselves are kept.
    """
    field = field or cfg.date_column
    date_format = date_format or cfg.date_format
    if field not in df.columns:
        raise KeyError(f"Date column '{field}' not found")

    df = df.copy()
    raw = df[field].astype('string').str.strip()
    df['date_parsed'] = pd.to_datetime(raw, format=date_format, errors='coerce')

    valid = int(df['date_parsed'].notna().sum())
    print(f"Found {valid} valid '{field}' values out of {len(df)}")
    if valid < len(df):
        print(f"Warning: {len(df) - valid} '{field}' values could not be parsed with format {date_format}.")

    df['year'] = df['date_parsed'].dt.year.astype('Int64')
    df['month'] = df['date_parsed'].dt.month.astype('Int64')
    return df


def label_sex(df: pd.DataFrame, config: Config = cfg) -> pd.DataFrame:
    """Add `sex_full` (Male / Female / Undetermined) from the one-letter sex code."""
    return recode(df, 'sex', config.sex_labels, config.sex_default, target='sex_full')


def label_site(df: pd.DataFrame, config: Config = cfg) -> pd.DataFrame:
    """Add `site_full` from the trapping grid code."""
    return recode(df, 'grid', config.site_labels, config.site_default, target='site_full')


def filter_age(df: pd.DataFrame, age_code: Optional[str] = None) -> pd.DataFrame:
    """Keep rows whose age code matches `age_code` (juveniles by default)."""
    code = (age_code or cfg.juvenile_code).strip().lower()
    return filter_rows(df, lambda row: _normalize_code(row['age']) == code)


def prepare_hares(df: pd.DataFrame, config: Config = cfg) -> pd.DataFrame:
    """
    Prepare the loaded table for analysis: date parts, readable labels and
    the juvenile subset.

    Args:
        df: Table returned by `loader.load_hares`

    Returns:
        Juvenile rows with `date_parsed`, `year`, `month`, `sex_full` and `site_full`
    """
    print("Preparing hare table for analysis...")
    df = add_date_parts(df, config.date_column, config.date_format)
    df = label_sex(df, config)
    df = label_site(df, config)
    juveniles = filter_age(df, config.juvenile_code)
    print(f"Juvenile records: {len(juveniles)}")
    return juveniles
