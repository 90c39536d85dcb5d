#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
config.py - Configuration settings for the snowshoe hare analysis
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple


@dataclass
class Config:
    """Configuration settings for the analysis."""
    # --- File Paths ---
    csv_default: str = "data/bonanza_hares.csv"  # Default input
    out_dir: str = "Output/hare_analysis"  # Default output directory

    # --- Input Schema ---
    date_column: str = "date"
    date_format: str = "%m/%d/%y"  # e.g. 11/26/98
    required_columns: Tuple[str, ...] = ("date", "age", "sex", "grid", "weight", "hindft")
    numeric_columns: Tuple[str, ...] = ("weight", "hindft")
    text_columns: Tuple[str, ...] = ("date", "time", "grid", "trap", "sex", "age", "notes", "study")
    column_aliases: Dict[str, str] = field(default_factory=lambda: {
        'hind_ft': 'hindft',
        'hindfoot': 'hindft',
        'hind_foot': 'hindft',
        'hind_foot_length': 'hindft',
        'site': 'grid',
        'wt': 'weight',
    })

    # --- Labels ---
    juvenile_code: str = "j"
    sex_labels: Dict[str, str] = field(default_factory=lambda: {
        'm': 'Male',
        'f': 'Female',
    })
    sex_default: str = "Undetermined"
    site_labels: Dict[str, str] = field(default_factory=lambda: {
        'bonrip': 'Bonanza Riparian',
        'bonmat': 'Bonanza Mature',
        'bonbs': 'Bonanza Black Spruce',
    })
    site_default: str = "Unknown site"

    # --- Analysis Parameters ---
    significance_level: float = 0.05  # Alpha for statistical tests
    # Weight as a function of hind foot length
    regression_predictor: str = "hindft"
    regression_response: str = "weight"

    # --- Plotting Configuration ---
    plot_style: str = 'seaborn-v0_8-darkgrid'
    plot_figsize: Tuple[int, int] = (10, 6)
    plot_dpi: int = 300


# Instantiate the config
cfg = Config()
