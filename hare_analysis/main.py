#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
main.py - Main script for the juvenile snowshoe hare analysis

This script ties together the loader, metrics, analysis, and viz modules
to provide a complete pipeline from the raw capture file to result tables
and figures.

Usage:
    python -m hare_analysis.main --input_file data/bonanza_hares.csv --output_dir Output
"""

import argparse
import json
import math
import os
import sys
import traceback
from dataclasses import replace
from datetime import datetime

import pandas as pd

from . import analysis, metrics, viz
from .config import Config, cfg
from .errors import HareAnalysisError
from .loader import load_hares


def save_dataframe(df, name, output_dir):
    """Save a DataFrame to a CSV file in the output directory."""
    if df is None or df.empty:
        print(f"Skipping CSV save for '{name}' as the DataFrame is empty or None.")
        return None

    os.makedirs(output_dir, exist_ok=True)
    output_path = os.path.join(output_dir, f"{name}.csv")
    df.to_csv(output_path, index=False)
    print(f"Saved CSV: {output_path}")
    return output_path


def _json_value(value):
    """Native Python value for JSON; NaN and infinities become null."""
    # Convert numpy types to native Python types for JSON serialization
    if hasattr(value, 'item'):
        value = value.item()
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def save_json(data, name, output_dir):
    """Save a result record (anything with `to_dict`) or a dictionary as JSON."""
    if data is None:
        print(f"Skipping JSON save for '{name}' as the result is undefined.")
        return None
    if hasattr(data, 'to_dict'):
        data = data.to_dict()
    if not isinstance(data, dict):
        print(f"Skipping JSON save for '{name}' as input is not a dictionary.")
        return None

    os.makedirs(output_dir, exist_ok=True)
    output_path = os.path.join(output_dir, f"{name}.json")

    serializable_dict = {str(k): _json_value(v) for k, v in data.items()}
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(serializable_dict, f, indent=4, default=str, allow_nan=False)
    print(f"Saved JSON: {output_path}")
    return output_path


def save_results(analysis_results, output_dir):
    """Save analysis results to CSV and JSON files under `output_dir/data`."""
    print("\n--- Saving Analysis Results ---")
    data_dir = os.path.join(output_dir, "data")
    os.makedirs(data_dir, exist_ok=True)

    saved = {}

    annual_counts = analysis_results.get('annual_counts') or {}
    saved['annual_counts'] = save_dataframe(
        pd.DataFrame({'year': list(annual_counts.keys()), 'count': list(annual_counts.values())}),
        "juvenile_annual_counts", data_dir)

    saved['weight_by_sex'] = save_dataframe(
        analysis.summary_table(analysis_results.get('weight_by_sex', []), key_names=['sex']),
        "juvenile_weight_by_sex", data_dir)
    saved['weight_by_site_sex'] = save_dataframe(
        analysis.summary_table(analysis_results.get('weight_by_site_sex', []), key_names=['site', 'sex']),
        "juvenile_weight_by_site_sex", data_dir)

    for key, stem in [('annual_count_summary', 'juvenile_annual_count_summary'),
                      ('weight_test', 'juvenile_weight_welch_test'),
                      ('weight_hindft_fit', 'juvenile_weight_hindft_fit'),
                      ('weight_hindft_correlation', 'juvenile_weight_hindft_correlation')]:
        saved[key] = save_json(analysis_results.get(key), stem, data_dir)

    print("All results saved successfully.")
    return saved


def run_pipeline(input_file, output_dir, config: Config = cfg, skip_plots=False):
    """
    Load, prepare, analyse and report.

    Returns:
        Dictionary of analysis results

    Raises:
        DataAccessError: if the input file cannot be loaded
    """
    print("Step 1: Loading capture data...")
    df_hares = load_hares(input_file, config)

    print("\nStep 2: Preparing juvenile records...")
    df_juveniles = metrics.prepare_hares(df_hares, config)

    print("\nStep 3: Performing analysis...")
    results = analysis.perform_full_analysis(df_juveniles, config)

    save_results(results, output_dir)

    if not skip_plots:
        print("\nStep 4: Creating figures...")
        results['figures'] = viz.create_figures(results, os.path.join(output_dir, "figures"), config)
    else:
        print("\nSkipping figure creation as requested.")

    return results


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Juvenile Snowshoe Hare Analysis")
    p.add_argument("--input_file", default=cfg.csv_default,
                   help=f"Path to input CSV file (default: {cfg.csv_default})")
    p.add_argument("--output_dir", default=cfg.out_dir,
                   help=f"Base directory for output files (default: {cfg.out_dir})")
    p.add_argument("--alpha", type=float, default=cfg.significance_level,
                   help="Significance level for the Welch t-test")
    p.add_argument("--skip_plots", action="store_true", help="Do not render figures")
    return p.parse_args(argv)


def main(argv=None):
    """Main execution function: parses args, runs pipeline."""
    args = parse_args(argv)
    config = replace(cfg, out_dir=args.output_dir, significance_level=args.alpha)

    print("\n=== Juvenile Snowshoe Hare Analysis ===")
    print(f"Input file: {args.input_file}")
    print(f"Output directory: {config.out_dir}\n")

    start_time = datetime.now()
    try:
        run_pipeline(args.input_file, config.out_dir, config, skip_plots=args.skip_plots)
    except HareAnalysisError as e:
        print(f"\nERROR: {e}")
        traceback.print_exc()
        return 1

    execution_time = (datetime.now() - start_time).total_seconds()
    print("\n=== Analysis Complete! ===")
    print(f"Execution time: {execution_time:.2f} seconds")
    print(f"Results saved to: {config.out_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
