#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
viz.py - Figures for the juvenile snowshoe hare analysis

Contains functions for:
- Annual juvenile trap counts
- Juvenile weight by sex and site
- Weight vs hind foot length with the fitted line
"""
from __future__ import annotations

import os

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

from .config import Config, cfg


def setup_plot_style(config: Config = cfg):
    """Set up consistent plot styling for all visualizations."""
    plt.style.use(config.plot_style)

    plt.rcParams['figure.figsize'] = config.plot_figsize
    plt.rcParams['font.size'] = 12
    plt.rcParams['axes.titlesize'] = 14
    plt.rcParams['axes.labelsize'] = 12
    plt.rcParams['xtick.labelsize'] = 10
    plt.rcParams['ytick.labelsize'] = 10

    sns.set_palette('viridis')


def create_annual_counts_plot(annual_counts, output_path, config: Config = cfg):
    """
    Bar chart of juvenile hares trapped per year.

    Args:
        annual_counts: Mapping of year to juvenile count
        output_path: Path to save the visualization
    """
    if not annual_counts:
        print("Warning: No annual counts to plot.")
        return None

    counts = pd.DataFrame({'year': [int(y) for y in annual_counts.keys()],
                           'count': list(annual_counts.values())})

    fig, ax = plt.subplots(figsize=config.plot_figsize)
    ax.bar(counts['year'], counts['count'], color=sns.color_palette()[0])
    ax.set_title('Juvenile Snowshoe Hare Trappings per Year')
    ax.set_xlabel('Year')
    ax.set_ylabel('Juvenile hares trapped')
    ax.set_xticks(counts['year'])
    plt.setp(ax.get_xticklabels(), rotation=45, ha='right')

    fig.tight_layout()
    fig.savefig(output_path, dpi=config.plot_dpi, bbox_inches='tight')
    plt.close(fig)

    return output_path


def create_weight_by_sex_site_plot(df_juveniles, output_path, config: Config = cfg):
    """
    Box plot of juvenile weight by sex, one panel per site, with the
    individual observations overlaid.
    """
    need_cols = {'sex_full', 'site_full', 'weight'}
    if df_juveniles is None or df_juveniles.empty or not need_cols.issubset(df_juveniles.columns):
        print("Warning: Invalid juvenile data for weight plot.")
        return None

    plot_df = df_juveniles.dropna(subset=['weight'])
    if plot_df.empty:
        print("Warning: No juvenile weights to plot.")
        return None

    sites = sorted(plot_df['site_full'].unique())
    sexes = sorted(plot_df['sex_full'].unique())

    fig, axes = plt.subplots(1, len(sites), figsize=(5 * len(sites), 6), sharey=True, squeeze=False)
    for ax, site in zip(axes[0], sites):
        site_df = plot_df[plot_df['site_full'] == site]
        sns.boxplot(data=site_df, x='sex_full', y='weight', order=sexes, ax=ax,
                    showfliers=False, color='lightgray')
        sns.stripplot(data=site_df, x='sex_full', y='weight', order=sexes, ax=ax,
                      hue='sex_full', hue_order=sexes, legend=False, alpha=0.6, size=4)
        ax.set_title(site)
        ax.set_xlabel('')
        ax.set_ylabel('Weight (g)')

    fig.suptitle('Juvenile Hare Weight by Sex and Site')
    fig.tight_layout()
    fig.savefig(output_path, dpi=config.plot_dpi, bbox_inches='tight')
    plt.close(fig)

    return output_path


def create_weight_hindft_plot(df_juveniles, fit, output_path, config: Config = cfg):
    """
    Scatter of the regression variables with the fitted OLS line.

    Args:
        df_juveniles: Prepared juvenile table
        fit: RegressionResult, or None to draw the points only
        output_path: Path to save the visualization
    """
    x_col, y_col = config.regression_predictor, config.regression_response
    if fit is not None and fit.predictor and fit.response:
        x_col, y_col = fit.predictor, fit.response

    if df_juveniles is None or df_juveniles.empty or not {x_col, y_col}.issubset(df_juveniles.columns):
        print("Warning: Invalid juvenile data for regression plot.")
        return None

    pairs = df_juveniles[[x_col, y_col]].dropna()
    if pairs.empty:
        print("Warning: No paired observations to plot.")
        return None

    labels = {'weight': 'Weight (g)', 'hindft': 'Hind foot length (mm)'}

    fig, ax = plt.subplots(figsize=config.plot_figsize)
    sns.scatterplot(data=pairs, x=x_col, y=y_col, ax=ax, alpha=0.6)

    if fit is not None:
        xs = np.linspace(pairs[x_col].min(), pairs[x_col].max(), 100)
        ax.plot(xs, fit.intercept + fit.slope * xs, color='black', linewidth=1.5)
        text = f"y = {fit.slope:.2f}x + {fit.intercept:.1f}"
        if fit.r_squared is not None:
            text += f"\nR² = {fit.r_squared:.3f}, r = {fit.r:.3f}"
        ax.text(0.02, 0.95, text, transform=ax.transAxes, va='top', fontsize=10)

    ax.set_title('Juvenile Hare Weight and Hind Foot Length')
    ax.set_xlabel(labels.get(x_col, x_col))
    ax.set_ylabel(labels.get(y_col, y_col))

    fig.tight_layout()
    fig.savefig(output_path, dpi=config.plot_dpi, bbox_inches='tight')
    plt.close(fig)

    return output_path


def create_figures(analysis_results, output_dir, config: Config = cfg):
    """
    Render every figure that has data.

    Returns:
        Dictionary of figure name to saved path (None where skipped)
    """
    print("Creating figures...")
    os.makedirs(output_dir, exist_ok=True)
    setup_plot_style(config)

    figures = {}
    figures['annual_counts'] = create_annual_counts_plot(
        analysis_results.get('annual_counts'),
        os.path.join(output_dir, 'juvenile_annual_counts.png'), config)
    figures['weight_by_sex_site'] = create_weight_by_sex_site_plot(
        analysis_results.get('juveniles'),
        os.path.join(output_dir, 'juvenile_weight_by_sex_site.png'), config)
    figures['weight_hindft'] = create_weight_hindft_plot(
        analysis_results.get('juveniles'),
        analysis_results.get('weight_hindft_fit'),
        os.path.join(output_dir, 'juvenile_weight_hindft.png'), config)

    for name, path in figures.items():
        if path:
            print(f"Saved figure: {path}")
    return figures
