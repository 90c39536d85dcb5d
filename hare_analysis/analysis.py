#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
analysis.py - Statistical analysis of the prepared hare table

Contains functions for:
- Group counts and descriptive statistics by category
- Welch two-sample t-test and Cohen's d effect size
- Ordinary least-squares fit and Pearson correlation
- Running the full juvenile hare analysis
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Hashable, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
import statsmodels.formula.api as smf
from scipy import stats

from .config import Config, cfg
from .errors import InsufficientDataError
from .results import CorrelationResult, CountSummary, GroupSummary, RegressionResult, TestResult

KeyField = Union[str, Sequence[str]]


def _as_float(value) -> Optional[float]:
    """Convert a pandas/numpy scalar to float, mapping NaN to None."""
    if value is None or pd.isna(value):
        return None
    return float(value)


def _clean_sample(sample) -> pd.Series:
    """Numeric values of `sample` with missing entries dropped."""
    series = pd.Series(sample)
    return pd.to_numeric(series, errors='coerce').dropna().astype(float)


# ---------------------------------------------------------------------------
# Aggregation


def group_count(df: pd.DataFrame, key_field: KeyField) -> Dict[Hashable, int]:
    """
    Count rows per distinct key.

    Only keys present in the table appear (sorted); a year with no captures
    is simply absent. Rows with a missing key are not counted.

    Args:
        df: Input table
        key_field: Column name, or list of column names for composite (tuple) keys
    """
    if df.empty:
        return {}
    counts = df.groupby(key_field, dropna=True, observed=True, sort=True).size()
    return {key: int(n) for key, n in counts.items()}


def summary_stats(df: pd.DataFrame, key_field: KeyField, value_field: str) -> List[GroupSummary]:
    """
    Descriptive statistics of `value_field` for each distinct key.

    Statistics use only non-missing values; `count` still includes rows whose
    value is missing. A group without values has every statistic set to None,
    and a group with a single value has `sd` None (sample SD, n - 1 denominator).
    """
    if value_field not in df.columns:
        raise KeyError(f"Column '{value_field}' not found")
    if df.empty:
        return []

    summaries = []
    for key, group in df.groupby(key_field, dropna=True, observed=True, sort=True):
        values = _clean_sample(group[value_field])
        n = len(values)
        summaries.append(GroupSummary(
            key=key,
            count=len(group),
            n=n,
            mean=float(values.mean()) if n else None,
            median=float(values.median()) if n else None,
            sd=float(values.std(ddof=1)) if n >= 2 else None,
            min=float(values.min()) if n else None,
            max=float(values.max()) if n else None,
        ))
    return summaries


def summary_table(summaries: Sequence[GroupSummary],
                  key_names: Optional[Sequence[str]] = None) -> pd.DataFrame:
    """Tabulate GroupSummary records, splitting tuple keys into `key_names` columns."""
    rows = []
    for summary in summaries:
        row = summary.to_dict()
        key = row.pop('key')
        if key_names:
            parts = key if isinstance(key, tuple) else (key,)
            row = {**dict(zip(key_names, parts)), **row}
        else:
            row = {'key': key, **row}
        rows.append(row)

    columns = list(key_names or ['key']) + ['count', 'n', 'mean', 'median', 'sd', 'min', 'max']
    return pd.DataFrame(rows, columns=columns)


def count_summary(counts: Mapping[Hashable, int]) -> CountSummary:
    """Descriptive statistics of per-group counts (e.g. juveniles trapped per year)."""
    values = np.asarray(list(counts.values()), dtype=float)
    if values.size == 0:
        raise InsufficientDataError("No groups to summarise")
    return CountSummary(
        groups=int(values.size),
        total=int(values.sum()),
        mean=float(values.mean()),
        median=float(np.median(values)),
        sd=float(values.std(ddof=1)) if values.size >= 2 else None,
        min=int(values.min()),
        max=int(values.max()),
    )


# ---------------------------------------------------------------------------
# Two-sample comparison


def _require_two_samples(a: pd.Series, b: pd.Series) -> None:
    if len(a) < 2 or len(b) < 2:
        raise InsufficientDataError(
            f"Need at least 2 non-missing values in each sample (got {len(a)} and {len(b)})"
        )


def welch_df(var_a: float, n_a: int, var_b: float, n_b: int) -> float:
    """Welch-Satterthwaite degrees of freedom."""
    se_a = var_a / n_a
    se_b = var_b / n_b
    denom = se_a ** 2 / (n_a - 1) + se_b ** 2 / (n_b - 1)
    if denom == 0:
        return float('nan')
    return float((se_a + se_b) ** 2 / denom)


def effect_size(sample_a, sample_b) -> float:
    """
    Cohen's d for two independent samples, using the pooled standard deviation.

    Raises:
        InsufficientDataError: if either sample has fewer than 2 values, or both
            samples are constant with different means
    """
    a = _clean_sample(sample_a)
    b = _clean_sample(sample_b)
    _require_two_samples(a, b)

    n1, n2 = len(a), len(b)
    s1, s2 = a.std(ddof=1), b.std(ddof=1)
    pooled_sd = (((n1 - 1) * s1 ** 2 + (n2 - 1) * s2 ** 2) / (n1 + n2 - 2)) ** 0.5

    diff = a.mean() - b.mean()
    if pooled_sd == 0:
        if diff == 0:
            return 0.0
        raise InsufficientDataError("Cohen's d undefined: both samples constant with different means")
    return float(diff / pooled_sd)


def two_sample_test(sample_a, sample_b, alpha: float = 0.05) -> TestResult:
    """
    Welch's unequal-variance t-test with a two-sided p-value and Cohen's d.

    Args:
        sample_a: First sample (missing values are dropped)
        sample_b: Second sample (missing values are dropped)
        alpha: Significance level for the confidence interval and the
            `significant` flag

    Raises:
        InsufficientDataError: if either sample has fewer than 2 values, or both
            samples are constant with different means
    """
    a = _clean_sample(sample_a)
    b = _clean_sample(sample_b)
    _require_two_samples(a, b)

    n_a, n_b = len(a), len(b)
    mean_a, mean_b = float(a.mean()), float(b.mean())
    var_a, var_b = float(a.var(ddof=1)), float(b.var(ddof=1))
    diff = mean_a - mean_b
    se = np.sqrt(var_a / n_a + var_b / n_b)

    if se == 0:
        # Both samples constant: only identical values are comparable
        if diff != 0:
            raise InsufficientDataError("Welch t-test undefined: both samples constant with different means")
        return TestResult(
            n_a=n_a, n_b=n_b, mean_a=mean_a, mean_b=mean_b, difference=diff,
            statistic=0.0, df=float('nan'), p_value=1.0, effect_size=0.0,
            ci_low=diff, ci_high=diff, alpha=alpha,
        )

    t_stat, p_value = stats.ttest_ind(a, b, equal_var=False)
    dof = welch_df(var_a, n_a, var_b, n_b)
    margin = stats.t.ppf(1 - alpha / 2, dof) * se

    return TestResult(
        n_a=n_a,
        n_b=n_b,
        mean_a=mean_a,
        mean_b=mean_b,
        difference=diff,
        statistic=float(t_stat),
        df=dof,
        p_value=float(p_value),
        effect_size=effect_size(a, b),
        ci_low=float(diff - margin),
        ci_high=float(diff + margin),
        alpha=alpha,
    )


# ---------------------------------------------------------------------------
# Association


def paired_observations(xs, ys) -> Tuple[np.ndarray, np.ndarray]:
    """
    Align two variables row by row and keep the rows where both are present.

    `linear_fit` and `correlation` both go through here so their results are
    computed over exactly the same pairs.
    """
    x = pd.to_numeric(pd.Series(xs), errors='coerce').reset_index(drop=True)
    y = pd.to_numeric(pd.Series(ys), errors='coerce').reset_index(drop=True)
    if len(x) != len(y):
        raise ValueError(f"Variables differ in length ({len(x)} vs {len(y)})")
    mask = x.notna() & y.notna()
    return x[mask].to_numpy(dtype=float), y[mask].to_numpy(dtype=float)


def _pearson(x: np.ndarray, y: np.ndarray) -> Tuple[float, float]:
    if len(x) < 2:
        raise InsufficientDataError(f"Need at least 2 paired observations (got {len(x)})")
    if np.ptp(x) == 0 or np.ptp(y) == 0:
        raise InsufficientDataError("Correlation undefined for a constant variable")
    r, p = stats.pearsonr(x, y)
    return float(r), float(p)


def correlation(xs, ys) -> CorrelationResult:
    """
    Pearson correlation and its two-sided t-test p-value over paired,
    non-missing rows.
    """
    x, y = paired_observations(xs, ys)
    r, p = _pearson(x, y)
    return CorrelationResult(r=r, p_value=p, n=len(x))


def linear_fit(xs, ys, predictor: Optional[str] = None,
               response: Optional[str] = None) -> RegressionResult:
    """
    Ordinary least-squares line of `ys` on `xs` over paired, non-missing rows.

    R^2 is 1 - SS_res / SS_tot; it is None when `ys` is constant, and so are
    the correlation fields.

    Raises:
        InsufficientDataError: with fewer than 2 pairs or a constant predictor
    """
    predictor = predictor or getattr(xs, 'name', None) or 'x'
    response = response or getattr(ys, 'name', None) or 'y'

    x, y = paired_observations(xs, ys)
    n = len(x)
    if n < 2:
        raise InsufficientDataError(f"Need at least 2 paired observations (got {n})")
    if np.ptp(x) == 0:
        raise InsufficientDataError("Linear fit undefined for a constant predictor")

    model = smf.ols('y ~ x', data=pd.DataFrame({'x': x, 'y': y})).fit()
    intercept = float(model.params['Intercept'])
    slope = float(model.params['x'])

    residuals = y - (intercept + slope * x)
    ss_res = float(np.sum(residuals ** 2))
    ss_tot = float(np.sum((y - y.mean()) ** 2))

    if ss_tot == 0:
        r_squared, r, p = None, None, None
    else:
        r_squared = 1 - ss_res / ss_tot
        r, p = _pearson(x, y)

    # Standard errors need at least one residual degree of freedom
    if n > 2:
        slope_se = _as_float(model.bse['x'])
        intercept_se = _as_float(model.bse['Intercept'])
        residual_sd = float(np.sqrt(ss_res / (n - 2)))
    else:
        slope_se = intercept_se = residual_sd = None

    return RegressionResult(
        slope=slope,
        intercept=intercept,
        r_squared=r_squared,
        r=r,
        p_value=p,
        n=n,
        slope_stderr=slope_se,
        intercept_stderr=intercept_se,
        residual_sd=residual_sd,
        predictor=str(predictor),
        response=str(response),
    )


# ---------------------------------------------------------------------------
# Full analysis


def _run_statistic(name: str, func: Callable, *args, **kwargs) -> Any:
    """Run one statistic; insufficient data is reported and gives None."""
    print(f"--- Running Analysis: {name} ---")
    try:
        result = func(*args, **kwargs)
    except InsufficientDataError as e:
        print(f"Info: Insufficient data for {name}: {e}")
        return None
    print(f"Finished Analysis: {name}")
    return result


def perform_full_analysis(df_juveniles: pd.DataFrame, config: Config = cfg) -> Dict[str, Any]:
    """
    Run every analysis step on the prepared juvenile table.

    Args:
        df_juveniles: Output of `metrics.prepare_hares`
        config: Analysis settings (significance level, regression variables)

    Returns:
        Dictionary of named results; an entry is None when its statistic is
        undefined for the data
    """
    print("\n=== Performing Full Analysis ===")
    results: Dict[str, Any] = {'juveniles': df_juveniles}

    # 1. Juvenile trap counts per year
    annual_counts = group_count(df_juveniles, 'year')
    results['annual_counts'] = annual_counts
    results['annual_count_summary'] = _run_statistic(
        "Annual Juvenile Counts", count_summary, annual_counts)

    # 2. Weight summaries
    results['weight_by_sex'] = summary_stats(df_juveniles, 'sex_full', 'weight')
    results['weight_by_site_sex'] = summary_stats(df_juveniles, ['site_full', 'sex_full'], 'weight')
    undefined = [s.key for s in results['weight_by_site_sex'] if not s.defined]
    if undefined:
        print(f"Info: No weight values for groups: {undefined}")

    # 3. Male vs female juvenile weights
    males = df_juveniles.loc[df_juveniles['sex_full'] == config.sex_labels['m'], 'weight']
    females = df_juveniles.loc[df_juveniles['sex_full'] == config.sex_labels['f'], 'weight']
    results['weight_test'] = _run_statistic(
        "Welch t-test (Male vs Female Weight)", two_sample_test,
        males, females, alpha=config.significance_level)

    # 4. Weight vs hind foot length
    x = df_juveniles[config.regression_predictor]
    y = df_juveniles[config.regression_response]
    results['weight_hindft_fit'] = _run_statistic(
        "Linear Fit", linear_fit, x, y,
        predictor=config.regression_predictor, response=config.regression_response)
    results['weight_hindft_correlation'] = _run_statistic("Pearson Correlation", correlation, x, y)

    print("Full analysis complete.")
    return results
