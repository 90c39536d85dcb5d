"""Result records handed from the analysis functions to the reporting layer.

Statistic fields typed ``Optional[float]`` use ``None`` for "undefined", e.g.
the standard deviation of a group with a single non-missing value.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Hashable, Optional


@dataclass(frozen=True)
class GroupSummary:
    """Descriptive statistics of one numeric field within one group."""

    key: Hashable
    count: int
    n: int
    mean: Optional[float]
    median: Optional[float]
    sd: Optional[float]
    min: Optional[float]
    max: Optional[float]

    @property
    def defined(self) -> bool:
        """True when the group has at least one non-missing value."""
        return self.n > 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CountSummary:
    """Descriptive statistics of a collection of group counts."""

    groups: int
    total: int
    mean: float
    median: float
    sd: Optional[float]
    min: int
    max: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TestResult:
    """Welch two-sample t-test together with Cohen's d."""

    n_a: int
    n_b: int
    mean_a: float
    mean_b: float
    difference: float
    statistic: float
    df: float
    p_value: float
    effect_size: float
    ci_low: float
    ci_high: float
    alpha: float = 0.05

    # Keep pytest from collecting this class when imported into test modules.
    __test__ = False

    @property
    def significant(self) -> bool:
        return self.p_value < self.alpha

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['significant'] = self.significant
        return data


@dataclass(frozen=True)
class CorrelationResult:
    """Pearson product-moment correlation."""

    r: float
    p_value: float
    n: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RegressionResult:
    """Ordinary least-squares line ``y = intercept + slope * x``."""

    slope: float
    intercept: float
    r_squared: Optional[float]
    r: Optional[float]
    p_value: Optional[float]
    n: int
    slope_stderr: Optional[float] = None
    intercept_stderr: Optional[float] = None
    residual_sd: Optional[float] = None
    predictor: Optional[str] = None
    response: Optional[str] = None

    def predict(self, x: float) -> float:
        return self.intercept + self.slope * x

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
