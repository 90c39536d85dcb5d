"""
hare_analysis - Juvenile snowshoe hare analysis for the Bonanza Creek LTER
capture-recapture records.
"""

from .config import Config, cfg
from .errors import (
    DataAccessError,
    DerivationError,
    HareAnalysisError,
    InsufficientDataError,
    ParseError,
)
from .results import CorrelationResult, CountSummary, GroupSummary, RegressionResult, TestResult

__all__ = [
    "Config",
    "cfg",
    "HareAnalysisError",
    "DataAccessError",
    "ParseError",
    "DerivationError",
    "InsufficientDataError",
    "GroupSummary",
    "CountSummary",
    "TestResult",
    "RegressionResult",
    "CorrelationResult",
]
