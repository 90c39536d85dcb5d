"""Exception types raised by the hare analysis pipeline."""


class HareAnalysisError(Exception):
    """Base class for every error raised by hare_analysis."""


class DataAccessError(HareAnalysisError):
    """The input file is missing or cannot be read."""


class ParseError(DataAccessError):
    """The input file was read but its content is not a usable hare table."""


class DerivationError(HareAnalysisError):
    """A derived field could not be computed for a row."""


class InsufficientDataError(HareAnalysisError):
    """A statistic is undefined for the non-missing data supplied."""
