"""Exception hierarchy for ts-profitability."""

from .analysis import (
    AnalysisError,
    FileAccessError,
    OperationCancelledError,
    ParsingError,
)
from .base import ProfitabilityError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)

__all__ = [
    "ProfitabilityError",
    "AnalysisError",
    "FileAccessError",
    "ParsingError",
    "OperationCancelledError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
]
