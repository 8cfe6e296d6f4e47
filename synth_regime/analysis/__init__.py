"""Forecast snapshot analytics."""

from .quantiles import QuantileLevels, extract_quantiles
from .rolling_stats import RollingStats, compute_rolling_stats
from .percentiles import (
    PercentileLevel,
    PercentileSummary,
    PercentileTrend,
    TrendDirection,
    detect_percentile_trend,
    summarize_percentiles,
)

__all__ = [
    "QuantileLevels",
    "extract_quantiles",
    "RollingStats",
    "compute_rolling_stats",
    "PercentileLevel",
    "PercentileSummary",
    "summarize_percentiles",
    "PercentileTrend",
    "TrendDirection",
    "detect_percentile_trend",
]
