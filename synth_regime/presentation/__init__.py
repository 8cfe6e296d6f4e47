"""Presentation adapters kept outside the analytics core."""

from .report import format_asset_report, percentile_signal

__all__ = ["format_asset_report", "percentile_signal"]
