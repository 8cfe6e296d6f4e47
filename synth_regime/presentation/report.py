"""Text rendering of regime/signal analytics for the agent prompt."""
from typing import List, Optional, Tuple

from synth_regime.analysis.percentiles import PercentileSummary, PercentileTrend, TrendDirection
from synth_regime.regimes.market_regime import RegimeResult
from synth_regime.signals.signal import Signal

# Levels shown in the compact band line
BAND_PERCENTILES = (5, 10, 50, 90, 95)


def percentile_signal(rank: int, trend: PercentileTrend) -> Tuple[str, str]:
    """
    Label for the current price's percentile rank combined with the median trend.

    Low ranks with an upward trend read LONG, high ranks with a downward trend
    SHORT; extremes (below P10 / above P90) not fighting the trend are STRONG_*.
    """
    trend_str = f"{trend.direction.value} ({trend.strength:+.1f})"

    if rank < 30 and trend.direction == TrendDirection.UPWARD:
        return "LONG", f"Price at P{rank} (low percentile) with {trend_str} trend"
    if rank > 70 and trend.direction == TrendDirection.DOWNWARD:
        return "SHORT", f"Price at P{rank} (high percentile) with {trend_str} trend"
    if rank < 10 and trend.direction != TrendDirection.DOWNWARD:
        return "STRONG_LONG", f"Price at P{rank} (extreme low) with {trend_str} trend"
    if rank > 90 and trend.direction != TrendDirection.UPWARD:
        return "STRONG_SHORT", f"Price at P{rank} (extreme high) with {trend_str} trend"
    return "NEUTRAL", f"Price at P{rank} with {trend_str} trend - no clear signal"


def format_asset_report(
    asset: str,
    current_price: float,
    regime: Optional[RegimeResult],
    signal: Signal,
    summary: Optional[PercentileSummary] = None,
    trend: Optional[PercentileTrend] = None,
) -> str:
    """
    Render one asset's analytics as text.

    Lines prefixed ``CURRENT_PRICE_PERCENTILE:``, ``MARKET_REGIME:`` and
    ``REGIME_SIGNAL:`` are parsed downstream and must keep their shape.
    """
    lines: List[str] = [f"{asset.upper()} 24h FORECAST ANALYSIS", f"Current Price: ${current_price:,.2f}"]

    if summary is not None:
        lines.append(f"CURRENT_PRICE_PERCENTILE: P{summary.rank}")
        bands = ", ".join(
            f"P{p}=${summary.price_at(p):,.0f}" for p in BAND_PERCENTILES if summary.price_at(p) is not None
        )
        lines.append(f"Forecast Bands: {bands}")
        if trend is not None:
            label, explanation = percentile_signal(summary.rank, trend)
            lines.append(f"Median Trend: {trend.direction.value} ({trend.strength:+.1f})")
            lines.append(f"Percentile Signal: {label} - {explanation}")
    else:
        lines.append("CURRENT_PRICE_PERCENTILE: N/A")

    if regime is not None:
        lines.append(f"MARKET_REGIME: {regime.regime.value} ({regime.confidence * 100:.0f}%)")
        lines.append(
            f"Drift: mean {regime.drift_mean:+.2%}, std {regime.drift_std:.2%}, "
            f"noise ratio {regime.vol_normalized:.2f}"
        )
    else:
        lines.append("MARKET_REGIME: UNKNOWN (insufficient 24h history)")

    lines.append(
        f"REGIME_SIGNAL: {signal.direction.value} {signal.strength * 100:.0f}% - {signal.reason}"
    )
    return "\n".join(lines)
