"""CLI entrypoint replaying a stored snapshot file through the signal engine."""
import argparse
import logging
from typing import List, Optional, Tuple

import pandas as pd

from synth_regime import config
from synth_regime.engine import SignalEngine
from synth_regime.ingestion.snapshot import Snapshot, load_snapshot_store
from synth_regime.presentation.report import format_asset_report
from synth_regime.signals.signal import Signal
from synth_regime.signals.trigger import SignalTrigger

logger = logging.getLogger(__name__)


def replay(
    engine: SignalEngine,
    asset: str,
    snapshots: List[Snapshot],
    trigger: SignalTrigger,
) -> Tuple[pd.DataFrame, Optional[Signal]]:
    """Feed snapshots oldest→newest, generating a signal after each one."""
    rows = []
    signal: Optional[Signal] = None
    for snap in snapshots:
        if not engine.ingest(asset, snap):
            continue
        signal = engine.generate_signal(asset)
        record = engine.store.regime_tracker.current(asset.upper())
        decision = trigger.evaluate(asset, signal, snap.timestamp)
        rows.append(
            {
                "timestamp": pd.to_datetime(snap.timestamp, unit="ms", utc=True),
                "price": snap.current_price,
                "regime": record.regime.value if record else None,
                "direction": signal.direction.value,
                "strength": round(signal.strength, 3),
                "triggered": decision.fired,
                "reason": signal.reason,
            }
        )
    return pd.DataFrame(rows), signal


def main() -> None:
    parser = argparse.ArgumentParser(description="Replay stored forecast snapshots through synth_regime")
    parser.add_argument(
        "--file",
        default="data/lp-bounds-snapshots.json",
        help="Stored snapshot JSON file",
    )
    parser.add_argument(
        "--asset",
        default=config.ASSETS[0],
        help="Asset symbol to replay",
    )
    parser.add_argument(
        "--min-strength",
        type=float,
        default=config.TRIGGER_MIN_STRENGTH,
        help="Minimum signal strength that fires a trigger",
    )
    parser.add_argument(
        "--cooldown-minutes",
        type=float,
        default=config.TRIGGER_COOLDOWN_MINUTES,
        help="Cooldown between same-direction triggers",
    )
    parser.add_argument(
        "--tail",
        type=int,
        default=20,
        help="Rows of the signal table to print (0 prints all)",
    )
    args = parser.parse_args()

    config.setup_logging()

    asset = args.asset.upper()
    store = load_snapshot_store(args.file)
    snapshots = store.get(asset, [])
    if not snapshots:
        logger.error("No %s snapshots in %s", asset, args.file)
        raise SystemExit(1)

    engine = SignalEngine.from_config()
    trigger = SignalTrigger(
        min_strength=args.min_strength,
        cooldown_ms=int(args.cooldown_minutes * 60 * 1000),
    )

    table, last_signal = replay(engine, asset, snapshots, trigger)
    if table.empty or last_signal is None:
        logger.error("No usable %s snapshots in %s", asset, args.file)
        raise SystemExit(1)

    shown = table if args.tail <= 0 else table.tail(args.tail)
    print(shown.to_string(index=False))
    print()
    print(f"Triggers fired: {int(table['triggered'].sum())} / {len(table)} evaluations")

    latest_price = snapshots[-1].current_price
    print()
    print(
        format_asset_report(
            asset,
            latest_price,
            engine.classify_regime(asset),
            last_signal,
            engine.percentile_summary(asset, latest_price),
            engine.percentile_trend(asset),
        )
    )


if __name__ == "__main__":  # pragma: no cover
    main()
