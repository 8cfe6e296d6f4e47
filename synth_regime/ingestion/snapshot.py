"""Forecast snapshot records and payload parsing."""
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from synth_regime.errors import SnapshotError

logger = logging.getLogger(__name__)

HORIZON_KEY = "24h"


@dataclass(frozen=True)
class Snapshot:
    """
    One 24h price-forecast distribution for an asset.

    ``probability_below`` maps a price level to the forecast probability that
    the price ends the horizon below it. Keys are parsed from decimal strings.
    """

    timestamp: int  # epoch milliseconds
    current_price: float
    probability_below: Dict[float, float]
    probability_above: Dict[float, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Instances built directly get the same checks as parsed payloads
        object.__setattr__(self, "timestamp", _parse_timestamp(self.timestamp))
        object.__setattr__(self, "current_price", _parse_price(self.current_price))
        object.__setattr__(
            self,
            "probability_below",
            _parse_probability_map(self.probability_below, "probability_below"),
        )
        object.__setattr__(
            self,
            "probability_above",
            _parse_probability_map(self.probability_above, "probability_above"),
        )

    def price_levels(self) -> List[float]:
        """Price levels of the below-curve, ascending."""
        return sorted(self.probability_below)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Snapshot":
        """
        Build a Snapshot from either the flat record or the stored LP-bounds form.

        Flat: ``{timestamp, currentPrice, probabilityBelow, probabilityAbove}``
        (snake_case keys accepted too). Stored: ``{timestamp, bounds: {current_price,
        data: {"24h": {probability_below, probability_above}}}}``.
        """
        if not isinstance(payload, Mapping):
            raise SnapshotError(f"Snapshot payload must be a mapping, got {type(payload).__name__}")

        bounds = payload.get("bounds")
        if isinstance(bounds, Mapping):
            horizon = (bounds.get("data") or {}).get(HORIZON_KEY)
            if not isinstance(horizon, Mapping):
                raise SnapshotError(f"Stored snapshot missing '{HORIZON_KEY}' horizon data")
            raw_price = bounds.get("current_price")
            raw_below = horizon.get("probability_below")
            raw_above = horizon.get("probability_above")
        else:
            raw_price = _first_present(payload, "currentPrice", "current_price")
            raw_below = _first_present(payload, "probabilityBelow", "probability_below")
            raw_above = _first_present(payload, "probabilityAbove", "probability_above")

        return cls(
            timestamp=payload.get("timestamp"),
            current_price=raw_price,
            probability_below=raw_below,
            probability_above=raw_above if raw_above is not None else {},
        )


def _first_present(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in payload:
            return payload[key]
    return None


def _parse_timestamp(value: Any) -> int:
    if value is None or isinstance(value, bool):
        raise SnapshotError("Snapshot missing timestamp")
    try:
        ts = float(value)
    except (TypeError, ValueError) as exc:
        raise SnapshotError(f"Invalid snapshot timestamp: {value!r}") from exc
    if not math.isfinite(ts) or ts < 0:
        raise SnapshotError(f"Invalid snapshot timestamp: {value!r}")
    return int(ts)


def _parse_price(value: Any) -> float:
    if value is None or isinstance(value, bool):
        raise SnapshotError("Snapshot missing current price")
    try:
        price = float(value)
    except (TypeError, ValueError) as exc:
        raise SnapshotError(f"Invalid current price: {value!r}") from exc
    if not math.isfinite(price) or price <= 0:
        raise SnapshotError(f"Current price must be positive, got {value!r}")
    return price


def _parse_probability_map(raw: Any, name: str) -> Dict[float, float]:
    if not isinstance(raw, Mapping):
        raise SnapshotError(f"Snapshot {name} must be a mapping")

    parsed: Dict[float, float] = {}
    for key, prob in raw.items():
        try:
            level = float(key)
            p = float(prob)
        except (TypeError, ValueError) as exc:
            raise SnapshotError(f"Invalid {name} entry {key!r}: {prob!r}") from exc
        if not (math.isfinite(level) and math.isfinite(p)):
            raise SnapshotError(f"Non-finite {name} entry {key!r}: {prob!r}")
        if not 0.0 <= p <= 1.0:
            raise SnapshotError(f"{name} probability out of range at {key!r}: {p}")
        parsed[level] = p
    return parsed


def load_snapshot_store(path: Union[str, Path]) -> Dict[str, List[Snapshot]]:
    """
    Read a stored snapshot file into per-asset Snapshot lists (oldest first).

    Expected shape: ``{"version": "1.0", "snapshots": {"BTC": [...], "ETH": [...]}}``.
    Malformed entries are logged and skipped.
    """
    with open(path, "r", encoding="utf-8") as fh:
        store = json.load(fh)

    raw_snapshots: Optional[Mapping[str, Any]] = store.get("snapshots") if isinstance(store, Mapping) else None
    if not isinstance(raw_snapshots, Mapping):
        raise SnapshotError(f"Snapshot store {path} has no 'snapshots' section")

    loaded: Dict[str, List[Snapshot]] = {}
    for asset, entries in raw_snapshots.items():
        snaps: List[Snapshot] = []
        for idx, entry in enumerate(entries or []):
            try:
                snaps.append(Snapshot.from_payload(entry))
            except SnapshotError as exc:
                logger.warning("Skipping malformed %s snapshot #%d: %s", asset, idx, exc)
        snaps.sort(key=lambda s: s.timestamp)
        loaded[str(asset).upper()] = snaps
        logger.info("Loaded %d %s snapshots from %s", len(snaps), asset, path)

    return loaded
