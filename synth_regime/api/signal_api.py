"""Read-only FastAPI endpoints over a SignalEngine."""
from typing import Optional
import logging

try:
    from fastapi import APIRouter, HTTPException, Query
except ImportError as exc:  # pragma: no cover - optional dependency
    raise ImportError(
        "FastAPI is required for synth_regime.api.signal_api; install fastapi to use these endpoints"
    ) from exc

from synth_regime.engine import SignalEngine
from synth_regime.errors import UnknownAssetError
from synth_regime.presentation.report import percentile_signal

logger = logging.getLogger(__name__)


def create_router(engine: SignalEngine) -> APIRouter:
    """Build routes bound to one engine instance."""
    router = APIRouter(prefix="/signals")

    def _not_found(symbol: str) -> HTTPException:
        return HTTPException(status_code=404, detail=f"No analytics buffers for {symbol.upper()}")

    @router.get("/assets")
    def list_assets():
        return engine.store.assets()

    @router.get("/{symbol}/status")
    def get_status(symbol: str):
        try:
            return engine.status(symbol)
        except UnknownAssetError:
            raise _not_found(symbol)

    @router.get("/{symbol}/regime")
    def get_regime(symbol: str):
        try:
            regime = engine.classify_regime(symbol)
        except UnknownAssetError:
            raise _not_found(symbol)
        return regime.to_dict() if regime is not None else None

    # POST: generating a signal advances the tilt history
    @router.post("/{symbol}/signal")
    def post_signal(symbol: str):
        try:
            signal = engine.generate_signal(symbol)
        except UnknownAssetError:
            raise _not_found(symbol)
        return signal.to_dict()

    @router.get("/{symbol}/percentiles")
    def get_percentiles(
        symbol: str,
        current_price: Optional[float] = Query(None, gt=0, description="Price to rank; defaults to latest"),
    ):
        try:
            if current_price is None:
                latest = engine.store.get(symbol, create=False).snaps.latest()
                if latest is None:
                    raise HTTPException(status_code=404, detail="No snapshots available")
                current_price = latest.price
            summary = engine.percentile_summary(symbol, current_price)
            trend = engine.percentile_trend(symbol)
        except UnknownAssetError:
            raise _not_found(symbol)
        if summary is None:
            return None
        label, explanation = percentile_signal(summary.rank, trend)
        return {
            **summary.to_dict(),
            "trend": trend.to_dict(),
            "signal": label,
            "explanation": explanation,
        }

    @router.get("/{symbol}/transitions")
    def get_transitions(symbol: str, limit: int = Query(50, ge=1, le=500)):
        try:
            state = engine.store.get(symbol, create=False)
        except UnknownAssetError:
            raise _not_found(symbol)
        return [t.to_dict() for t in state.transitions.history(limit)]

    return router


def attach_signal_routes(app, engine: SignalEngine) -> None:
    app.include_router(create_router(engine))
    logger.info("Attached signal routes for %s", ", ".join(engine.store.assets()) or "no assets")
