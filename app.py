"""FastAPI bootstrap wiring an in-memory synth_regime engine."""
from fastapi import FastAPI

from synth_regime.config import setup_logging
from synth_regime.engine import SignalEngine
from synth_regime.state.store import AnalyticsStore
from synth_regime.api import signal_api


def create_app(symbols=None, engine=None) -> FastAPI:
    app = FastAPI(title="synth_regime Signal API", version="0.1.0")

    if engine is None:
        if symbols is None:
            engine = SignalEngine.from_config()
        else:
            engine = SignalEngine(AnalyticsStore(assets=symbols))

    app.state.engine = engine
    signal_api.attach_signal_routes(app, engine)

    return app


setup_logging()
app = create_app()
