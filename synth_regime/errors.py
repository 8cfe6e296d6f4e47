"""Exception types raised by synth_regime."""


class SynthRegimeError(Exception):
    """Base class for synth_regime errors."""


class SnapshotError(SynthRegimeError, ValueError):
    """A forecast snapshot payload could not be parsed."""


class UnknownAssetError(SynthRegimeError, KeyError):
    """Asset has no registered buffers and auto-registration is disabled."""

    def __init__(self, asset: str):
        super().__init__(asset)
        self.asset = asset

    def __str__(self) -> str:
        return f"Asset not tracked: {self.asset}"
