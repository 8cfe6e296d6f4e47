"""synth_regime configuration loaded from environment variables."""
import os
from typing import List
from pathlib import Path
from dotenv import load_dotenv

# Load .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# ============================================================================
# Asset Configuration
# ============================================================================

ASSETS: List[str] = [
    a.strip().upper() for a in os.getenv('ASSETS', 'BTC,ETH').split(',') if a.strip()
]

# Unknown assets get buffers on first ingest unless disabled
AUTO_REGISTER_ASSETS = bool(int(os.getenv('AUTO_REGISTER_ASSETS', '1')))

# ============================================================================
# Buffer Sizing
# ============================================================================

# 72h at 5-minute cadence is 864 snapshots
SNAPSHOT_BUFFER_CAPACITY = int(os.getenv('SNAPSHOT_BUFFER_CAPACITY', '1000'))
TILT_HISTORY_CAPACITY = int(os.getenv('TILT_HISTORY_CAPACITY', '20'))
REGIME_HISTORY_CAPACITY = int(os.getenv('REGIME_HISTORY_CAPACITY', '500'))

# ============================================================================
# Trigger Gate
# ============================================================================

TRIGGER_MIN_STRENGTH = float(os.getenv('TRIGGER_MIN_STRENGTH', '0.8'))
TRIGGER_COOLDOWN_MINUTES = float(os.getenv('TRIGGER_COOLDOWN_MINUTES', '30'))

# ============================================================================
# Logging Configuration
# ============================================================================

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
LOG_FILE = os.getenv('LOG_FILE', '')
LOG_FORMAT = os.getenv('LOG_FORMAT', 'detailed')

# ============================================================================
# Validation
# ============================================================================

def validate_config() -> None:
    """Validate configuration values."""
    errors = []

    if not ASSETS:
        errors.append("ASSETS must name at least one asset")

    # Buffer must hold more than a 24h lookback at 5-minute cadence
    if SNAPSHOT_BUFFER_CAPACITY < 300:
        errors.append("SNAPSHOT_BUFFER_CAPACITY must be at least 300")

    # Persistence and z-score filters need three entries
    if TILT_HISTORY_CAPACITY < 3:
        errors.append("TILT_HISTORY_CAPACITY must be at least 3")

    if REGIME_HISTORY_CAPACITY < 1:
        errors.append("REGIME_HISTORY_CAPACITY must be positive")

    if not (0 <= TRIGGER_MIN_STRENGTH <= 1):
        errors.append("TRIGGER_MIN_STRENGTH must be between 0 and 1")

    if TRIGGER_COOLDOWN_MINUTES < 0:
        errors.append("TRIGGER_COOLDOWN_MINUTES must be non-negative")

    if LOG_FORMAT not in ('detailed', 'json', 'simple'):
        errors.append("LOG_FORMAT must be one of detailed, json, simple")

    if errors:
        raise ValueError("Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors))


# ============================================================================
# Logging Setup
# ============================================================================

def setup_logging() -> None:
    """Configure logging based on config settings."""
    import logging
    import sys

    # Map log level string to logging constant
    level = getattr(logging, LOG_LEVEL, logging.INFO)

    # Configure format
    if LOG_FORMAT == 'json':
        # JSON format for structured logging
        format_string = '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "message": "%(message)s"}'
    elif LOG_FORMAT == 'detailed':
        format_string = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    else:  # simple
        format_string = '%(levelname)s: %(message)s'

    handlers = []

    # Always log to stdout
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(logging.Formatter(format_string))
    handlers.append(stdout_handler)

    # Optionally log to file
    if LOG_FILE:
        file_handler = logging.FileHandler(LOG_FILE)
        file_handler.setFormatter(logging.Formatter(format_string))
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        handlers=handlers,
        force=True
    )

    logging.getLogger('synth_regime').setLevel(level)

    # Reduce noise from third-party libraries
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)


# Validate config on import
validate_config()
