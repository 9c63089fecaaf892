"""Default configuration parameters for the lap timer."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ClockParams:
    """Clock engine parameters."""
    tick_interval_seconds: float = 0.01              # Nominal tick period


@dataclass(frozen=True)
class PersistenceParams:
    """Session persistence parameters."""
    backend: str = "sqlite"                          # sqlite, memory
    db_path: str = "laptimer.db"

    # Key names in the key-value store
    key_elapsed: str = "clock.elapsed"
    key_is_running: str = "clock.isRunning"
    key_laps: str = "clock.laps"

    # Tick saves: 0 saves every tick, negative disables them
    tick_save_interval_seconds: float = 1.0


@dataclass(frozen=True)
class LapParams:
    """Lap ledger parameters."""
    default_name_prefix: str = "Lap"


@dataclass(frozen=True)
class LoggingParams:
    """Logging parameters."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    clock: ClockParams
    persistence: PersistenceParams
    laps: LapParams
    logging: LoggingParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        clock=ClockParams(),
        persistence=PersistenceParams(),
        laps=LapParams(),
        logging=LoggingParams(),
    )
