#!/usr/bin/env python3
"""
Basic Usage Example - Lap Timer Session

This script walks a headless lap timer session through a typical workout
using a manual tick source and in-memory storage. It shows how to:
- Open a session and subscribe to change events
- Start, stop and reset the clock
- Save, rename and delete laps
- Restore the session from storage after a simulated restart

Run: python examples/basic_usage.py
"""

from collections import Counter

from laptimer_app.config.defaults import (
    DefaultConfig, ClockParams, PersistenceParams, LapParams, LoggingParams
)
from laptimer_app.logging import configure_logging
from laptimer_app.persistence.memory_store import MemoryKeyValueStore
from laptimer_app.state.models import SessionEvent
from laptimer_app.state.session import LapTimerSession, open_session
from laptimer_app.ticker.manual import ManualTickSource
from laptimer_app.utils.time import format_clock_time, format_elapsed


def print_laps(session: LapTimerSession) -> None:
    """Print the ledger, newest first."""
    if not session.laps:
        print("   (no laps)")
        return

    for index, lap in enumerate(session.laps):
        print(f"   {index}. {lap.display_name:<12} {format_clock_time(lap.created_at)}  {format_elapsed(lap.elapsed)}")
    print(f"   Total lap time: {format_elapsed(session.total_lap_time())}")


def main():
    """Run the demo."""
    configure_logging(level="WARNING")

    print("⏱️  Lap Timer - Basic Usage Demo")
    print("=" * 60)

    config = DefaultConfig(
        clock=ClockParams(),
        persistence=PersistenceParams(backend="memory"),
        laps=LapParams(),
        logging=LoggingParams(level="WARNING"),
    )
    backend = MemoryKeyValueStore()
    ticker = ManualTickSource()

    # 1. Open the session
    print("1. Opening a fresh session...")
    session = open_session(config, tick_source=ticker, backend=backend)
    events: Counter = Counter()

    def on_change(event: SessionEvent) -> None:
        events[event.kind.value] += 1

    session.subscribe(on_change)
    print(f"   Elapsed: {format_elapsed(session.elapsed)}, running: {session.is_running}")
    print()

    # 2. Run two laps, 10 ms per tick
    print("2. Running two laps...")
    session.start()
    ticker.fire_many(250)
    session.save_lap()
    ticker.fire_many(125)
    session.save_lap()
    print(f"   Elapsed: {format_elapsed(session.elapsed)}")
    print_laps(session)
    print()

    # 3. Rename by id; unknown ids are ignored
    print("3. Renaming the oldest lap...")
    oldest = session.laps[-1]
    session.rename(oldest.id, "Warmup")
    session.rename("no-such-lap", "Ignored")
    print_laps(session)
    print()

    # 4. Stop and simulate a restart
    print("4. Stopping and restarting...")
    session.stop()
    session.close()
    session = open_session(config, tick_source=ManualTickSource(), backend=backend)
    print(f"   Restored elapsed: {format_elapsed(session.elapsed)}, running: {session.is_running}")
    print_laps(session)
    print()

    # 5. Reset keeps laps, delete removes them
    print("5. Resetting the clock and deleting the newest lap...")
    session.reset()
    session.delete_laps({0})
    print(f"   Elapsed: {format_elapsed(session.elapsed)}")
    print_laps(session)
    print()

    print("6. Change events seen before the restart:")
    for kind, count in sorted(events.items()):
        print(f"   {kind}: {count}")

    session.close()
    print()
    print("✅ Demo complete")


if __name__ == "__main__":
    main()
