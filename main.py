"""
HabitFocus: console runner for the habit engine.

Usage: python main.py <user> [habit name]

Logs the user in, optionally starts (creating if needed) a stopwatch for the
named habit, and prints running timers every second until Ctrl+C.
"""

import faulthandler
import logging
import signal
import sys
from pathlib import Path

faulthandler.enable()

from PySide6.QtCore import QCoreApplication

from habitfocus import setup_logging
from habitfocus.config import load_config
from habitfocus.data.database import Database
from habitfocus.data.repository import Repository
from habitfocus.services.heartbeat import Heartbeat
from habitfocus.services.history_stats import format_duration
from habitfocus.services.user_session import UserSession


def main() -> None:
    setup_logging()
    logger = logging.getLogger(__name__)

    if len(sys.argv) < 2:
        print(__doc__.strip())
        sys.exit(2)

    config = load_config()
    db = Database(Path(config["db_path"]))
    repo = Repository(db.connect())
    session = UserSession(repo, config)
    engine = session.login(sys.argv[1])

    if len(sys.argv) > 2:
        name = " ".join(sys.argv[2:]).strip()
        habit = next((h for h in engine.list_habits() if h.name == name), None)
        if habit is None:
            habit = engine.create_habit(name)
        if not habit.is_running:
            engine.start(habit.id)

    app = QCoreApplication(sys.argv)
    app.setApplicationName("HabitFocus")

    def show() -> None:
        for h in engine.list_habits():
            if h.is_running:
                shown = h.remaining_seconds if h.remaining_seconds is not None else h.elapsed_seconds
                print(f"\r{h.name}: {format_duration(shown)}  (streak {h.streak})", end="", flush=True)

    heartbeat = Heartbeat(engine, config["tick_interval_ms"], on_tick=show)
    signal.signal(signal.SIGINT, lambda *_: app.quit())
    heartbeat.start()
    logger.info("HabitFocus running. Ctrl+C to quit.")

    code = app.exec()
    heartbeat.stop()
    for h in engine.list_habits():
        if h.is_running:
            engine.stop(h.id)
    session.logout()
    db.close()
    sys.exit(code)


if __name__ == "__main__":
    main()


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   The entry point. Sets up logging, opens the database, logs a user in and
#   runs the Qt event loop that powers the 1-second heartbeat.
#
# Key points:
#   - QCoreApplication, not QApplication: no widgets, just the event loop
#     for QTimer.
#   - SIGINT handler calls app.quit(); the heartbeat firing every second
#     gives Python a chance to run the handler.
#   - On exit, running stopwatches are stopped (so their time is logged)
#     and logout() writes the final snapshot.
