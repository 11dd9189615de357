"""
Seed Data Generator: creates realistic fake habits and history for a user.

Run: python scripts/seed_data.py [user] [days]
"""

import random
import sys
from datetime import datetime, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from habitfocus import setup_logging
from habitfocus.config import PALETTE, load_config
from habitfocus.data.database import Database
from habitfocus.data.models import GoalPeriod, TimerMode
from habitfocus.data.repository import Repository
from habitfocus.services.engine import HabitEngine
from habitfocus.services.user_session import UserSession


HABITS = {
    "Reading": "Learning",
    "Meditate": "Health",
    "Guitar": "Hobby",
    "Running": "Health",
    "Spanish": "Learning",
}


def seed(user_id: str = "demo", num_days: int = 30) -> None:
    config = load_config()
    db = Database(Path(config["db_path"]))
    repo = Repository(db.connect())
    session = UserSession(repo, config)
    engine: HabitEngine = session.login(user_id)

    # ── Habits ──────────────────────────────────────────────────────────
    habit_ids = []
    for i, (name, category) in enumerate(HABITS.items()):
        habit = engine.create_habit(name, category, PALETTE[i % len(PALETTE)])
        if name == "Meditate":
            engine.switch_mode(habit.id, TimerMode.COUNTDOWN)
            engine.set_countdown_input(habit.id, 10)
        habit_ids.append(habit.id)

    # ── Back-dated history ──────────────────────────────────────────────
    today = datetime.now().date()
    count = 0
    for day_offset in range(num_days, 0, -1):
        day = today - timedelta(days=day_offset)
        for habit_id in random.sample(habit_ids, k=random.randint(0, len(habit_ids))):
            engine.manual_log(habit_id, random.randint(5, 60), day)
            count += 1

    # a couple of corrections so stats show negative adjustments
    first = engine.get_habit(habit_ids[0])
    engine.adjust_ledger(first.name, 5, -1, first.color)

    # ── Goals ───────────────────────────────────────────────────────────
    engine.set_goal(habit_ids[0], 30, GoalPeriod.DAILY)
    engine.set_goal(habit_ids[1], 120, GoalPeriod.WEEKLY)
    engine.set_goal(
        habit_ids[2], 300, GoalPeriod.CUSTOM,
        today - timedelta(days=14), today,
    )

    session.logout()
    db.close()
    print(f"Seeded {len(habit_ids)} habits and {count} sessions for '{user_id}'.")


if __name__ == "__main__":
    setup_logging()
    user = sys.argv[1] if len(sys.argv) > 1 else "demo"
    days = int(sys.argv[2]) if len(sys.argv) > 2 else 30
    seed(user, days)
