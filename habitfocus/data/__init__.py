from .database import Database
from .models import Goal, Habit, SessionRecord, Snapshot
from .repository import Repository

__all__ = ["Database", "Goal", "Habit", "SessionRecord", "Snapshot", "Repository"]
