"""
User Session: loads one user's snapshot into an engine and keeps it saved.

Replaces a global in-memory user table: at login we build a HabitEngine from
the stored snapshot, every mutation writes it back, and logout flushes the
final state (including in-flight timers) and drops the engine.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from habitfocus.config import DEFAULT_CONFIG
from habitfocus.data.models import Snapshot
from habitfocus.data.repository import Repository
from habitfocus.services.engine import HabitEngine

logger = logging.getLogger(__name__)


class UserSession:
    """Lifecycle of the single active user's engine."""

    def __init__(
        self,
        repo: Repository,
        config: Optional[dict] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.repo = repo
        self.config = config or DEFAULT_CONFIG
        self.clock = clock
        self.engine: Optional[HabitEngine] = None

    @property
    def is_active(self) -> bool:
        return self.engine is not None

    def login(self, user_id: str) -> HabitEngine:
        """Load (or create) *user_id*'s snapshot and return a live engine."""
        user_id = (user_id or "").strip().lower()
        if not user_id:
            raise ValueError("User id must not be empty.")
        if self.engine is not None:
            self.logout()

        snapshot = self.repo.load_snapshot(user_id)
        if snapshot is None:
            logger.info("No saved data for %s, starting fresh.", user_id)
            snapshot = Snapshot(user_id=user_id, theme_id=self.config["default_theme_id"])
            self.repo.save_snapshot(snapshot)

        self.engine = HabitEngine(
            snapshot,
            clock=self.clock,
            on_change=self.repo.save_snapshot,
            default_countdown_minutes=self.config["default_countdown_minutes"],
            default_color=self.config["default_color"],
        )
        logger.info("User %s logged in.", user_id)
        return self.engine

    def save(self) -> None:
        if self.engine is None:
            raise RuntimeError("No active user session.")
        self.repo.save_snapshot(self.engine.to_snapshot())

    def logout(self) -> None:
        if self.engine is None:
            return
        self.save()
        logger.info("User %s logged out.", self.engine.user_id)
        self.engine = None


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Glue between persistence (Repository) and the engine. One user at a time.
#
# Key points:
#   - User ids are normalized (trim + lowercase) so "Anna" and "anna " are
#     the same account.
#   - on_change=repo.save_snapshot: every engine command is saved right
#     away. Ticks are not, so logout() does a final save that captures
#     running timers.
#   - Logging in while someone else is active logs them out first.
#
# Interviewer-friendly talking points:
#   1. No global state: two UserSessions over two repositories can't see
#      each other's data.
#   2. Credentials are deliberately out of scope here; user_id is an opaque
#      key handed to us by whatever auth layer sits above.
