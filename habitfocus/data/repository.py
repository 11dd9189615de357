"""
Repository: the single place where SQL lives.

Stores and loads whole-user snapshots. The engine never sees SQL; it only
hands Snapshot objects in and gets them back.
"""

from __future__ import annotations

import csv
import io
import json
import logging
import sqlite3
from datetime import datetime
from typing import List, Optional

from .models import Snapshot

logger = logging.getLogger(__name__)


class Repository:
    """Data-access layer wrapping a sqlite3 connection."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    # ── Snapshots ───────────────────────────────────────────────────────────

    def save_snapshot(self, snapshot: Snapshot) -> None:
        if not snapshot.user_id:
            raise ValueError("Snapshot has no user_id.")
        self.conn.execute(
            "INSERT INTO snapshots (user_id, payload, saved_at) VALUES (?, ?, ?) "
            "ON CONFLICT(user_id) DO UPDATE SET payload = excluded.payload, "
            "saved_at = excluded.saved_at",
            (snapshot.user_id, json.dumps(snapshot.to_dict()), datetime.now().isoformat()),
        )
        self.conn.commit()
        logger.debug("Saved snapshot for %s", snapshot.user_id)

    def load_snapshot(self, user_id: str) -> Optional[Snapshot]:
        row = self.conn.execute(
            "SELECT payload FROM snapshots WHERE user_id = ?", (user_id,)
        ).fetchone()
        if not row:
            return None
        snapshot = Snapshot.from_dict(json.loads(row["payload"]))
        snapshot.user_id = user_id
        logger.info("Loaded snapshot for %s (%d habits, %d records)",
                    user_id, len(snapshot.habits), len(snapshot.history))
        return snapshot

    def list_users(self) -> List[str]:
        rows = self.conn.execute(
            "SELECT user_id FROM snapshots ORDER BY user_id"
        ).fetchall()
        return [r["user_id"] for r in rows]

    def delete_snapshot(self, user_id: str) -> None:
        self.conn.execute("DELETE FROM snapshots WHERE user_id = ?", (user_id,))
        self.conn.commit()
        logger.warning("Deleted all data for %s", user_id)

    # ── Data export ─────────────────────────────────────────────────────────

    def export_history_csv(self, user_id: str) -> str:
        """Return a user's ledger as CSV text, oldest first."""
        snapshot = self.load_snapshot(user_id)
        if snapshot is None or not snapshot.history:
            return ""
        out = io.StringIO()
        writer = csv.writer(out, lineterminator="\n")
        writer.writerow(["id", "habit_name", "duration_seconds", "kind",
                         "occurred_at", "color"])
        for r in sorted(snapshot.history, key=lambda r: r.occurred_at_ms):
            writer.writerow([
                r.id, r.habit_name, r.duration_seconds, r.kind,
                datetime.fromtimestamp(r.occurred_at_ms / 1000.0).isoformat(timespec="seconds"),
                r.color,
            ])
        return out.getvalue()


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   The Repository is the ONLY place raw SQL queries live. Everything else
#   calls save_snapshot()/load_snapshot() with plain dataclasses.
#
# Key methods:
#   - save_snapshot(): upsert (INSERT ... ON CONFLICT DO UPDATE), so the
#     first save and every later save are the same call.
#   - load_snapshot(): None for an unknown user, so callers can start fresh.
#   - export_history_csv(): data portability for the session ledger.
#
# Interviewer-friendly talking points:
#   1. Repository pattern isolates SQL: the engine and services stay
#      untouched if storage changes.
#   2. The csv module handles quoting for habit names with commas in them,
#      which naive ",".join() would get wrong.
