# -*- coding: utf-8 -*-
"""Guided tour: per-user completion flags (SQLite)."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Protocol, Tuple

from ..app_db import db_conn
from ..config import settings
from .models import MASTER_FLAG_FIELD, SCREEN_FLAG_FIELDS, Screen, TutorialFlags

# Model field -> table column.
_COLUMNS: Dict[str, str] = {
    "home_done": "home_tutorial_completed",
    "scanner_done": "scanner_tutorial_completed",
    "profile_done": "profile_tutorial_completed",
    MASTER_FLAG_FIELD: "tutorial_completed",
}


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class FlagStore(Protocol):
    def get_flags(self, user_id: str) -> TutorialFlags:  # pragma: no cover - interface
        ...

    def update_flags(self, user_id: str, updates: Mapping[str, bool]) -> TutorialFlags:  # pragma: no cover - interface
        ...

    def reset_flags(self, user_id: str, screens: Optional[Iterable[Screen]] = None) -> TutorialFlags:  # pragma: no cover - interface
        ...


def _flags_from_row(row: Any) -> TutorialFlags:
    if row is None:
        return TutorialFlags()
    return TutorialFlags(**{field: bool(row[col]) for field, col in _COLUMNS.items()})


class SQLiteFlagStore:
    """One row per user; flags only ever go from false to true outside ``reset_flags``."""

    def __init__(self, db_path: Path | None = None) -> None:
        self._db_path = db_path

    @property
    def db_path(self) -> Path:
        return self._db_path or settings.app_db_path

    def get_record(self, user_id: str) -> Tuple[TutorialFlags, Optional[str]]:
        with db_conn(self.db_path) as conn:
            row = conn.execute("SELECT * FROM tutorial_flags WHERE user_id = ?", (user_id,)).fetchone()
        return _flags_from_row(row), (row["updated_at"] if row else None)

    def get_flags(self, user_id: str) -> TutorialFlags:
        return self.get_record(user_id)[0]

    def update_flags(self, user_id: str, updates: Mapping[str, bool]) -> TutorialFlags:
        unknown = set(updates) - set(_COLUMNS)
        if unknown:
            raise ValueError(f"Unknown tutorial flags: {sorted(unknown)}")
        cols = [_COLUMNS[field] for field, value in updates.items() if value]
        if not cols:
            return self.get_flags(user_id)

        placeholders = ", ".join("?" for _ in cols)
        assignments = ", ".join(f"{c} = MAX({c}, excluded.{c})" for c in cols)
        sql = (
            f"INSERT INTO tutorial_flags (user_id, {', '.join(cols)}, updated_at) "
            f"VALUES (?, {placeholders}, ?) "
            f"ON CONFLICT(user_id) DO UPDATE SET {assignments}, updated_at = excluded.updated_at"
        )
        with db_conn(self.db_path) as conn:
            conn.execute(sql, (user_id, *([1] * len(cols)), _utc_now()))
            row = conn.execute("SELECT * FROM tutorial_flags WHERE user_id = ?", (user_id,)).fetchone()
        return _flags_from_row(row)

    def reset_flags(self, user_id: str, screens: Optional[Iterable[Screen]] = None) -> TutorialFlags:
        """Administrative reset. Clearing any screen also clears the master flag."""
        targets = list(SCREEN_FLAG_FIELDS) if screens is None else [Screen(s) for s in screens]
        cols = [_COLUMNS[SCREEN_FLAG_FIELDS[s]] for s in targets] + [_COLUMNS[MASTER_FLAG_FIELD]]
        assignments = ", ".join(f"{c} = 0" for c in cols)
        with db_conn(self.db_path) as conn:
            conn.execute(
                f"UPDATE tutorial_flags SET {assignments}, updated_at = ? WHERE user_id = ?",
                (_utc_now(), user_id),
            )
            row = conn.execute("SELECT * FROM tutorial_flags WHERE user_id = ?", (user_id,)).fetchone()
        return _flags_from_row(row)
