# -*- coding: utf-8 -*-
"""App database: SQLite helpers for per-user tutorial flags."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


def connect(db_path: Path) -> sqlite3.Connection:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def init_app_db(db_path: Path) -> None:
    conn = connect(db_path)
    try:
        cur = conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS tutorial_flags (
                user_id TEXT PRIMARY KEY,
                home_tutorial_completed INTEGER NOT NULL DEFAULT 0,
                scanner_tutorial_completed INTEGER NOT NULL DEFAULT 0,
                profile_tutorial_completed INTEGER NOT NULL DEFAULT 0,
                tutorial_completed INTEGER NOT NULL DEFAULT 0,
                updated_at TEXT NOT NULL
            );
            """
        )
        conn.commit()
    finally:
        conn.close()


@contextmanager
def db_conn(db_path: Path) -> Iterator[sqlite3.Connection]:
    conn = connect(db_path)
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()
