"""SQLite persistence for the last forecast run and the usage log."""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pension_sim.schemas.usage import UsageLogEntry

logger = logging.getLogger(__name__)

DbPath = Union[str, Path]


def _connect(db_path: DbPath) -> sqlite3.Connection:
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    return conn


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def init_db(db_path: DbPath) -> None:
    conn = _connect(db_path)
    try:
        conn.execute(
            """
            create table if not exists forecast_runs (
                id integer primary key autoincrement,
                payload text not null,
                result text not null,
                created_at text not null
            )
            """
        )
        conn.execute(
            """
            create table if not exists usage_log (
                id integer primary key autoincrement,
                log_key text not null,
                entry text not null,
                created_at text not null
            )
            """
        )
        conn.commit()
    finally:
        conn.close()


def save_forecast_run(db_path: DbPath, payload: Dict[str, Any], result: Dict[str, Any]) -> None:
    conn = _connect(db_path)
    try:
        conn.execute(
            """
            insert into forecast_runs (payload, result, created_at)
            values (?, ?, ?)
            """,
            (json.dumps(payload), json.dumps(result), _now()),
        )
        conn.commit()
    finally:
        conn.close()
    logger.debug("stored forecast run")


def fetch_latest_forecast(db_path: DbPath) -> Optional[Dict[str, Any]]:
    conn = _connect(db_path)
    try:
        row = conn.execute(
            """
            select payload, result, created_at
            from forecast_runs
            order by id desc
            limit 1
            """
        ).fetchone()
    finally:
        conn.close()

    if row is None:
        return None
    return {
        "payload": json.loads(row["payload"]),
        "result": json.loads(row["result"]),
        "createdAt": row["created_at"],
    }


def log_usage(db_path: DbPath, entry: UsageLogEntry, key: str) -> bool:
    """Append ``entry`` unless the most recent row carries the same key.

    Returns True when a row was written.
    """
    conn = _connect(db_path)
    try:
        last = conn.execute(
            "select log_key from usage_log order by id desc limit 1"
        ).fetchone()
        if last is not None and last["log_key"] == key:
            logger.debug("skipping duplicate usage entry %s", key)
            return False
        conn.execute(
            """
            insert into usage_log (log_key, entry, created_at)
            values (?, ?, ?)
            """,
            (key, entry.model_dump_json(), _now()),
        )
        conn.commit()
    finally:
        conn.close()
    logger.debug("logged usage entry %s", key)
    return True


def read_usage(db_path: DbPath) -> List[UsageLogEntry]:
    conn = _connect(db_path)
    try:
        rows = conn.execute("select entry from usage_log order by id asc").fetchall()
    finally:
        conn.close()
    return [UsageLogEntry.model_validate_json(row["entry"]) for row in rows]


def clear_usage(db_path: DbPath) -> int:
    conn = _connect(db_path)
    try:
        deleted = conn.execute("delete from usage_log").rowcount
        conn.commit()
    finally:
        conn.close()
    logger.info("cleared %d usage entries", deleted)
    return deleted
