"""Audit logging for pricing and work order changes.

Provides:
- ``log_audit_event`` for recording actions from other routers
- ``GET /api/audit`` for listing entries with filtering and pagination
"""

from __future__ import annotations

import json
import sqlite3
import threading
import uuid
from contextlib import closing
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from fastapi import APIRouter, Query
from pydantic import BaseModel

from treeops import config

router = APIRouter(prefix="/api/audit", tags=["audit"])

# Thread-safe initialization flag with lock
_audit_table_initialized: set[str] = set()
_audit_table_lock = threading.Lock()


class AuditAction(str, Enum):
    """Types of auditable actions."""

    TREESCORE_CALCULATE = "treescore.calculate"
    WORK_ORDER_CREATE = "work_order.create"
    WORK_ORDER_ATTACH_TREE = "work_order.attach_tree"
    WORK_ORDER_REMOVE_TREE = "work_order.remove_tree"
    WORK_ORDER_SCHEDULE = "work_order.schedule"
    WORK_ORDER_START = "work_order.start"
    WORK_ORDER_COMPLETE = "work_order.complete"
    WORK_ORDER_CANCEL = "work_order.cancel"
    WORK_ORDER_REMOVE = "work_order.remove"
    INVOICE_DRAFT = "invoice.draft"


class AuditLogEntry(BaseModel):
    """Single audit log entry."""

    id: str
    timestamp: str
    action: str
    resource_type: str | None = None
    resource_id: str | None = None
    details: dict[str, Any] | None = None
    status: str = "success"
    error_message: str | None = None


class AuditLogListResponse(BaseModel):
    """Response for audit log listing."""

    entries: list[AuditLogEntry]
    total: int
    limit: int
    offset: int
    filters_applied: dict[str, Any]


def get_db() -> sqlite3.Connection:
    """Get database connection."""
    return sqlite3.connect(config.DB_PATH, check_same_thread=False)


def init_audit_table(conn: sqlite3.Connection, commit: bool = True) -> None:
    """Initialize the audit_logs table if it doesn't exist.

    Skips the schema check after the first successful initialization for a
    given database path. With ``commit=False`` the DDL joins the caller's
    open transaction and the path is not marked initialized, since that
    transaction may still roll back.
    """
    if config.DB_PATH in _audit_table_initialized:
        return

    with _audit_table_lock:
        if config.DB_PATH in _audit_table_initialized:
            return

        cursor = conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS audit_logs (
                id TEXT PRIMARY KEY,
                timestamp TEXT NOT NULL,
                action TEXT NOT NULL,
                resource_type TEXT,
                resource_id TEXT,
                details TEXT,
                status TEXT DEFAULT 'success',
                error_message TEXT
            )
        """)
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_audit_timestamp ON audit_logs(timestamp)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_audit_action_time ON audit_logs(action, timestamp)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_audit_resource ON audit_logs(resource_type, resource_id)"
        )
        if commit:
            conn.commit()
            _audit_table_initialized.add(config.DB_PATH)


def log_audit_event(
    conn: sqlite3.Connection,
    action: str,
    resource_type: str | None = None,
    resource_id: str | None = None,
    details: dict[str, Any] | None = None,
    status: str = "success",
    error_message: str | None = None,
    commit: bool = True,
) -> str:
    """Log an audit event to the database.

    Pass ``commit=False`` to write the entry inside the caller's open
    transaction, so it is committed or rolled back with the change it
    records.

    Returns the audit log entry ID.
    """
    init_audit_table(conn, commit=commit)

    audit_id = str(uuid.uuid4())
    timestamp = datetime.now(timezone.utc).isoformat()

    conn.execute(
        """
        INSERT INTO audit_logs (
            id, timestamp, action, resource_type, resource_id,
            details, status, error_message
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            audit_id,
            timestamp,
            action,
            resource_type,
            resource_id,
            json.dumps(details) if details else None,
            status,
            error_message,
        ),
    )
    if commit:
        conn.commit()

    return audit_id


def record_audit_event(action: AuditAction, **kwargs: Any) -> str:
    """Open a connection and log a single audit event."""
    with closing(get_db()) as conn:
        return log_audit_event(conn, action=action.value, **kwargs)


@router.get("", response_model=AuditLogListResponse)
async def list_audit_logs(
    limit: int = Query(default=50, ge=1, le=config.AUDIT_MAX_ROWS),
    offset: int = Query(default=0, ge=0),
    action: str | None = Query(default=None, description="Filter by action type"),
    resource_type: str | None = Query(
        default=None, description="Filter by resource type"
    ),
    resource_id: str | None = Query(default=None, description="Filter by resource ID"),
) -> AuditLogListResponse:
    """List audit log entries with filtering and pagination."""
    with closing(get_db()) as conn:
        init_audit_table(conn)
        cursor = conn.cursor()

        conditions = []
        params: list[Any] = []

        if action:
            conditions.append("action = ?")
            params.append(action)

        if resource_type:
            conditions.append("resource_type = ?")
            params.append(resource_type)

        if resource_id:
            conditions.append("resource_id = ?")
            params.append(resource_id)

        # Column names are hardcoded; user input only flows through parameters.
        where_clause = " AND ".join(conditions) if conditions else "1=1"

        cursor.execute(f"SELECT COUNT(*) FROM audit_logs WHERE {where_clause}", params)
        total = cursor.fetchone()[0]

        cursor.execute(
            f"""
            SELECT id, timestamp, action, resource_type, resource_id,
                   details, status, error_message
            FROM audit_logs
            WHERE {where_clause}
            ORDER BY timestamp DESC
            LIMIT ? OFFSET ?
            """,
            params + [limit, offset],
        )

        entries = []
        for row in cursor.fetchall():
            details = None
            if row[5]:
                try:
                    details = json.loads(row[5])
                except json.JSONDecodeError:
                    details = {"raw": row[5]}

            entries.append(
                AuditLogEntry(
                    id=row[0],
                    timestamp=row[1],
                    action=row[2],
                    resource_type=row[3],
                    resource_id=row[4],
                    details=details,
                    status=row[6] or "success",
                    error_message=row[7],
                )
            )

    return AuditLogListResponse(
        entries=entries,
        total=total,
        limit=limit,
        offset=offset,
        filters_applied={
            key: value
            for key, value in {
                "action": action,
                "resource_type": resource_type,
                "resource_id": resource_id,
            }.items()
            if value
        },
    )
