"""Persistence layer for work orders and their tree assessments.

Each work order holds at most one assessment per tree id. Attaching an
assessment upserts by ``(work_order_id, tree_id)`` and then recomputes the
work order's estimated cost as the sum over all of its current attachments,
inside a single write transaction.

Every mutating method accepts an optional ``audit`` hook. It runs on the
same connection just before COMMIT, so a state change and its audit row are
written together or not at all.

Usage:
    store = get_work_order_store(db_path)
    order = store.create_work_order(customer_name="...", property_address="...")
    store.attach_calculation(order.id, "tree-1", measurement, hazards, result)
    store.start_work(order.id)
    store.complete_work(order.id, actual_cost=1800)
"""

from __future__ import annotations

import json
import logging
import sqlite3
import time
import uuid
from collections.abc import Callable, Iterator, Mapping
from contextlib import closing, contextmanager
from datetime import datetime, timezone

from treeops.scoring.hazards import normalize_hazards
from treeops.scoring.models import AssessmentResult, TreeMeasurement
from treeops.work_orders.errors import (
    InvalidStatusTransitionError,
    TreeCalculationNotFoundError,
    WorkOrderNotFoundError,
)
from treeops.work_orders.models import (
    TreeCalculation,
    WorkOrder,
    WorkOrderPriority,
    WorkOrderStatus,
)

logger = logging.getLogger(__name__)

# Called with the open transaction and the updated work order.
AuditHook = Callable[[sqlite3.Connection, WorkOrder], None]

_WORK_ORDER_COLUMNS = """
    id, work_order_number, customer_name, property_address, service_type,
    job_description, status, priority, estimated_cost, created_at, last_updated,
    scheduled_date, actual_start_time, actual_end_time, actual_cost,
    completion_notes, is_active
"""

# Allowed status changes; completed and cancelled are terminal.
STATUS_TRANSITIONS: dict[WorkOrderStatus, frozenset[WorkOrderStatus]] = {
    WorkOrderStatus.PENDING: frozenset(
        {WorkOrderStatus.SCHEDULED, WorkOrderStatus.IN_PROGRESS, WorkOrderStatus.CANCELLED}
    ),
    WorkOrderStatus.SCHEDULED: frozenset(
        {WorkOrderStatus.SCHEDULED, WorkOrderStatus.IN_PROGRESS, WorkOrderStatus.CANCELLED}
    ),
    WorkOrderStatus.IN_PROGRESS: frozenset(
        {WorkOrderStatus.COMPLETED, WorkOrderStatus.CANCELLED}
    ),
    WorkOrderStatus.COMPLETED: frozenset(),
    WorkOrderStatus.CANCELLED: frozenset(),
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class WorkOrderStore:
    """SQLite storage for work orders and per-tree TreeScore attachments.

    Attributes:
        db_path: Path to the SQLite database
        timeout: Seconds to wait for the database write lock
    """

    def __init__(self, db_path: str, timeout: float = 10.0) -> None:
        self.db_path = db_path
        self.timeout = timeout
        self._init_tables()

    def _connect(self, **kwargs) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path, timeout=self.timeout, **kwargs)

    @contextmanager
    def _write_transaction(self) -> Iterator[sqlite3.Connection]:
        """Serialize read-modify-write sequences on the database write lock."""
        conn = self._connect(isolation_level=None)
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except Exception:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
        finally:
            conn.close()

    def _init_tables(self) -> None:
        """Initialize database tables if they don't exist."""
        with closing(self._connect()) as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS work_orders (
                    id TEXT PRIMARY KEY,
                    work_order_number TEXT NOT NULL,
                    customer_name TEXT NOT NULL,
                    property_address TEXT NOT NULL,
                    service_type TEXT NOT NULL,
                    job_description TEXT NOT NULL,
                    status TEXT DEFAULT 'pending',
                    priority TEXT DEFAULT 'medium',
                    estimated_cost REAL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    last_updated TEXT NOT NULL,
                    scheduled_date TEXT,
                    actual_start_time TEXT,
                    actual_end_time TEXT,
                    actual_cost REAL,
                    completion_notes TEXT,
                    is_active INTEGER DEFAULT 1
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS work_order_trees (
                    work_order_id TEXT NOT NULL,
                    tree_id TEXT NOT NULL,
                    measurement TEXT NOT NULL,
                    hazards TEXT NOT NULL,
                    result TEXT NOT NULL,
                    total_cost INTEGER NOT NULL,
                    calculated_at TEXT NOT NULL,
                    PRIMARY KEY (work_order_id, tree_id),
                    FOREIGN KEY (work_order_id) REFERENCES work_orders(id)
                )
            """)

            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_work_orders_status ON work_orders(status)"
            )
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_work_orders_created_at ON work_orders(created_at DESC)"
            )

            conn.commit()

    def create_work_order(
        self,
        customer_name: str,
        property_address: str,
        service_type: str = "tree_removal",
        job_description: str = "",
        priority: WorkOrderPriority | str = WorkOrderPriority.MEDIUM,
        estimated_cost: float = 0.0,
        audit: AuditHook | None = None,
    ) -> WorkOrder:
        """Create a pending work order with no tree attachments."""
        now = _now()
        order = WorkOrder(
            id=str(uuid.uuid4()),
            work_order_number=f"WO-{int(time.time() * 1000)}",
            customer_name=customer_name,
            property_address=property_address,
            service_type=service_type,
            job_description=job_description,
            status=WorkOrderStatus.PENDING,
            priority=WorkOrderPriority(priority),
            estimated_cost=estimated_cost,
            created_at=now,
            last_updated=now,
        )

        with self._write_transaction() as conn:
            conn.execute(
                """
                INSERT INTO work_orders (
                    id, work_order_number, customer_name, property_address, service_type,
                    job_description, status, priority, estimated_cost, created_at, last_updated
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    order.id,
                    order.work_order_number,
                    order.customer_name,
                    order.property_address,
                    order.service_type,
                    order.job_description,
                    order.status.value,
                    order.priority.value,
                    order.estimated_cost,
                    order.created_at,
                    order.last_updated,
                ),
            )
            if audit is not None:
                audit(conn, order)

        logger.info(f"Created work order {order.id} ({order.work_order_number})")
        return order

    def get_work_order(self, work_order_id: str) -> WorkOrder:
        """Load a work order with its tree attachments.

        Soft-deleted work orders are still returned, with ``is_active`` False.

        Raises:
            WorkOrderNotFoundError: if no such work order exists
        """
        with closing(self._connect()) as conn:
            return self._load_work_order(conn, work_order_id)

    def list_work_orders(
        self,
        status: WorkOrderStatus | str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[WorkOrder]:
        """List active work orders, newest first, optionally by status."""
        conditions = ["is_active = 1"]
        params: list = []
        if status is not None:
            conditions.append("status = ?")
            params.append(WorkOrderStatus(status).value)

        with closing(self._connect()) as conn:
            rows = conn.execute(
                f"""
                SELECT {_WORK_ORDER_COLUMNS} FROM work_orders
                WHERE {" AND ".join(conditions)}
                ORDER BY created_at DESC
                LIMIT ? OFFSET ?
                """,
                params + [limit, offset],
            ).fetchall()
            return [self._row_to_work_order(conn, row) for row in rows]

    def attach_calculation(
        self,
        work_order_id: str,
        tree_id: str,
        measurement: TreeMeasurement,
        hazards: Mapping[str, bool] | None,
        result: AssessmentResult,
        audit: AuditHook | None = None,
    ) -> WorkOrder:
        """Attach or replace a tree's assessment and recompute the estimate.

        Raises:
            WorkOrderNotFoundError: if the work order does not exist. Nothing
                is written in that case.
        """
        now = _now()
        with self._write_transaction() as conn:
            self._require_work_order(conn, work_order_id)
            conn.execute(
                """
                INSERT INTO work_order_trees
                (work_order_id, tree_id, measurement, hazards, result, total_cost, calculated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(work_order_id, tree_id) DO UPDATE SET
                    measurement = excluded.measurement,
                    hazards = excluded.hazards,
                    result = excluded.result,
                    total_cost = excluded.total_cost,
                    calculated_at = excluded.calculated_at
                """,
                (
                    work_order_id,
                    tree_id,
                    json.dumps(measurement.to_dict()),
                    json.dumps(normalize_hazards(hazards)),
                    json.dumps(result.to_dict()),
                    result.total_cost,
                    now,
                ),
            )
            self._recompute_estimated_cost(conn, work_order_id, now)
            order = self._load_work_order(conn, work_order_id)
            if audit is not None:
                audit(conn, order)

        logger.info(
            f"Attached tree {tree_id} to work order {work_order_id}; "
            f"estimated cost now {order.estimated_cost:.0f}"
        )
        return order

    def remove_calculation(
        self, work_order_id: str, tree_id: str, audit: AuditHook | None = None
    ) -> WorkOrder:
        """Detach a tree's assessment and recompute the estimate.

        Raises:
            WorkOrderNotFoundError: if the work order does not exist
            TreeCalculationNotFoundError: if the tree is not attached
        """
        now = _now()
        with self._write_transaction() as conn:
            self._require_work_order(conn, work_order_id)
            cursor = conn.execute(
                "DELETE FROM work_order_trees WHERE work_order_id = ? AND tree_id = ?",
                (work_order_id, tree_id),
            )
            if cursor.rowcount == 0:
                raise TreeCalculationNotFoundError(work_order_id, tree_id)
            self._recompute_estimated_cost(conn, work_order_id, now)
            order = self._load_work_order(conn, work_order_id)
            if audit is not None:
                audit(conn, order)

        logger.info(f"Removed tree {tree_id} from work order {work_order_id}")
        return order

    def schedule_work(
        self, work_order_id: str, scheduled_date: str, audit: AuditHook | None = None
    ) -> WorkOrder:
        """Set or move the scheduled date of a pending or scheduled work order."""
        return self._transition(
            work_order_id,
            WorkOrderStatus.SCHEDULED,
            {"scheduled_date": scheduled_date},
            audit,
        )

    def start_work(self, work_order_id: str, audit: AuditHook | None = None) -> WorkOrder:
        """Mark a work order in progress and stamp its actual start time."""
        return self._transition(
            work_order_id,
            WorkOrderStatus.IN_PROGRESS,
            {"actual_start_time": _now()},
            audit,
        )

    def complete_work(
        self,
        work_order_id: str,
        actual_cost: float | None = None,
        completion_notes: str | None = None,
        audit: AuditHook | None = None,
    ) -> WorkOrder:
        """Mark an in-progress work order completed.

        ``actual_cost`` is kept alongside the estimate; the estimate itself
        stays the sum of the attached tree assessments.
        """
        return self._transition(
            work_order_id,
            WorkOrderStatus.COMPLETED,
            {
                "actual_end_time": _now(),
                "actual_cost": actual_cost,
                "completion_notes": completion_notes,
            },
            audit,
        )

    def cancel_work(self, work_order_id: str, audit: AuditHook | None = None) -> WorkOrder:
        return self._transition(work_order_id, WorkOrderStatus.CANCELLED, {}, audit)

    def remove_work_order(
        self, work_order_id: str, audit: AuditHook | None = None
    ) -> WorkOrder:
        """Soft delete: hide the work order from listings, keep its rows."""
        now = _now()
        with self._write_transaction() as conn:
            self._require_work_order(conn, work_order_id)
            conn.execute(
                "UPDATE work_orders SET is_active = 0, last_updated = ? WHERE id = ?",
                (now, work_order_id),
            )
            order = self._load_work_order(conn, work_order_id)
            if audit is not None:
                audit(conn, order)

        logger.info(f"Deactivated work order {work_order_id}")
        return order

    def _transition(
        self,
        work_order_id: str,
        target: WorkOrderStatus,
        updates: dict[str, object],
        audit: AuditHook | None,
    ) -> WorkOrder:
        """Apply a status change and its field updates in one transaction.

        Raises:
            WorkOrderNotFoundError: if the work order does not exist
            InvalidStatusTransitionError: if the current status cannot move
                to ``target``
        """
        now = _now()
        with self._write_transaction() as conn:
            current = self._load_work_order(conn, work_order_id)
            if target not in STATUS_TRANSITIONS[current.status]:
                raise InvalidStatusTransitionError(work_order_id, current.status, target)

            # Column names come from the fixed keys above, never from callers.
            assignments = "".join(f"{column} = ?, " for column in updates)
            conn.execute(
                f"""
                UPDATE work_orders
                SET status = ?, {assignments}last_updated = ?
                WHERE id = ?
                """,
                (target.value, *updates.values(), now, work_order_id),
            )
            order = self._load_work_order(conn, work_order_id)
            if audit is not None:
                audit(conn, order)

        logger.info(
            f"Work order {work_order_id} moved {current.status.value} -> {target.value}"
        )
        return order

    def _require_work_order(self, conn: sqlite3.Connection, work_order_id: str) -> None:
        row = conn.execute(
            "SELECT 1 FROM work_orders WHERE id = ?", (work_order_id,)
        ).fetchone()
        if row is None:
            raise WorkOrderNotFoundError(work_order_id)

    def _recompute_estimated_cost(
        self, conn: sqlite3.Connection, work_order_id: str, now: str
    ) -> None:
        # Always the full sum over current attachments, never an increment.
        conn.execute(
            """
            UPDATE work_orders
            SET estimated_cost = (
                    SELECT COALESCE(SUM(total_cost), 0)
                    FROM work_order_trees
                    WHERE work_order_id = ?
                ),
                last_updated = ?
            WHERE id = ?
            """,
            (work_order_id, now, work_order_id),
        )

    def _load_work_order(self, conn: sqlite3.Connection, work_order_id: str) -> WorkOrder:
        row = conn.execute(
            f"SELECT {_WORK_ORDER_COLUMNS} FROM work_orders WHERE id = ?",
            (work_order_id,),
        ).fetchone()
        if row is None:
            raise WorkOrderNotFoundError(work_order_id)
        return self._row_to_work_order(conn, row)

    def _row_to_work_order(self, conn: sqlite3.Connection, row: tuple) -> WorkOrder:
        calculations = [
            TreeCalculation(
                tree_id=tree_id,
                measurement=TreeMeasurement.from_dict(json.loads(measurement)),
                hazards=json.loads(hazards),
                result=AssessmentResult.from_dict(json.loads(result)),
                calculated_at=calculated_at,
            )
            for tree_id, measurement, hazards, result, calculated_at in conn.execute(
                """
                SELECT tree_id, measurement, hazards, result, calculated_at
                FROM work_order_trees
                WHERE work_order_id = ?
                ORDER BY rowid
                """,
                (row[0],),
            )
        ]

        return WorkOrder(
            id=row[0],
            work_order_number=row[1],
            customer_name=row[2],
            property_address=row[3],
            service_type=row[4],
            job_description=row[5],
            status=WorkOrderStatus(row[6]),
            priority=WorkOrderPriority(row[7]),
            estimated_cost=row[8],
            created_at=row[9],
            last_updated=row[10],
            tree_calculations=calculations,
            scheduled_date=row[11],
            actual_start_time=row[12],
            actual_end_time=row[13],
            actual_cost=row[14],
            completion_notes=row[15],
            is_active=bool(row[16]),
        )


# Global store instance (initialized lazily)
_store_instance: WorkOrderStore | None = None


def get_work_order_store(db_path: str, timeout: float = 10.0) -> WorkOrderStore:
    """Get the shared WorkOrderStore for ``db_path``.

    Tables are created once, when the store for a path is first built.
    """
    global _store_instance
    if _store_instance is None or _store_instance.db_path != db_path:
        _store_instance = WorkOrderStore(db_path, timeout=timeout)
    return _store_instance
