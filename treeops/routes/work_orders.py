"""Work order routes.

Attaching a tree computes its TreeScore assessment server-side and upserts
it into the work order, whose estimated cost is then recomputed from all of
its current tree assessments. Status changes follow
pending -> scheduled -> in_progress -> completed, with cancellation allowed
until completion.

Every change writes its audit entry in the same transaction as the change.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from treeops import config
from treeops.routes.audit import AuditAction, log_audit_event, record_audit_event
from treeops.schemas import (
    TreeScoreRequest,
    WorkOrderCompletion,
    WorkOrderCreate,
    WorkOrderListResponse,
    WorkOrderSchedule,
)
from treeops.scoring.engine import assess_tree
from treeops.utils import sanitize_identifier
from treeops.work_orders import (
    AuditHook,
    InvalidStatusTransitionError,
    TreeCalculationNotFoundError,
    WorkOrder,
    WorkOrderNotFoundError,
    WorkOrderStatus,
    WorkOrderStore,
    draft_invoice,
    get_work_order_store,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/work-orders", tags=["work-orders"])

DEFAULT_WORK_ORDERS_LIMIT = 100
MAX_WORK_ORDERS_LIMIT = 1000


def get_store() -> WorkOrderStore:
    return get_work_order_store(config.DB_PATH, timeout=config.DB_TIMEOUT)


def _clean_tree_id(tree_id: str) -> str:
    safe_tree_id = sanitize_identifier(tree_id)
    if not safe_tree_id:
        raise HTTPException(status_code=422, detail="Invalid tree id")
    return safe_tree_id


def _audit(action: AuditAction, **details: Any) -> AuditHook:
    """Build a hook that logs ``action`` inside the store's transaction."""

    def hook(conn: sqlite3.Connection, order: WorkOrder) -> None:
        log_audit_event(
            conn,
            action=action.value,
            resource_type="work_order",
            resource_id=order.id,
            details={"work_order_number": order.work_order_number, **details},
            commit=False,
        )

    return hook


def _change_failed(action: str, work_order_id: str, e: Exception) -> HTTPException:
    logger.error(f"Failed to {action} for work order {work_order_id}: {e}", exc_info=True)
    return HTTPException(status_code=500, detail=f"Failed to {action}: {str(e)[:200]}")


@router.post("", status_code=201)
async def create_work_order(payload: WorkOrderCreate):
    """Create a pending work order."""
    try:
        order = get_store().create_work_order(
            customer_name=payload.customer_name,
            property_address=payload.property_address,
            service_type=payload.service_type,
            job_description=payload.job_description,
            priority=payload.priority,
            estimated_cost=payload.estimated_cost,
            audit=_audit(AuditAction.WORK_ORDER_CREATE),
        )
    except Exception as e:
        raise _change_failed("create work order", "(new)", e)
    return order.to_dict()


@router.get("", response_model=WorkOrderListResponse)
async def list_work_orders(
    status: WorkOrderStatus | None = Query(default=None, description="Filter by status"),
    limit: int = Query(default=DEFAULT_WORK_ORDERS_LIMIT, ge=1, le=MAX_WORK_ORDERS_LIMIT),
    offset: int = Query(default=0, ge=0),
):
    """List active work orders, newest first."""
    orders = get_store().list_work_orders(status=status, limit=limit, offset=offset)
    return WorkOrderListResponse(
        work_orders=[order.to_dict() for order in orders],
        total=len(orders),
        limit=limit,
        offset=offset,
    )


@router.get("/{work_order_id}")
async def get_work_order(work_order_id: str):
    """Get a work order with its tree assessments."""
    try:
        return get_store().get_work_order(work_order_id).to_dict()
    except WorkOrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{work_order_id}")
async def remove_work_order(work_order_id: str):
    """Soft delete a work order; it no longer appears in listings."""
    try:
        order = get_store().remove_work_order(
            work_order_id, audit=_audit(AuditAction.WORK_ORDER_REMOVE)
        )
    except WorkOrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise _change_failed("remove work order", work_order_id, e)
    return order.to_dict()


@router.put("/{work_order_id}/trees/{tree_id}")
async def attach_tree(work_order_id: str, tree_id: str, payload: TreeScoreRequest):
    """Assess a tree and attach the result to a work order.

    Re-submitting the same tree id replaces its previous assessment.
    """
    safe_tree_id = _clean_tree_id(tree_id)
    measurement = payload.measurement.to_measurement()
    hazards = payload.hazards.model_dump()
    result = assess_tree(measurement, hazards, payload.cost_parameters_or_none())

    try:
        order = get_store().attach_calculation(
            work_order_id,
            safe_tree_id,
            measurement,
            hazards,
            result,
            audit=_audit(
                AuditAction.WORK_ORDER_ATTACH_TREE,
                tree_id=safe_tree_id,
                total_cost=result.total_cost,
            ),
        )
    except WorkOrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise _change_failed(f"attach tree {safe_tree_id}", work_order_id, e)

    return {
        "work_order": order.to_dict(),
        "tree_id": safe_tree_id,
        "result": result.to_dict(),
    }


@router.delete("/{work_order_id}/trees/{tree_id}")
async def remove_tree(work_order_id: str, tree_id: str):
    """Detach a tree's assessment from a work order."""
    safe_tree_id = _clean_tree_id(tree_id)
    try:
        order = get_store().remove_calculation(
            work_order_id,
            safe_tree_id,
            audit=_audit(AuditAction.WORK_ORDER_REMOVE_TREE, tree_id=safe_tree_id),
        )
    except (WorkOrderNotFoundError, TreeCalculationNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise _change_failed(f"remove tree {safe_tree_id}", work_order_id, e)
    return order.to_dict()


def _run_transition(work_order_id: str, action: str, change) -> dict[str, Any]:
    try:
        return change().to_dict()
    except WorkOrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStatusTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        raise _change_failed(action, work_order_id, e)


@router.post("/{work_order_id}/schedule")
async def schedule_work(work_order_id: str, payload: WorkOrderSchedule):
    """Schedule or reschedule a pending work order."""
    return _run_transition(
        work_order_id,
        "schedule work",
        lambda: get_store().schedule_work(
            work_order_id,
            payload.scheduled_date,
            audit=_audit(AuditAction.WORK_ORDER_SCHEDULE, scheduled_date=payload.scheduled_date),
        ),
    )


@router.post("/{work_order_id}/start")
async def start_work(work_order_id: str):
    """Mark a work order in progress."""
    return _run_transition(
        work_order_id,
        "start work",
        lambda: get_store().start_work(
            work_order_id, audit=_audit(AuditAction.WORK_ORDER_START)
        ),
    )


@router.post("/{work_order_id}/complete")
async def complete_work(work_order_id: str, payload: WorkOrderCompletion | None = None):
    """Mark an in-progress work order completed, optionally with its actual cost."""
    payload = payload or WorkOrderCompletion()
    return _run_transition(
        work_order_id,
        "complete work",
        lambda: get_store().complete_work(
            work_order_id,
            actual_cost=payload.actual_cost,
            completion_notes=payload.completion_notes,
            audit=_audit(AuditAction.WORK_ORDER_COMPLETE, actual_cost=payload.actual_cost),
        ),
    )


@router.post("/{work_order_id}/cancel")
async def cancel_work(work_order_id: str):
    """Cancel a work order that has not been completed."""
    return _run_transition(
        work_order_id,
        "cancel work",
        lambda: get_store().cancel_work(
            work_order_id, audit=_audit(AuditAction.WORK_ORDER_CANCEL)
        ),
    )


@router.get("/{work_order_id}/invoice-draft")
async def get_invoice_draft(
    work_order_id: str,
    tax_rate: float | None = Query(default=None, ge=0, le=100),
):
    """Draft an invoice from the work order's tree assessments.

    Nothing is saved, so a failed audit write is logged and the draft is
    still returned.
    """
    try:
        order = get_store().get_work_order(work_order_id)
    except WorkOrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    draft = draft_invoice(order, tax_rate=tax_rate)
    try:
        record_audit_event(
            AuditAction.INVOICE_DRAFT,
            resource_type="work_order",
            resource_id=work_order_id,
            details={"total_amount": draft.total_amount},
        )
    except Exception as e:
        logger.error(f"Failed to audit invoice draft for {work_order_id}: {e}", exc_info=True)
    return draft.to_dict()
