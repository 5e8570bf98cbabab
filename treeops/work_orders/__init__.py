"""Work orders and their attached TreeScore assessments."""

from .errors import (
    InvalidStatusTransitionError,
    TreeCalculationNotFoundError,
    WorkOrderError,
    WorkOrderNotFoundError,
)
from .invoicing import InvoiceDraft, InvoiceLineItem, draft_invoice
from .models import TreeCalculation, WorkOrder, WorkOrderPriority, WorkOrderStatus
from .store import STATUS_TRANSITIONS, AuditHook, WorkOrderStore, get_work_order_store

__all__ = [
    "InvalidStatusTransitionError",
    "TreeCalculationNotFoundError",
    "WorkOrderError",
    "WorkOrderNotFoundError",
    "InvoiceDraft",
    "InvoiceLineItem",
    "draft_invoice",
    "TreeCalculation",
    "WorkOrder",
    "WorkOrderPriority",
    "WorkOrderStatus",
    "STATUS_TRANSITIONS",
    "AuditHook",
    "WorkOrderStore",
    "get_work_order_store",
]
