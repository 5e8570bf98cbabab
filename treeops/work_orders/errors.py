"""Exceptions raised by work order storage."""

from __future__ import annotations

from treeops.work_orders.models import WorkOrderStatus


class WorkOrderError(Exception):
    """Base class for work order failures."""


class WorkOrderNotFoundError(WorkOrderError):
    def __init__(self, work_order_id: str) -> None:
        super().__init__(f"Work order not found: {work_order_id}")
        self.work_order_id = work_order_id


class TreeCalculationNotFoundError(WorkOrderError):
    def __init__(self, work_order_id: str, tree_id: str) -> None:
        super().__init__(f"Tree {tree_id} is not attached to work order {work_order_id}")
        self.work_order_id = work_order_id
        self.tree_id = tree_id


class InvalidStatusTransitionError(WorkOrderError):
    def __init__(
        self, work_order_id: str, current: WorkOrderStatus, target: WorkOrderStatus
    ) -> None:
        super().__init__(
            f"Work order {work_order_id} cannot move from {current.value} to {target.value}"
        )
        self.work_order_id = work_order_id
        self.current = current
        self.target = target
