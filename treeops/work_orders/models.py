"""Work order records and their per-tree assessment attachments."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from treeops.scoring.models import AssessmentResult, TreeMeasurement


class WorkOrderStatus(str, Enum):
    PENDING = "pending"
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class WorkOrderPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


@dataclass(frozen=True)
class TreeCalculation:
    """One tree's assessment attached to a work order."""

    tree_id: str
    measurement: TreeMeasurement
    hazards: dict[str, bool]
    result: AssessmentResult
    calculated_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "tree_id": self.tree_id,
            "measurement": self.measurement.to_dict(),
            "hazards": dict(self.hazards),
            "result": self.result.to_dict(),
            "calculated_at": self.calculated_at,
        }


@dataclass
class WorkOrder:
    id: str
    work_order_number: str
    customer_name: str
    property_address: str
    service_type: str
    job_description: str
    status: WorkOrderStatus
    priority: WorkOrderPriority
    estimated_cost: float
    created_at: str
    last_updated: str
    tree_calculations: list[TreeCalculation] = field(default_factory=list)
    scheduled_date: str | None = None
    actual_start_time: str | None = None
    actual_end_time: str | None = None
    actual_cost: float | None = None
    completion_notes: str | None = None
    is_active: bool = True

    def calculation_for(self, tree_id: str) -> TreeCalculation | None:
        for calculation in self.tree_calculations:
            if calculation.tree_id == tree_id:
                return calculation
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "work_order_number": self.work_order_number,
            "customer_name": self.customer_name,
            "property_address": self.property_address,
            "service_type": self.service_type,
            "job_description": self.job_description,
            "status": self.status.value,
            "priority": self.priority.value,
            "estimated_cost": self.estimated_cost,
            "created_at": self.created_at,
            "last_updated": self.last_updated,
            "tree_calculations": [c.to_dict() for c in self.tree_calculations],
            "scheduled_date": self.scheduled_date,
            "actual_start_time": self.actual_start_time,
            "actual_end_time": self.actual_end_time,
            "actual_cost": self.actual_cost,
            "completion_notes": self.completion_notes,
            "is_active": self.is_active,
        }
