"""Shared Pydantic schemas for the TreeOps backend.

This module centralizes request/response models used across multiple routers
to prevent drift between duplicate definitions.
"""

from .treescore import (
    AssessmentResultOut,
    CostParametersIn,
    HazardsIn,
    MeasurementIn,
    QuickEstimateOut,
    TreeScoreRequest,
    WorkOrderCompletion,
    WorkOrderCreate,
    WorkOrderListResponse,
    WorkOrderSchedule,
)

__all__ = [
    "AssessmentResultOut",
    "CostParametersIn",
    "HazardsIn",
    "MeasurementIn",
    "QuickEstimateOut",
    "TreeScoreRequest",
    "WorkOrderCompletion",
    "WorkOrderCreate",
    "WorkOrderListResponse",
    "WorkOrderSchedule",
]
