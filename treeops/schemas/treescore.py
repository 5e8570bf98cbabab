"""Pydantic schemas for TreeScore and work order endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from treeops.scoring.models import CostParameters, TreeMeasurement


class _CamelModel(BaseModel):
    """Accepts both snake_case and camelCase keys; unknown keys are ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class MeasurementIn(_CamelModel):
    height: float = Field(gt=0, description="Tree height in feet")
    canopy_radius: float = Field(gt=0, description="Canopy radius in feet")
    dbh: float = Field(gt=0, description="Diameter at breast height in inches")
    species: str | None = Field(default=None, max_length=100)

    def to_measurement(self) -> TreeMeasurement:
        return TreeMeasurement(
            height=self.height,
            canopy_radius=self.canopy_radius,
            dbh=self.dbh,
            species=self.species,
        )


class HazardsIn(_CamelModel):
    pool: bool = False
    fence: bool = False
    structures: bool = False
    utilities: bool = False
    permitting: bool = False
    steep_terrain: bool = False
    soft_soil: bool = False
    limited_access: bool = False
    nearby_vehicles: bool = False
    glass_windows: bool = False
    septic_tank: bool = False
    overhead_lines: bool = False
    underground_utilities: bool = False


class CostParametersIn(_CamelModel):
    setup_cost: float = Field(ge=0)
    rate_per_point: float = Field(ge=0)
    profit_multiplier: float = Field(ge=1)

    def to_parameters(self) -> CostParameters:
        return CostParameters(
            setup_cost=self.setup_cost,
            rate_per_point=self.rate_per_point,
            profit_multiplier=self.profit_multiplier,
        )


class TreeScoreRequest(_CamelModel):
    measurement: MeasurementIn
    hazards: HazardsIn = Field(default_factory=HazardsIn)
    cost_parameters: CostParametersIn | None = None

    def cost_parameters_or_none(self) -> CostParameters | None:
        return self.cost_parameters.to_parameters() if self.cost_parameters else None


class CostBreakdownOut(BaseModel):
    setup_cost: float
    score_cost: int
    subtotal: int
    markup: int
    final_cost: int
    additional_fees: dict[str, float]


class AssessmentResultOut(BaseModel):
    base_score: int
    hazard_impact: float
    final_score: int
    total_cost: int
    applied_rules: list[str]
    risk_flags: list[str]
    breakdown: CostBreakdownOut


class QuickEstimateOut(BaseModel):
    base_score: int
    estimated_cost: int
    category: str


class WorkOrderCreate(_CamelModel):
    customer_name: str = Field(min_length=1, max_length=200)
    property_address: str = Field(min_length=1, max_length=500)
    service_type: str = "tree_removal"
    job_description: str = ""
    priority: str = Field(default="medium", pattern="^(low|medium|high|urgent)$")
    estimated_cost: float = Field(default=0.0, ge=0)


class WorkOrderSchedule(_CamelModel):
    scheduled_date: str = Field(min_length=1, max_length=64, description="ISO-8601 date or datetime")


class WorkOrderCompletion(_CamelModel):
    actual_cost: float | None = Field(default=None, ge=0)
    completion_notes: str | None = Field(default=None, max_length=2000)


class WorkOrderListResponse(BaseModel):
    work_orders: list[dict[str, Any]]
    total: int
    limit: int
    offset: int
