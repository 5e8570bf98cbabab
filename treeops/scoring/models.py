"""Data models for the TreeScore pricing pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class TreeMeasurement:
    """Geometry of a single tree.

    Heights and canopy radius are in feet, DBH in inches. The pipeline does
    not validate these values; callers reject non-positive geometry before
    scoring (the API layer does this in its request models).
    """

    height: float
    canopy_radius: float
    dbh: float
    species: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "height": self.height,
            "canopy_radius": self.canopy_radius,
            "dbh": self.dbh,
            "species": self.species,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TreeMeasurement:
        return cls(
            height=data["height"],
            canopy_radius=data["canopy_radius"],
            dbh=data["dbh"],
            species=data.get("species"),
        )


@dataclass(frozen=True)
class CostParameters:
    setup_cost: float
    rate_per_point: float
    profit_multiplier: float

    def to_dict(self) -> dict[str, float]:
        return {
            "setup_cost": self.setup_cost,
            "rate_per_point": self.rate_per_point,
            "profit_multiplier": self.profit_multiplier,
        }


# Shared by the full assessment and the quick estimate.
DEFAULT_COST_PARAMETERS = CostParameters(
    setup_cost=200,
    rate_per_point=0.75,
    profit_multiplier=1.5,
)


@dataclass(frozen=True)
class CostBreakdown:
    """Display figures for a priced tree. All amounts except fees are rounded."""

    setup_cost: float
    score_cost: int
    subtotal: int
    markup: int
    final_cost: int
    additional_fees: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "setup_cost": self.setup_cost,
            "score_cost": self.score_cost,
            "subtotal": self.subtotal,
            "markup": self.markup,
            "final_cost": self.final_cost,
            "additional_fees": dict(self.additional_fees),
        }


@dataclass(frozen=True)
class AssessmentResult:
    """Published outcome of a TreeScore assessment."""

    base_score: int
    hazard_impact: float
    final_score: int
    total_cost: int
    applied_rules: tuple[str, ...]
    risk_flags: tuple[str, ...]
    breakdown: CostBreakdown

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_score": self.base_score,
            "hazard_impact": self.hazard_impact,
            "final_score": self.final_score,
            "total_cost": self.total_cost,
            "applied_rules": list(self.applied_rules),
            "risk_flags": list(self.risk_flags),
            "breakdown": self.breakdown.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AssessmentResult:
        breakdown = data.get("breakdown", {})
        return cls(
            base_score=data["base_score"],
            hazard_impact=data["hazard_impact"],
            final_score=data["final_score"],
            total_cost=data["total_cost"],
            applied_rules=tuple(data.get("applied_rules", [])),
            risk_flags=tuple(data.get("risk_flags", [])),
            breakdown=CostBreakdown(
                setup_cost=breakdown.get("setup_cost", 0),
                score_cost=breakdown.get("score_cost", 0),
                subtotal=breakdown.get("subtotal", 0),
                markup=breakdown.get("markup", 0),
                final_cost=breakdown.get("final_cost", data["total_cost"]),
                additional_fees=dict(breakdown.get("additional_fees", {})),
            ),
        )


@dataclass(frozen=True)
class QuickEstimate:
    base_score: int
    estimated_cost: int
    category: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_score": self.base_score,
            "estimated_cost": self.estimated_cost,
            "category": self.category,
        }
