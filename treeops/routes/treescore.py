"""TreeScore calculation routes.

Both endpoints are pure calculations: nothing is persisted except an audit
entry for full assessments.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query, Request

from treeops import config
from treeops.limiter import limiter
from treeops.routes.audit import AuditAction, record_audit_event
from treeops.schemas import AssessmentResultOut, QuickEstimateOut, TreeScoreRequest
from treeops.scoring.engine import assess_tree, quick_estimate
from treeops.scoring.hazards import active_hazards

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/treescore", tags=["treescore"])


@router.post("/calculate", response_model=AssessmentResultOut)
@limiter.limit(config.CALCULATION_RATE_LIMIT)
async def calculate_treescore(request: Request, payload: TreeScoreRequest):
    """Price a tree from its measurements and site hazards.

    Default cost parameters are used when none are supplied.
    """
    hazards = payload.hazards.model_dump()
    result = assess_tree(
        payload.measurement.to_measurement(),
        hazards,
        payload.cost_parameters_or_none(),
    )

    try:
        record_audit_event(
            AuditAction.TREESCORE_CALCULATE,
            resource_type="treescore",
            details={
                "total_cost": result.total_cost,
                "hazards": active_hazards(hazards),
                "applied_rules": list(result.applied_rules),
            },
        )
    except Exception as e:
        # The calculation itself succeeded; a missing audit row does not fail it.
        logger.error(f"Failed to audit TreeScore calculation: {e}", exc_info=True)

    return result.to_dict()


@router.get("/quick-estimate", response_model=QuickEstimateOut)
@limiter.limit(config.CALCULATION_RATE_LIMIT)
async def get_quick_estimate(
    request: Request,
    height: float = Query(gt=0, description="Tree height in feet"),
    canopy_radius: float = Query(gt=0, description="Canopy radius in feet"),
    dbh: float = Query(gt=0, description="Diameter at breast height in inches"),
):
    """Rough price and size category from geometry alone.

    No hazards or business rules are applied.
    """
    return quick_estimate(height, canopy_radius, dbh).to_dict()
