"""Rule catalog and hazard weight routes.

Publishes the ordered pricing rules and the hazard weight table so that
estimates can be explained and audited.
"""

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, HTTPException

from treeops.rules import RuleThresholds
from treeops.rules.registry import default_registry
from treeops.rules.ruleset import register_default_rules
from treeops.scoring.hazards import HAZARD_TABLE_VERSION, HAZARD_WEIGHTS

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/rules", tags=["rules"])


@router.get("/catalog")
async def get_rule_catalog():
    """Get the pricing rules in evaluation order.

    Returns each rule's ID, name, order and description, along with the
    default thresholds the rules use.
    """
    try:
        register_default_rules(default_registry)

        rules = [
            {
                "rule_id": rule.rule_id,
                "name": rule.name,
                "order": rule.order,
                "description": rule.description,
            }
            for rule in default_registry.active_rules()
        ]

        return {
            "rules": rules,
            "total_rules": len(rules),
            "thresholds": asdict(RuleThresholds()),
        }

    except Exception as e:
        logger.error(f"Failed to get rule catalog: {e}", exc_info=True)
        raise HTTPException(
            status_code=500, detail=f"Failed to get rule catalog: {str(e)[:200]}"
        )


@router.get("/hazards")
async def get_hazard_weights():
    """Get the hazard indicator weight table (percentage points)."""
    return {
        "version": HAZARD_TABLE_VERSION,
        "weights": dict(HAZARD_WEIGHTS),
        "total_indicators": len(HAZARD_WEIGHTS),
    }
