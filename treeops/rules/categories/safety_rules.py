"""Site safety rules."""

from __future__ import annotations

from treeops.rules.models import RuleContext, RuleEffect


def high_risk_safety_rule(context: RuleContext, effect: RuleEffect) -> RuleEffect:
    """Require supervisor review and safety equipment on high hazard sites."""
    thresholds = context.thresholds
    if context.hazard_impact < thresholds.high_risk_impact:
        return effect

    fee = thresholds.safety_equipment_fee
    return (
        effect.flag(
            "HIGH RISK: Supervisor review required",
            "Site visit required before work begins",
        )
        .record_fee("Safety Equipment", fee)
        .add_cost(fee)
        .record_rule("BR-002: High-Risk Safety Protocol")
    )
