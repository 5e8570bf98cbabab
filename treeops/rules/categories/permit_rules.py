"""Permitting rules."""

from __future__ import annotations

from treeops.rules.models import RuleContext, RuleEffect


def permit_alert_rule(context: RuleContext, effect: RuleEffect) -> RuleEffect:
    """Charge permit processing and flag the schedule impact when permits are needed."""
    if not context.has_hazard("permitting"):
        return effect

    fee = context.thresholds.permit_processing_fee
    return (
        effect.record_fee("Permit Processing", fee)
        .add_cost(fee)
        .flag("PERMITS REQUIRED: 7-14 day timeline extension")
        .record_rule(f"BR-005: Permit Processing Fee (+${fee:,.0f})")
    )
