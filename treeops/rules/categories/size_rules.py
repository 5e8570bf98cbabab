"""Rules driven by tree geometry."""

from __future__ import annotations

from treeops.rules.models import RuleContext, RuleEffect


def large_tree_bonus_rule(context: RuleContext, effect: RuleEffect) -> RuleEffect:
    """Scale the running cost for trees with a large trunk diameter."""
    thresholds = context.thresholds
    if context.measurement.dbh < thresholds.large_tree_dbh:
        return effect

    return effect.with_cost(effect.cost * thresholds.large_tree_multiplier).record_rule(
        f"BR-001: Large Tree Bonus (+{thresholds.large_tree_bonus_percent}%)"
    )


def crane_requirement_rule(context: RuleContext, effect: RuleEffect) -> RuleEffect:
    """Add crane setup and a height-based rate increase for tall or hard-to-reach trees."""
    thresholds = context.thresholds
    measurement = context.measurement
    if not thresholds.needs_crane(measurement.height, context.has_hazard("limited_access")):
        return effect

    fee = thresholds.crane_setup_fee
    crane_rate_increase = context.cost_parameters.rate_per_point * thresholds.crane_rate_increase
    increased_score_cost = measurement.height * crane_rate_increase
    rate_percent = round(thresholds.crane_rate_increase * 100)

    return (
        effect.record_fee("Crane Setup", fee)
        .add_cost(fee + increased_score_cost)
        .flag("CRANE REQUIRED: Specialized operator needed")
        .record_rule(f"BR-004: Crane Requirement (+${fee:,.0f} + {rate_percent}% rate increase)")
    )
